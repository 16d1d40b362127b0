"""Typed argument contracts, one per tool.

The dispatcher checks required fields against the tool descriptor first, then
projects the loose argument mapping into one of these models.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

THREAD_TS_RE = re.compile(r"^\d+\.\d{6}$")

THREAD_TS_HINT = (
    "thread_ts must look like '1234567890.123456'; "
    "if the timestamp has no period, insert one so that 6 digits come after it"
)

# Slack caps list page sizes at 200.
MAX_PAGE_LIMIT = 200


def _check_thread_ts(value: str) -> str:
    ts = str(value or "").strip()
    if not THREAD_TS_RE.match(ts):
        raise ValueError(THREAD_TS_HINT)
    return ts


class _ToolArgs(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        # null on an optional field means "use the default".
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class ListChannelsArgs(_ToolArgs):
    limit: int = 100
    cursor: Optional[str] = None


class PostMessageArgs(_ToolArgs):
    channel_id: str
    text: str


class ReplyToThreadArgs(_ToolArgs):
    channel_id: str
    thread_ts: str
    text: str

    check_thread_ts = field_validator("thread_ts")(_check_thread_ts)


class AddReactionArgs(_ToolArgs):
    channel_id: str
    timestamp: str
    reaction: str = Field(description="Emoji name without surrounding colons")

    @field_validator("reaction")
    @classmethod
    def strip_colons(cls, value: str) -> str:
        return value.strip(":")


class GetChannelHistoryArgs(_ToolArgs):
    channel_id: str
    limit: int = 10


class GetThreadRepliesArgs(_ToolArgs):
    channel_id: str
    thread_ts: str

    check_thread_ts = field_validator("thread_ts")(_check_thread_ts)


class GetUsersArgs(_ToolArgs):
    cursor: Optional[str] = None
    limit: int = 100


class GetUserProfileArgs(_ToolArgs):
    user_id: str


class DownloadThreadFilesArgs(_ToolArgs):
    channel_id: str
    thread_ts: str
    output_folder: str

    check_thread_ts = field_validator("thread_ts")(_check_thread_ts)


class UploadFileToThreadArgs(_ToolArgs):
    channel_id: str
    thread_ts: str
    file_path: str
    title: Optional[str] = None
    initial_comment: Optional[str] = None

    check_thread_ts = field_validator("thread_ts")(_check_thread_ts)
