"""Thread file transfer contracts (download and upload)."""

from __future__ import annotations

from typing import Any, Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")

TransferPhase = Literal[
    # download
    "output_folder",
    "thread",
    "download",
    # upload
    "read",
    "negotiate",
    "transfer",
    "finalize",
]


class ThreadFileRef(BaseModel):
    """A file attached to one message of a thread."""

    remote_url: str
    suggested_name: str

    model_config = ConfigDict(frozen=True)


class UploadSession(BaseModel):
    """Upload target issued by files.getUploadURLExternal; good for exactly one upload."""

    upload_url: str
    file_id: str

    model_config = ConfigDict(frozen=True)


class TransferError(BaseModel):
    phase: TransferPhase
    message: str

    model_config = ConfigDict(frozen=True)


class TransferOutcome(BaseModel, Generic[T]):
    ok: bool
    result: Optional[T] = None
    error: Optional[TransferError] = None

    @classmethod
    def success(cls, result: Any) -> "TransferOutcome[Any]":
        return cls(ok=True, result=result)

    @classmethod
    def fail(cls, phase: TransferPhase, message: str) -> "TransferOutcome[Any]":
        return cls(ok=False, error=TransferError(phase=phase, message=message))
