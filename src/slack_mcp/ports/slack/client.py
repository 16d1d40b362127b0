"""Slack Web API gateway.

One method per remote operation. Each issues a single HTTP request and returns
the parsed JSON body unchanged, including Slack's own ``ok``/``error`` fields;
callers decide what ``ok: false`` means for them.
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from ...contracts.v1.tool_args import MAX_PAGE_LIMIT
from ..mcp.common import DEFAULT_API_BASE_URL, ServerConfig

logger = logging.getLogger("slack_mcp.slack.client")


class SlackClient:
    def __init__(
        self,
        bot_token: str,
        team_id: str,
        *,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.team_id = team_id
        self.base_url = base_url.rstrip("/")
        self._auth = {"Authorization": f"Bearer {bot_token}"}
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)

    @classmethod
    def from_config(
        cls, config: ServerConfig, *, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "SlackClient":
        return cls(
            config.bot_token,
            config.team_id,
            base_url=config.api_base_url,
            timeout=config.http_timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "SlackClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Request helpers
    # ------------------------------------------------------------------

    def _url(self, method: str) -> str:
        return f"{self.base_url}/{method}"

    async def _get(self, method: str, params: Dict[str, str]) -> Any:
        logger.debug("GET %s params=%s", method, sorted(params))
        resp = await self._http.get(self._url(method), params=params, headers=self._auth)
        return resp.json()

    async def _post_json(self, method: str, body: Dict[str, Any]) -> Any:
        logger.debug("POST %s fields=%s", method, sorted(body))
        resp = await self._http.post(self._url(method), json=body, headers=self._auth)
        return resp.json()

    # ------------------------------------------------------------------
    # Conversations / chat
    # ------------------------------------------------------------------

    async def get_channels(self, limit: int = 100, cursor: Optional[str] = None) -> Any:
        params = {
            "types": "public_channel",
            "exclude_archived": "true",
            "limit": str(min(limit, MAX_PAGE_LIMIT)),
            "team_id": self.team_id,
        }
        if cursor:
            params["cursor"] = cursor
        return await self._get("conversations.list", params)

    async def post_message(self, channel_id: str, text: str) -> Any:
        return await self._post_json("chat.postMessage", {"channel": channel_id, "text": text})

    async def post_reply(self, channel_id: str, thread_ts: str, text: str) -> Any:
        return await self._post_json(
            "chat.postMessage",
            {"channel": channel_id, "thread_ts": thread_ts, "text": text},
        )

    async def add_reaction(self, channel_id: str, timestamp: str, reaction: str) -> Any:
        return await self._post_json(
            "reactions.add",
            {"channel": channel_id, "timestamp": timestamp, "name": reaction},
        )

    async def get_channel_history(self, channel_id: str, limit: int = 10) -> Any:
        return await self._get("conversations.history", {"channel": channel_id, "limit": str(limit)})

    async def get_thread_replies(self, channel_id: str, thread_ts: str) -> Any:
        return await self._get("conversations.replies", {"channel": channel_id, "ts": thread_ts})

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def get_users(self, limit: int = 100, cursor: Optional[str] = None) -> Any:
        params = {"limit": str(min(limit, MAX_PAGE_LIMIT)), "team_id": self.team_id}
        if cursor:
            params["cursor"] = cursor
        return await self._get("users.list", params)

    async def get_user_profile(self, user_id: str) -> Any:
        return await self._get("users.profile.get", {"user": user_id, "include_labels": "true"})

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    async def get_upload_url_external(
        self, filename: str, length: int, title: Optional[str] = None
    ) -> httpx.Response:
        """files.getUploadURLExternal; the raw response is returned so the caller can report unparsable bodies."""
        params = {"filename": filename, "length": str(length)}
        if title:
            params["title"] = title
        return await self._http.get(
            self._url("files.getUploadURLExternal"), params=params, headers=self._auth
        )

    async def upload_to_url(self, upload_url: str, data: bytes) -> httpx.Response:
        # The upload URL is pre-signed; no bearer header.
        return await self._http.post(
            upload_url,
            content=data,
            headers={"Content-Type": "application/octet-stream"},
        )

    async def complete_upload_external(
        self,
        *,
        file_id: str,
        title: str,
        channel_id: str,
        thread_ts: Optional[str] = None,
        initial_comment: Optional[str] = None,
    ) -> Any:
        form = {
            "files": json.dumps([{"id": file_id, "title": title}]),
            "channel_id": channel_id,
        }
        if thread_ts:
            form["thread_ts"] = thread_ts
        if initial_comment:
            form["initial_comment"] = initial_comment
        resp = await self._http.post(
            self._url("files.completeUploadExternal"), data=form, headers=self._auth
        )
        return resp.json()

    @asynccontextmanager
    async def stream_file(self, url: str) -> AsyncIterator[httpx.Response]:
        """Stream a private file URL (url_private) with the bot credential."""
        async with self._http.stream(
            "GET", url, headers=self._auth, follow_redirects=True
        ) as resp:
            yield resp
