"""Thread file transfer: download a thread's attachments, upload a file into a thread.

Both procedures return a TransferOutcome instead of raising for remote or IO
problems; the MCP dispatcher is the one place that turns a failed outcome into
a tool error.

Download:
    output folder check -> conversations.replies -> all files streamed concurrently

Upload (three phases, none retried):
    negotiate (files.getUploadURLExternal) -> transfer (POST bytes to upload_url)
    -> finalize (files.completeUploadExternal)
"""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

from ...contracts.v1.transfer import ThreadFileRef, TransferOutcome, UploadSession
from .client import SlackClient

logger = logging.getLogger("slack_mcp.slack.transfer")

_UNSAFE_NAME_RE = re.compile(r'[/\\?%*:|"<>]')


def sanitize_filename(name: str) -> str:
    """Replace filesystem-unsafe characters with ``_``."""
    return _UNSAFE_NAME_RE.sub("_", str(name or ""))


def extract_file_refs(thread: Dict[str, Any]) -> List[ThreadFileRef]:
    """Attachments of every message in thread order (messages without files are skipped)."""
    refs: List[ThreadFileRef] = []
    messages = thread.get("messages")
    if not isinstance(messages, list):
        return refs
    for msg in messages:
        files = msg.get("files") if isinstance(msg, dict) else None
        if not isinstance(files, list) or not files:
            continue
        for f in files:
            if not isinstance(f, dict):
                continue
            url = str(f.get("url_private") or "").strip()
            if not url:
                continue
            name = str(f.get("name") or f.get("id") or "file").strip()
            refs.append(ThreadFileRef(remote_url=url, suggested_name=name))
    return refs


# =============================================================================
# Download
# =============================================================================


async def _download_one(client: SlackClient, ref: ThreadFileRef, dest: Path) -> TransferOutcome[str]:
    opened = False
    try:
        async with client.stream_file(ref.remote_url) as resp:
            # Nothing is written before the status is known.
            if not resp.is_success:
                return TransferOutcome.fail(
                    "download",
                    f"Failed to download file {ref.suggested_name}: {resp.status_code}",
                )
            with dest.open("wb") as fh:
                opened = True
                async for chunk in resp.aiter_bytes():
                    await asyncio.to_thread(fh.write, chunk)
    except (httpx.HTTPError, OSError) as e:
        if opened:
            try:
                dest.unlink(missing_ok=True)
            except OSError:
                logger.debug("could not remove partial download %s", dest)
        return TransferOutcome.fail(
            "download", f"Failed to download file {ref.suggested_name}: {e}"
        )
    logger.debug("downloaded %s -> %s", ref.suggested_name, dest)
    return TransferOutcome.success(str(dest))


async def download_thread_files(
    client: SlackClient, *, channel_id: str, thread_ts: str, output_folder: str
) -> TransferOutcome[List[str]]:
    folder = Path(output_folder)
    if not folder.is_dir():
        return TransferOutcome.fail("output_folder", f"Output folder does not exist: {output_folder}")

    try:
        thread = await client.get_thread_replies(channel_id, thread_ts)
    except (httpx.HTTPError, ValueError) as e:
        return TransferOutcome.fail("thread", f"Failed to get thread data: {e}")
    if not isinstance(thread, dict) or not thread.get("ok"):
        err = thread.get("error") if isinstance(thread, dict) else None
        return TransferOutcome.fail("thread", f"Failed to get thread data: {err or 'unknown_error'}")

    refs = extract_file_refs(thread)
    logger.info("thread %s/%s has %d file(s)", channel_id, thread_ts, len(refs))
    if not refs:
        return TransferOutcome.success([])

    # Every download runs to completion; the first failure in thread order wins.
    outcomes = await asyncio.gather(
        *(_download_one(client, ref, folder / sanitize_filename(ref.suggested_name)) for ref in refs)
    )
    for outcome in outcomes:
        if not outcome.ok:
            return TransferOutcome(ok=False, error=outcome.error)
    return TransferOutcome.success([o.result for o in outcomes])


# =============================================================================
# Upload
# =============================================================================


def _slack_error_message(doc: Dict[str, Any]) -> str:
    msg = f"Slack API error: {doc.get('error') or 'Unknown error'}"
    if doc.get("detail"):
        msg += f" - {doc.get('detail')}"
    return msg


async def _negotiate(
    client: SlackClient, filename: str, length: int, title: Optional[str]
) -> TransferOutcome[UploadSession]:
    try:
        resp = await client.get_upload_url_external(filename, length, title)
    except httpx.HTTPError as e:
        return TransferOutcome.fail("negotiate", f"Failed to get upload URL: {e}")
    logger.debug("getUploadURLExternal status=%s", resp.status_code)
    try:
        doc = resp.json()
    except ValueError:
        return TransferOutcome.fail("negotiate", f"Failed to parse response as JSON: {resp.text}")
    if not isinstance(doc, dict) or not doc.get("ok"):
        return TransferOutcome.fail(
            "negotiate", _slack_error_message(doc if isinstance(doc, dict) else {})
        )
    upload_url = str(doc.get("upload_url") or "")
    file_id = str(doc.get("file_id") or "")
    if not upload_url or not file_id:
        return TransferOutcome.fail("negotiate", "Slack API error: response missing upload_url or file_id")
    return TransferOutcome.success(UploadSession(upload_url=upload_url, file_id=file_id))


async def _transfer(client: SlackClient, session: UploadSession, data: bytes) -> TransferOutcome[None]:
    try:
        resp = await client.upload_to_url(session.upload_url, data)
    except httpx.HTTPError as e:
        return TransferOutcome.fail("transfer", f"Failed to upload file: {e}")
    if not resp.is_success:
        return TransferOutcome.fail("transfer", f"Failed to upload file: {resp.reason_phrase}")
    return TransferOutcome.success(None)


async def upload_file_to_thread(
    client: SlackClient,
    *,
    channel_id: str,
    thread_ts: str,
    file_path: str,
    title: Optional[str] = None,
    initial_comment: Optional[str] = None,
) -> TransferOutcome[Any]:
    src = Path(file_path)
    if not src.is_file():
        return TransferOutcome.fail("read", f"File does not exist: {file_path}")
    try:
        data = await asyncio.to_thread(src.read_bytes)
    except OSError as e:
        return TransferOutcome.fail("read", f"Failed to read file {file_path}: {e}")
    filename = src.name

    negotiated = await _negotiate(client, filename, len(data), title)
    if not negotiated.ok:
        return TransferOutcome(ok=False, error=negotiated.error)
    session = negotiated.result
    logger.info("upload session for %s (%d bytes) file_id=%s", filename, len(data), session.file_id)

    # The session is spent from here on, whatever the transfer result.
    sent = await _transfer(client, session, data)
    if not sent.ok:
        return TransferOutcome(ok=False, error=sent.error)

    try:
        completed = await client.complete_upload_external(
            file_id=session.file_id,
            title=title or filename,
            channel_id=channel_id,
            thread_ts=thread_ts,
            initial_comment=initial_comment,
        )
    except (httpx.HTTPError, ValueError) as e:
        return TransferOutcome.fail("finalize", f"Failed to complete upload: {e}")
    # Returned as-is; the finalize response's own ok flag is left to the caller.
    return TransferOutcome.success(completed)
