"""
Slack MCP Server - Slack Web API tools over stdio

Tools exposed to agents:

Channels & messages:
- list_channels: List public channels (paginated)
- post_message: Post a new message to a channel
- reply_to_thread: Reply inside a thread
- add_reaction: Add an emoji reaction to a message
- get_channel_history: Recent messages of a channel
- get_thread_replies: All messages of a thread

Users:
- get_users: List workspace users (paginated)
- get_user_profile: Detailed profile of one user

Files:
- download_thread_files: Save every attachment of a thread into a local folder
- upload_file_to_thread: Upload a local file as a thread reply

Every tools/call answer is a single text item holding JSON: the Slack response
(passed through unchanged) on success, ``{"error": "..."}`` on failure.
"""

from __future__ import annotations

import asyncio
import logging
import sys
import time
from typing import Any, Dict, Mapping, Optional, Tuple, Type

import mcp.server.stdio
from mcp import types
from mcp.server import Server
from pydantic import BaseModel, ValidationError

from ... import __version__
from ...contracts.v1 import (
    AddReactionArgs,
    DownloadThreadFilesArgs,
    GetChannelHistoryArgs,
    GetThreadRepliesArgs,
    GetUserProfileArgs,
    GetUsersArgs,
    InvocationResult,
    ListChannelsArgs,
    PostMessageArgs,
    ReplyToThreadArgs,
    TransferOutcome,
    UploadFileToThreadArgs,
)
from ...util.obslog import setup_root_logging
from ..slack import transfer
from ..slack.client import SlackClient
from .common import ConfigError, MCPError, ServerConfig, format_missing, load_config, missing_fields
from .registry import Executor, ToolRegistry
from .toolspecs import MCP_TOOLS

logger = logging.getLogger("slack_mcp.mcp.server")

SERVER_NAME = "Slack MCP Server"


def _raise_for_outcome(outcome: TransferOutcome[Any], *, label: str = "") -> Any:
    if outcome.ok:
        return outcome.result
    err = outcome.error
    phase = err.phase if err is not None else "unknown"
    message = err.message if err is not None else "transfer failed"
    if label:
        message = f"{label} {phase} failed: {message}"
    raise MCPError(code=f"{phase}_failed", message=message)


# =============================================================================
# Channel / Message Tools
# =============================================================================


async def list_channels(client: SlackClient, args: ListChannelsArgs) -> Any:
    return await client.get_channels(args.limit, args.cursor)


async def post_message(client: SlackClient, args: PostMessageArgs) -> Any:
    return await client.post_message(args.channel_id, args.text)


async def reply_to_thread(client: SlackClient, args: ReplyToThreadArgs) -> Any:
    return await client.post_reply(args.channel_id, args.thread_ts, args.text)


async def add_reaction(client: SlackClient, args: AddReactionArgs) -> Any:
    return await client.add_reaction(args.channel_id, args.timestamp, args.reaction)


async def get_channel_history(client: SlackClient, args: GetChannelHistoryArgs) -> Any:
    return await client.get_channel_history(args.channel_id, args.limit)


async def get_thread_replies(client: SlackClient, args: GetThreadRepliesArgs) -> Any:
    return await client.get_thread_replies(args.channel_id, args.thread_ts)


# =============================================================================
# User Tools
# =============================================================================


async def get_users(client: SlackClient, args: GetUsersArgs) -> Any:
    return await client.get_users(args.limit, args.cursor)


async def get_user_profile(client: SlackClient, args: GetUserProfileArgs) -> Any:
    return await client.get_user_profile(args.user_id)


# =============================================================================
# File Tools
# =============================================================================


async def download_thread_files(client: SlackClient, args: DownloadThreadFilesArgs) -> Any:
    outcome = await transfer.download_thread_files(
        client,
        channel_id=args.channel_id,
        thread_ts=args.thread_ts,
        output_folder=args.output_folder,
    )
    return _raise_for_outcome(outcome)


async def upload_file_to_thread(client: SlackClient, args: UploadFileToThreadArgs) -> Any:
    outcome = await transfer.upload_file_to_thread(
        client,
        channel_id=args.channel_id,
        thread_ts=args.thread_ts,
        file_path=args.file_path,
        title=args.title,
        initial_comment=args.initial_comment,
    )
    return _raise_for_outcome(outcome, label="upload")


TOOL_EXECUTORS: Dict[str, Tuple[Type[BaseModel], Executor]] = {
    "list_channels": (ListChannelsArgs, list_channels),
    "post_message": (PostMessageArgs, post_message),
    "reply_to_thread": (ReplyToThreadArgs, reply_to_thread),
    "add_reaction": (AddReactionArgs, add_reaction),
    "get_channel_history": (GetChannelHistoryArgs, get_channel_history),
    "get_thread_replies": (GetThreadRepliesArgs, get_thread_replies),
    "get_users": (GetUsersArgs, get_users),
    "get_user_profile": (GetUserProfileArgs, get_user_profile),
    "download_thread_files": (DownloadThreadFilesArgs, download_thread_files),
    "upload_file_to_thread": (UploadFileToThreadArgs, upload_file_to_thread),
}


def build_registry() -> ToolRegistry:
    return ToolRegistry(MCP_TOOLS, TOOL_EXECUTORS)


# =============================================================================
# Dispatch
# =============================================================================


def _format_validation_error(name: str, exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc") or ()) or "arguments"
        msg = str(err.get("msg") or "invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        parts.append(f"{loc}: {msg}")
    return f"Invalid arguments for {name}: " + "; ".join(parts)


async def _dispatch(
    registry: ToolRegistry, client: Any, name: str, arguments: Optional[Mapping[str, Any]]
) -> Any:
    if arguments is None:
        raise MCPError(code="missing_arguments", message="No arguments provided")

    entry = registry.resolve(name)
    if entry is None:
        raise MCPError(code="unknown_tool", message=f"Unknown tool: {name}")

    if not isinstance(arguments, Mapping):
        raise MCPError(code="invalid_arguments", message="Arguments must be an object")

    missing = missing_fields(arguments, entry.descriptor.required_fields)
    if missing:
        raise MCPError(
            code="missing_arguments",
            message=format_missing(missing),
            details={"missing": missing},
        )

    try:
        args = entry.args_model.model_validate(dict(arguments))
    except ValidationError as e:
        raise MCPError(code="invalid_arguments", message=_format_validation_error(name, e))

    return await entry.executor(client, args)


async def invoke(
    registry: ToolRegistry, client: Any, name: str, arguments: Optional[Mapping[str, Any]]
) -> InvocationResult:
    """Run one tool call and fold every outcome into an InvocationResult. Never raises."""
    t0 = time.monotonic()
    try:
        payload = await _dispatch(registry, client, name, arguments)
        result = InvocationResult.success(payload)
        result.to_text()
    except MCPError as e:
        logger.warning("tool %s failed code=%s error=%s", name, e.code, e.message)
        result = InvocationResult.failure(e.message)
    except Exception as e:
        logger.exception("tool %s raised", name)
        result = InvocationResult.failure(str(e) or type(e).__name__)
    logger.info(
        "tool %s ok=%s duration_ms=%.1f", name, result.ok, (time.monotonic() - t0) * 1000
    )
    return result


# =============================================================================
# MCP stdio server
# =============================================================================


def create_server(registry: ToolRegistry, client: SlackClient) -> Server:
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def _list_tools() -> list[types.Tool]:
        logger.debug("tools/list")
        return [types.Tool(**d.to_spec()) for d in registry.list_tools()]

    # Registered on the raw request so absent arguments reach invoke as None;
    # the call_tool decorator would substitute {} and validate against the schema.
    async def _call_tool(req: types.CallToolRequest) -> types.ServerResult:
        result = await invoke(registry, client, req.params.name, req.params.arguments)
        return types.ServerResult(types.CallToolResult.model_validate(result.to_envelope()))

    server.request_handlers[types.CallToolRequest] = _call_tool
    return server


async def serve(config: ServerConfig) -> None:
    registry = build_registry()
    async with SlackClient.from_config(config) as client:
        server = create_server(registry, client)
        async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
            logger.info("%s %s running on stdio (%d tools)", SERVER_NAME, __version__, len(registry.names()))
            await server.run(read_stream, write_stream, server.create_initialization_options())
    logger.info("%s stopped", SERVER_NAME)


def main() -> None:
    try:
        config = load_config()
    except ConfigError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    setup_root_logging(config.log_level, fmt=config.log_format)
    logger.info("Starting %s...", SERVER_NAME)
    try:
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        logger.info("%s interrupted", SERVER_NAME)
    except Exception:
        logger.exception("Fatal error in main()")
        sys.exit(1)


if __name__ == "__main__":
    main()
