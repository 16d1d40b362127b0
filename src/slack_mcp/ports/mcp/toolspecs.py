"""MCP tool schemas for the Slack server."""

from __future__ import annotations

_THREAD_TS_DESCRIPTION = (
    "The timestamp of the parent message in the format '1234567890.123456'. "
    "Timestamps in the format without the period can be converted by adding the period "
    "such that 6 numbers come after it."
)

MCP_TOOLS = [
    {
        "name": "list_channels",
        "description": "List public channels in the workspace with pagination",
        "inputSchema": {
            "type": "object",
            "properties": {
                "limit": {
                    "type": "number",
                    "description": "Maximum number of channels to return (default 100, max 200)",
                    "default": 100,
                },
                "cursor": {
                    "type": "string",
                    "description": "Pagination cursor for next page of results",
                },
            },
            "required": [],
        },
    },
    {
        "name": "post_message",
        "description": "Post a new message to a Slack channel",
        "inputSchema": {
            "type": "object",
            "properties": {
                "channel_id": {"type": "string", "description": "The ID of the channel to post to"},
                "text": {"type": "string", "description": "The message text to post"},
            },
            "required": ["channel_id", "text"],
        },
    },
    {
        "name": "reply_to_thread",
        "description": "Reply to a specific message thread in Slack",
        "inputSchema": {
            "type": "object",
            "properties": {
                "channel_id": {
                    "type": "string",
                    "description": "The ID of the channel containing the thread",
                },
                "thread_ts": {"type": "string", "description": _THREAD_TS_DESCRIPTION},
                "text": {"type": "string", "description": "The reply text"},
            },
            "required": ["channel_id", "thread_ts", "text"],
        },
    },
    {
        "name": "add_reaction",
        "description": "Add a reaction emoji to a message",
        "inputSchema": {
            "type": "object",
            "properties": {
                "channel_id": {
                    "type": "string",
                    "description": "The ID of the channel containing the message",
                },
                "timestamp": {
                    "type": "string",
                    "description": "The timestamp of the message to react to",
                },
                "reaction": {
                    "type": "string",
                    "description": "The name of the emoji reaction (without ::)",
                },
            },
            "required": ["channel_id", "timestamp", "reaction"],
        },
    },
    {
        "name": "get_channel_history",
        "description": "Get recent messages from a channel",
        "inputSchema": {
            "type": "object",
            "properties": {
                "channel_id": {"type": "string", "description": "The ID of the channel"},
                "limit": {
                    "type": "number",
                    "description": "Number of messages to retrieve (default 10)",
                    "default": 10,
                },
            },
            "required": ["channel_id"],
        },
    },
    {
        "name": "get_thread_replies",
        "description": "Get all replies in a message thread",
        "inputSchema": {
            "type": "object",
            "properties": {
                "channel_id": {
                    "type": "string",
                    "description": "The ID of the channel containing the thread",
                },
                "thread_ts": {"type": "string", "description": _THREAD_TS_DESCRIPTION},
            },
            "required": ["channel_id", "thread_ts"],
        },
    },
    {
        "name": "get_users",
        "description": "Get a list of all users in the workspace with their basic profile information",
        "inputSchema": {
            "type": "object",
            "properties": {
                "cursor": {
                    "type": "string",
                    "description": "Pagination cursor for next page of results",
                },
                "limit": {
                    "type": "number",
                    "description": "Maximum number of users to return (default 100, max 200)",
                    "default": 100,
                },
            },
            "required": [],
        },
    },
    {
        "name": "get_user_profile",
        "description": "Get detailed profile information for a specific user",
        "inputSchema": {
            "type": "object",
            "properties": {
                "user_id": {"type": "string", "description": "The ID of the user"},
            },
            "required": ["user_id"],
        },
    },
    {
        "name": "download_thread_files",
        "description": "Download files attached to a Slack thread to a specified folder",
        "inputSchema": {
            "type": "object",
            "properties": {
                "channel_id": {
                    "type": "string",
                    "description": "The ID of the channel containing the thread",
                },
                "thread_ts": {"type": "string", "description": _THREAD_TS_DESCRIPTION},
                "output_folder": {
                    "type": "string",
                    "description": "Existing folder path where the files should be downloaded",
                },
            },
            "required": ["channel_id", "thread_ts", "output_folder"],
        },
    },
    {
        "name": "upload_file_to_thread",
        "description": "Upload a file as a reply to a specific Slack thread",
        "inputSchema": {
            "type": "object",
            "properties": {
                "channel_id": {
                    "type": "string",
                    "description": "The ID of the channel containing the thread",
                },
                "thread_ts": {"type": "string", "description": _THREAD_TS_DESCRIPTION},
                "file_path": {"type": "string", "description": "Path to the file to upload"},
                "title": {"type": "string", "description": "Title of the file (optional)"},
                "initial_comment": {
                    "type": "string",
                    "description": "Text message to accompany the file (optional)",
                },
            },
            "required": ["channel_id", "thread_ts", "file_path"],
        },
    },
]
