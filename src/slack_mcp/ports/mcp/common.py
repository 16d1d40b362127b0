from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

DEFAULT_API_BASE_URL = "https://slack.com/api"


class MCPError(Exception):
    """MCP tool call error"""

    def __init__(
        self, code: str, message: str, details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}


class ConfigError(Exception):
    """Startup configuration is missing or invalid."""


@dataclass(frozen=True)
class ServerConfig:
    bot_token: str
    team_id: str
    api_base_url: str = DEFAULT_API_BASE_URL
    http_timeout: Optional[float] = None
    log_level: str = "INFO"
    log_format: str = "text"


def _env_str(name: str, env: Optional[Mapping[str, str]] = None) -> str:
    source = os.environ if env is None else env
    value = source.get(name)
    return str(value).strip() if value is not None else ""


def _parse_timeout(raw: str) -> Optional[float]:
    if not raw:
        return None
    try:
        seconds = float(raw)
    except ValueError:
        raise ConfigError(f"SLACK_MCP_HTTP_TIMEOUT must be a number of seconds, got {raw!r}")
    if seconds < 0:
        raise ConfigError("SLACK_MCP_HTTP_TIMEOUT must not be negative")
    # 0 keeps the default: wait forever.
    return seconds or None


def load_config(env: Optional[Mapping[str, str]] = None) -> ServerConfig:
    """Build the server configuration from environment variables.

    SLACK_BOT_TOKEN and SLACK_TEAM_ID are required; everything else has a default.
    """
    token = _env_str("SLACK_BOT_TOKEN", env)
    team_id = _env_str("SLACK_TEAM_ID", env)
    if not token or not team_id:
        raise ConfigError("Please set SLACK_BOT_TOKEN and SLACK_TEAM_ID environment variables")

    log_format = _env_str("SLACK_MCP_LOG_FORMAT", env).lower() or "text"
    if log_format not in ("text", "json"):
        raise ConfigError("SLACK_MCP_LOG_FORMAT must be 'text' or 'json'")

    return ServerConfig(
        bot_token=token,
        team_id=team_id,
        api_base_url=(_env_str("SLACK_API_BASE_URL", env) or DEFAULT_API_BASE_URL).rstrip("/"),
        http_timeout=_parse_timeout(_env_str("SLACK_MCP_HTTP_TIMEOUT", env)),
        log_level=_env_str("SLACK_MCP_LOG_LEVEL", env).upper() or "INFO",
        log_format=log_format,
    )


def missing_fields(arguments: Mapping[str, Any], required: Any) -> list[str]:
    """Return required field names that are absent or empty, in declaration order."""
    out: list[str] = []
    for name in required or ():
        value = arguments.get(name)
        if value is None:
            out.append(name)
        elif isinstance(value, str) and not value.strip():
            out.append(name)
        elif isinstance(value, (list, dict)) and not value:
            out.append(name)
    return out


def format_missing(fields: list[str]) -> str:
    if len(fields) == 1:
        return f"Missing required argument: {fields[0]}"
    if len(fields) == 2:
        joined = f"{fields[0]} and {fields[1]}"
    else:
        joined = ", ".join(fields[:-1]) + f", and {fields[-1]}"
    return f"Missing required arguments: {joined}"
