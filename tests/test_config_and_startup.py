import io
import json
import logging
import os
import unittest
from contextlib import redirect_stderr
from unittest.mock import patch

from slack_mcp.ports.mcp import server as mcp_server
from slack_mcp.ports.mcp.common import ConfigError, format_missing, load_config, missing_fields
from slack_mcp.util.obslog import setup_root_logging


class TestLoadConfig(unittest.TestCase):
    def test_required_values(self) -> None:
        cfg = load_config({"SLACK_BOT_TOKEN": " xoxb-1 ", "SLACK_TEAM_ID": "T1"})
        self.assertEqual(cfg.bot_token, "xoxb-1")
        self.assertEqual(cfg.team_id, "T1")
        self.assertEqual(cfg.api_base_url, "https://slack.com/api")
        self.assertIsNone(cfg.http_timeout)
        self.assertEqual(cfg.log_level, "INFO")
        self.assertEqual(cfg.log_format, "text")

    def test_missing_token_or_team(self) -> None:
        for env in ({}, {"SLACK_BOT_TOKEN": "xoxb-1"}, {"SLACK_TEAM_ID": "T1"}, {"SLACK_BOT_TOKEN": " ", "SLACK_TEAM_ID": "T1"}):
            with self.assertRaises(ConfigError, msg=str(env)):
                load_config(env)

    def test_optional_values(self) -> None:
        cfg = load_config(
            {
                "SLACK_BOT_TOKEN": "xoxb-1",
                "SLACK_TEAM_ID": "T1",
                "SLACK_API_BASE_URL": "http://localhost:8080/api/",
                "SLACK_MCP_HTTP_TIMEOUT": "12.5",
                "SLACK_MCP_LOG_LEVEL": "debug",
                "SLACK_MCP_LOG_FORMAT": "JSON",
            }
        )
        self.assertEqual(cfg.api_base_url, "http://localhost:8080/api")
        self.assertEqual(cfg.http_timeout, 12.5)
        self.assertEqual(cfg.log_level, "DEBUG")
        self.assertEqual(cfg.log_format, "json")

    def test_zero_timeout_means_none(self) -> None:
        cfg = load_config({"SLACK_BOT_TOKEN": "x", "SLACK_TEAM_ID": "T", "SLACK_MCP_HTTP_TIMEOUT": "0"})
        self.assertIsNone(cfg.http_timeout)

    def test_invalid_timeout_and_format(self) -> None:
        base = {"SLACK_BOT_TOKEN": "x", "SLACK_TEAM_ID": "T"}
        with self.assertRaises(ConfigError):
            load_config({**base, "SLACK_MCP_HTTP_TIMEOUT": "soon"})
        with self.assertRaises(ConfigError):
            load_config({**base, "SLACK_MCP_HTTP_TIMEOUT": "-1"})
        with self.assertRaises(ConfigError):
            load_config({**base, "SLACK_MCP_LOG_FORMAT": "xml"})


class TestMissingFieldHelpers(unittest.TestCase):
    def test_missing_fields_keeps_declaration_order(self) -> None:
        args = {"text": "", "channel_id": None, "thread_ts": "1.000001", "extra": []}
        self.assertEqual(missing_fields(args, ["channel_id", "thread_ts", "text"]), ["channel_id", "text"])
        self.assertEqual(missing_fields({"ids": []}, ["ids"]), ["ids"])
        self.assertEqual(missing_fields({"limit": 0}, ["limit"]), [])

    def test_format_missing(self) -> None:
        self.assertEqual(format_missing(["user_id"]), "Missing required argument: user_id")
        self.assertEqual(format_missing(["channel_id", "text"]), "Missing required arguments: channel_id and text")
        self.assertEqual(
            format_missing(["channel_id", "thread_ts", "output_folder"]),
            "Missing required arguments: channel_id, thread_ts, and output_folder",
        )


class TestStartup(unittest.TestCase):
    def test_main_exits_non_zero_without_credentials(self) -> None:
        err = io.StringIO()
        with patch.dict(os.environ, {"SLACK_BOT_TOKEN": "", "SLACK_TEAM_ID": ""}, clear=False), \
             patch.object(mcp_server, "serve") as serve, \
             redirect_stderr(err):
            with self.assertRaises(SystemExit) as ctx:
                mcp_server.main()
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("SLACK_BOT_TOKEN and SLACK_TEAM_ID", err.getvalue())
        serve.assert_not_called()


class TestObslog(unittest.TestCase):
    def tearDown(self) -> None:
        root = logging.getLogger()
        for h in list(root.handlers):
            if getattr(h, "_slack_mcp", False):
                root.removeHandler(h)

    def test_json_lines_go_to_the_given_stream(self) -> None:
        buf = io.StringIO()
        setup_root_logging("INFO", fmt="json", stream=buf)
        logging.getLogger("slack_mcp.test").info("hello %s", "world")
        line = buf.getvalue().strip().splitlines()[-1]
        doc = json.loads(line)
        self.assertEqual(doc["msg"], "hello world")
        self.assertEqual(doc["level"], "INFO")
        self.assertEqual(doc["logger"], "slack_mcp.test")

    def test_setup_is_idempotent(self) -> None:
        setup_root_logging("DEBUG", stream=io.StringIO())
        setup_root_logging("DEBUG", stream=io.StringIO())
        ours = [h for h in logging.getLogger().handlers if getattr(h, "_slack_mcp", False)]
        self.assertEqual(len(ours), 1)


if __name__ == "__main__":
    unittest.main()
