import re
import unittest

from slack_mcp.ports.mcp.toolspecs import MCP_TOOLS


class TestMcpToolspecSchemaGuard(unittest.TestCase):
    def test_toolspec_entries_have_required_fields(self) -> None:
        self.assertIsInstance(MCP_TOOLS, list)
        self.assertGreater(len(MCP_TOOLS), 0)
        for idx, spec in enumerate(MCP_TOOLS):
            self.assertIsInstance(spec, dict, msg=f"MCP_TOOLS[{idx}] must be dict")
            self.assertIn("name", spec, msg=f"MCP_TOOLS[{idx}] missing name")
            self.assertIn("description", spec, msg=f"MCP_TOOLS[{idx}] missing description")
            self.assertIn("inputSchema", spec, msg=f"MCP_TOOLS[{idx}] missing inputSchema")

            name = str(spec.get("name") or "").strip()
            desc = str(spec.get("description") or "").strip()
            self.assertTrue(name, msg=f"MCP_TOOLS[{idx}] empty name")
            self.assertTrue(desc, msg=f"MCP_TOOLS[{idx}] empty description")
            self.assertRegex(name, r"^[a-z][a-z0-9_]*$", msg=f"MCP_TOOLS[{idx}] invalid name: {name}")

    def test_input_schema_shape_is_consistent(self) -> None:
        for idx, spec in enumerate(MCP_TOOLS):
            schema = spec.get("inputSchema")
            self.assertIsInstance(schema, dict, msg=f"MCP_TOOLS[{idx}] inputSchema must be dict")
            self.assertEqual(schema.get("type"), "object", msg=f"MCP_TOOLS[{idx}] inputSchema.type must be object")
            props = schema.get("properties")
            required = schema.get("required")
            self.assertIsInstance(props, dict, msg=f"MCP_TOOLS[{idx}] inputSchema.properties must be dict")
            self.assertIsInstance(required, list, msg=f"MCP_TOOLS[{idx}] inputSchema.required must be list")
            for field in required:
                self.assertIn(field, props, msg=f"MCP_TOOLS[{idx}] requires undeclared field {field}")

    def test_catalog_order_and_required_fields(self) -> None:
        got = [(t["name"], t["inputSchema"]["required"]) for t in MCP_TOOLS]
        self.assertEqual(
            got,
            [
                ("list_channels", []),
                ("post_message", ["channel_id", "text"]),
                ("reply_to_thread", ["channel_id", "thread_ts", "text"]),
                ("add_reaction", ["channel_id", "timestamp", "reaction"]),
                ("get_channel_history", ["channel_id"]),
                ("get_thread_replies", ["channel_id", "thread_ts"]),
                ("get_users", []),
                ("get_user_profile", ["user_id"]),
                ("download_thread_files", ["channel_id", "thread_ts", "output_folder"]),
                ("upload_file_to_thread", ["channel_id", "thread_ts", "file_path"]),
            ],
        )

    def test_thread_ts_descriptions_explain_the_format(self) -> None:
        for spec in MCP_TOOLS:
            prop = spec["inputSchema"]["properties"].get("thread_ts")
            if prop is None:
                continue
            self.assertTrue(re.search(r"\d{10}\.\d{6}", prop["description"]), msg=spec["name"])


if __name__ == "__main__":
    unittest.main()
