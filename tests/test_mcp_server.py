import asyncio
import json
from pathlib import Path
from unittest.mock import MagicMock

from klb_describe.client import ApiResponse, TransportError
from klb_describe.config import Settings
from klb_describe.mcp_server import DOC_RESOURCE, build_server, run_describe, run_documentation, run_get

FIXTURES = Path(__file__).parent / "fixtures"


def _client() -> MagicMock:
    client = MagicMock()
    client.settings = Settings()
    client.doc_url.side_effect = lambda name: f"https://docs.example.com/{name}"
    client.options.return_value = ApiResponse(
        status_code=200,
        body=json.loads((FIXTURES / "procedure_options.json").read_text(encoding="utf-8")),
    )
    return client


class TestServerSurface:
    def test_tools(self):
        tools = asyncio.run(build_server(_client()).list_tools())
        assert {t.name for t in tools} == {"describe", "describe_raw", "produce_ts", "get", "documentation"}

    def test_api_path_required_and_non_empty(self):
        tools = {t.name: t for t in asyncio.run(build_server(_client()).list_tools())}
        for name in ("describe", "describe_raw", "produce_ts", "get"):
            schema = tools[name].inputSchema
            assert schema["required"] == ["apiPath"]
            assert schema["properties"]["apiPath"]["minLength"] == 1

    def test_optional_arguments(self):
        tools = {t.name: t for t in asyncio.run(build_server(_client()).list_tools())}
        assert tools["get"].inputSchema["properties"]["raw"]["default"] is False
        doc_schema = tools["documentation"].inputSchema
        assert doc_schema["properties"]["fileName"]["default"] == "README.md"
        assert "fileName" not in doc_schema.get("required", [])

    def test_doc_resource_template(self):
        templates = asyncio.run(build_server(_client()).list_resource_templates())
        assert [t.uriTemplate for t in templates] == [DOC_RESOURCE]


class TestToolOutput:
    def test_describe_is_plain_markdown(self):
        text = run_describe(_client(), "Order")
        assert text.startswith("## Describing API endpoint: `Order`\n**Host:** ws.atonline.com\n")
        assert "### Procedure Details" in text
        assert "\x1b[" not in text

    def test_describe_raw(self):
        text = run_describe(_client(), "Order", raw=True)
        assert "### Raw Response\n```json\n" in text

    def test_produce_ts(self):
        text = run_describe(_client(), "Order", typescript=True)
        assert "```typescript\n" in text
        assert "export interface IOrderRefundParams {" in text

    def test_get(self):
        client = _client()
        client.get.return_value = ApiResponse(status_code=200, body={"data": {"a": 1}})
        text = run_get(client, "Misc")
        assert text.endswith("### Response\n```\n{\n  a: 1\n}\n```\n")

    def test_documentation(self):
        client = _client()
        client.fetch_doc.return_value = ApiResponse(status_code=200, text="# klbfw\n")
        text = run_documentation(client, "README.md")
        assert text.endswith("## Documentation\n\n# klbfw\n\n")

    def test_errors_are_returned_as_text(self):
        client = _client()
        client.options.side_effect = TransportError("connection refused")
        assert run_describe(client, "Order").endswith("**Error:** connection refused\n")
