"""MCP server exposing the describe operations as tools.

Each tool renders in markdown without colors into a LineBuffer and returns
the collected text. Failures are part of that text, never raised.
"""

import logging
from typing import Annotated

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from klb_describe.client import ApiClient
from klb_describe.config import DEFAULT_DOC_FILE
from klb_describe.describe import describe_api, fetch_documentation, get_api_resource
from klb_describe.generator.style import LineBuffer, RenderOptions

logger = logging.getLogger(__name__)

SERVER_NAME = "klbfw-describe"
DOC_RESOURCE = "klb://intdoc/{fileName}"

ApiPath = Annotated[str, Field(min_length=1, description="API path, for example User or Misc/Debug:testUpload")]


def _markdown_sink() -> tuple[LineBuffer, RenderOptions]:
    buffer = LineBuffer()
    return buffer, RenderOptions(output=buffer, use_colors=False, markdown=True)


def run_describe(client: ApiClient, api_path: str, raw: bool = False, typescript: bool = False) -> str:
    buffer, options = _markdown_sink()
    describe_api(client, api_path, options, raw=raw, typescript=typescript)
    return buffer.getvalue()


def run_get(client: ApiClient, api_path: str, raw: bool = False) -> str:
    buffer, options = _markdown_sink()
    get_api_resource(client, api_path, options, raw=raw)
    return buffer.getvalue()


def run_documentation(client: ApiClient, file_name: str = DEFAULT_DOC_FILE) -> str:
    buffer, options = _markdown_sink()
    fetch_documentation(client, options, file_name)
    return buffer.getvalue()


def build_server(client: ApiClient | None = None) -> FastMCP:
    client = client or ApiClient()
    server = FastMCP(SERVER_NAME)

    @server.tool(name="describe", description="Describe a KLB API endpoint: type, fields, methods and sub-endpoints.")
    def describe(apiPath: ApiPath) -> str:
        return run_describe(client, apiPath)

    @server.tool(name="describe_raw", description="Return the raw JSON description of a KLB API endpoint.")
    def describe_raw(apiPath: ApiPath) -> str:
        return run_describe(client, apiPath, raw=True)

    @server.tool(name="produce_ts", description="Generate TypeScript definitions for a KLB API endpoint.")
    def produce_ts(apiPath: ApiPath) -> str:
        return run_describe(client, apiPath, typescript=True)

    @server.tool(name="get", description="Perform a GET request on a KLB API endpoint and pretty-print the result.")
    def get(
        apiPath: ApiPath,
        raw: Annotated[bool, Field(description="Return the raw JSON response")] = False,
    ) -> str:
        return run_get(client, apiPath, raw=raw)

    @server.tool(name="documentation", description="Fetch a KLB framework documentation file.")
    def documentation(
        fileName: Annotated[str, Field(description="Documentation file name")] = DEFAULT_DOC_FILE,
    ) -> str:
        return run_documentation(client, fileName)

    @server.resource(DOC_RESOURCE, name="intdoc", mime_type="text/markdown")
    def intdoc(fileName: str) -> str:
        """KLB framework documentation file."""
        return run_documentation(client, fileName)

    return server


def serve(client: ApiClient | None = None) -> None:
    """Run the server on stdio until the client disconnects."""
    logger.info("Starting MCP server %s on stdio", SERVER_NAME)
    build_server(client).run()
