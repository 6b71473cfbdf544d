"""
Tool server entry point for the Search Console tool server.

Serves the tools from gsc_server.api.tools over the Model Context Protocol on
stdio. Stdout carries the protocol, so all logging goes to stderr.

Startup:
    - Load settings (GOOGLE_APPLICATION_CREDENTIALS is required; exit 1 if missing)
    - Configure logging
    - Load the cached service account credentials
    - Serve list_tools / call_tool until stdin closes

Run:
    gsc-mcp-server
    python -m gsc_server.main
"""

import asyncio
import json
import logging
import sys
import threading
from typing import Any, Dict, List, Optional

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from pydantic import ValidationError

from gsc_server import __version__
from gsc_server.api.tools import TOOL_DEFINITIONS, dispatch_tool
from gsc_server.core.config import get_settings
from gsc_server.core.credentials import init_credentials
from gsc_server.services.search_console import SearchConsoleService

# Configure logging (stderr; stdout is reserved for the protocol)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

SERVER_NAME = "gsc-mcp-server"

server: Server = Server(SERVER_NAME, version=__version__)

# Service singleton, created on first tool call
_service: Optional[SearchConsoleService] = None

# The API resources share one httplib2.Http, which is not thread-safe
_dispatch_lock = threading.Lock()


def get_service() -> SearchConsoleService:
    global _service

    if _service is None:
        _service = SearchConsoleService(write_access=get_settings().gsc_write_access)
    return _service


def dispatch_serialized(name: str, arguments: Dict[str, Any]) -> Any:
    """Run one tool call at a time against the shared service."""
    with _dispatch_lock:
        return dispatch_tool(get_service(), name, arguments)


def format_response(data: Any) -> List[types.TextContent]:
    """Render tool output as a single indented JSON text block."""
    return [types.TextContent(type="text", text=json.dumps(data, indent=2, default=str))]


@server.list_tools()
async def list_tools() -> List[types.Tool]:
    return [
        types.Tool(
            name=tool.name,
            description=tool.description,
            inputSchema=tool.input_schema(),
        )
        for tool in TOOL_DEFINITIONS
    ]


@server.call_tool(validate_input=False)
async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[types.TextContent]:
    """
    Dispatch a tool call.

    The Google client is blocking, so the handler runs in a worker thread.
    Calls are serialized; concurrent requests wait their turn.
    Exceptions propagate to the server, which reports them as tool errors.
    """
    data = await asyncio.to_thread(dispatch_serialized, name, arguments or {})
    return format_response(data)


async def serve() -> None:
    async with stdio_server() as (read_stream, write_stream):
        logger.info(f"{SERVER_NAME} v{__version__} running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    """Console script entry point."""
    try:
        settings = get_settings()
    except ValidationError:
        logger.error("GOOGLE_APPLICATION_CREDENTIALS environment variable is required")
        logger.error("Set it to the path of your Google Cloud service account JSON key file")
        sys.exit(1)

    logging.getLogger().setLevel(settings.log_level.upper())
    server.name = settings.server_name

    try:
        init_credentials()
        asyncio.run(serve())
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
