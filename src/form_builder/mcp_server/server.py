"""
MCP server for the form builder.

The same ``Server`` instance is exposed over stdio (local clients spawn
the process) or SSE (a Starlette app served by uvicorn).
"""

import json
import logging
from typing import Any, Awaitable, Callable, Literal

from mcp.server import Server
from mcp.server.sse import SseServerTransport
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool
from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route

from form_builder.config import get_config
from form_builder.mcp_server.tools import (
    error_response,
    get_mcp_tools,
    mcp_derive_form_schema,
    mcp_generate_form_code,
    mcp_list_field_types,
    mcp_review_form_json,
)

SERVER_NAME = "form-builder-mcp"

logger = logging.getLogger(SERVER_NAME)

Transport = Literal["stdio", "sse"]

TOOL_HANDLERS: dict[str, Callable[[dict[str, Any]], dict[str, Any]]] = {
    "generate_form_code": lambda args: mcp_generate_form_code(
        form_json=args.get("form_json", ""),
        library=args.get("library"),
    ),
    "derive_form_schema": lambda args: mcp_derive_form_schema(form_json=args.get("form_json", "")),
    "review_form_json": lambda args: mcp_review_form_json(
        form_json=args.get("form_json", ""),
        library=args.get("library"),
    ),
    "list_field_types": lambda args: mcp_list_field_types(),
}


def call_tool_sync(name: str, arguments: dict[str, Any] | None) -> dict[str, Any]:
    """Run a tool by name; unknown tools and failures come back as ``error_response`` dicts."""
    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        return error_response(f"Unknown tool: {name}")
    try:
        return handler(arguments or {})
    except Exception as e:
        logger.exception(f"Tool {name} failed")
        return error_response(str(e))


def _as_content(payload: dict[str, Any]) -> list[TextContent]:
    text = json.dumps(payload, indent=get_config().indent_json_output, ensure_ascii=False)
    return [TextContent(type="text", text=text)]


def create_mcp_server() -> Server:
    """Build the MCP server with every form builder tool registered."""
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return [Tool(**definition) for definition in get_mcp_tools()]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        logger.info(f"Tool call: {name}")
        return _as_content(call_tool_sync(name, arguments))

    return server


async def serve_stdio(server: Server, host: str = "", port: int = 0) -> None:
    """Serve over stdin/stdout; ``host`` and ``port`` are ignored."""
    logger.info("Serving MCP over stdio")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def create_sse_app(server: Server, sse_path: str = "/sse") -> Starlette:
    """
    Starlette app exposing ``server`` over SSE.

    Clients connect to ``sse_path`` and post messages under
    ``{sse_path}/messages/``; ``/health`` reports the registered tools.
    """
    # The message endpoint is announced relative to the SSE mount
    transport = SseServerTransport("/messages/")

    async def handle_sse(scope, receive, send):
        async with transport.connect_sse(scope, receive, send) as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())

    async def handle_messages(scope, receive, send):
        await transport.handle_post_message(scope, receive, send)

    async def health(request):
        return JSONResponse({
            "status": "healthy",
            "service": SERVER_NAME,
            "transport": "sse",
            "default_library": get_config().default_library,
            "tools": list(TOOL_HANDLERS),
        })

    return Starlette(
        debug=get_config().verbose_output,
        routes=[
            Route("/health", health, methods=["GET"]),
            Mount(f"{sse_path}/messages", app=handle_messages),
            Mount(sse_path, app=handle_sse),
        ],
    )


async def serve_sse(server: Server, host: str = "0.0.0.0", port: int = 8080) -> None:
    """Serve over SSE with uvicorn until interrupted."""
    import uvicorn

    logger.info(f"Serving MCP over SSE on {host}:{port}")
    uvicorn_config = uvicorn.Config(create_sse_app(server), host=host, port=port, log_level="info")
    await uvicorn.Server(uvicorn_config).serve()


TRANSPORTS: dict[str, Callable[[Server, str, int], Awaitable[None]]] = {
    "stdio": serve_stdio,
    "sse": serve_sse,
}


async def run_mcp_server(transport: Transport = "stdio", host: str = "0.0.0.0", port: int = 8080) -> None:
    """
    Create the server and serve it over ``transport``.

    Raises:
        ValueError: If ``transport`` is neither "stdio" nor "sse".
    """
    serve = TRANSPORTS.get(transport)
    if serve is None:
        raise ValueError(f"Unknown transport: {transport}. Use one of: {', '.join(TRANSPORTS)}")
    await serve(create_mcp_server(), host, port)
