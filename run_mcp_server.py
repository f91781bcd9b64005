"""
Form Builder MCP Server Entry Point.

Usage:
    # Local client spawning the process (stdio)
    python run_mcp_server.py

    # Remote clients (SSE), health check at http://localhost:8080/health
    python run_mcp_server.py --transport sse --port 8080

Transport and port default to MCP_TRANSPORT / MCP_PORT.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add src to path for local development
sys.path.insert(0, str(Path(__file__).parent / "src"))

from form_builder.config import get_config
from form_builder.mcp_server import run_mcp_server

logger = logging.getLogger("form-builder-mcp")

ENVIRONMENT_HELP = """
Environment Variables:
  MCP_TRANSPORT                  stdio or sse (default: stdio)
  MCP_PORT                       Port for SSE transport (default: 8080)
  FORM_BUILDER_DEFAULT_LIBRARY   Library used when a tool call names none
  FORM_BUILDER_LOG_LEVEL         Logging level (default: INFO)
"""


def build_parser(config) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Serve the form builder tools over the Model Context Protocol",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=ENVIRONMENT_HELP,
    )
    parser.add_argument("--transport", choices=["stdio", "sse"], default=config.mcp_transport)
    parser.add_argument("--host", default="0.0.0.0", help="SSE bind address (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=config.mcp_port, help=f"SSE port (default: {config.mcp_port})")
    return parser


def main(argv=None):
    config = get_config()
    args = build_parser(config).parse_args(argv)

    # stdout carries the stdio protocol, so logs go to stderr
    logging.basicConfig(level=getattr(logging, config.log_level, logging.INFO), stream=sys.stderr)
    where = f" on {args.host}:{args.port}" if args.transport == "sse" else ""
    logger.info(f"Starting {args.transport} transport{where}, default library {config.default_library}")

    try:
        asyncio.run(run_mcp_server(transport=args.transport, host=args.host, port=args.port))
    except KeyboardInterrupt:
        logger.info("Server stopped.")
    except Exception as e:
        logger.error(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
