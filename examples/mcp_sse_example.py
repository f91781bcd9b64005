#!/usr/bin/env python3
"""
MCP Server SSE Example

Connects to the form builder MCP server over SSE, lists its tools and
generates code for a small form.

Prerequisites:
    python run_mcp_server.py --transport sse --port 8080

    Health check:
        curl http://localhost:8080/health

Usage:
    python examples/mcp_sse_example.py
"""

import asyncio
import json
import os
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mcp import ClientSession
from mcp.client.sse import sse_client

MCP_URL = os.getenv("MCP_SSE_URL", "http://localhost:8080/sse")

FORM_JSON = [
    {"variant": "Input", "name": "username", "label": "Username", "required": True},
    [
        {"variant": "Date Picker", "name": "birth_date", "label": "Date of birth"},
        {"variant": "Phone", "name": "phone", "label": "Phone number"},
    ],
    {"variant": "Switch", "name": "newsletter", "label": "Subscribe"},
]


async def main():
    print(f"Connecting to {MCP_URL} ...")

    async with sse_client(MCP_URL) as (read_stream, write_stream):
        async with ClientSession(read_stream, write_stream) as session:
            await session.initialize()

            tools = await session.list_tools()
            print("Tools:", ", ".join(tool.name for tool in tools.tools))

            result = await session.call_tool(
                "generate_form_code",
                {"form_json": json.dumps(FORM_JSON), "library": "tanstack-form"},
            )
            payload = json.loads(result.content[0].text)
            if payload.get("error"):
                print(f"Error: {payload['message']}")
                sys.exit(1)

            print("=" * 60)
            print(payload["code"])
            print("=" * 60)
            for component in payload["special_components"]:
                print(f"Needs component: {component['component']} ({component['variant']})")


if __name__ == "__main__":
    asyncio.run(main())
