#!/usr/bin/env python3
"""
Bubble MCP Server - FastMCP server for the Bubble.io Data and Workflow APIs.

Safety features:
- Read-only by default; write tools (create, update, delete, workflow)
  require MCP_MODE=read-write
- Blocked and attempted calls are written to the audit log on stderr
- Upstream failures come back as tool errors, never as crashes

Configuration (environment or .env):
- BUBBLE_BASE_URL (required), BUBBLE_API_TOKEN, BUBBLE_TIMEOUT
- MCP_MODE, MCP_TRANSPORT (stdio|http), MCP_HOST, MCP_PORT
"""

import logging
import sys
from pathlib import Path

# --- Add src to path for bubble_mcp ---
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from bubble_mcp import __version__
from bubble_mcp.app import SERVER_NAME, create_server
from bubble_mcp.client import create_api_client
from bubble_mcp.config import load_settings
from bubble_mcp.dispatcher import ToolDispatcher
from bubble_mcp.service import BubbleService
from bubble_mcp.tools import TOOLS

# stdout carries the stdio protocol, so all logging goes to stderr
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("bubble_mcp.server")

try:
    settings = load_settings()
except ValueError as e:
    logger.error("Invalid configuration: %s", e)
    sys.exit(1)

# Process-lifetime client; its connections are released at process exit
http_client = create_api_client(settings)
dispatcher = ToolDispatcher(BubbleService(http_client), mode=settings.mode)
mcp = create_server(dispatcher)


if __name__ == "__main__":
    logger.info("=" * 60)
    logger.info("%s %s", SERVER_NAME, __version__)
    logger.info("=" * 60)
    logger.info("Bubble API:    %s", settings.base_url)
    logger.info("Auth:          %s", "bearer token" if settings.api_token else "none")
    logger.info("Mode:          %s", settings.mode.value)
    logger.info("Transport:     %s", settings.transport)
    logger.info("MCP Tools available:")
    for descriptor in TOOLS:
        marker = " (write)" if not descriptor.annotations.get("readOnlyHint") else ""
        logger.info("   %s%s - %s", descriptor.name, marker, descriptor.description)
    if not settings.mode.allows_writes:
        logger.info("Write tools are disabled. Set MCP_MODE=read-write to enable them.")
    logger.info("=" * 60)

    if settings.transport == "http":
        mcp.run(transport="http", host=settings.host, port=settings.port)
    else:
        mcp.run(transport="stdio")
