"""
FastMCP wiring for the tool catalog.

Each catalog entry is registered as a CatalogTool carrying the catalog's own
input schema, so tools/list returns the descriptors as they are defined.
Every tools/call, including calls to names outside the catalog, is handed to
ToolDispatcher with the raw arguments by DispatchMiddleware. No argument
validation runs ahead of the dispatcher's mode guard and audit line.

An error envelope is raised as ToolError so the MCP client receives
isError=true with the same text.
"""

import copy
from typing import Any, Dict, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.server.middleware import Middleware, MiddlewareContext
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent, ToolAnnotations
from pydantic import PrivateAttr

from .dispatcher import ToolDispatcher
from .tools import TOOLS, ToolDescriptor


SERVER_NAME = "bubble-mcp-server"


async def dispatch(
    dispatcher: ToolDispatcher,
    name: str,
    arguments: Optional[Dict[str, Any]],
) -> ToolResult:
    envelope = await dispatcher.call_tool(name, arguments)
    if envelope.is_error:
        raise ToolError(envelope.text)
    return ToolResult(content=[TextContent(type="text", text=envelope.text)])


class CatalogTool(Tool):
    """Tool served with its catalog schema; run() passes arguments through untouched."""

    _dispatcher: Optional[ToolDispatcher] = PrivateAttr(default=None)

    @classmethod
    def from_descriptor(cls, descriptor: ToolDescriptor, dispatcher: ToolDispatcher) -> "CatalogTool":
        tool = cls(
            name=descriptor.name,
            description=descriptor.description,
            parameters=copy.deepcopy(descriptor.input_schema),
            annotations=ToolAnnotations(**descriptor.annotations),
        )
        tool._dispatcher = dispatcher
        return tool

    async def run(self, arguments: Dict[str, Any]) -> ToolResult:
        return await dispatch(self._dispatcher, self.name, arguments)


class DispatchMiddleware(Middleware):
    """Routes every tools/call through ToolDispatcher, known name or not."""

    def __init__(self, dispatcher: ToolDispatcher):
        self.dispatcher = dispatcher

    async def on_call_tool(self, context: MiddlewareContext, call_next):
        params = context.message
        return await dispatch(self.dispatcher, params.name, params.arguments)


def create_server(dispatcher: ToolDispatcher) -> FastMCP:
    """Build a FastMCP server exposing the seven Bubble tools."""
    mcp = FastMCP(name=SERVER_NAME)
    for descriptor in TOOLS:
        mcp.add_tool(CatalogTool.from_descriptor(descriptor, dispatcher))
    mcp.add_middleware(DispatchMiddleware(dispatcher))
    return mcp
