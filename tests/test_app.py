"""End-to-end tests through the FastMCP server using the in-memory client."""

import logging

import httpx
import pytest
from fastmcp import Client

from bubble_mcp.app import create_server
from bubble_mcp.dispatcher import ToolDispatcher
from bubble_mcp.tools import TOOLS

from conftest import FakeUpstream, make_service


def audit_lines(caplog):
    return [r.getMessage() for r in caplog.records if r.name == "bubble_mcp.audit"]


async def call(dispatcher, name, arguments):
    async with Client(create_server(dispatcher)) as client:
        return await client.call_tool_mcp(name, arguments)


class TestCatalogOverProtocol:
    """tools/list returns the catalog descriptors as defined."""

    @pytest.mark.asyncio
    async def test_registered_tools_match_catalog(self, read_only):
        async with Client(create_server(read_only)) as client:
            tools = await client.list_tools()

        by_name = {tool.name: tool for tool in tools}
        assert sorted(by_name) == sorted(d.name for d in TOOLS)
        for descriptor in TOOLS:
            tool = by_name[descriptor.name]
            assert tool.description == descriptor.description
            assert tool.inputSchema == descriptor.input_schema
            assert tool.annotations.readOnlyHint == descriptor.annotations["readOnlyHint"]
            assert tool.annotations.destructiveHint == descriptor.annotations["destructiveHint"]

    @pytest.mark.asyncio
    async def test_pagination_schema_on_the_wire(self, read_only):
        async with Client(create_server(read_only)) as client:
            tools = {tool.name: tool for tool in await client.list_tools()}

        props = tools["bubble_list"].inputSchema["properties"]
        assert props["limit"]["type"] == "number"
        assert props["limit"]["default"] == 100
        assert tools["bubble_workflow"].inputSchema["properties"]["data"]["default"] == {}


class TestGuardOverProtocol:
    """The dispatcher's guard, audit and argument rules apply to protocol calls."""

    @pytest.mark.asyncio
    async def test_blocked_write_is_tool_error(self, read_only, upstream, caplog):
        caplog.set_level(logging.INFO, logger="bubble_mcp.audit")
        result = await call(read_only, "bubble_delete", {"dataType": "user", "id": "1"})

        assert result.isError
        assert "disabled in read-only mode" in result.content[0].text
        assert audit_lines(caplog) == [
            "[AUDIT] tool=bubble_delete BLOCKED (read-only mode) dataType=user id=1"
        ]
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_blocked_before_argument_checks(self, read_only, upstream, caplog):
        caplog.set_level(logging.INFO, logger="bubble_mcp.audit")
        result = await call(read_only, "bubble_create", {"dataType": "user"})

        assert result.isError
        assert result.content[0].text == (
            "Error: bubble_create is disabled in read-only mode. "
            "Set MCP_MODE=read-write to enable write operations."
        )
        assert audit_lines(caplog) == ["[AUDIT] tool=bubble_create BLOCKED (read-only mode) dataType=user"]
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_missing_fields_reported_by_dispatcher(self, read_write, upstream):
        result = await call(read_write, "bubble_update", {"dataType": "user"})

        assert result.isError
        assert result.content[0].text == "Error: Missing required arguments for bubble_update: id, data"
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_unknown_tool_is_audited(self, read_only, upstream, caplog):
        caplog.set_level(logging.INFO, logger="bubble_mcp.audit")
        result = await call(read_only, "bubble_frobnicate", {"dataType": "user"})

        assert result.isError
        assert result.content[0].text == "Error: Unknown tool: bubble_frobnicate"
        assert audit_lines(caplog) == ["[AUDIT] tool=bubble_frobnicate dataType=user"]
        assert upstream.requests == []


class TestArgumentsOverProtocol:

    @pytest.mark.asyncio
    async def test_read_returns_json_text(self, read_only, upstream):
        result = await call(read_only, "bubble_list", {"dataType": "user", "limit": 10})

        assert not result.isError
        assert '"ok": true' in result.content[0].text
        assert upstream.requests[0].url.query == b"limit=10"

    @pytest.mark.asyncio
    async def test_extra_fields_ignored(self, read_only, upstream):
        result = await call(read_only, "bubble_get", {"dataType": "user", "id": "1", "extra": 1})

        assert not result.isError
        assert upstream.calls == [("GET", "/obj/user/1")]
        assert upstream.requests[0].url.query == b""

    @pytest.mark.asyncio
    async def test_fractional_limit_forwarded(self, read_only, upstream):
        result = await call(read_only, "bubble_list", {"dataType": "user", "limit": 10.5})

        assert not result.isError
        assert upstream.requests[0].url.query == b"limit=10.5"

    @pytest.mark.asyncio
    async def test_upstream_failure_is_tool_error(self):
        body = {"body": {"status": "MISSING_DATA", "message": "Object with id 42 does not exist"}}
        upstream = FakeUpstream(lambda r: httpx.Response(404, json=body))
        dispatcher = ToolDispatcher(make_service(upstream))

        result = await call(dispatcher, "bubble_get", {"dataType": "order", "id": "42"})

        assert result.isError
        assert result.content[0].text == "Error: Failed to get order 42: Object with id 42 does not exist"
