"""
Unit tests for the FastMCP server wiring.
"""

import pytest
from fastmcp import Client

from memory_context.mcp_interface import create_mcp
from memory_context.toolkit import MemoryToolkit


@pytest.mark.unit
class TestMCPInterface:

    @pytest.mark.asyncio
    async def test_registers_three_memory_tools(self, service, user):
        mcp = create_mcp(MemoryToolkit(service, user))
        async with Client(mcp) as client:
            tools = await client.list_tools()
        assert sorted(tool.name for tool in tools) == ['get_memory_context', 'search_memory', 'store_memory']

    @pytest.mark.asyncio
    async def test_no_tools_without_service(self):
        async with Client(create_mcp(None)) as client:
            assert await client.list_tools() == []
