"""
MCP Interface Layer using fastmcp for agent orchestration.
"""
from typing import Optional

from fastmcp import FastMCP

from .models.core import UserMemory
from .services.memory_service import MemoryService
from .toolkit import TOOL_DESCRIPTIONS, MemoryToolkit
from .utils.config import config, is_memory_enabled
from .utils.logging_config import get_logger
from .utils.zep_client import ZepClient

logger = get_logger(__name__)


def create_memory_service() -> Optional[MemoryService]:
    """Build the memory service, or None when no memory backend is configured."""
    if not is_memory_enabled(config):
        logger.warning('Memory features are not enabled. Please configure ZEP_API_KEY or MEM0_API_KEY.')
        return None
    if not config.features.enable_zep_memory:
        logger.warning('Only Mem0 is configured; graph memory tools require ZEP_API_KEY.')
        return None
    return MemoryService(ZepClient(config.zep))


def create_toolkit(service: MemoryService) -> MemoryToolkit:
    """Toolkit bound to the user configured for this server."""
    tool_user = config.tool_user
    user = UserMemory(user_id=tool_user.user_id,
                      workspace_id=tool_user.workspace_id,
                      email=tool_user.email,
                      first_name=tool_user.first_name,
                      last_name=tool_user.last_name)
    return MemoryToolkit(service, user, history_limit=tool_user.history_limit)


def create_mcp(toolkit: Optional[MemoryToolkit]) -> FastMCP:
    """Register the memory tools on a FastMCP application."""
    mcp = FastMCP('Graph Memory Context')

    if toolkit is None:
        logger.warning('Memory service not available. No memory tools registered.')
        return mcp

    @mcp.tool(description=TOOL_DESCRIPTIONS['search_memory'])
    async def search_memory(query: str, scope: str = 'nodes', reranker: str = 'cross_encoder',
                            max_results: int = 10) -> str:
        """Search the user's graph memory.

        Args:
            query: Simple, concise search query
            scope: 'nodes' for entities/concepts, 'edges' for relationships/facts
            reranker: cross_encoder, rrf, mmr or episode_mentions
            max_results: Maximum number of results to return (default: 10)
        """
        return await toolkit.search_memory(query, scope=scope, reranker=reranker, max_results=max_results)

    @mcp.tool(description=TOOL_DESCRIPTIONS['store_memory'])
    async def store_memory(content: str, data_type: str = 'text', overflow_strategy: str = 'split') -> str:
        """Store information in the user's knowledge graph.

        Args:
            content: The information to store
            data_type: text, json or message
            overflow_strategy: truncate, split or fail when content exceeds the size limit
        """
        return await toolkit.store_memory(content, data_type=data_type, overflow_strategy=overflow_strategy)

    @mcp.tool(description=TOOL_DESCRIPTIONS['get_memory_context'])
    async def get_memory_context(session_id: str, limit: int = 10) -> str:
        """Retrieve memory context for the current session.

        Args:
            session_id: Current session ID
            limit: Maximum number of memory items to retrieve (default: 10)
        """
        return await toolkit.get_memory_context(session_id, limit=limit)

    logger.debug(f'Registered memory tools for user {toolkit.user.user_id}')
    return mcp


memory_service = create_memory_service()
mcp = create_mcp(create_toolkit(memory_service) if memory_service else None)


if __name__ == '__main__':
    transport = config.mcp.transport
    if transport == 'stdio':
        mcp.run(transport=transport)
    else:
        mcp.run(transport=transport, host=config.mcp.host, port=config.mcp.port)
