"""
Memory tools for LLM tool-calling frameworks.

Each tool validates its arguments with a pydantic model (whose JSON schema is
what the framework advertises), delegates to MemoryService and always returns
a string. Errors are reported in the returned text, never raised.
"""

from typing import Any, Awaitable, Callable, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .models.core import ChatMessage, UserMemory
from .services.formatting import format_search_digest
from .services.memory_service import MemoryService
from .utils.logging_config import get_logger

logger = get_logger(__name__)

NO_MEMORIES_FOUND = 'No relevant memories found for the given query.'
NO_CONTEXT_FOUND = 'No relevant memory context found for the current conversation.'

HistoryProvider = Callable[[str], Awaitable[List[ChatMessage]]]


class SearchMemoryArgs(BaseModel):
    query: str = Field(description='Simple, concise search query to find relevant memories.')
    scope: Literal['nodes', 'edges'] = Field(
        default='nodes', description="Scope of the search: 'nodes' for entities/concepts, 'edges' for relationships/facts")
    reranker: Literal['cross_encoder', 'rrf', 'mmr', 'episode_mentions'] = Field(
        default='cross_encoder', description='Method to rerank results for better relevance')
    max_results: int = Field(default=10, ge=1, description='Maximum number of results to return (default: 10)')


class StoreMemoryArgs(BaseModel):
    content: str = Field(description='The information to store in memory')
    data_type: Literal['text', 'json', 'message'] = Field(default='text', description='Type of data being stored')
    overflow_strategy: Literal['truncate', 'split', 'fail'] = Field(
        default='split', description='How to handle data that exceeds size limits')


class GetMemoryContextArgs(BaseModel):
    session_id: str = Field(description='Current session ID for context retrieval')
    limit: int = Field(default=10, ge=1, description='Maximum number of memory items to retrieve (default: 10)')


TOOL_DESCRIPTIONS = {
    'search_memory': ("Search through the user's memories from previous conversations and interactions. "
                      "Use this to find relevant information about the user's preferences, past conversations, "
                      "or stored knowledge."),
    'store_memory': ("Store important information in the user's memory for future reference. Use this to "
                     "remember user preferences, important facts, or key information from conversations."),
    'get_memory_context': ("Retrieve relevant context from the user's memory based on the current conversation. "
                           "This helps provide personalized and contextual responses."),
}

TOOL_ARGS = {
    'search_memory': SearchMemoryArgs,
    'store_memory': StoreMemoryArgs,
    'get_memory_context': GetMemoryContextArgs,
}


class MemoryToolkit:
    """The search, store and context tools bound to one user."""

    def __init__(self, service: MemoryService, user: UserMemory, history: Optional[HistoryProvider] = None,
                 history_limit: int = 20):
        """
        Args:
            service: Memory service the tools delegate to
            user: User the tools act for
            history: Coroutine returning the conversation messages of a session;
                defaults to the session's stored messages
            history_limit: Number of stored messages loaded by the default history
        """
        self.service = service
        self.user = user
        self.history_limit = history_limit
        self.history = history or self._stored_history

    async def _stored_history(self, session_id: str) -> List[ChatMessage]:
        return await self.service.get_session_messages(session_id, limit=self.history_limit)

    @staticmethod
    def tool_schemas() -> List[Dict[str, Any]]:
        """Function-calling descriptions of the three tools."""
        return [{
            'name': name,
            'description': TOOL_DESCRIPTIONS[name],
            'parameters': args_model.model_json_schema(),
        } for name, args_model in TOOL_ARGS.items()]

    async def call(self, name: str, arguments: Dict[str, Any]) -> str:
        """Dispatch a tool call by name."""
        if name not in TOOL_ARGS:
            return f'Unknown memory tool: {name}'
        try:
            return await getattr(self, name)(**arguments)
        except TypeError as e:
            logger.error(f'Invalid arguments for {name}: {e}')
            return f'Invalid arguments for {name}: {e}'

    async def search_memory(self, query: str, scope: str = 'nodes', reranker: str = 'cross_encoder',
                            max_results: int = 10) -> str:
        try:
            args = SearchMemoryArgs(query=query, scope=scope, reranker=reranker, max_results=max_results)
            result = await self.service.search_memories(self.user, args.query, args.scope, args.reranker,
                                                        args.max_results)
            return format_search_digest(result) or NO_MEMORIES_FOUND
        except Exception as e:
            logger.error(f'Error in memory search tool: {e}')
            return f'Error searching memory: {e}'

    async def store_memory(self, content: str, data_type: str = 'text', overflow_strategy: str = 'split') -> str:
        try:
            args = StoreMemoryArgs(content=content, data_type=data_type, overflow_strategy=overflow_strategy)
            await self.service.add_business_data_to_graph(self.user, args.content, args.data_type,
                                                          args.overflow_strategy)
            return f'Successfully stored information in memory. Content length: {len(args.content)} characters.'
        except Exception as e:
            logger.error(f'Error in memory storage tool: {e}')
            return f'Error storing memory: {e}'

    async def get_memory_context(self, session_id: str, limit: int = 10) -> str:
        try:
            args = GetMemoryContextArgs(session_id=session_id, limit=limit)
            await self.service.ensure_session(self.user, args.session_id)
            messages = await self.history(args.session_id)

            context = await self.service.add_memory_and_get_context(self.user,
                                                                    args.session_id,
                                                                    messages,
                                                                    collect_enabled=False,
                                                                    inject_enabled=True,
                                                                    limit=args.limit)
            if not context:
                return NO_CONTEXT_FOUND
            return f'Memory context retrieved:\n\n{context}'
        except Exception as e:
            logger.error(f'Error in memory context tool: {e}')
            return f'Error retrieving memory context: {e}'
