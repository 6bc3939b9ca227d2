"""
Memory Service orchestrating user upserts, message ingestion and context retrieval.
"""

import asyncio
from typing import Any, Dict, Iterable, List, Optional, Union

from ..models.core import ChatMessage, EntityRecord, Fact, SearchResult, UserMemory
from ..models.ontology import DEFAULT_ONTOLOGY, EntityTypeDefinition
from ..utils.chunking import split_into_chunks
from ..utils.config import config
from ..utils.identity import remote_user_id
from ..utils.logging_config import get_logger
from ..utils.messages import MessageLike, adapt_messages, derive_query
from ..utils.zep_client import ZepConflictError, ZepNotFoundError
from .formatting import build_context_block

logger = get_logger(__name__)

# Hard limit of the graph search API
MAX_QUERY_LENGTH = 255
CONTEXT_RERANKER = 'cross_encoder'


class MemoryServiceError(Exception):
    """Custom exception for memory service errors."""
    pass


class DataTooLargeError(MemoryServiceError):
    """Payload exceeds the ingestion limit and the overflow strategy is ``fail``."""
    pass


class MemoryService:
    """Orchestrates the remote graph memory for a conversational assistant.

    Holds only the gateway client and the ingestion size limit; every call is
    independent. Failure conventions differ per method and callers rely on it:

    * ``add_messages`` and ``add_memory_and_get_context`` never raise and
      return None on any failure.
    * ``search_memories`` never raises and returns an empty SearchResult.
    * ``add_business_data_to_graph`` raises, notably DataTooLargeError for
      oversized data with the ``fail`` strategy.
    """

    def __init__(self, client: Any, max_data_size: Optional[int] = None):
        """
        Initialize the memory service.

        Args:
            client: Gateway client (ZepClient or an object with the same coroutines)
            max_data_size: Ingestion limit in characters, defaults to the configured one
        """
        self.client = client
        self.max_data_size = max_data_size if max_data_size is not None else config.memory.max_data_size_characters

        logger.info(f'Initialized MemoryService (max data size: {self.max_data_size})')

    async def ensure_user(self, user: UserMemory) -> Any:
        """Create the remote user, or refresh its profile if it already exists.

        Args:
            user: User to upsert

        Returns:
            The remote user record

        Raises:
            ZepError: Any failure other than the user being absent
        """
        user_id = remote_user_id(user)
        profile = {'email': user.email, 'first_name': user.first_name, 'last_name': user.last_name}

        try:
            await self.client.get_user(user_id)
        except ZepNotFoundError:
            logger.info(f'Remote user {user_id} not found, creating it')
            try:
                return await self.client.add_user(user_id, **profile)
            except ZepConflictError:
                # Created concurrently by another caller
                logger.info(f'Remote user {user_id} was created concurrently, updating instead')

        updated = await self.client.update_user(user_id, **profile)
        logger.debug(f'Updated remote user {user_id}')
        return updated

    async def ensure_session(self, user: UserMemory, session_id: str) -> Any:
        """Fetch a session, creating it for the user if it does not exist.

        Sessions are looked up by ID alone, not per user.
        """
        try:
            return await self.client.get_session(session_id)
        except ZepNotFoundError:
            logger.info(f'Session {session_id} not found, creating it')

        try:
            return await self.client.add_session(remote_user_id(user), session_id)
        except ZepConflictError:
            logger.info(f'Session {session_id} was created concurrently')
            return await self.client.get_session(session_id)

    async def add_messages(self, user: UserMemory, session_id: str, messages: Iterable[MessageLike]) -> Optional[Any]:
        """Store conversation messages in a session.

        Returns:
            The ingestion response, or None when there was nothing to add or the add failed
        """
        try:
            await self.ensure_user(user)

            remote_messages = adapt_messages(messages)
            if not remote_messages:
                logger.info('No messages to add to memory')
                return None

            response = await self.client.add_messages(session_id, remote_messages)
            logger.debug(f'Added {len(remote_messages)} messages to session {session_id}')
            return response

        except Exception as e:
            logger.error(f'Error adding memories: {e}')
            return None

    async def add_memory_and_get_context(self,
                                         user: UserMemory,
                                         session_id: str,
                                         messages: Iterable[MessageLike],
                                         collect_enabled: bool = False,
                                         inject_enabled: bool = False,
                                         limit: int = 10) -> Optional[str]:
        """Optionally store the turn's messages and retrieve a memory context block.

        Args:
            user: Current user
            session_id: Current session
            messages: Conversation messages
            collect_enabled: Write the messages to the session
            inject_enabled: Search the graph and build a context block
            limit: Maximum results per search scope

        Returns:
            The context block, or None when nothing was found, retrieval was
            disabled, or anything failed
        """
        logger.info(f'Processing memory for user: {user.user_id}, session: {session_id}')

        try:
            await self.ensure_user(user)

            remote_messages = adapt_messages(messages)
            if not remote_messages:
                logger.info('No messages to add to memory')
                return None

            query = derive_query(remote_messages)[:MAX_QUERY_LENGTH]
            logger.debug(f'Generated query from messages: {query[:100]}')

            if collect_enabled:
                logger.debug('Memory collector enabled - adding new memories')
                await self.client.add_messages(session_id, remote_messages, return_context=False)

            if not inject_enabled:
                logger.debug('Memory injection disabled')
                return None

            user_id = remote_user_id(user)
            facts, entities = await asyncio.gather(
                self.client.search_graph(user_id, query, scope='edges', limit=limit, reranker=CONTEXT_RERANKER),
                self.client.search_graph(user_id, query, scope='nodes', limit=limit, reranker=CONTEXT_RERANKER))

            edges = facts.get('edges') or []
            nodes = entities.get('nodes') or []
            logger.debug(f'Search results - facts: {len(edges)}, entities: {len(nodes)}')

            context = build_context_block(edges, nodes)
            if context is None:
                logger.info('No relevant memories found')
            return context

        except Exception as e:
            logger.error(f'Error in add_memory_and_get_context: {e}')
            return None

    async def search_memories(self,
                              user: UserMemory,
                              query: str,
                              scope: str = 'nodes',
                              reranker: str = 'cross_encoder',
                              max_results: int = 10) -> SearchResult:
        """Search one scope of the user's graph.

        Unlike the context flow, a failure yields an empty SearchResult rather than None.
        """
        try:
            results = await self.client.search_graph(remote_user_id(user),
                                                     query[:MAX_QUERY_LENGTH],
                                                     scope=scope,
                                                     limit=max_results,
                                                     reranker=reranker)
            return self._to_search_result(results)
        except Exception as e:
            logger.error(f'Error searching memories: {e}')
            return SearchResult()

    def _to_search_result(self, results: Dict[str, List[Dict[str, Any]]]) -> SearchResult:
        result = SearchResult()

        for edge in results.get('edges') or []:
            result.facts.append(
                Fact(fact=edge.get('fact', ''),
                     confidence=edge.get('score') or 0,
                     source=edge.get('source') or 'memory'))

        for node in results.get('nodes') or []:
            labels = node.get('labels') or []
            result.entities.append(
                EntityRecord(id=node.get('uuid'),
                             name=node.get('name', ''),
                             type=labels[0] if labels else 'entity',
                             summary=node.get('summary', ''),
                             attributes=node.get('attributes')))

        return result

    async def add_business_data_to_graph(self,
                                         user: UserMemory,
                                         data: str,
                                         data_type: str = 'text',
                                         overflow_strategy: str = 'split') -> Union[Any, List[Any]]:
        """Ingest unstructured data into the user's knowledge graph.

        Args:
            user: Owner of the graph
            data: Text or JSON payload
            data_type: ``text``, ``json`` or ``message``
            overflow_strategy: What to do when data exceeds the size limit:
                ``truncate``, ``split`` or ``fail``

        Returns:
            The ingestion response, or a list of responses (one per chunk) for a split payload

        Raises:
            DataTooLargeError: If data is too large and the strategy is ``fail``
        """
        user_id = remote_user_id(user)
        oversized = len(data) > self.max_data_size

        if oversized and overflow_strategy == 'fail':
            logger.error(f'Rejecting {len(data)} characters for {user_id}: limit is {self.max_data_size}')
            raise DataTooLargeError(f'Data exceeds maximum size of {self.max_data_size} characters')

        try:
            await self.ensure_user(user)

            if oversized:
                if overflow_strategy == 'truncate':
                    logger.info(f'Truncating {len(data)} characters to {self.max_data_size}')
                    data = data[:self.max_data_size]

                elif overflow_strategy == 'split':
                    chunks = split_into_chunks(data, self.max_data_size)
                    logger.info(f'Splitting {len(data)} characters into {len(chunks)} chunks')

                    # One chunk at a time to keep the graph's ingestion order
                    responses = []
                    for chunk in chunks:
                        responses.append(await self.client.add_graph_data(user_id, chunk, data_type))
                    return responses

            return await self.client.add_graph_data(user_id, data, data_type)

        except Exception as e:
            logger.error(f'Error adding business data to graph: {e}')
            raise

    async def get_session_messages(self, session_id: str, limit: int = 20) -> List[ChatMessage]:
        """Recent messages of a session, oldest first."""
        return await self.client.get_session_messages(session_id, limit=limit)

    async def set_ontology(self, ontology: Optional[Dict[str, EntityTypeDefinition]] = None) -> Any:
        """Register the custom entity types with the graph."""
        ontology = ontology or DEFAULT_ONTOLOGY
        try:
            response = await self.client.set_entity_types(list(ontology.values()))
            logger.info(f'Set ontology with entity types: {", ".join(ontology)}')
            return response
        except Exception as e:
            logger.error(f'Error setting ontology: {e}')
            raise
