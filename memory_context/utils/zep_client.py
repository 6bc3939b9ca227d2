"""
Zep Cloud graph memory client with typed error translation.
"""

from functools import wraps
from typing import Any, Dict, List, Optional

from zep_cloud.core.api_error import ApiError

from ..models.core import ChatMessage, RemoteMessage
from ..models.ontology import EntityTypeDefinition
from .config import ZepConfig
from .logging_config import get_logger

logger = get_logger(__name__)

# Zep property types have no list type; arrays are stored as text
PROPERTY_TYPES = {'string': 'Text', 'array': 'Text', 'int': 'Int', 'float': 'Float', 'boolean': 'Boolean'}

HEALTH_CHECK_USER_ID = '__health_check__'


class ZepError(Exception):
    """Custom exception for Zep errors."""
    pass


class ZepNotFoundError(ZepError):
    """The requested user or session does not exist."""
    pass


class ZepConflictError(ZepError):
    """The user or session being created already exists."""
    pass


def _classify(error: ApiError) -> type:
    if error.status_code == 404:
        return ZepNotFoundError
    if error.status_code == 409 or 'already exists' in str(error.body).lower():
        return ZepConflictError
    return ZepError


def translate_errors(func):
    """Decorator mapping SDK and transport failures onto the ZepError hierarchy."""

    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            return await func(self, *args, **kwargs)
        except ZepError:
            raise
        except ApiError as e:
            error_class = _classify(e)
            if error_class is ZepError:
                logger.error(f'Error in {func.__name__}: {e}')
            raise error_class(f'Failed to {func.__name__}: status {e.status_code}: {e.body}') from e
        except Exception as e:
            logger.error(f'Error in {func.__name__}: {e}')
            raise ZepError(f'Failed to {func.__name__}: {e}') from e

    return wrapper


def _node_to_dict(node: Any) -> Dict[str, Any]:
    return {
        'uuid': getattr(node, 'uuid_', None),
        'name': getattr(node, 'name', ''),
        'labels': list(getattr(node, 'labels', None) or []),
        'summary': getattr(node, 'summary', ''),
        'attributes': getattr(node, 'attributes', None),
    }


def _edge_to_dict(edge: Any) -> Dict[str, Any]:
    return {
        'uuid': getattr(edge, 'uuid_', None),
        'fact': getattr(edge, 'fact', ''),
        'score': getattr(edge, 'score', None),
        'source': getattr(edge, 'source', None),
    }


class ZepClient:
    """Async Zep Cloud client.

    The SDK client is created on first use. Every remote call goes through
    ``translate_errors`` so callers branch on ``ZepNotFoundError`` and
    ``ZepConflictError`` rather than on error text.
    """

    def __init__(self, config: ZepConfig, client: Any = None):
        """
        Initialize the Zep client.

        Args:
            config: ZepConfig instance with credentials
            client: Pre-built SDK client (mainly for tests)
        """
        self.config = config
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            if not self.config.api_key:
                raise ZepError('Zep Cloud is not configured. Please set ZEP_API_KEY environment variable.')

            from zep_cloud.client import AsyncZep

            kwargs = {'api_key': self.config.api_key}
            if self.config.base_url:
                kwargs['base_url'] = self.config.base_url
            self._client = AsyncZep(**kwargs)
            logger.info('Initialized Zep Cloud client')
        return self._client

    @translate_errors
    async def get_user(self, user_id: str) -> Any:
        return await self.client.user.get(user_id)

    @translate_errors
    async def add_user(self,
                       user_id: str,
                       email: str,
                       first_name: Optional[str] = None,
                       last_name: Optional[str] = None) -> Any:
        return await self.client.user.add(user_id=user_id, email=email, first_name=first_name, last_name=last_name)

    @translate_errors
    async def update_user(self,
                          user_id: str,
                          email: str,
                          first_name: Optional[str] = None,
                          last_name: Optional[str] = None) -> Any:
        return await self.client.user.update(user_id, email=email, first_name=first_name, last_name=last_name)

    @translate_errors
    async def get_session(self, session_id: str) -> Any:
        return await self.client.memory.get_session(session_id)

    @translate_errors
    async def add_session(self, user_id: str, session_id: str) -> Any:
        return await self.client.memory.add_session(session_id=session_id, user_id=user_id)

    @translate_errors
    async def add_messages(self, session_id: str, messages: List[RemoteMessage], return_context: Optional[bool] = None) -> Any:
        """
        Ingest a batch of messages into a session.

        Args:
            session_id: Target session
            messages: Adapted messages
            return_context: Ask the service to return a context string with the response

        Returns:
            The SDK's add-memory response
        """
        from zep_cloud.types import Message

        zep_messages = [
            Message(role_type=message.role, content=message.content, metadata=message.metadata)
            for message in messages
        ]
        kwargs = {'messages': zep_messages}
        if return_context is not None:
            kwargs['return_context'] = return_context
        return await self.client.memory.add(session_id, **kwargs)

    @translate_errors
    async def get_session_messages(self, session_id: str, limit: int = 20) -> List[ChatMessage]:
        response = await self.client.memory.get_session_messages(session_id, limit=limit)
        return [
            ChatMessage(role=getattr(message, 'role_type', None) or 'assistant', content=message.content)
            for message in (getattr(response, 'messages', None) or [])
        ]

    @translate_errors
    async def search_graph(self, user_id: str, query: str, scope: str, limit: int, reranker: str) -> Dict[str, List[Dict]]:
        """
        Search a user's knowledge graph.

        Args:
            user_id: Remote user ID
            query: Search query (the service rejects queries over 255 characters)
            scope: ``edges`` for facts or ``nodes`` for entities
            limit: Maximum number of results
            reranker: Reranking strategy

        Returns:
            Dict with ``edges`` and ``nodes`` lists of plain dicts; both keys are always present
        """
        results = await self.client.graph.search(user_id=user_id,
                                                 query=query,
                                                 scope=scope,
                                                 limit=limit,
                                                 reranker=reranker)
        edges = getattr(results, 'edges', None) or []
        nodes = getattr(results, 'nodes', None) or []
        logger.debug(f'Graph search ({scope}) returned {len(edges)} edges and {len(nodes)} nodes')
        return {'edges': [_edge_to_dict(edge) for edge in edges], 'nodes': [_node_to_dict(node) for node in nodes]}

    @translate_errors
    async def add_graph_data(self, user_id: str, data: str, data_type: str = 'text') -> Any:
        return await self.client.graph.add(user_id=user_id, data=data, type=data_type)

    @translate_errors
    async def set_entity_types(self, entity_types: List[EntityTypeDefinition]) -> Any:
        from zep_cloud.types import EntityProperty, EntityType

        payload = [
            EntityType(name=definition.name,
                       description=definition.description,
                       properties=[
                           EntityProperty(name=attr.name,
                                          type=PROPERTY_TYPES.get(attr.type, 'Text'),
                                          description=attr.description) for attr in definition.attributes
                       ]) for definition in entity_types
        ]
        return await self.client.graph.set_entity_types_internal(entity_types=payload)

    async def health_check(self) -> bool:
        """
        Perform a health check on the Zep service.

        Returns:
            True if the service answered, False otherwise
        """
        try:
            await self.get_user(HEALTH_CHECK_USER_ID)
            return True
        except ZepNotFoundError:
            return True
        except ZepError as e:
            logger.error(f'Zep health check failed: {e}')
            return False
