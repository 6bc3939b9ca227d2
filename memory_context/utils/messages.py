"""
Adapters between upstream chat messages and the remote memory message schema.
"""

from typing import Any, Iterable, List, Optional, Union

from ..models.core import ChatMessage, RemoteMessage
from .logging_config import get_logger
from .timestamp_utils import utc_isoformat

logger = get_logger(__name__)

USER_ROLES = ('human', 'user')

MessageLike = Union[ChatMessage, RemoteMessage, dict]


def _role_of(message: Any) -> str:
    if isinstance(message, dict):
        return message.get('role') or message.get('type') or ''
    return getattr(message, 'role', '') or ''


def _content_of(message: Any) -> Any:
    if isinstance(message, dict):
        return message.get('content')
    return getattr(message, 'content', None)


def to_remote_message(message: MessageLike) -> Optional[RemoteMessage]:
    """Convert a chat message to the remote schema.

    Returns None, with a warning, for messages whose content is not plain text.
    Every role other than human/user collapses to ``assistant``.
    """
    content = _content_of(message)
    if not isinstance(content, str):
        logger.warning(f'Non-string message content, skipping: {content!r}')
        return None

    message_type = _role_of(message)
    return RemoteMessage(role='user' if message_type in USER_ROLES else 'assistant',
                         content=content,
                         metadata={
                             'timestamp': utc_isoformat(),
                             'message_type': message_type
                         })


def adapt_messages(messages: Iterable[MessageLike]) -> List[RemoteMessage]:
    """Convert a list of chat messages, dropping the ones that are not text."""
    converted = (to_remote_message(message) for message in messages)
    return [message for message in converted if message is not None]


def derive_query(messages: List[RemoteMessage]) -> str:
    """Build a search query from the conversation.

    Uses the most recent user message, falling back to the last message of any
    role, or an empty string for an empty conversation.
    """
    if not messages:
        return ''

    last_user = next((m for m in reversed(messages) if m.role == 'user'), None)
    if last_user is not None and last_user.content:
        return last_user.content

    return messages[-1].content or ''
