"""
Identifiers for users, sessions and stored memories in the remote graph.
"""

import re
from typing import Optional

from ..models.core import UserMemory
from .timestamp_utils import to_millis


def remote_user_id(user: UserMemory) -> str:
    """Derive the remote user ID for a (workspace, user) pair.

    The separator is not escaped, so ``("ws_1", "a")`` and ``("ws", "1_a")``
    map to the same ID.
    """
    return f'{user.workspace_id}_{user.user_id}'


def generate_session_id(user_id: str, timestamp: Optional[float] = None) -> str:
    """Generate a session ID for memory operations."""
    return f'session_{user_id}_{to_millis(timestamp)}'


def generate_memory_id(user_id: str, content: str, timestamp: Optional[float] = None) -> str:
    """Generate a memory ID from the user and the start of the stored content."""
    digest = re.sub(r'[^a-zA-Z0-9]', '', content[:8])
    return f'memory_{user_id}_{digest}_{to_millis(timestamp)}'
