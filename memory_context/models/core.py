"""
Core data models for the memory context layer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

SearchScope = Literal['nodes', 'edges']
RerankerType = Literal['cross_encoder', 'rrf', 'mmr', 'episode_mentions']
OverflowStrategy = Literal['truncate', 'split', 'fail']
DataType = Literal['text', 'json', 'message']


@dataclass
class UserMemory:
    """A principal for memory operations.

    ``(workspace_id, user_id)`` is the identity; email and names are profile
    data forwarded to the remote user record on every upsert.
    """
    user_id: str
    workspace_id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


@dataclass
class ChatMessage:
    """A chat message from the upstream conversation.

    ``content`` is usually a string; structured or multimodal content (lists of
    blocks) is accepted here and dropped during adaptation.
    """
    role: str  # human, user, ai, assistant, system, tool ...
    content: Any


@dataclass
class RemoteMessage:
    """A message in the remote memory service's schema."""
    role: str  # user | assistant
    content: str
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Fact:
    """A relationship edge returned by graph search."""
    fact: str
    confidence: float
    source: str


@dataclass
class EntityRecord:
    """An entity node returned by graph search."""
    id: str
    name: str
    type: str
    summary: str
    attributes: Optional[Dict[str, Any]] = None


@dataclass
class SearchResult:
    """Merged facts and entities; both lists are always present."""
    facts: List[Fact] = field(default_factory=list)
    entities: List[EntityRecord] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.facts and not self.entities
