"""
Text renderings of graph search results for LLM prompts and tool replies.
"""

import json
from typing import Any, Dict, List, Optional

from ..models.core import SearchResult

CONTEXT_PREAMBLE = ("Below are memories from past conversations with this user. "
                    "You can use the below memories to help answer the user's question:")


def format_attributes(attrs: Optional[Dict[str, Any]]) -> str:
    """Render entity attributes as indented ``- key: value`` lines."""
    if not attrs:
        return ''
    return '\n'.join(f'  - {key}: {value}' for key, value in attrs.items())


def _format_labels(labels: Any) -> str:
    if isinstance(labels, (list, tuple)):
        return ','.join(str(label) for label in labels)
    return '' if labels is None else str(labels)


def build_context_block(edges: List[Dict[str, Any]], nodes: List[Dict[str, Any]]) -> Optional[str]:
    """Assemble the memory context block injected into a prompt.

    Facts are listed without confidence; the tool digest shows it.

    Args:
        edges: Normalized edge dicts from an ``edges`` scoped search
        nodes: Normalized node dicts from a ``nodes`` scoped search

    Returns:
        The trimmed block, or None when there is nothing to show
    """
    if not edges and not nodes:
        return None

    lines = [CONTEXT_PREAMBLE, '<FACTS>']
    lines.extend(f"- {edge.get('fact')}" for edge in edges)
    lines.append('</FACTS>')

    lines.append('<ENTITIES>')
    for node in nodes:
        lines.append(f"Entity ID: {node.get('uuid')}")
        lines.append(f"Name: {node.get('name')}")
        lines.append(f"Labels: {_format_labels(node.get('labels'))}")
        lines.append(f"Summary: {node.get('summary')}")
        if node.get('attributes'):
            lines.append(f"Attributes:\n{format_attributes(node['attributes'])}")
        lines.append('\n')
    lines.append('</ENTITIES>')

    return '\n'.join(lines).strip() or None


def format_search_digest(result: SearchResult) -> Optional[str]:
    """Digest of a search result for the search tool; None when the result is empty."""
    if result.is_empty():
        return None

    response = 'Memory search results:\n\n'

    if result.facts:
        response += 'FACTS:\n'
        for index, fact in enumerate(result.facts, start=1):
            response += f'{index}. {fact.fact} (confidence: {fact.confidence:.2f})\n'
        response += '\n'

    if result.entities:
        response += 'ENTITIES:\n'
        for index, entity in enumerate(result.entities, start=1):
            response += f'{index}. {entity.name} ({entity.type})\n'
            response += f'   Summary: {entity.summary}\n'
            if entity.attributes:
                response += f'   Attributes: {json.dumps(entity.attributes, default=str)}\n'
            response += '\n'

    return response


def format_memory_results(result: Optional[SearchResult]) -> str:
    """Human-readable listing of search results with percentage confidences."""
    if result is None or result.is_empty():
        return 'No relevant memories found.'

    formatted = 'Memory search results:\n\n'

    if result.facts:
        formatted += 'FACTS:\n'
        for index, fact in enumerate(result.facts, start=1):
            formatted += f'{index}. {fact.fact}\n'
            if fact.confidence:
                formatted += f'   Confidence: {fact.confidence * 100:.1f}%\n'
        formatted += '\n'

    if result.entities:
        formatted += 'ENTITIES:\n'
        for index, entity in enumerate(result.entities, start=1):
            formatted += f'{index}. {entity.name} ({entity.type})\n'
            if entity.summary:
                formatted += f'   Summary: {entity.summary}\n'
            if entity.attributes:
                formatted += f'   Attributes: {json.dumps(entity.attributes, default=str)}\n'

    return formatted
