"""
Chunking helpers for payloads that exceed the graph ingestion limit.
"""

import re
from typing import List

SENTENCE_BOUNDARY = re.compile(r'[.!?]+')


def split_into_chunks(text: str, max_chunk_size: int) -> List[str]:
    """Split text into chunks of whole sentences.

    Text at or under ``max_chunk_size`` is returned untouched. Longer text is
    split on runs of ``.``, ``!`` and ``?``; each sentence is re-terminated
    with a period and sentences are packed greedily. A single sentence longer
    than ``max_chunk_size`` becomes its own oversized chunk.

    Args:
        text: Text to split
        max_chunk_size: Soft upper bound on chunk length in characters

    Returns:
        List of chunks in input order
    """
    if len(text) <= max_chunk_size:
        return [text]

    sentences = [s for s in SENTENCE_BOUNDARY.split(text) if s.strip()]

    chunks = []
    current_chunk = ''
    for sentence in sentences:
        candidate = current_chunk + sentence + '.'
        if len(candidate) <= max_chunk_size:
            current_chunk = candidate
        else:
            if current_chunk:
                chunks.append(current_chunk)
            current_chunk = sentence + '.'

    if current_chunk:
        chunks.append(current_chunk)

    return chunks


def truncate_content(content: str, max_length: int = 10000) -> str:
    """Truncate content to ``max_length`` characters, marking the cut with an ellipsis."""
    if len(content) <= max_length:
        return content
    return content[:max_length - 3] + '...'
