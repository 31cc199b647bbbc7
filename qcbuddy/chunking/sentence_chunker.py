"""Sentence-bounded chunking under a character cap."""

from typing import List

from qcbuddy.core.exceptions import ChunkingError
from qcbuddy.core.models import KnowledgeChunk, Market, Section, Topic
from qcbuddy.shared.text_utils import split_into_sentences


def split_by_sentences(text: str, max_chars: int) -> List[str]:
    """
    Pack consecutive sentences into pieces of at most max_chars.

    When appending the next sentence would exceed the cap, the buffer is
    flushed and the sentence starts a new piece. A sentence longer than
    the cap becomes a piece of its own.

    Raises:
        ChunkingError: If max_chars is not positive
    """
    if max_chars <= 0:
        raise ChunkingError(f"max_chars must be positive, got {max_chars}")

    parts: List[str] = []
    buf = ""
    for sentence in split_into_sentences(text):
        candidate = f"{buf} {sentence}" if buf else sentence
        if len(candidate) > max_chars and buf:
            parts.append(buf)
            buf = sentence
        else:
            buf = candidate
    if buf:
        parts.append(buf)
    return parts


class SentenceChunker:
    """Turns classified sections into size-bounded knowledge chunks."""

    def __init__(self, max_chars: int = 1200) -> None:
        if max_chars <= 0:
            raise ChunkingError(f"max_chars must be positive, got {max_chars}")
        self.max_chars = max_chars

    def chunk(self, section: Section, topic: Topic, market: Market) -> List[KnowledgeChunk]:
        """
        Chunk one section.

        Text within the cap is kept as a single chunk with the section
        title. Longer text is split and every piece is titled
        ``<title> (part N)``, N starting at 1 in split order.
        """
        text = section.text.strip()
        if not text:
            return []

        if len(text) <= self.max_chars:
            return [KnowledgeChunk(title=section.title, text=text, market=market, topic=topic)]

        parts = split_by_sentences(text, self.max_chars)
        if len(parts) == 1:
            return [
                KnowledgeChunk(title=section.title, text=parts[0], market=market, topic=topic)
            ]
        return [
            KnowledgeChunk(
                title=f"{section.title} (part {idx})",
                text=part,
                market=market,
                topic=topic,
            )
            for idx, part in enumerate(parts, 1)
        ]
