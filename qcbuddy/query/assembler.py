"""
Answer Assembler - synthesized answer and sources from a ranked list.

Ranking orders every chunk; assembly decides what is shown:

    ranked ──→ top-K above threshold ──→ dedup by normalized key ──→ ≤3 lines
           └─→ top 3 above threshold ──→ sources (grounded context)

An empty corpus, or no chunk above the relevance threshold, yields the
fixed refusal and no sources. The generator is never called in that case.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from qcbuddy.core.config.retrieval import RetrievalConfig
from qcbuddy.core.models import KnowledgeChunk, MarketPreference, RankedChunk
from qcbuddy.retrieval.ranker import Ranker
from qcbuddy.shared.text_utils import normalize_key, normalize_whitespace, strip_meta_refs

REFUSAL_TEXT = "I don't have this in the SOP."


@dataclass
class Answer:
    """Synthesized answer and the chunks it is grounded on."""

    text: str
    sources: List[KnowledgeChunk] = field(default_factory=list)

    @property
    def is_refusal(self) -> bool:
        return not self.sources


def relevant(ranked: Sequence[RankedChunk], min_relevance: float) -> List[RankedChunk]:
    """Ranked chunks whose query-dependent score exceeds the threshold."""
    return [r for r in ranked if r.relevance > min_relevance]


def distinct_lines(ranked: Sequence[RankedChunk], limit: int) -> List[str]:
    """
    First `limit` distinct chunk texts in rank order.

    Duplicates are detected on the normalized key, so lines differing only
    in case or punctuation collapse to the first occurrence.
    """
    lines: List[str] = []
    seen: set[str] = set()
    for item in ranked:
        line = normalize_whitespace(strip_meta_refs(item.chunk.text))
        key = normalize_key(line)
        if not key or key in seen:
            continue
        seen.add(key)
        lines.append(line)
        if len(lines) >= limit:
            break
    return lines


def render_lines(lines: Sequence[str]) -> str:
    """Bulleted answer text."""
    return "\n".join(f"• {line}" for line in lines)


def assemble(ranked: Sequence[RankedChunk], config: Optional[RetrievalConfig] = None) -> Answer:
    """Build the synthesized answer from an already ranked list."""
    config = config or RetrievalConfig()
    candidates = relevant(ranked[: config.top_k], config.min_relevance)
    if not candidates:
        return Answer(text=REFUSAL_TEXT)

    lines = distinct_lines(candidates, config.max_answer_lines)
    if not lines:
        return Answer(text=REFUSAL_TEXT)

    sources = [r.chunk for r in candidates[: config.max_sources]]
    return Answer(text=render_lines(lines), sources=sources)


def build_answer(
    question: str,
    chunks: Sequence[KnowledgeChunk],
    market: Union[str, MarketPreference] = MarketPreference.AUTO,
    config: Optional[RetrievalConfig] = None,
    ranker: Optional[Ranker] = None,
) -> Answer:
    """Rank chunks for the question and assemble the synthesized answer."""
    config = config or RetrievalConfig()
    if not chunks or not (question or "").strip():
        return Answer(text=REFUSAL_TEXT)
    ranker = ranker or Ranker(config.weights)
    return assemble(ranker.rank(question, chunks, market), config)
