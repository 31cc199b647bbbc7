"""
Multi-signal heuristic ranker.

Scores every chunk against a question and a market preference:

    lexical    max(0, base - edit_distance(question, chunk prefix))
    keyword    shared non-stop-word tokens x weight
    market     exact match bonus, smaller bonus for AUTO queries / ALL chunks
    topic      bonus when the question's topic equals the chunk's topic
    shape      small bonuses for terminated, policy-worded sentences

The sort is stable, so ties keep corpus order.
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set, Union

from qcbuddy.core.config.retrieval import RankingWeights
from qcbuddy.core.models import KnowledgeChunk, MarketPreference, RankedChunk, Topic
from qcbuddy.ingest.classifier import classify_query
from qcbuddy.shared.text_utils import levenshtein_distance, tokenize

_POLICY_TERMS = re.compile(
    r"\b(?:must|should|required|avoid|do not|don[’']t|never|always)\b", re.IGNORECASE
)
_TERMINAL = re.compile(r"[.!?]\s*$")

STOP_WORDS: Set[str] = {
    "a", "an", "the", "is", "are", "was", "were", "be", "been", "do", "does",
    "did", "can", "could", "should", "would", "will", "shall", "may", "to",
    "of", "in", "on", "for", "and", "or", "with", "at", "by", "from", "as",
    "it", "its", "this", "that", "these", "those", "i", "we", "you", "my",
    "our", "your", "what", "which", "who", "how", "when", "where", "why",
    "there", "any", "me", "us", "about",
}


@dataclass
class QuerySignals:
    """Per-query values computed once and reused for every chunk."""

    text: str
    tokens: Set[str]
    topic: Topic
    market: MarketPreference


class Ranker:
    """Ranks knowledge chunks for a question."""

    def __init__(self, weights: Optional[RankingWeights] = None) -> None:
        self.weights = weights or RankingWeights()

    def prepare(self, question: str, market: Union[str, MarketPreference]) -> QuerySignals:
        text = (question or "").strip().lower()
        return QuerySignals(
            text=text,
            tokens={t for t in tokenize(text) if t not in STOP_WORDS},
            topic=classify_query(text),
            market=MarketPreference.parse(market),
        )

    def score(self, query: QuerySignals, chunk: KnowledgeChunk) -> RankedChunk:
        """Score a single chunk; returns total score and its query-dependent part."""
        signals = self.signals(query, chunk)
        return RankedChunk(
            chunk=chunk,
            score=sum(signals.values()),
            relevance=self.relevance(query, chunk, signals),
        )

    def relevance(
        self, query: QuerySignals, chunk: KnowledgeChunk, signals: Dict[str, float]
    ) -> float:
        """
        Evidence that a chunk actually answers the question.

        Keyword hits always count. A topic match counts only for a non-misc
        question, and the lexical score only when the edit distance is small
        relative to the compared length. A question sharing nothing with the
        chunk scores zero however close the two lengths are.
        """
        w = self.weights
        relevance = signals["keyword"]
        if query.topic is not Topic.MISC:
            relevance += signals["topic"]

        lexical = signals["lexical"]
        if lexical > 0:
            distance = w.distance_base - lexical
            longest = max(len(query.text[: w.prefix_chars]), len(chunk.text[: w.prefix_chars]))
            if longest and 1 - distance / longest >= w.lexical_similarity:
                relevance += lexical
        return relevance

    def signals(self, query: QuerySignals, chunk: KnowledgeChunk) -> Dict[str, float]:
        """Individual signal contributions for one chunk."""
        w = self.weights
        text = chunk.text.lower()
        prefix = text[: w.prefix_chars]

        distance = levenshtein_distance(query.text[: w.prefix_chars], prefix)
        lexical = float(max(0, w.distance_base - distance))

        hits = len(query.tokens.intersection(tokenize(text))) if query.tokens else 0
        keyword = hits * w.keyword_weight

        market = 0.0
        if chunk.market.value == query.market.value:
            market = w.market_exact
        elif query.market is MarketPreference.AUTO or chunk.market.value == "ALL":
            market = w.market_broad

        topic = 0.0
        if chunk.topic is query.topic:
            topic = w.topic_match

        shape = 0.0
        if _TERMINAL.search(chunk.text):
            shape += w.terminal_punct_bonus
        if _POLICY_TERMS.search(chunk.text):
            shape += w.policy_keyword_bonus

        return {
            "lexical": lexical,
            "keyword": keyword,
            "market": market,
            "topic": topic,
            "shape": shape,
        }

    def rank(
        self,
        question: str,
        chunks: Iterable[KnowledgeChunk],
        market: Union[str, MarketPreference] = MarketPreference.AUTO,
    ) -> List[RankedChunk]:
        """All chunks scored and sorted by descending score (stable on ties)."""
        query = self.prepare(question, market)
        scored = [self.score(query, chunk) for chunk in chunks]
        return sorted(scored, key=lambda r: r.score, reverse=True)


def rank(
    question: str,
    chunks: Iterable[KnowledgeChunk],
    market: Union[str, MarketPreference] = MarketPreference.AUTO,
    weights: Optional[RankingWeights] = None,
) -> List[RankedChunk]:
    """Convenience wrapper around Ranker.rank."""
    return Ranker(weights).rank(question, chunks, market)
