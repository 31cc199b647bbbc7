"""
Retrieval configuration.

Provides the ranking weights and answer-assembly limits. The weights are
tunable: only their relative ordering is relied upon (an exact market
match outranks a broad one, a topic match outranks none).
"""

from dataclasses import dataclass, field


@dataclass
class RankingWeights:
    """Per-signal weights for the heuristic ranker."""

    distance_base: int = 60  # Score = max(0, base - edit distance)
    lexical_similarity: float = 0.75  # 1 - distance / length needed for lexical relevance
    prefix_chars: int = 300  # Chunk prefix compared by edit distance
    keyword_weight: float = 4.0  # Per shared query token
    market_exact: float = 40.0
    market_broad: float = 10.0  # AUTO query or ALL chunk
    topic_match: float = 20.0
    terminal_punct_bonus: float = 3.0
    policy_keyword_bonus: float = 2.0


@dataclass
class RetrievalConfig:
    """Retrieval and answer assembly configuration."""

    top_k: int = 12  # Ranked chunks considered for the synthesized answer
    max_sources: int = 3
    max_answer_lines: int = 3
    min_relevance: float = 0.0  # Query-dependent score must exceed this
    context_chars: int = 1200  # Per-source cap in the grounded prompt
    weights: RankingWeights = field(default_factory=RankingWeights)
