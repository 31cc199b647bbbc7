"""
Retrieval for QC Buddy.

The corpus is small enough to score every chunk per query, so retrieval is
a single heuristic ranker over the in-memory store.
"""

from qcbuddy.retrieval.ranker import Ranker, rank

__all__ = ["Ranker", "rank"]
