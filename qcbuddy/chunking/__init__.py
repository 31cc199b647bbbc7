"""
Chunking Module for Sentence-Bounded Splitting.

Pipeline stage between classification and persistence:

    ┌─────────────────┐     ┌─────────────────┐     ┌─────────────────┐
    │ Classified      │────→│  Sentence       │────→│ KnowledgeChunks │
    │ Section         │     │  Chunker        │     │ (≤ cap chars)   │
    └─────────────────┘     └─────────────────┘     └─────────────────┘

**SentenceChunker**
    Accumulates whole sentences under a character cap (1200 in smart mode,
    3000 in full mode). The cap is soft: a single sentence longer than the
    cap stays whole.
"""

from qcbuddy.chunking.sentence_chunker import SentenceChunker, split_by_sentences

__all__ = ["SentenceChunker", "split_by_sentences"]
