"""
Knowledge storage for QC Buddy.

**collection_parser**
    Tagged-shape parser for ``*_sop.json`` collection files.

**filters**
    Heading and rule-like heuristics applied after parsing.

**KnowledgeStore**
    Explicit, reloadable in-memory corpus.
"""

from qcbuddy.storage.collection_parser import CollectionShape, ParsedCollection, parse_collection, read_collection
from qcbuddy.storage.knowledge_store import KnowledgeStore

__all__ = [
    "KnowledgeStore",
    "CollectionShape",
    "ParsedCollection",
    "parse_collection",
    "read_collection",
]
