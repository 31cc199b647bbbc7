"""
Knowledge Store - in-memory chunk corpus with explicit lifecycle.

The store is constructed once by its owner (CLI command, API app, test),
loads lazily on first access, and is refreshed only by an explicit
``reload()``. There is no module-level cache.

Scan rules
----------
- Candidate directories are scanned in configured order; inside a
  directory, ``*.json`` files are read in sorted filename order.
- A file reached twice (same resolved path) is read once.
- ``glossary.json`` and ``tags.json`` are side files, not collections.
- Unparseable files are logged and skipped. An empty corpus is valid.

Example
-------
    store = KnowledgeStore(config)
    print(len(store))            # loads on first access
    store.reload()               # after re-running ingestion
"""

import random
import threading
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from qcbuddy.core.config import Config
from qcbuddy.core.exceptions import CollectionFormatError
from qcbuddy.core.logging import get_logger
from qcbuddy.core.models import GlossaryEntry, KnowledgeChunk, TagDefinition
from qcbuddy.storage.collection_parser import load_json, read_collection
from qcbuddy.storage.filters import filter_fragments

logger = get_logger(__name__)

GLOSSARY_FILE = "glossary.json"
TAGS_FILE = "tags.json"


class KnowledgeStore:
    """Owns the loaded chunk list for its lifetime."""

    def __init__(
        self,
        config: Optional[Config] = None,
        directories: Optional[Sequence[Path]] = None,
    ) -> None:
        self.config = config or Config()
        self.directories: List[Path] = (
            [Path(d) for d in directories]
            if directories is not None
            else self.config.knowledge_paths
        )
        self._exclude = {name.lower() for name in self.config.knowledge.exclude_files}
        self._chunks: Optional[List[KnowledgeChunk]] = None
        self._skipped: Dict[str, str] = {}
        self._lock = threading.Lock()

    @property
    def chunks(self) -> List[KnowledgeChunk]:
        """All loaded chunks, loading on first access."""
        if self._chunks is None:
            return self.load()
        return self._chunks

    @property
    def is_loaded(self) -> bool:
        return self._chunks is not None

    @property
    def skipped_files(self) -> Dict[str, str]:
        """Files skipped by the last load, with the reason."""
        return dict(self._skipped)

    def __len__(self) -> int:
        return len(self.chunks)

    def load(self) -> List[KnowledgeChunk]:
        """Load once; later calls return the cached list."""
        with self._lock:
            if self._chunks is None:
                self._chunks = self._scan()
            return self._chunks

    def reload(self) -> List[KnowledgeChunk]:
        """Discard the cached list and scan the directories again."""
        with self._lock:
            self._chunks = self._scan()
            return self._chunks

    def _collection_files(self) -> List[Path]:
        files: List[Path] = []
        seen: set[Path] = set()
        for directory in self.directories:
            if not directory.is_dir():
                continue
            for path in sorted(directory.iterdir(), key=lambda p: p.name):
                if not path.is_file() or path.suffix.lower() != ".json":
                    continue
                if path.name.lower() in self._exclude:
                    continue
                resolved = path.resolve()
                if resolved in seen:
                    continue
                seen.add(resolved)
                files.append(path)
        return files

    def _scan(self) -> List[KnowledgeChunk]:
        results: List[KnowledgeChunk] = []
        self._skipped = {}
        prefer_rules = self.config.knowledge.prefer_rule_like

        for path in self._collection_files():
            parsed = read_collection(path)
            if not parsed.ok:
                self._skipped[str(path)] = parsed.error or "unparseable"
                logger.warning("Skipping unparseable collection", file=str(path), error=parsed.error)
                continue
            chunks = filter_fragments(parsed.chunks, prefer_rule_like=prefer_rules)
            logger.debug(
                "Loaded collection",
                file=path.name,
                shape=parsed.shape.value,
                chunks=len(chunks),
            )
            results.extend(chunks)

        logger.info(
            "Loaded knowledge",
            chunks=len(results),
            directories=len(self.directories),
            skipped=len(self._skipped),
        )
        return results

    def sample(self, n: int = 5, seed: Optional[int] = None) -> List[KnowledgeChunk]:
        """First n chunks, or a random sample when a seed is given."""
        chunks = self.chunks
        if seed is None:
            return chunks[:n]
        rng = random.Random(seed)
        return rng.sample(chunks, min(n, len(chunks)))

    def stats(self) -> Dict[str, Any]:
        """Chunk counts per topic and per market."""
        chunks = self.chunks
        return {
            "chunks": len(chunks),
            "by_topic": dict(Counter(c.topic.value for c in chunks)),
            "by_market": dict(Counter(c.market.value for c in chunks)),
            "skipped_files": len(self._skipped),
        }

    def _find_side_file(self, name: str) -> Optional[Path]:
        for directory in self.directories:
            candidate = directory / name
            if candidate.is_file():
                return candidate
        return None

    def _read_side_file(self, name: str) -> Dict[str, Any]:
        path = self._find_side_file(name)
        if path is None:
            return {}
        try:
            data = load_json(path)
        except CollectionFormatError as e:
            logger.warning("Ignoring unreadable side file", file=str(path), error=str(e))
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring side file with unexpected shape", file=str(path))
            return {}
        return data

    def load_tag_definitions(self) -> Dict[str, List[TagDefinition]]:
        """Cuisine and extra tag definitions from tags.json."""
        data = self._read_side_file(TAGS_FILE)
        result: Dict[str, List[TagDefinition]] = {"cuisine": [], "extra": []}
        for kind in result:
            for item in data.get(kind) or []:
                if isinstance(item, dict):
                    definition = TagDefinition.from_dict(item)
                    if definition.tag:
                        result[kind].append(definition)
        return result

    def load_glossary(self) -> Dict[str, List[GlossaryEntry]]:
        """Bilingual glossary entries per market from glossary.json."""
        data = self._read_side_file(GLOSSARY_FILE)
        result: Dict[str, List[GlossaryEntry]] = {}
        for market, entries in data.items():
            if not isinstance(entries, list):
                continue
            result[str(market).upper()] = [
                GlossaryEntry(en=str(e.get("en", "")), ar=str(e.get("ar", "")))
                for e in entries
                if isinstance(e, dict) and e.get("en") and e.get("ar")
            ]
        return result
