"""
Ingestion pipeline: raw office documents → topic-grouped chunk collections.

Stages per document
-------------------
    extract   DOCX / PPTX → Section[]      (XLSX → glossary.json / tags.json)
    classify  (filename, text) → (topic, market)
    chunk     Section → KnowledgeChunk[] under the mode's character cap
    write     one ``<topic>_sop.json`` per topic, sorted by market then title

A document that cannot be read is logged, recorded in the report and
skipped; the batch always finishes.

Usage
-----
    from qcbuddy.ingest import ingest

    report = ingest(Path("knowledge_raw"), mode="smart", out_dir=Path("knowledge"))
    print(report.chunks_written)
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from qcbuddy.chunking.sentence_chunker import SentenceChunker
from qcbuddy.core.config import Config
from qcbuddy.core.exceptions import ValidationError
from qcbuddy.core.logging import PipelineLogger, get_logger
from qcbuddy.core.models import KnowledgeChunk, Topic
from qcbuddy.ingest import xlsx_extractor
from qcbuddy.ingest.classifier import classify
from qcbuddy.ingest.docx_extractor import DocxExtractor
from qcbuddy.ingest.pptx_extractor import PptxExtractor
from qcbuddy.ingest.xlsx_extractor import WorkbookKind

logger = get_logger(__name__)

GLOSSARY_FILE = "glossary.json"
TAGS_FILE = "tags.json"


def topic_filename(topic: Topic) -> str:
    """Collection filename for a topic label."""
    return f"{topic.value}_sop.json"


@dataclass
class IngestReport:
    """Outcome of one ingestion run."""

    raw_dir: Path
    out_dir: Path
    mode: str
    files_seen: int = 0
    sections: int = 0
    chunks_per_file: Dict[str, int] = field(default_factory=dict)
    skipped: Dict[str, str] = field(default_factory=dict)  # filename -> reason
    glossary_counts: Dict[str, int] = field(default_factory=dict)
    tag_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def chunks_written(self) -> int:
        return sum(self.chunks_per_file.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "raw_dir": str(self.raw_dir),
            "out_dir": str(self.out_dir),
            "mode": self.mode,
            "files_seen": self.files_seen,
            "sections": self.sections,
            "chunks_per_file": dict(self.chunks_per_file),
            "chunks_written": self.chunks_written,
            "skipped": dict(self.skipped),
            "glossary_counts": dict(self.glossary_counts),
            "tag_counts": dict(self.tag_counts),
        }


class IngestionPipeline:
    """Builds the knowledge collections from a directory of raw documents."""

    def __init__(self, config: Optional[Config] = None, mode: Optional[str] = None) -> None:
        self.config = config or Config()
        self.mode = (mode or self.config.ingest.mode).lower()
        if self.mode not in ("smart", "full"):
            raise ValidationError(f"Unknown ingest mode: {self.mode!r} (use smart or full)")
        self.chunker = SentenceChunker(self.config.ingest.max_chars(self.mode))
        self.extractors = [DocxExtractor(), PptxExtractor()]
        self.supported_formats = {s.lower() for s in self.config.ingest.supported_formats}

    def discover(self, raw_dir: Path) -> List[Path]:
        """Supported files under raw_dir, recursively, in sorted path order."""
        return sorted(
            p
            for p in raw_dir.rglob("*")
            if p.is_file()
            and p.suffix.lower() in self.supported_formats
            and not p.name.startswith("~$")
        )

    def run(self, raw_dir: Path, out_dir: Path) -> IngestReport:
        """Process every document under raw_dir and write collections to out_dir."""
        report = IngestReport(raw_dir=raw_dir, out_dir=out_dir, mode=self.mode)
        raw_dir.mkdir(parents=True, exist_ok=True)
        out_dir.mkdir(parents=True, exist_ok=True)

        files = self.discover(raw_dir)
        report.files_seen = len(files)
        if not files:
            logger.warning("No documents found", raw_dir=str(raw_dir))
            return report

        buckets: Dict[Topic, List[KnowledgeChunk]] = {}
        for file_path in files:
            if xlsx_extractor.can_process(file_path):
                self._process_workbook(file_path, out_dir, report)
                continue
            for chunk in self._process_document(file_path, report):
                buckets.setdefault(chunk.topic, []).append(chunk)

        for topic, chunks in buckets.items():
            name = topic_filename(topic)
            write_collection(out_dir / name, chunks)
            report.chunks_per_file[name] = len(chunks)
            logger.info("Wrote collection", file=name, chunks=len(chunks))

        logger.info(
            "Ingestion finished",
            mode=self.mode,
            files=report.files_seen,
            chunks=report.chunks_written,
            skipped=len(report.skipped),
        )
        return report

    def _process_document(self, file_path: Path, report: IngestReport) -> List[KnowledgeChunk]:
        plog = PipelineLogger(file_path.name)
        extractor = next((e for e in self.extractors if e.can_process(file_path)), None)
        if extractor is None:
            return []

        try:
            plog.start_stage("extract")
            sections = extractor.extract(file_path)
        except Exception as e:
            # Any unreadable document is skipped, never fatal for the batch
            report.skipped[file_path.name] = str(e)
            plog.finish(success=False, error=str(e))
            return []

        chunks: List[KnowledgeChunk] = []
        plog.start_stage("chunk")
        for section in sections:
            topic, market = classify(file_path.name, section.text)
            chunks.extend(self.chunker.chunk(section, topic, market))

        report.sections += len(sections)
        plog.finish(success=True, chunks=len(chunks))
        return chunks

    def _process_workbook(self, file_path: Path, out_dir: Path, report: IngestReport) -> None:
        kind = xlsx_extractor.workbook_kind(file_path)
        if kind is WorkbookKind.UNKNOWN:
            logger.info("Workbook name not recognized, skipping", file=file_path.name)
            report.skipped[file_path.name] = "unrecognized workbook name"
            return

        try:
            rows = xlsx_extractor.read_rows(file_path)
        except Exception as e:
            report.skipped[file_path.name] = str(e)
            logger.warning("Skipping workbook", file=file_path.name, error=str(e))
            return

        if kind is WorkbookKind.GLOSSARY:
            glossary = xlsx_extractor.build_glossary(rows)
            _write_json(
                out_dir / GLOSSARY_FILE,
                {m: [e.to_dict() for e in entries] for m, entries in glossary.items()},
            )
            report.glossary_counts = {m: len(v) for m, v in glossary.items()}
            logger.info("Wrote glossary", **report.glossary_counts)
        else:
            tags = xlsx_extractor.build_tag_definitions(rows)
            _write_json(
                out_dir / TAGS_FILE,
                {k: [d.to_dict() for d in defs] for k, defs in tags.items()},
            )
            report.tag_counts = {k: len(v) for k, v in tags.items()}
            logger.info("Wrote tags", **report.tag_counts)


def write_collection(path: Path, chunks: List[KnowledgeChunk]) -> None:
    """Write chunks stably sorted by market then title."""
    ordered = sorted(chunks, key=lambda c: (c.market.value, c.title))
    _write_json(path, [c.to_dict() for c in ordered])


def _write_json(path: Path, data: Any) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def ingest(
    source_directory: Union[str, Path],
    mode: str = "smart",
    out_dir: Optional[Union[str, Path]] = None,
    config: Optional[Config] = None,
) -> IngestReport:
    """Build chunk collections from source_directory (the offline build step)."""
    config = config or Config()
    target = Path(out_dir) if out_dir is not None else config.knowledge_path
    return IngestionPipeline(config, mode=mode).run(Path(source_directory), target)
