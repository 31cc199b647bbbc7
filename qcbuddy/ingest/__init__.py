"""
Document Ingestion for QC Buddy.

Turns the raw SOP folder into the persisted knowledge collections:

    knowledge_raw/*.docx ──→ docx_extractor ─┐
    knowledge_raw/*.pptx ──→ pptx_extractor ─┼─→ classifier ─→ chunker ─→ <topic>_sop.json
    knowledge_raw/*.xlsx ──→ xlsx_extractor ─┴─→ glossary.json / tags.json

Public API
----------
    from qcbuddy.ingest import ingest, IngestionPipeline, classify
"""

from qcbuddy.ingest.classifier import classify, classify_query
from qcbuddy.ingest.processor import IngestionPipeline, IngestReport, ingest

__all__ = ["ingest", "IngestionPipeline", "IngestReport", "classify", "classify_query"]
