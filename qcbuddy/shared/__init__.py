"""
Shared utilities for QC Buddy.

Sits between Core (config, logging, errors) and the feature modules
(ingest, chunking, storage, retrieval, query):

**text_utils**
    Whitespace normalization, sentence splitting, tokenization, dedup keys,
    edit distance and document-reference stripping.
"""
