"""
Enrichment helpers for menu QA.

Currently: cuisine tag suggestion from tag definitions (tags.json) with
built-in fallbacks, and validation of generated suggestions.
"""

from qcbuddy.enrichment.tag_suggester import (
    FALLBACK_DEFINITIONS,
    TagSuggestion,
    build_tag_prompt,
    parse_generated_suggestion,
    suggest_tags,
)

__all__ = [
    "FALLBACK_DEFINITIONS",
    "TagSuggestion",
    "build_tag_prompt",
    "parse_generated_suggestion",
    "suggest_tags",
]
