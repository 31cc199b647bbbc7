"""
Text Processing Utilities.

Centralized text normalization used by ingestion, the knowledge store,
the ranker and the answer assembler, so that every stage agrees on what
a sentence, a token and a duplicate line are.

Functions
---------
**normalize_whitespace(text)**
    All whitespace (including non-breaking spaces) becomes single spaces.

**split_into_sentences(text)**
    Boundary is ``.``, ``!`` or ``?`` followed by whitespace and a
    non-space character.

**tokenize(text)**
    Lowercase alphanumeric runs.

**normalize_key(text)**
    Dedup key: lowercase, non-word runs collapsed to one space, trimmed.

**levenshtein_distance(s1, s2)**
    Edit distance, two-row dynamic programming.

**strip_meta_refs(text)**
    Removes "slide 3", "page 12" and office filenames ("menu.pptx").
"""

import re
from typing import List

_WHITESPACE = re.compile(r"\s+")
_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+(?=\S)")
_TOKEN = re.compile(r"[^\W_]+")
_NON_WORD = re.compile(r"[\W_]+")
_META_REF = re.compile(
    r"\bslide\s*\d+\b|\bpage\s*\d+\b|\b\S+\.(?:pptx?|pdf|docx?)\b",
    re.IGNORECASE,
)


def normalize_whitespace(text: str) -> str:
    """Collapse all whitespace to single spaces and trim.

    Examples:
        >>> normalize_whitespace("  Hello\\u00a0\\n  World ")
        'Hello World'
    """
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


def clean_section_text(text: str) -> str:
    """Light cleanup for extracted section text.

    Non-breaking spaces become spaces and runs of two or more whitespace
    characters become one space. Single line breaks are kept so bullet
    lines stay readable in the persisted collections.
    """
    if not text:
        return ""
    text = text.replace("\u00a0", " ")
    return re.sub(r"\s{2,}", " ", text).strip()


def split_into_sentences(text: str) -> List[str]:
    """Split text into sentences, dropping empty pieces.

    Examples:
        >>> split_into_sentences("Use caps. Avoid emojis! Why? ok")
        ['Use caps.', 'Avoid emojis!', 'Why?', 'ok']
    """
    if not text or not text.strip():
        return []
    return [s.strip() for s in _SENTENCE_BOUNDARY.split(text.strip()) if s.strip()]


def tokenize(text: str) -> List[str]:
    """Lowercase alphanumeric tokens in order of appearance."""
    if not text:
        return []
    return _TOKEN.findall(text.lower())


def normalize_key(text: str) -> str:
    """Normalized dedup key for a line of text."""
    if not text:
        return ""
    return _NON_WORD.sub(" ", text.lower()).strip()


def levenshtein_distance(s1: str, s2: str) -> int:
    """Compute Levenshtein edit distance.

    Uses space-optimized DP with two rows.

    Args:
        s1: First string.
        s2: Second string.

    Returns:
        Edit distance.
    """
    len1, len2 = len(s1), len(s2)

    # Shorter string for columns
    if len1 > len2:
        s1, s2 = s2, s1
        len1, len2 = len2, len1

    prev_row = list(range(len1 + 1))
    curr_row = [0] * (len1 + 1)

    for j in range(1, len2 + 1):
        curr_row[0] = j
        for i in range(1, len1 + 1):
            cost = 0 if s1[i - 1] == s2[j - 1] else 1
            curr_row[i] = min(
                prev_row[i] + 1,
                curr_row[i - 1] + 1,
                prev_row[i - 1] + cost,
            )
        prev_row, curr_row = curr_row, prev_row

    return prev_row[len1]


def strip_meta_refs(text: str) -> str:
    """Remove slide/page markers and office filenames, then tidy spacing."""
    if not text:
        return ""
    return normalize_whitespace(_META_REF.sub(" ", text))


def truncate_text(text: str, max_length: int, suffix: str = " …") -> str:
    """Truncate text to max_length characters, appending suffix when cut.

    Examples:
        >>> truncate_text("abcdef", 3)
        'abc …'
    """
    if len(text) <= max_length:
        return text
    return text[:max_length].rstrip() + suffix
