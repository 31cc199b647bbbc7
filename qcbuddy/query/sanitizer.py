"""
Answer sanitation.

Generated text is shown to users only after document references, code
blocks and large embedded JSON are removed and the length is capped. If
nothing usable remains the caller keeps the synthesized answer.
"""

import re

MAX_ANSWER_CHARS = 900

_CODE_BLOCK = re.compile(r"```[\s\S]*?```")
_BIG_OBJECT = re.compile(r"\{[\s\S]{200,}\}")
_BIG_ARRAY = re.compile(r"\[[\s\S]{200,}\]")
_EXTRA_NEWLINES = re.compile(r"\n{3,}")
_META_LINE = re.compile(
    r"^\s*[*\-•]\s*(?:slide\s*\d+|page\s*\d+|see\s+.*\.(?:pptx?|pdf|docx?)).*$",
    re.IGNORECASE | re.MULTILINE,
)
_META_INLINE = re.compile(
    r"\bslide\s*\d+\b|\bpage\s*\d+\b|\b\S+\.(?:pptx?|pdf|docx?)\b", re.IGNORECASE
)
_EMPTY_BULLET = re.compile(r"^\s*[*\-•]\s*$", re.MULTILINE)


def strip_reference_lines(text: str) -> str:
    """Remove reference-only bullet lines and inline slide/page/file refs."""
    if not text:
        return ""
    text = _META_LINE.sub("", text)
    text = _META_INLINE.sub("", text)
    text = _EMPTY_BULLET.sub("", text)
    return _EXTRA_NEWLINES.sub("\n\n", text).strip()


def sanitize_answer(text: str, max_chars: int = MAX_ANSWER_CHARS) -> str:
    """Remove code blocks and big JSON, squeeze blank lines, cap length."""
    if not text:
        return ""
    text = _CODE_BLOCK.sub("", text)
    text = _BIG_OBJECT.sub("", text)
    text = _BIG_ARRAY.sub("", text)
    text = _EXTRA_NEWLINES.sub("\n\n", text).strip()
    if len(text) > max_chars:
        text = text[:max_chars] + " …"
    return text


def clean_answer(text: str, max_chars: int = MAX_ANSWER_CHARS) -> str:
    """Full cleanup applied to every answer before it is returned."""
    return sanitize_answer(strip_reference_lines(text), max_chars)
