"""
Tests for answer sanitation.

Test Strategy
-------------
- Reference-only bullets and inline slide/page/file refs are removed
- Code blocks and large JSON are removed
- Output is capped with a trailing ellipsis
"""

import json

import pytest

from qcbuddy.query.sanitizer import (
    MAX_ANSWER_CHARS,
    clean_answer,
    sanitize_answer,
    strip_reference_lines,
)
from qcbuddy.shared.text_utils import strip_meta_refs


@pytest.mark.unit
class TestStripReferenceLines:
    def test_reference_bullets_removed(self):
        text = "• Use Title Case.\n• Slide 4\n• See guide.pptx for details"
        assert strip_reference_lines(text) == "• Use Title Case."

    def test_inline_refs_removed(self):
        text = strip_reference_lines("• Hero images are 1125x780 (page 2 of Image_Guide.docx).")
        assert "page 2" not in text
        assert "Image_Guide.docx" not in text
        assert "1125x780" in text

    def test_empty(self):
        assert strip_reference_lines("") == ""

    def test_drops_whole_line_unlike_inline_cleanup(self):
        assert strip_reference_lines("• Slide 4") == ""
        assert strip_meta_refs("• Slide 4") == "•"


@pytest.mark.unit
class TestSanitizeAnswer:
    def test_code_block_removed(self):
        assert sanitize_answer("• Rule.\n```json\n{\"a\": 1}\n```") == "• Rule."

    def test_big_json_removed(self):
        blob = json.dumps({f"key{i}": "value" for i in range(30)})
        assert sanitize_answer(f"• Rule.\n{blob}") == "• Rule."

    def test_small_json_kept(self):
        assert sanitize_answer('Use {"a": 1}') == 'Use {"a": 1}'

    def test_blank_lines_squeezed(self):
        assert sanitize_answer("a\n\n\n\nb") == "a\n\nb"

    def test_capped(self):
        text = sanitize_answer("x" * (MAX_ANSWER_CHARS + 50))
        assert text == "x" * MAX_ANSWER_CHARS + " …"


@pytest.mark.unit
class TestCleanAnswer:
    def test_only_references_leaves_nothing(self):
        assert clean_answer("• Slide 3\n• Page 7") == ""

    def test_regular_answer_unchanged(self):
        text = "• Hero images must be 1125x780 pixels.\n• Logo images must be square."
        assert clean_answer(text) == text
