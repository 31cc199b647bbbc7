"""
Tests for fragment cleaning and rule-like filtering.

Test Strategy
-------------
- Headings and bare bullets are dropped
- Rule-like sentences are preferred when any exist
- A file with no rule-like text keeps its non-heading chunks
"""

import pytest

from qcbuddy.storage.filters import clean_fragment, filter_fragments, is_heading_like, is_rule_like


@pytest.mark.unit
class TestHeuristics:
    @pytest.mark.parametrize("text", ["Hero Images", "•", "Short note", "Image Size Guide For Partners"])
    def test_headings(self, text):
        assert is_heading_like(text)

    def test_sentence_not_heading(self):
        assert not is_heading_like("Hero images must be 1125x780 pixels for every brand.")

    def test_rule_like(self):
        assert is_rule_like("Hero images must be 1125x780 pixels for every brand.")
        assert not is_rule_like("Hero images must be 1125x780 pixels for every brand")
        assert not is_rule_like("Short.")

    def test_clean_fragment(self):
        assert clean_fragment("• First line\n- slide 3\n* Second line") == "First line\nSecond line"


@pytest.mark.unit
class TestFilterFragments:
    def test_prefers_rules(self, make_chunk):
        chunks = [
            make_chunk("Image Guide"),
            make_chunk("Hero images must be 1125x780 pixels for every brand."),
            make_chunk("Our partners love the new look of the listing page today"),
        ]
        kept = filter_fragments(chunks)
        assert [c.text for c in kept] == ["Hero images must be 1125x780 pixels for every brand."]

    def test_falls_back_to_non_headings(self, make_chunk):
        chunks = [make_chunk("Overview"), make_chunk("our partners love the new look of the page")]
        kept = filter_fragments(chunks)
        assert [c.text for c in kept] == ["our partners love the new look of the page"]

    def test_prefer_rules_disabled(self, make_chunk):
        chunks = [
            make_chunk("Hero images must be 1125x780 pixels for every brand."),
            make_chunk("our partners love the new look of the page"),
        ]
        assert len(filter_fragments(chunks, prefer_rule_like=False)) == 2

    def test_metadata_preserved(self, make_chunk):
        from qcbuddy.core.models import Market, Topic

        chunk = make_chunk(
            "• Hero images must be 1125x780 pixels for every brand.",
            title="Guide",
            market=Market.AE,
            topic=Topic.IMAGES,
        )
        kept = filter_fragments([chunk])[0]
        assert kept.text == "Hero images must be 1125x780 pixels for every brand."
        assert (kept.title, kept.market, kept.topic) == ("Guide", Market.AE, Topic.IMAGES)
