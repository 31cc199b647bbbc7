"""
Tests for AnswerService.

Test Strategy
-------------
- No sources: refusal, mood "confused", generator never called
- Generator output replaces the synthesized answer when it survives cleanup
- Generator failures and unusable output fall back to the synthesized answer
- Multi-line messages produce a "helpful" batch summary
"""

import pytest

from qcbuddy.core.exceptions import GenerationError, ServiceUnavailableError
from qcbuddy.query.assembler import REFUSAL_TEXT
from qcbuddy.query.service import (
    MOOD_CONFUSED,
    MOOD_HAPPY,
    MOOD_HELPFUL,
    AnswerResult,
    AnswerService,
    batch_summary,
    split_items,
)

HERO_QUESTION = "What size should hero images be?"


@pytest.mark.unit
class TestSingleAnswer:
    def test_empty_store_refuses(self, empty_store, mock_generator):
        service = AnswerService(empty_store, generator=mock_generator)
        result = service.answer(HERO_QUESTION)

        assert result.answer == REFUSAL_TEXT
        assert result.sources == []
        assert result.mood == MOOD_CONFUSED
        mock_generator.generate.assert_not_called()

    def test_unrelated_question_refuses(self, store, mock_generator):
        result = AnswerService(store, generator=mock_generator).answer("qqqq zzzz")

        assert result.answer == REFUSAL_TEXT
        assert result.sources == []
        assert result.mood == MOOD_CONFUSED
        mock_generator.generate.assert_not_called()

    def test_offline_answer_from_store(self, store):
        result = AnswerService(store).answer(HERO_QUESTION)

        assert "1125x780" in result.answer
        assert result.mood == MOOD_HAPPY
        assert 1 <= len(result.sources) <= 3
        assert not result.generated

    def test_generated_answer_used(self, store, mock_generator):
        result = AnswerService(store, generator=mock_generator).answer(HERO_QUESTION, "AE")

        assert result.answer == "• Hero images must be 1125x780 pixels."
        assert result.generated
        prompt = mock_generator.generate.call_args[0][0]
        assert "Market: AE" in prompt
        assert "Hero images must be 1125x780 pixels for every brand." in prompt

    @pytest.mark.parametrize(
        "error", [ServiceUnavailableError("down"), GenerationError("bad", status_code=400)]
    )
    def test_generator_failure_falls_back(self, store, mock_generator, error):
        mock_generator.generate.side_effect = error
        result = AnswerService(store, generator=mock_generator).answer(HERO_QUESTION)

        assert "1125x780" in result.answer
        assert not result.generated
        assert result.mood == MOOD_HAPPY

    def test_unusable_generation_falls_back(self, store, mock_generator):
        mock_generator.generate.return_value = "• Slide 3\n```json\n{}\n```"
        result = AnswerService(store, generator=mock_generator).answer(HERO_QUESTION)

        assert "1125x780" in result.answer
        assert not result.generated

    def test_force_offline_skips_generator(self, store, mock_generator):
        service = AnswerService(store, generator=mock_generator)
        result = service.answer(HERO_QUESTION, force_offline=True)

        mock_generator.generate.assert_not_called()
        assert not result.generated

    def test_unavailable_generator_skipped(self, store, mock_generator):
        mock_generator.is_available.return_value = False
        service = AnswerService(store, generator=mock_generator)

        assert not service.generation_enabled
        service.answer(HERO_QUESTION)
        mock_generator.generate.assert_not_called()

    def test_generated_refusal_is_confused(self, store, mock_generator):
        mock_generator.generate.return_value = REFUSAL_TEXT
        result = AnswerService(store, generator=mock_generator).answer(HERO_QUESTION)

        assert result.answer == REFUSAL_TEXT
        assert result.mood == MOOD_CONFUSED
        assert result.sources

    def test_to_dict(self, store):
        data = AnswerService(store).answer(HERO_QUESTION).to_dict()
        assert set(data) == {"answer", "sources", "buddyMood"}
        assert set(data["sources"][0]) == {"title", "market", "topic", "text"}


@pytest.mark.unit
class TestBatch:
    def test_split_items(self):
        assert split_items(" one \n\n two\n") == ["one", "two"]
        assert split_items("") == []

    def test_multi_line_message(self, store):
        result = AnswerService(store).ask("hero image size\nitem names emojis")

        assert result.mood == MOOD_HELPFUL
        assert result.answer.startswith("Here's what I found:\n\n")
        assert "• **hero image size**: " in result.answer
        assert "• **item names emojis**: " in result.answer

    def test_single_line_message(self, store):
        result = AnswerService(store).ask("  hero image size  ")
        assert result.mood == MOOD_HAPPY

    def test_empty_message_refuses(self, store):
        assert AnswerService(store).ask("").answer == REFUSAL_TEXT

    def test_summary_uses_first_line(self):
        results = [
            AnswerResult(answer="• First line\n• Second line"),
            AnswerResult(answer=""),
        ]
        summary = batch_summary(["a", "b"], results)
        assert summary == "Here's what I found:\n\n• **a**: • First line\n• **b**: Looks good"
