"""
Answer Service - request orchestration for a single question or a batch.

Flow for one question
---------------------
    1. Synthesized answer from the store (ranker + assembler)
    2. No sources             → refusal, mood "confused", generator untouched
    3. Generator enabled and not forced offline
                              → grounded prompt, one generate() call
    4. Generated text survives cleanup → use it, else keep step 1's text
    5. Mood: "confused" if the answer contains the refusal, else "happy"

A message with several non-empty lines is answered line by line and
summarized as a bulleted batch with mood "helpful".

The service never raises for a question: generator failures fall back to
the synthesized answer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from qcbuddy.core.config import Config
from qcbuddy.core.exceptions import LLMError
from qcbuddy.core.logging import get_logger
from qcbuddy.core.models import KnowledgeChunk, MarketPreference
from qcbuddy.llm.base import LLMClient
from qcbuddy.query.assembler import REFUSAL_TEXT, build_answer
from qcbuddy.query.prompt import build_grounded_prompt
from qcbuddy.query.sanitizer import clean_answer
from qcbuddy.retrieval.ranker import Ranker
from qcbuddy.storage.knowledge_store import KnowledgeStore

logger = get_logger(__name__)

MOOD_HAPPY = "happy"
MOOD_CONFUSED = "confused"
MOOD_HELPFUL = "helpful"


@dataclass
class AnswerResult:
    """What the user sees for one request."""

    answer: str
    sources: List[KnowledgeChunk] = field(default_factory=list)
    mood: str = MOOD_HAPPY
    generated: bool = False  # True when the text came from the generator

    def to_dict(self) -> Dict[str, Any]:
        return {
            "answer": self.answer,
            "sources": [s.to_dict() for s in self.sources],
            "buddyMood": self.mood,
        }


def split_items(message: str) -> List[str]:
    """Non-empty trimmed lines of a message."""
    return [line.strip() for line in (message or "").splitlines() if line.strip()]


def batch_summary(items: List[str], results: List[AnswerResult]) -> str:
    """Bulleted summary with the first line of each item's answer."""
    lines = []
    for item, result in zip(items, results):
        first = result.answer.split("\n")[0].strip() if result.answer else ""
        lines.append(f"• **{item}**: {first or 'Looks good'}")
    return "\n".join(["Here's what I found:", "", *lines])


class AnswerService:
    """Answers questions from a KnowledgeStore with optional generation."""

    def __init__(
        self,
        store: KnowledgeStore,
        config: Optional[Config] = None,
        generator: Optional[LLMClient] = None,
    ) -> None:
        self.store = store
        self.config = config or store.config
        self.generator = generator
        self.ranker = Ranker(self.config.retrieval.weights)

    @property
    def generation_enabled(self) -> bool:
        return self.generator is not None and self.generator.is_available()

    def answer(
        self,
        question: str,
        market: Union[str, MarketPreference] = MarketPreference.AUTO,
        force_offline: bool = False,
    ) -> AnswerResult:
        """Answer a single question."""
        market = MarketPreference.parse(market)
        rag = build_answer(
            question,
            self.store.chunks,
            market,
            config=self.config.retrieval,
            ranker=self.ranker,
        )
        if not rag.sources:
            return AnswerResult(answer=REFUSAL_TEXT, sources=[], mood=MOOD_CONFUSED)

        final = rag.text
        generated = False
        if self.generation_enabled and not force_offline:
            text = self._generate(question, market, rag.sources)
            if text:
                final, generated = text, True

        final = clean_answer(final) or clean_answer(rag.text) or REFUSAL_TEXT
        mood = MOOD_CONFUSED if "I don't have this" in final else MOOD_HAPPY
        return AnswerResult(answer=final, sources=rag.sources, mood=mood, generated=generated)

    def _generate(
        self, question: str, market: MarketPreference, sources: List[KnowledgeChunk]
    ) -> Optional[str]:
        prompt = build_grounded_prompt(
            question, market, sources, max_chars=self.config.retrieval.context_chars
        )
        try:
            raw = self.generator.generate(prompt)
        except LLMError as e:
            logger.info("Generation failed, using SOP answer", error=str(e))
            return None

        cleaned = clean_answer(raw or "")
        if not cleaned:
            logger.info("Generated answer unusable after cleanup, using SOP answer")
            return None
        return cleaned

    def answer_batch(
        self,
        items: List[str],
        market: Union[str, MarketPreference] = MarketPreference.AUTO,
        force_offline: bool = False,
    ) -> AnswerResult:
        """Answer several items and summarize them in one result."""
        results = [self.answer(item, market, force_offline) for item in items]
        sources = [s for r in results for s in r.sources]
        return AnswerResult(
            answer=batch_summary(items, results),
            sources=sources,
            mood=MOOD_HELPFUL,
            generated=any(r.generated for r in results),
        )

    def ask(
        self,
        message: str,
        market: Union[str, MarketPreference] = MarketPreference.AUTO,
        force_offline: bool = False,
    ) -> AnswerResult:
        """Entry point for raw user messages (single or multi-line)."""
        items = split_items(message)
        if len(items) > 1:
            return self.answer_batch(items, market, force_offline)
        return self.answer(items[0] if items else "", market, force_offline)
