"""
Base LLM Provider Interface.

The answer service only needs one capability from a generation backend:
turn a grounded prompt into text, or fail. This module defines that
contract so the service can be tested with a fake and run with Gemini.

Architecture Context
--------------------
    ┌─────────────────┐     ┌─────────────────┐
    │  AnswerService  │     │  /suggest-tags  │
    │ (grounded ask)  │     │  (JSON prompt)  │
    └────────┬────────┘     └────────┬────────┘
             └───────────┬───────────┘
                 ┌───────┴───────┐
                 │   LLMClient   │
                 └───────┬───────┘
                 ┌───────┴───────┐
                 │ GeminiClient  │
                 └───────────────┘

Failure Contract
----------------
generate() either returns non-empty text or raises an LLMError subclass
(see qcbuddy.core.exceptions). Callers treat any LLMError as "use the
synthesized answer instead".
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class GenerationConfig:
    """
    Configuration for text generation.

    Attributes:
        max_tokens: Maximum tokens to generate
        temperature: Creativity (0=deterministic, 1=creative). Low by
            default because answers must stick to the SOP facts.
    """

    max_tokens: int = 700
    temperature: float = 0.2


class LLMClient(ABC):
    """Abstract base class for generation providers."""

    def _get_usage(self) -> Dict[str, int]:
        """Get or initialize the usage accumulator."""
        if not hasattr(self, "_usage"):
            self._usage = {"calls": 0, "cache_hits": 0, "failures": 0}
        return self._usage

    def _record(self, key: str) -> None:
        self._get_usage()[key] += 1

    def get_usage(self) -> Dict[str, int]:
        """Cumulative call counters."""
        return dict(self._get_usage())

    @abstractmethod
    def generate(
        self,
        prompt: str,
        config: Optional[GenerationConfig] = None,
        **kwargs: Any,
    ) -> str:
        """
        Generate text from prompt.

        Raises:
            LLMError: On any failure; the caller falls back
        """

    @abstractmethod
    def is_available(self) -> bool:
        """True when the provider is configured and switched on."""

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Name of the model tried first."""
