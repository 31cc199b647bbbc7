"""
Generation providers for QC Buddy.

    from qcbuddy.llm import create_llm_client

    client = create_llm_client(config)     # None when generation is off
"""

from typing import Optional

from qcbuddy.core.config import Config
from qcbuddy.llm.base import GenerationConfig, LLMClient
from qcbuddy.llm.cache import ResponseCache
from qcbuddy.llm.gemini import GeminiClient


def create_llm_client(config: Config) -> Optional[LLMClient]:
    """Gemini client when a key is set and the mode is not "off", else None."""
    if not config.llm.enabled:
        return None
    return GeminiClient(config.llm)


__all__ = [
    "LLMClient",
    "GenerationConfig",
    "GeminiClient",
    "ResponseCache",
    "create_llm_client",
]
