"""
LLM configuration.

Provides configuration for the Gemini generation step: the ordered model
lists per mode, sampling parameters, retry policy and response caching.
"""

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class LLMConfig:
    """Generation service configuration."""

    api_key: str = ""
    mode: str = "flash"  # flash, pro, off
    models: Dict[str, List[str]] = field(
        default_factory=lambda: {
            "flash": ["gemini-2.0-flash", "gemini-2.0-flash-lite", "gemini-1.5-flash"],
            "pro": ["gemini-2.5-flash", "gemini-2.0-flash", "gemini-2.0-flash-lite"],
        }
    )
    temperature: float = 0.2  # Low for factual answers
    max_output_tokens: int = 700
    max_attempts: int = 3  # Per model
    base_delay: float = 0.4  # Seconds, doubled per retry
    timeout_sec: float = 20.0
    cache_ttl_sec: float = 600.0
    cache_size: int = 500

    @property
    def enabled(self) -> bool:
        """True when a key is configured and generation is not switched off."""
        return bool(self.api_key) and self.mode != "off"

    def models_for_mode(self, mode: str = "") -> List[str]:
        """Ordered model names to try for a mode (flash when unknown)."""
        selected = mode or self.mode
        return list(self.models.get(selected) or self.models.get("flash", []))
