"""
Google Gemini provider.

Uses the google-genai SDK. One generate() call walks an ordered list of
models for the configured mode:

    for each model:
        up to max_attempts tries, backoff 0.4s, 0.8s, ...
            429, 5xx, timeout, network error  → retry, then next model
            empty response                    → next model
            other 4xx                         → abandon generation
    all models failed                         → ServiceUnavailableError

Successful responses are cached by mode and prompt prefix.
"""

import time
from typing import Any, Callable, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from qcbuddy.core.config.llm import LLMConfig
from qcbuddy.core.exceptions import (
    ConfigurationError,
    GenerationError,
    LLMError,
    RateLimitError,
    ServiceUnavailableError,
)
from qcbuddy.core.logging import get_logger
from qcbuddy.core.retry import RetryError, retry
from qcbuddy.llm.base import GenerationConfig, LLMClient
from qcbuddy.llm.cache import ResponseCache

logger = get_logger(__name__)

CACHE_KEY_PROMPT_CHARS = 1200


def classify_api_error(error: genai_errors.APIError) -> LLMError:
    """Map an SDK error onto the transient/terminal exception types."""
    code = getattr(error, "code", None)
    message = f"Gemini API error {code}: {getattr(error, 'message', None) or error}"
    if code == 429:
        return RateLimitError(message)
    if code is None or code == 408 or code >= 500:
        return ServiceUnavailableError(message)
    return GenerationError(message, status_code=code)


class GeminiClient(LLMClient):
    """
    Google Gemini API client with model fallback, retries and caching.

    Requires an API key (GEMINI_KEY) and a mode other than "off".
    """

    def __init__(
        self,
        config: Optional[LLMConfig] = None,
        cache: Optional[ResponseCache] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or LLMConfig()
        if cache is None:
            cache = ResponseCache(
                ttl_sec=self.config.cache_ttl_sec, max_entries=self.config.cache_size
            )
        self.cache = cache
        self._sleep = sleep
        self._client: Optional[genai.Client] = None

    @property
    def client(self) -> Any:
        """Lazy-load the SDK client."""
        if self._client is None:
            if not self.config.api_key:
                raise ConfigurationError(
                    "GEMINI_KEY not set. Set it in environment or config.yaml."
                )
            self._client = genai.Client(
                api_key=self.config.api_key,
                http_options=types.HttpOptions(timeout=int(self.config.timeout_sec * 1000)),
            )
        return self._client

    @property
    def mode(self) -> str:
        return self.config.mode

    @property
    def model_name(self) -> str:
        models = self.config.models_for_mode()
        return models[0] if models else ""

    def is_available(self) -> bool:
        """Check if Gemini is configured and switched on."""
        return self.config.enabled

    def generate(
        self,
        prompt: str,
        config: Optional[GenerationConfig] = None,
        **kwargs: Any,
    ) -> str:
        """Generate text, trying each model of the current mode in order."""
        if not self.is_available():
            raise ConfigurationError("Gemini is disabled (no key or GEMINI_MODE=off)")

        config = config or GenerationConfig(
            max_tokens=self.config.max_output_tokens,
            temperature=self.config.temperature,
        )
        cache_key = f"{self.mode}:{prompt[:CACHE_KEY_PROMPT_CHARS]}"
        cached = self.cache.get(cache_key)
        if cached:
            self._record("cache_hits")
            return cached

        self._record("calls")
        last_error: Optional[Exception] = None
        for model in self.config.models_for_mode():
            try:
                text = self._generate_with_model(model, prompt, config)
            except RetryError as e:
                last_error = e.last_exception
                logger.warning("Model exhausted retries", model=model, error=str(last_error))
                continue
            except GenerationError as e:
                if e.status_code is not None:
                    self._record("failures")
                    logger.warning("Gemini rejected request", model=model, error=str(e))
                    raise
                last_error = e
                logger.warning("Empty response", model=model)
                continue

            logger.info("Gemini answered", model=model)
            self.cache.set(cache_key, text)
            return text

        self._record("failures")
        raise ServiceUnavailableError(f"All Gemini models failed: {last_error}")

    def _generate_with_model(self, model: str, prompt: str, config: GenerationConfig) -> str:
        """One model, retried on transient errors."""
        call = retry(
            max_attempts=self.config.max_attempts,
            base_delay=self.config.base_delay,
            max_delay=10.0,
            jitter=False,
            retryable_exceptions=(RateLimitError, ServiceUnavailableError),
            sleep=self._sleep,
        )(self._call_model)
        return call(model, prompt, config)

    def _call_model(self, model: str, prompt: str, config: GenerationConfig) -> str:
        try:
            response = self.client.models.generate_content(
                model=model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=config.temperature,
                    max_output_tokens=config.max_tokens,
                ),
            )
        except genai_errors.APIError as e:
            raise classify_api_error(e) from e
        except httpx.TransportError as e:
            raise ServiceUnavailableError(f"Gemini request failed: {e}") from e

        text = (response.text or "").strip()
        if not text:
            raise GenerationError(f"Empty response from {model}")
        return text
