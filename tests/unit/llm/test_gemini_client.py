"""
Tests for GeminiClient.

Test Strategy
-------------
- The SDK client is replaced by a Mock; no network calls
- sleep is injected so backoff delays are recorded, not waited
- Transient errors retry then move to the next model
- Client errors abandon generation; empty output moves to the next model
"""

from unittest.mock import Mock

import httpx
import pytest
from google.genai import errors as genai_errors

from qcbuddy.core.config import Config
from qcbuddy.core.config.llm import LLMConfig
from qcbuddy.core.exceptions import (
    ConfigurationError,
    GenerationError,
    RateLimitError,
    ServiceUnavailableError,
)
from qcbuddy.llm import GeminiClient, create_llm_client
from qcbuddy.llm.gemini import classify_api_error


def api_error(code: int, status: str = "ERROR") -> genai_errors.APIError:
    error_cls = genai_errors.ClientError if code < 500 else genai_errors.ServerError
    return error_cls(code, {"error": {"code": code, "message": "test", "status": status}})


def reply(text: str) -> Mock:
    return Mock(text=text)


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def client(sleeps):
    gemini = GeminiClient(LLMConfig(api_key="test-key", mode="flash"), sleep=sleeps.append)
    gemini._client = Mock()
    return gemini


def called_models(client):
    return [c.kwargs["model"] for c in client._client.models.generate_content.call_args_list]


@pytest.mark.unit
class TestAvailability:
    def test_available_with_key(self):
        assert GeminiClient(LLMConfig(api_key="k")).is_available()

    def test_off_mode(self):
        assert not GeminiClient(LLMConfig(api_key="k", mode="off")).is_available()

    def test_missing_key(self):
        gemini = GeminiClient(LLMConfig(api_key=""))
        assert not gemini.is_available()
        with pytest.raises(ConfigurationError):
            gemini.generate("prompt")

    def test_model_name_follows_mode(self):
        assert GeminiClient(LLMConfig(api_key="k", mode="pro")).model_name == "gemini-2.5-flash"


@pytest.mark.unit
class TestGenerate:
    def test_first_model_answers(self, client, sleeps):
        client._client.models.generate_content.return_value = reply("  • Rule.  ")

        assert client.generate("prompt") == "• Rule."
        assert called_models(client) == ["gemini-2.0-flash"]
        assert sleeps == []

    def test_rate_limit_retries_then_next_model(self, client, sleeps):
        client._client.models.generate_content.side_effect = [
            api_error(429),
            api_error(429),
            api_error(429),
            reply("• From second model."),
        ]

        assert client.generate("prompt") == "• From second model."
        assert called_models(client) == ["gemini-2.0-flash"] * 3 + ["gemini-2.0-flash-lite"]
        assert sleeps == [0.4, 0.8]

    def test_server_error_recovers_on_retry(self, client, sleeps):
        client._client.models.generate_content.side_effect = [api_error(503), reply("ok")]

        assert client.generate("prompt") == "ok"
        assert called_models(client) == ["gemini-2.0-flash"] * 2
        assert sleeps == [0.4]

    def test_network_error_is_transient(self, client):
        client._client.models.generate_content.side_effect = [
            httpx.ConnectError("boom"),
            reply("ok"),
        ]
        assert client.generate("prompt") == "ok"

    def test_client_error_abandons(self, client):
        client._client.models.generate_content.side_effect = api_error(400, "INVALID_ARGUMENT")

        with pytest.raises(GenerationError) as exc_info:
            client.generate("prompt")

        assert exc_info.value.status_code == 400
        assert called_models(client) == ["gemini-2.0-flash"]
        assert client.get_usage()["failures"] == 1

    def test_empty_reply_moves_to_next_model(self, client, sleeps):
        client._client.models.generate_content.side_effect = [reply(""), reply("ok")]

        assert client.generate("prompt") == "ok"
        assert called_models(client) == ["gemini-2.0-flash", "gemini-2.0-flash-lite"]
        assert sleeps == []

    def test_all_models_fail(self, client):
        client._client.models.generate_content.return_value = reply("")

        with pytest.raises(ServiceUnavailableError):
            client.generate("prompt")
        assert len(called_models(client)) == 3

    def test_cache_hit(self, client):
        client._client.models.generate_content.return_value = reply("cached answer")

        assert client.generate("same prompt") == "cached answer"
        assert client.generate("same prompt") == "cached answer"

        assert client._client.models.generate_content.call_count == 1
        assert client.get_usage() == {"calls": 1, "cache_hits": 1, "failures": 0}

    def test_cache_key_includes_mode(self, client):
        client._client.models.generate_content.return_value = reply("answer")
        client.generate("prompt")
        client.config.mode = "pro"
        client.generate("prompt")
        assert client._client.models.generate_content.call_count == 2


@pytest.mark.unit
class TestClassifyApiError:
    def test_rate_limit(self):
        assert isinstance(classify_api_error(api_error(429)), RateLimitError)

    @pytest.mark.parametrize("code", [500, 503])
    def test_server_errors(self, code):
        assert isinstance(classify_api_error(api_error(code)), ServiceUnavailableError)

    def test_timeout_is_transient(self):
        assert isinstance(classify_api_error(api_error(408)), ServiceUnavailableError)

    def test_client_error_is_terminal(self):
        error = classify_api_error(api_error(403, "PERMISSION_DENIED"))
        assert isinstance(error, GenerationError)
        assert error.status_code == 403


@pytest.mark.unit
class TestFactory:
    def test_disabled_returns_none(self, config):
        assert create_llm_client(config) is None

    def test_enabled_returns_gemini(self, config):
        config.llm.api_key = "test-key"
        config.llm.mode = "flash"
        client = create_llm_client(config)
        assert isinstance(client, GeminiClient)
        assert client.model_name == "gemini-2.0-flash"
