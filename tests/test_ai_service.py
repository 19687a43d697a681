"""Tests for GeminiModelClient – SDK wiring and failure classification."""

import asyncio
from unittest.mock import AsyncMock, Mock, patch

import pytest

from ai_service import GeminiModelClient
from errors import (
    ConfigurationError,
    EmptyResponseError,
    InvalidCredentialError,
    TransportError,
)


def sdk_client(text=None, error=None):
    client = Mock()
    client.aio.models.generate_content = AsyncMock(
        return_value=Mock(text=text), side_effect=error
    )
    client.aio.aclose = AsyncMock()
    return client


def invoke(client, prompt="prompt", credential="key"):
    return asyncio.run(client.invoke(prompt, credential))


class TestGeminiModelClient:
    def test_returns_stripped_text(self):
        sdk = sdk_client(text="  Hello.\n")
        with patch("ai_service.make_client", return_value=sdk) as make_client:
            result = invoke(GeminiModelClient(model="gemini-test"), "Fix this", "key-1")

        assert result == "Hello."
        make_client.assert_called_once_with("key-1")
        sdk.aio.models.generate_content.assert_awaited_once_with(
            model="gemini-test", contents="Fix this"
        )

    def test_builds_a_client_per_call(self):
        with patch("ai_service.make_client", return_value=sdk_client(text="ok")) as make_client:
            client = GeminiModelClient()
            invoke(client, credential="old-key")
            invoke(client, credential="new-key")

        assert [c.args[0] for c in make_client.call_args_list] == ["old-key", "new-key"]

    def test_sdk_client_gets_the_key(self):
        with patch("ai_service.genai.Client") as client_class:
            client_class.return_value = sdk_client(text="ok")
            invoke(GeminiModelClient(), credential="key-2")

        client_class.assert_called_once_with(api_key="key-2")

    @pytest.mark.parametrize("credential", [None, ""])
    def test_missing_credential(self, credential):
        with patch("ai_service.make_client") as make_client:
            with pytest.raises(ConfigurationError):
                invoke(GeminiModelClient(), credential=credential)

        make_client.assert_not_called()

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_empty_response(self, text):
        with patch("ai_service.make_client", return_value=sdk_client(text=text)):
            with pytest.raises(EmptyResponseError):
                invoke(GeminiModelClient())

    def test_empty_response_uses_step_message(self):
        with patch("ai_service.make_client", return_value=sdk_client(text="")):
            with pytest.raises(EmptyResponseError, match="Summarization failed"):
                asyncio.run(
                    GeminiModelClient().invoke(
                        "prompt", "key", empty_message="Summarization failed or returned empty."
                    )
                )

    def test_closes_client_after_success(self):
        sdk = sdk_client(text="ok")
        with patch("ai_service.make_client", return_value=sdk):
            invoke(GeminiModelClient())

        sdk.aio.aclose.assert_awaited_once_with()

    def test_closes_client_after_failure(self):
        sdk = sdk_client(error=RuntimeError("500 INTERNAL"))
        with patch("ai_service.make_client", return_value=sdk):
            with pytest.raises(TransportError):
                invoke(GeminiModelClient())

        sdk.aio.aclose.assert_awaited_once_with()

    def test_invalid_key(self):
        error = RuntimeError("404 NOT_FOUND. Requested entity was not found.")
        with patch("ai_service.make_client", return_value=sdk_client(error=error)):
            with pytest.raises(InvalidCredentialError):
                invoke(GeminiModelClient())

    def test_other_failures_are_transport(self):
        error = RuntimeError("429 RESOURCE_EXHAUSTED")
        with patch("ai_service.make_client", return_value=sdk_client(error=error)):
            with pytest.raises(TransportError, match="429 RESOURCE_EXHAUSTED") as excinfo:
                invoke(GeminiModelClient())

        assert excinfo.value.__cause__ is error
