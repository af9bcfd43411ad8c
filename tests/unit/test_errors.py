"""Tests for bridge exceptions and rate-limit classification."""

import pytest

from study_bridge.errors import (
    EmptyProviderOutputError,
    MissingApiKeyError,
    MissingPromptParametersError,
    ProviderHttpError,
    UnknownProviderError,
    attach_rescue_failure,
    is_rate_limited,
)
from study_bridge.llm.registry import DEFAULT_RATE_LIMIT_MARKERS

MARKERS = DEFAULT_RATE_LIMIT_MARKERS


class TestMessages:
    def test_unknown_provider(self) -> None:
        assert str(UnknownProviderError("acme")) == "Unknown provider: acme"

    def test_missing_key_names_variable(self) -> None:
        exc = MissingApiKeyError("groq", "GROQ_API_KEY")
        assert str(exc) == (
            "API Key for groq (GROQ_API_KEY) is missing. Check your .env file."
        )

    def test_missing_prompts(self) -> None:
        assert str(MissingPromptParametersError("mistral")) == (
            "Provider mistral requires prompt parameters for direct bridge."
        )

    def test_empty_output(self) -> None:
        assert str(EmptyProviderOutputError()) == "Provider returned empty output."


class TestIsRateLimited:
    @pytest.mark.parametrize(
        "message",
        ["HTTP 429", "quota exceeded", "RESOURCE_EXHAUSTED", "503 UNAVAILABLE"],
    )
    def test_message_markers(self, message: str) -> None:
        assert is_rate_limited(RuntimeError(message), MARKERS)

    def test_markers_are_case_sensitive(self) -> None:
        assert not is_rate_limited(RuntimeError("resource_exhausted"), MARKERS)

    @pytest.mark.parametrize("status", [429, 503])
    def test_status_code_attribute(self, status: int) -> None:
        exc = ProviderHttpError("groq", status, "Slow down")
        assert is_rate_limited(exc, MARKERS)

    def test_other_status_not_rate_limited(self) -> None:
        exc = ProviderHttpError("groq", 401, "Invalid API Key")
        assert not is_rate_limited(exc, MARKERS)

    def test_custom_markers(self) -> None:
        assert is_rate_limited(RuntimeError("overloaded"), ("overloaded",))
        assert not is_rate_limited(RuntimeError("429"), ("overloaded",))


class TestAttachRescueFailure:
    def test_note_and_attribute(self) -> None:
        original = RuntimeError("429")
        rescue = ProviderHttpError("groq", 500, "boom")
        attach_rescue_failure(original, rescue)
        assert original.rescue_error is rescue  # type: ignore[attr-defined]
        assert original.__notes__ == [f"Rescue attempt failed: {rescue!r}"]
        assert str(original) == "429"
