"""Tests for structured logging configuration and request middleware."""

import json
import logging
import re
from collections.abc import Generator
from io import StringIO
from typing import Any
from unittest.mock import patch

import pytest
import structlog
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from study_bridge.api.middleware import RequestLoggingMiddleware
from study_bridge.logging_config import REDACTED, configure_logging, scrub_secrets


@pytest.fixture(autouse=True)
def _reset_structlog() -> Generator[None]:
    """Reset structlog state after each test."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.WARNING)


def _capture_log_output(
    environment: str, log_level: str = "DEBUG", **event: Any
) -> str:
    """Configure logging, emit a message, return captured output."""
    configure_logging(environment=environment, log_level=log_level)

    stream = StringIO()
    root = logging.getLogger()
    if not root.handlers or not isinstance(root.handlers[0], logging.StreamHandler):
        raise RuntimeError("Expected configure_logging to set up a StreamHandler")

    original_stream = root.handlers[0].stream
    root.handlers[0].stream = stream

    logger = structlog.get_logger()
    logger.info("test_event", key="value", **event)

    root.handlers[0].stream = original_stream
    return stream.getvalue()


class TestConfigureLogging:
    def test_configure_production_json(self) -> None:
        """Production environment produces valid JSON output."""
        parsed = json.loads(_capture_log_output("production"))
        assert parsed["event"] == "test_event"
        assert parsed["key"] == "value"
        assert parsed["level"] == "info"
        assert "T" in parsed["timestamp"]

    def test_configure_development_console(self) -> None:
        output = _capture_log_output("development")
        plain = re.sub(r"\x1b\[[0-9;]*m", "", output)
        assert "test_event" in plain
        assert "key=value" in plain

    def test_configure_sets_log_level(self) -> None:
        configure_logging(log_level="WARNING")
        assert logging.getLogger().level == logging.WARNING

    def test_noisy_libraries_quieted(self) -> None:
        configure_logging(log_level="DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("google_genai").level == logging.WARNING

    def test_api_key_redacted(self) -> None:
        parsed = json.loads(
            _capture_log_output("production", api_key="gsk-secret", Authorization="x")
        )
        assert parsed["api_key"] == REDACTED
        assert parsed["Authorization"] == REDACTED
        assert parsed["key"] == "value"

    def test_provider_key_fields_redacted(self) -> None:
        parsed = json.loads(_capture_log_output("production", groq_api_key="gsk-1"))
        assert parsed["groq_api_key"] == REDACTED

    def test_secrets_scrubbed_from_error_text(self) -> None:
        parsed = json.loads(
            _capture_log_output(
                "production", error="401 for Authorization: Bearer gsk-live-abc"
            )
        )
        assert "gsk-live-abc" not in parsed["error"]
        assert parsed["error"] == f"401 for Authorization: Bearer {REDACTED}"

    def test_bound_context_merged(self) -> None:
        structlog.contextvars.bind_contextvars(path="/api/v1/capabilities/tutor")
        parsed = json.loads(_capture_log_output("production"))
        assert parsed["path"] == "/api/v1/capabilities/tutor"


class TestRequestLoggingMiddleware:
    @pytest.fixture()
    def test_app(self) -> FastAPI:
        """Minimal FastAPI app with the middleware for isolated testing."""
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware)

        @app.get("/test-endpoint")
        async def _test_endpoint() -> dict[str, Any]:
            return structlog.contextvars.get_contextvars()

        @app.get("/health")
        async def _health() -> dict[str, str]:
            return {"status": "ok"}

        return app

    async def test_middleware_logs_request(self, test_app: FastAPI) -> None:
        """Middleware logs method, path, status_code, latency_ms."""
        with patch("study_bridge.api.middleware.logger") as mock_logger:
            async with AsyncClient(
                transport=ASGITransport(app=test_app),
                base_url="http://test",
            ) as client:
                await client.get("/test-endpoint")

            mock_logger.info.assert_called_once()
            call_args = mock_logger.info.call_args
            assert call_args[0][0] == "http_request"
            assert call_args[1]["method"] == "GET"
            assert call_args[1]["path"] == "/test-endpoint"
            assert call_args[1]["status_code"] == 200
            assert "latency_ms" in call_args[1]

    async def test_middleware_binds_request_context(self, test_app: FastAPI) -> None:
        async with AsyncClient(
            transport=ASGITransport(app=test_app),
            base_url="http://test",
        ) as client:
            response = await client.get("/test-endpoint")
        bound = response.json()
        assert bound["path"] == "/test-endpoint"
        assert bound["request_id"] == response.headers["X-Request-ID"]

    async def test_incoming_request_id_reused(self, test_app: FastAPI) -> None:
        async with AsyncClient(
            transport=ASGITransport(app=test_app),
            base_url="http://test",
        ) as client:
            response = await client.get(
                "/test-endpoint", headers={"X-Request-ID": "req-123"}
            )
        assert response.headers["X-Request-ID"] == "req-123"
        assert response.json()["request_id"] == "req-123"

    async def test_middleware_skips_health(self, test_app: FastAPI) -> None:
        with patch("study_bridge.api.middleware.logger") as mock_logger:
            async with AsyncClient(
                transport=ASGITransport(app=test_app),
                base_url="http://test",
            ) as client:
                await client.get("/health")

            mock_logger.info.assert_not_called()


class TestScrubSecrets:
    def test_bearer_token(self) -> None:
        assert scrub_secrets("Bearer sk-123") == f"Bearer {REDACTED}"

    def test_key_query_parameter(self) -> None:
        url = "https://generativelanguage.googleapis.com/v1?key=AIzaXYZ&alt=json"
        assert scrub_secrets(url) == (
            f"https://generativelanguage.googleapis.com/v1?key={REDACTED}&alt=json"
        )

    def test_plain_text_unchanged(self) -> None:
        assert scrub_secrets("429 RESOURCE_EXHAUSTED") == "429 RESOURCE_EXHAUSTED"
