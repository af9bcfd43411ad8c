"""Gateway connectivity diagnostics.

Sends a test prompt to one gateway model and turns common provider
failures into actionable messages instead of raising.
"""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import BaseModel

from study_bridge.llm.gateway import GeminiGateway

logger = structlog.get_logger()

# (markers, replacement message), first match wins
_HINTS: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("429", "RESOURCE_EXHAUSTED", "quota"),
        "QUOTA EXHAUSTED (429): You have reached the provider tier limit. "
        "SOLUTION: 1. Wait 60 seconds. 2. Verify your billing/credits. "
        "3. Switch to a model with higher limits.",
    ),
    (
        ("404", "not found", "not registered"),
        "MODEL ERROR (404): The model name is incorrect or not available "
        "through the gateway.",
    ),
    (
        ("403", "PERMISSION_DENIED", "API key"),
        "INVALID KEY (403): The API key provided is incorrect or doesn't have "
        "permission for this model. Verify your .env file.",
    ),
    (
        ("500", "Internal Server Error"),
        "SERVER ERROR (500): The AI provider's servers are temporarily "
        "overwhelmed.",
    ),
)


class DiagnosticInput(BaseModel):
    model_name: str  # e.g. googleai/gemini-1.5-flash
    prompt: str
    api_key: str | None = None  # overrides the configured key


class DiagnosticReport(BaseModel):
    success: bool
    response: str | None = None
    error_type: str | None = None
    error_message: str | None = None
    raw_error: dict[str, Any] | None = None


def explain_error(message: str) -> str:
    """Replace a raw provider message with a human-readable hint if known."""
    for markers, hint in _HINTS:
        if any(marker in message for marker in markers):
            return hint
    return message


async def run_diagnostic(
    gateway: GeminiGateway,
    data: DiagnosticInput,
) -> DiagnosticReport:
    """Probe *data.model_name* and report success or a classified failure."""
    if data.api_key:
        gateway = GeminiGateway(data.api_key, gateway.policy)

    try:
        text = await gateway.generate_text(data.prompt, model=data.model_name)
    except Exception as exc:
        logger.warning(
            "diagnostic_call_failed",
            model=data.model_name,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        message = str(exc) or "An unknown error occurred during generation."
        return DiagnosticReport(
            success=False,
            error_type=type(exc).__name__,
            error_message=explain_error(message),
            raw_error={
                "status": getattr(exc, "status", None) or "UNKNOWN",
                "code": getattr(exc, "code", None) or "NO_CODE",
                "details": getattr(exc, "details", None)
                or "Check your provider dashboard for more info.",
            },
        )

    logger.info("diagnostic_call_succeeded", model=data.model_name)
    return DiagnosticReport(success=True, response=text)
