"""Gateway diagnostics endpoint."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from study_bridge.api.deps import get_gateway
from study_bridge.diagnostics import DiagnosticInput, DiagnosticReport, run_diagnostic
from study_bridge.llm.gateway import GeminiGateway

router = APIRouter(tags=["diagnostics"])

GatewayDep = Annotated[GeminiGateway, Depends(get_gateway)]


@router.post("/diagnostics")
async def diagnose(body: DiagnosticInput, gateway: GatewayDep) -> DiagnosticReport:
    """Probe one gateway model; failures are reported, not raised."""
    return await run_diagnostic(gateway, body)
