"""Capability endpoints.

Routes
------
- ``GET   /capabilities``         — Registered capability names
- ``POST  /capabilities/{name}``  — Run one capability
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from study_bridge.api.deps import get_capability_runner
from study_bridge.capabilities.runner import CapabilityRunner
from study_bridge.errors import BridgeError

logger = structlog.get_logger()

router = APIRouter(tags=["capabilities"])

RunnerDep = Annotated[CapabilityRunner, Depends(get_capability_runner)]


@router.get("/capabilities")
async def list_capabilities(runner: RunnerDep) -> dict[str, list[str]]:
    return {"capabilities": runner.names}


@router.post("/capabilities/{name}")
async def run_capability(
    name: str,
    runner: RunnerDep,
    payload: Annotated[dict[str, Any], Body()],
) -> JSONResponse:
    """Run capability *name* with a camelCase JSON payload.

    Optional ``provider``/``model`` fields select a direct provider;
    the managed gateway is used otherwise.

    Raises:
        HTTPException 422: payload does not match the capability input.
        HTTPException 502: provider SDK failure (message passed through).
    """
    try:
        output = await runner.run(name, payload)
    except BridgeError:
        raise
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=exc.errors(include_url=False, include_context=False),
        ) from exc
    except Exception as exc:
        logger.warning(
            "capability_provider_error",
            capability=name,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return JSONResponse(content=output.model_dump(mode="json", by_alias=True))
