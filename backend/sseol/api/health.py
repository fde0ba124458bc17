"""Health check + meta endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from sseol.config import Settings
from sseol.dependencies import get_settings
from sseol.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(cfg: Settings = Depends(get_settings)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version="0.1.0",
        models={"placement": cfg.model_placement, "vision": cfg.model_vision},
    )


@router.get("/prompts")
async def prompts() -> dict[str, str]:
    from sseol.llm.prompts import get_all_templates

    return get_all_templates()
