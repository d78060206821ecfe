"""System transport routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...runtime import AppContext
from ..deps import resolve_app_context
from ..schemas import HealthResponse

router = APIRouter(tags=["system"])


@router.get("/health", response_model=HealthResponse)
def health(ctx: AppContext = Depends(resolve_app_context)) -> HealthResponse:
    return HealthResponse(todos=len(ctx.store))
