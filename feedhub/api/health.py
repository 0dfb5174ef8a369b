from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, status

from feedhub.models.schemas import HealthStatus

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthStatus, summary="Liveness probe")
async def health() -> dict:
    # no store access: must answer even when the store is down
    return {"status": "ok", "timestamp": datetime.now(timezone.utc)}


@router.get("/user", summary="Current user (stub)")
async def current_user():
    # Session handling is not wired up yet, so nobody is ever signed in
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
