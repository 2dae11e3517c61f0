"""System-level API endpoints."""

from __future__ import annotations

from typing import Dict

from fastapi import APIRouter

from ...services.readiness import ensure_ready

router = APIRouter(tags=["system"])


@router.get("/health")
def health() -> Dict[str, bool]:
    """Liveness probe; never touches the database."""

    return {"ok": True}


@router.get("/ready")
def ready() -> Dict[str, bool]:
    """Readiness probe. Answers 503 until the schema has been verified."""

    ensure_ready()
    return {"ok": True}


__all__ = ["router"]
