"""Health and readiness endpoints.

  /health (liveness): the process is up and answering.
  /ready (readiness): the progress store is reachable.  A 503 here takes
    the instance out of rotation without restarting it.
"""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from learnpath.db import engine as db

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    return {
        "status": "ok",
        "checks": {
            "progress_store": "postgres" if db.engine is not None else "in_memory",
        },
    }


@router.get("/ready")
async def ready() -> Response:
    if await db.ping():
        return Response(status_code=status.HTTP_200_OK)
    return Response(status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
