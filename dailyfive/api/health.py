"""
Health endpoints for operational monitoring. No secrets are exposed.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import inspect

from dailyfive.api.deps import get_store
from dailyfive.core.database import check_connection, metadata
from dailyfive.features.store import SqlStore, Store

logger = logging.getLogger("dailyfive")

router = APIRouter(tags=["health"])


@router.get("/healthz")
def healthz():
    """Lightweight liveness check (no deps)."""
    return {"status": "ok"}


@router.get("/readyz")
def readyz(store: Store = Depends(get_store)):
    """Readiness check: store connectivity + required tables."""
    if not isinstance(store, SqlStore):
        return {"status": "ok", "store": "memory"}

    if not check_connection(store.engine):
        logger.error("[readyz] readiness check failed: database unreachable")
        return JSONResponse(status_code=503, content={"status": "error", "detail": "database unreachable"})

    inspector = inspect(store.engine)
    missing = [name for name in metadata.tables if not inspector.has_table(name)]
    if missing:
        detail = f"missing tables: {', '.join(sorted(missing))}"
        logger.warning(f"[readyz] {detail}")
        return JSONResponse(status_code=503, content={"status": "error", "detail": detail})

    return {"status": "ok", "store": "sql"}
