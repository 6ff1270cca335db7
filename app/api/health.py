from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple

from fastapi import APIRouter, Depends, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.db import get_db

logger = logging.getLogger("nexus.api.health")
router = APIRouter()

_HTTP_METHODS = {"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"}


@router.get("/ping")
def ping():
    logger.info("GET /health/ping")
    return {"ok": True}


@router.get("/routes")
def list_routes(request: Request):
    """
    Introspect all registered routes to verify there are no collisions.
    Uses Request to access the FastAPI instance.

    Newer Starlette keeps included routers as nested objects in
    ``app.routes``, so the OpenAPI paths are merged in as well.
    """
    app = request.app
    seen: Dict[Tuple[str, str], Dict[str, Any]] = {}
    for r in app.routes:
        path = getattr(r, "path", None)
        methods = getattr(r, "methods", None)
        if path and methods:
            methods = sorted(list(methods))
            seen[(path, ",".join(methods))] = {"path": path, "methods": methods, "name": getattr(r, "name", None)}

    for path, ops in app.openapi().get("paths", {}).items():
        for method, op in ops.items():
            method = method.upper()
            if method in _HTTP_METHODS:
                seen.setdefault((path, method), {"path": path, "methods": [method], "name": op.get("operationId")})

    out: List[Dict[str, Any]] = sorted(seen.values(), key=lambda x: (x["path"], ",".join(x["methods"])))
    logger.info("GET /health/routes count=%d", len(out))
    return {"ok": True, "routes": out}


@router.get("/db")
def db_health(db: Session = Depends(get_db)):
    """Round-trip a trivial query; reports the failure instead of raising."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("GET /health/db failed: %s", e)
        return {"ok": False, "error": e.__class__.__name__}
    logger.info("GET /health/db ok")
    return {"ok": True}
