# app/main.py
"""FastAPI entry point for course progress and grading."""

from __future__ import annotations

import logging
import os
import re
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.Core.config import get_settings
from app.DB.supabase import execute, get_supabase
from app.features.dashboard.endpoints import router as dashboard_router
from app.features.enrollments.endpoints import router as enrollments_router
from app.features.notifications.service import notification_service
from app.features.reviews.endpoints import router as reviews_router
from app.features.submissions.endpoints import project_router, quiz_router

_settings = get_settings()
logging.basicConfig(level=logging.DEBUG if _settings.debug else logging.INFO)

app = FastAPI(title=_settings.app_name)
_START_TIME = datetime.now(timezone.utc)


# ------------------------
# CORS Setup
# ------------------------
def _split_env_csv(name: str, default: str = ""):
    raw = os.getenv(name, default)
    return [o.strip().rstrip("/") for o in raw.split(",") if o.strip()]


_FRONTEND_ORIGINS = _split_env_csv(
    "ALLOW_ORIGINS",
    "http://localhost:5173,http://localhost:3000,http://127.0.0.1:5173,http://127.0.0.1:3000",
)

_CORS_ORIGIN_REGEX = re.compile(r"https?://(localhost|127\.0\.0\.1)(:\d+)?", re.I)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_FRONTEND_ORIGINS,
    allow_origin_regex=_CORS_ORIGIN_REGEX.pattern,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------
# Custom Middlewares
# ------------------------
_request_logger = logging.getLogger("request")


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """Tag each request with an id and log its outcome and duration."""
    req_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
    request.state.request_id = req_id
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = int((time.perf_counter() - started) * 1000)
    response.headers["X-Request-Id"] = req_id
    _request_logger.info(
        "%s %s %s %dms",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
        extra={"request_id": req_id},
    )
    return response


# ------------------------
# Routers
# ------------------------
app.include_router(quiz_router)
app.include_router(project_router)
app.include_router(reviews_router)
app.include_router(enrollments_router)
app.include_router(dashboard_router)


@app.on_event("shutdown")
async def _flush_review_emails():
    await notification_service.drain(timeout=_settings.smtp_timeout)


# ------------------------
# Meta endpoints
# ------------------------
@app.get("/", tags=["meta"], summary="API Root")
async def root():
    return {
        "name": _settings.app_name,
        "status": "ok",
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/healthz",
    }


@app.get("/healthz", tags=["meta"], summary="Liveness / readiness probe")
async def healthz() -> Dict[str, Any]:
    now = datetime.now(timezone.utc)
    db_status = "unknown"
    db_latency_ms: Optional[float] = None

    try:
        start = time.perf_counter()
        client = await get_supabase()
        await execute(client.table("lessons").select("id").limit(1))
        db_latency_ms = round((time.perf_counter() - start) * 1000, 2)
        db_status = "ok"
    except Exception as e:  # noqa: BLE001
        db_status = f"error:{type(e).__name__}"

    return {
        "status": "ok" if db_status == "ok" else "degraded",
        "time_utc": now.isoformat(),
        "uptime_seconds": round((now - _START_TIME).total_seconds(), 2),
        "version": os.getenv("APP_VERSION", "dev"),
        "environment": "debug" if _settings.debug else "prod",
        "components": {
            "database": (
                {"status": db_status, "latency_ms": db_latency_ms}
                if db_status == "ok"
                else {"status": db_status}
            ),
            "smtp": "configured" if _settings.smtp_configured else "missing-config",
        },
        "counts": {"routes": len(app.routes)},
    }
