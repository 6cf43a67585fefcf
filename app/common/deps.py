"""Shared FastAPI dependencies for authentication and authorization."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from app.Core.config import get_settings
from app.DB.supabase import execute, get_supabase


logger = logging.getLogger("auth.deps")
security = HTTPBearer(auto_error=True)


class CurrentUser(BaseModel):
    """Minimal user identity shared across endpoints."""
    id: str
    email: Optional[str] = None
    role: str = "student"


async def _load_role(user_id: str) -> str:
    client = await get_supabase()
    resp = await execute(client.table("user_profiles").select("id,is_admin").eq("id", user_id).limit(1))
    rows = resp.data or []
    if rows and rows[0].get("is_admin"):
        return "admin"
    return "student"


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> CurrentUser:
    """Resolve and return the current authenticated user.

    Steps:
      1. Validate bearer token via Supabase Auth
      2. Look up the admin flag on ``user_profiles``
      3. Return typed minimal identity object
    """
    client = await get_supabase()
    token = credentials.credentials
    try:
        t0 = time.perf_counter()
        auth_user = await asyncio.wait_for(
            client.auth.get_user(token), timeout=get_settings().auth_whoami_timeout
        )
        ms = int((time.perf_counter() - t0) * 1000)
        if ms > 50:
            logger.info("auth.get_user_ms=%d", ms)
    except Exception as exc:  # noqa: BLE001
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized") from exc

    if not auth_user or not auth_user.user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    sup_user = auth_user.user
    role = await _load_role(str(sup_user.id))
    current = CurrentUser(id=str(sup_user.id), email=sup_user.email, role=role)

    request_id = getattr(request.state, "request_id", None)
    logger.info(
        "auth_resolved user_id=%s role=%s request_id=%s path=%s",
        current.id,
        current.role,
        request_id,
        request.url.path,
    )
    return current


def require_role(*roles: str) -> Callable:
    """Factory returning dependency enforcing that user has one of the roles.

    Args:
      roles: Allowed roles (case-insensitive). Empty -> no restriction.
    """
    normalized = {r.lower() for r in roles if r}

    async def _checker(current: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not normalized:
            return current
        role_l = current.role.lower()
        if role_l in normalized or role_l == "admin":
            return current
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    return _checker


def require_admin() -> Callable:
    return require_role("admin")
