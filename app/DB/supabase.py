"""Unified async Supabase client (single entry point).

Import using: from app.DB.supabase import get_supabase
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from postgrest.exceptions import APIError
from supabase import AsyncClient, create_async_client

from app.Core.config import get_settings
from app.common.errors import StorageError

logger = logging.getLogger("db.supabase")

_client: Optional[AsyncClient] = None
_lock = asyncio.Lock()


async def get_supabase() -> AsyncClient:
    """Return a cached `AsyncClient` instance (lazy-created)."""
    global _client
    if _client is not None:
        return _client
    async with _lock:
        if _client is None:
            settings = get_settings()
            try:
                _client = await create_async_client(settings.supabase_url, settings.supabase_key)
            except Exception as exc:  # pragma: no cover (network/init failure)
                raise RuntimeError("Could not create Supabase async client") from exc
    return _client


async def execute(query: Any) -> Any:
    """Run a PostgREST query, surfacing failures as ``StorageError``."""
    try:
        return await query.execute()
    except APIError as exc:
        message = getattr(exc, "message", None) or str(exc)
        logger.warning("supabase query failed code=%s message=%s", getattr(exc, "code", None), message)
        raise StorageError(message) from exc


# Backwards-compatible alias
get_client = get_supabase

__all__ = ["get_supabase", "get_client", "execute"]
