"""Process-local TTL cache for slow-changing reads such as ``system_settings``."""

from __future__ import annotations

import time
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from app.Core.config import get_settings

_STORE: Dict[str, Tuple[Any, float]] = {}


def get(key: str) -> Any | None:
    item = _STORE.get(key)
    if item is None:
        return None
    value, expires_at = item
    if time.monotonic() < expires_at:
        return value
    _STORE.pop(key, None)
    return None


def set(key: str, value: Any, ttl: Optional[int] = None) -> None:
    seconds = get_settings().settings_cache_seconds if ttl is None else ttl
    # ttl <= 0 disables caching
    if seconds <= 0:
        return
    _STORE[key] = (value, time.monotonic() + seconds)


async def get_or_load(key: str, loader: Callable[[], Awaitable[Any]], ttl: Optional[int] = None) -> Any:
    """Return the cached value or await ``loader``; exceptions from the loader are not cached."""
    cached = get(key)
    if cached is not None:
        return cached
    value = await loader()
    if value is not None:
        set(key, value, ttl)
    return value


def clear(prefix: Optional[str] = None) -> None:
    if prefix is None:
        _STORE.clear()
        return
    for k in [k for k in _STORE if k.startswith(prefix)]:
        _STORE.pop(k, None)
