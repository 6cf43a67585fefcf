# app/features/notifications/repository.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from app.DB.supabase import execute, get_supabase
from app.common import cache

logger = logging.getLogger(__name__)

_SETTINGS_CACHE_KEY = "system_settings:1"
_DEFAULT_SETTINGS: Dict[str, bool] = {
    "course_notifications_enabled": True,
    "course_update_notifications_enabled": True,
    "newsletter_enabled": True,
}


async def _single(table: str, columns: str, row_id: str) -> Optional[Dict[str, Any]]:
    client = await get_supabase()
    resp = await execute(client.table(table).select(columns).eq("id", row_id).limit(1))
    rows = resp.data or []
    return rows[0] if rows else None


async def _load_system_settings() -> Dict[str, bool]:
    row = await _single("system_settings", ",".join(_DEFAULT_SETTINGS), "1") or {}
    return {key: (row.get(key) if row.get(key) is not None else default) for key, default in _DEFAULT_SETTINGS.items()}


class NotificationRepository:
    """Lookups the review emails need. All reads; nothing here writes."""

    @staticmethod
    async def get_system_settings() -> Dict[str, bool]:
        """Global notification toggles, defaulting to enabled when unreadable."""
        try:
            return await cache.get_or_load(_SETTINGS_CACHE_KEY, _load_system_settings)
        except Exception as exc:  # noqa: BLE001
            logger.warning("system_settings unavailable, using defaults: %s", exc)
            return dict(_DEFAULT_SETTINGS)

    @staticmethod
    async def get_user_email(user_id: str) -> Optional[str]:
        row = await _single("user_profiles", "id,email", user_id)
        email = (row or {}).get("email")
        return email.strip() if isinstance(email, str) and email.strip() else None

    @staticmethod
    async def get_lesson_title(lesson_id: str) -> Optional[str]:
        row = await _single("lessons", "id,title", lesson_id)
        return (row or {}).get("title")

    @staticmethod
    async def get_course(course_id: str) -> Optional[Dict[str, Any]]:
        return await _single("courses", "id,slug,title", course_id)


__all__ = ["NotificationRepository"]
