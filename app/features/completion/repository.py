from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from app.DB.supabase import execute, get_supabase
from app.common.utils import now_iso

logger = logging.getLogger("completion.repository")


class CompletionRepository:
    """The completion ledger: one row per finished (user, lesson)."""

    _TABLE = "user_lesson_completion"

    async def mark_completed(self, user_id: str, lesson_id: str, course_id: str) -> Dict[str, Any]:
        """Upsert keyed by (user_id, lesson_id); safe to repeat."""
        client = await get_supabase()
        payload = {
            "user_id": user_id,
            "lesson_id": lesson_id,
            "course_id": course_id,
            "completed_at": now_iso(),
        }
        resp = await execute(client.table(self._TABLE).upsert(payload, on_conflict="user_id,lesson_id"))
        logger.info("lesson_completed user_id=%s lesson_id=%s course_id=%s", user_id, lesson_id, course_id)
        rows = resp.data or []
        return rows[0] if rows else payload

    async def delete_for_lessons(self, user_id: str, course_id: str, lesson_ids: Sequence[str]) -> None:
        if not lesson_ids:
            return
        client = await get_supabase()
        await execute(
            client.table(self._TABLE)
            .delete()
            .eq("user_id", user_id)
            .eq("course_id", course_id)
            .in_("lesson_id", list(lesson_ids))
        )

    async def list_for_courses(self, user_id: str, course_ids: Sequence[str]) -> List[Dict[str, Any]]:
        if not course_ids:
            return []
        client = await get_supabase()
        resp = await execute(
            client.table(self._TABLE)
            .select("course_id,lesson_id")
            .eq("user_id", user_id)
            .in_("course_id", list(course_ids))
        )
        return resp.data or []

    async def get(self, user_id: str, lesson_id: str) -> Optional[Dict[str, Any]]:
        client = await get_supabase()
        resp = await execute(
            client.table(self._TABLE).select("*").eq("user_id", user_id).eq("lesson_id", lesson_id).limit(1)
        )
        rows = resp.data or []
        return rows[0] if rows else None


completion_repository = CompletionRepository()

__all__ = ["completion_repository", "CompletionRepository"]
