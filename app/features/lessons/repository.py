from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from app.DB.supabase import execute, get_supabase


class LessonRepository:
    """Read-only access to authored lessons."""

    _TABLE = "lessons"

    async def get_lesson(self, lesson_id: str, columns: str = "id,course_id,title,content") -> Optional[Dict[str, Any]]:
        client = await get_supabase()
        resp = await execute(client.table(self._TABLE).select(columns).eq("id", lesson_id).limit(1))
        rows = resp.data or []
        return rows[0] if rows else None

    async def list_course_lessons(
        self, course_id: str, *, published_only: bool = True, columns: str = "id,course_id,content"
    ) -> List[Dict[str, Any]]:
        client = await get_supabase()
        query = client.table(self._TABLE).select(columns).eq("course_id", course_id)
        if published_only:
            query = query.eq("is_published", True)
        resp = await execute(query)
        return resp.data or []

    async def list_published_for_courses(self, course_ids: Sequence[str]) -> List[Dict[str, Any]]:
        if not course_ids:
            return []
        client = await get_supabase()
        resp = await execute(
            client.table(self._TABLE)
            .select("id,course_id")
            .in_("course_id", list(course_ids))
            .eq("is_published", True)
        )
        return resp.data or []

    async def list_by_ids(self, lesson_ids: Sequence[str], columns: str = "id,title,content") -> List[Dict[str, Any]]:
        if not lesson_ids:
            return []
        client = await get_supabase()
        resp = await execute(client.table(self._TABLE).select(columns).in_("id", list(lesson_ids)))
        return resp.data or []


lesson_repository = LessonRepository()

__all__ = ["lesson_repository", "LessonRepository"]
