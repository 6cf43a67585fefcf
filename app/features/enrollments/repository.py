from __future__ import annotations

from typing import Any, Dict, List, Optional

from app.DB.supabase import execute, get_supabase

ENROLLMENT_COLUMNS = "id,user_id,course_id,enrolled_at,is_completed,completed_at,final_score_100,is_passed"


class EnrollmentRepository:

    _TABLE = "user_course_enrollments"

    async def get(self, user_id: str, course_id: str) -> Optional[Dict[str, Any]]:
        client = await get_supabase()
        resp = await execute(
            client.table(self._TABLE)
            .select(ENROLLMENT_COLUMNS)
            .eq("user_id", user_id)
            .eq("course_id", course_id)
            .limit(1)
        )
        rows = resp.data or []
        return rows[0] if rows else None

    async def list_for_user(self, user_id: str) -> List[Dict[str, Any]]:
        client = await get_supabase()
        resp = await execute(
            client.table(self._TABLE)
            .select(f"{ENROLLMENT_COLUMNS},courses(id,title,slug,thumbnail_url,category,difficulty_level)")
            .eq("user_id", user_id)
            .order("enrolled_at", desc=True)
        )
        return resp.data or []

    async def update(self, user_id: str, course_id: str, fields: Dict[str, Any]) -> List[Dict[str, Any]]:
        client = await get_supabase()
        resp = await execute(
            client.table(self._TABLE).update(fields).eq("user_id", user_id).eq("course_id", course_id)
        )
        return resp.data or []


enrollment_repository = EnrollmentRepository()

__all__ = ["enrollment_repository", "EnrollmentRepository"]
