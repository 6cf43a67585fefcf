from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from app.DB.supabase import execute, get_supabase
from app.common.errors import StorageError

QUIZ_COLUMNS = (
    "id,user_id,course_id,lesson_id,answers,attachment_urls,score,total,status,is_passed,"
    "reviewer_id,reviewed_at,created_at,updated_at"
)
PROJECT_COLUMNS = (
    "id,user_id,course_id,lesson_id,submission_text,submission_url,attachment_urls,"
    "status,feedback,reviewer_id,reviewed_at,created_at,updated_at"
)

MAX_LIST_LIMIT = 1000


def _first(resp: Any) -> Optional[Dict[str, Any]]:
    rows = resp.data or []
    return rows[0] if rows else None


class _SubmissionTable:
    """Shared access for the per-(user, lesson) submission tables."""

    _TABLE: str = ""
    _COLUMNS: str = "*"

    async def upsert(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Insert or replace the row keyed by (user_id, lesson_id)."""
        client = await get_supabase()
        resp = await execute(client.table(self._TABLE).upsert(payload, on_conflict="user_id,lesson_id"))
        row = _first(resp)
        if row is None:
            raise StorageError(f"Failed to persist {self._TABLE} row")
        return row

    async def get_for_user_lesson(self, user_id: str, lesson_id: str) -> Optional[Dict[str, Any]]:
        client = await get_supabase()
        resp = await execute(
            client.table(self._TABLE)
            .select(self._COLUMNS)
            .eq("user_id", user_id)
            .eq("lesson_id", lesson_id)
            .limit(1)
        )
        return _first(resp)

    async def get_by_id(self, submission_id: str) -> Optional[Dict[str, Any]]:
        client = await get_supabase()
        resp = await execute(client.table(self._TABLE).select(self._COLUMNS).eq("id", submission_id).limit(1))
        return _first(resp)

    async def transition(
        self, submission_id: str, from_status: str, fields: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Update the row only while it still has ``from_status``; None when another write got there first."""
        client = await get_supabase()
        resp = await execute(
            client.table(self._TABLE).update(fields).eq("id", submission_id).eq("status", from_status)
        )
        return _first(resp)

    async def list_pending_for_courses(self, user_id: str, course_ids: Sequence[str]) -> List[Dict[str, Any]]:
        if not course_ids:
            return []
        client = await get_supabase()
        resp = await execute(
            client.table(self._TABLE)
            .select("course_id,lesson_id")
            .eq("user_id", user_id)
            .in_("course_id", list(course_ids))
            .eq("status", "pending_review")
        )
        return resp.data or []

    async def list_recent(self, status: Optional[str] = None, limit: int = 200) -> List[Dict[str, Any]]:
        client = await get_supabase()
        query = (
            client.table(self._TABLE)
            .select(self._COLUMNS)
            .order("created_at", desc=True)
            .limit(max(1, min(limit, MAX_LIST_LIMIT)))
        )
        if status:
            query = query.eq("status", status)
        resp = await execute(query)
        return resp.data or []


class QuizSubmissionRepository(_SubmissionTable):
    _TABLE = "lesson_quiz_submissions"
    _COLUMNS = QUIZ_COLUMNS

    async def list_for_lessons(self, user_id: str, course_id: str, lesson_ids: Sequence[str]) -> List[Dict[str, Any]]:
        if not lesson_ids:
            return []
        client = await get_supabase()
        resp = await execute(
            client.table(self._TABLE)
            .select("lesson_id,status,score,total")
            .eq("user_id", user_id)
            .eq("course_id", course_id)
            .in_("lesson_id", list(lesson_ids))
        )
        return resp.data or []

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


class ProjectSubmissionRepository(_SubmissionTable):
    _TABLE = "lesson_project_submissions"
    _COLUMNS = PROJECT_COLUMNS


quiz_submission_repository = QuizSubmissionRepository()
project_submission_repository = ProjectSubmissionRepository()

__all__ = [
    "quiz_submission_repository",
    "project_submission_repository",
    "QuizSubmissionRepository",
    "ProjectSubmissionRepository",
]
