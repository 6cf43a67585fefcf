from __future__ import annotations

from typing import Any, Dict, List, Sequence

from app.DB.supabase import execute, get_supabase

PROFILE_COLUMNS = "id,email,display_name,first_name,last_name"


class ReviewRepository:
    """Lookups used to decorate admin review queues."""

    async def list_profiles(self, user_ids: Sequence[str]) -> List[Dict[str, Any]]:
        if not user_ids:
            return []
        client = await get_supabase()
        resp = await execute(client.table("user_profiles").select(PROFILE_COLUMNS).in_("id", list(user_ids)))
        return resp.data or []


review_repository = ReviewRepository()

__all__ = ["review_repository", "ReviewRepository"]
