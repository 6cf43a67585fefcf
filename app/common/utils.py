from typing import Any, List, Optional
from datetime import datetime, timezone
import math


def current_timestamp() -> datetime:
    """Get current UTC timestamp"""
    return datetime.now(timezone.utc)


def now_iso() -> str:
    """Current UTC timestamp as an ISO string for Supabase payloads"""
    return format_timestamp(current_timestamp())


def format_timestamp(dt: datetime) -> str:
    """Format datetime for API responses"""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat()


def is_number(value: Any) -> bool:
    # bool is an int subclass; JSON true/false is never a score
    if isinstance(value, bool):
        return False
    return isinstance(value, (int, float)) and math.isfinite(value)


def safe_number(value: Any) -> float:
    """Coerce a stored score/total to a number, 0 when missing or non-numeric."""
    return value if is_number(value) else 0


def normalize_urls(value: Any, limit: int = 10) -> List[str]:
    """Keep trimmed, non-empty string URLs, capped at ``limit``."""
    if not isinstance(value, (list, tuple)):
        return []
    cleaned = [v.strip() for v in value if isinstance(v, str)]
    return [v for v in cleaned if v][:limit]


def clean_text(value: Optional[Any]) -> str:
    return value.strip() if isinstance(value, str) else ""
