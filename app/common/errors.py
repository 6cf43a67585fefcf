"""Error taxonomy shared by services and endpoints.

Services raise these; endpoints translate them into HTTP responses via
``to_http_exception``.
"""

from __future__ import annotations

from fastapi import HTTPException, status


class ValidationError(ValueError):
    """Missing or malformed input. Raised before any write."""


class NotFoundError(LookupError):
    """A lesson, submission, course or enrollment does not exist."""


class StorageError(RuntimeError):
    """The persistence layer rejected a read or write."""


class NotificationError(RuntimeError):
    """Email delivery failed. Never surfaced to API callers."""


def to_http_exception(exc: Exception) -> HTTPException:
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, StorageError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


__all__ = [
    "ValidationError",
    "NotFoundError",
    "StorageError",
    "NotificationError",
    "to_http_exception",
]
