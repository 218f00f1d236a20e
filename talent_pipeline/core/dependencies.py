"""
FastAPI dependencies for the application.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from fastapi import Header, HTTPException, status

from talent_pipeline.db.session import get_db
from talent_pipeline.services.events import EventPublisher, default_publisher

__all__ = ["Actor", "get_actor", "get_db", "get_event_publisher"]


@dataclass(frozen=True)
class Actor:
    """The caller as reported by the identity provider."""

    user_id: UUID
    role: str


async def get_actor(
    x_user_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
) -> Actor:
    """
    Build the acting user from the X-User-ID and X-User-Role headers.

    Raises 401 if either header is missing and 400 if the user id is not a UUID.
    """
    if not x_user_id or not x_user_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-ID and X-User-Role headers are required",
        )

    try:
        user_id = UUID(x_user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-User-ID must be a UUID",
        )

    return Actor(user_id=user_id, role=x_user_role.strip().lower())


def get_event_publisher() -> EventPublisher:
    """Publisher handed to services; overridden in tests to capture events."""
    return default_publisher
