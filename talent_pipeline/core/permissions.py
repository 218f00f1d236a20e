"""
Role-based permission helpers for the pipeline API.

Defines roles and provides dependency functions to enforce them.
"""

from typing import List

from fastapi import Depends, HTTPException, status

from talent_pipeline.core.dependencies import Actor, get_actor


class Roles:
    """Roles known to the pipeline engine."""
    ADMIN = "admin"
    CONSULTANT = "consultant"
    VIEWER = "viewer"

    ALL = [ADMIN, CONSULTANT, VIEWER]

    # May change pipeline entries, scorecards and placements
    WRITE = [ADMIN, CONSULTANT]


def check_role_permission(user_role: str, allowed_roles: List[str]) -> bool:
    """
    Check if user's role is in the list of allowed roles.

    Args:
        user_role: The user's current role
        allowed_roles: List of roles that are permitted

    Returns:
        True if user has permission, False otherwise
    """
    if not user_role or not allowed_roles:
        return False
    return user_role in allowed_roles


def require_roles(allowed_roles: List[str]):
    """
    Dependency to require that the acting user has one of the allowed roles.

    Usage:
        @router.post("/pipeline")
        async def add_candidate(
            actor: Actor = Depends(require_roles(Roles.WRITE))
        ):
            ...

    Raises:
        HTTPException: 403 if the role is not permitted
    """
    async def role_checker(actor: Actor = Depends(get_actor)) -> Actor:
        if not check_role_permission(actor.role, allowed_roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required roles: {', '.join(allowed_roles)}",
            )
        return actor
    return role_checker


require_reader = require_roles(Roles.ALL)
require_writer = require_roles(Roles.WRITE)
