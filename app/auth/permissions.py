# app/auth/permissions.py
"""
Authentication and authorization dependencies for protected routes.
"""

import logging
from typing import Optional
from fastapi import Depends, HTTPException, Header
from sqlalchemy.orm import Session

from .policy import Resource, is_allowed
from .security import verify_token
from app.core.db import get_db
from app.models.enums import Role
from app.models.orm import User

logger = logging.getLogger("nexus.auth.permissions")


class AuthContext:
    """
    Who is calling: user id, role and agency (tenant).
    Built once per request and passed explicitly into every service call.
    """
    def __init__(
        self,
        user_id: int,
        email: str,
        role: Role,
        agency_id: Optional[int] = None,
    ):
        self.user_id = user_id
        self.email = email
        self.role = role
        self.agency_id = agency_id

    def can(self, resource: Resource) -> bool:
        return is_allowed(self.role, resource)

    def __repr__(self) -> str:
        return f"AuthContext(user_id={self.user_id}, role={self.role.value}, agency_id={self.agency_id})"


def get_auth_context(
    authorization: str | None = Header(default=None),
    db: Session = Depends(get_db)
) -> AuthContext:
    """
    Dependency to get authenticated user context.
    Validates the bearer JWT, then re-reads the user so a deactivated
    account or changed role takes effect immediately.

    Usage:
        @router.get("/protected")
        def protected_route(auth: AuthContext = Depends(get_auth_context)):
            ...
    """
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Missing authorization token")

    token = authorization.split(" ", 1)[1]
    token_data = verify_token(token)

    if not token_data:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    user_id = token_data.get("user_id")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token payload")

    user = db.get(User, user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found or inactive")

    return AuthContext(
        user_id=user.id,
        email=user.email,
        role=user.role,
        agency_id=user.agency_id,
    )


def require_access(resource: Resource):
    """
    Dependency factory: authenticated caller whose role may open `resource`.

    Usage:
        @router.get("/team/stats")
        def team_stats(auth: AuthContext = Depends(require_access(Resource.MANAGER))):
            ...
    """
    def _guard(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
        if not auth.can(resource):
            logger.info("Access denied: %r -> %s", auth, resource.value)
            raise HTTPException(status_code=403, detail="Forbidden")
        return auth

    return _guard
