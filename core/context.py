"""Per-request caller context.

The caller is identified by the `X-User-Id` header (sign-in itself is handled
by the identity provider in front of this API). The resolved
`RequestContext` is passed explicitly into services that check roles and
ownership.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from core.exceptions import AuthenticationError, PermissionDeniedError
from database import models
from database.deps import get_db_read

STAFF_ROLES = ("nutritionist", "trainer", "admin")


@dataclass(frozen=True)
class RequestContext:
    """Identity and role of the user making the request."""

    user_id: int
    role: str
    name: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    def require_role(self, *roles: str, action: str) -> None:
        """Raise `PermissionDeniedError` unless the caller has one of `roles` or is an admin."""
        if self.is_admin or self.role in roles:
            return
        raise PermissionDeniedError(action, role=self.role)


def context_for_user(user: models.User) -> RequestContext:
    return RequestContext(user_id=user.id, role=user.role, name=user.name)


def get_request_context(
    x_user_id: Optional[int] = Header(None),
    db: Session = Depends(get_db_read),
) -> RequestContext:
    """FastAPI dependency resolving the `X-User-Id` header into a `RequestContext`.

    Raises:
        AuthenticationError: If the header is missing or names no known user.
    """
    if x_user_id is None:
        raise AuthenticationError("Missing X-User-Id header")
    user = db.get(models.User, x_user_id)
    if not user:
        raise AuthenticationError(f"Unknown user id '{x_user_id}'")
    return context_for_user(user)
