"""
Caller identity.

Authentication happens upstream: the gateway verifies the session and
forwards the caller as X-User-Id / X-User-Role headers. This module only
turns those headers into a Principal and enforces role requirements.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException

from .shared.roles import Author, AuthorType, Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    user_id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_care_provider(self) -> bool:
        return self.role in (Role.DOCTOR, Role.MEDSTORE)

    def as_author(self) -> Optional[Author]:
        """The caller as a schedule author, or None for patients and admins"""
        if not self.is_care_provider:
            return None
        return Author(AuthorType(self.role.value), self.user_id)


async def get_current_principal(
    x_user_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
) -> Principal:
    """Resolve the caller forwarded by the auth gateway"""
    if not x_user_id or not x_user_role:
        logger.warning("Request without caller identity headers")
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        user_id = int(x_user_id)
        role = Role(x_user_role.strip().upper())
    except ValueError as e:
        logger.warning(f"Invalid caller identity: id={x_user_id!r} role={x_user_role!r}")
        raise HTTPException(status_code=401, detail="Invalid caller identity") from e

    return Principal(user_id=user_id, role=role)


def require_roles(*roles: Role):
    """Dependency factory restricting an endpoint to the given roles"""

    async def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in roles:
            allowed = ", ".join(r.value for r in roles)
            raise HTTPException(
                status_code=403, detail=f"Forbidden: requires one of roles {allowed}"
            )
        return principal

    return dependency
