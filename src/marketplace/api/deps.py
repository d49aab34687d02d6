"""Request dependencies: who is calling, and in which role.

Authentication happens upstream; the identity service forwards the caller as
``X-User-Id`` and ``X-User-Role`` headers.
"""

from typing import Literal

from fastapi import Depends, Header, HTTPException
from protean.utils.globals import current_domain
from pydantic import BaseModel, ValidationError

from marketplace.vendor.vendor import Vendor

Role = Literal["customer", "vendor", "admin"]


class Caller(BaseModel):
    user_id: str
    role: Role


def get_caller(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Caller:
    if not x_user_id or not x_user_role:
        raise HTTPException(status_code=401, detail="Authentication required")
    try:
        return Caller(user_id=x_user_id, role=x_user_role.lower())
    except ValidationError:
        raise HTTPException(status_code=401, detail="Unknown role") from None


def require_role(*roles: str):
    def dependency(caller: Caller = Depends(get_caller)) -> Caller:
        if caller.role not in roles:
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return caller

    return dependency


def current_vendor(caller: Caller = Depends(require_role("vendor"))) -> Vendor:
    """The Vendor profile owned by the calling vendor user."""
    vendors = current_domain.repository_for(Vendor)._dao.query.filter(user_id=caller.user_id).all().items
    if not vendors:
        raise HTTPException(status_code=403, detail="Vendor profile not found")
    return vendors[0]
