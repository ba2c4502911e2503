"""Access control gate.

Turns the ``Authorization`` header into an :class:`Identity` or ``None``.
Verification never raises; the dependencies at the bottom are what convert a
missing identity into an error for routes that require one.
"""
import logging
from dataclasses import dataclass
from typing import Literal, Optional

from fastapi import Depends, Header

from storefront.core.errors import Forbidden, Unauthenticated
from storefront.schemas import parse_id
from storefront.security.utils import decode_token

logger = logging.getLogger(__name__)

Role = Literal["admin", "user"]
ROLES = ("admin", "user")


@dataclass(frozen=True)
class Identity:
    subject_id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def verify_token(token: str) -> Optional[Identity]:
    try:
        payload = decode_token(token)
    except Exception:
        # bad signature, expired, malformed: all look the same to the caller
        return None
    if not isinstance(payload, dict) or payload.get("type") != "access":
        return None
    role = payload.get("role")
    if role not in ROLES:
        return None
    subject_id = parse_id(payload.get("sub"))
    if subject_id is None:
        return None
    return Identity(subject_id=subject_id, role=role)


def authenticate(authorization: Optional[str]) -> Optional[Identity]:
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        return None
    identity = verify_token(token)
    if identity is None:
        logger.debug("rejected bearer credential")
    return identity


def get_identity(authorization: Optional[str] = Header(default=None, alias="Authorization")) -> Optional[Identity]:
    return authenticate(authorization)


def require_identity(identity: Optional[Identity] = Depends(get_identity)) -> Identity:
    if identity is None:
        raise Unauthenticated()
    return identity


def require_admin(identity: Identity = Depends(require_identity)) -> Identity:
    if not identity.is_admin:
        raise Forbidden("Access denied. Only admins can perform this action.")
    return identity
