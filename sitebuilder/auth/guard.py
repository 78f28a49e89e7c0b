"""
Authentication and tenant guard.

``authorize`` returns either a :class:`CallerIdentity` or a ready-made
rejection response that the route must return unchanged::

    caller = authorize(request, db, tenant_id, "write:seo")
    if isinstance(caller, Response):
        return caller
"""
import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from fastapi import Request, Response
from sqlalchemy.orm import Session

from ..api.response_builders import forbidden_response, unauthorized_response
from ..services.apikeys import resolve_api_key
from ..utils.crypto import hash_token
from .keys import is_operator_key

log = logging.getLogger(__name__)

ADMIN_PERMISSION = "admin:all"

ROLE_SUPER_ADMIN = "super_admin"
ROLE_API_KEY = "api_key"


@dataclass
class CallerIdentity:
    id: str
    role: str
    tenant_key: Optional[str] = None
    permissions: Tuple[str, ...] = field(default_factory=tuple)
    key_id: Optional[str] = None

    @property
    def is_super_admin(self) -> bool:
        return self.role == ROLE_SUPER_ADMIN


AuthOutcome = Union[CallerIdentity, Response]


def _extract_token(req: Request) -> str:
    # Authorization: Bearer <token>   OR   Authorization: <token>
    auth = req.headers.get("authorization")
    if auth:
        parts = auth.strip().split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]
        if len(parts) == 1:
            return parts[0]
    # X-API-Key: <token>
    x = req.headers.get("x-api-key")
    if x:
        return x.strip()
    return ""


def has_permission(caller: CallerIdentity, permission: str) -> bool:
    if caller.is_super_admin:
        return True
    granted = set(caller.permissions)
    if ADMIN_PERMISSION in granted or permission in granted:
        return True
    action = permission.split(":", 1)[0]
    return f"{action}:*" in granted


def can_access_tenant(caller: CallerIdentity, tenant_key: str) -> bool:
    return caller.is_super_admin or caller.tenant_key == tenant_key


def authenticate(request: Request, db: Session) -> AuthOutcome:
    """Resolve the caller from its API key"""
    token = _extract_token(request)
    if not token:
        return unauthorized_response("Authentication required")

    if is_operator_key(token):
        caller = CallerIdentity(id=f"operator:{hash_token(token)[:12]}", role=ROLE_SUPER_ADMIN)
    else:
        key = resolve_api_key(db, token)
        if key is None:
            log.warning("AUTH: invalid or expired API key")
            return unauthorized_response("Invalid or expired API key")
        caller = CallerIdentity(
            id=f"apikey:{key.id}",
            role=ROLE_API_KEY,
            tenant_key=key.tenant.tenant_key,
            permissions=tuple(key.permissions or ()),
            key_id=key.id,
        )

    request.state.caller = caller
    return caller


def authorize(request: Request, db: Session, tenant_id: str, permission: Optional[str] = None) -> AuthOutcome:
    """Authenticate, then check tenant access and (optionally) a permission"""
    caller = authenticate(request, db)
    if isinstance(caller, Response):
        return caller

    if not can_access_tenant(caller, tenant_id):
        log.warning("AUTH: tenant denied, caller=%s tenant=%s", caller.id, tenant_id)
        return forbidden_response("Access denied to this tenant")

    if permission and not has_permission(caller, permission):
        log.warning("AUTH: permission denied, need=%s caller=%s", permission, caller.id)
        return forbidden_response("Insufficient permissions")

    return caller
