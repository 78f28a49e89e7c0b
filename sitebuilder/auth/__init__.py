from .guard import (
    ADMIN_PERMISSION,
    AuthOutcome,
    CallerIdentity,
    authenticate,
    authorize,
    can_access_tenant,
    has_permission,
)

__all__ = [
    "ADMIN_PERMISSION",
    "AuthOutcome",
    "CallerIdentity",
    "authenticate",
    "authorize",
    "can_access_tenant",
    "has_permission",
]
