"""
API key request schemas
"""
from typing import Annotated, List, Literal

from pydantic import Field, StringConstraints

from ..config import API_KEY_DEFAULT_RATE_LIMIT
from .base import PAGINATION_FIELDS, FutureDatetime, QueryFlag, build_schema, unique_items

API_KEY_PERMISSIONS = (
    "read:pages", "write:pages", "delete:pages",
    "read:sections", "write:sections", "delete:sections",
    "read:branding", "write:branding",
    "read:navigation", "write:navigation", "delete:navigation",
    "read:seo", "write:seo",
    "read:assets", "write:assets", "delete:assets",
    "read:users", "write:users", "delete:users",
    "read:webhooks", "write:webhooks", "delete:webhooks",
    "admin:all",
)

Permission = Literal[API_KEY_PERMISSIONS]  # type: ignore[valid-type]

KeyName = Annotated[
    str,
    StringConstraints(min_length=1, max_length=255, pattern=r"^[a-zA-Z0-9\s_-]+$"),
]
PermissionList = Annotated[
    List[Permission],
    Field(min_length=1),
    unique_items("Duplicate permissions are not allowed"),
]
RateLimit = Annotated[int, Field(ge=10, le=10000)]

API_KEY_FIELDS = {
    "name": (KeyName, ...),
    "permissions": (PermissionList, ...),
    "rate_limit": (RateLimit, API_KEY_DEFAULT_RATE_LIMIT),
    "expires_at": (FutureDatetime, None),
}

CreateApiKey = build_schema("CreateApiKey", API_KEY_FIELDS, doc="Body of POST /tenants/{tenantId}/api-keys")

UpdateApiKey = build_schema(
    "UpdateApiKey",
    API_KEY_FIELDS,
    optional_all=True,
    extra={"is_active": (bool, None)},
    doc="Body of PATCH /tenants/{tenantId}/api-keys/{keyId}",
)

ApiKeyQuery = build_schema(
    "ApiKeyQuery",
    {
        "is_active": (QueryFlag, None),
        **PAGINATION_FIELDS,
        "sort": (Literal["createdAt", "name", "lastUsedAt"], "createdAt"),
        "order": (Literal["asc", "desc"], "desc"),
    },
)
