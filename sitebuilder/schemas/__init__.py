from .base import validate_payload, build_schema
from .apikey import CreateApiKey, UpdateApiKey, ApiKeyQuery, API_KEY_PERMISSIONS
from .seo import UpsertSeoMetadata
from .subscription import CreateSubscription, UpdateSubscription, CancelSubscription
from .ai import SeoSuggestRequest, SeoOptimizeRequest
from .audit import AuditQuery

__all__ = [
    "validate_payload", "build_schema",
    "CreateApiKey", "UpdateApiKey", "ApiKeyQuery", "API_KEY_PERMISSIONS",
    "UpsertSeoMetadata",
    "CreateSubscription", "UpdateSubscription", "CancelSubscription",
    "SeoSuggestRequest", "SeoOptimizeRequest",
    "AuditQuery",
]
