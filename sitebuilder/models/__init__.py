from .tenant import Tenant, Page
from .seo import SeoMetadata
from .apikey import ApiKey
from .subscription import Subscription
from .audit_log import AuditLog

__all__ = ["Tenant", "Page", "SeoMetadata", "ApiKey", "Subscription", "AuditLog"]
