"""
Audit Log Model
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON

from ..db import Base
from ..utils.dates import utcnow, iso


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    actor_id = Column(String(255), nullable=True, index=True)  # caller that performed the action
    tenant_id = Column(String(64), nullable=True, index=True)  # public tenant key
    action = Column(String(100), nullable=False, index=True)  # e.g. "apiKey.create", "seo_metadata.delete"
    resource_type = Column(String(100), nullable=True)
    resource_id = Column(String(255), nullable=True)
    old_value = Column(JSON, nullable=True)
    new_value = Column(JSON, nullable=True)
    details = Column("metadata", JSON, nullable=True)
    ip_address = Column(String(45), nullable=True)  # IPv4/IPv6 address
    user_agent = Column(String(1000), nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "createdAt": iso(self.created_at),
            "userId": self.actor_id,
            "tenantId": self.tenant_id,
            "action": self.action,
            "resourceType": self.resource_type,
            "resourceId": self.resource_id,
            "oldValue": self.old_value,
            "newValue": self.new_value,
            "metadata": self.details,
            "ipAddress": self.ip_address,
            "userAgent": self.user_agent,
        }
