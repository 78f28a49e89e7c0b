import uuid

from sqlalchemy import Column, String, Integer, DateTime, Boolean, ForeignKey, JSON
from sqlalchemy.orm import relationship

from sitebuilder.db import Base
from sitebuilder.utils.dates import utcnow, iso


class ApiKey(Base):
    __tablename__ = "api_keys"
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(String(36), ForeignKey("tenants.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    key_hash = Column(String(128), nullable=False)        # hashed secret
    key_prefix = Column(String(12), index=True, nullable=False)
    permissions = Column(JSON, nullable=False, default=list)
    rate_limit = Column(Integer, nullable=False, default=1000)  # requests/hour
    last_used_at = Column(DateTime(timezone=True), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_by = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    tenant = relationship("Tenant", back_populates="api_keys")

    def to_dict(self) -> dict:
        # Never includes the secret or its hash
        return {
            "id": self.id,
            "name": self.name,
            "keyPrefix": self.key_prefix,
            "permissions": list(self.permissions or []),
            "rateLimit": self.rate_limit,
            "lastUsedAt": iso(self.last_used_at),
            "expiresAt": iso(self.expires_at),
            "isActive": self.is_active,
            "createdAt": iso(self.created_at),
        }
