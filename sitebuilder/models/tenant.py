import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from sitebuilder.db import Base
from sitebuilder.utils.dates import utcnow


def _uuid() -> str:
    return str(uuid.uuid4())


class Tenant(Base):
    __tablename__ = "tenants"
    id = Column(String(36), primary_key=True, default=_uuid)
    tenant_key = Column(String(64), unique=True, index=True, nullable=False, default=_uuid)  # public tenant identifier
    name = Column(String(255), nullable=False)
    status = Column(String(32), nullable=False, default="active")
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    pages = relationship("Page", back_populates="tenant", cascade="all, delete-orphan")
    api_keys = relationship("ApiKey", back_populates="tenant", cascade="all, delete-orphan")
    subscription = relationship("Subscription", back_populates="tenant", uselist=False, cascade="all, delete-orphan")


class Page(Base):
    __tablename__ = "pages"
    id = Column(String(36), primary_key=True, default=_uuid)
    tenant_id = Column(String(36), ForeignKey("tenants.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)  # soft delete
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    tenant = relationship("Tenant", back_populates="pages")
    seo = relationship("SeoMetadata", back_populates="page", uselist=False, cascade="all, delete-orphan")
