import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from sitebuilder.db import Base
from sitebuilder.utils.dates import utcnow, iso


class SeoMetadata(Base):
    __tablename__ = "seo_metadata"
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    page_id = Column(String(36), ForeignKey("pages.id", ondelete="CASCADE"), unique=True, nullable=False)
    meta_title = Column(String(70), nullable=True)
    meta_description = Column(String(160), nullable=True)
    keywords = Column(String(255), nullable=True)  # comma-separated
    canonical_url = Column(String(255), nullable=True)
    og_title = Column(String(70), nullable=True)
    og_description = Column(String(160), nullable=True)
    og_image = Column(String(255), nullable=True)
    twitter_card = Column(String(32), nullable=True)
    twitter_title = Column(String(70), nullable=True)
    twitter_description = Column(String(160), nullable=True)
    twitter_image = Column(String(255), nullable=True)
    schema_markup = Column(JSON, nullable=True)
    robots = Column(String(100), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    page = relationship("Page", back_populates="seo")

    # Columns a client may write
    EDITABLE = (
        "meta_title", "meta_description", "keywords", "canonical_url",
        "og_title", "og_description", "og_image",
        "twitter_card", "twitter_title", "twitter_description", "twitter_image",
        "schema_markup", "robots",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "pageId": self.page_id,
            "metaTitle": self.meta_title,
            "metaDescription": self.meta_description,
            "keywords": self.keywords,
            "canonicalUrl": self.canonical_url,
            "ogTitle": self.og_title,
            "ogDescription": self.og_description,
            "ogImage": self.og_image,
            "twitterCard": self.twitter_card,
            "twitterTitle": self.twitter_title,
            "twitterDescription": self.twitter_description,
            "twitterImage": self.twitter_image,
            "schemaMarkup": self.schema_markup,
            "robots": self.robots,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
