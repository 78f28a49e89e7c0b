"""
SEO metadata persistence, one record per page.
"""
import logging
from typing import Any, Dict, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import NotFoundError
from ..models.seo import SeoMetadata
from ..models.tenant import Page
from ..utils.dates import utcnow

logger = logging.getLogger(__name__)


def get_seo(db: Session, page: Page) -> SeoMetadata:
    seo = db.query(SeoMetadata).filter(SeoMetadata.page_id == page.id).one_or_none()
    if seo is None:
        raise NotFoundError("SEO metadata")
    return seo


def _apply(seo: SeoMetadata, changes: Dict[str, Any]) -> None:
    for field, value in changes.items():
        if field in SeoMetadata.EDITABLE:
            setattr(seo, field, value)
    seo.updated_at = utcnow()


def upsert_seo(db: Session, page: Page, changes: Dict[str, Any]) -> Tuple[SeoMetadata, bool]:
    """Create or update the page's metadata with the supplied fields.

    Returns ``(record, created)``.
    """
    seo = db.query(SeoMetadata).filter(SeoMetadata.page_id == page.id).one_or_none()
    if seo is not None:
        _apply(seo, changes)
        db.commit()
        db.refresh(seo)
        return seo, False

    seo = SeoMetadata(page_id=page.id)
    _apply(seo, changes)
    db.add(seo)
    try:
        db.commit()
    except IntegrityError:
        # Lost an insert race on page_id; update the winner instead
        db.rollback()
        logger.info("SEO metadata insert raced, updating existing row", extra={"page_id": page.id})
        seo = db.query(SeoMetadata).filter(SeoMetadata.page_id == page.id).one()
        _apply(seo, changes)
        db.commit()
        db.refresh(seo)
        return seo, False
    db.refresh(seo)
    return seo, True


def delete_seo(db: Session, page: Page) -> str:
    """Delete the page's metadata and return the removed record id"""
    seo = get_seo(db, page)
    seo_id = seo.id
    db.delete(seo)
    db.commit()
    return seo_id
