from sqlalchemy.orm import Session

from ..errors import NotFoundError
from ..models.tenant import Page, Tenant


def get_tenant(db: Session, tenant_key: str) -> Tenant:
    """Resolve a live tenant by its public key"""
    tenant = (
        db.query(Tenant)
        .filter(Tenant.tenant_key == tenant_key, Tenant.deleted_at.is_(None))
        .one_or_none()
    )
    if tenant is None:
        raise NotFoundError("Tenant")
    return tenant


def get_page(db: Session, tenant_key: str, page_id: str) -> Page:
    """Resolve a live page that belongs to the tenant"""
    page = (
        db.query(Page)
        .join(Tenant, Page.tenant_id == Tenant.id)
        .filter(
            Page.id == page_id,
            Page.deleted_at.is_(None),
            Tenant.tenant_key == tenant_key,
            Tenant.deleted_at.is_(None),
        )
        .one_or_none()
    )
    if page is None:
        raise NotFoundError("Page")
    return page
