# sitebuilder/api/seo.py
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from ..auth import authorize
from ..db import get_db
from ..schemas.seo import UpsertSeoMetadata
from ..services import seo as seo_service
from ..services.audit import log_audit
from ..services.tenants import get_page
from .parsing import parse_body
from .response_builders import api_boundary, no_content_response, success_response

router = APIRouter(tags=["seo"])


@router.get("/tenants/{tenant_id}/pages/{page_id}/seo")
@api_boundary("Failed to fetch SEO metadata")
async def get_seo_metadata(tenant_id: str, page_id: str, request: Request, db: Session = Depends(get_db)):
    caller = authorize(request, db, tenant_id, "read:seo")
    if isinstance(caller, Response):
        return caller

    page = get_page(db, tenant_id, page_id)
    seo = seo_service.get_seo(db, page)
    return success_response(seo.to_dict())


@router.put("/tenants/{tenant_id}/pages/{page_id}/seo")
@api_boundary("Failed to update SEO metadata")
async def upsert_seo_metadata(tenant_id: str, page_id: str, request: Request, db: Session = Depends(get_db)):
    caller = authorize(request, db, tenant_id, "write:seo")
    if isinstance(caller, Response):
        return caller

    # The page must exist before the body is even looked at
    page = get_page(db, tenant_id, page_id)

    body = await parse_body(request, UpsertSeoMetadata)
    if isinstance(body, Response):
        return body

    changes = body.model_dump(exclude_unset=True)
    seo, created = seo_service.upsert_seo(db, page, changes)

    log_audit(
        db,
        actor_id=caller.id,
        tenant_id=tenant_id,
        action="seo_metadata.upsert",
        resource_type="seo_metadata",
        resource_id=seo.id,
        new_value=seo.to_dict(),
        metadata={"pageId": page.id, "created": created},
        request=request,
    )
    return success_response(seo.to_dict(), message="SEO metadata saved successfully")


@router.delete("/tenants/{tenant_id}/pages/{page_id}/seo")
@api_boundary("Failed to delete SEO metadata")
async def delete_seo_metadata(tenant_id: str, page_id: str, request: Request, db: Session = Depends(get_db)):
    caller = authorize(request, db, tenant_id, "write:seo")
    if isinstance(caller, Response):
        return caller

    page = get_page(db, tenant_id, page_id)
    seo_id = seo_service.delete_seo(db, page)

    log_audit(
        db,
        actor_id=caller.id,
        tenant_id=tenant_id,
        action="seo_metadata.delete",
        resource_type="seo_metadata",
        resource_id=seo_id,
        metadata={"pageId": page.id},
        request=request,
    )
    return no_content_response()
