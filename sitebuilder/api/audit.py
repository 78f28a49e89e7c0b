# sitebuilder/api/audit.py
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from ..auth import ADMIN_PERMISSION, authorize
from ..db import get_db
from ..schemas.audit import AuditQuery
from ..services.audit import list_audit_logs
from ..services.tenants import get_tenant
from ..utils.dates import ensure_utc
from .parsing import parse_query
from .response_builders import api_boundary, paginated_response

router = APIRouter(tags=["audit"])


@router.get("/tenants/{tenant_id}/audit")
@api_boundary("Failed to fetch audit logs")
async def get_audit_logs(tenant_id: str, request: Request, db: Session = Depends(get_db)):
    caller = authorize(request, db, tenant_id, ADMIN_PERMISSION)
    if isinstance(caller, Response):
        return caller

    query = parse_query(request, AuditQuery)
    if isinstance(query, Response):
        return query

    get_tenant(db, tenant_id)
    rows, total = list_audit_logs(
        db, tenant_id,
        user_id=query.user_id,
        action=query.action,
        resource_type=query.resource_type,
        resource_id=query.resource_id,
        start_date=ensure_utc(query.start_date),
        end_date=ensure_utc(query.end_date),
        page=query.page,
        limit=query.limit,
    )
    return paginated_response([row.to_dict() for row in rows], query.page, query.limit, total)
