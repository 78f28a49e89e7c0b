# sitebuilder/api/api_keys.py
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from ..auth import ADMIN_PERMISSION, authorize
from ..db import get_db
from ..schemas.apikey import ApiKeyQuery, CreateApiKey, UpdateApiKey
from ..services import apikeys as apikey_service
from ..services.audit import log_create, log_delete, log_update
from ..services.tenants import get_tenant
from .parsing import parse_body, parse_query
from .response_builders import (
    api_boundary, created_response, no_content_response, paginated_response, success_response,
)

router = APIRouter(tags=["api-keys"])

KEY_CREATED_MESSAGE = "API key created successfully. Save the key - it will not be shown again."


@router.get("/tenants/{tenant_id}/api-keys")
@api_boundary("Failed to list API keys")
async def list_api_keys(tenant_id: str, request: Request, db: Session = Depends(get_db)):
    caller = authorize(request, db, tenant_id, ADMIN_PERMISSION)
    if isinstance(caller, Response):
        return caller

    query = parse_query(request, ApiKeyQuery)
    if isinstance(query, Response):
        return query

    tenant = get_tenant(db, tenant_id)
    keys, total = apikey_service.list_api_keys(
        db, tenant,
        is_active=query.is_active,
        page=query.page,
        limit=query.limit,
        sort=query.sort,
        order=query.order,
    )
    return paginated_response([k.to_dict() for k in keys], query.page, query.limit, total)


@router.post("/tenants/{tenant_id}/api-keys")
@api_boundary("Failed to create API key")
async def create_api_key(tenant_id: str, request: Request, db: Session = Depends(get_db)):
    caller = authorize(request, db, tenant_id, ADMIN_PERMISSION)
    if isinstance(caller, Response):
        return caller

    body = await parse_body(request, CreateApiKey)
    if isinstance(body, Response):
        return body

    tenant = get_tenant(db, tenant_id)
    key, secret = apikey_service.create_api_key(
        db, tenant,
        name=body.name,
        permissions=body.permissions,
        created_by=caller.id,
        rate_limit=body.rate_limit,
        expires_at=body.expires_at,
    )

    log_create(
        db,
        actor_id=caller.id,
        tenant_id=tenant_id,
        resource_type="apiKey",
        resource_id=key.id,
        metadata={"name": key.name, "keyPrefix": key.key_prefix, "permissions": key.permissions},
        request=request,
    )

    data = key.to_dict()
    data["key"] = secret
    return created_response(data, message=KEY_CREATED_MESSAGE)


@router.patch("/tenants/{tenant_id}/api-keys/{key_id}")
@api_boundary("Failed to update API key")
async def update_api_key(tenant_id: str, key_id: str, request: Request, db: Session = Depends(get_db)):
    caller = authorize(request, db, tenant_id, ADMIN_PERMISSION)
    if isinstance(caller, Response):
        return caller

    body = await parse_body(request, UpdateApiKey)
    if isinstance(body, Response):
        return body

    tenant = get_tenant(db, tenant_id)
    key = apikey_service.get_api_key(db, tenant, key_id)
    before = key.to_dict()
    changes = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None or k == "expires_at"}
    key = apikey_service.update_api_key(db, key, changes)

    log_update(
        db,
        actor_id=caller.id,
        tenant_id=tenant_id,
        resource_type="apiKey",
        resource_id=key.id,
        old_value=before,
        new_value=key.to_dict(),
        request=request,
    )
    return success_response(key.to_dict(), message="API key updated successfully")


@router.delete("/tenants/{tenant_id}/api-keys/{key_id}")
@api_boundary("Failed to delete API key")
async def delete_api_key(tenant_id: str, key_id: str, request: Request, db: Session = Depends(get_db)):
    caller = authorize(request, db, tenant_id, ADMIN_PERMISSION)
    if isinstance(caller, Response):
        return caller

    tenant = get_tenant(db, tenant_id)
    key = apikey_service.get_api_key(db, tenant, key_id)
    snapshot = key.to_dict()
    apikey_service.delete_api_key(db, key)

    log_delete(
        db,
        actor_id=caller.id,
        tenant_id=tenant_id,
        resource_type="apiKey",
        resource_id=key_id,
        old_value=snapshot,
        request=request,
    )
    return no_content_response()
