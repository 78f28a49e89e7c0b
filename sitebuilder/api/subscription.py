# sitebuilder/api/subscription.py
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from ..auth import ADMIN_PERMISSION, authorize
from ..db import get_db
from ..schemas.subscription import CancelSubscription, CreateSubscription, UpdateSubscription
from ..services import subscriptions as subscription_service
from ..services.audit import log_action, log_create, log_update
from ..services.tenants import get_tenant
from .parsing import parse_body
from .response_builders import api_boundary, created_response, success_response

router = APIRouter(tags=["subscription"])


@router.get("/tenants/{tenant_id}/subscription")
@api_boundary("Failed to fetch subscription")
async def get_subscription(tenant_id: str, request: Request, db: Session = Depends(get_db)):
    caller = authorize(request, db, tenant_id, ADMIN_PERMISSION)
    if isinstance(caller, Response):
        return caller

    tenant = get_tenant(db, tenant_id)
    sub = subscription_service.get_subscription(db, tenant)
    return success_response(sub.to_dict())


@router.post("/tenants/{tenant_id}/subscription")
@api_boundary("Failed to create subscription")
async def create_subscription(tenant_id: str, request: Request, db: Session = Depends(get_db)):
    caller = authorize(request, db, tenant_id, ADMIN_PERMISSION)
    if isinstance(caller, Response):
        return caller

    body = await parse_body(request, CreateSubscription)
    if isinstance(body, Response):
        return body

    tenant = get_tenant(db, tenant_id)
    sub = subscription_service.create_subscription(db, tenant, body.model_dump())

    log_create(
        db,
        actor_id=caller.id,
        tenant_id=tenant_id,
        resource_type="subscription",
        resource_id=sub.id,
        new_value=sub.to_dict(),
        request=request,
    )
    return created_response(sub.to_dict(), message="Subscription created successfully")


@router.put("/tenants/{tenant_id}/subscription")
@api_boundary("Failed to update subscription")
async def update_subscription(tenant_id: str, request: Request, db: Session = Depends(get_db)):
    caller = authorize(request, db, tenant_id, ADMIN_PERMISSION)
    if isinstance(caller, Response):
        return caller

    body = await parse_body(request, UpdateSubscription)
    if isinstance(body, Response):
        return body

    tenant = get_tenant(db, tenant_id)
    before = subscription_service.get_subscription(db, tenant).to_dict()
    sub = subscription_service.update_subscription(db, tenant, body.model_dump(exclude_unset=True))

    log_update(
        db,
        actor_id=caller.id,
        tenant_id=tenant_id,
        resource_type="subscription",
        resource_id=sub.id,
        old_value=before,
        new_value=sub.to_dict(),
        request=request,
    )
    return success_response(sub.to_dict(), message="Subscription updated successfully")


@router.delete("/tenants/{tenant_id}/subscription")
@api_boundary("Failed to cancel subscription")
async def cancel_subscription(tenant_id: str, request: Request, db: Session = Depends(get_db)):
    caller = authorize(request, db, tenant_id, ADMIN_PERMISSION)
    if isinstance(caller, Response):
        return caller

    body = await parse_body(request, CancelSubscription, optional=True)
    if isinstance(body, Response):
        return body

    tenant = get_tenant(db, tenant_id)
    sub = subscription_service.cancel_subscription(db, tenant, immediately=body.immediately, reason=body.reason)

    log_action(
        db,
        "subscription.cancel",
        actor_id=caller.id,
        tenant_id=tenant_id,
        resource_type="subscription",
        resource_id=sub.id,
        metadata={"immediately": body.immediately, "reason": body.reason},
        request=request,
    )
    message = "Subscription canceled" if body.immediately else "Subscription will be canceled at the end of the billing period"
    return success_response(sub.to_dict(), message=message)
