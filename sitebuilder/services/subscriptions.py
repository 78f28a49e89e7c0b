"""
Tenant subscription lifecycle. Billing ids are stored as plain data; nothing
here talks to a payment processor.
"""
from datetime import timedelta
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..errors import ConflictError, NotFoundError
from ..models.subscription import Subscription
from ..models.tenant import Tenant
from ..utils.dates import utcnow

# Columns that cannot be cleared by an update
REQUIRED_COLUMNS = ("plan", "status", "currency", "cancel_at_period_end")


def get_subscription(db: Session, tenant: Tenant) -> Subscription:
    sub = db.query(Subscription).filter(Subscription.tenant_id == tenant.id).one_or_none()
    if sub is None:
        raise NotFoundError("Subscription")
    return sub


def create_subscription(db: Session, tenant: Tenant, data: Dict[str, Any]) -> Subscription:
    if db.query(Subscription).filter(Subscription.tenant_id == tenant.id).count():
        raise ConflictError("Subscription already exists for this tenant")

    data = dict(data)
    trial_days = data.pop("trial_days", None)
    sub = Subscription(tenant_id=tenant.id, **{k: v for k, v in data.items() if v is not None})
    if trial_days:
        now = utcnow()
        sub.trial_start = now
        sub.trial_end = now + timedelta(days=trial_days)
        sub.status = "trialing"
    if not sub.status:
        sub.status = "active"

    db.add(sub)
    db.commit()
    db.refresh(sub)
    return sub


def update_subscription(db: Session, tenant: Tenant, changes: Dict[str, Any]) -> Subscription:
    sub = get_subscription(db, tenant)
    for field, value in changes.items():
        if value is None and field in REQUIRED_COLUMNS:
            continue
        setattr(sub, field, value)
    sub.updated_at = utcnow()
    db.commit()
    db.refresh(sub)
    return sub


def cancel_subscription(db: Session, tenant: Tenant, immediately: bool = False,
                        reason: Optional[str] = None) -> Subscription:
    sub = get_subscription(db, tenant)
    now = utcnow()
    if immediately:
        sub.status = "canceled"
        sub.canceled_at = now
    else:
        sub.cancel_at_period_end = True
    if reason:
        sub.cancellation_reason = reason
    sub.updated_at = now
    db.commit()
    db.refresh(sub)
    return sub
