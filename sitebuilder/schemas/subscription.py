"""
Subscription request schemas.

Create, update and cancel bodies are all derived from ``SUBSCRIPTION_FIELDS``:
update relaxes every field, create adds the ``trialDays`` convenience.
"""
from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import Field

from .base import Currency, bounded_str, build_schema

Plan = Literal["free", "starter", "pro", "enterprise"]
Status = Literal["active", "inactive", "trialing", "past_due", "canceled", "unpaid"]
BillingCycle = Literal["monthly", "yearly"]

SUBSCRIPTION_FIELDS = {
    "plan": (Plan, ...),
    "status": (Status, None),
    "billing_cycle": (BillingCycle, None),
    "amount": (Annotated[float, Field(ge=0)], None),
    "currency": (Currency, None),
    "stripe_customer_id": (Optional[bounded_str(max_length=255)], None),
    "stripe_subscription_id": (Optional[bounded_str(max_length=255)], None),
    "stripe_price_id": (Optional[bounded_str(max_length=255)], None),
    "current_period_start": (Optional[datetime], None),
    "current_period_end": (Optional[datetime], None),
    "cancel_at_period_end": (bool, False),
    "trial_start": (Optional[datetime], None),
    "trial_end": (Optional[datetime], None),
}

CreateSubscription = build_schema(
    "CreateSubscription",
    SUBSCRIPTION_FIELDS,
    extra={"trial_days": (Annotated[int, Field(gt=0, le=90)], None)},
)

UpdateSubscription = build_schema("UpdateSubscription", SUBSCRIPTION_FIELDS, optional_all=True)

CancelSubscription = build_schema(
    "CancelSubscription",
    {
        "immediately": (bool, False),
        "reason": (bounded_str(max_length=500), None),
    },
)
