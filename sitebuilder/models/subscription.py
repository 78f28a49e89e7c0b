import uuid

from sqlalchemy import Column, String, Float, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from sitebuilder.db import Base
from sitebuilder.utils.dates import utcnow, iso


class Subscription(Base):
    __tablename__ = "subscriptions"
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(String(36), ForeignKey("tenants.id", ondelete="CASCADE"), unique=True, nullable=False)
    plan = Column(String(32), nullable=False)                  # free|starter|pro|enterprise
    status = Column(String(32), nullable=False, default="active")
    billing_cycle = Column(String(16), nullable=True)          # monthly|yearly
    amount = Column(Float, nullable=True)                      # cents
    currency = Column(String(3), nullable=False, default="USD")
    stripe_customer_id = Column(String(255), nullable=True)
    stripe_subscription_id = Column(String(255), nullable=True)
    stripe_price_id = Column(String(255), nullable=True)
    current_period_start = Column(DateTime(timezone=True), nullable=True)
    current_period_end = Column(DateTime(timezone=True), nullable=True)
    cancel_at_period_end = Column(Boolean, nullable=False, default=False)
    canceled_at = Column(DateTime(timezone=True), nullable=True)
    cancellation_reason = Column(String(500), nullable=True)
    trial_start = Column(DateTime(timezone=True), nullable=True)
    trial_end = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    tenant = relationship("Tenant", back_populates="subscription")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "tenantId": self.tenant_id,
            "plan": self.plan,
            "status": self.status,
            "billingCycle": self.billing_cycle,
            "amount": self.amount,
            "currency": self.currency,
            "stripeCustomerId": self.stripe_customer_id,
            "stripeSubscriptionId": self.stripe_subscription_id,
            "stripePriceId": self.stripe_price_id,
            "currentPeriodStart": iso(self.current_period_start),
            "currentPeriodEnd": iso(self.current_period_end),
            "cancelAtPeriodEnd": self.cancel_at_period_end,
            "canceledAt": iso(self.canceled_at),
            "cancellationReason": self.cancellation_reason,
            "trialStart": iso(self.trial_start),
            "trialEnd": iso(self.trial_end),
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
