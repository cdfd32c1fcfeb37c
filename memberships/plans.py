from calendar import monthrange
from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class SubscriptionPlan:
    id: str
    name: str
    price: Decimal
    interval: str
    features: tuple[str, ...]
    processor_price_id: str


BASIC = SubscriptionPlan(
    id="basic",
    name="Basic Membership",
    price=Decimal("29.99"),
    interval="month",
    features=(
        "Access to downstairs gym (Male members)",
        "Basic equipment access",
        "Standard support",
    ),
    processor_price_id="price_basic_monthly",
)

PREMIUM = SubscriptionPlan(
    id="premium",
    name="Premium Membership",
    price=Decimal("49.99"),
    interval="month",
    features=(
        "Access to all classes (Female members)",
        "Access to downstairs gym",
        "Priority booking",
        "Premium support",
    ),
    processor_price_id="price_premium_monthly",
)

PLANS = (BASIC, PREMIUM)


def get_plan(plan_id: str) -> SubscriptionPlan | None:
    for plan in PLANS:
        if plan.id == plan_id:
            return plan
    return None


def next_billing_after(d: date) -> date:
    """Same day next month, clamped to the month's last day."""
    idx = d.month  # month index of the following month, zero-based
    year = d.year + idx // 12
    month = idx % 12 + 1
    day = min(d.day, monthrange(year, month)[1])
    return d.replace(year=year, month=month, day=day)
