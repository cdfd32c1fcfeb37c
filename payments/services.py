from __future__ import annotations

from collections import OrderedDict
from datetime import date, timedelta
from decimal import Decimal

from django.utils import timezone

from core.filtering import apply_filters, choice_predicate, is_blank, range_predicate, text_predicate
from core.numbers import ZERO, money, percent, round_half_up, to_decimal

from .models import PaymentRecord

Status = PaymentRecord.Status


def _previous_month(year: int, month: int) -> tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def _sum(payments) -> Decimal:
    return money(sum((to_decimal(p.amount) for p in payments), ZERO))


def filter_payments(
    payments,
    *,
    query: str = "",
    status: str = "all",
    method: str = "all",
    days="all",
    today: date | None = None,
) -> list:
    """Description or invoice contains ``query``; ``days`` keeps the last N days."""
    cutoff = None
    if not is_blank(days):
        today = today or timezone.localdate()
        cutoff = today - timedelta(days=max(0, int(days)))
    return apply_filters(
        payments,
        text_predicate(query, "description", "invoice"),
        choice_predicate(status, "status"),
        choice_predicate(method, "method"),
        range_predicate("date", low=cutoff),
    )


def monthly_revenue(payments, *, statuses=(Status.COMPLETED,)) -> "OrderedDict[tuple[int, int], Decimal]":
    """Revenue per ``(year, month)`` bucket, oldest first.

    Only payments whose status is in ``statuses`` count; pass ``None`` to sum
    every payment.
    """
    buckets: dict[tuple[int, int], Decimal] = {}
    for p in payments:
        if statuses is not None and p.status not in statuses:
            continue
        key = (p.date.year, p.date.month)
        buckets[key] = buckets.get(key, ZERO) + to_decimal(p.amount)
    return OrderedDict((k, money(buckets[k])) for k in sorted(buckets))


def revenue_growth(current, previous) -> Decimal | None:
    """Month-over-month growth in percent, 2 decimals; ``None`` without a baseline."""
    previous = to_decimal(previous)
    if previous == ZERO:
        return None
    return round_half_up((to_decimal(current) - previous) / previous * 100, 2)


def revenue_stats(payments, *, today: date | None = None) -> dict:
    today = today or timezone.localdate()
    buckets = monthly_revenue(payments)
    current_key = (today.year, today.month)
    previous_key = _previous_month(*current_key)
    current = buckets.get(current_key, money(ZERO))
    previous = buckets.get(previous_key, money(ZERO))
    return {
        "current_month": current,
        "previous_month": previous,
        "growth": revenue_growth(current, previous),
        "total_revenue": money(sum(buckets.values(), ZERO)),
        "by_month": [
            {"year": y, "month": m, "label": date(y, m, 1).strftime("%b %Y"), "revenue": v}
            for (y, m), v in buckets.items()
        ],
    }


def financial_stats(payments, *, today: date | None = None) -> dict:
    today = today or timezone.localdate()
    payments = list(payments)
    completed = [p for p in payments if p.status == Status.COMPLETED]
    pending = [p for p in payments if p.status == Status.PENDING]
    failed = [p for p in payments if p.status == Status.FAILED]
    this_month = [p for p in payments if p.date.year == today.year and p.date.month == today.month]
    return {
        "total_revenue": _sum(payments),
        "completed_revenue": _sum(completed),
        "pending_revenue": _sum(pending),
        "monthly_revenue": _sum(this_month),
        "completed_count": len(completed),
        "pending_count": len(pending),
        "failed_count": len(failed),
        "total_transactions": len(payments),
    }


def plan_revenue(payments) -> dict:
    payments = list(payments)
    premium = _sum(p for p in payments if p.plan_type == PaymentRecord.PlanType.PREMIUM)
    basic = _sum(p for p in payments if p.plan_type == PaymentRecord.PlanType.BASIC)
    total = premium + basic
    return {
        "premium": premium,
        "basic": basic,
        "total": total,
        "premium_percentage": int(percent(premium, total)),
        "basic_percentage": int(percent(basic, total)),
    }
