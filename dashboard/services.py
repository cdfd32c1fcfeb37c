from __future__ import annotations

from collections import Counter
from datetime import date, timedelta

from django.utils import timezone

from core.numbers import round_half_up, to_decimal


def _local_day(dt) -> date:
    if timezone.is_aware(dt):
        return timezone.localtime(dt).date()
    return dt.date()


def check_in_days(check_ins) -> list[date]:
    return sorted({_local_day(c.check_in_time) for c in check_ins})


def current_streak(days, today: date) -> int:
    """Consecutive days with a check-in, counted back from ``today`` inclusive."""
    present = set(days)
    streak = 0
    cursor = today
    while cursor in present:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def longest_streak(days) -> int:
    days = sorted(set(days))
    if not days:
        return 0
    best = run = 1
    for prev, cur in zip(days, days[1:]):
        if cur - prev == timedelta(days=1):
            run += 1
            best = max(best, run)
        else:
            run = 1
    return best


def favorite_class(check_ins, bookings=()) -> str:
    counts = Counter(c.gym_class.name for c in check_ins if getattr(c, "gym_class_id", None))
    if not counts:
        counts = Counter(b.gym_class.name for b in bookings if b.status != "cancelled")
    if not counts:
        return ""
    return counts.most_common(1)[0][0]


def user_stats(check_ins, bookings=(), *, today: date | None = None) -> dict:
    today = today or timezone.localdate()
    check_ins = list(check_ins)
    days = check_in_days(check_ins)
    this_month = sum(
        1 for c in check_ins
        if _local_day(c.check_in_time).year == today.year and _local_day(c.check_in_time).month == today.month
    )
    minutes = sum(c.minutes for c in check_ins)
    return {
        "total_check_ins": len(check_ins),
        "this_month_check_ins": this_month,
        "current_streak": current_streak(days, today),
        "longest_streak": longest_streak(days),
        "favorite_class": favorite_class(check_ins, bookings),
        "total_hours": round_half_up(to_decimal(minutes) / 60, 1),
    }
