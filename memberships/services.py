from datetime import date

from django.utils import timezone

from accounts.models import MemberProfile
from core.numbers import percent


def membership_stats(members) -> dict:
    members = list(members)
    total = len(members)
    active = sum(1 for m in members if m.membership_status == MemberProfile.Status.ACTIVE)
    premium = sum(1 for m in members if m.membership_type == MemberProfile.Plan.PREMIUM)
    basic = sum(1 for m in members if m.membership_type == MemberProfile.Plan.BASIC)
    return {
        "total": total,
        "active": active,
        "inactive": total - active,
        "premium": premium,
        "basic": basic,
        "retention": int(percent(active, total)),
    }


def member_stats(members, *, today: date | None = None) -> dict:
    """Counters shown above the member table; ``this_month`` counts joins in today's month."""
    today = today or timezone.localdate()
    members = list(members)
    return {
        "total": len(members),
        "active": sum(1 for m in members if m.membership_status == MemberProfile.Status.ACTIVE),
        "premium": sum(1 for m in members if m.membership_type == MemberProfile.Plan.PREMIUM),
        "this_month": sum(
            1 for m in members
            if m.join_date and m.join_date.year == today.year and m.join_date.month == today.month
        ),
    }
