from datetime import date

from django.utils import timezone

from memberships.services import membership_stats
from payments.services import revenue_stats
from schedule.services import class_stats, popular_tag


def overview_stats(*, members, classes, schedules, instructors, payments, today: date | None = None) -> dict:
    """Headline numbers of the admin overview tab."""
    today = today or timezone.localdate()
    classes = list(classes)
    instructors = list(instructors)

    m = membership_stats(members)
    c = class_stats(classes, schedules, instructors)
    r = revenue_stats(payments, today=today)
    return {
        "total_members": m["total"],
        "active_memberships": m["active"],
        "retention_rate": m["retention"],
        "total_revenue": r["total_revenue"],
        "monthly_revenue": r["current_month"],
        "revenue_growth": r["growth"],
        "revenue_by_month": r["by_month"],
        "total_classes": c["total_classes"],
        "total_instructors": c["total_instructors"],
        "average_capacity": c["average_capacity"],
        "weekly_sessions": c["weekly_sessions"],
        "popular_class_type": popular_tag(classes),
    }
