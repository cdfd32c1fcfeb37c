from django.shortcuts import render
from django.utils import timezone

from accounts.sessions import member_for_session, session_required
from memberships.plans import get_plan
from schedule.models import ClassBooking
from schedule.services import upcoming_bookings

from .services import user_stats


@session_required
def index(request):
    session = request.auth_session
    member = member_for_session(session)
    if member is None:
        return render(request, "dashboard/index.html", {"session": session, "member": None})

    bookings = list(
        ClassBooking.objects
        .filter(member=member)
        .select_related("gym_class", "gym_class__instructor")
        .order_by("date", "start_time")
    )
    check_ins = member.check_ins.select_related("gym_class")

    return render(request, "dashboard/index.html", {
        "session": session,
        "member": member,
        "plan": get_plan(member.membership_type),
        "upcoming": upcoming_bookings(bookings, now=timezone.now()),
        "payments": member.payments.all()[:5],
        "stats": user_stats(check_ins, bookings, today=timezone.localdate()),
    })
