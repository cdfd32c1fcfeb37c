from datetime import datetime

from django.contrib import messages
from django.core.exceptions import ValidationError
from django.shortcuts import get_object_or_404, redirect, render
from django.utils import timezone
from django.views.decorators.http import require_POST

from accounts.sessions import member_for_session, session_required

from .models import ClassBooking, ClassSchedule, GymClass, Instructor
from .services import book_class, cancel_booking, filter_classes, next_occurrence


def _parse_iso_date(s: str):
    if not s:
        return None
    try:
        return datetime.strptime(s, "%Y-%m-%d").date()
    except ValueError:
        return None


def class_list(request):
    today = timezone.localdate()
    query = request.GET.get("q", "").strip()
    difficulty = request.GET.get("difficulty", "all")
    instructor = request.GET.get("instructor", "all")

    classes = (
        GymClass.objects
        .filter(is_active=True)
        .select_related("instructor")
        .prefetch_related("schedule")
    )
    rows = []
    for c in filter_classes(classes, query=query, difficulty=difficulty, instructor=instructor):
        slots = [
            {"slot": s, "next_date": next_occurrence(s, today)}
            for s in c.schedule.all()
        ]
        rows.append({"class": c, "slots": [s for s in slots if s["next_date"]]})

    return render(request, "schedule/classes.html", {
        "rows": rows,
        "query": query,
        "difficulty": difficulty,
        "instructor": instructor,
        "difficulties": GymClass.Difficulty.choices,
        "instructors": Instructor.objects.filter(status=Instructor.Status.ACTIVE),
    })


@require_POST
@session_required
def book(request, slot_id: int):
    slot = get_object_or_404(ClassSchedule.objects.select_related("gym_class"), pk=slot_id)
    member = member_for_session(request.auth_session)
    if member is None:
        messages.error(request, "Complete your membership profile before booking classes.")
        return redirect("schedule:list")
    if not member.is_active:
        messages.error(request, "Your membership is not active.")
        return redirect("schedule:list")

    on_date = _parse_iso_date(request.POST.get("date", "")) or next_occurrence(slot, timezone.localdate())
    if on_date is None or on_date < timezone.localdate():
        messages.error(request, "This session is no longer available.")
        return redirect("schedule:list")

    try:
        booking = book_class(member, slot, on_date)
    except ValidationError as exc:
        messages.error(request, " ".join(exc.messages))
        return redirect("schedule:list")

    if booking.status == ClassBooking.Status.WAITLIST:
        messages.info(
            request,
            f"{booking.class_name} is full. You are #{booking.waitlist_position} on the waitlist.",
        )
    else:
        messages.success(request, f"Booked {booking.class_name} on {on_date:%A, %b %d}.")
    return redirect("dashboard:index")


@require_POST
@session_required
def cancel(request, booking_id: int):
    member = member_for_session(request.auth_session)
    booking = get_object_or_404(ClassBooking.objects.select_related("gym_class"), pk=booking_id, member=member)
    try:
        cancel_booking(booking)
    except ValidationError as exc:
        messages.error(request, " ".join(exc.messages))
    else:
        messages.success(request, f"Booking for {booking.class_name} cancelled.")
    return redirect("dashboard:index")
