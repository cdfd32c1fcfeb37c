from __future__ import annotations

from collections import Counter
from datetime import date, datetime, time, timedelta
import logging

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from core.filtering import (
    apply_filters,
    any_of_predicate,
    choice_predicate,
    is_blank,
    text_predicate,
)
from core.numbers import average, round_half_up, to_decimal

from .models import ClassBooking, ClassSchedule, GymClass, Instructor

logger = logging.getLogger(__name__)

Status = ClassBooking.Status

# cancelled is terminal; nothing promotes a waitlist booking automatically
ALLOWED_TRANSITIONS = {
    Status.CONFIRMED: {Status.CANCELLED},
    Status.WAITLIST: {Status.CANCELLED},
    Status.CANCELLED: set(),
}


# --- booking rules ---

def initial_status(capacity: int, current_bookings: int) -> str:
    if current_bookings < capacity:
        return Status.CONFIRMED
    return Status.WAITLIST


def waitlist_position(capacity: int, current_bookings: int) -> int:
    return max(1, current_bookings - capacity + 1)


def can_transition(from_status: str, to_status: str) -> bool:
    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def active_booking_count(gym_class: GymClass, on_date: date, start_time: time) -> int:
    """Non-cancelled bookings of one session: class, date and start time."""
    return (
        ClassBooking.objects
        .filter(gym_class=gym_class, date=on_date, start_time=start_time)
        .exclude(status=Status.CANCELLED)
        .count()
    )


@transaction.atomic
def book_class(member, slot: ClassSchedule, on_date: date) -> ClassBooking:
    """Book ``member`` into the class held at ``slot`` on ``on_date``.

    The booking is confirmed while seats are left and goes to the waitlist
    otherwise. Capacity and the number of earlier bookings are stored on the
    row so the waitlist position can be derived later.
    """
    gym_class = GymClass.objects.select_for_update().select_related("instructor").get(pk=slot.gym_class_id)

    if not gym_class.is_active:
        raise ValidationError("This class is not currently running.")
    if on_date.strftime("%A") != slot.day_of_week:
        raise ValidationError(f"{gym_class.name} does not run on {on_date:%A}s at this time.")
    if slot.date and slot.date != on_date:
        raise ValidationError("This session only runs on its scheduled date.")

    already = (
        ClassBooking.objects
        .filter(member=member, gym_class=gym_class, date=on_date, start_time=slot.start_time)
        .exclude(status=Status.CANCELLED)
        .exists()
    )
    if already:
        raise ValidationError("You already have a booking for this session.")

    current = active_booking_count(gym_class, on_date, slot.start_time)
    booking = ClassBooking(
        member=member,
        gym_class=gym_class,
        date=on_date,
        start_time=slot.start_time,
        end_time=slot.end_time,
        status=initial_status(gym_class.capacity, current),
        capacity=gym_class.capacity,
        current_bookings=current,
    )
    try:
        booking.save()
    except IntegrityError as exc:
        raise ValidationError("You already have a booking for this session.") from exc

    logger.info(
        "Booking #%s: %s → %s on %s (%s, %s/%s)",
        booking.pk, member, gym_class.name, on_date, booking.status, current, gym_class.capacity,
    )
    return booking


def transition(booking: ClassBooking, to_status: str) -> ClassBooking:
    if booking.status == to_status:
        return booking
    if not can_transition(booking.status, to_status):
        raise ValidationError(f"Booking cannot move from {booking.status} to {to_status}.")
    booking.status = to_status
    update_fields = ["status"]
    if to_status == Status.CANCELLED:
        booking.cancelled_at = timezone.now()
        update_fields.append("cancelled_at")
    booking.save(update_fields=update_fields)
    return booking


def cancel_booking(booking: ClassBooking) -> ClassBooking:
    was = booking.status
    transition(booking, Status.CANCELLED)
    if was != Status.CANCELLED:
        logger.info("Booking #%s cancelled (was %s)", booking.pk, was)
    return booking


def upcoming_bookings(bookings, *, now: datetime | None = None, limit: int | None = 3) -> list:
    now = now or timezone.now()
    rows = [b for b in bookings if b.status != Status.CANCELLED and b.starts_at() > now]
    if limit is not None:
        rows = rows[:limit]
    return rows


# --- filtering ---

def filter_classes(
    classes,
    *,
    query: str = "",
    difficulty: str = "all",
    status: str = "all",
    instructor: str = "all",
) -> list:
    """Name, instructor name or any tag contains ``query``; enums match exactly."""

    def status_predicate(c) -> bool:
        if is_blank(status):
            return True
        if status == "active":
            return c.is_active
        if status == "inactive":
            return not c.is_active
        return False

    return apply_filters(
        classes,
        text_predicate(query, "name", "instructor_name", "tags"),
        choice_predicate(difficulty, "difficulty"),
        status_predicate,
        choice_predicate(instructor, "instructor_id"),
    )


def filter_instructors(instructors, *, query: str = "", status: str = "all", specialty: str = "all") -> list:
    return apply_filters(
        instructors,
        text_predicate(query, "name", "email", "specialties"),
        choice_predicate(status, "status"),
        any_of_predicate(specialty, "specialties"),
    )


def classes_for_instructor(instructor: Instructor, classes) -> list:
    return [c for c in classes if c.instructor_id == instructor.pk]


def all_specialties(instructors) -> list[str]:
    found = set()
    for i in instructors:
        found.update(s for s in (i.specialties or []) if s)
    return sorted(found)


# --- statistics ---

def class_stats(classes, schedules=(), instructors=()) -> dict:
    classes = list(classes)
    total = len(classes)
    total_capacity = sum(int(c.capacity or 0) for c in classes)
    class_ids = {c.pk for c in classes}
    return {
        "total_classes": total,
        "active_classes": sum(1 for c in classes if c.is_active),
        "total_capacity": total_capacity,
        "average_capacity": int(round_half_up(to_decimal(total_capacity) / total)) if total else 0,
        "weekly_sessions": sum(1 for s in schedules if s.gym_class_id in class_ids),
        "total_instructors": len(list(instructors)),
    }


def instructor_stats(instructors, classes=()) -> dict:
    instructors = list(instructors)
    return {
        "total_instructors": len(instructors),
        "active_instructors": sum(1 for i in instructors if i.status == Instructor.Status.ACTIVE),
        "average_rating": average([i.rating for i in instructors], 1),
        "average_experience": average([i.experience for i in instructors], 1),
        "total_classes": len(list(classes)),
    }


def popular_tag(classes) -> str:
    counts = Counter()
    for c in classes:
        if c.is_active:
            counts.update(c.tags or [])
    if not counts:
        return ""
    return counts.most_common(1)[0][0]


def next_occurrence(slot: ClassSchedule, today: date) -> date | None:
    """First date on or after ``today`` when ``slot`` runs."""
    if slot.date:
        return slot.date if slot.date >= today else None
    for offset in range(7):
        d = today + timedelta(days=offset)
        if d.strftime("%A") == slot.day_of_week:
            return d
    return None
