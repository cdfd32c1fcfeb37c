import logging

from django.contrib import messages
from django.db.models import ProtectedError
from django.shortcuts import redirect, render
from django.utils import timezone
from django.views.decorators.http import require_POST

from accounts.models import MemberProfile
from accounts.services import cancel_membership, filter_members
from accounts.sessions import admin_required
from core.store import EntityNotFound, delete_entity
from memberships.services import member_stats
from payments.models import PaymentRecord
from payments.services import filter_payments, financial_stats, plan_revenue
from schedule.models import ClassSchedule, GymClass, Instructor
from schedule.services import (
    all_specialties,
    class_stats,
    classes_for_instructor,
    filter_classes,
    filter_instructors,
    instructor_stats,
)

from .services import overview_stats

logger = logging.getLogger(__name__)


def _filters(request, *names) -> dict:
    values = {"query": request.GET.get("q", "").strip()}
    for name in names:
        values[name] = request.GET.get(name, "all") or "all"
    return values


def _delete(request, model, pk, label: str, redirect_to: str):
    try:
        deleted = delete_entity(model, pk)
    except ProtectedError:
        logger.warning("Refused to delete %s #%s: still referenced", model.__name__, pk)
        messages.error(request, f"This {label} is still referenced and cannot be deleted.")
    else:
        if deleted:
            messages.success(request, f"{label.capitalize()} deleted.")
        else:
            messages.info(request, f"{label.capitalize()} was already removed.")
    return redirect(redirect_to)


@admin_required
def overview(request):
    members = list(MemberProfile.objects.all())
    classes = list(GymClass.objects.all())
    stats = overview_stats(
        members=members,
        classes=classes,
        schedules=ClassSchedule.objects.all(),
        instructors=Instructor.objects.all(),
        payments=PaymentRecord.objects.all(),
        today=timezone.localdate(),
    )
    return render(request, "console/overview.html", {
        "tab": "overview",
        "stats": stats,
        "recent_members": sorted(members, key=lambda m: m.created_at, reverse=True)[:5],
    })


@admin_required
def members(request):
    f = _filters(request, "status", "plan", "gender")
    rows = MemberProfile.objects.all()
    return render(request, "console/members.html", {
        "tab": "members",
        "filters": f,
        "members": filter_members(rows, **f),
        "stats": member_stats(rows, today=timezone.localdate()),
        "statuses": MemberProfile.Status.choices,
        "plans": MemberProfile.Plan.choices,
        "genders": MemberProfile.Gender.choices,
    })


@require_POST
@admin_required
def member_cancel(request, pk: int):
    try:
        member = cancel_membership(pk)
    except EntityNotFound:
        messages.info(request, "Member was already removed.")
    else:
        messages.success(request, f"Membership of {member.full_name} cancelled.")
    return redirect("console:members")


@require_POST
@admin_required
def member_delete(request, pk: int):
    return _delete(request, MemberProfile, pk, "member", "console:members")


@admin_required
def classes(request):
    f = _filters(request, "difficulty", "status", "instructor")
    rows = list(GymClass.objects.select_related("instructor").prefetch_related("schedule"))
    instructors = list(Instructor.objects.all())
    return render(request, "console/classes.html", {
        "tab": "classes",
        "filters": f,
        "classes": filter_classes(rows, **f),
        "stats": class_stats(rows, ClassSchedule.objects.all(), instructors),
        "difficulties": GymClass.Difficulty.choices,
        "instructors": instructors,
    })


@require_POST
@admin_required
def class_delete(request, pk: int):
    return _delete(request, GymClass, pk, "class", "console:classes")


@admin_required
def instructors(request):
    f = _filters(request, "status", "specialty")
    rows = list(Instructor.objects.all())
    classes = list(GymClass.objects.all())
    found = filter_instructors(rows, **f)
    return render(request, "console/instructors.html", {
        "tab": "instructors",
        "filters": f,
        "instructors": [{"instructor": i, "classes": classes_for_instructor(i, classes)} for i in found],
        "stats": instructor_stats(rows, classes),
        "statuses": Instructor.Status.choices,
        "specialties": all_specialties(rows),
    })


@require_POST
@admin_required
def instructor_delete(request, pk: int):
    return _delete(request, Instructor, pk, "instructor", "console:instructors")


@admin_required
def financial(request):
    f = _filters(request, "status", "method", "days")
    today = timezone.localdate()
    rows = list(PaymentRecord.objects.select_related("member"))
    try:
        found = filter_payments(rows, today=today, **f)
    except ValueError:
        f["days"] = "all"
        found = filter_payments(rows, today=today, **f)
    return render(request, "console/financial.html", {
        "tab": "financial",
        "filters": f,
        "payments": found,
        "stats": financial_stats(rows, today=today),
        "plans": plan_revenue(rows),
        "statuses": PaymentRecord.Status.choices,
        "methods": PaymentRecord.Method.choices,
        "periods": [("7", "Last 7 days"), ("30", "Last 30 days"), ("90", "Last 90 days")],
    })


@require_POST
@admin_required
def payment_delete(request, pk: int):
    return _delete(request, PaymentRecord, pk, "payment", "console:financial")
