from __future__ import annotations

from datetime import date
import logging

from django.db import transaction
from django.utils import timezone

from core.filtering import apply_filters, choice_predicate, text_predicate
from core.store import create_entity, get_entity, update_entity
from memberships.plans import next_billing_after

from .models import MemberProfile

logger = logging.getLogger(__name__)


def filter_members(members, *, query: str = "", status: str = "all", plan: str = "all", gender: str = "all") -> list:
    """Members whose name or email contains ``query`` and match every enum filter."""
    return apply_filters(
        members,
        text_predicate(query, "full_name", "email"),
        choice_predicate(status, "membership_status"),
        choice_predicate(plan, "membership_type"),
        choice_predicate(gender, "gender"),
    )


@transaction.atomic
def register_member(email: str, profile_data: dict, *, today: date | None = None) -> MemberProfile:
    """Local profile created after the provider accepted the sign-up."""
    today = today or timezone.localdate()
    existing = MemberProfile.objects.filter(email__iexact=email).first()
    if existing:
        return existing
    return create_entity(
        MemberProfile,
        email=email,
        full_name=profile_data.get("full_name", ""),
        age=profile_data.get("age"),
        gender=profile_data.get("gender", ""),
        occupation=profile_data.get("occupation", ""),
        phone=profile_data.get("phone", ""),
        waiver_signed=bool(profile_data.get("waiver_signed")),
        membership_type=profile_data.get("membership_type") or MemberProfile.Plan.BASIC,
        membership_status=MemberProfile.Status.ACTIVE,
        join_date=today,
        next_billing_date=next_billing_after(today),
    )


def cancel_membership(member_id) -> MemberProfile:
    member = get_entity(MemberProfile, member_id)
    if member.membership_status == MemberProfile.Status.CANCELLED:
        return member
    logger.info("Cancelling membership of %s", member.email)
    return update_entity(
        MemberProfile,
        member_id,
        membership_status=MemberProfile.Status.CANCELLED,
        next_billing_date=None,
    )
