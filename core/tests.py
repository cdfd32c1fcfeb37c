from datetime import date
from decimal import Decimal
from io import StringIO
from types import SimpleNamespace

from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.test import SimpleTestCase, TestCase
from django.urls import reverse

from accounts.models import MemberProfile
from core.filtering import (
    apply_filters,
    any_of_predicate,
    choice_predicate,
    is_blank,
    range_predicate,
    text_predicate,
)
from core.numbers import average, money, percent, round_half_up
from core.store import EntityNotFound, create_entity, delete_entity, get_entity, update_entity
from payments.models import PaymentRecord
from schedule.models import ClassBooking, GymClass, Instructor


def _item(**kw):
    defaults = {"name": "", "tags": [], "status": "active", "when": date(2024, 7, 1)}
    defaults.update(kw)
    return SimpleNamespace(**defaults)


class FilteringTests(SimpleTestCase):
    def setUp(self):
        self.items = [
            _item(name="Morning HIIT", tags=["HIIT", "Cardio"], status="active", when=date(2024, 7, 1)),
            _item(name="Yoga Flow", tags=["Yoga"], status="inactive", when=date(2024, 6, 1)),
            _item(name="Cardio Dance", tags=["Dance"], status="active", when=date(2024, 5, 1)),
        ]

    def test_blank_and_all_match_everything(self):
        self.assertTrue(is_blank(None))
        self.assertTrue(is_blank("  "))
        self.assertTrue(is_blank("ALL"))
        self.assertFalse(is_blank("active"))

        result = apply_filters(self.items, text_predicate(""), choice_predicate("all", "status"))
        self.assertEqual(result, self.items)

    def test_text_match_is_case_insensitive_and_checks_list_elements(self):
        by_name = apply_filters(self.items, text_predicate("cardio", "name", "tags"))
        self.assertEqual([i.name for i in by_name], ["Morning HIIT", "Cardio Dance"])

        by_tag = apply_filters(self.items, text_predicate("YOG", "tags"))
        self.assertEqual([i.name for i in by_tag], ["Yoga Flow"])

    def test_filter_keeps_input_order_and_is_idempotent(self):
        preds = (text_predicate("a", "name"), choice_predicate("active", "status"))
        once = apply_filters(self.items, *preds)
        twice = apply_filters(once, *preds)
        self.assertEqual(once, twice)
        self.assertEqual([i.name for i in once], ["Morning HIIT", "Cardio Dance"])

    def test_any_of_and_range(self):
        self.assertEqual(len(apply_filters(self.items, any_of_predicate("Yoga", "tags"))), 1)
        self.assertEqual(len(apply_filters(self.items, any_of_predicate("Pilates", "tags"))), 0)

        recent = apply_filters(self.items, range_predicate("when", low=date(2024, 6, 1)))
        self.assertEqual([i.name for i in recent], ["Morning HIIT", "Yoga Flow"])

    def test_callable_field(self):
        result = apply_filters(self.items, text_predicate("flow", lambda i: i.name.upper()))
        self.assertEqual(len(result), 1)


class NumbersTests(SimpleTestCase):
    def test_round_half_up(self):
        self.assertEqual(round_half_up(Decimal("2.5")), Decimal("3"))
        self.assertEqual(round_half_up(Decimal("2.145"), 2), Decimal("2.15"))
        self.assertEqual(money(29.985), Decimal("29.99"))

    def test_average_and_percent(self):
        self.assertEqual(average([]), Decimal("0.0"))
        self.assertEqual(average([Decimal("4.9"), Decimal("4.8"), Decimal("4.7"), Decimal("4.6")]), Decimal("4.8"))
        self.assertEqual(percent(6, 8), Decimal("75"))
        self.assertEqual(percent(1, 0), Decimal("0"))


class StoreTests(TestCase):
    def test_create_validates_and_saves(self):
        member = create_entity(MemberProfile, email="a@example.com", full_name="Ann Lee")
        self.assertIsNotNone(member.pk)
        self.assertEqual(get_entity(MemberProfile, member.pk).full_name, "Ann Lee")

    def test_update_runs_model_validation(self):
        member = create_entity(MemberProfile, email="b@example.com", full_name="Bob Ray")
        updated = update_entity(MemberProfile, member.pk, occupation="Nurse")
        self.assertEqual(updated.occupation, "Nurse")

        with self.assertRaises(ValidationError):
            update_entity(
                MemberProfile,
                member.pk,
                membership_status=MemberProfile.Status.CANCELLED,
                next_billing_date=date(2030, 1, 1),
            )

    def test_get_missing_raises(self):
        with self.assertRaises(EntityNotFound):
            get_entity(MemberProfile, 999)

    def test_delete_is_idempotent(self):
        member = create_entity(MemberProfile, email="c@example.com", full_name="Cy Doe")
        self.assertTrue(delete_entity(MemberProfile, member.pk))
        self.assertFalse(delete_entity(MemberProfile, member.pk))
        self.assertFalse(MemberProfile.objects.filter(pk=member.pk).exists())


class PublicPagesTests(TestCase):
    def test_home_lists_plans_and_active_classes(self):
        coach = Instructor.objects.create(name="Sarah Johnson")
        GymClass.objects.create(name="Morning HIIT", instructor=coach, is_active=True)
        GymClass.objects.create(name="Retired Class", instructor=coach, is_active=False)

        r = self.client.get(reverse("core:home"))
        self.assertEqual(r.status_code, 200)
        self.assertContains(r, "Basic Membership")
        self.assertContains(r, "Premium Membership")
        self.assertContains(r, "Morning HIIT")
        self.assertNotContains(r, "Retired Class")

    def test_unknown_url_renders_custom_404(self):
        r = self.client.get("/no-such-page/")
        self.assertEqual(r.status_code, 404)
        self.assertContains(r, "Page not found", status_code=404)


class SeedDemoTests(TestCase):
    def test_seed_is_safe_to_rerun(self):
        out = StringIO()
        call_command("seed_demo", stdout=out)
        counts = (
            MemberProfile.objects.count(),
            Instructor.objects.count(),
            GymClass.objects.count(),
            PaymentRecord.objects.count(),
        )
        self.assertEqual(counts[:3], (9, 4, 4))
        self.assertIn("Demo data ensured", out.getvalue())

        call_command("seed_demo", stdout=StringIO())
        self.assertEqual(
            (
                MemberProfile.objects.count(),
                Instructor.objects.count(),
                GymClass.objects.count(),
                PaymentRecord.objects.count(),
            ),
            counts,
        )
        cancelled = MemberProfile.objects.get(email="james.brown@email.com")
        self.assertIsNone(cancelled.next_billing_date)
        self.assertTrue(ClassBooking.objects.filter(member__email="john.doe@example.com").exists())
