from datetime import time
from decimal import Decimal

from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone

from accounts.gateway import PLACEHOLDER_KEY, PLACEHOLDER_URL
from accounts.models import MemberProfile
from console.services import overview_stats
from payments.models import PaymentRecord
from schedule.models import ClassSchedule, GymClass, Instructor


@override_settings(
    SUPABASE_URL=PLACEHOLDER_URL,
    SUPABASE_KEY=PLACEHOLDER_KEY,
    GYM_ADMIN_EMAILS=["admin@topdoggym.com"],
)
class ConsoleTests(TestCase):
    def setUp(self):
        self.coach = Instructor.objects.create(
            name="Sarah Johnson", specialties=["HIIT"], rating=Decimal("4.9"), experience=8,
        )
        self.spare = Instructor.objects.create(name="Jessica Martinez", specialties=["Zumba"])
        self.hiit = GymClass.objects.create(name="Morning HIIT", instructor=self.coach, tags=["HIIT", "Cardio"])
        ClassSchedule.objects.create(gym_class=self.hiit, day_of_week="Monday", start_time=time(7), end_time=time(8))
        self.member = MemberProfile.objects.create(
            email="sarah.johnson@email.com", full_name="Sarah Johnson", membership_type="premium",
        )
        MemberProfile.objects.create(
            email="james.brown@email.com", full_name="James Brown", membership_status="cancelled",
        )
        self.payment = PaymentRecord.objects.create(
            member=self.member, amount=Decimal("49.99"), status="completed",
            plan_type="premium", invoice="INV-2024-001",
        )

    def _login(self, email="admin@topdoggym.com"):
        self.client.post(reverse("accounts:login"), {"email": email, "password": "secret1"})

    def test_anonymous_is_sent_to_login(self):
        r = self.client.get(reverse("console:overview"))
        self.assertEqual(r.status_code, 302)
        self.assertTrue(r["Location"].startswith(reverse("accounts:login")))

    def test_member_is_denied(self):
        self._login("sarah.johnson@email.com")
        r = self.client.get(reverse("console:overview"))
        self.assertEqual(r.status_code, 403)
        self.assertContains(r, "Access denied", status_code=403)

    def test_tabs_render_for_admin(self):
        self._login()
        for name in ("overview", "members", "classes", "instructors", "financial"):
            with self.subTest(tab=name):
                r = self.client.get(reverse(f"console:{name}"))
                self.assertEqual(r.status_code, 200)

    def test_member_filters(self):
        self._login()
        r = self.client.get(reverse("console:members"), {"status": "cancelled"})
        self.assertEqual([m.full_name for m in r.context["members"]], ["James Brown"])

    def test_financial_ignores_bad_period(self):
        self._login()
        r = self.client.get(reverse("console:financial"), {"days": "soon"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(len(r.context["payments"]), 1)

    def test_delete_is_idempotent(self):
        self._login()
        url = reverse("console:payment_delete", args=[self.payment.pk])
        self.assertRedirects(self.client.post(url), reverse("console:financial"), fetch_redirect_response=False)
        self.assertRedirects(self.client.post(url), reverse("console:financial"), fetch_redirect_response=False)
        self.assertFalse(PaymentRecord.objects.exists())

    def test_instructor_with_classes_is_protected(self):
        self._login()
        self.client.post(reverse("console:instructor_delete", args=[self.coach.pk]))
        self.assertTrue(Instructor.objects.filter(pk=self.coach.pk).exists())

        self.client.post(reverse("console:instructor_delete", args=[self.spare.pk]))
        self.assertFalse(Instructor.objects.filter(pk=self.spare.pk).exists())

    def test_cancel_membership(self):
        self._login()
        self.client.post(reverse("console:member_cancel", args=[self.member.pk]))
        self.member.refresh_from_db()
        self.assertEqual(self.member.membership_status, MemberProfile.Status.CANCELLED)

    def test_member_delete_keeps_payment_history(self):
        self._login()
        self.client.post(reverse("console:member_delete", args=[self.member.pk]))
        self.payment.refresh_from_db()
        self.assertIsNone(self.payment.member_id)

    def test_overview_stats(self):
        stats = overview_stats(
            members=MemberProfile.objects.all(),
            classes=GymClass.objects.all(),
            schedules=ClassSchedule.objects.all(),
            instructors=Instructor.objects.all(),
            payments=PaymentRecord.objects.all(),
            today=timezone.localdate(),
        )
        self.assertEqual(stats["total_members"], 2)
        self.assertEqual(stats["active_memberships"], 1)
        self.assertEqual(stats["retention_rate"], 50)
        self.assertEqual(stats["monthly_revenue"], Decimal("49.99"))
        self.assertIsNone(stats["revenue_growth"])
        self.assertEqual(stats["weekly_sessions"], 1)
        self.assertEqual(stats["total_instructors"], 2)
        self.assertEqual(stats["popular_class_type"], "HIIT")
