from datetime import date, datetime, time, timedelta
from decimal import Decimal

from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from django.utils import timezone

from accounts.gateway import PLACEHOLDER_KEY, PLACEHOLDER_URL
from accounts.models import MemberProfile
from dashboard.models import CheckIn
from dashboard.services import current_streak, favorite_class, longest_streak, user_stats
from payments.models import PaymentRecord
from schedule.models import ClassBooking, GymClass, Instructor


def _at(day: date, hour: int = 10) -> datetime:
    return timezone.make_aware(datetime.combine(day, time(hour)), timezone.get_current_timezone())


class StreakTests(SimpleTestCase):
    def test_current_streak_counts_back_from_today(self):
        today = date(2024, 7, 10)
        days = [date(2024, 7, 10), date(2024, 7, 9), date(2024, 7, 8), date(2024, 7, 5)]
        self.assertEqual(current_streak(days, today), 3)
        self.assertEqual(current_streak(days, date(2024, 7, 11)), 0)
        self.assertEqual(current_streak([], today), 0)

    def test_longest_streak(self):
        days = [date(2024, 7, 1), date(2024, 7, 2), date(2024, 7, 4), date(2024, 7, 5), date(2024, 7, 6)]
        self.assertEqual(longest_streak(days), 3)
        self.assertEqual(longest_streak([date(2024, 7, 1)]), 1)
        self.assertEqual(longest_streak([]), 0)


class UserStatsTests(SimpleTestCase):
    def setUp(self):
        coach = Instructor(id=1, name="Sarah Johnson")
        self.hiit = GymClass(id=1, name="Morning HIIT", instructor=coach)
        self.yoga = GymClass(id=2, name="Yoga Flow", instructor=coach)

    def test_user_stats(self):
        today = date(2024, 7, 2)
        check_ins = [
            CheckIn(facility="class", gym_class=self.hiit, check_in_time=_at(date(2024, 7, 2), 7), duration=60),
            CheckIn(facility="downstairs", check_in_time=_at(date(2024, 7, 1), 15), duration=90),
            CheckIn(facility="class", gym_class=self.hiit, check_in_time=_at(date(2024, 6, 30), 18),
                    check_out_time=_at(date(2024, 6, 30), 19)),
        ]
        stats = user_stats(check_ins, today=today)
        self.assertEqual(stats["total_check_ins"], 3)
        self.assertEqual(stats["this_month_check_ins"], 2)
        self.assertEqual(stats["current_streak"], 3)
        self.assertEqual(stats["longest_streak"], 3)
        self.assertEqual(stats["favorite_class"], "Morning HIIT")
        self.assertEqual(stats["total_hours"], Decimal("3.5"))

    def test_favorite_class_falls_back_to_bookings(self):
        bookings = [
            ClassBooking(gym_class=self.yoga, status="confirmed"),
            ClassBooking(gym_class=self.yoga, status="waitlist"),
            ClassBooking(gym_class=self.hiit, status="confirmed"),
            ClassBooking(gym_class=self.hiit, status="cancelled"),
            ClassBooking(gym_class=self.hiit, status="cancelled"),
        ]
        self.assertEqual(favorite_class([], bookings), "Yoga Flow")
        self.assertEqual(favorite_class([], []), "")

    def test_empty_history(self):
        stats = user_stats([], today=date(2024, 7, 2))
        self.assertEqual(stats["total_check_ins"], 0)
        self.assertEqual(stats["total_hours"], Decimal("0.0"))
        self.assertEqual(stats["favorite_class"], "")


@override_settings(SUPABASE_URL=PLACEHOLDER_URL, SUPABASE_KEY=PLACEHOLDER_KEY)
class DashboardViewTests(TestCase):
    def _login(self, email):
        self.client.post(reverse("accounts:login"), {"email": email, "password": "secret1"})

    def test_requires_session(self):
        r = self.client.get(reverse("dashboard:index"))
        self.assertEqual(r.status_code, 302)
        self.assertIn("next=%2Fdashboard%2F", r["Location"])

    def test_without_profile_shows_empty_state(self):
        self._login("stranger@example.com")
        r = self.client.get(reverse("dashboard:index"))
        self.assertEqual(r.status_code, 200)
        self.assertContains(r, "Complete your membership")

    def test_shows_profile_bookings_and_payments(self):
        member = MemberProfile.objects.create(
            email="john.doe@example.com", full_name="John Doe", membership_type="premium",
        )
        coach = Instructor.objects.create(name="Sarah Johnson")
        hiit = GymClass.objects.create(name="Morning HIIT", instructor=coach)
        ClassBooking.objects.create(
            member=member, gym_class=hiit, date=timezone.localdate() + timedelta(days=2),
            start_time=time(7), end_time=time(8), capacity=12, current_bookings=3,
        )
        for n in range(7):
            PaymentRecord.objects.create(
                member=member, date=date(2024, 1, 1) + timedelta(days=30 * n), amount=Decimal("49.99"),
                status="completed", plan_type="premium", invoice=f"INV-TEST-{n:03d}",
            )
        CheckIn.objects.create(member=member, gym_class=hiit, facility="class", duration=60)

        self._login("john.doe@example.com")
        r = self.client.get(reverse("dashboard:index"))
        self.assertEqual(r.status_code, 200)
        self.assertContains(r, "Welcome back, John!")
        self.assertContains(r, "Morning HIIT")
        self.assertEqual(len(r.context["payments"]), 5)
        self.assertContains(r, "INV-TEST-006")
        self.assertNotContains(r, "INV-TEST-000")
        self.assertEqual(r.context["stats"]["total_check_ins"], 1)
