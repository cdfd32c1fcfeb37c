from datetime import date, datetime, time, timedelta
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from django.utils import timezone

from accounts.gateway import PLACEHOLDER_KEY, PLACEHOLDER_URL
from accounts.models import MemberProfile
from schedule.models import ClassBooking, ClassSchedule, GymClass, Instructor
from schedule.services import (
    book_class,
    can_transition,
    cancel_booking,
    class_stats,
    filter_classes,
    filter_instructors,
    initial_status,
    instructor_stats,
    next_occurrence,
    popular_tag,
    upcoming_bookings,
    waitlist_position,
)

Status = ClassBooking.Status


def _next_weekday(name: str, after: date) -> date:
    for offset in range(1, 8):
        d = after + timedelta(days=offset)
        if d.strftime("%A") == name:
            return d
    raise AssertionError(name)


def names(rows):
    return [c.name for c in rows]


def _catalogue():
    sarah = Instructor(id=1, name="Sarah Johnson", specialties=["HIIT", "Strength Training"],
                       rating=Decimal("4.9"), experience=8, status="active")
    maria = Instructor(id=2, name="Maria Garcia", specialties=["Yoga", "Pilates"],
                       rating=Decimal("4.8"), experience=5, status="active")
    alex = Instructor(id=3, name="Alex Thompson", specialties=["Strength Training", "Powerlifting"],
                      rating=Decimal("4.7"), experience=6, status="active")
    jess = Instructor(id=4, name="Jessica Martinez", specialties=["Cardio", "Zumba"],
                      rating=Decimal("4.6"), experience=4, status="inactive")
    classes = [
        GymClass(id=1, name="Morning HIIT", instructor=sarah, capacity=12, difficulty="intermediate",
                 tags=["HIIT", "Cardio", "Strength"], is_active=True),
        GymClass(id=2, name="Yoga Flow", instructor=maria, capacity=12, difficulty="beginner",
                 tags=["Yoga", "Flexibility"], is_active=True),
        GymClass(id=3, name="Strength Training", instructor=alex, capacity=10, difficulty="intermediate",
                 tags=["Strength", "Powerlifting"], is_active=True),
        GymClass(id=4, name="Cardio Dance", instructor=jess, capacity=15, difficulty="beginner",
                 tags=["Cardio", "Dance"], is_active=False),
    ]
    return [sarah, maria, alex, jess], classes


class BookingRuleTests(SimpleTestCase):
    def test_full_class_goes_to_waitlist(self):
        self.assertEqual(initial_status(12, 8), Status.CONFIRMED)
        self.assertEqual(initial_status(12, 12), Status.WAITLIST)
        self.assertEqual(waitlist_position(12, 12), 1)
        self.assertEqual(waitlist_position(12, 14), 3)

    def test_waitlist_position_property(self):
        b = ClassBooking(status=Status.WAITLIST, capacity=12, current_bookings=12)
        self.assertEqual(b.waitlist_position, 1)
        b.status = Status.CONFIRMED
        self.assertIsNone(b.waitlist_position)

    def test_cancelled_is_terminal(self):
        self.assertTrue(can_transition(Status.CONFIRMED, Status.CANCELLED))
        self.assertTrue(can_transition(Status.WAITLIST, Status.CANCELLED))
        self.assertFalse(can_transition(Status.WAITLIST, Status.CONFIRMED))
        for target in (Status.CONFIRMED, Status.WAITLIST):
            self.assertFalse(can_transition(Status.CANCELLED, target))

    def test_next_occurrence(self):
        monday = date(2024, 7, 1)
        weekly = ClassSchedule(day_of_week="Wednesday", start_time=time(7), end_time=time(8))
        self.assertEqual(next_occurrence(weekly, monday), date(2024, 7, 3))
        weekly.day_of_week = "Monday"
        self.assertEqual(next_occurrence(weekly, monday), monday)

        one_off = ClassSchedule(day_of_week="Friday", start_time=time(7), end_time=time(8),
                                is_recurring=False, date=date(2024, 6, 28))
        self.assertIsNone(next_occurrence(one_off, monday))


class CatalogueTests(SimpleTestCase):
    def setUp(self):
        self.instructors, self.classes = _catalogue()

    def test_filter_classes(self):
        self.assertEqual(len(filter_classes(self.classes)), 4)
        self.assertEqual(names(filter_classes(self.classes, query="maria")), ["Yoga Flow"])
        self.assertEqual(names(filter_classes(self.classes, query="cardio")), ["Morning HIIT", "Cardio Dance"])
        self.assertEqual(
            names(filter_classes(self.classes, difficulty="intermediate", status="active")),
            ["Morning HIIT", "Strength Training"],
        )
        self.assertEqual(names(filter_classes(self.classes, status="inactive")), ["Cardio Dance"])
        self.assertEqual(names(filter_classes(self.classes, instructor="3")), ["Strength Training"])

    def test_filter_instructors(self):
        found = filter_instructors(self.instructors, specialty="Strength Training")
        self.assertEqual([i.name for i in found], ["Sarah Johnson", "Alex Thompson"])
        self.assertEqual(len(filter_instructors(self.instructors, status="inactive")), 1)
        self.assertEqual(len(filter_instructors(self.instructors, query="zumba")), 1)

    def test_class_stats(self):
        schedules = [ClassSchedule(gym_class=self.classes[0]) for _ in range(3)]
        stats = class_stats(self.classes, schedules, self.instructors)
        self.assertEqual(stats["total_classes"], 4)
        self.assertEqual(stats["active_classes"], 3)
        self.assertEqual(stats["total_capacity"], 49)
        self.assertEqual(stats["average_capacity"], 12)
        self.assertEqual(stats["weekly_sessions"], 3)
        self.assertEqual(stats["total_instructors"], 4)

    def test_class_stats_empty(self):
        self.assertEqual(class_stats([])["average_capacity"], 0)

    def test_instructor_stats(self):
        stats = instructor_stats(self.instructors, self.classes)
        self.assertEqual(stats["average_rating"], Decimal("4.8"))
        self.assertEqual(stats["average_experience"], Decimal("5.8"))
        self.assertEqual(stats["active_instructors"], 3)
        self.assertEqual(instructor_stats([])["average_rating"], 0)

    def test_popular_tag_counts_active_classes(self):
        self.assertEqual(popular_tag(self.classes), "Strength")
        self.assertEqual(popular_tag([]), "")


class BookingTests(TestCase):
    def setUp(self):
        self.today = timezone.localdate()
        coach = Instructor.objects.create(name="Sarah Johnson")
        self.gym_class = GymClass.objects.create(name="Morning HIIT", instructor=coach, capacity=1)
        self.slot = ClassSchedule.objects.create(
            gym_class=self.gym_class, day_of_week="Monday", start_time=time(7), end_time=time(8),
        )
        self.on_date = _next_weekday("Monday", self.today)
        self.ann = MemberProfile.objects.create(email="ann@example.com", full_name="Ann Lee")
        self.bob = MemberProfile.objects.create(email="bob@example.com", full_name="Bob Ray")

    def test_second_booking_goes_to_waitlist(self):
        first = book_class(self.ann, self.slot, self.on_date)
        second = book_class(self.bob, self.slot, self.on_date)

        self.assertEqual(first.status, Status.CONFIRMED)
        self.assertEqual(second.status, Status.WAITLIST)
        self.assertEqual(second.current_bookings, 1)
        self.assertEqual(second.waitlist_position, 1)
        self.assertEqual(second.instructor_name, "Sarah Johnson")

    def test_sessions_on_the_same_day_have_separate_seats(self):
        evening = ClassSchedule.objects.create(
            gym_class=self.gym_class, day_of_week="Monday", start_time=time(18), end_time=time(19),
        )
        morning_booking = book_class(self.ann, self.slot, self.on_date)
        evening_booking = book_class(self.bob, evening, self.on_date)
        self.assertEqual(morning_booking.status, Status.CONFIRMED)
        self.assertEqual(evening_booking.status, Status.CONFIRMED)
        self.assertEqual(evening_booking.current_bookings, 0)

        # one member may attend both sessions
        both = book_class(self.ann, evening, self.on_date)
        self.assertEqual(both.status, Status.WAITLIST)
        self.assertEqual(both.waitlist_position, 1)

    def test_duplicate_booking_rejected(self):
        book_class(self.ann, self.slot, self.on_date)
        with self.assertRaises(ValidationError):
            book_class(self.ann, self.slot, self.on_date)

    def test_wrong_weekday_rejected(self):
        with self.assertRaises(ValidationError):
            book_class(self.ann, self.slot, self.on_date + timedelta(days=1))

    def test_inactive_class_rejected(self):
        self.gym_class.is_active = False
        self.gym_class.save()
        with self.assertRaises(ValidationError):
            book_class(self.ann, self.slot, self.on_date)

    def test_cancel_frees_the_seat_without_promoting(self):
        first = book_class(self.ann, self.slot, self.on_date)
        waiting = book_class(self.bob, self.slot, self.on_date)

        cancel_booking(first)
        first.refresh_from_db()
        waiting.refresh_from_db()
        self.assertEqual(first.status, Status.CANCELLED)
        self.assertIsNotNone(first.cancelled_at)
        self.assertEqual(waiting.status, Status.WAITLIST)

        # cancelling twice is a no-op; the waitlist still holds its place
        cancel_booking(first)
        again = book_class(self.ann, self.slot, self.on_date)
        self.assertEqual(again.status, Status.WAITLIST)

    def test_upcoming_bookings(self):
        future = book_class(self.ann, self.slot, self.on_date)
        past = ClassBooking.objects.create(
            member=self.ann, gym_class=self.gym_class, date=self.today - timedelta(days=7),
            start_time=time(7), end_time=time(8), capacity=1, current_bookings=0,
        )
        rows = upcoming_bookings([past, future], now=timezone.now())
        self.assertEqual(rows, [future])

    def test_schedule_slot_validation(self):
        slot = ClassSchedule(gym_class=self.gym_class, day_of_week="Monday", start_time=time(9), end_time=time(8))
        with self.assertRaises(ValidationError):
            slot.full_clean()


@override_settings(SUPABASE_URL=PLACEHOLDER_URL, SUPABASE_KEY=PLACEHOLDER_KEY)
class ClassViewTests(TestCase):
    def setUp(self):
        coach = Instructor.objects.create(name="Maria Garcia")
        self.gym_class = GymClass.objects.create(name="Yoga Flow", instructor=coach, tags=["Yoga"])
        GymClass.objects.create(name="Cardio Dance", instructor=coach, difficulty="intermediate")
        self.slot = ClassSchedule.objects.create(
            gym_class=self.gym_class, day_of_week="Tuesday", start_time=time(18), end_time=time(19),
        )
        self.member = MemberProfile.objects.create(email="jane@example.com", full_name="Jane Roe")
        self.on_date = _next_weekday("Tuesday", timezone.localdate())

    def _login(self, email="jane@example.com"):
        self.client.post(reverse("accounts:login"), {"email": email, "password": "secret1"})

    def test_list_filters(self):
        r = self.client.get(reverse("schedule:list"), {"difficulty": "beginner"})
        self.assertEqual(r.status_code, 200)
        self.assertContains(r, "Yoga Flow")
        self.assertNotContains(r, "Cardio Dance")

    def test_booking_requires_session(self):
        r = self.client.post(reverse("schedule:book", args=[self.slot.pk]), {"date": self.on_date.isoformat()})
        self.assertEqual(r.status_code, 302)
        self.assertTrue(r["Location"].startswith(reverse("accounts:login")))
        self.assertFalse(ClassBooking.objects.exists())

    def test_book_and_cancel(self):
        self._login()
        r = self.client.post(reverse("schedule:book", args=[self.slot.pk]), {"date": self.on_date.isoformat()})
        self.assertRedirects(r, reverse("dashboard:index"), fetch_redirect_response=False)
        booking = ClassBooking.objects.get(member=self.member)
        self.assertEqual(booking.status, Status.CONFIRMED)

        r = self.client.post(reverse("schedule:cancel", args=[booking.pk]))
        self.assertRedirects(r, reverse("dashboard:index"), fetch_redirect_response=False)
        booking.refresh_from_db()
        self.assertEqual(booking.status, Status.CANCELLED)

    def test_cannot_cancel_someone_elses_booking(self):
        other = MemberProfile.objects.create(email="other@example.com", full_name="Other")
        booking = book_class(other, self.slot, self.on_date)
        self._login()
        r = self.client.post(reverse("schedule:cancel", args=[booking.pk]))
        self.assertEqual(r.status_code, 404)

    def test_booking_without_profile(self):
        self._login("stranger@example.com")
        r = self.client.post(reverse("schedule:book", args=[self.slot.pk]))
        self.assertRedirects(r, reverse("schedule:list"), fetch_redirect_response=False)
        self.assertFalse(ClassBooking.objects.exists())
