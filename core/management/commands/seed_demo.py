from datetime import date, datetime, time, timedelta
from decimal import Decimal
import random

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from accounts.models import MemberProfile
from dashboard.models import CheckIn
from memberships.plans import get_plan, next_billing_after
from payments.models import PaymentRecord
from schedule.models import ClassSchedule, GymClass, Instructor
from schedule.services import book_class, next_occurrence

PHOTO = "https://images.unsplash.com/photo-{}?w=150&h=150&fit=crop&crop=face"

MEMBERS = [
    ("sarah.johnson@email.com", "Sarah Johnson", 28, "female", "(555) 123-4567", "premium", "active", "2024-01-15", "1494790108755-2616b612b786"),
    ("mike.chen@email.com", "Mike Chen", 32, "male", "(555) 234-5678", "basic", "active", "2024-02-20", "1507003211169-0a1dd7228f2d"),
    ("emily.rodriguez@email.com", "Emily Rodriguez", 25, "female", "(555) 345-6789", "premium", "active", "2024-03-10", "1438761681033-6461ffad8d80"),
    ("david.wilson@email.com", "David Wilson", 35, "male", "(555) 456-7890", "basic", "inactive", "2023-11-05", "1472099645785-5658abf4ff4e"),
    ("lisa.thompson@email.com", "Lisa Thompson", 29, "female", "(555) 567-8901", "premium", "active", "2024-04-15", "1544005313-94ddf0286df2"),
    ("james.brown@email.com", "James Brown", 41, "male", "(555) 678-9012", "basic", "cancelled", "2023-08-20", "1500648767791-00dcc994a43e"),
    ("maria.garcia@email.com", "Maria Garcia", 26, "female", "(555) 789-0123", "premium", "active", "2024-05-01", "1487412720507-e7ab37603c6f"),
    ("robert.lee@email.com", "Robert Lee", 38, "male", "(555) 890-1234", "basic", "active", "2024-01-30", "1519244703995-f4e0f30006d5"),
]

DEMO_MEMBER = ("john.doe@example.com", "John Doe", 28, "male", "(555) 123-4567", "premium", "active", "2024-01-15", "1472099645785-5658abf4ff4e")

INSTRUCTORS = [
    ("Sarah Johnson", "sarah.instructor@topdoggym.com", ["HIIT", "Strength Training", "Functional Fitness"],
     "Certified personal trainer with 8 years of experience. Specializes in high-intensity workouts and strength building.",
     8, "4.9", 245, "2023-06-15"),
    ("Maria Garcia", "maria.instructor@topdoggym.com", ["Yoga", "Pilates", "Flexibility"],
     "Yoga instructor with 200-hour certification. Focuses on mind-body connection and flexibility.",
     5, "4.8", 180, "2023-09-01"),
    ("Alex Thompson", "alex.instructor@topdoggym.com", ["Strength Training", "Powerlifting", "Bodybuilding"],
     "Former competitive powerlifter with expertise in strength training and muscle building.",
     6, "4.7", 165, "2023-07-20"),
    ("Jessica Martinez", "jessica.instructor@topdoggym.com", ["Cardio", "Dance Fitness", "Zumba"],
     "High-energy fitness instructor specializing in cardio and dance-based workouts.",
     4, "4.6", 120, "2024-01-10"),
]

CLASSES = [
    {
        "name": "Morning HIIT",
        "instructor": "Sarah Johnson",
        "description": "High-intensity interval training to kickstart your day. Perfect for burning calories and building endurance.",
        "duration": 60,
        "capacity": 12,
        "difficulty": "intermediate",
        "equipment": ["Dumbbells", "Resistance Bands", "Kettlebells"],
        "tags": ["HIIT", "Cardio", "Strength"],
        "slots": [("Monday", "07:00", "08:00"), ("Wednesday", "07:00", "08:00"), ("Friday", "07:00", "08:00")],
    },
    {
        "name": "Yoga Flow",
        "instructor": "Maria Garcia",
        "description": "Gentle yoga practice focusing on breath and movement. Suitable for all levels.",
        "duration": 60,
        "capacity": 12,
        "difficulty": "beginner",
        "equipment": ["Yoga Mats", "Blocks", "Straps"],
        "tags": ["Yoga", "Flexibility", "Mindfulness"],
        "slots": [("Tuesday", "18:00", "19:00"), ("Thursday", "18:00", "19:00")],
    },
    {
        "name": "Strength Training",
        "instructor": "Alex Thompson",
        "description": "Build muscle and increase strength with guided weightlifting sessions.",
        "duration": 75,
        "capacity": 10,
        "difficulty": "intermediate",
        "equipment": ["Barbells", "Dumbbells", "Bench", "Squat Rack"],
        "tags": ["Strength", "Muscle Building", "Powerlifting"],
        "slots": [("Monday", "16:00", "17:15"), ("Thursday", "16:00", "17:15")],
    },
    {
        "name": "Cardio Dance",
        "instructor": "Jessica Martinez",
        "description": "Fun, high-energy dance workout that combines cardio with popular music.",
        "duration": 45,
        "capacity": 15,
        "difficulty": "beginner",
        "equipment": ["None"],
        "tags": ["Cardio", "Dance", "Fun"],
        "slots": [("Saturday", "10:00", "10:45"), ("Sunday", "10:00", "10:45")],
    },
]


def _hm(s: str) -> time:
    return datetime.strptime(s, "%H:%M").time()


def _months_back(d: date, n: int) -> date:
    y, m = d.year, d.month - n
    while m < 1:
        y, m = y - 1, m + 12
    return date(y, m, 1)


class Command(BaseCommand):
    help = "Seed demo data (safe to re-run)"

    def add_arguments(self, parser):
        parser.add_argument("--seed", type=int, default=2024, help="Random seed for generated payments")

    @transaction.atomic
    def handle(self, *args, **options):
        today = timezone.localdate()
        rng = random.Random(options["seed"])

        members = [self._member(row, today) for row in MEMBERS]
        demo = self._member(DEMO_MEMBER, today)

        instructors = {}
        for name, email, specialties, bio, experience, rating, total, joined in INSTRUCTORS:
            instructors[name], _ = Instructor.objects.update_or_create(
                email=email,
                defaults={
                    "name": name,
                    "specialties": specialties,
                    "bio": bio,
                    "profile_image": PHOTO.format("1571019613454-1cb2f99b2d8b"),
                    "experience": experience,
                    "rating": Decimal(rating),
                    "total_classes": total,
                    "join_date": date.fromisoformat(joined),
                    "status": Instructor.Status.ACTIVE,
                },
            )

        classes = {}
        for row in CLASSES:
            gym_class, _ = GymClass.objects.update_or_create(
                name=row["name"],
                defaults={
                    "instructor": instructors[row["instructor"]],
                    "description": row["description"],
                    "duration": row["duration"],
                    "capacity": row["capacity"],
                    "difficulty": row["difficulty"],
                    "equipment": row["equipment"],
                    "tags": row["tags"],
                    "price": Decimal("0"),
                    "is_active": True,
                },
            )
            for day, start, end in row["slots"]:
                ClassSchedule.objects.get_or_create(
                    gym_class=gym_class,
                    day_of_week=day,
                    start_time=_hm(start),
                    defaults={"end_time": _hm(end), "is_recurring": True},
                )
            classes[row["name"]] = gym_class

        self._payments(members, rng, today)
        self._demo_history(demo, classes, today)

        self.stdout.write(self.style.SUCCESS(
            f"Demo data ensured: {MemberProfile.objects.count()} members, "
            f"{GymClass.objects.count()} classes, {PaymentRecord.objects.count()} payments"
        ))

    def _member(self, row, today: date) -> MemberProfile:
        email, name, age, gender, phone, plan, status, joined, photo = row
        billing = None if status == MemberProfile.Status.CANCELLED else next_billing_after(today)
        member, _ = MemberProfile.objects.update_or_create(
            email=email,
            defaults={
                "full_name": name,
                "age": age,
                "gender": gender,
                "phone": phone,
                "membership_type": plan,
                "membership_status": status,
                "join_date": date.fromisoformat(joined),
                "next_billing_date": billing,
                "waiver_signed": True,
                "profile_image": PHOTO.format(photo),
            },
        )
        return member

    def _payments(self, members, rng: random.Random, today: date) -> None:
        for i in range(50):
            member = members[i % len(members)]
            month = _months_back(today, i // 10)
            day = rng.randint(1, 28)
            if (month.year, month.month) == (today.year, today.month):
                day = min(day, today.day)
            paid_on = month.replace(day=day)
            plan = get_plan(member.membership_type)
            roll = rng.random()
            status = PaymentRecord.Status.COMPLETED if roll > 0.1 else rng.choice(
                [PaymentRecord.Status.PENDING, PaymentRecord.Status.FAILED]
            )
            PaymentRecord.objects.get_or_create(
                invoice=f"INV-DEMO-{i + 1:03d}",
                defaults={
                    "member": member,
                    "date": paid_on,
                    "amount": plan.price,
                    "status": status,
                    "description": f"{plan.name} - {month:%B %Y}",
                    "method": rng.choice(PaymentRecord.Method.values),
                    "plan_type": plan.id,
                },
            )

    def _demo_history(self, member: MemberProfile, classes: dict, today: date) -> None:
        plan = get_plan(member.membership_type)
        for n in range(4):
            month = _months_back(today, n)
            PaymentRecord.objects.get_or_create(
                invoice=f"INV-{month:%Y}-{member.pk:03d}-{month:%m}",
                defaults={
                    "member": member,
                    "date": month,
                    "amount": plan.price,
                    "status": PaymentRecord.Status.COMPLETED,
                    "description": f"{plan.name} - {month:%B %Y}",
                    "method": PaymentRecord.Method.CARD,
                    "plan_type": plan.id,
                },
            )

        for name in ("Morning HIIT", "Yoga Flow", "Strength Training"):
            slot = classes[name].schedule.order_by("id").first()
            on_date = next_occurrence(slot, today + timedelta(days=1))
            try:
                book_class(member, slot, on_date)
            except ValidationError as exc:
                self.stdout.write(f"Skipped booking for {name}: {' '.join(exc.messages)}")

        if not member.check_ins.exists():
            tz = timezone.get_current_timezone()
            hiit = classes["Morning HIIT"]
            for offset, facility, hour, minutes in (
                (1, CheckIn.Facility.CLASS, 7, 60),
                (2, CheckIn.Facility.DOWNSTAIRS, 15, 90),
                (3, CheckIn.Facility.CLASS, 18, 60),
            ):
                start = timezone.make_aware(datetime.combine(today - timedelta(days=offset), time(hour)), tz)
                CheckIn.objects.create(
                    member=member,
                    facility=facility,
                    gym_class=hiit if facility == CheckIn.Facility.CLASS else None,
                    check_in_time=start,
                    check_out_time=start + timedelta(minutes=minutes),
                    duration=minutes,
                )
