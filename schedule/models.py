from datetime import datetime

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone


class DayOfWeek(models.TextChoices):
    MONDAY = "Monday", "Monday"
    TUESDAY = "Tuesday", "Tuesday"
    WEDNESDAY = "Wednesday", "Wednesday"
    THURSDAY = "Thursday", "Thursday"
    FRIDAY = "Friday", "Friday"
    SATURDAY = "Saturday", "Saturday"
    SUNDAY = "Sunday", "Sunday"


class Instructor(models.Model):
    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        INACTIVE = "inactive", "Inactive"

    name = models.CharField("Name", max_length=120)
    email = models.EmailField("Email", blank=True, default="")
    specialties = models.JSONField("Specialties", default=list, blank=True)
    bio = models.TextField("Bio", blank=True, default="")
    profile_image = models.URLField("Photo", blank=True, default="")

    experience = models.PositiveIntegerField("Experience, years", default=0)
    rating = models.DecimalField(
        "Rating",
        max_digits=2,
        decimal_places=1,
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(5)],
    )
    total_classes = models.PositiveIntegerField("Classes taught", default=0)
    join_date = models.DateField("Joined", default=timezone.localdate)
    status = models.CharField("Status", max_length=16, choices=Status.choices, default=Status.ACTIVE, db_index=True)

    class Meta:
        verbose_name = "Instructor"
        verbose_name_plural = "Instructors"
        ordering = ["name", "id"]

    def __str__(self) -> str:
        return self.name


class GymClass(models.Model):
    class Difficulty(models.TextChoices):
        BEGINNER = "beginner", "Beginner"
        INTERMEDIATE = "intermediate", "Intermediate"
        ADVANCED = "advanced", "Advanced"

    name = models.CharField("Name", max_length=160)
    description = models.TextField("Description", blank=True, default="")

    # display name is resolved through the FK, never copied onto the class
    instructor = models.ForeignKey(
        Instructor,
        verbose_name="Instructor",
        on_delete=models.PROTECT,
        related_name="classes",
    )

    duration = models.PositiveIntegerField("Duration, min", default=60, validators=[MinValueValidator(1)])
    capacity = models.PositiveIntegerField("Capacity", default=12, validators=[MinValueValidator(1)])
    difficulty = models.CharField(
        "Difficulty",
        max_length=16,
        choices=Difficulty.choices,
        default=Difficulty.BEGINNER,
        db_index=True,
    )
    equipment = models.JSONField("Equipment", default=list, blank=True)
    tags = models.JSONField("Tags", default=list, blank=True)
    price = models.DecimalField("Price", max_digits=8, decimal_places=2, default=0)
    is_active = models.BooleanField("Active", default=True, db_index=True)

    class Meta:
        verbose_name = "Class"
        verbose_name_plural = "Classes"
        ordering = ["name", "id"]

    def __str__(self) -> str:
        return self.name

    @property
    def instructor_name(self) -> str:
        return self.instructor.name if self.instructor_id else ""


class ClassSchedule(models.Model):
    gym_class = models.ForeignKey(
        GymClass,
        verbose_name="Class",
        on_delete=models.CASCADE,
        related_name="schedule",
    )
    day_of_week = models.CharField("Day", max_length=10, choices=DayOfWeek.choices)
    start_time = models.TimeField("Starts")
    end_time = models.TimeField("Ends")
    is_recurring = models.BooleanField("Weekly", default=True)
    date = models.DateField("One-off date", null=True, blank=True)

    class Meta:
        verbose_name = "Schedule slot"
        verbose_name_plural = "Schedule"
        ordering = ["gym_class", "id"]

    def __str__(self) -> str:
        return f"{self.gym_class}, {self.day_of_week} {self.start_time:%H:%M}"

    def clean(self):
        super().clean()
        if self.start_time and self.end_time and self.start_time >= self.end_time:
            raise ValidationError({"end_time": "Class must end after it starts."})
        if self.date and self.date.strftime("%A") != self.day_of_week:
            raise ValidationError({"date": f"{self.date:%Y-%m-%d} is not a {self.day_of_week}."})


class ClassBooking(models.Model):
    class Status(models.TextChoices):
        CONFIRMED = "confirmed", "Confirmed"
        WAITLIST = "waitlist", "Waitlist"
        CANCELLED = "cancelled", "Cancelled"

    member = models.ForeignKey(
        "accounts.MemberProfile",
        verbose_name="Member",
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    gym_class = models.ForeignKey(
        GymClass,
        verbose_name="Class",
        on_delete=models.CASCADE,
        related_name="bookings",
    )

    date = models.DateField("Date", db_index=True)
    start_time = models.TimeField("Starts")
    end_time = models.TimeField("Ends")

    status = models.CharField(
        "Status",
        max_length=16,
        choices=Status.choices,
        default=Status.CONFIRMED,
        db_index=True,
    )

    # snapshot taken when the booking was made
    capacity = models.PositiveIntegerField("Capacity")
    current_bookings = models.PositiveIntegerField("Booked before")

    booked_at = models.DateTimeField("Booked at", default=timezone.now)
    cancelled_at = models.DateTimeField("Cancelled at", null=True, blank=True)

    class Meta:
        verbose_name = "Booking"
        verbose_name_plural = "Bookings"
        ordering = ["date", "start_time", "booked_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["member", "gym_class", "date", "start_time"],
                condition=~Q(status="cancelled"),
                name="uniq_active_session_booking",
            ),
        ]
        indexes = [
            models.Index(fields=["gym_class", "date", "start_time", "status"], name="booking_session_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.member} → {self.gym_class} {self.date:%Y-%m-%d} ({self.status})"

    @property
    def class_name(self) -> str:
        return self.gym_class.name

    @property
    def instructor_name(self) -> str:
        return self.gym_class.instructor_name

    @property
    def waitlist_position(self) -> int | None:
        from .services import waitlist_position

        if self.status != self.Status.WAITLIST:
            return None
        return waitlist_position(self.capacity, self.current_bookings)

    def starts_at(self) -> datetime:
        naive = datetime.combine(self.date, self.start_time)
        return timezone.make_aware(naive, timezone.get_current_timezone())
