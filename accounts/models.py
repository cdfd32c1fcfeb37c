from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone


class MemberProfile(models.Model):
    class Gender(models.TextChoices):
        MALE = "male", "Male"
        FEMALE = "female", "Female"

    class Plan(models.TextChoices):
        BASIC = "basic", "Basic"
        PREMIUM = "premium", "Premium"

    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        INACTIVE = "inactive", "Inactive"
        CANCELLED = "cancelled", "Cancelled"

    email = models.EmailField("Email", unique=True)
    full_name = models.CharField("Full name", max_length=255)
    age = models.PositiveIntegerField(
        "Age",
        null=True,
        blank=True,
        validators=[MinValueValidator(16), MaxValueValidator(100)],
    )
    gender = models.CharField("Gender", max_length=8, choices=Gender.choices, blank=True, default="")
    occupation = models.CharField("Occupation", max_length=120, blank=True, default="")
    phone = models.CharField("Phone", max_length=32, blank=True, default="")
    waiver_signed = models.BooleanField("Waiver signed", default=False)

    membership_type = models.CharField(
        "Plan",
        max_length=16,
        choices=Plan.choices,
        default=Plan.BASIC,
        db_index=True,
    )
    membership_status = models.CharField(
        "Status",
        max_length=16,
        choices=Status.choices,
        default=Status.ACTIVE,
        db_index=True,
    )

    join_date = models.DateField("Joined", default=timezone.localdate)
    next_billing_date = models.DateField("Next billing", null=True, blank=True)
    profile_image = models.URLField("Photo", blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Member"
        verbose_name_plural = "Members"
        ordering = ["full_name", "id"]

    def __str__(self) -> str:
        return self.full_name or self.email

    def clean(self):
        super().clean()
        if self.membership_status == self.Status.CANCELLED and self.next_billing_date:
            raise ValidationError({
                "next_billing_date": "Cancelled memberships cannot have a future billing date.",
            })

    @property
    def is_active(self) -> bool:
        return self.membership_status == self.Status.ACTIVE

    @property
    def first_name(self) -> str:
        parts = (self.full_name or "").split()
        return parts[0] if parts else ""
