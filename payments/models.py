from django.db import models
from django.utils import timezone


class PaymentRecord(models.Model):
    class Status(models.TextChoices):
        COMPLETED = "completed", "Completed"
        PENDING = "pending", "Pending"
        FAILED = "failed", "Failed"

    class Method(models.TextChoices):
        CARD = "card", "Card"
        BANK = "bank", "Bank transfer"
        CASH = "cash", "Cash"

    class PlanType(models.TextChoices):
        BASIC = "basic", "Basic"
        PREMIUM = "premium", "Premium"

    member = models.ForeignKey(
        "accounts.MemberProfile",
        verbose_name="Member",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payments",
        db_index=True,
    )

    date = models.DateField("Date", default=timezone.localdate, db_index=True)
    amount = models.DecimalField("Amount", max_digits=10, decimal_places=2)
    status = models.CharField(
        "Status",
        max_length=12,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    description = models.CharField("Description", max_length=255, blank=True, default="")
    method = models.CharField("Method", max_length=8, choices=Method.choices, default=Method.CARD)
    plan_type = models.CharField("Plan", max_length=16, choices=PlanType.choices, db_index=True)
    invoice = models.CharField("Invoice", max_length=64, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Payment"
        verbose_name_plural = "Payments"
        ordering = ["-date", "-id"]
        indexes = [
            models.Index(fields=["status", "date"], name="payment_status_date_idx"),
        ]

    def __str__(self) -> str:
        return f"Payment#{self.id} {self.amount} {self.date:%Y-%m-%d} ({self.status})"
