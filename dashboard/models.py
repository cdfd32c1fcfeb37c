from django.db import models
from django.utils import timezone


class CheckIn(models.Model):
    class Facility(models.TextChoices):
        CLASS = "class", "Class studio"
        DOWNSTAIRS = "downstairs", "Downstairs gym"

    member = models.ForeignKey(
        "accounts.MemberProfile",
        verbose_name="Member",
        on_delete=models.CASCADE,
        related_name="check_ins",
    )
    facility = models.CharField("Facility", max_length=16, choices=Facility.choices, default=Facility.DOWNSTAIRS)
    gym_class = models.ForeignKey(
        "schedule.GymClass",
        verbose_name="Class",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="check_ins",
    )

    check_in_time = models.DateTimeField("Checked in", default=timezone.now, db_index=True)
    check_out_time = models.DateTimeField("Checked out", null=True, blank=True)
    duration = models.PositiveIntegerField("Duration, min", null=True, blank=True)

    class Meta:
        verbose_name = "Check-in"
        verbose_name_plural = "Check-ins"
        ordering = ["-check_in_time"]
        indexes = [
            models.Index(fields=["member", "check_in_time"], name="checkin_member_time_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.member} @ {self.get_facility_display()} {timezone.localtime(self.check_in_time):%Y-%m-%d %H:%M}"

    @property
    def minutes(self) -> int:
        if self.duration is not None:
            return int(self.duration)
        if self.check_out_time and self.check_out_time > self.check_in_time:
            return int((self.check_out_time - self.check_in_time).total_seconds() // 60)
        return 0
