import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True
    dependencies = [
        ("accounts", "0001_initial"),
        ("schedule", "0001_initial"),
    ]
    operations = [
        migrations.CreateModel(
            name="CheckIn",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("facility", models.CharField(choices=[("class", "Class studio"), ("downstairs", "Downstairs gym")], default="downstairs", max_length=16, verbose_name="Facility")),
                ("check_in_time", models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name="Checked in")),
                ("check_out_time", models.DateTimeField(blank=True, null=True, verbose_name="Checked out")),
                ("duration", models.PositiveIntegerField(blank=True, null=True, verbose_name="Duration, min")),
                ("gym_class", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="check_ins", to="schedule.gymclass", verbose_name="Class")),
                ("member", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="check_ins", to="accounts.memberprofile", verbose_name="Member")),
            ],
            options={
                "verbose_name": "Check-in",
                "verbose_name_plural": "Check-ins",
                "ordering": ["-check_in_time"],
                "indexes": [models.Index(fields=["member", "check_in_time"], name="checkin_member_time_idx")],
            },
        ),
    ]
