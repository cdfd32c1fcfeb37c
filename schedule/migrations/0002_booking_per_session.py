from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [("schedule", "0001_initial")]
    operations = [
        migrations.RemoveConstraint(
            model_name="classbooking",
            name="uniq_active_booking",
        ),
        migrations.RemoveIndex(
            model_name="classbooking",
            name="booking_class_day_idx",
        ),
        migrations.AddConstraint(
            model_name="classbooking",
            constraint=models.UniqueConstraint(condition=models.Q(("status", "cancelled"), _negated=True), fields=("member", "gym_class", "date", "start_time"), name="uniq_active_session_booking"),
        ),
        migrations.AddIndex(
            model_name="classbooking",
            index=models.Index(fields=["gym_class", "date", "start_time", "status"], name="booking_session_idx"),
        ),
    ]
