import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True
    dependencies = [("accounts", "0001_initial")]
    operations = [
        migrations.CreateModel(
            name="Instructor",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120, verbose_name="Name")),
                ("email", models.EmailField(blank=True, default="", max_length=254, verbose_name="Email")),
                ("specialties", models.JSONField(blank=True, default=list, verbose_name="Specialties")),
                ("bio", models.TextField(blank=True, default="", verbose_name="Bio")),
                ("profile_image", models.URLField(blank=True, default="", verbose_name="Photo")),
                ("experience", models.PositiveIntegerField(default=0, verbose_name="Experience, years")),
                ("rating", models.DecimalField(decimal_places=1, default=0, max_digits=2, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(5)], verbose_name="Rating")),
                ("total_classes", models.PositiveIntegerField(default=0, verbose_name="Classes taught")),
                ("join_date", models.DateField(default=django.utils.timezone.localdate, verbose_name="Joined")),
                ("status", models.CharField(choices=[("active", "Active"), ("inactive", "Inactive")], db_index=True, default="active", max_length=16, verbose_name="Status")),
            ],
            options={
                "verbose_name": "Instructor",
                "verbose_name_plural": "Instructors",
                "ordering": ["name", "id"],
            },
        ),
        migrations.CreateModel(
            name="GymClass",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=160, verbose_name="Name")),
                ("description", models.TextField(blank=True, default="", verbose_name="Description")),
                ("duration", models.PositiveIntegerField(default=60, validators=[django.core.validators.MinValueValidator(1)], verbose_name="Duration, min")),
                ("capacity", models.PositiveIntegerField(default=12, validators=[django.core.validators.MinValueValidator(1)], verbose_name="Capacity")),
                ("difficulty", models.CharField(choices=[("beginner", "Beginner"), ("intermediate", "Intermediate"), ("advanced", "Advanced")], db_index=True, default="beginner", max_length=16, verbose_name="Difficulty")),
                ("equipment", models.JSONField(blank=True, default=list, verbose_name="Equipment")),
                ("tags", models.JSONField(blank=True, default=list, verbose_name="Tags")),
                ("price", models.DecimalField(decimal_places=2, default=0, max_digits=8, verbose_name="Price")),
                ("is_active", models.BooleanField(db_index=True, default=True, verbose_name="Active")),
                ("instructor", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="classes", to="schedule.instructor", verbose_name="Instructor")),
            ],
            options={
                "verbose_name": "Class",
                "verbose_name_plural": "Classes",
                "ordering": ["name", "id"],
            },
        ),
        migrations.CreateModel(
            name="ClassSchedule",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("day_of_week", models.CharField(choices=[("Monday", "Monday"), ("Tuesday", "Tuesday"), ("Wednesday", "Wednesday"), ("Thursday", "Thursday"), ("Friday", "Friday"), ("Saturday", "Saturday"), ("Sunday", "Sunday")], max_length=10, verbose_name="Day")),
                ("start_time", models.TimeField(verbose_name="Starts")),
                ("end_time", models.TimeField(verbose_name="Ends")),
                ("is_recurring", models.BooleanField(default=True, verbose_name="Weekly")),
                ("date", models.DateField(blank=True, null=True, verbose_name="One-off date")),
                ("gym_class", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="schedule", to="schedule.gymclass", verbose_name="Class")),
            ],
            options={
                "verbose_name": "Schedule slot",
                "verbose_name_plural": "Schedule",
                "ordering": ["gym_class", "id"],
            },
        ),
        migrations.CreateModel(
            name="ClassBooking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField(db_index=True, verbose_name="Date")),
                ("start_time", models.TimeField(verbose_name="Starts")),
                ("end_time", models.TimeField(verbose_name="Ends")),
                ("status", models.CharField(choices=[("confirmed", "Confirmed"), ("waitlist", "Waitlist"), ("cancelled", "Cancelled")], db_index=True, default="confirmed", max_length=16, verbose_name="Status")),
                ("capacity", models.PositiveIntegerField(verbose_name="Capacity")),
                ("current_bookings", models.PositiveIntegerField(verbose_name="Booked before")),
                ("booked_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Booked at")),
                ("cancelled_at", models.DateTimeField(blank=True, null=True, verbose_name="Cancelled at")),
                ("gym_class", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="bookings", to="schedule.gymclass", verbose_name="Class")),
                ("member", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="bookings", to="accounts.memberprofile", verbose_name="Member")),
            ],
            options={
                "verbose_name": "Booking",
                "verbose_name_plural": "Bookings",
                "ordering": ["date", "start_time", "booked_at"],
            },
        ),
        migrations.AddConstraint(
            model_name="classbooking",
            constraint=models.UniqueConstraint(condition=models.Q(("status", "cancelled"), _negated=True), fields=("member", "gym_class", "date"), name="uniq_active_booking"),
        ),
        migrations.AddIndex(
            model_name="classbooking",
            index=models.Index(fields=["gym_class", "date", "status"], name="booking_class_day_idx"),
        ),
    ]
