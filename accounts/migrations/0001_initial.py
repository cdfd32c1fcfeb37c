import django.core.validators
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True
    dependencies = []
    operations = [
        migrations.CreateModel(
            name="MemberProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("email", models.EmailField(max_length=254, unique=True, verbose_name="Email")),
                ("full_name", models.CharField(max_length=255, verbose_name="Full name")),
                ("age", models.PositiveIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(16), django.core.validators.MaxValueValidator(100)], verbose_name="Age")),
                ("gender", models.CharField(blank=True, choices=[("male", "Male"), ("female", "Female")], default="", max_length=8, verbose_name="Gender")),
                ("occupation", models.CharField(blank=True, default="", max_length=120, verbose_name="Occupation")),
                ("phone", models.CharField(blank=True, default="", max_length=32, verbose_name="Phone")),
                ("waiver_signed", models.BooleanField(default=False, verbose_name="Waiver signed")),
                ("membership_type", models.CharField(choices=[("basic", "Basic"), ("premium", "Premium")], db_index=True, default="basic", max_length=16, verbose_name="Plan")),
                ("membership_status", models.CharField(choices=[("active", "Active"), ("inactive", "Inactive"), ("cancelled", "Cancelled")], db_index=True, default="active", max_length=16, verbose_name="Status")),
                ("join_date", models.DateField(default=django.utils.timezone.localdate, verbose_name="Joined")),
                ("next_billing_date", models.DateField(blank=True, null=True, verbose_name="Next billing")),
                ("profile_image", models.URLField(blank=True, default="", verbose_name="Photo")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Member",
                "verbose_name_plural": "Members",
                "ordering": ["full_name", "id"],
            },
        ),
    ]
