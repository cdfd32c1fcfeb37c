import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True
    dependencies = [("accounts", "0001_initial")]
    operations = [
        migrations.CreateModel(
            name="PaymentRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField(db_index=True, default=django.utils.timezone.localdate, verbose_name="Date")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=10, verbose_name="Amount")),
                ("status", models.CharField(choices=[("completed", "Completed"), ("pending", "Pending"), ("failed", "Failed")], db_index=True, default="pending", max_length=12, verbose_name="Status")),
                ("description", models.CharField(blank=True, default="", max_length=255, verbose_name="Description")),
                ("method", models.CharField(choices=[("card", "Card"), ("bank", "Bank transfer"), ("cash", "Cash")], default="card", max_length=8, verbose_name="Method")),
                ("plan_type", models.CharField(choices=[("basic", "Basic"), ("premium", "Premium")], db_index=True, max_length=16, verbose_name="Plan")),
                ("invoice", models.CharField(blank=True, default="", max_length=64, verbose_name="Invoice")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("member", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="payments", to="accounts.memberprofile", verbose_name="Member")),
            ],
            options={
                "verbose_name": "Payment",
                "verbose_name_plural": "Payments",
                "ordering": ["-date", "-id"],
                "indexes": [models.Index(fields=["status", "date"], name="payment_status_date_idx")],
            },
        ),
    ]
