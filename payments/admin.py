from django.contrib import admin

from .models import PaymentRecord


@admin.register(PaymentRecord)
class PaymentRecordAdmin(admin.ModelAdmin):
    list_display = ("id", "date", "member", "amount", "plan_type", "method", "status", "invoice")
    list_filter = ("status", "method", "plan_type")
    search_fields = ("description", "invoice", "member__email", "member__full_name")
    autocomplete_fields = ("member",)
    readonly_fields = ("created_at",)
    date_hierarchy = "date"
