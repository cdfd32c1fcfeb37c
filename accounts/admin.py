from django.contrib import admin

from .models import MemberProfile


@admin.register(MemberProfile)
class MemberProfileAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "full_name",
        "email",
        "membership_type",
        "membership_status",
        "join_date",
        "next_billing_date",
        "waiver_signed",
    )
    list_filter = ("membership_type", "membership_status", "gender", "waiver_signed")
    search_fields = ("full_name", "email", "phone")
    readonly_fields = ("created_at", "updated_at")
    ordering = ("full_name", "id")
