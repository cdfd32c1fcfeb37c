from django.contrib import admin

from .models import CheckIn


@admin.register(CheckIn)
class CheckInAdmin(admin.ModelAdmin):
    list_display = ("id", "check_in_time", "member", "facility", "gym_class", "duration")
    list_filter = ("facility",)
    search_fields = ("member__full_name", "member__email")
    autocomplete_fields = ("member", "gym_class")
