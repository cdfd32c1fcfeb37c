from django.contrib import admin

from .models import ClassBooking, ClassSchedule, GymClass, Instructor


@admin.register(Instructor)
class InstructorAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "email", "experience", "rating", "status")
    list_filter = ("status",)
    search_fields = ("name", "email")
    ordering = ("name", "id")


class ClassScheduleInline(admin.TabularInline):
    model = ClassSchedule
    extra = 0
    fields = ("day_of_week", "start_time", "end_time", "is_recurring", "date")


@admin.register(GymClass)
class GymClassAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "instructor", "difficulty", "duration", "capacity", "price", "is_active")
    list_filter = ("difficulty", "is_active", "instructor")
    search_fields = ("name", "instructor__name")
    autocomplete_fields = ("instructor",)
    inlines = (ClassScheduleInline,)
    ordering = ("name",)


@admin.register(ClassBooking)
class ClassBookingAdmin(admin.ModelAdmin):
    list_display = ("id", "date", "start_time", "gym_class", "member", "status", "current_bookings", "capacity")
    list_filter = ("status", "gym_class")
    search_fields = ("member__full_name", "member__email", "gym_class__name")
    autocomplete_fields = ("member", "gym_class")
    readonly_fields = ("booked_at", "cancelled_at")
    ordering = ("-date", "start_time")
