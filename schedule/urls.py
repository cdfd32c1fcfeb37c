from django.urls import path

from . import views

app_name = "schedule"

urlpatterns = [
    path("", views.class_list, name="list"),
    path("slots/<int:slot_id>/book/", views.book, name="book"),
    path("bookings/<int:booking_id>/cancel/", views.cancel, name="cancel"),
]
