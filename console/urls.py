from django.urls import path

from . import views

app_name = "console"
urlpatterns = [
    path("", views.overview, name="overview"),
    path("members/", views.members, name="members"),
    path("members/<int:pk>/cancel/", views.member_cancel, name="member_cancel"),
    path("members/<int:pk>/delete/", views.member_delete, name="member_delete"),
    path("classes/", views.classes, name="classes"),
    path("classes/<int:pk>/delete/", views.class_delete, name="class_delete"),
    path("instructors/", views.instructors, name="instructors"),
    path("instructors/<int:pk>/delete/", views.instructor_delete, name="instructor_delete"),
    path("financial/", views.financial, name="financial"),
    path("financial/<int:pk>/delete/", views.payment_delete, name="payment_delete"),
]
