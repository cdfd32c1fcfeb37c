from django.shortcuts import render

from memberships.plans import PLANS
from schedule.models import GymClass


def home(request):
    featured = (
        GymClass.objects.select_related("instructor")
        .filter(is_active=True)
        .order_by("name")[:4]
    )
    return render(request, "core/home.html", {"plans": PLANS, "featured_classes": featured})


def page_not_found(request, exception=None):
    return render(request, "404.html", status=404)
