from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "TopDog Gym Backoffice"
admin.site.site_title = "TopDog Gym"
admin.site.index_title = "Data management"

urlpatterns = [
    # /admin/ is the gym console; django admin lives under /backoffice/
    path("admin/", include("console.urls")),
    path("backoffice/", admin.site.urls),

    path("", include("core.urls")),
    path("", include("accounts.urls")),
    path("classes/", include("schedule.urls")),
    path("dashboard/", include("dashboard.urls")),
]

handler404 = "core.views.page_not_found"
