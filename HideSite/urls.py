from django.urls import path

from . import views

app_name = "HideSite"

urlpatterns = [
    path("status/", views.hide_site_status, name="status"),
]
