"""URL configuration for core views."""

from __future__ import annotations

from django.urls import path

from core import views

app_name = "core"

urlpatterns = [
    path("", views.dashboard, name="dashboard"),
    path("api/parse-xml/", views.parse_xml_api, name="parse_xml_api"),
    path("api/dashboard/", views.dashboard_api, name="dashboard_api"),
]
