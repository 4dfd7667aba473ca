"""Profile URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.profiles.views import ProfileView

urlpatterns = [
    path("profile/", ProfileView.as_view(), name="profile"),
]
