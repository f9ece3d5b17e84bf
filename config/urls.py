"""URL configuration for the campaign booking project.

The `urlpatterns` list routes URLs to views. It includes the Django admin,
the health check and the application‑level API routes of each app.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView  # type: ignore

from apps.core.views import healthz

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('admin/', admin.site.urls),
    path('healthz', healthz, name='healthz'),
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    # Application URLs
    path('api/v1/campaigns/', include('apps.campaigns.urls')),
    path('api/v1/bookings/', include('apps.bookings.urls')),
    path('api/v1/analytics/', include('apps.analytics.urls')),
]
