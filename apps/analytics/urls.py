"""URL routing for analytics endpoints."""

from django.urls import path  # type: ignore

from .views import AnalyticsSummaryView


urlpatterns = [
    # Do not prefix with 'analytics/' here; the namespace is defined in config.urls
    path('summary/', AnalyticsSummaryView.as_view(), name='analytics-summary'),
]
