"""URL routing for campaign endpoints."""

from django.urls import path  # type: ignore

from .views import CampaignDetailView, CampaignListView, campaign_stream


urlpatterns = [
    path('', CampaignListView.as_view(), name='campaign-list'),
    path('stream/', campaign_stream, name='campaign-stream'),
    path('<int:pk>/', CampaignDetailView.as_view(), name='campaign-detail'),
]
