# announcements/urls.py

from django.urls import path

from .views import AnnouncementListCreateView, AnnouncementDetailView, SubscribeView

urlpatterns = [
    path("announcements/", AnnouncementListCreateView.as_view(), name="announcement-list-create"),
    path(
        "announcements/<int:announcement_id>/",
        AnnouncementDetailView.as_view(),
        name="announcement-detail",
    ),
    path("subscriptions/", SubscribeView.as_view(), name="newsletter-subscribe"),
]
