# jobs/urls.py

from django.urls import path

from .views import (
    JobListCreateView,
    JobDetailView,
    JobToggleStatusView,
    ApplicationListCreateView,
    ApplicationStatusView,
)

urlpatterns = [
    path("jobs/", JobListCreateView.as_view(), name="job-list-create"),
    path("jobs/<int:job_id>/", JobDetailView.as_view(), name="job-detail"),
    path("jobs/<int:job_id>/toggle-status/", JobToggleStatusView.as_view(), name="job-toggle-status"),
    path("applications/", ApplicationListCreateView.as_view(), name="application-list-create"),
    path(
        "applications/<int:application_id>/status/",
        ApplicationStatusView.as_view(),
        name="application-status",
    ),
]
