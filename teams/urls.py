# teams/urls.py

from django.urls import path

from .views import (
    DashboardView,
    TeamListCreateView,
    TeamDetailView,
    VolunteerTeamView,
    VolunteerLeadView,
    TaskListCreateView,
    TaskDetailView,
    TaskStatusView,
)

urlpatterns = [
    path("dashboard/", DashboardView.as_view(), name="dashboard"),
    path("teams/", TeamListCreateView.as_view(), name="team-list-create"),
    path("teams/<int:team_id>/", TeamDetailView.as_view(), name="team-detail"),
    path("volunteers/<str:uid>/team/", VolunteerTeamView.as_view(), name="volunteer-team"),
    path("volunteers/<str:uid>/lead/", VolunteerLeadView.as_view(), name="volunteer-lead"),
    path("tasks/", TaskListCreateView.as_view(), name="task-list-create"),
    path("tasks/<int:task_id>/", TaskDetailView.as_view(), name="task-detail"),
    path("tasks/<int:task_id>/status/", TaskStatusView.as_view(), name="task-status"),
]
