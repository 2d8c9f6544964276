# users/urls.py

from django.urls import path

from .views import AdminListCreateView, AdminDetailView

urlpatterns = [
    path("", AdminListCreateView.as_view(), name="admin-list-create"),
    path("<str:uid>/", AdminDetailView.as_view(), name="admin-detail"),
]
