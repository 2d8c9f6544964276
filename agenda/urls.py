# agenda/urls.py

from django.urls import path

from .views import (
    AgendaListCreateView,
    AgendaItemDetailView,
    AgendaTrackListCreateView,
    AgendaTrackDetailView,
)

urlpatterns = [
    path("", AgendaListCreateView.as_view(), name="agenda-list-create"),
    path("<int:item_id>/", AgendaItemDetailView.as_view(), name="agenda-item-detail"),
    path("tracks/", AgendaTrackListCreateView.as_view(), name="agenda-track-list-create"),
    path("tracks/<int:track_id>/", AgendaTrackDetailView.as_view(), name="agenda-track-detail"),
]
