from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authx.gate import actor_for
from . import services
from .serializers import AgendaItemSerializer, AgendaTrackSerializer


class PublicReadMixin:
    """GET is public; every other method needs a signed-in caller."""

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAuthenticated()]


class AgendaListCreateView(PublicReadMixin, APIView):
    """
    GET  /api/agenda/
    POST /api/agenda/   admin
    """

    def get(self, request):
        return Response(services.get_agenda(), status=status.HTTP_200_OK)

    def post(self, request):
        item = services.manage_agenda_item(request.data, actor_for(request))
        return Response(AgendaItemSerializer(item).data, status=status.HTTP_201_CREATED)


class AgendaItemDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def put(self, request, item_id):
        item = services.manage_agenda_item(request.data, actor_for(request), item_id=item_id)
        return Response(AgendaItemSerializer(item).data)

    def delete(self, request, item_id):
        services.delete_agenda_item(item_id, actor_for(request))
        return Response(status=status.HTTP_204_NO_CONTENT)


class AgendaTrackListCreateView(PublicReadMixin, APIView):
    """
    GET  /api/agenda/tracks/
    POST /api/agenda/tracks/   admin
    """

    def get(self, request):
        return Response(services.get_agenda_tracks(), status=status.HTTP_200_OK)

    def post(self, request):
        track = services.manage_agenda_track(request.data, actor_for(request))
        return Response(AgendaTrackSerializer(track).data, status=status.HTTP_201_CREATED)


class AgendaTrackDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, track_id):
        track = services.manage_agenda_track(request.data, actor_for(request), track_id=track_id)
        return Response(AgendaTrackSerializer(track).data)

    def delete(self, request, track_id):
        services.delete_agenda_track(track_id, actor_for(request))
        return Response(status=status.HTTP_204_NO_CONTENT)
