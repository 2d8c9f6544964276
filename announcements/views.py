from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authx.gate import actor_for
from . import services
from .serializers import AnnouncementSerializer


class AnnouncementListCreateView(APIView):
    """
    GET  /api/announcements/   public
    POST /api/announcements/   admin
    """

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAuthenticated()]

    def get(self, request):
        return Response(services.get_announcements(), status=status.HTTP_200_OK)

    def post(self, request):
        announcement = services.manage_announcement(request.data, actor_for(request))
        return Response(AnnouncementSerializer(announcement).data, status=status.HTTP_201_CREATED)


class AnnouncementDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def put(self, request, announcement_id):
        announcement = services.manage_announcement(
            request.data, actor_for(request), announcement_id=announcement_id
        )
        return Response(AnnouncementSerializer(announcement).data)

    def delete(self, request, announcement_id):
        services.delete_announcement(announcement_id, actor_for(request))
        return Response(status=status.HTTP_204_NO_CONTENT)


class SubscribeView(APIView):
    """
    POST /api/subscriptions/   {"email": "..."}
    """
    permission_classes = [AllowAny]
    throttle_scope = "newsletter-subscribe"

    def post(self, request):
        services.subscribe(request.data)
        return Response(
            {"message": "Thank you for subscribing! We will keep you updated."},
            status=status.HTTP_201_CREATED,
        )
