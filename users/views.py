from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authx.gate import actor_for
from . import services
from .serializers import AdminSerializer


class AdminListCreateView(APIView):
    """
    GET  /api/admins/
    POST /api/admins/   {"email": "..."}
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        admins = services.list_admins(actor_for(request))
        return Response(AdminSerializer(admins, many=True).data)

    def post(self, request):
        admin = services.add_admin(request.data, actor_for(request))
        return Response(AdminSerializer(admin).data, status=status.HTTP_201_CREATED)


class AdminDetailView(APIView):
    """
    DELETE /api/admins/<uid>/
    """
    permission_classes = [IsAuthenticated]

    def delete(self, request, uid):
        services.remove_admin(uid, actor_for(request))
        return Response(status=status.HTTP_204_NO_CONTENT)
