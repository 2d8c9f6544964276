from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from .gate import actor_for


class MeView(APIView):
    """
    GET /api/auth/me/

    The caller's identity and their role as of this request.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = actor_for(request)
        return Response({
            "uid": actor.uid,
            "email": actor.email,
            "role": actor.role,
            "team_id": actor.team_id,
        })
