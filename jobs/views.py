from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authx.gate import actor_for
from . import services
from .serializers import ApplicationSerializer, JobSerializer
from .state_machine import get_allowed_transitions


class JobListCreateView(APIView):
    """
    GET  /api/jobs/   public job board
    POST /api/jobs/   admin
    """

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAuthenticated()]

    def get(self, request):
        return Response(services.list_jobs(), status=status.HTTP_200_OK)

    def post(self, request):
        job = services.manage_job(request.data, actor_for(request))
        return Response(JobSerializer(job).data, status=status.HTTP_201_CREATED)


class JobDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def put(self, request, job_id):
        job = services.manage_job(request.data, actor_for(request), job_id=job_id)
        return Response(JobSerializer(job).data)

    def delete(self, request, job_id):
        services.delete_job(job_id, actor_for(request))
        return Response(status=status.HTTP_204_NO_CONTENT)


class JobToggleStatusView(APIView):
    """
    POST /api/jobs/<id>/toggle-status/
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, job_id):
        job = services.toggle_job_status(job_id, actor_for(request))
        return Response(JobSerializer(job).data)


class ApplicationListCreateView(APIView):
    """
    GET  /api/applications/?status=&job_title=&start_after=&limit=   admin
    POST /api/applications/   any signed-in user
    """
    permission_classes = [IsAuthenticated]
    throttle_scope = "application-submit"

    def get_throttles(self):
        # Only submissions are rate limited
        if self.request.method != "POST":
            return []
        return super().get_throttles()

    def get(self, request):
        page = services.get_applications(request.query_params, actor_for(request))
        return Response(
            {
                "applications": ApplicationSerializer(page["applications"], many=True).data,
                "next_cursor": page["next_cursor"],
            },
            status=status.HTTP_200_OK,
        )

    def post(self, request):
        application = services.submit_application(request.data, actor_for(request))
        return Response(
            {
                "message": "Application submitted successfully.",
                "application": ApplicationSerializer(application).data,
            },
            status=status.HTTP_201_CREATED,
        )


class ApplicationStatusView(APIView):
    """
    POST /api/applications/<id>/status/   {"status": "Shortlisted"}
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, application_id):
        application = services.update_application_status(
            application_id, request.data, actor_for(request)
        )
        return Response(
            {
                "application": ApplicationSerializer(application).data,
                "allowed_transitions": get_allowed_transitions(application.status),
            },
            status=status.HTTP_200_OK,
        )
