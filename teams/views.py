from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authx.gate import actor_for
from . import services
from .serializers import TaskSerializer, TeamSerializer, VolunteerSerializer


class DashboardView(APIView):
    """
    GET /api/dashboard/
    Teams, volunteers and the caller's role for the volunteer dashboard.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        data = services.get_dashboard_data(actor_for(request))
        return Response(
            {
                "teams": TeamSerializer(data["teams"], many=True).data,
                "volunteers": VolunteerSerializer(data["volunteers"], many=True).data,
                "role": data["role"],
            },
            status=status.HTTP_200_OK,
        )


class TeamListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        data = services.get_dashboard_data(actor_for(request))
        return Response(TeamSerializer(data["teams"], many=True).data)

    def post(self, request):
        team = services.manage_team(request.data, actor_for(request))
        return Response(TeamSerializer(team).data, status=status.HTTP_201_CREATED)


class TeamDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, team_id):
        team = services.manage_team(request.data, actor_for(request), team_id=team_id)
        return Response(TeamSerializer(team).data)

    def delete(self, request, team_id):
        unassigned = services.delete_team(team_id, actor_for(request))
        return Response({"unassigned": unassigned}, status=status.HTTP_200_OK)


class VolunteerTeamView(APIView):
    """
    PATCH /api/volunteers/<uid>/team/   {"team_id": 3 | null}
    """
    permission_classes = [IsAuthenticated]

    def patch(self, request, uid):
        volunteer = services.assign_volunteer_team(uid, request.data, actor_for(request))
        return Response(VolunteerSerializer(volunteer).data)


class VolunteerLeadView(APIView):
    """
    PATCH /api/volunteers/<uid>/lead/   {"is_lead": true}
    """
    permission_classes = [IsAuthenticated]

    def patch(self, request, uid):
        volunteer = services.set_lead_status(uid, request.data, actor_for(request))
        return Response(VolunteerSerializer(volunteer).data)


class TaskListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        tasks = services.list_tasks(actor_for(request))
        return Response(TaskSerializer(tasks, many=True).data)

    def post(self, request):
        task = services.manage_task(request.data, actor_for(request))
        return Response(TaskSerializer(task).data, status=status.HTTP_201_CREATED)


class TaskDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, task_id):
        task = services.manage_task(request.data, actor_for(request), task_id=task_id)
        return Response(TaskSerializer(task).data)

    def delete(self, request, task_id):
        services.delete_task(task_id, actor_for(request))
        return Response(status=status.HTTP_204_NO_CONTENT)


class TaskStatusView(APIView):
    """
    POST /api/tasks/<id>/status/   {"status": "In Progress"}
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, task_id):
        task = services.update_task_status(task_id, request.data, actor_for(request))
        return Response(TaskSerializer(task).data)
