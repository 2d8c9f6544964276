from rest_framework import serializers

from core.serializers import InputSerializer
from .models import Team, Volunteer, Task


class TeamSerializer(serializers.ModelSerializer):
    class Meta:
        model = Team
        fields = ["id", "name"]


class VolunteerSerializer(serializers.ModelSerializer):
    team_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = Volunteer
        fields = ["uid", "full_name", "email", "phone", "job_title", "team_id", "is_lead"]
        read_only_fields = fields


class TaskSerializer(serializers.ModelSerializer):
    team_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = Task
        fields = [
            "id", "title", "description", "status",
            "assignee_id", "assignee_name", "team_id",
            "due_date", "created_at", "created_by", "creator_name",
        ]
        read_only_fields = fields


# ---- Input schemas ----------------------------------------------------


class TeamInputSerializer(InputSerializer):
    name = serializers.CharField(max_length=120, error_messages={"blank": "Team name cannot be empty"})


class VolunteerTeamInputSerializer(InputSerializer):
    team_id = serializers.IntegerField(allow_null=True)


class LeadStatusInputSerializer(InputSerializer):
    is_lead = serializers.BooleanField()


class TaskCreateSerializer(InputSerializer):
    title = serializers.CharField(min_length=3, max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    assignee_id = serializers.CharField(required=False, allow_null=True, default=None)
    team_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    due_date = serializers.DateField(required=False, allow_null=True, default=None)


class TaskUpdateSerializer(InputSerializer):
    title = serializers.CharField(min_length=3, max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    due_date = serializers.DateField(required=False, allow_null=True)


class TaskStatusSerializer(InputSerializer):
    status = serializers.ChoiceField(choices=Task.STATUS_CHOICES)
