from django.conf import settings
from rest_framework import serializers

from core.sanitizers import sanitize_lines, sanitize_text
from core.serializers import InputSerializer
from .models import Job, Application
from .state_machine import get_allowed_transitions

FILTER_ALL = "All"


class QuestionListField(serializers.Field):
    """
    Additional questions, sent either as a list of strings or as
    newline-separated text. Blank entries are dropped.
    """
    default_error_messages = {
        "invalid": "Expected a list of questions or newline-separated text.",
    }

    def to_internal_value(self, data):
        if isinstance(data, str):
            return sanitize_lines(data)
        if isinstance(data, (list, tuple)):
            if not all(isinstance(item, str) for item in data):
                self.fail("invalid")
            return [q for q in (sanitize_text(item) for item in data) if q]
        self.fail("invalid")

    def to_representation(self, value):
        return list(value or [])


class JobSerializer(serializers.ModelSerializer):
    status = serializers.SerializerMethodField()

    class Meta:
        model = Job
        fields = ["id", "title", "description", "category", "additional_questions", "status"]
        read_only_fields = fields

    def get_status(self, obj):
        return Job.STATUS_OPEN if obj.is_open else Job.STATUS_CLOSED


class ApplicationSerializer(serializers.ModelSerializer):
    job_id = serializers.IntegerField(read_only=True)
    allowed_transitions = serializers.SerializerMethodField()

    class Meta:
        model = Application
        fields = [
            "id", "job_id", "job_title",
            "user_id", "user_email", "full_name", "phone", "whatsapp",
            "answers", "submitted_at", "status", "allowed_transitions",
        ]
        read_only_fields = fields

    def get_allowed_transitions(self, obj):
        return get_allowed_transitions(obj.status)


# ---- Input schemas ----------------------------------------------------


class JobInputSerializer(InputSerializer):
    title = serializers.CharField(min_length=3, max_length=255)
    description = serializers.CharField(min_length=10)
    category = serializers.ChoiceField(choices=Job.CATEGORY_CHOICES)
    additional_questions = QuestionListField(required=False, default=list)
    status = serializers.ChoiceField(choices=Job.STATUS_CHOICES, required=False)


class ApplicationInputSerializer(InputSerializer):
    job_id = serializers.IntegerField()
    full_name = serializers.CharField(min_length=2, max_length=255)
    phone = serializers.CharField(min_length=10, max_length=32)
    whatsapp = serializers.CharField(min_length=10, max_length=32)
    answers = serializers.DictField(
        child=serializers.CharField(allow_blank=True, max_length=5000),
        required=False,
        default=dict,
    )


class ApplicationStatusSerializer(InputSerializer):
    status = serializers.ChoiceField(choices=Application.STATUS_CHOICES)


class ApplicationQuerySerializer(InputSerializer):
    """Filters and cursor for the admin applications list."""
    status = serializers.ChoiceField(
        choices=[FILTER_ALL] + [value for value, _ in Application.STATUS_CHOICES],
        required=False,
        default=FILTER_ALL,
    )
    job_title = serializers.CharField(required=False, default=FILTER_ALL)
    start_after = serializers.IntegerField(required=False, allow_null=True, default=None)
    limit = serializers.IntegerField(required=False, min_value=1)

    def validate_limit(self, value):
        return min(value, settings.APPLICATIONS_MAX_PAGE_SIZE)
