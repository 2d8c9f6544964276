from rest_framework import serializers

from core.serializers import ClockTimeField, InputSerializer
from .models import AgendaTrack, AgendaItem


class AgendaTrackSerializer(serializers.ModelSerializer):
    class Meta:
        model = AgendaTrack
        fields = ["id", "name"]


class AgendaItemSerializer(serializers.ModelSerializer):
    track_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = AgendaItem
        fields = [
            "id", "title", "speaker", "description",
            "track_id", "track_name", "start_time", "end_time", "category",
        ]
        read_only_fields = fields


class AgendaTrackInputSerializer(InputSerializer):
    name = serializers.CharField(max_length=120)


class AgendaItemInputSerializer(InputSerializer):
    title = serializers.CharField(min_length=3, max_length=255)
    speaker = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    track_id = serializers.IntegerField()
    start_time = ClockTimeField()
    end_time = ClockTimeField()
    category = serializers.ChoiceField(
        choices=AgendaItem.CATEGORY_CHOICES, required=False, allow_blank=True, default=""
    )

    def validate(self, attrs):
        if attrs["end_time"] <= attrs["start_time"]:
            raise serializers.ValidationError({"end_time": ["End time must be after start time."]})
        return attrs
