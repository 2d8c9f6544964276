from rest_framework import serializers

from core.serializers import InputSerializer
from .models import Announcement, Subscription


class AnnouncementSerializer(serializers.ModelSerializer):
    class Meta:
        model = Announcement
        fields = ["id", "content", "created_at"]
        read_only_fields = fields


class SubscriptionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Subscription
        fields = ["id", "email", "subscribed_at"]
        read_only_fields = fields


class AnnouncementInputSerializer(InputSerializer):
    content = serializers.CharField(
        min_length=10,
        error_messages={"min_length": "Content must be at least 10 characters long."},
    )


class SubscribeInputSerializer(InputSerializer):
    email = serializers.EmailField(error_messages={"invalid": "Invalid email address."})
