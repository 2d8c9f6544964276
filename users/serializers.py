from rest_framework import serializers

from core.serializers import InputSerializer
from .models import Admin


class AdminSerializer(serializers.ModelSerializer):
    class Meta:
        model = Admin
        fields = ["uid", "email", "added_at"]
        read_only_fields = fields


class AddAdminSerializer(InputSerializer):
    email = serializers.EmailField()
