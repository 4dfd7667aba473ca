from __future__ import annotations

from rest_framework import serializers

from modules.profiles.models import UserProfile


class UserProfileSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)
    formatted_address = serializers.CharField(read_only=True)

    class Meta:
        model = UserProfile
        fields = [
            "user_id",
            "first_name",
            "last_name",
            "full_name",
            "contact",
            "house_no",
            "street",
            "barangay",
            "city",
            "province",
            "zip_code",
            "formatted_address",
            "last_delivery",
            "updated_at",
        ]
        read_only_fields = fields
