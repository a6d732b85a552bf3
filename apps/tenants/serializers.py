"""
apps.tenants.serializers
~~~~~~~~~~~~~~~~~~~~~~~~
I/O-only serializers for the Tenants API.
"""
from rest_framework import serializers

from .models import HealthcareEntity


class HealthcareEntitySerializer(serializers.ModelSerializer):
    """Read serializer for a full HealthcareEntity object."""

    preferred_locale = serializers.CharField(source="preferred_locale_id", allow_null=True, read_only=True)

    class Meta:
        model = HealthcareEntity
        fields = ["id", "name", "slug", "preferred_locale", "is_active", "created_at", "updated_at"]
        read_only_fields = fields


class HealthcareEntityCreateSerializer(serializers.Serializer):
    """Validates POST /tenants/ request body."""

    name = serializers.CharField(max_length=255)
    preferred_locale = serializers.CharField(max_length=10, required=False, allow_null=True, default=None)
    initialize_defaults = serializers.BooleanField(required=False, default=False)
