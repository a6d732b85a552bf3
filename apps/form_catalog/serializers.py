"""
apps.form_catalog.serializers
"""
from rest_framework import serializers

from .models import FormType


class FormTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = FormType
        fields = ["name", "display_name", "description"]
        read_only_fields = fields
