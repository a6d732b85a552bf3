"""
apps.localization.serializers
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
I/O-only serializers for the localization API.
"""
from rest_framework import serializers

from .models import FieldTranslation, Locale, Translation


class LocaleSerializer(serializers.ModelSerializer):
    class Meta:
        model = Locale
        fields = ["code", "language_name", "native_name", "country_code"]
        read_only_fields = fields


class TranslationSerializer(serializers.ModelSerializer):
    locale = serializers.CharField(source="locale_id", read_only=True)

    class Meta:
        model = Translation
        fields = ["translation_key", "locale", "content", "context", "updated_at"]
        read_only_fields = fields


class TranslationUpsertSerializer(serializers.Serializer):
    """Validates POST /admin/i18n/translations/ request body."""

    translation_key = serializers.CharField(max_length=255)
    locale = serializers.CharField(max_length=10)
    content = serializers.CharField()
    context = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")


class FieldTranslationSerializer(serializers.ModelSerializer):
    field_id = serializers.IntegerField(source="field_definition_id", read_only=True)
    locale = serializers.CharField(source="locale_id", read_only=True)

    class Meta:
        model = FieldTranslation
        fields = ["field_id", "locale", "display_name", "description", "placeholder", "updated_at"]
        read_only_fields = fields


class FieldTranslationUpsertSerializer(serializers.Serializer):
    """Validates POST /admin/i18n/field-translations/ request body."""

    field_id = serializers.IntegerField(min_value=1)
    locale = serializers.CharField(max_length=10)
    display_name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    placeholder = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")


class TenantLocaleSerializer(serializers.Serializer):
    """Validates PUT /i18n/tenant/locale/ request body."""

    locale = serializers.CharField(max_length=10)
