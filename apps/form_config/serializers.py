"""
apps.form_config.serializers
~~~~~~~~~~~~~~~~~~~~~~~~~~~~
I/O-only serializers for the form configuration API.
No business logic; shape validation only.  Invariants are checked by the
services, not here.
"""
from rest_framework import serializers


# ---------------------------------------------------------------------------
# Resolved form
# ---------------------------------------------------------------------------

class FieldDescriptorSerializer(serializers.Serializer):
    """Read serializer for one resolved field."""

    field_id = serializers.IntegerField()
    name = serializers.CharField()
    display_name = serializers.CharField()
    label = serializers.CharField()
    custom_label = serializers.CharField(allow_blank=True)
    field_type = serializers.CharField()
    is_enabled = serializers.BooleanField()
    is_required = serializers.BooleanField()
    is_core = serializers.BooleanField()
    validation_rules = serializers.DictField()
    custom_validation = serializers.DictField()
    options = serializers.ListField(child=serializers.CharField())
    sort_order = serializers.IntegerField()
    category = serializers.CharField(allow_blank=True)
    description = serializers.CharField(allow_blank=True)
    placeholder = serializers.CharField(allow_blank=True)
    locale = serializers.CharField(allow_null=True)


class FormMetadataSerializer(serializers.Serializer):
    """Response shape for GET /forms/{form_type}/metadata/."""

    form_type = serializers.CharField()
    display_name = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    tenant_id = serializers.IntegerField()
    locale = serializers.CharField(allow_null=True)
    last_modified = serializers.DateTimeField(allow_null=True)
    fields = FieldDescriptorSerializer(many=True)


class FieldListResponseSerializer(serializers.Serializer):
    """Response shape for GET /forms/{form_type}/fields/."""

    form_type = serializers.CharField()
    fields = FieldDescriptorSerializer(many=True)


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

class FieldUpdateSerializer(serializers.Serializer):
    """
    Validates PUT /admin/forms/{form_type}/fields/{field_id}/.

    Every key is optional; omitted keys keep their current value.
    """

    is_enabled = serializers.BooleanField(required=False)
    is_required = serializers.BooleanField(required=False)
    custom_label = serializers.CharField(max_length=200, required=False, allow_blank=True)
    custom_validation = serializers.DictField(required=False)
    sort_order = serializers.IntegerField(required=False)


class BatchFieldUpdateSerializer(serializers.Serializer):
    """One item of a batch update: the full desired state of a field."""

    field_id = serializers.IntegerField(min_value=1)
    is_enabled = serializers.BooleanField()
    is_required = serializers.BooleanField()
    custom_label = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
    custom_validation = serializers.DictField(required=False, default=dict)
    sort_order = serializers.IntegerField(required=False, allow_null=True, default=None)


class BatchUpdateRequestSerializer(serializers.Serializer):
    """Validates PUT /admin/forms/{form_type}/fields/ request body."""

    fields = BatchFieldUpdateSerializer(many=True)


class FieldOrderSerializer(serializers.Serializer):
    field_id = serializers.IntegerField(min_value=1)
    sort_order = serializers.IntegerField()


class FieldOrdersRequestSerializer(serializers.Serializer):
    """Validates PUT /admin/forms/{form_type}/fields/order/ request body."""

    field_orders = FieldOrderSerializer(many=True)


class FieldConfigurationSerializer(serializers.Serializer):
    """Response shape for a single stored override row."""

    tenant_id = serializers.IntegerField()
    field_id = serializers.IntegerField(source="field_definition_id")
    is_enabled = serializers.BooleanField()
    is_required = serializers.BooleanField()
    custom_label = serializers.CharField(allow_blank=True)
    custom_validation = serializers.DictField()
    sort_order = serializers.IntegerField(allow_null=True)
    updated_at = serializers.DateTimeField()


class MutationCountSerializer(serializers.Serializer):
    """Response shape for batch, order and reset operations."""

    updated = serializers.IntegerField(required=False)
    deleted = serializers.IntegerField(required=False)


class ErrorResponseSerializer(serializers.Serializer):
    """Response shape produced by the global exception handler."""

    code = serializers.CharField()
    detail = serializers.CharField()
    errors = serializers.ListField(child=serializers.DictField(), required=False)
