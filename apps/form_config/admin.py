"""
apps.form_config.admin
"""
from django.contrib import admin

from .models import EntityFieldConfiguration


@admin.register(EntityFieldConfiguration)
class EntityFieldConfigurationAdmin(admin.ModelAdmin):
    list_display = ["tenant", "field_definition", "is_enabled", "is_required", "sort_order", "updated_at"]
    list_filter = ["is_enabled", "is_required", "field_definition__form_type", "tenant"]
    search_fields = ["tenant__name", "field_definition__name", "custom_label"]
    readonly_fields = ["id", "created_at", "updated_at"]
    ordering = ["tenant", "field_definition__sort_order"]

    # Overrides are written through BatchMutator only.
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
