"""
apps.form_catalog.admin
~~~~~~~~~~~~~~~~~~~~~~~
Django admin registrations for the field catalog.
"""
from django.contrib import admin

from .models import FieldDefinition, FormType


class FieldDefinitionInline(admin.TabularInline):
    model = FieldDefinition
    extra = 0
    fields = ["name", "display_name", "field_type", "is_core", "default_required", "sort_order", "is_active"]
    readonly_fields = ["is_core"]
    ordering = ["sort_order"]
    show_change_link = True


@admin.register(FormType)
class FormTypeAdmin(admin.ModelAdmin):
    list_display = ["name", "display_name", "is_active", "updated_at"]
    list_filter = ["is_active"]
    search_fields = ["name", "display_name"]
    readonly_fields = ["created_at", "updated_at"]
    inlines = [FieldDefinitionInline]


@admin.register(FieldDefinition)
class FieldDefinitionAdmin(admin.ModelAdmin):
    """
    Catalog fields are seeded; ``name`` and ``is_core`` are read-only once a
    row exists because tenant overrides and translations reference them.
    """

    list_display = ["name", "form_type", "field_type", "is_core", "default_required", "sort_order", "is_active"]
    list_filter = ["form_type", "field_type", "is_core", "is_active"]
    search_fields = ["name", "display_name", "category"]
    readonly_fields = ["created_at", "updated_at"]
    ordering = ["form_type", "sort_order"]

    def get_readonly_fields(self, request, obj=None):
        if obj is not None:
            return list(self.readonly_fields) + ["form_type", "name", "is_core"]
        return self.readonly_fields
