"""
apps.tenants.admin
"""
from django.contrib import admin

from .models import HealthcareEntity


@admin.register(HealthcareEntity)
class HealthcareEntityAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "slug", "preferred_locale", "is_active", "created_at"]
    list_filter = ["is_active", "preferred_locale"]
    search_fields = ["name", "slug"]
    readonly_fields = ["id", "slug", "created_at", "updated_at"]
    ordering = ["id"]
