"""
apps.tenants.apps
"""
from django.apps import AppConfig


class TenantsConfig(AppConfig):
    name = "apps.tenants"
    label = "tenants"
    verbose_name = "Healthcare Entities"
