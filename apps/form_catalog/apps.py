"""
apps.form_catalog.apps
"""
from django.apps import AppConfig


class FormCatalogConfig(AppConfig):
    name = "apps.form_catalog"
    label = "form_catalog"
    verbose_name = "Form Catalog"
