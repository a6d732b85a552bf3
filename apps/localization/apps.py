"""
apps.localization.apps
"""
from django.apps import AppConfig
from django.conf import settings


class LocalizationConfig(AppConfig):
    name = "apps.localization"
    label = "localization"
    verbose_name = "Localization"

    def ready(self) -> None:
        from apps.localization.services.locale_registry import LocaleRegistry

        self.registry = LocaleRegistry(using=settings.FORM_CONFIG_DATABASE)
