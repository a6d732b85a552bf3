"""
apps.form_config.apps
"""
from django.apps import AppConfig, apps
from django.conf import settings


class FormConfigConfig(AppConfig):
    name = "apps.form_config"
    label = "form_config"
    verbose_name = "Form Configuration"

    def ready(self) -> None:
        from apps.form_config.services.batch_mutator import BatchMutator
        from apps.form_config.services.config_resolver import ConfigResolver

        using = settings.FORM_CONFIG_DATABASE
        registry = apps.get_app_config("localization").registry
        self.resolver = ConfigResolver(using=using, registry=registry)
        self.mutator = BatchMutator(using=using)
