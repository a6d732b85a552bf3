"""
apps.localization.models
~~~~~~~~~~~~~~~~~~~~~~~~
Locale registry and the two translation tables.

Models
------
Locale
    A supported locale code (``en-US``, ``fr-CA`` …).  Only active locales
    may be used to look up translations or to set a tenant's preference.

Translation
    Flat ``translation_key → content`` table for generic UI strings,
    independent of form fields.

FieldTranslation
    Per-(field, locale) display name / description / placeholder that
    replace the catalog text for that locale only.
"""
from django.db import models


class Locale(models.Model):
    """
    A locale the platform can render forms in.

    ``code`` is the primary key so translation rows reference the readable
    code directly (``locale_id == "fr-CA"``).
    """

    code = models.CharField(max_length=10, primary_key=True)
    language_name = models.CharField(max_length=100)
    native_name = models.CharField(max_length=100)
    country_code = models.CharField(max_length=2, blank=True, default="")
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["code"]
        verbose_name = "Locale"
        verbose_name_plural = "Locales"

    def __str__(self) -> str:
        return f"{self.code} ({self.native_name})"


class Translation(models.Model):
    """A generic UI string for one locale."""

    translation_key = models.CharField(max_length=255, db_index=True)
    locale = models.ForeignKey(
        Locale,
        on_delete=models.PROTECT,
        related_name="translations",
    )
    content = models.TextField()
    context = models.CharField(
        max_length=100,
        blank=True,
        default="",
        help_text="Optional grouping tag, e.g. 'form_field', 'validation_message', 'ui_text'.",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["locale", "translation_key"]
        constraints = [
            models.UniqueConstraint(
                fields=["translation_key", "locale"],
                name="unique_translation_key_locale",
            ),
        ]
        verbose_name = "Translation"
        verbose_name_plural = "Translations"

    def __str__(self) -> str:
        return f"{self.translation_key} [{self.locale_id}]"


class FieldTranslation(models.Model):
    """
    Localised text for one catalog field.

    Only ``display_name``, ``description`` and ``placeholder`` are
    translated; enabled/required/order never come from this table.
    """

    field_definition = models.ForeignKey(
        "form_catalog.FieldDefinition",
        on_delete=models.CASCADE,
        related_name="translations",
    )
    locale = models.ForeignKey(
        Locale,
        on_delete=models.PROTECT,
        related_name="field_translations",
    )
    display_name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    placeholder = models.CharField(max_length=200, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["field_definition", "locale"]
        constraints = [
            models.UniqueConstraint(
                fields=["field_definition", "locale"],
                name="unique_field_translation_locale",
            ),
        ]
        indexes = [
            models.Index(fields=["field_definition", "locale"]),
        ]
        verbose_name = "Field Translation"
        verbose_name_plural = "Field Translations"

    def __str__(self) -> str:
        return f"{self.field_definition_id} [{self.locale_id}] {self.display_name}"
