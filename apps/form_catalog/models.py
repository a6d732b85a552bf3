"""
apps.form_catalog.models
~~~~~~~~~~~~~~~~~~~~~~~~
The global, tenant-independent field catalog.

Models
------
FormType
    A kind of dynamic form (``patient``, ``appointment``).

FieldDefinition
    One field of a form type with its catalog defaults.  Tenants never
    create or delete these; they only override presentation through
    :class:`~apps.form_config.models.EntityFieldConfiguration`.
"""
from django.core.exceptions import ValidationError
from django.db import models


class FormType(models.Model):
    """A form the platform can render, seeded once and read-only at runtime."""

    name = models.CharField(
        max_length=50,
        unique=True,
        help_text="Machine name used in URLs, e.g. 'patient'.",
    )
    display_name = models.CharField(max_length=100)
    description = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name = "Form Type"
        verbose_name_plural = "Form Types"

    def __str__(self) -> str:
        status = "active" if self.is_active else "inactive"
        return f"{self.name} [{status}]"


class FieldDefinition(models.Model):
    """
    Catalog definition of a single form field.

    Fields
    ------
    is_core
        Core fields must always resolve to enabled for every tenant.
    default_required
        Required state used when a tenant has no override row.
    validation_rules
        JSONB mapping of rule name → constraint, e.g. ``{"max_length": 50}``.
    options
        Ordered choices for ``select`` fields.
    sort_order
        Catalog ordering; tenants may override it.
    """

    class FieldType(models.TextChoices):
        TEXT = "text", "Text"
        EMAIL = "email", "Email"
        PHONE = "phone", "Phone"
        NUMBER = "number", "Number"
        DATE = "date", "Date"
        DATETIME = "datetime", "Date & time"
        SELECT = "select", "Select"
        TEXTAREA = "textarea", "Text area"
        CHECKBOX = "checkbox", "Checkbox"

    form_type = models.ForeignKey(
        FormType,
        on_delete=models.PROTECT,
        related_name="fields",
    )
    name = models.CharField(max_length=100)
    display_name = models.CharField(max_length=200)
    field_type = models.CharField(max_length=20, choices=FieldType.choices)
    default_required = models.BooleanField(default=False)
    is_core = models.BooleanField(
        default=False,
        help_text="Core fields can never be disabled by a tenant.",
    )
    validation_rules = models.JSONField(default=dict, blank=True)
    options = models.JSONField(default=list, blank=True)
    sort_order = models.IntegerField(default=0)
    category = models.CharField(max_length=100, blank=True, default="")
    description = models.TextField(blank=True, default="")
    placeholder = models.CharField(max_length=200, blank=True, default="")
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["form_type", "sort_order", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["form_type", "name"],
                name="unique_field_name_per_form_type",
            ),
        ]
        indexes = [
            models.Index(fields=["form_type", "is_active"]),
        ]
        verbose_name = "Field Definition"
        verbose_name_plural = "Field Definitions"

    def __str__(self) -> str:
        return f"{self.form_type_id}:{self.name}"

    def clean(self) -> None:
        """
        Validate this definition with
        :class:`~apps.form_catalog.validators.CatalogValidator` and convert
        failures into a Django ``ValidationError`` for the admin.
        """
        from apps.form_catalog.validators import (  # noqa: PLC0415
            CatalogValidationError,
            CatalogValidator,
        )

        try:
            CatalogValidator.validate([self.as_catalog_entry()])
        except CatalogValidationError as exc:
            raise ValidationError(
                [f"{err['field']}: {err['message']}" for err in exc.errors]
            ) from exc

    def as_catalog_entry(self) -> dict:
        """Return this definition in the seed-data dict shape."""
        return {
            "name": self.name,
            "display_name": self.display_name,
            "field_type": self.field_type,
            "default_required": self.default_required,
            "is_core": self.is_core,
            "validation_rules": self.validation_rules,
            "options": self.options,
            "sort_order": self.sort_order,
            "category": self.category,
            "description": self.description,
            "placeholder": self.placeholder,
        }
