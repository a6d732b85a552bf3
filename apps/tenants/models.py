"""
apps.tenants.models
~~~~~~~~~~~~~~~~~~~
HealthcareEntity – the tenant that owns its own form field overrides.
"""
from django.db import models
from django.utils.text import slugify


class HealthcareEntity(models.Model):
    """
    A clinic, hospital or practice using the platform.

    Fields
    ------
    id
        Auto-incrementing integer, sent by clients in the
        ``X-Healthcare-Entity-ID`` header.
    name
        Human-readable unique name (e.g. ``"Northside Clinic"``).
    slug
        URL-safe version of ``name``, auto-generated on first save.
    preferred_locale
        Locale the tenant's clients should request translations in.
        Only active locales may be stored here.
    is_active
        Inactive tenants cannot resolve or change form configuration.
    """

    name = models.CharField(max_length=255, unique=True)
    slug = models.SlugField(
        max_length=255,
        unique=True,
        blank=True,
        help_text="URL-safe identifier auto-generated from the entity name.",
    )
    preferred_locale = models.ForeignKey(
        "localization.Locale",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]
        verbose_name = "Healthcare Entity"
        verbose_name_plural = "Healthcare Entities"

    def save(self, *args, **kwargs) -> None:
        """Auto-populate ``slug`` on first save."""
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"#{self.id} {self.name}" if self.id else self.name
