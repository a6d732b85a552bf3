"""
apps.localization.services.translation_service
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Read and upsert operations for the two translation tables.

None of these functions perform any merging with the field catalog; the
form resolver reads :class:`~apps.localization.models.FieldTranslation`
rows itself through :func:`field_translations_for`.
"""
from __future__ import annotations

import structlog
from django.db.models import QuerySet
from django.utils import timezone

from apps.form_catalog import services as catalog
from apps.localization.models import FieldTranslation, Translation
from apps.localization.services.locale_registry import LocaleRegistry
from common.exceptions import NotFoundError

logger = structlog.get_logger(__name__)

#: Country name → default locale.  Anything not listed falls back to
#: :data:`FALLBACK_LOCALE`.
COUNTRY_DEFAULT_LOCALES: dict[str, str] = {
    "Canada": "en-CA",
    "USA": "en-US",
    "Morocco": "ar-MA",
    "France": "fr-FR",
}

FALLBACK_LOCALE = "en-US"


def default_locale_for_country(country: str) -> str:
    """Return the default locale code for *country* (``en-US`` if unknown)."""
    return COUNTRY_DEFAULT_LOCALES.get(country, FALLBACK_LOCALE)


# ---------------------------------------------------------------------------
# Generic UI translations
# ---------------------------------------------------------------------------

def get_translations(
    *,
    locale: str,
    context: str | None = None,
    registry: LocaleRegistry | None = None,
) -> dict[str, str]:
    """
    Return ``{translation_key: content}`` for an active *locale*.

    Args:
        locale: Locale code; must be active.
        context: Optional context tag filter.
        registry: Registry used to validate *locale*.

    Raises:
        UnsupportedLocaleError: If *locale* is not active.
    """
    registry = registry or LocaleRegistry()
    registry.require_active(locale)

    qs = Translation.objects.using(registry.using).filter(locale_id=locale)
    if context:
        qs = qs.filter(context=context)
    return dict(qs.order_by("translation_key").values_list("translation_key", "content"))


def get_translation(*, key: str, locale: str, using: str = "default") -> Translation:
    """Fetch one translation, raising :class:`NotFoundError` if absent."""
    try:
        return Translation.objects.using(using).get(translation_key=key, locale_id=locale)
    except Translation.DoesNotExist:
        raise NotFoundError(
            f"Translation not found for key '{key}' and locale '{locale}'."
        )


def upsert_translation(
    *,
    key: str,
    locale: str,
    content: str,
    context: str = "",
    registry: LocaleRegistry | None = None,
) -> Translation:
    """
    Create or update the translation for ``(key, locale)``.

    Raises:
        UnsupportedLocaleError: If *locale* is not active (nothing written).
    """
    registry = registry or LocaleRegistry()
    registry.require_active(locale)

    Translation.objects.using(registry.using).bulk_create(
        [
            Translation(
                translation_key=key,
                locale_id=locale,
                content=content,
                context=context or "",
                updated_at=timezone.now(),
            )
        ],
        update_conflicts=True,
        unique_fields=["translation_key", "locale"],
        update_fields=["content", "context", "updated_at"],
    )
    logger.info("translation_upserted", translation_key=key, locale=locale)
    return get_translation(key=key, locale=locale, using=registry.using)


# ---------------------------------------------------------------------------
# Field translations
# ---------------------------------------------------------------------------

def upsert_field_translation(
    *,
    field_id: int,
    locale: str,
    display_name: str,
    description: str = "",
    placeholder: str = "",
    registry: LocaleRegistry | None = None,
) -> FieldTranslation:
    """
    Create or update the translation of one catalog field.

    Raises:
        UnsupportedLocaleError: If *locale* is not active.
        NotFoundError: If *field_id* is not an active field.
    """
    registry = registry or LocaleRegistry()
    registry.require_active(locale)
    field = catalog.get_active_field(field_id, using=registry.using)

    FieldTranslation.objects.using(registry.using).bulk_create(
        [
            FieldTranslation(
                field_definition=field,
                locale_id=locale,
                display_name=display_name,
                description=description or "",
                placeholder=placeholder or "",
                updated_at=timezone.now(),
            )
        ],
        update_conflicts=True,
        unique_fields=["field_definition", "locale"],
        update_fields=["display_name", "description", "placeholder", "updated_at"],
    )
    logger.info("field_translation_upserted", field_id=field.id, locale=locale)
    return FieldTranslation.objects.using(registry.using).get(
        field_definition=field, locale_id=locale
    )


def field_translations_for(
    *, locale: str, field_ids, using: str = "default"
) -> QuerySet:
    """
    Return the field translations for *locale* restricted to *field_ids*.

    Rows whose locale has since been deactivated are filtered out here as
    well, so a translation can never apply for an inactive locale.
    """
    return FieldTranslation.objects.using(using).filter(
        locale_id=locale,
        locale__is_active=True,
        field_definition_id__in=list(field_ids),
    )
