"""
apps.form_config.services.config_resolver
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Deterministic field-configuration resolver.

Merge precedence (lowest → highest priority):
    1. **Catalog defaults** - every active ``FieldDefinition`` of the form
       type.  This is the foundation and always provides every field.
    2. **Tenant override** - the tenant's ``EntityFieldConfiguration`` row
       for the field, when one exists.  It supplies enabled, required,
       custom label, custom validation and sort order.
    3. **Field translation** - the ``FieldTranslation`` row for the requested
       locale, when one exists.  It replaces only display name, description
       and placeholder.

After merging, the post-merge display rules in :data:`POST_MERGE_RULES` run
on every descriptor.

Overrides or translations for fields that are not part of the active field
list are silently ignored so that stale rows never break resolution.

:meth:`ConfigResolver.merge` is **pure**: it only reads the rows it is given
and never touches the database.  :meth:`ConfigResolver.resolve` fetches the
three layers and then delegates to it.

Public API
----------
ConfigResolver(using, registry).resolve(form_type, tenant_id, locale) -> FormMetadata
ConfigResolver.merge(form_type, fields, overrides, translations, ...) -> FormMetadata
ConfigResolver.effective_flags(field, override) -> EffectiveState
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Mapping

import structlog

from apps.form_catalog import services as catalog
from apps.form_config.models import EntityFieldConfiguration
from apps.localization.services.locale_registry import LocaleRegistry
from apps.localization.services.translation_service import field_translations_for
from apps.tenants.services import get_tenant

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EffectiveState:
    """The effective (enabled, required) pair of one field for one tenant."""

    enabled: bool
    required: bool


@dataclass
class FieldDescriptor:
    """
    Everything a client needs to render one field.

    ``display_name`` is the catalog (or translated) name; ``label`` is what
    should actually be shown, i.e. the tenant's ``custom_label`` when set.
    ``validation_rules`` are the catalog defaults and ``custom_validation``
    the tenant's replacement map; the two are never merged key by key.
    """

    field_id: int
    name: str
    display_name: str
    label: str
    custom_label: str
    field_type: str
    is_enabled: bool
    is_required: bool
    is_core: bool
    validation_rules: dict
    custom_validation: dict
    options: list
    sort_order: int
    category: str
    description: str
    placeholder: str
    locale: str | None = None


@dataclass
class FormMetadata:
    """Resolved form: ordered field descriptors plus caching metadata."""

    form_type: str
    display_name: str
    description: str
    tenant_id: int | None
    locale: str | None
    fields: list[FieldDescriptor] = field(default_factory=list)
    last_modified: datetime | None = None


# ---------------------------------------------------------------------------
# Post-merge display rules
# ---------------------------------------------------------------------------

class DependentSelectRule:
    """
    ``city`` and ``country`` drive dependent location dropdowns on every
    client, so they are always reported as ``select`` regardless of the
    catalog's stored field type.
    """

    FIELD_NAMES: frozenset[str] = frozenset({"city", "country"})

    @classmethod
    def apply(cls, descriptor: FieldDescriptor) -> None:
        if descriptor.name in cls.FIELD_NAMES:
            descriptor.field_type = "select"


#: Rules applied, in order, to every merged descriptor.
POST_MERGE_RULES = (DependentSelectRule,)


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

class ConfigResolver:
    """
    Produces the effective field configuration of a form for one tenant.

    Holds no state besides its store handle, so one instance can serve any
    number of concurrent requests.  Nothing is cached: every call re-reads
    the catalog, the tenant's overrides and the translations.

    Args:
        using: Database alias to read from.
        registry: Locale registry gating the *locale* argument.
    """

    def __init__(self, using: str = "default", registry: LocaleRegistry | None = None) -> None:
        self.using = using
        self.registry = registry or LocaleRegistry(using=using)

    def resolve(
        self,
        form_type: str,
        tenant_id: int | str,
        locale: str | None = None,
    ) -> FormMetadata:
        """
        Resolve *form_type* for *tenant_id*, translated to *locale* if given.

        Raises:
            NotFoundError: Unknown/inactive form type or tenant.
            UnsupportedLocaleError: *locale* given but not active.  Raised
                before any field translation is read.
        """
        form = catalog.get_active_form_type(form_type, using=self.using)
        tenant = get_tenant(tenant_id, using=self.using)
        if locale:
            self.registry.require_active(locale)

        fields = catalog.list_fields(form, using=self.using)
        field_ids = [f.id for f in fields]

        overrides = {
            row.field_definition_id: row
            for row in EntityFieldConfiguration.objects.using(self.using).filter(
                tenant=tenant, field_definition_id__in=field_ids
            )
        }
        translations = {}
        if locale:
            translations = {
                row.field_definition_id: row
                for row in field_translations_for(
                    locale=locale, field_ids=field_ids, using=self.using
                )
            }

        metadata = self.merge(
            form_type=form,
            fields=fields,
            overrides=overrides,
            translations=translations,
            tenant_id=tenant.id,
            locale=locale or None,
        )
        logger.debug(
            "form_resolved",
            form_type=form.name,
            tenant_id=tenant.id,
            locale=locale,
            field_count=len(metadata.fields),
            override_count=len(overrides),
        )
        return metadata

    # ------------------------------------------------------------------
    # Pure merge
    # ------------------------------------------------------------------

    @staticmethod
    def effective_flags(field_def, override=None) -> EffectiveState:
        """
        Effective enabled/required of *field_def* given an optional override.

        Without an override a field is always enabled and required iff the
        catalog says so.  A core field is enabled whatever its override row
        stores, so a field promoted to core after a tenant disabled it still
        resolves as enabled.
        """
        if override is None:
            return EffectiveState(enabled=True, required=bool(field_def.default_required))
        return EffectiveState(
            enabled=bool(override.is_enabled or field_def.is_core),
            required=override.is_required,
        )

    @staticmethod
    def merge(
        *,
        form_type,
        fields: Iterable,
        overrides: Mapping | None = None,
        translations: Mapping | None = None,
        tenant_id: int | None = None,
        locale: str | None = None,
    ) -> FormMetadata:
        """
        Merge already-fetched rows into a :class:`FormMetadata`.

        Args:
            form_type: The ``FormType`` being resolved.
            fields: The form type's ``FieldDefinition`` rows.  Inactive rows
                are skipped.
            overrides: ``{field_id: EntityFieldConfiguration}`` for the
                tenant.  Keys that are not in *fields* are ignored.
            translations: ``{field_id: FieldTranslation}`` for the locale.
                Keys that are not in *fields* are ignored.
            tenant_id: Echoed on the result.
            locale: Echoed on the result and on every descriptor.

        Returns:
            Descriptors ordered by effective sort order, ties broken by
            field id, and ``last_modified`` set to the newest ``updated_at``
            of every row that contributed (``None`` for a form without
            fields).  The result shares no mutable state with the inputs.
        """
        overrides = overrides or {}
        translations = translations or {}

        descriptors: list[FieldDescriptor] = []
        timestamps: list[datetime] = []

        for field_def in fields:
            if not field_def.is_active:
                continue

            override = overrides.get(field_def.id)
            translation = translations.get(field_def.id)

            descriptor = ConfigResolver._merge_field(field_def, override, translation, locale)
            for rule in POST_MERGE_RULES:
                rule.apply(descriptor)
            descriptors.append(descriptor)

            for row in (field_def, override, translation):
                if row is not None and row.updated_at is not None:
                    timestamps.append(row.updated_at)

        descriptors.sort(key=lambda d: (d.sort_order, d.field_id))

        return FormMetadata(
            form_type=form_type.name,
            display_name=form_type.display_name,
            description=form_type.description,
            tenant_id=tenant_id,
            locale=locale,
            fields=descriptors,
            last_modified=max(timestamps) if timestamps else None,
        )

    @staticmethod
    def _merge_field(field_def, override, translation, locale) -> FieldDescriptor:
        flags = ConfigResolver.effective_flags(field_def, override)

        display_name = field_def.display_name
        description = field_def.description
        placeholder = field_def.placeholder
        if translation is not None:
            display_name = translation.display_name or display_name
            description = translation.description or description
            placeholder = translation.placeholder or placeholder

        custom_label = ""
        custom_validation: dict = {}
        sort_order = field_def.sort_order
        if override is not None:
            custom_label = override.custom_label or ""
            if override.custom_validation:
                custom_validation = copy.deepcopy(override.custom_validation)
            if override.sort_order is not None:
                sort_order = override.sort_order

        return FieldDescriptor(
            field_id=field_def.id,
            name=field_def.name,
            display_name=display_name,
            label=custom_label or display_name,
            custom_label=custom_label,
            field_type=field_def.field_type,
            is_enabled=flags.enabled,
            is_required=flags.required,
            is_core=field_def.is_core,
            validation_rules=copy.deepcopy(field_def.validation_rules or {}),
            custom_validation=custom_validation,
            options=list(field_def.options or []),
            sort_order=sort_order,
            category=field_def.category,
            description=description,
            placeholder=placeholder,
            locale=locale,
        )
