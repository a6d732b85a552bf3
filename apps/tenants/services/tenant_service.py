"""
apps.tenants.services.tenant_service
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Business logic for healthcare entities (tenants).

Views must call only these functions.

Responsibilities
----------------
- Creating tenants, optionally seeding their per-field default overrides
  through :meth:`~apps.form_config.services.batch_mutator.BatchMutator.initialize_defaults`.
- Looking up active tenants for the form-configuration services.
- Updating a tenant's preferred locale, gated by
  :class:`~apps.localization.services.locale_registry.LocaleRegistry`.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from django.db import transaction

from apps.localization.services.locale_registry import LocaleRegistry
from apps.tenants.models import HealthcareEntity
from common.exceptions import NotFoundError

if TYPE_CHECKING:
    from apps.form_config.services.batch_mutator import BatchMutator

logger = structlog.get_logger(__name__)


def get_tenant(tenant_id: int | str, *, using: str = "default") -> HealthcareEntity:
    """
    Fetch an active :class:`HealthcareEntity` by id.

    Raises:
        NotFoundError: If the id is malformed, unknown, or inactive.
    """
    try:
        pk = int(tenant_id)
    except (TypeError, ValueError):
        raise NotFoundError(f"Healthcare entity '{tenant_id}' not found.")

    tenant = HealthcareEntity.objects.using(using).filter(pk=pk, is_active=True).first()
    if tenant is None:
        raise NotFoundError(f"Healthcare entity '{tenant_id}' not found.")
    return tenant


def create_tenant(
    *,
    name: str,
    preferred_locale: str | None = None,
    initialize_defaults: bool = False,
    registry: LocaleRegistry | None = None,
    mutator: BatchMutator | None = None,
) -> HealthcareEntity:
    """
    Create a new tenant.

    Args:
        name: Unique display name.
        preferred_locale: Optional locale code; must be active.
        initialize_defaults: When ``True``, write one override row per active
            catalog field carrying the catalog defaults.  Requires *mutator*.
        registry: Locale registry used to validate *preferred_locale*.
        mutator: Mutator used for *initialize_defaults*.

    Raises:
        UnsupportedLocaleError: If *preferred_locale* is not active.
        django.db.IntegrityError: If the name is already taken.
    """
    registry = registry or LocaleRegistry()
    if preferred_locale:
        registry.require_active(preferred_locale)
    if initialize_defaults and mutator is None:
        raise ValueError("initialize_defaults requires a BatchMutator.")

    with transaction.atomic(using=registry.using):
        tenant = HealthcareEntity.objects.using(registry.using).create(
            name=name,
            preferred_locale_id=preferred_locale or None,
        )
        if initialize_defaults:
            mutator.initialize_defaults(tenant.id)

    logger.info(
        "tenant_created",
        tenant_id=tenant.id,
        name=tenant.name,
        initialized_defaults=initialize_defaults,
    )
    return tenant


def update_preferred_locale(
    *,
    tenant_id: int | str,
    locale: str,
    registry: LocaleRegistry | None = None,
) -> HealthcareEntity:
    """
    Change a tenant's preferred locale.

    The locale is validated before the tenant row is even read, so an
    unsupported code never reaches the write.

    Raises:
        UnsupportedLocaleError: If *locale* is not active.
        NotFoundError: If the tenant does not exist.
    """
    registry = registry or LocaleRegistry()
    registry.require_active(locale)

    tenant = get_tenant(tenant_id, using=registry.using)
    tenant.preferred_locale_id = locale
    tenant.save(using=registry.using, update_fields=["preferred_locale", "updated_at"])

    logger.info("tenant_locale_updated", tenant_id=tenant.id, locale=locale)
    return tenant
