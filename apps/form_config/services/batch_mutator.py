"""
apps.form_config.services.batch_mutator
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
All writes to tenant field overrides.

Every mutation is checked by
:class:`~apps.form_config.services.invariant_guard.InvariantGuard` before
anything is written.  Rows are upserted on the ``(tenant, field_definition)``
unique constraint (``INSERT … ON CONFLICT DO UPDATE``), so the constraint
itself is the concurrency control: two tenants never contend, and within one
tenant the last writer wins per row.

Multi-row operations run in a single ``transaction.atomic()`` block.  Any
error rolls the whole block back; database errors are then reported as
:class:`~common.exceptions.StoreFailureError`, so callers may simply retry.
"""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterable

import structlog
from django.db import DatabaseError, transaction
from django.utils import timezone

from apps.form_catalog import services as catalog
from apps.form_catalog.models import FieldDefinition
from apps.form_config.models import EntityFieldConfiguration
from apps.form_config.services.config_resolver import ConfigResolver
from apps.form_config.services.invariant_guard import (
    CORE_FIELD_PROTECTED,
    REQUIRED_NEEDS_ENABLED,
    InvariantCheckRequest,
    InvariantGuard,
)
from apps.tenants.services import get_tenant
from common.exceptions import (
    CoreFieldProtectedError,
    InvariantViolationError,
    RequiredNeedsEnabledError,
    StoreFailureError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

_VIOLATION_ERRORS: dict[str, type[InvariantViolationError]] = {
    CORE_FIELD_PROTECTED: CoreFieldProtectedError,
    REQUIRED_NEEDS_ENABLED: RequiredNeedsEnabledError,
}

_CONFLICT_TARGET = ["tenant", "field_definition"]
_FULL_UPDATE_FIELDS = [
    "is_enabled",
    "is_required",
    "custom_label",
    "custom_validation",
    "sort_order",
    "updated_at",
]


# ---------------------------------------------------------------------------
# Request dataclasses
# ---------------------------------------------------------------------------

@dataclass
class FieldUpdate:
    """
    Partial update of one field.  ``None`` means "keep the current value".
    """

    is_enabled: bool | None = None
    is_required: bool | None = None
    custom_label: str | None = None
    custom_validation: dict | None = None
    sort_order: int | None = None


@dataclass
class BatchFieldUpdate:
    """
    Full desired state of one field inside a batch.

    ``sort_order=None`` stores no order override (catalog order applies).
    """

    field_id: int
    is_enabled: bool
    is_required: bool
    custom_label: str = ""
    custom_validation: dict = field(default_factory=dict)
    sort_order: int | None = None


@dataclass
class FieldOrder:
    field_id: int
    sort_order: int


# ---------------------------------------------------------------------------
# Mutator
# ---------------------------------------------------------------------------

class BatchMutator:
    """
    Applies override mutations for a tenant.

    Args:
        using: Database alias to write to.
        guard: Invariant checker; the stateless default is fine for
            production, tests may pass their own.
    """

    def __init__(self, using: str = "default", guard: InvariantGuard | None = None) -> None:
        self.using = using
        self.guard = guard or InvariantGuard()

    # ------------------------------------------------------------------
    # Single field
    # ------------------------------------------------------------------

    def apply_single(
        self,
        tenant_id: int | str,
        field_id: int,
        update: FieldUpdate,
        *,
        form_type: str | None = None,
    ) -> EntityFieldConfiguration:
        """
        Apply a partial update to one field and upsert its override row.

        The proposed enabled/required pair is resolved against the field's
        current effective state before checking invariants, and the resolved
        pair is what gets stored.  Label, validation and order that the
        update leaves as ``None`` keep their current override values.

        Raises:
            NotFoundError: Unknown tenant, form type, or field (or field not
                in *form_type*).
            CoreFieldProtectedError / RequiredNeedsEnabledError: On
                invariant violation; nothing is written.
            StoreFailureError: The upsert failed.
        """
        with self._store_errors("update field configuration", tenant_id=tenant_id, field_id=field_id):
            tenant = get_tenant(tenant_id, using=self.using)
            form = catalog.get_active_form_type(form_type, using=self.using) if form_type else None
            field_def = catalog.get_active_field(field_id, form_type=form, using=self.using)

            existing = (
                EntityFieldConfiguration.objects.using(self.using)
                .filter(tenant=tenant, field_definition=field_def)
                .first()
            )
            current = ConfigResolver.effective_flags(field_def, existing)

            result = self.guard.validate(InvariantCheckRequest(
                field_id=field_def.id,
                field_name=field_def.name,
                is_core=field_def.is_core,
                current_enabled=current.enabled,
                current_required=current.required,
                proposed_enabled=update.is_enabled,
                proposed_required=update.is_required,
            ))
            if not result.valid:
                self._raise_violation(result.errors, tenant_id=tenant.id)

            row = EntityFieldConfiguration(
                tenant=tenant,
                field_definition=field_def,
                is_enabled=result.enabled,
                is_required=result.required,
                custom_label=_keep(update.custom_label, existing, "custom_label", ""),
                custom_validation=_keep(update.custom_validation, existing, "custom_validation", {}),
                sort_order=_keep(update.sort_order, existing, "sort_order", None),
                updated_at=timezone.now(),
            )
            self._upsert([row], update_fields=_FULL_UPDATE_FIELDS)

        logger.info(
            "field_configuration_updated",
            tenant_id=tenant.id,
            field_id=field_def.id,
            is_enabled=result.enabled,
            is_required=result.required,
        )
        return (
            EntityFieldConfiguration.objects.using(self.using)
            .get(tenant=tenant, field_definition=field_def)
        )

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    def apply_batch(
        self,
        tenant_id: int | str,
        form_type: str,
        items: Iterable[BatchFieldUpdate],
    ) -> int:
        """
        Apply full desired states for several fields, all or nothing.

        Each item is checked against its *own* values (a batch describes the
        desired state, not deltas).  Every item is validated before any row
        is written; one invalid item aborts the whole batch.

        Returns:
            Number of override rows written.

        Raises:
            ValidationError: Empty batch or the same field listed twice.
            NotFoundError: Unknown tenant, form type, or a field not in it.
            CoreFieldProtectedError / RequiredNeedsEnabledError: Carrying
                every violation found in the batch; nothing is written.
            StoreFailureError: A write failed; the transaction was rolled back.
        """
        items = list(items)
        field_ids = _unique_ids([item.field_id for item in items], "No fields to update.")

        with self._store_errors("update field configurations", tenant_id=tenant_id), transaction.atomic(using=self.using):
            form = catalog.get_active_form_type(form_type, using=self.using)
            tenant = get_tenant(tenant_id, using=self.using)
            fields = catalog.get_active_fields(field_ids, form_type=form, using=self.using)

            errors = []
            for item in items:
                field_def = fields[item.field_id]
                result = self.guard.validate(InvariantCheckRequest(
                    field_id=field_def.id,
                    field_name=field_def.name,
                    is_core=field_def.is_core,
                    current_enabled=item.is_enabled,
                    current_required=item.is_required,
                    proposed_enabled=item.is_enabled,
                    proposed_required=item.is_required,
                ))
                errors.extend(result.errors)
            if errors:
                self._raise_violation(errors, tenant_id=tenant.id)

            now = timezone.now()
            rows = [
                EntityFieldConfiguration(
                    tenant=tenant,
                    field_definition=fields[item.field_id],
                    is_enabled=item.is_enabled,
                    is_required=item.is_required,
                    custom_label=item.custom_label or "",
                    custom_validation=item.custom_validation or {},
                    sort_order=item.sort_order,
                    updated_at=now,
                )
                for item in items
            ]
            self._upsert(rows, update_fields=_FULL_UPDATE_FIELDS)

        logger.info(
            "field_configurations_batch_updated",
            tenant_id=tenant.id,
            form_type=form.name,
            field_count=len(rows),
        )
        return len(rows)

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def update_field_orders(
        self,
        tenant_id: int | str,
        orders: Iterable[FieldOrder],
        *,
        form_type: str | None = None,
    ) -> int:
        """
        Change only the sort order of several fields.

        Existing override rows keep their enabled/required/label/validation.
        A row created just to hold an order carries the field's currently
        effective enabled/required (catalog defaults), so ordering never
        silently changes those flags.

        Returns:
            Number of override rows written.

        Raises:
            ValidationError: Empty list or a field listed twice.
            NotFoundError: Unknown tenant, form type, or inactive field.
            StoreFailureError: A write failed; the transaction was rolled back.
        """
        orders = list(orders)
        field_ids = _unique_ids([order.field_id for order in orders], "No field orders to update.")

        with self._store_errors("update field orders", tenant_id=tenant_id), transaction.atomic(using=self.using):
            tenant = get_tenant(tenant_id, using=self.using)
            form = catalog.get_active_form_type(form_type, using=self.using) if form_type else None
            fields = catalog.get_active_fields(field_ids, form_type=form, using=self.using)
            existing = {
                row.field_definition_id: row
                for row in EntityFieldConfiguration.objects.using(self.using).filter(
                    tenant=tenant, field_definition_id__in=field_ids
                )
            }

            now = timezone.now()
            rows = []
            for order in orders:
                field_def = fields[order.field_id]
                state = ConfigResolver.effective_flags(field_def, existing.get(field_def.id))
                rows.append(EntityFieldConfiguration(
                    tenant=tenant,
                    field_definition=field_def,
                    is_enabled=state.enabled,
                    is_required=state.required,
                    sort_order=order.sort_order,
                    updated_at=now,
                ))
            self._upsert(rows, update_fields=["sort_order", "updated_at"])

        logger.info("field_orders_updated", tenant_id=tenant.id, field_count=len(rows))
        return len(rows)

    # ------------------------------------------------------------------
    # Reset / initialize
    # ------------------------------------------------------------------

    def reset_form(self, tenant_id: int | str, form_type: str) -> int:
        """
        Delete every override of *tenant_id* for *form_type*'s fields.

        Idempotent: resetting a form without overrides deletes nothing.

        Returns:
            Number of override rows deleted.
        """
        with self._store_errors("reset form configuration", tenant_id=tenant_id, form_type=form_type):
            form = catalog.get_active_form_type(form_type, using=self.using)
            tenant = get_tenant(tenant_id, using=self.using)
            deleted, _ = (
                EntityFieldConfiguration.objects.using(self.using)
                .filter(tenant=tenant, field_definition__form_type=form)
                .delete()
            )

        logger.info("form_configuration_reset", tenant_id=tenant.id, form_type=form.name, deleted=deleted)
        return deleted

    def initialize_defaults(self, tenant_id: int | str) -> int:
        """
        Write one override row per active catalog field for a new tenant.

        Rows carry the catalog defaults (enabled, ``default_required``,
        catalog sort order).  Fields that already have a row are left alone.

        Returns:
            Number of rows attempted (existing rows are skipped by the store).
        """
        with self._store_errors("create default field configurations", tenant_id=tenant_id), transaction.atomic(using=self.using):
            tenant = get_tenant(tenant_id, using=self.using)
            fields = (
                FieldDefinition.objects.using(self.using)
                .filter(is_active=True, form_type__is_active=True)
                .order_by("form_type_id", "sort_order", "id")
            )
            now = timezone.now()
            rows = [
                EntityFieldConfiguration(
                    tenant=tenant,
                    field_definition=field_def,
                    is_enabled=True,
                    is_required=field_def.default_required,
                    sort_order=field_def.sort_order,
                    updated_at=now,
                )
                for field_def in fields
            ]
            EntityFieldConfiguration.objects.using(self.using).bulk_create(rows, ignore_conflicts=True)

        logger.info("default_field_configurations_created", tenant_id=tenant.id, field_count=len(rows))
        return len(rows)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _upsert(self, rows: list[EntityFieldConfiguration], *, update_fields: list[str]) -> None:
        EntityFieldConfiguration.objects.using(self.using).bulk_create(
            rows,
            update_conflicts=True,
            unique_fields=_CONFLICT_TARGET,
            update_fields=update_fields,
        )

    @staticmethod
    def _raise_violation(errors: list[dict], **context) -> None:
        first = errors[0]
        logger.warning(
            "field_configuration_rejected",
            code=first["code"],
            violation_count=len(errors),
            **context,
        )
        raise _VIOLATION_ERRORS[first["code"]](detail=first["message"], errors=errors)

    @contextmanager
    def _store_errors(self, operation: str, **context):
        """
        Translate database errors into :class:`StoreFailureError`.

        Must wrap (sit outside) any ``transaction.atomic()`` block so the
        rollback has already happened when the error is reported.
        """
        try:
            yield
        except DatabaseError as exc:
            logger.error("form_config_store_failure", operation=operation, error=str(exc), **context)
            raise StoreFailureError(f"Failed to {operation}.") from exc


def _keep(value, existing, attr: str, default):
    """Return *value* unless it is ``None``, else the existing row's value."""
    if value is not None:
        return value
    if existing is not None:
        return getattr(existing, attr)
    return default


def _unique_ids(field_ids: list[int], empty_message: str) -> list[int]:
    if not field_ids:
        raise ValidationError(empty_message)
    seen: set[int] = set()
    duplicates: set[int] = set()
    for field_id in field_ids:
        if field_id in seen:
            duplicates.add(field_id)
        seen.add(field_id)
    if duplicates:
        raise ValidationError(f"Field(s) listed more than once: {sorted(duplicates)}.")
    return field_ids
