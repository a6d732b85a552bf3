"""
apps.form_catalog.services
~~~~~~~~~~~~~~~~~~~~~~~~~~
Read-only lookups over the field catalog.
"""
from __future__ import annotations

from common.exceptions import NotFoundError
from .models import FieldDefinition, FormType


def list_form_types(*, using: str = "default") -> list[FormType]:
    """Return all active form types ordered by name."""
    return list(FormType.objects.using(using).filter(is_active=True).order_by("name"))


def get_active_form_type(name: str, *, using: str = "default") -> FormType:
    """Fetch an active form type by name, raise NotFoundError otherwise."""
    try:
        return FormType.objects.using(using).get(name=name, is_active=True)
    except FormType.DoesNotExist:
        raise NotFoundError(f"Form type '{name}' not found.")


def list_fields(form_type: FormType, *, using: str = "default") -> list[FieldDefinition]:
    """Return the active fields of *form_type* in catalog order."""
    return list(
        FieldDefinition.objects.using(using)
        .filter(form_type=form_type, is_active=True)
        .order_by("sort_order", "id")
    )


def get_active_field(
    field_id: int,
    *,
    form_type: FormType | None = None,
    using: str = "default",
) -> FieldDefinition:
    """
    Fetch an active field whose form type is also active.

    When *form_type* is given the field must belong to it.

    Raises:
        NotFoundError: If no such field exists.
    """
    qs = FieldDefinition.objects.using(using).select_related("form_type").filter(
        pk=field_id,
        is_active=True,
        form_type__is_active=True,
    )
    if form_type is not None:
        qs = qs.filter(form_type=form_type)
    field = qs.first()
    if field is None:
        raise NotFoundError(f"Field with ID {field_id} not found.")
    return field


def get_active_fields(
    field_ids,
    *,
    form_type: FormType | None = None,
    using: str = "default",
) -> dict[int, FieldDefinition]:
    """
    Fetch several active fields at once, keyed by id.

    Raises:
        NotFoundError: Naming the first requested id that is missing,
            inactive, or outside *form_type*.
    """
    wanted = list(field_ids)
    qs = FieldDefinition.objects.using(using).select_related("form_type").filter(
        pk__in=wanted,
        is_active=True,
        form_type__is_active=True,
    )
    if form_type is not None:
        qs = qs.filter(form_type=form_type)
    found = {field.id: field for field in qs}
    for field_id in wanted:
        if field_id not in found:
            raise NotFoundError(f"Field with ID {field_id} not found.")
    return found
