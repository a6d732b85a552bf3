"""
apps.form_config.services.invariant_guard
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Checks a proposed (enabled, required) change for one field before it is
persisted.

This module is **pure Python**: it has no Django view, serializer, or ORM
imports and can be exercised in plain ``pytest`` tests without any Django
setup.

Public API
----------
InvariantCheckRequest   – Input dataclass
InvariantCheckResult    – Output dataclass
InvariantGuard          – Single-entry-point validator
"""
from __future__ import annotations

from dataclasses import dataclass, field


#: A single violation dict with "field", "code", and "message" keys.
ErrorDict = dict[str, object]

CORE_FIELD_PROTECTED = "core_field_protected"
REQUIRED_NEEDS_ENABLED = "required_needs_enabled"


@dataclass
class InvariantCheckRequest:
    """
    Everything needed to check one proposed field change.

    Attributes:
        field_id: Id of the ``FieldDefinition``.
        field_name: Name used in error messages.
        is_core: Catalog core-field marker.
        current_enabled: Effective enabled state right now.
        current_required: Effective required state right now.
        proposed_enabled: New enabled state, or ``None`` to keep current.
        proposed_required: New required state, or ``None`` to keep current.
    """

    field_id: int
    field_name: str
    is_core: bool
    current_enabled: bool
    current_required: bool
    proposed_enabled: bool | None = None
    proposed_required: bool | None = None


@dataclass
class InvariantCheckResult:
    """
    Outcome of :meth:`InvariantGuard.validate`.

    ``enabled`` / ``required`` always hold the fully-resolved proposed state,
    so callers persist a consistent pair even when the request only named
    one of the two.

    Error codes:

    ==========================  =========================================
    Code                        Meaning
    ==========================  =========================================
    ``core_field_protected``    A core field would resolve to disabled.
    ``required_needs_enabled``  A field would be required while disabled.
    ==========================  =========================================
    """

    enabled: bool
    required: bool
    errors: list[ErrorDict] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


class InvariantGuard:
    """
    Enforces the two field-state rules:

    * a core field can never be disabled;
    * a required field must be enabled.

    Both rules are evaluated and every violation is reported.

    Usage::

        result = InvariantGuard.validate(InvariantCheckRequest(
            field_id=1, field_name="first_name", is_core=True,
            current_enabled=True, current_required=True,
            proposed_enabled=False,
        ))
        result.valid                # False
        result.errors[0]["code"]    # "core_field_protected"
    """

    @staticmethod
    def validate(request: InvariantCheckRequest) -> InvariantCheckResult:
        enabled = (
            request.current_enabled
            if request.proposed_enabled is None
            else request.proposed_enabled
        )
        required = (
            request.current_required
            if request.proposed_required is None
            else request.proposed_required
        )

        errors: list[ErrorDict] = []

        if request.is_core and not enabled:
            errors.append({
                "field": request.field_name,
                "field_id": request.field_id,
                "code": CORE_FIELD_PROTECTED,
                "message": f"Cannot disable core field: {request.field_name}",
            })

        if required and not enabled:
            errors.append({
                "field": request.field_name,
                "field_id": request.field_id,
                "code": REQUIRED_NEEDS_ENABLED,
                "message": f"Cannot require a disabled field: {request.field_name}",
            })

        return InvariantCheckResult(enabled=enabled, required=required, errors=errors)
