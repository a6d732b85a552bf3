"""
apps.form_catalog.validators
~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Pure-Python validation of field-catalog entries.

No Django view, serializer, or model imports are allowed here so that this
module can be used by the seed command, by ``FieldDefinition.clean()`` and in
plain unit tests alike.

Public API:
    CatalogValidationError            – raised with every error found
    CatalogValidator.validate(entries) – validates a list of field dicts
"""


# ---------------------------------------------------------------------------
# Exception
# ---------------------------------------------------------------------------

class CatalogValidationError(Exception):
    """
    Raised by :meth:`CatalogValidator.validate` when one or more catalog
    entries are malformed.

    Attributes:
        errors (list[dict]): Non-empty list of error dicts, each shaped
            ``{"field": "<entry name or index>.<key>", "message": "<reason>"}``.
    """

    def __init__(self, errors: list[dict]) -> None:
        self.errors: list[dict] = errors
        super().__init__(str(errors))


# ---------------------------------------------------------------------------
# Internal constants
# ---------------------------------------------------------------------------

#: Field types a dynamic form knows how to render.
FIELD_TYPES: frozenset[str] = frozenset({
    "text",
    "email",
    "phone",
    "number",
    "date",
    "datetime",
    "select",
    "textarea",
    "checkbox",
})

#: Validation rule keys understood by the form renderer.
_NUMERIC_RULE_PAIRS: tuple[tuple[str, str], ...] = (
    ("min_length", "max_length"),
    ("min", "max"),
)
_VALID_RULE_KEYS: frozenset[str] = frozenset(
    {key for pair in _NUMERIC_RULE_PAIRS for key in pair} | {"pattern", "format"}
)

_BOOLEAN_KEYS: tuple[str, ...] = ("default_required", "is_core")


def _is_numeric(value: object) -> bool:
    """Return True if *value* is an int or float but not a bool."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------

class CatalogValidator:
    """
    Stateless validator for field-catalog entries.

    All errors are collected before raising so a seed file with several
    mistakes is reported in one pass.

    Usage::

        CatalogValidator.validate([
            {"name": "first_name", "display_name": "First Name", "field_type": "text"},
        ])
    """

    @staticmethod
    def validate(entries: list[dict]) -> None:
        """
        Validate every entry of a single form type's catalog.

        Rules:

        1. ``name`` is a non-empty string, unique within *entries*.
        2. ``display_name`` is a non-empty string.
        3. ``field_type`` is one of :data:`FIELD_TYPES`.
        4. ``options`` is a list of strings and only non-empty for ``select``.
        5. ``validation_rules`` is a dict of known keys with sane bounds.
        6. ``default_required`` / ``is_core`` are booleans when present.
        7. ``sort_order`` is an integer when present.

        Raises:
            CatalogValidationError: If any rule is violated.
        """
        errors: list[dict] = []
        seen_names: set[str] = set()

        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                errors.append({
                    "field": f"[{index}]",
                    "message": "Catalog entry must be a dict.",
                })
                continue

            name = entry.get("name")
            path = name if isinstance(name, str) and name else f"[{index}]"

            # ── Rule 1: unique non-empty name ────────────────────────────
            if not isinstance(name, str) or not name.strip():
                errors.append({
                    "field": f"{path}.name",
                    "message": '"name" must be a non-empty string.',
                })
            elif name in seen_names:
                errors.append({
                    "field": f"{path}.name",
                    "message": f'Duplicate field name "{name}".',
                })
            else:
                seen_names.add(name)

            # ── Rule 2: display name ─────────────────────────────────────
            display_name = entry.get("display_name")
            if not isinstance(display_name, str) or not display_name.strip():
                errors.append({
                    "field": f"{path}.display_name",
                    "message": '"display_name" must be a non-empty string.',
                })

            # ── Rule 3: field type ───────────────────────────────────────
            field_type = entry.get("field_type")
            if field_type not in FIELD_TYPES:
                errors.append({
                    "field": f"{path}.field_type",
                    "message": (
                        f'"field_type" must be one of {sorted(FIELD_TYPES)}; '
                        f'got "{field_type}".'
                    ),
                })

            # ── Rule 4: options ──────────────────────────────────────────
            CatalogValidator._validate_options(
                path=path,
                field_type=field_type,
                options=entry.get("options", []),
                errors=errors,
            )

            # ── Rule 5: validation rules ─────────────────────────────────
            CatalogValidator._validate_rules(
                path=path,
                rules=entry.get("validation_rules", {}),
                errors=errors,
            )

            # ── Rules 6-7: scalar flags ──────────────────────────────────
            for key in _BOOLEAN_KEYS:
                if key in entry and not isinstance(entry[key], bool):
                    errors.append({
                        "field": f"{path}.{key}",
                        "message": f'"{key}" must be a boolean.',
                    })

            if "sort_order" in entry and (
                not isinstance(entry["sort_order"], int)
                or isinstance(entry["sort_order"], bool)
            ):
                errors.append({
                    "field": f"{path}.sort_order",
                    "message": '"sort_order" must be an integer.',
                })

        if errors:
            raise CatalogValidationError(errors)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_options(
        path: str,
        field_type: object,
        options: object,
        errors: list[dict],
    ) -> None:
        o_path = f"{path}.options"

        if options is None:
            return
        if not isinstance(options, list):
            errors.append({"field": o_path, "message": '"options" must be a list.'})
            return

        non_strings = [item for item in options if not isinstance(item, str)]
        if non_strings:
            errors.append({
                "field": o_path,
                "message": (
                    '"options" items must be strings; '
                    f"found non-string items: {non_strings}."
                ),
            })

        if options and field_type != "select":
            errors.append({
                "field": o_path,
                "message": '"options" are only allowed on "select" fields.',
            })

    @staticmethod
    def _validate_rules(path: str, rules: object, errors: list[dict]) -> None:
        """
        Check the ``validation_rules`` block.

        ``min_length``/``max_length`` and ``min``/``max`` must be numeric
        and ordered; ``pattern`` and ``format`` must be strings.
        """
        r_path = f"{path}.validation_rules"

        if rules is None:
            return
        if not isinstance(rules, dict):
            errors.append({
                "field": r_path,
                "message": '"validation_rules" must be a dict.',
            })
            return

        unknown = set(rules) - _VALID_RULE_KEYS
        if unknown:
            errors.append({
                "field": r_path,
                "message": (
                    f"Unknown rule key(s): {sorted(unknown)}. "
                    f"Allowed: {sorted(_VALID_RULE_KEYS)}."
                ),
            })

        for low_key, high_key in _NUMERIC_RULE_PAIRS:
            low = rules.get(low_key)
            high = rules.get(high_key)

            if low_key in rules and not _is_numeric(low):
                errors.append({
                    "field": f"{r_path}.{low_key}",
                    "message": f'"{low_key}" must be numeric.',
                })
                low = None
            if high_key in rules and not _is_numeric(high):
                errors.append({
                    "field": f"{r_path}.{high_key}",
                    "message": f'"{high_key}" must be numeric.',
                })
                high = None

            if low is not None and high is not None and low > high:
                errors.append({
                    "field": r_path,
                    "message": f'"{low_key}" ({low}) must be ≤ "{high_key}" ({high}).',
                })

        for key in ("pattern", "format"):
            if key in rules and not isinstance(rules[key], str):
                errors.append({
                    "field": f"{r_path}.{key}",
                    "message": f'"{key}" must be a string.',
                })
