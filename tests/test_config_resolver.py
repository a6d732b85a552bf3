"""
tests.test_config_resolver
~~~~~~~~~~~~~~~~~~~~~~~~~~
Covers:
- ConfigResolver.merge  (unit, no DB; rows are plain namespaces)
- ConfigResolver.resolve (integration, DB)
"""
from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest import mock

import pytest

from apps.form_config.models import EntityFieldConfiguration
from apps.form_config.services.batch_mutator import FieldUpdate
from apps.form_config.services.config_resolver import ConfigResolver
from apps.localization.models import FieldTranslation, Locale
from common.exceptions import CoreFieldProtectedError, NotFoundError, UnsupportedLocaleError


JAN = datetime(2024, 1, 1, tzinfo=timezone.utc)
FEB = datetime(2024, 2, 1, tzinfo=timezone.utc)
MAR = datetime(2024, 3, 1, tzinfo=timezone.utc)

FORM = SimpleNamespace(name="patient", display_name="Patient Registration", description="")


def make_field(field_id: int, name: str, sort_order: int, **extra) -> SimpleNamespace:
    values = {
        "id": field_id,
        "name": name,
        "display_name": name.replace("_", " ").title(),
        "field_type": "text",
        "default_required": False,
        "is_core": False,
        "validation_rules": {},
        "options": [],
        "sort_order": sort_order,
        "category": "",
        "description": f"{name} description",
        "placeholder": f"{name} placeholder",
        "is_active": True,
        "updated_at": JAN,
    }
    values.update(extra)
    return SimpleNamespace(**values)


def make_override(**extra) -> SimpleNamespace:
    values = {
        "is_enabled": True,
        "is_required": False,
        "custom_label": "",
        "custom_validation": {},
        "sort_order": None,
        "updated_at": FEB,
    }
    values.update(extra)
    return SimpleNamespace(**values)


def make_translation(**extra) -> SimpleNamespace:
    values = {"display_name": "", "description": "", "placeholder": "", "updated_at": MAR}
    values.update(extra)
    return SimpleNamespace(**values)


def by_name(metadata) -> dict:
    return {f.name: f for f in metadata.fields}


# ===========================================================================
# TestConfigResolverMerge  (unit, no DB)
# ===========================================================================

class TestConfigResolverMerge:
    """Unit tests for the pure merge step."""

    def test_defaults_only(self):
        """Without an override a field is enabled and required per catalog."""
        fields = [
            make_field(1, "first_name", 1, default_required=True, is_core=True),
            make_field(2, "email", 2),
        ]
        result = by_name(ConfigResolver.merge(form_type=FORM, fields=fields))

        assert result["first_name"].is_enabled is True
        assert result["first_name"].is_required is True
        assert result["email"].is_enabled is True
        assert result["email"].is_required is False
        assert result["email"].label == "Email"
        assert result["email"].custom_validation == {}

    def test_override_applied(self):
        fields = [make_field(1, "email", 1, validation_rules={"format": "email"})]
        overrides = {
            1: make_override(
                is_enabled=False,
                custom_label="E-mail",
                custom_validation={"max_length": 80},
            )
        }
        descriptor = ConfigResolver.merge(form_type=FORM, fields=fields, overrides=overrides).fields[0]

        assert descriptor.is_enabled is False
        assert descriptor.label == "E-mail"
        assert descriptor.custom_label == "E-mail"
        assert descriptor.display_name == "Email"
        # Reported side by side, never merged key by key
        assert descriptor.validation_rules == {"format": "email"}
        assert descriptor.custom_validation == {"max_length": 80}

    def test_translation_replaces_text_only(self):
        fields = [make_field(1, "email", 1)]
        overrides = {1: make_override(is_required=True)}
        translations = {1: make_translation(display_name="Courriel", placeholder="vous@exemple.com")}

        descriptor = ConfigResolver.merge(
            form_type=FORM,
            fields=fields,
            overrides=overrides,
            translations=translations,
            locale="fr-CA",
        ).fields[0]

        assert descriptor.display_name == "Courriel"
        assert descriptor.label == "Courriel"
        assert descriptor.placeholder == "vous@exemple.com"
        # Empty translated description falls back to the catalog text
        assert descriptor.description == "email description"
        assert descriptor.is_required is True
        assert descriptor.locale == "fr-CA"

    def test_custom_label_wins_over_translation(self):
        fields = [make_field(1, "email", 1)]
        result = ConfigResolver.merge(
            form_type=FORM,
            fields=fields,
            overrides={1: make_override(custom_label="Work email")},
            translations={1: make_translation(display_name="Courriel")},
        ).fields[0]
        assert result.label == "Work email"
        assert result.display_name == "Courriel"

    def test_ordering_follows_override_sort_order(self):
        """Override orders [3, 1, 2] come back as [1, 2, 3]."""
        fields = [make_field(1, "a", 1), make_field(2, "b", 2), make_field(3, "c", 3)]
        overrides = {
            1: make_override(sort_order=3),
            2: make_override(sort_order=1),
            3: make_override(sort_order=2),
        }
        result = ConfigResolver.merge(form_type=FORM, fields=fields, overrides=overrides)
        assert [f.sort_order for f in result.fields] == [1, 2, 3]
        assert [f.name for f in result.fields] == ["b", "c", "a"]

    def test_sort_order_tie_broken_by_field_id(self):
        fields = [make_field(5, "late", 9), make_field(2, "early", 1), make_field(9, "last", 3)]
        overrides = {5: make_override(sort_order=1)}
        result = ConfigResolver.merge(form_type=FORM, fields=fields, overrides=overrides)
        assert [f.field_id for f in result.fields] == [2, 5, 9]

    def test_core_field_with_disabled_override_resolves_enabled(self):
        """A row stored before the field became core cannot hide it."""
        fields = [make_field(1, "occupation", 1, is_core=True)]
        overrides = {1: make_override(is_enabled=False, is_required=False)}
        descriptor = ConfigResolver.merge(form_type=FORM, fields=fields, overrides=overrides).fields[0]
        assert descriptor.is_core is True
        assert descriptor.is_enabled is True
        assert descriptor.is_required is False

    def test_override_without_sort_order_keeps_catalog_order(self):
        fields = [make_field(1, "a", 4)]
        result = ConfigResolver.merge(
            form_type=FORM, fields=fields, overrides={1: make_override(sort_order=None)}
        )
        assert result.fields[0].sort_order == 4

    def test_inactive_fields_and_stale_rows_ignored(self):
        fields = [make_field(1, "a", 1), make_field(2, "retired", 2, is_active=False)]
        overrides = {2: make_override(is_enabled=False), 99: make_override()}
        translations = {99: make_translation(display_name="Ghost")}

        result = ConfigResolver.merge(
            form_type=FORM, fields=fields, overrides=overrides, translations=translations
        )
        assert [f.name for f in result.fields] == ["a"]
        # Rows that did not contribute do not move last_modified
        assert result.last_modified == JAN

    def test_city_and_country_always_select(self):
        fields = [
            make_field(1, "country", 1, field_type="select"),
            make_field(2, "city", 2, field_type="text"),
            make_field(3, "postal_code", 3, field_type="text"),
        ]
        result = by_name(ConfigResolver.merge(form_type=FORM, fields=fields))
        assert result["country"].field_type == "select"
        assert result["city"].field_type == "select"
        assert result["postal_code"].field_type == "text"

    def test_last_modified_is_newest_contributing_row(self):
        fields = [make_field(1, "a", 1), make_field(2, "b", 2)]
        result = ConfigResolver.merge(
            form_type=FORM,
            fields=fields,
            overrides={1: make_override()},
            translations={2: make_translation(display_name="B")},
        )
        assert result.last_modified == MAR

    def test_empty_form_has_no_last_modified(self):
        result = ConfigResolver.merge(form_type=FORM, fields=[])
        assert result.fields == []
        assert result.last_modified is None

    def test_result_shares_no_state_with_inputs(self):
        rules = {"max_length": 10}
        fields = [make_field(1, "a", 1, validation_rules=rules, options=["x"])]
        custom = {"pattern": "^a"}
        result = ConfigResolver.merge(
            form_type=FORM, fields=fields, overrides={1: make_override(custom_validation=custom)}
        )
        descriptor = result.fields[0]
        descriptor.validation_rules["max_length"] = 99
        descriptor.custom_validation["pattern"] = "^b"
        descriptor.options.append("y")

        assert rules == {"max_length": 10}
        assert custom == {"pattern": "^a"}
        assert fields[0].options == ["x"]

    def test_effective_flags(self):
        field_def = make_field(1, "a", 1, default_required=True)
        assert ConfigResolver.effective_flags(field_def).enabled is True
        assert ConfigResolver.effective_flags(field_def).required is True
        state = ConfigResolver.effective_flags(field_def, make_override(is_enabled=False))
        assert (state.enabled, state.required) == (False, False)


# ===========================================================================
# TestConfigResolverResolve  (integration, DB)
# ===========================================================================

@pytest.mark.django_db
class TestConfigResolverResolve:
    """ConfigResolver.resolve against the seeded catalog."""

    def test_gender_without_override_reports_catalog_defaults(self, resolver, tenant, field):
        gender = field("gender")
        result = by_name(resolver.resolve("patient", tenant.id))["gender"]

        assert result.is_enabled is True
        assert result.is_required == gender.default_required
        assert result.sort_order == gender.sort_order
        assert result.options == ["male", "female", "other"]

    def test_all_active_fields_present_in_catalog_order(self, resolver, tenant, patient_form):
        metadata = resolver.resolve("patient", tenant.id)
        expected = list(
            patient_form.fields.filter(is_active=True)
            .order_by("sort_order", "id")
            .values_list("name", flat=True)
        )
        assert [f.name for f in metadata.fields] == expected
        assert metadata.form_type == "patient"
        assert metadata.tenant_id == tenant.id
        assert metadata.last_modified is not None

    def test_seeded_city_reported_as_select(self, resolver, tenant, field):
        assert field("city").field_type == "text"
        assert by_name(resolver.resolve("patient", tenant.id))["city"].field_type == "select"

    def test_overrides_are_per_tenant(self, resolver, tenant, other_tenant, field):
        EntityFieldConfiguration.objects.create(
            tenant=tenant, field_definition=field("email"), is_enabled=False
        )
        assert by_name(resolver.resolve("patient", tenant.id))["email"].is_enabled is False
        assert by_name(resolver.resolve("patient", other_tenant.id))["email"].is_enabled is True

    def test_field_promoted_to_core_stays_enabled(self, resolver, mutator, tenant, field):
        occupation = field("occupation")
        mutator.apply_single(
            tenant.id, occupation.id, FieldUpdate(is_enabled=False, is_required=False)
        )
        occupation.is_core = True
        occupation.save()

        result = by_name(resolver.resolve("patient", tenant.id))["occupation"]
        assert result.is_core is True
        assert result.is_enabled is True

        # The clamped state is also what the guard sees: re-disabling is refused
        with pytest.raises(CoreFieldProtectedError):
            mutator.apply_single(tenant.id, occupation.id, FieldUpdate(is_enabled=False))

    def test_inactive_field_excluded_even_with_override(self, resolver, tenant, field):
        occupation = field("occupation")
        EntityFieldConfiguration.objects.create(
            tenant=tenant, field_definition=occupation, custom_label="Job"
        )
        occupation.is_active = False
        occupation.save()

        names = [f.name for f in resolver.resolve("patient", tenant.id).fields]
        assert "occupation" not in names

    def test_localized_resolve(self, resolver, tenant, field):
        FieldTranslation.objects.create(
            field_definition=field("first_name"), locale_id="fr-CA", display_name="Prénom"
        )
        result = by_name(resolver.resolve("patient", tenant.id, locale="fr-CA"))
        assert result["first_name"].display_name == "Prénom"
        assert result["last_name"].display_name == "Last Name"
        assert result["first_name"].locale == "fr-CA"

    def test_no_locale_applies_no_translation(self, resolver, tenant, field):
        FieldTranslation.objects.create(
            field_definition=field("first_name"), locale_id="fr-CA", display_name="Prénom"
        )
        result = by_name(resolver.resolve("patient", tenant.id))
        assert result["first_name"].display_name == "First Name"

    def test_inactive_locale_rejected_before_translations_read(self, resolver, tenant, field):
        Locale.objects.create(code="xx-YY", language_name="Test", native_name="Test", is_active=False)
        FieldTranslation.objects.create(
            field_definition=field("first_name"), locale_id="xx-YY", display_name="Xx"
        )

        with mock.patch(
            "apps.form_config.services.config_resolver.field_translations_for"
        ) as translations_for:
            with pytest.raises(UnsupportedLocaleError):
                resolver.resolve("patient", tenant.id, locale="xx-YY")
        translations_for.assert_not_called()
        assert FieldTranslation.objects.get(locale_id="xx-YY").display_name == "Xx"

    def test_unknown_locale_rejected(self, resolver, tenant):
        with pytest.raises(UnsupportedLocaleError):
            resolver.resolve("patient", tenant.id, locale="zz-ZZ")

    def test_unknown_form_type_not_found(self, resolver, tenant):
        with pytest.raises(NotFoundError):
            resolver.resolve("prescription", tenant.id)

    def test_inactive_form_type_not_found(self, resolver, tenant, patient_form):
        patient_form.is_active = False
        patient_form.save()
        with pytest.raises(NotFoundError):
            resolver.resolve("patient", tenant.id)

    def test_unknown_or_inactive_tenant_not_found(self, resolver, tenant):
        with pytest.raises(NotFoundError):
            resolver.resolve("patient", tenant.id + 1000)
        tenant.is_active = False
        tenant.save()
        with pytest.raises(NotFoundError):
            resolver.resolve("patient", tenant.id)
