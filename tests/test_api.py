"""
tests.test_api
~~~~~~~~~~~~~~
Integration tests for the HTTP API using the DRF APIClient and a real DB.
"""
from __future__ import annotations

import pytest
from rest_framework import status

from apps.form_config.models import EntityFieldConfiguration
from apps.localization.models import Locale
from apps.tenants.models import HealthcareEntity


FORM_TYPES_URL = "/api/v1/forms/types/"
LOCALES_URL = "/api/v1/i18n/locales/"
TENANT_LOCALE_URL = "/api/v1/i18n/tenant/locale/"
TRANSLATIONS_URL = "/api/v1/admin/i18n/translations/"
FIELD_TRANSLATIONS_URL = "/api/v1/admin/i18n/field-translations/"
TENANTS_URL = "/api/v1/tenants/"


def metadata_url(form_type, locale=None):
    if locale:
        return f"/api/v1/forms/{form_type}/metadata/{locale}/"
    return f"/api/v1/forms/{form_type}/metadata/"


def admin_fields_url(form_type, field_id=None):
    if field_id is None:
        return f"/api/v1/admin/forms/{form_type}/fields/"
    return f"/api/v1/admin/forms/{form_type}/fields/{field_id}/"


def fields_by_name(body) -> dict:
    return {f["name"]: f for f in body["fields"]}


@pytest.mark.django_db
class TestFormEndpoints:

    # ── GET /forms/types/ ───────────────────────────────────────────────────

    def test_list_form_types(self, api_client, catalog):
        resp = api_client.get(FORM_TYPES_URL)
        assert resp.status_code == status.HTTP_200_OK
        assert [f["name"] for f in resp.json()] == ["appointment", "patient"]

    # ── GET /forms/{form_type}/metadata/ ───────────────────────────────────

    def test_metadata_defaults(self, tenant_client, tenant):
        resp = tenant_client.get(metadata_url("patient"))
        assert resp.status_code == status.HTTP_200_OK
        body = resp.json()
        assert body["form_type"] == "patient"
        assert body["tenant_id"] == tenant.id
        assert body["locale"] is None
        assert len(body["fields"]) == 26
        gender = fields_by_name(body)["gender"]
        assert gender["is_enabled"] is True
        assert gender["is_required"] is True
        assert gender["sort_order"] == 4
        assert "Last-Modified" in resp

    def test_metadata_requires_tenant_header(self, api_client, catalog):
        resp = api_client.get(metadata_url("patient"))
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert resp.json()["code"] == "tenant_header_invalid"

    def test_metadata_rejects_malformed_tenant_header(self, api_client, catalog):
        resp = api_client.get(metadata_url("patient"), HTTP_X_HEALTHCARE_ENTITY_ID="abc")
        assert resp.status_code == status.HTTP_400_BAD_REQUEST

    def test_metadata_unknown_tenant_404(self, api_client, catalog):
        resp = api_client.get(metadata_url("patient"), HTTP_X_HEALTHCARE_ENTITY_ID="424242")
        assert resp.status_code == status.HTTP_404_NOT_FOUND
        assert resp.json()["code"] == "not_found"

    def test_metadata_unknown_form_type_404(self, tenant_client):
        resp = tenant_client.get(metadata_url("prescription"))
        assert resp.status_code == status.HTTP_404_NOT_FOUND

    def test_metadata_localized(self, tenant_client, field):
        tenant_client.post(
            FIELD_TRANSLATIONS_URL,
            data={"field_id": field("first_name").id, "locale": "fr-CA", "display_name": "Prénom"},
            format="json",
        )
        by_path = fields_by_name(tenant_client.get(metadata_url("patient", "fr-CA")).json())
        by_query = fields_by_name(tenant_client.get(metadata_url("patient"), {"locale": "fr-CA"}).json())
        assert by_path["first_name"]["display_name"] == "Prénom"
        assert by_query["first_name"]["label"] == "Prénom"

    def test_metadata_inactive_locale_400(self, tenant_client, catalog):
        Locale.objects.create(code="xx-YY", language_name="Test", native_name="Test", is_active=False)
        resp = tenant_client.get(metadata_url("patient", "xx-YY"))
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert resp.json()["code"] == "unsupported_locale"

    # ── GET /forms/{form_type}/fields/ ─────────────────────────────────────

    def test_fields_lists_disabled_fields_too(self, tenant_client, tenant, field):
        EntityFieldConfiguration.objects.create(
            tenant=tenant, field_definition=field("occupation"), is_enabled=False
        )
        resp = tenant_client.get("/api/v1/forms/patient/fields/")
        assert resp.status_code == status.HTTP_200_OK
        names = [f["name"] for f in resp.json()["fields"]]
        assert len(names) == 26
        occupation = next(f for f in resp.json()["fields"] if f["name"] == "occupation")
        assert occupation["is_enabled"] is False


@pytest.mark.django_db
class TestFormAdminEndpoints:

    # ── PUT /admin/forms/{form_type}/fields/{field_id}/ ────────────────────

    def test_update_field(self, tenant_client, field):
        email = field("email")
        resp = tenant_client.put(
            admin_fields_url("patient", email.id),
            data={"is_required": True, "custom_label": "Work email"},
            format="json",
        )
        assert resp.status_code == status.HTTP_200_OK
        body = resp.json()
        assert body["field_id"] == email.id
        assert body["is_enabled"] is True
        assert body["is_required"] is True
        assert body["custom_label"] == "Work email"

    def test_disable_core_field_400(self, tenant_client, field):
        resp = tenant_client.put(
            admin_fields_url("patient", field("first_name").id),
            data={"is_enabled": False},
            format="json",
        )
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        body = resp.json()
        assert body["code"] == "core_field_protected"
        assert body["errors"][0]["field"] == "first_name"

    def test_update_field_of_other_form_404(self, tenant_client, field):
        resp = tenant_client.put(
            admin_fields_url("appointment", field("email").id),
            data={"is_required": True},
            format="json",
        )
        assert resp.status_code == status.HTTP_404_NOT_FOUND

    # ── PUT /admin/forms/{form_type}/fields/ ───────────────────────────────

    def test_batch_update(self, tenant_client, tenant, field):
        payload = {
            "fields": [
                {"field_id": field("email").id, "is_enabled": True, "is_required": True},
                {"field_id": field("occupation").id, "is_enabled": False, "is_required": False, "sort_order": 2},
            ]
        }
        resp = tenant_client.put(admin_fields_url("patient"), data=payload, format="json")
        assert resp.status_code == status.HTTP_200_OK
        assert resp.json() == {"updated": 2}
        assert EntityFieldConfiguration.objects.filter(tenant=tenant).count() == 2

    def test_batch_with_violation_writes_nothing(self, tenant_client, tenant, field):
        payload = {
            "fields": [
                {"field_id": field("email").id, "is_enabled": False, "is_required": False},
                {"field_id": field("phone").id, "is_enabled": False, "is_required": True},
            ]
        }
        resp = tenant_client.put(admin_fields_url("patient"), data=payload, format="json")
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert resp.json()["code"] == "required_needs_enabled"
        assert not EntityFieldConfiguration.objects.filter(tenant=tenant).exists()

    def test_empty_batch_422(self, tenant_client, catalog):
        resp = tenant_client.put(admin_fields_url("patient"), data={"fields": []}, format="json")
        assert resp.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_malformed_batch_400(self, tenant_client, catalog):
        resp = tenant_client.put(
            admin_fields_url("patient"), data={"fields": [{"field_id": 1}]}, format="json"
        )
        assert resp.status_code == status.HTTP_400_BAD_REQUEST

    # ── PUT /admin/forms/{form_type}/fields/order/ ─────────────────────────

    def test_update_order(self, tenant_client, field):
        payload = {
            "field_orders": [
                {"field_id": field("blood_type").id, "sort_order": 0},
                {"field_id": field("allergies").id, "sort_order": -1},
            ]
        }
        resp = tenant_client.put("/api/v1/admin/forms/patient/fields/order/", data=payload, format="json")
        assert resp.status_code == status.HTTP_200_OK

        names = [f["name"] for f in tenant_client.get(metadata_url("patient")).json()["fields"]]
        assert names[:2] == ["allergies", "blood_type"]

    # ── POST /admin/forms/{form_type}/reset/ ───────────────────────────────

    def test_reset(self, tenant_client, tenant, field):
        EntityFieldConfiguration.objects.create(
            tenant=tenant, field_definition=field("email"), is_enabled=False
        )
        resp = tenant_client.post("/api/v1/admin/forms/patient/reset/")
        assert resp.status_code == status.HTTP_200_OK
        assert resp.json() == {"deleted": 1}

        resp = tenant_client.post("/api/v1/admin/forms/patient/reset/")
        assert resp.json() == {"deleted": 0}


@pytest.mark.django_db
class TestLocalizationEndpoints:

    def test_list_locales(self, api_client, catalog):
        resp = api_client.get(LOCALES_URL)
        assert resp.status_code == status.HTTP_200_OK
        assert [locale["code"] for locale in resp.json()] == ["ar-MA", "en-CA", "en-US", "fr-CA", "fr-FR"]

    def test_set_tenant_locale(self, tenant_client, tenant):
        resp = tenant_client.put(TENANT_LOCALE_URL, data={"locale": "fr-FR"}, format="json")
        assert resp.status_code == status.HTTP_200_OK
        tenant.refresh_from_db()
        assert tenant.preferred_locale_id == "fr-FR"

    def test_set_tenant_locale_unsupported(self, tenant_client, tenant):
        resp = tenant_client.put(TENANT_LOCALE_URL, data={"locale": "zz-ZZ"}, format="json")
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        tenant.refresh_from_db()
        assert tenant.preferred_locale_id is None

    def test_upsert_and_list_translations(self, api_client, catalog):
        resp = api_client.post(
            TRANSLATIONS_URL,
            data={"translation_key": "form.save", "locale": "fr-CA", "content": "Enregistrer", "context": "buttons"},
            format="json",
        )
        assert resp.status_code == status.HTTP_200_OK
        assert resp.json()["locale"] == "fr-CA"

        resp = api_client.get(f"{TRANSLATIONS_URL}fr-CA/", {"context": "buttons"})
        assert resp.status_code == status.HTTP_200_OK
        assert resp.json()["translations"] == {"form.save": "Enregistrer"}

    def test_field_translation_unknown_field_404(self, api_client, catalog):
        resp = api_client.post(
            FIELD_TRANSLATIONS_URL,
            data={"field_id": 999999, "locale": "fr-CA", "display_name": "X"},
            format="json",
        )
        assert resp.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestTenantEndpoints:

    def test_create_tenant_201(self, api_client, catalog):
        resp = api_client.post(
            TENANTS_URL,
            data={"name": "Harbor Health", "preferred_locale": "en-CA", "initialize_defaults": True},
            format="json",
        )
        assert resp.status_code == status.HTTP_201_CREATED
        body = resp.json()
        assert body["name"] == "Harbor Health"
        assert body["preferred_locale"] == "en-CA"
        tenant = HealthcareEntity.objects.get(pk=body["id"])
        assert tenant.field_configurations.count() == 32

    def test_create_tenant_duplicate_409(self, api_client, tenant):
        resp = api_client.post(TENANTS_URL, data={"name": tenant.name}, format="json")
        assert resp.status_code == status.HTTP_409_CONFLICT
        assert "already exists" in resp.json()["detail"]


@pytest.mark.django_db
class TestHealth:

    def test_health_ok_when_seeded(self, api_client, catalog):
        resp = api_client.get("/health/")
        assert resp.status_code == status.HTTP_200_OK
        assert resp.json() == {"status": "ok", "db": "ok", "catalog": "ok"}

    def test_health_degraded_without_catalog(self, api_client, db):
        resp = api_client.get("/api/v1/health/")
        assert resp.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert resp.json()["catalog"] == "empty"
