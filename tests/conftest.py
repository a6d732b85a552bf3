"""
Shared fixtures for the form configuration test suite.

Database fixtures seed the real default catalog (``patient`` and
``appointment`` forms, five locales) so tests exercise the same data the
platform ships with.
"""
from __future__ import annotations

import pytest
from django.apps import apps
from rest_framework.test import APIClient

from apps.form_catalog.models import FieldDefinition, FormType
from apps.form_catalog.seed import seed_catalog
from apps.form_config.services.batch_mutator import BatchMutator
from apps.form_config.services.config_resolver import ConfigResolver
from apps.tenants.models import HealthcareEntity


@pytest.fixture
def catalog(db) -> dict:
    """Seed the default catalog and return the created-row counts."""
    return seed_catalog()


@pytest.fixture
def patient_form(catalog) -> FormType:
    return FormType.objects.get(name="patient")


@pytest.fixture
def field(catalog):
    """Return a lookup ``field("gender") -> FieldDefinition`` on the patient form."""

    def _lookup(name: str, form_type: str = "patient") -> FieldDefinition:
        return FieldDefinition.objects.get(form_type__name=form_type, name=name)

    return _lookup


@pytest.fixture
def tenant(catalog) -> HealthcareEntity:
    """Create and return an active tenant with no overrides."""
    return HealthcareEntity.objects.create(name="Northside Clinic")


@pytest.fixture
def other_tenant(catalog) -> HealthcareEntity:
    return HealthcareEntity.objects.create(name="Lakeview Hospital")


@pytest.fixture
def resolver() -> ConfigResolver:
    return apps.get_app_config("form_config").resolver


@pytest.fixture
def mutator() -> BatchMutator:
    return apps.get_app_config("form_config").mutator


@pytest.fixture
def api_client() -> APIClient:
    """Return an unauthenticated DRF APIClient."""
    return APIClient()


@pytest.fixture
def tenant_client(api_client, tenant) -> APIClient:
    """APIClient that sends ``tenant``'s id in the tenant header."""
    api_client.credentials(HTTP_X_HEALTHCARE_ENTITY_ID=str(tenant.id))
    return api_client
