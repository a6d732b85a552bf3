"""
apps.form_catalog.seed
~~~~~~~~~~~~~~~~~~~~~~
Default catalog shipped with the platform: the ``patient`` and
``appointment`` forms and the five supported locales.

:func:`seed_catalog` is idempotent.  Existing rows are matched by natural key
(form type name, field name, locale code) and brought back in line with the
data below; unchanged rows are left untouched, so it is safe to run on
every deploy.
"""
from __future__ import annotations

import structlog
from django.db import transaction

from apps.localization.models import Locale
from .models import FieldDefinition, FormType
from .validators import CatalogValidator

logger = structlog.get_logger(__name__)


LOCALES: list[dict] = [
    {"code": "en-US", "language_name": "English (United States)", "native_name": "English (United States)", "country_code": "US"},
    {"code": "en-CA", "language_name": "English (Canada)", "native_name": "English (Canada)", "country_code": "CA"},
    {"code": "fr-CA", "language_name": "French (Canada)", "native_name": "Français (Canada)", "country_code": "CA"},
    {"code": "fr-FR", "language_name": "French (France)", "native_name": "Français (France)", "country_code": "FR"},
    {"code": "ar-MA", "language_name": "Arabic (Morocco)", "native_name": "العربية (المغرب)", "country_code": "MA"},
]


def _field(name, display_name, field_type, required, core, category, description, placeholder, order, **extra):
    entry = {
        "name": name,
        "display_name": display_name,
        "field_type": field_type,
        "default_required": required,
        "is_core": core,
        "category": category,
        "description": description,
        "placeholder": placeholder,
        "sort_order": order,
    }
    entry.update(extra)
    return entry


_PERSONAL = "Personal Information"
_CONTACT = "Contact Information"
_INSURANCE = "Insurance Information"
_EMERGENCY = "Emergency Contact"
_MEDICAL = "Medical Information"
_APPOINTMENT = "Appointment Details"

FORM_TYPES: list[dict] = [
    {
        "name": "patient",
        "display_name": "Patient Registration",
        "description": "Patient registration and profile management form",
        "fields": [
            _field("first_name", "First Name", "text", True, True, _PERSONAL, "Patient first name", "Enter first name", 1,
                   validation_rules={"min_length": 1, "max_length": 100}),
            _field("last_name", "Last Name", "text", True, True, _PERSONAL, "Patient last name", "Enter last name", 2,
                   validation_rules={"min_length": 1, "max_length": 100}),
            _field("date_of_birth", "Date of Birth", "date", True, True, _PERSONAL, "Patient date of birth", "YYYY-MM-DD", 3),
            _field("gender", "Gender", "select", True, False, _PERSONAL, "Patient gender", "", 4,
                   options=["male", "female", "other"]),
            _field("email", "Email Address", "email", False, False, _CONTACT, "Patient email address", "patient@example.com", 5,
                   validation_rules={"format": "email"}),
            _field("phone", "Phone Number", "phone", True, False, _CONTACT, "Patient phone number", "+1 (xxx) xxx-xxxx", 6),
            _field("address", "Address", "textarea", True, False, _CONTACT, "Patient address", "Street address", 7),
            _field("country", "Country", "select", True, False, _CONTACT, "Patient country", "", 8),
            _field("state", "State/Province", "select", False, False, _CONTACT, "Patient state or province", "State/Province", 9),
            _field("city", "City", "text", True, False, _CONTACT, "Patient city", "Enter city", 10),
            _field("postal_code", "Postal Code", "text", True, False, _CONTACT, "Patient postal code", "Postal/ZIP code", 11),
            _field("nationality", "Nationality", "text", False, False, _PERSONAL, "Patient nationality", "Enter nationality", 12),
            _field("preferred_language", "Preferred Language", "select", False, False, _PERSONAL, "Patient preferred language", "", 13),
            _field("marital_status", "Marital Status", "select", False, False, _PERSONAL, "Patient marital status", "", 14,
                   options=["single", "married", "divorced", "widowed"]),
            _field("occupation", "Occupation", "text", False, False, _PERSONAL, "Patient occupation", "Enter occupation", 15),
            _field("insurance", "Insurance Type", "select", False, False, _INSURANCE, "Patient insurance type", "", 16),
            _field("policy_number", "Policy Number", "text", False, False, _INSURANCE, "Insurance policy number", "Enter policy number", 17),
            _field("insurance_provider", "Insurance Provider", "text", False, False, _INSURANCE, "Insurance provider name", "Enter provider", 18),
            _field("national_id", "National ID", "text", False, False, _PERSONAL, "National identification number", "Enter national ID", 19),
            _field("emergency_contact_name", "Emergency Contact Name", "text", False, False, _EMERGENCY, "Emergency contact full name", "Enter contact name", 20),
            _field("emergency_contact_relationship", "Emergency Contact Relationship", "text", False, False, _EMERGENCY, "Relationship to patient", "Enter relationship", 21),
            _field("emergency_contact_phone", "Emergency Contact Phone", "phone", False, False, _EMERGENCY, "Emergency contact phone number", "+1 (xxx) xxx-xxxx", 22),
            _field("medical_history", "Medical History", "textarea", False, False, _MEDICAL, "Patient medical history", "Enter medical history", 23),
            _field("allergies", "Allergies", "textarea", False, False, _MEDICAL, "Patient allergies", "Enter allergies", 24),
            _field("medications", "Current Medications", "textarea", False, False, _MEDICAL, "Current medications", "Enter current medications", 25),
            _field("blood_type", "Blood Type", "select", False, False, _MEDICAL, "Patient blood type", "", 26,
                   options=["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"]),
        ],
    },
    {
        "name": "appointment",
        "display_name": "Appointment Booking",
        "description": "Appointment scheduling and management form",
        "fields": [
            _field("appointment_date", "Appointment Date", "date", True, True, _APPOINTMENT, "Date of appointment", "YYYY-MM-DD", 1),
            _field("appointment_time", "Appointment Time", "datetime", True, True, _APPOINTMENT, "Time of appointment", "HH:MM", 2),
            _field("doctor", "Doctor", "select", True, True, _APPOINTMENT, "Attending physician", "", 3),
            _field("appointment_type", "Appointment Type", "select", True, False, _APPOINTMENT, "Type of appointment", "", 4),
            _field("reason", "Reason for Visit", "textarea", False, False, _APPOINTMENT, "Reason for the appointment", "Enter reason for visit", 5),
            _field("notes", "Additional Notes", "textarea", False, False, _APPOINTMENT, "Any additional notes", "Enter additional notes", 6),
        ],
    },
]


def seed_catalog(*, using: str = "default") -> dict[str, int]:
    """
    Load :data:`LOCALES` and :data:`FORM_TYPES` into the database.

    Every form type's field list is validated with
    :class:`~apps.form_catalog.validators.CatalogValidator` before anything
    is written; the whole seed runs in one transaction.  Rows that already
    match the data are not saved, so their ``updated_at`` does not move.

    Returns:
        Counts of rows created, keyed ``locales``, ``form_types``, ``fields``.

    Raises:
        CatalogValidationError: If the bundled catalog data is malformed.
    """
    for form in FORM_TYPES:
        CatalogValidator.validate(form["fields"])

    created = {"locales": 0, "form_types": 0, "fields": 0}
    updated = 0

    with transaction.atomic(using=using):
        for locale in LOCALES:
            defaults = {k: v for k, v in locale.items() if k != "code"}
            _, was_created, was_updated = _sync(
                Locale, using, defaults, code=locale["code"]
            )
            created["locales"] += int(was_created)
            updated += int(was_updated)

        for form in FORM_TYPES:
            form_type, was_created, was_updated = _sync(
                FormType,
                using,
                {"display_name": form["display_name"], "description": form["description"]},
                name=form["name"],
            )
            created["form_types"] += int(was_created)
            updated += int(was_updated)

            for entry in form["fields"]:
                defaults = {k: v for k, v in entry.items() if k != "name"}
                _, was_created, was_updated = _sync(
                    FieldDefinition, using, defaults, form_type=form_type, name=entry["name"]
                )
                created["fields"] += int(was_created)
                updated += int(was_updated)

    logger.info("catalog_seeded", updated=updated, **created)
    return created


def _sync(model, using: str, values: dict, **lookup):
    """
    Create the row matching *lookup*, or update only the attributes of an
    existing one that differ from *values*.

    Returns ``(obj, created, updated)``.
    """
    obj = model.objects.using(using).filter(**lookup).first()
    if obj is None:
        return model.objects.using(using).create(**lookup, **values), True, False

    changed = [name for name, value in values.items() if getattr(obj, name) != value]
    if not changed:
        return obj, False, False
    for name in changed:
        setattr(obj, name, values[name])
    obj.save(using=using)
    return obj, False, True
