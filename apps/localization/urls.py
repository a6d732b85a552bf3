"""
apps.localization.urls
"""
from django.urls import path

from .views import (
    FieldTranslationUpsertView,
    LocaleListView,
    TenantLocaleView,
    TranslationListView,
    TranslationUpsertView,
)

urlpatterns = [
    path("i18n/locales/", LocaleListView.as_view(), name="locale-list"),
    path("i18n/tenant/locale/", TenantLocaleView.as_view(), name="tenant-locale"),
    path(
        "admin/i18n/translations/",
        TranslationUpsertView.as_view(),
        name="translation-upsert",
    ),
    path(
        "admin/i18n/translations/<str:locale>/",
        TranslationListView.as_view(),
        name="translation-list",
    ),
    path(
        "admin/i18n/field-translations/",
        FieldTranslationUpsertView.as_view(),
        name="field-translation-upsert",
    ),
]
