"""
apps.localization.views
~~~~~~~~~~~~~~~~~~~~~~~
Thin DRF API views for locales and translations.
All business logic is delegated to
:mod:`apps.localization.services.translation_service` and
:class:`~apps.localization.services.locale_registry.LocaleRegistry`.

Endpoints
---------
GET  /i18n/locales/                      – Active locales
PUT  /i18n/tenant/locale/                – Set the tenant's preferred locale
GET  /admin/i18n/translations/{locale}/  – UI translations (``?context=``)
POST /admin/i18n/translations/           – Upsert one UI translation
POST /admin/i18n/field-translations/     – Upsert one field translation
"""
from __future__ import annotations

from django.apps import apps
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.localization.services import translation_service
from apps.tenants.services import update_preferred_locale
from common.middleware import tenant_id_from_request
from .serializers import (
    FieldTranslationSerializer,
    FieldTranslationUpsertSerializer,
    LocaleSerializer,
    TenantLocaleSerializer,
    TranslationSerializer,
    TranslationUpsertSerializer,
)


def _registry():
    return apps.get_app_config("localization").registry


class LocaleListView(APIView):
    """GET /i18n/locales/ – list active locales."""

    @extend_schema(
        summary="List Supported Locales",
        responses={200: LocaleSerializer(many=True)},
        tags=["Localization"],
    )
    def get(self, request: Request) -> Response:
        locales = _registry().list_active()
        return Response(LocaleSerializer(locales, many=True).data)


class TenantLocaleView(APIView):
    """PUT /i18n/tenant/locale/ – change the calling tenant's preferred locale."""

    @extend_schema(
        summary="Set Tenant Locale",
        description="Rejects inactive or unknown locales before anything is written.",
        parameters=[
            OpenApiParameter(
                name="X-Healthcare-Entity-ID",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.HEADER,
                required=True,
            ),
        ],
        request=TenantLocaleSerializer,
        responses={
            200: TenantLocaleSerializer,
            400: OpenApiResponse(description="Unsupported locale or missing tenant header."),
            404: OpenApiResponse(description="Tenant not found."),
        },
        tags=["Localization"],
    )
    def put(self, request: Request) -> Response:
        tenant_id = tenant_id_from_request(request)
        serializer = TenantLocaleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        tenant = update_preferred_locale(
            tenant_id=tenant_id,
            locale=serializer.validated_data["locale"],
            registry=_registry(),
        )
        return Response({"locale": tenant.preferred_locale_id}, status=status.HTTP_200_OK)


class TranslationListView(APIView):
    """GET /admin/i18n/translations/{locale}/ – flat key → content map."""

    @extend_schema(
        summary="List Translations",
        parameters=[
            OpenApiParameter(
                name="context",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
            ),
        ],
        responses={
            200: OpenApiTypes.OBJECT,
            400: OpenApiResponse(description="Unsupported locale."),
        },
        tags=["Localization"],
    )
    def get(self, request: Request, locale: str) -> Response:
        translations = translation_service.get_translations(
            locale=locale,
            context=request.query_params.get("context") or None,
            registry=_registry(),
        )
        return Response({"locale": locale, "translations": translations})


class TranslationUpsertView(APIView):
    """POST /admin/i18n/translations/ – create or update one translation."""

    @extend_schema(
        summary="Upsert Translation",
        request=TranslationUpsertSerializer,
        responses={
            200: TranslationSerializer,
            400: OpenApiResponse(description="Unsupported locale."),
        },
        tags=["Localization"],
    )
    def post(self, request: Request) -> Response:
        serializer = TranslationUpsertSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        vd = serializer.validated_data

        translation = translation_service.upsert_translation(
            key=vd["translation_key"],
            locale=vd["locale"],
            content=vd["content"],
            context=vd["context"],
            registry=_registry(),
        )
        return Response(TranslationSerializer(translation).data, status=status.HTTP_200_OK)


class FieldTranslationUpsertView(APIView):
    """POST /admin/i18n/field-translations/ – create or update a field translation."""

    @extend_schema(
        summary="Upsert Field Translation",
        request=FieldTranslationUpsertSerializer,
        responses={
            200: FieldTranslationSerializer,
            400: OpenApiResponse(description="Unsupported locale."),
            404: OpenApiResponse(description="Field not found."),
        },
        tags=["Localization"],
    )
    def post(self, request: Request) -> Response:
        serializer = FieldTranslationUpsertSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        vd = serializer.validated_data

        translation = translation_service.upsert_field_translation(
            field_id=vd["field_id"],
            locale=vd["locale"],
            display_name=vd["display_name"],
            description=vd["description"],
            placeholder=vd["placeholder"],
            registry=_registry(),
        )
        return Response(FieldTranslationSerializer(translation).data, status=status.HTTP_200_OK)
