"""
apps.form_config.views
~~~~~~~~~~~~~~~~~~~~~~
Thin DRF API views over :class:`ConfigResolver` and :class:`BatchMutator`.

Both services are built once in :meth:`FormConfigConfig.ready` and fetched
from the app config.  The tenant is always taken from the
``X-Healthcare-Entity-ID`` header.

Endpoints
---------
GET  /forms/{form_type}/metadata/                 – Resolve form (``?locale=``)
GET  /forms/{form_type}/metadata/{locale}/        – Resolve form, localized
GET  /forms/{form_type}/fields/                   – Enabled fields only
PUT  /admin/forms/{form_type}/fields/             – Batch update
PUT  /admin/forms/{form_type}/fields/order/       – Reorder fields
PUT  /admin/forms/{form_type}/fields/{field_id}/  – Update one field
POST /admin/forms/{form_type}/reset/              – Drop all overrides
"""
from __future__ import annotations

from django.apps import apps
from django.utils.http import http_date
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.form_config.services.batch_mutator import (
    BatchFieldUpdate,
    FieldOrder,
    FieldUpdate,
)
from common.middleware import tenant_id_from_request
from .serializers import (
    BatchUpdateRequestSerializer,
    ErrorResponseSerializer,
    FieldConfigurationSerializer,
    FieldDescriptorSerializer,
    FieldListResponseSerializer,
    FieldOrdersRequestSerializer,
    FieldUpdateSerializer,
    FormMetadataSerializer,
    MutationCountSerializer,
)

TENANT_PARAMETER = OpenApiParameter(
    name="X-Healthcare-Entity-ID",
    type=OpenApiTypes.INT,
    location=OpenApiParameter.HEADER,
    required=True,
    description="Id of the calling healthcare entity (tenant).",
)


def _services():
    return apps.get_app_config("form_config")


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

class FormMetadataView(APIView):
    """GET /forms/{form_type}/metadata/[{locale}/] – resolve a form."""

    @extend_schema(
        summary="Get Form Metadata",
        description=(
            "Merges catalog defaults, the tenant's overrides and, when a locale "
            "is given, the field translations for that locale.  Fields are "
            "ordered by effective sort order, ties broken by field id."
        ),
        parameters=[
            TENANT_PARAMETER,
            OpenApiParameter(
                name="locale",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Locale code, e.g. fr-CA.  Must be active.",
            ),
        ],
        responses={
            200: FormMetadataSerializer,
            400: ErrorResponseSerializer,
            404: OpenApiResponse(description="Form type or tenant not found."),
        },
        tags=["Forms"],
    )
    def get(self, request: Request, form_type: str, locale: str | None = None) -> Response:
        tenant_id = tenant_id_from_request(request)
        locale = locale or request.query_params.get("locale") or None
        metadata = _services().resolver.resolve(form_type, tenant_id, locale=locale)

        response = Response(FormMetadataSerializer(metadata).data, status=status.HTTP_200_OK)
        if metadata.last_modified is not None:
            response["Last-Modified"] = http_date(metadata.last_modified.timestamp())
        return response


class FormFieldsView(APIView):
    """GET /forms/{form_type}/fields/ – every field of a resolved form, enabled or not."""

    @extend_schema(
        summary="List Field Configurations",
        description=(
            "Effective configuration of every active field of the form for the "
            "tenant, including fields the tenant has disabled."
        ),
        parameters=[TENANT_PARAMETER],
        responses={
            200: FieldListResponseSerializer,
            404: OpenApiResponse(description="Form type or tenant not found."),
        },
        tags=["Forms"],
    )
    def get(self, request: Request, form_type: str) -> Response:
        tenant_id = tenant_id_from_request(request)
        metadata = _services().resolver.resolve(form_type, tenant_id)
        return Response(
            {
                "form_type": metadata.form_type,
                "fields": FieldDescriptorSerializer(metadata.fields, many=True).data,
            },
            status=status.HTTP_200_OK,
        )


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

class FieldConfigurationView(APIView):
    """PUT /admin/forms/{form_type}/fields/{field_id}/ – update one field."""

    @extend_schema(
        summary="Update Field Configuration",
        description=(
            "Partially updates the tenant's override of one field.  Omitted "
            "keys keep their current value.  Core fields cannot be disabled "
            "and a required field must stay enabled."
        ),
        parameters=[TENANT_PARAMETER],
        request=FieldUpdateSerializer,
        responses={
            200: FieldConfigurationSerializer,
            400: ErrorResponseSerializer,
            404: OpenApiResponse(description="Tenant, form type or field not found."),
            503: ErrorResponseSerializer,
        },
        tags=["Form Administration"],
    )
    def put(self, request: Request, form_type: str, field_id: int) -> Response:
        tenant_id = tenant_id_from_request(request)
        serializer = FieldUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        row = _services().mutator.apply_single(
            tenant_id,
            field_id,
            FieldUpdate(**serializer.validated_data),
            form_type=form_type,
        )
        return Response(FieldConfigurationSerializer(row).data, status=status.HTTP_200_OK)


class FieldConfigurationBatchView(APIView):
    """PUT /admin/forms/{form_type}/fields/ – all-or-nothing batch update."""

    @extend_schema(
        summary="Update Fields (Batch)",
        description=(
            "Sets the full desired state of several fields in one transaction. "
            "If any item breaks a rule, nothing is written and every violation "
            "is returned under ``errors``."
        ),
        parameters=[TENANT_PARAMETER],
        request=BatchUpdateRequestSerializer,
        responses={
            200: MutationCountSerializer,
            400: ErrorResponseSerializer,
            404: OpenApiResponse(description="Tenant, form type or field not found."),
            422: ErrorResponseSerializer,
            503: ErrorResponseSerializer,
        },
        tags=["Form Administration"],
    )
    def put(self, request: Request, form_type: str) -> Response:
        tenant_id = tenant_id_from_request(request)
        serializer = BatchUpdateRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        items = [BatchFieldUpdate(**item) for item in serializer.validated_data["fields"]]
        updated = _services().mutator.apply_batch(tenant_id, form_type, items)
        return Response({"updated": updated}, status=status.HTTP_200_OK)


class FieldOrderView(APIView):
    """PUT /admin/forms/{form_type}/fields/order/ – reorder fields."""

    @extend_schema(
        summary="Update Field Order",
        description="Changes only the sort order of the listed fields.",
        parameters=[TENANT_PARAMETER],
        request=FieldOrdersRequestSerializer,
        responses={
            200: MutationCountSerializer,
            404: OpenApiResponse(description="Tenant, form type or field not found."),
            422: ErrorResponseSerializer,
            503: ErrorResponseSerializer,
        },
        tags=["Form Administration"],
    )
    def put(self, request: Request, form_type: str) -> Response:
        tenant_id = tenant_id_from_request(request)
        serializer = FieldOrdersRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        orders = [FieldOrder(**item) for item in serializer.validated_data["field_orders"]]
        updated = _services().mutator.update_field_orders(tenant_id, orders, form_type=form_type)
        return Response({"updated": updated}, status=status.HTTP_200_OK)


class FormResetView(APIView):
    """POST /admin/forms/{form_type}/reset/ – restore catalog defaults."""

    @extend_schema(
        summary="Reset Form",
        description="Deletes every override of the tenant for this form type.",
        parameters=[TENANT_PARAMETER],
        request=None,
        responses={
            200: MutationCountSerializer,
            404: OpenApiResponse(description="Tenant or form type not found."),
            503: ErrorResponseSerializer,
        },
        tags=["Form Administration"],
    )
    def post(self, request: Request, form_type: str) -> Response:
        tenant_id = tenant_id_from_request(request)
        deleted = _services().mutator.reset_form(tenant_id, form_type)
        return Response({"deleted": deleted}, status=status.HTTP_200_OK)
