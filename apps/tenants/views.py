"""
apps.tenants.views
~~~~~~~~~~~~~~~~~~
Thin DRF API views for healthcare entities.
All business logic is delegated to :mod:`apps.tenants.services`.
"""
from __future__ import annotations

from django.apps import apps
from django.db import IntegrityError
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.tenants.services import create_tenant
from .serializers import HealthcareEntityCreateSerializer, HealthcareEntitySerializer


class HealthcareEntityCreateView(APIView):
    """POST /tenants/ – create a new healthcare entity."""

    @extend_schema(
        summary="Create Healthcare Entity",
        description=(
            "Creates a tenant.  With ``initialize_defaults`` the tenant gets one "
            "override row per active catalog field carrying the catalog defaults."
        ),
        request=HealthcareEntityCreateSerializer,
        responses={
            201: HealthcareEntitySerializer,
            400: OpenApiResponse(description="Validation error or unsupported locale."),
            409: OpenApiResponse(description="A healthcare entity with that name already exists."),
        },
        tags=["Tenants"],
    )
    def post(self, request: Request) -> Response:
        serializer = HealthcareEntityCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        vd = serializer.validated_data
        form_config = apps.get_app_config("form_config")

        try:
            tenant = create_tenant(
                name=vd["name"],
                preferred_locale=vd["preferred_locale"],
                initialize_defaults=vd["initialize_defaults"],
                registry=apps.get_app_config("localization").registry,
                mutator=form_config.mutator,
            )
        except IntegrityError:
            return Response(
                {"detail": "A healthcare entity with that name already exists."},
                status=status.HTTP_409_CONFLICT,
            )
        return Response(
            HealthcareEntitySerializer(tenant).data,
            status=status.HTTP_201_CREATED,
        )
