"""
apps.form_catalog.views
~~~~~~~~~~~~~~~~~~~~~~~
Read-only catalog endpoints.
"""
from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from . import services
from .serializers import FormTypeSerializer


class FormTypeListView(APIView):
    """GET /forms/types/ – active form types."""

    @extend_schema(
        summary="List Form Types",
        responses={200: FormTypeSerializer(many=True)},
        tags=["Forms"],
    )
    def get(self, request: Request) -> Response:
        form_types = services.list_form_types(using=settings.FORM_CONFIG_DATABASE)
        return Response(FormTypeSerializer(form_types, many=True).data)
