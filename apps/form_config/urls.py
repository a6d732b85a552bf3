"""
apps.form_config.urls
~~~~~~~~~~~~~~~~~~~~~
URL routing for form resolution and form administration.
Mounted at /api/v1/ by the root URLconf.
"""
from django.urls import path

from .views import (
    FieldConfigurationBatchView,
    FieldConfigurationView,
    FieldOrderView,
    FormFieldsView,
    FormMetadataView,
    FormResetView,
)

urlpatterns = [
    # GET /api/v1/forms/<form_type>/metadata/
    path(
        "forms/<str:form_type>/metadata/",
        FormMetadataView.as_view(),
        name="form-metadata",
    ),
    # GET /api/v1/forms/<form_type>/metadata/<locale>/
    path(
        "forms/<str:form_type>/metadata/<str:locale>/",
        FormMetadataView.as_view(),
        name="form-metadata-localized",
    ),
    # GET /api/v1/forms/<form_type>/fields/
    path(
        "forms/<str:form_type>/fields/",
        FormFieldsView.as_view(),
        name="form-fields",
    ),
    # PUT /api/v1/admin/forms/<form_type>/fields/
    path(
        "admin/forms/<str:form_type>/fields/",
        FieldConfigurationBatchView.as_view(),
        name="form-fields-batch",
    ),
    # PUT /api/v1/admin/forms/<form_type>/fields/order/
    path(
        "admin/forms/<str:form_type>/fields/order/",
        FieldOrderView.as_view(),
        name="form-fields-order",
    ),
    # PUT /api/v1/admin/forms/<form_type>/fields/<field_id>/
    path(
        "admin/forms/<str:form_type>/fields/<int:field_id>/",
        FieldConfigurationView.as_view(),
        name="form-field-detail",
    ),
    # POST /api/v1/admin/forms/<form_type>/reset/
    path(
        "admin/forms/<str:form_type>/reset/",
        FormResetView.as_view(),
        name="form-reset",
    ),
]
