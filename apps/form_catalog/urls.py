"""
apps.form_catalog.urls
"""
from django.urls import path

from .views import FormTypeListView

urlpatterns = [
    path("forms/types/", FormTypeListView.as_view(), name="form-type-list"),
]
