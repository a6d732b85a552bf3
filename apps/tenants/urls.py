"""
apps.tenants.urls
"""
from django.urls import path

from .views import HealthcareEntityCreateView

urlpatterns = [
    # POST /api/v1/tenants/
    path("tenants/", HealthcareEntityCreateView.as_view(), name="tenant-create"),
]
