"""
apps.tenants.services package.
"""
from .tenant_service import (  # noqa: F401
    create_tenant,
    get_tenant,
    update_preferred_locale,
)
