"""
apps.localization.services.locale_registry
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Gatekeeper for locale codes.

Every code that is about to filter translations or be written to a tenant's
preferences goes through :meth:`LocaleRegistry.require_active` first, so an
inactive or unknown code is rejected before any other query or write.
"""
from __future__ import annotations

import structlog

from apps.localization.models import Locale
from common.exceptions import UnsupportedLocaleError

logger = structlog.get_logger(__name__)


class LocaleRegistry:
    """
    Read-only view over the ``Locale`` table.

    Args:
        using: Database alias to read from.
    """

    def __init__(self, using: str = "default") -> None:
        self.using = using

    def is_active(self, code: str | None) -> bool:
        """Return ``True`` iff *code* names an active locale."""
        if not code:
            return False
        return (
            Locale.objects.using(self.using)
            .filter(code=code, is_active=True)
            .exists()
        )

    def list_active(self) -> list[Locale]:
        """Return all active locales ordered by code."""
        return list(
            Locale.objects.using(self.using).filter(is_active=True).order_by("code")
        )

    def require_active(self, code: str | None) -> str:
        """
        Return *code* unchanged if it is active.

        Raises:
            UnsupportedLocaleError: If *code* is blank, unknown or inactive.
        """
        if not self.is_active(code):
            logger.info("unsupported_locale_rejected", locale=code)
            raise UnsupportedLocaleError(f"Unsupported locale: {code}")
        return code
