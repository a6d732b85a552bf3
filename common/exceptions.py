"""
common.exceptions
~~~~~~~~~~~~~~~~~
Centralised DRF exception handler and the form-configuration error taxonomy.

Caller errors (``NotFoundError``, ``InvariantViolationError`` subclasses,
``UnsupportedLocaleError``, ``ValidationError``) are surfaced verbatim.
``StoreFailureError`` is raised only after the open transaction has been
rolled back, so a retry is always safe.
"""
import structlog
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = structlog.get_logger(__name__)


class AppError(Exception):
    """Base application error.  Subclass to define domain-specific errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_code: str = "error"
    default_detail: str = "An error occurred."

    def __init__(
        self,
        detail: str | None = None,
        code: str | None = None,
        errors: list[dict] | None = None,
    ) -> None:
        self.detail = detail or self.default_detail
        self.code = code or self.default_code
        self.errors = errors or []

    def __str__(self) -> str:
        return self.detail


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_code = "not_found"
    default_detail = "The requested resource was not found."


class ValidationError(AppError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_code = "validation_error"
    default_detail = "Validation failed."


class InvariantViolationError(AppError):
    """A proposed override would break a field-configuration invariant."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "invariant_violation"
    default_detail = "The requested field configuration is not allowed."


class CoreFieldProtectedError(InvariantViolationError):
    default_code = "core_field_protected"
    default_detail = "Core fields cannot be disabled."


class RequiredNeedsEnabledError(InvariantViolationError):
    default_code = "required_needs_enabled"
    default_detail = "A field cannot be required while disabled."


class UnsupportedLocaleError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "unsupported_locale"
    default_detail = "The requested locale is not supported."


class TenantHeaderError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "tenant_header_invalid"
    default_detail = "A valid X-Healthcare-Entity-ID header is required."


class StoreFailureError(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_code = "store_failure"
    default_detail = "The configuration store could not complete the operation."


def custom_exception_handler(exc: Exception, context: dict) -> Response | None:
    """
    Global DRF exception handler.
    Converts AppError subclasses to JSON responses and delegates everything
    else to the default DRF handler so standard DRF exceptions still work.
    """
    if isinstance(exc, AppError):
        logger.warning(
            "app_error",
            code=exc.code,
            detail=exc.detail,
            status_code=exc.status_code,
        )
        payload = {"code": exc.code, "detail": exc.detail}
        if exc.errors:
            payload["errors"] = exc.errors
        return Response(payload, status=exc.status_code)

    response = drf_exception_handler(exc, context)
    if response is not None:
        logger.warning(
            "drf_error",
            detail=response.data,
            status_code=response.status_code,
        )
    else:
        logger.exception("unhandled_exception", exc_info=exc)

    return response
