"""
common.health
~~~~~~~~~~~~~
GET /health/ – liveness + readiness probe.

Readiness means the database answers *and* the field catalog has been
seeded (at least one active form type).  An empty catalog would make every
form resolution fail with 404, so it is reported as degraded.

Returns:
    200  {"status": "ok", "db": "ok", "catalog": "ok"}
    503  {"status": "degraded", "db": "error: <msg>", "catalog": "unknown"}
    503  {"status": "degraded", "db": "ok", "catalog": "empty"}
"""
import structlog
from django.conf import settings
from django.db import DatabaseError, OperationalError, connections
from django.http import JsonResponse

from apps.form_catalog.models import FormType

logger = structlog.get_logger(__name__)


def health_check(request):
    """Return service health including database and catalog status."""
    db_status = "ok"
    catalog_status = "unknown"

    try:
        connections[settings.FORM_CONFIG_DATABASE].ensure_connection()
    except OperationalError as exc:
        db_status = f"error: {exc}"
        logger.error("health_check_db_failure", error=str(exc))
    else:
        try:
            has_forms = (
                FormType.objects.using(settings.FORM_CONFIG_DATABASE)
                .filter(is_active=True)
                .exists()
            )
        except DatabaseError as exc:
            logger.error("health_check_catalog_failure", error=str(exc))
        else:
            catalog_status = "ok" if has_forms else "empty"

    healthy = db_status == "ok" and catalog_status == "ok"
    payload = {
        "status": "ok" if healthy else "degraded",
        "db": db_status,
        "catalog": catalog_status,
    }
    return JsonResponse(payload, status=200 if healthy else 503)
