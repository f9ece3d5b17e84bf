import structlog
from django.db import connection
from django.db.utils import DatabaseError
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

logger = structlog.get_logger(__name__)


@csrf_exempt
@require_http_methods(["GET"])
def healthz(request):
    """Health check endpoint for load balancers and containers"""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError as exc:
        logger.error("healthz.fail", error=str(exc))
        return JsonResponse({"status": "unhealthy", "error": str(exc)}, status=503)
    logger.info("healthz.ok", database="connected")
    return JsonResponse({"status": "healthy", "database": "connected"}, status=200)
