"""Health endpoint summarizing the record store and data output liveness."""

import logging

from django.db import DatabaseError
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_http_methods

from core.models import DataOutput
from core.services import OutputService

logger = logging.getLogger(__name__)


@require_http_methods(["GET"])
def health_check(request):
    """
    Report whether Herald can serve its data outputs.

    Data outputs that stopped receiving records are listed, but only an
    unreachable record store makes the check fail.

    Returns:
        200: {"status": "healthy" | "degraded", "data_outputs": N, "not_working": [ids]}
        503: Record store unreachable
    """
    try:
        data_outputs = list(DataOutput.objects.order_by("id"))
    except DatabaseError as e:
        logger.exception("Health check could not read data outputs")
        return JsonResponse({"status": "unhealthy", "error": str(e)}, status=503)

    now = timezone.now()
    not_working = [
        data_output.pk
        for data_output in data_outputs
        if not OutputService.get_status(data_output, now)["working"]
    ]
    return JsonResponse(
        {
            "status": "degraded" if not_working else "healthy",
            "data_outputs": len(data_outputs),
            "not_working": not_working,
        }
    )
