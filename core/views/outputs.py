"""Data output views: secret-protected feeds and liveness status."""

import logging

from django.http import HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_http_methods

from core.choices import OutputFormat
from core.exceptions import RenderError
from core.models import DataOutput
from core.services import OutputService
from core.services.output_service import negotiate_format

logger = logging.getLogger(__name__)


@require_http_methods(["GET", "HEAD"])
def data_output_feed(request, output_id, suffix=None):
    """
    Render a data output as RSS or JSON.

    URL forms:
        /outputs/<id>/feed.xml   RSS 2.0
        /outputs/<id>/feed.json  JSON
        /outputs/<id>/feed       negotiated from the Accept header

    Query Parameters:
        secret (required): One of the secrets configured on the output

    Returns:
        200: Rendered feed
        401: Missing or wrong secret ("Not Authorized")
        404: Unknown data output
        500: Stored template could not be rendered
    """
    data_output = get_object_or_404(DataOutput, pk=output_id)
    output_format = negotiate_format(suffix, request.headers.get("Accept"))

    try:
        result = OutputService.handle_web_request(
            data_output,
            request.GET,
            method=request.method,
            output_format=output_format,
        )
    except RenderError:
        logger.exception(f"Failed to render data output {output_id}")
        if output_format == OutputFormat.JSON:
            return JsonResponse({"error": "Render Error"}, status=500)
        return HttpResponse("Render Error", status=500, content_type="text/plain")

    if output_format == OutputFormat.JSON:
        return JsonResponse(result.content, status=result.status)
    return HttpResponse(result.content, status=result.status, content_type=result.content_type)


@require_http_methods(["GET"])
def data_output_status(request, output_id):
    """
    Report whether a data output has received records recently.

    Returns:
        200: JSON with id, name, working, last_receive_at and
             expected_receive_period_in_days
        404: Unknown data output
    """
    data_output = get_object_or_404(DataOutput, pk=output_id)
    return JsonResponse(OutputService.get_status(data_output))
