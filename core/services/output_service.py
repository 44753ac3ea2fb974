"""Service for serving and monitoring data outputs."""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, Mapping, NamedTuple, Optional

from django.conf import settings
from django.utils import timezone

from ..choices import OUTPUT_CONTENT_TYPES, READ_METHODS, OutputFormat
from ..exceptions import AuthorizationError
from ..models import DataOutput, Record
from .feed_renderer import render
from .record_window import fetch_records
from .secret_gate import require_secret

logger = logging.getLogger(__name__)

METHOD_NOT_ALLOWED = "Method Not Allowed"


class WebResponse(NamedTuple):
    """Outcome of a data output request, independent of the web framework."""

    content: Any
    status: int
    content_type: str


def negotiate_format(suffix: Optional[str] = None, accept: Optional[str] = None) -> OutputFormat:
    """Pick the output format for a request.

    An explicit ``xml``/``json`` suffix wins. Otherwise an Accept header
    asking for JSON selects JSON, and everything else gets RSS.

    Args:
        suffix: Format suffix from the URL (e.g. "json" for feed.json)
        accept: Value of the Accept header

    Returns:
        The negotiated OutputFormat
    """
    if suffix:
        suffix = suffix.lower().lstrip(".")
        if suffix in OutputFormat.values:
            return OutputFormat(suffix)
        if suffix == "rss":
            return OutputFormat.RSS

    if accept and "application/json" in accept.lower():
        return OutputFormat.JSON

    return OutputFormat.RSS


def _error_response(message: str, status: int, output_format: OutputFormat) -> WebResponse:
    if output_format == OutputFormat.JSON:
        return WebResponse({"error": message}, status, OUTPUT_CONTENT_TYPES[output_format])
    return WebResponse(message, status, "text/plain")


class OutputService:
    """Service for rendering data outputs and tracking their liveness."""

    @staticmethod
    def handle_web_request(
        data_output: DataOutput,
        params: Mapping[str, Any],
        method: str = "GET",
        output_format: OutputFormat = OutputFormat.RSS,
        now: Optional[datetime] = None,
        feed_link: Optional[str] = None,
    ) -> WebResponse:
        """
        Answer a request for a data output.

        The request is either unauthorized (no matching secret) or
        authorized, in which case the record window is rendered fresh.

        Args:
            data_output: The data output being requested
            params: Request parameters; ``secret`` carries the credential
            method: HTTP method; only read methods are served
            output_format: Negotiated output format
            now: Render time (defaults to the current time)
            feed_link: Channel link used when the template has none
                (defaults to settings.BASE_URL)

        Returns:
            WebResponse with the rendered document or an error body

        Raises:
            RenderError: If the stored template cannot be rendered
        """
        output_format = OutputFormat(output_format)

        if method.upper() not in READ_METHODS:
            return _error_response(METHOD_NOT_ALLOWED, 405, output_format)

        try:
            require_secret(data_output.secrets, params.get("secret"))
        except AuthorizationError as e:
            logger.info(f"Rejected request for data output {data_output.pk}: bad or missing secret")
            return _error_response(str(e), 401, output_format)

        if now is None:
            now = timezone.now()
        if feed_link is None:
            feed_link = settings.BASE_URL

        records = fetch_records(data_output.sources.all(), data_output.events_to_show)
        content = render(output_format, data_output.template, records, now, feed_link)

        logger.info(
            f"Rendered data output {data_output.pk} as {output_format.label} "
            f"with {len(records)} records"
        )
        return WebResponse(content, 200, OUTPUT_CONTENT_TYPES[output_format])

    @staticmethod
    def receive_records(
        data_output: DataOutput,
        record_ids: Iterable[int],
        now: Optional[datetime] = None,
    ) -> int:
        """
        Mark a data output as having received records.

        Only records from the output's own sources count. Records are not
        copied or modified; the output renders straight from the store.

        Args:
            data_output: The receiving data output
            record_ids: IDs of the records delivered by upstream producers
            now: Receive time (defaults to the current time)

        Returns:
            Number of eligible records received
        """
        count = Record.objects.filter(
            id__in=list(record_ids), source__in=data_output.sources.all()
        ).count()
        if not count:
            logger.debug(f"Data output {data_output.pk} received no eligible records")
            return 0

        if now is None:
            now = timezone.now()
        DataOutput.objects.filter(pk=data_output.pk).update(last_receive_at=now)
        data_output.last_receive_at = now
        logger.info(f"Data output {data_output.pk} received {count} records")
        return count

    @staticmethod
    def get_status(data_output: DataOutput, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Describe the liveness of a data output.

        Args:
            data_output: The data output to check
            now: Current time (defaults to the current time)

        Returns:
            Dictionary with:
                - id: The data output ID
                - name: The data output name
                - working: Whether records arrived within the expected period
                - last_receive_at: When records were last received (or None)
                - expected_receive_period_in_days: The configured period
        """
        return {
            "id": data_output.pk,
            "name": data_output.name,
            "working": data_output.is_working(now),
            "last_receive_at": data_output.last_receive_at,
            "expected_receive_period_in_days": data_output.expected_receive_period_in_days,
        }
