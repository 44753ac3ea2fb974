"""Read-only window over the most recent records of a data output's sources."""

import logging
from typing import Iterable, List

from core.models import Record, Source

logger = logging.getLogger(__name__)


def fetch_records(sources: Iterable[Source], limit: int) -> List[Record]:
    """Return the newest records emitted by the given sources.

    Records are ordered newest first. Records sharing a timestamp are
    ordered by insertion, newest insert first.

    Args:
        sources: Sources whose records are eligible (queryset or iterable)
        limit: Maximum number of records to return

    Returns:
        List of at most ``limit`` Record objects
    """
    if limit < 1:
        return []

    records = list(
        Record.objects.filter(source__in=sources)
        .select_related("source")
        .order_by("-created_at", "-id")[:limit]
    )
    logger.debug(f"Fetched {len(records)} records (limit {limit})")
    return records
