"""Liveness check for data outputs."""

from datetime import datetime, timedelta
from typing import Optional, Union


def is_fresh(
    last_received_at: Optional[datetime],
    expected_receive_period_in_days: Union[int, float],
    now: datetime,
) -> bool:
    """Check whether input arrived within the expected receive period.

    The comparison is strict: no grace period and no averaging.

    Args:
        last_received_at: Time input was last received, or None if never
        expected_receive_period_in_days: Allowed silence in days
        now: Current time, passed explicitly by the caller

    Returns:
        True if ``now - last_received_at`` does not exceed the period
    """
    if last_received_at is None:
        return False
    return now - last_received_at <= timedelta(days=float(expected_receive_period_in_days))
