"""Core application views."""

from .health import health_check
from .outputs import data_output_feed, data_output_status

__all__ = [
    "health_check",
    "data_output_feed",
    "data_output_status",
]
