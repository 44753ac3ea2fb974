"""Choices and constants for data outputs."""

from datetime import timedelta

from django.db import models


class OutputFormat(models.TextChoices):
    """Wire formats a data output can be rendered to."""

    RSS = "xml", "RSS 2.0"
    JSON = "json", "JSON"


OUTPUT_CONTENT_TYPES = {
    OutputFormat.RSS: "text/xml",
    OutputFormat.JSON: "application/json",
}

# Number of records rendered when the options do not set events_to_show
DEFAULT_EVENTS_TO_SHOW = 40

# <ttl> of the RSS channel, in minutes
DEFAULT_TTL = 60

READ_METHODS = ("GET", "HEAD")

# Largest period a timedelta can represent
MAX_RECEIVE_PERIOD_IN_DAYS = timedelta.max.days

# Upper bound for events_to_show, keeps the window LIMIT within SQLite's range
MAX_EVENTS_TO_SHOW = 10000
