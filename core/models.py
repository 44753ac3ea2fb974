"""Database models for the application."""

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from .exceptions import ConfigurationError
from .options import check_options, default_options, events_to_show, parse_number


class Source(models.Model):
    """Upstream producer whose records can be published."""

    name = models.CharField(max_length=255, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Source"
        verbose_name_plural = "Sources"
        ordering = ["name"]

    def __str__(self):
        return self.name


class Record(models.Model):
    """Data record emitted by a source. Read-only for data outputs."""

    source = models.ForeignKey(Source, on_delete=models.CASCADE, related_name="records")
    payload = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = "Record"
        verbose_name_plural = "Records"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["created_at"], name="record_created_idx"),
            models.Index(fields=["source", "created_at"], name="record_source_created_idx"),
        ]

    def __str__(self):
        return f"Record {self.pk} from {self.source}"


class DataOutput(models.Model):
    """Secret-protected RSS/JSON feed rendered from recent source records."""

    name = models.CharField(max_length=255)
    user = models.ForeignKey(
        "auth.User", on_delete=models.SET_NULL, null=True, blank=True, related_name="data_outputs"
    )
    sources = models.ManyToManyField(Source, blank=True, related_name="data_outputs")
    options = models.JSONField(
        default=default_options,
        help_text="Secrets, expected_receive_period_in_days, events_to_show and template",
    )
    last_receive_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Data Output"
        verbose_name_plural = "Data Outputs"
        ordering = ["-created_at"]

    def __str__(self):
        return self.name

    def clean(self):
        """Reject invalid options with one message per failed rule."""
        super().clean()
        try:
            check_options(self.options)
        except ConfigurationError as e:
            raise ValidationError({"options": [str(error) for error in e.errors]}) from e

    def save(self, *args, **kwargs):
        """Validate before every save so invalid options are never stored."""
        self.full_clean()
        super().save(*args, **kwargs)

    @property
    def secrets(self) -> list:
        return list(self.options.get("secrets") or [])

    @property
    def template(self) -> dict:
        return self.options.get("template") or {}

    @property
    def events_to_show(self) -> int:
        return events_to_show(self.options)

    @property
    def expected_receive_period_in_days(self) -> float:
        return parse_number(self.options.get("expected_receive_period_in_days")) or 0

    def is_working(self, now=None) -> bool:
        """Check whether records were received within the expected period."""
        from .services.freshness import is_fresh

        if now is None:
            now = timezone.now()
        return is_fresh(self.last_receive_at, self.expected_receive_period_in_days, now)
