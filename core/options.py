"""
Options validation for data outputs.

A data output is configured through a free-form JSON options document.
This module checks that document before it is saved or rendered:

- secrets: non-empty list of non-empty strings
- expected_receive_period_in_days: finite number greater than zero
- events_to_show: optional positive integer, bounded
- template: non-empty mapping with a non-empty ``item`` mapping
"""

import math
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from .choices import DEFAULT_EVENTS_TO_SHOW, MAX_EVENTS_TO_SHOW, MAX_RECEIVE_PERIOD_IN_DAYS
from .exceptions import ConfigurationError


@dataclass(frozen=True)
class OptionError:
    """A single failed validation rule."""

    field: str
    message: str

    def __str__(self):
        return f"{self.field}: {self.message}"


def default_options() -> dict:
    """Return the options document new data outputs start from."""
    return {
        "secrets": ["a-secret-key"],
        "expected_receive_period_in_days": 2,
        "template": {
            "title": "XKCD comics as a feed",
            "description": "This is a feed of recent XKCD comics, generated by Herald",
            "item": {
                "title": "<$.title>",
                "description": "Secret hovertext: <$.hovertext>",
                "link": "<$.url>",
            },
        },
    }


def parse_number(value: Any) -> Optional[float]:
    """
    Parse an option value as a number.

    Args:
        value: Raw option value (int, float or numeric string)

    Returns:
        The parsed number, or None if the value is not a finite number
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, float) and math.isfinite(value):
        return value
    return None


def parse_events_to_show(value: Any) -> Optional[int]:
    """Parse events_to_show as a positive integer, or None if it is not one."""
    number = parse_number(value)
    if number is None or number < 1 or number > MAX_EVENTS_TO_SHOW:
        return None
    if number != int(number):
        return None
    return int(number)


def events_to_show(options: Mapping[str, Any]) -> int:
    """Return the configured window size, falling back to the default."""
    if "events_to_show" not in options:
        return DEFAULT_EVENTS_TO_SHOW
    return parse_events_to_show(options["events_to_show"]) or DEFAULT_EVENTS_TO_SHOW


def _validate_secrets(options: Mapping[str, Any]) -> List[OptionError]:
    secrets = options.get("secrets")
    if not isinstance(secrets, (list, tuple)) or not secrets:
        return [OptionError("secrets", "Please specify one or more secrets as a list")]
    if not all(isinstance(secret, str) and secret for secret in secrets):
        return [OptionError("secrets", "Every secret must be a non-empty string")]
    return []


def _validate_receive_period(options: Mapping[str, Any]) -> List[OptionError]:
    number = parse_number(options.get("expected_receive_period_in_days"))
    if number is None or number <= 0 or number > MAX_RECEIVE_PERIOD_IN_DAYS:
        return [
            OptionError(
                "expected_receive_period_in_days",
                "Please provide a number of days greater than zero and at most "
                f"{MAX_RECEIVE_PERIOD_IN_DAYS}",
            )
        ]
    return []


def _validate_events_to_show(options: Mapping[str, Any]) -> List[OptionError]:
    if "events_to_show" not in options:
        return []
    if parse_events_to_show(options["events_to_show"]) is None:
        return [
            OptionError(
                "events_to_show", f"Must be a whole number between 1 and {MAX_EVENTS_TO_SHOW}"
            )
        ]
    return []


def _validate_template(options: Mapping[str, Any]) -> List[OptionError]:
    template = options.get("template")
    if not isinstance(template, Mapping) or not template:
        return [OptionError("template", "Please provide a template with an item")]
    item = template.get("item")
    if not isinstance(item, Mapping) or not item:
        return [OptionError("template.item", "Please provide template.item as a mapping")]
    return []


_RULES = (
    _validate_secrets,
    _validate_receive_period,
    _validate_events_to_show,
    _validate_template,
)


def validate_options(options: Any) -> List[OptionError]:
    """
    Validate a data output options document.

    Every rule runs independently, so all problems are reported at once.

    Args:
        options: Candidate options document

    Returns:
        List of OptionError entries; empty when the document is valid
    """
    if not isinstance(options, Mapping):
        return [OptionError("options", "Options must be a JSON object")]

    errors: List[OptionError] = []
    for rule in _RULES:
        errors.extend(rule(options))
    return errors


def check_options(options: Any) -> None:
    """
    Validate an options document, raising if any rule fails.

    Raises:
        ConfigurationError: Carrying every failed rule
    """
    errors = validate_options(options)
    if errors:
        raise ConfigurationError(errors)
