"""Pytest fixtures for core app tests."""

from datetime import datetime, timedelta
from datetime import timezone as dt_timezone

from django.contrib.auth.models import User

import pytest

from core.models import DataOutput, Record, Source

EVOLVING_HOVERTEXT = (
    "Biologists play reverse Pokemon, trying to avoid putting any one team member "
    "on the front lines long enough for the experience to cause evolution."
)


@pytest.fixture
def now():
    return datetime(2024, 1, 1, 12, 0, 0, tzinfo=dt_timezone.utc)


@pytest.fixture
def user(db):
    return User.objects.create_user(
        username="testuser", email="test@example.com", password="password"
    )


@pytest.fixture
def source(db):
    return Source.objects.create(name="XKCD Website")


@pytest.fixture
def other_source(db):
    return Source.objects.create(name="Unrelated Website")


@pytest.fixture
def xkcd_options():
    return {
        "secrets": ["secret1", "secret2"],
        "expected_receive_period_in_days": 2,
        "events_to_show": 2,
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


@pytest.fixture
def data_output(user, source, xkcd_options):
    output = DataOutput.objects.create(name="My Data Output", user=user, options=xkcd_options)
    output.sources.add(source)
    return output


@pytest.fixture
def records(source, now):
    """Two XKCD records, the second one inserted last and newest."""
    event1 = Record.objects.create(
        source=source,
        payload={
            "url": "http://imgs.xkcd.com/comics/evolving.png",
            "title": "Evolving",
            "hovertext": EVOLVING_HOVERTEXT,
        },
        created_at=now - timedelta(hours=2),
    )
    event2 = Record.objects.create(
        source=source,
        payload={
            "url": "http://imgs.xkcd.com/comics/evolving2.png",
            "title": "Evolving again",
            "hovertext": "Something else",
        },
        created_at=now - timedelta(hours=1),
    )
    return [event1, event2]
