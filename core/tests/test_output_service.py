import xml.etree.ElementTree as ET
from datetime import timedelta

from django.utils.feedgenerator import rfc2822_date

import pytest

from core.choices import OutputFormat
from core.models import Record
from core.services import OutputService
from core.services.output_service import negotiate_format


class TestNegotiateFormat:
    @pytest.mark.parametrize(
        "suffix,accept,expected",
        [
            ("json", None, OutputFormat.JSON),
            ("xml", "application/json", OutputFormat.RSS),
            ("rss", None, OutputFormat.RSS),
            (None, "application/json", OutputFormat.JSON),
            (None, "Application/JSON; charset=utf-8", OutputFormat.JSON),
            (None, "text/xml", OutputFormat.RSS),
            (None, None, OutputFormat.RSS),
            ("unknown", "application/json", OutputFormat.JSON),
        ],
    )
    def test_negotiation(self, suffix, accept, expected):
        assert negotiate_format(suffix, accept) == expected


@pytest.mark.django_db
class TestHandleWebRequest:
    def test_requires_a_valid_secret(self, data_output, records):
        content, status, content_type = OutputService.handle_web_request(
            data_output, {"secret": "fake"}, "get", OutputFormat.RSS
        )
        assert status == 401
        assert content == "Not Authorized"
        assert content_type == "text/plain"

        content, status, content_type = OutputService.handle_web_request(
            data_output, {"secret": "fake"}, "get", OutputFormat.JSON
        )
        assert status == 401
        assert content == {"error": "Not Authorized"}

        content, status, content_type = OutputService.handle_web_request(
            data_output, {}, "get", OutputFormat.JSON
        )
        assert status == 401

        content, status, content_type = OutputService.handle_web_request(
            data_output, {"secret": "secret1"}, "get", OutputFormat.JSON
        )
        assert status == 200

    def test_rejects_writes(self, data_output):
        content, status, _ = OutputService.handle_web_request(
            data_output, {"secret": "secret1"}, "post", OutputFormat.JSON
        )
        assert status == 405
        assert content == {"error": "Method Not Allowed"}

    def test_outputs_rss(self, data_output, records, now):
        event1, event2 = records
        content, status, content_type = OutputService.handle_web_request(
            data_output,
            {"secret": "secret1"},
            "get",
            OutputFormat.RSS,
            now=now,
            feed_link="https://yoursite.com",
        )

        assert status == 200
        assert content_type == "text/xml"
        channel = ET.fromstring(content.encode("utf-8")).find("channel")
        assert channel.findtext("title") == "XKCD comics as a feed"
        assert channel.findtext("link") == "https://yoursite.com"
        assert channel.findtext("lastBuildDate") == rfc2822_date(now)
        assert channel.findtext("pubDate") == rfc2822_date(now)
        assert channel.findtext("ttl") == "60"

        items = channel.findall("item")
        assert len(items) == 2
        assert items[0].findtext("title") == "Evolving again"
        assert items[0].findtext("description") == "Secret hovertext: Something else"
        assert items[0].findtext("link") == "http://imgs.xkcd.com/comics/evolving2.png"
        assert items[0].findtext("guid") == str(event2.id)
        assert items[0].findtext("pubDate") == rfc2822_date(event2.created_at)
        assert items[1].findtext("title") == "Evolving"
        hovertext = event1.payload["hovertext"]
        assert items[1].findtext("description") == f"Secret hovertext: {hovertext}"
        assert items[1].findtext("guid") == str(event1.id)

    def test_outputs_json_with_extra_fields(self, data_output, records, now):
        event1, event2 = records
        data_output.options["template"]["item"]["foo"] = "hi"

        content, status, content_type = OutputService.handle_web_request(
            data_output, {"secret": "secret2"}, "get", OutputFormat.JSON, now=now
        )

        assert status == 200
        assert content_type == "application/json"
        assert content == {
            "title": "XKCD comics as a feed",
            "description": "This is a feed of recent XKCD comics, generated by Herald",
            "pubDate": now,
            "items": [
                {
                    "title": "Evolving again",
                    "description": "Secret hovertext: Something else",
                    "link": "http://imgs.xkcd.com/comics/evolving2.png",
                    "guid": event2.id,
                    "pubDate": rfc2822_date(event2.created_at),
                    "foo": "hi",
                },
                {
                    "title": "Evolving",
                    "description": f"Secret hovertext: {event1.payload['hovertext']}",
                    "link": "http://imgs.xkcd.com/comics/evolving.png",
                    "guid": event1.id,
                    "pubDate": rfc2822_date(event1.created_at),
                    "foo": "hi",
                },
            ],
        }

    def test_events_to_show_limits_window(self, data_output, records, source, now):
        Record.objects.create(
            source=source, payload={"title": "Newest"}, created_at=now - timedelta(minutes=5)
        )
        content, _, _ = OutputService.handle_web_request(
            data_output, {"secret": "secret1"}, "get", OutputFormat.JSON, now=now
        )
        assert [item["title"] for item in content["items"]] == ["Newest", "Evolving again"]

    def test_other_sources_are_ignored(self, data_output, records, other_source, now):
        Record.objects.create(source=other_source, payload={"title": "Intruder"}, created_at=now)
        content, _, _ = OutputService.handle_web_request(
            data_output, {"secret": "secret1"}, "get", OutputFormat.JSON, now=now
        )
        assert "Intruder" not in [item["title"] for item in content["items"]]

    def test_empty_window(self, data_output, now):
        content, status, _ = OutputService.handle_web_request(
            data_output, {"secret": "secret1"}, "get", OutputFormat.JSON, now=now
        )
        assert status == 200
        assert content["items"] == []

    def test_feed_link_defaults_to_base_url(self, data_output, now, settings):
        settings.BASE_URL = "https://herald.example"
        content, _, _ = OutputService.handle_web_request(
            data_output, {"secret": "secret1"}, "get", OutputFormat.RSS, now=now
        )
        channel = ET.fromstring(content.encode("utf-8")).find("channel")
        assert channel.findtext("link") == "https://herald.example"

    def test_unauthorized_request_does_not_touch_records(self, data_output, records):
        before = list(Record.objects.values_list("id", "payload"))
        OutputService.handle_web_request(data_output, {"secret": "fake"}, "get", OutputFormat.RSS)
        assert list(Record.objects.values_list("id", "payload")) == before


@pytest.mark.django_db
class TestReceiveRecords:
    def test_marks_last_receive_at(self, data_output, records, now):
        count = OutputService.receive_records(data_output, [r.id for r in records], now=now)

        assert count == 2
        data_output.refresh_from_db()
        assert data_output.last_receive_at == now

    def test_ignores_records_from_other_sources(self, data_output, other_source, now):
        foreign = Record.objects.create(source=other_source, payload={}, created_at=now)

        assert OutputService.receive_records(data_output, [foreign.id], now=now) == 0
        data_output.refresh_from_db()
        assert data_output.last_receive_at is None


@pytest.mark.django_db
class TestGetStatus:
    def test_status(self, data_output, records, now):
        OutputService.receive_records(data_output, [records[1].id], now=now)

        status = OutputService.get_status(data_output, now=now + timedelta(days=1))
        assert status == {
            "id": data_output.id,
            "name": "My Data Output",
            "working": True,
            "last_receive_at": now,
            "expected_receive_period_in_days": 2,
        }

        assert OutputService.get_status(data_output, now=now + timedelta(days=3))["working"] is False
