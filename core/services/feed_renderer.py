"""Feed rendering for data outputs.

Builds one in-memory document from a data output template and a window of
records, then serializes it as RSS 2.0 or as a JSON-ready dict. Both
serializers read the same FeedDocument, so the two formats always agree on
items, order and values.

Item templates use ``<$.key>`` placeholders that are replaced with values
from the record payload (``<$.a.b>`` walks nested mappings). Placeholders
for missing keys become empty strings.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from io import StringIO
from typing import Any, Dict, List, Mapping, Sequence

from django.utils.feedgenerator import rfc2822_date
from django.utils.xmlutils import SimplerXMLGenerator, UnserializableContentError

from core.choices import DEFAULT_TTL, OutputFormat
from core.exceptions import RenderError

logger = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(r"<\$\.([^<>\s]+)>")

# Channel keys with a fixed meaning; everything else is free-form metadata
CHANNEL_FIELDS = ("item", "title", "description", "link", "ttl", "pubDate", "lastBuildDate")

# Item keys interpreted by the renderer
ITEM_FIELDS = ("title", "description", "link")

# Item keys always computed from the record, never taken from the template
COMPUTED_ITEM_FIELDS = ("guid", "pubDate")


@dataclass(frozen=True)
class FeedItem:
    """A single rendered record."""

    title: str
    description: str
    link: str
    guid: Any
    pub_date: datetime
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FeedDocument:
    """Rendered feed shared by the RSS and JSON serializers."""

    title: str
    description: str
    link: str
    ttl: int
    pub_date: datetime
    last_build_date: datetime
    items: List[FeedItem] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)


def _lookup(payload: Any, path: str) -> Any:
    value = payload
    for part in path.split("."):
        if isinstance(value, Mapping):
            value = value.get(part)
        elif isinstance(value, (list, tuple)) and part.isdigit() and int(part) < len(value):
            value = value[int(part)]
        else:
            return None
        if value is None:
            return None
    return value


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def interpolate(template: Any, payload: Mapping[str, Any]) -> Any:
    """
    Replace ``<$.key>`` placeholders in a template string.

    No expressions are evaluated; a placeholder is only ever replaced by
    the text of a payload value.

    Args:
        template: Template value from the options document
        payload: Record payload

    Returns:
        The interpolated string, or the template unchanged if it is not a string
    """
    if not isinstance(template, str):
        return template

    def replace(match):
        return _text(_lookup(payload, match.group(1)))

    return PLACEHOLDER_RE.sub(replace, template)


def _parse_ttl(value: Any) -> int:
    try:
        ttl = int(value)
    except (TypeError, ValueError):
        return DEFAULT_TTL
    return ttl if ttl > 0 else DEFAULT_TTL


def build_item(item_template: Mapping[str, Any], record) -> FeedItem:
    """Render one record through the item template."""
    payload = record.payload if isinstance(record.payload, Mapping) else {}
    rendered = {key: interpolate(value, payload) for key, value in item_template.items()}

    extra = {
        key: value
        for key, value in rendered.items()
        if key not in ITEM_FIELDS and key not in COMPUTED_ITEM_FIELDS
    }
    return FeedItem(
        title=_text(rendered.get("title")),
        description=_text(rendered.get("description")),
        link=_text(rendered.get("link")),
        guid=record.pk,
        pub_date=record.created_at,
        extra=extra,
    )


def build_document(
    template: Any,
    records: Sequence,
    now: datetime,
    default_link: str = "",
) -> FeedDocument:
    """
    Build the feed document for a window of records.

    Args:
        template: The ``template`` section of the options document
        records: Records to render, newest first
        now: Render time, used for pubDate and lastBuildDate
        default_link: Channel link used when the template has none

    Returns:
        FeedDocument with one item per record, in the given order

    Raises:
        RenderError: If the template or its item section is not a non-empty mapping
    """
    if not isinstance(template, Mapping) or not template:
        raise RenderError("Template must be a non-empty mapping")
    item_template = template.get("item")
    if not isinstance(item_template, Mapping) or not item_template:
        raise RenderError("template.item must be a non-empty mapping")

    items = [build_item(item_template, record) for record in records]
    logger.debug(f"Built feed document with {len(items)} items")

    return FeedDocument(
        title=_text(template.get("title")),
        description=_text(template.get("description")),
        link=_text(template.get("link") or default_link),
        ttl=_parse_ttl(template.get("ttl", DEFAULT_TTL)),
        pub_date=now,
        last_build_date=now,
        items=items,
        extra={key: value for key, value in template.items() if key not in CHANNEL_FIELDS},
    )


def render_rss(document: FeedDocument, encoding: str = "UTF-8") -> str:
    """
    Serialize a feed document as RSS 2.0.

    Args:
        document: Document built by build_document
        encoding: Declared document encoding

    Returns:
        The XML document as text

    Raises:
        RenderError: If a rendered value cannot be represented in XML
    """
    out = StringIO()
    handler = SimplerXMLGenerator(out, encoding)
    try:
        _write_channel(handler, document)
    except UnserializableContentError as e:
        raise RenderError(f"Cannot serialize feed as XML: {e}") from e
    return out.getvalue()


def _write_channel(handler: SimplerXMLGenerator, document: FeedDocument) -> None:
    handler.startDocument()
    handler.startElement("rss", {"version": "2.0"})
    handler.startElement("channel", {})
    handler.addQuickElement("title", document.title)
    handler.addQuickElement("description", document.description)
    handler.addQuickElement("link", document.link)
    handler.addQuickElement("lastBuildDate", rfc2822_date(document.last_build_date))
    handler.addQuickElement("pubDate", rfc2822_date(document.pub_date))
    handler.addQuickElement("ttl", str(document.ttl))

    for item in document.items:
        handler.startElement("item", {})
        handler.addQuickElement("title", item.title)
        handler.addQuickElement("description", item.description)
        handler.addQuickElement("link", item.link)
        handler.addQuickElement("guid", str(item.guid), {"isPermaLink": "false"})
        handler.addQuickElement("pubDate", rfc2822_date(item.pub_date))
        handler.endElement("item")

    handler.endElement("channel")
    handler.endElement("rss")


def render_json(document: FeedDocument) -> Dict[str, Any]:
    """
    Serialize a feed document as a JSON-ready dict.

    The channel pubDate stays a datetime so the JSON encoder writes it as
    a timestamp. Item pubDates use the RFC 2822 format of the RSS output.

    Args:
        document: Document built by build_document

    Returns:
        Dict with title, description, pubDate, extra channel metadata and items
    """
    data: Dict[str, Any] = {
        "title": document.title,
        "description": document.description,
        "pubDate": document.pub_date,
    }
    data.update(document.extra)
    data["items"] = [_item_to_dict(item) for item in document.items]
    return data


def _item_to_dict(item: FeedItem) -> Dict[str, Any]:
    data = {
        "title": item.title,
        "description": item.description,
        "link": item.link,
        "guid": item.guid,
        "pubDate": rfc2822_date(item.pub_date),
    }
    data.update(item.extra)
    return data


def render(
    output_format: str,
    template: Any,
    records: Sequence,
    now: datetime,
    default_link: str = "",
) -> Any:
    """Build the document once and serialize it in the requested format."""
    document = build_document(template, records, now, default_link)
    if output_format == OutputFormat.JSON:
        return render_json(document)
    return render_rss(document)

