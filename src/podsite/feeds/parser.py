"""RSS feed parser using defusedxml.

Field extraction is table driven: ``CHANNEL_FIELDS`` and ``ITEM_FIELDS`` map
each output field to the feed paths it is read from. Paths use namespace
prefixes (``itunes:``, ``content:``) and ``@attr`` for attribute access, e.g.
``itunes:image@href`` reads the ``href`` attribute of ``<itunes:image>``.
Candidate paths are tried in order and the first non-empty value wins.
Missing fields are left out of the result so the model defaults apply.
"""

import logging
import re
import xml.etree.ElementTree as ET  # nosec B405
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import ParseError, fromstring

from podsite.feeds.models import PodcastChannel
from podsite.utils.errors import MalformedFeedError

logger = logging.getLogger(__name__)

# Several feeds in the wild use the mixed-case iTunes DTD URI
NAMESPACES: dict[str, tuple[str, ...]] = {
    "itunes": (
        "http://www.itunes.com/dtds/podcast-1.0.dtd",
        "http://www.itunes.com/DTDs/Podcast-1.0.dtd",
    ),
    "content": ("http://purl.org/rss/1.0/modules/content/",),
}

TEXT_KEY = "#text"
ATTRIBUTE_PREFIX = "@"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: str) -> int | None:
    """Parse the leading integer of a string (``"12"``, ``"12a"`` -> 12).

    Returns None when the string does not start with digits.
    """
    match = _LEADING_INT.match(value)
    if match is None:
        return None
    return int(match.group(1))


def wrapped_value(element: ET.Element) -> str | dict[str, str]:
    """Return element text, or a dict with ``#text`` and ``@attr`` keys.

    Used for elements like ``<guid isPermaLink="false">`` where the payload
    sits next to attributes.
    """
    text = (element.text or "").strip()
    if not element.attrib:
        return text
    value = {f"{ATTRIBUTE_PREFIX}{_local_name(k)}": v for k, v in element.attrib.items()}
    value[TEXT_KEY] = text
    return value


@dataclass(frozen=True)
class FieldSpec:
    """How one output field is read from the feed."""

    name: str
    paths: tuple[str, ...]
    convert: Callable[[str], Any] | None = None
    # Hand over the whole element (text and attributes) instead of its text
    wrapped: bool = False


CHANNEL_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("title", ("title",)),
    FieldSpec("description", ("description",)),
    FieldSpec("image", ("itunes:image@href", "image/url")),
    FieldSpec("language", ("language",)),
    FieldSpec("link", ("link",)),
    FieldSpec("last_build_date", ("lastBuildDate",)),
    FieldSpec("copyright", ("copyright",)),
    FieldSpec("author", ("itunes:author", "managingEditor")),
)

ITEM_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("guid", ("guid",), wrapped=True),
    FieldSpec("title", ("title",)),
    FieldSpec("description", ("description",)),
    FieldSpec("pub_date", ("pubDate",)),
    FieldSpec("duration", ("itunes:duration",)),
    FieldSpec("enclosure_url", ("enclosure@url",)),
    FieldSpec("image", ("itunes:image@href",)),
    FieldSpec("episode_number", ("itunes:episode",), convert=parse_int),
    FieldSpec("season", ("itunes:season",), convert=parse_int),
    FieldSpec("episode_type", ("itunes:episodeType",)),
    FieldSpec("subtitle", ("itunes:subtitle",)),
    FieldSpec("summary", ("itunes:summary",)),
    FieldSpec("content_encoded", ("content:encoded",)),
)


@dataclass(frozen=True)
class ParsedFeed:
    """Channel metadata plus the raw item mappings, in feed order."""

    channel: PodcastChannel
    items: list[dict[str, Any]] = field(default_factory=list)


def _split_tag(tag: str) -> tuple[str, str]:
    if tag.startswith("{"):
        namespace, _, local = tag[1:].partition("}")
        return namespace, local
    return "", tag


def _local_name(tag: str) -> str:
    return _split_tag(tag)[1]


def _matches(tag: Any, segment: str) -> bool:
    # Comments and processing instructions have non-string tags
    if not isinstance(tag, str):
        return False
    prefix, _, local = segment.rpartition(":")
    namespace, tag_local = _split_tag(tag)
    if tag_local != local:
        return False
    if prefix:
        return namespace in NAMESPACES.get(prefix, ())
    return namespace == ""


def find_element(element: ET.Element, path: str) -> ET.Element | None:
    """Find the first descendant matching a ``/``-separated prefixed path."""
    current: ET.Element | None = element
    for segment in path.split("/"):
        if current is None:
            return None
        current = next((child for child in current if _matches(child.tag, segment)), None)
    return current


def find_all(element: ET.Element, segment: str) -> list[ET.Element]:
    """Return all direct children matching a single path segment."""
    return [child for child in element if _matches(child.tag, segment)]


def extract_field(element: ET.Element, spec: FieldSpec) -> Any:
    """Read one field from an element according to its spec.

    Returns:
        Converted value, or None when no candidate path yields a value
    """
    for path in spec.paths:
        element_path, _, attribute = path.partition("@")
        target = find_element(element, element_path)
        if target is None:
            continue

        if spec.wrapped:
            value = wrapped_value(target)
            if value:
                return value
            continue

        if attribute:
            raw = (target.get(attribute) or "").strip()
        else:
            raw = (target.text or "").strip()
        if not raw:
            continue

        if spec.convert is None:
            return raw
        converted = spec.convert(raw)
        if converted is not None:
            return converted

    return None


def extract_fields(element: ET.Element, specs: tuple[FieldSpec, ...]) -> dict[str, Any]:
    """Apply a field table to an element, leaving out missing fields."""
    values = {}
    for spec in specs:
        value = extract_field(element, spec)
        if value is not None:
            values[spec.name] = value
    return values


class RSSParser:
    """Parses RSS documents into channel metadata and raw episode items."""

    def parse(self, xml_text: str) -> ParsedFeed:
        """Parse an RSS document.

        Args:
            xml_text: Raw XML text of the feed

        Returns:
            ParsedFeed with the channel and one raw mapping per ``<item>``

        Raises:
            MalformedFeedError: If the XML is unparsable or has no channel
        """
        root = self._parse_xml(xml_text)
        channel_element = self._find_channel(root)
        if channel_element is None:
            raise MalformedFeedError("Invalid RSS feed: no channel found")

        channel = PodcastChannel(**extract_fields(channel_element, CHANNEL_FIELDS))

        # Zero, one or many <item> elements all come back as a list
        items = [extract_fields(item, ITEM_FIELDS) for item in find_all(channel_element, "item")]

        logger.debug(f"Parsed channel '{channel.title}' with {len(items)} item(s)")
        return ParsedFeed(channel=channel, items=items)

    def _parse_xml(self, xml_text: str) -> ET.Element:
        try:
            return fromstring(xml_text)
        except (ParseError, DefusedXmlException) as e:
            raise MalformedFeedError(f"Invalid RSS feed: {e}") from e

    def _find_channel(self, root: ET.Element) -> ET.Element | None:
        local = _local_name(root.tag)
        if local == "channel":
            return root
        if local == "rss":
            return find_element(root, "channel")
        return None
