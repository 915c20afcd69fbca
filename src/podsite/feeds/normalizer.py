"""Per-item episode normalization and ordering."""

import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

from dateutil import parser as date_parser

from podsite.feeds.models import EPISODE_TYPES, PodcastEpisode
from podsite.feeds.parser import TEXT_KEY

logger = logging.getLogger(__name__)

DEFAULT_REDIRECTOR_PREFIXES: tuple[str, ...] = ("https://r.zen.ai/r/",)
MAX_ID_LENGTH = 100
UNDATED = "undated"

# North American zone names allowed in RFC 822 dates, as UTC offsets in seconds
RFC822_ZONES: dict[str, int] = {
    "UT": 0,
    "EST": -5 * 3600,
    "EDT": -4 * 3600,
    "CST": -6 * 3600,
    "CDT": -5 * 3600,
    "MST": -7 * 3600,
    "MDT": -6 * 3600,
    "PST": -8 * 3600,
    "PDT": -7 * 3600,
}

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

# Raw item keys copied straight onto the episode model when present
_PASSTHROUGH_FIELDS = (
    "title",
    "description",
    "pub_date",
    "duration",
    "image",
    "episode_number",
    "season",
    "subtitle",
    "summary",
)


def extract_guid(guid: Any) -> str:
    """Return the GUID string from a plain or wrapped (``#text``) value."""
    if isinstance(guid, str):
        return guid
    if isinstance(guid, Mapping) and TEXT_KEY in guid:
        return str(guid[TEXT_KEY])
    return ""


def resolve_audio_url(
    url: str, redirector_prefixes: Iterable[str] = DEFAULT_REDIRECTOR_PREFIXES
) -> str:
    """Strip a tracking redirector, recovering the direct audio URL.

    ``https://r.zen.ai/r/cdn.example.com/ep.mp3`` becomes
    ``https://cdn.example.com/ep.mp3``. Other URLs are returned unchanged.
    """
    for prefix in redirector_prefixes:
        if url.startswith(prefix):
            return "https://" + url[len(prefix):]
    return url


def parse_pub_date(value: str | None) -> datetime | None:
    """Parse a publish date into an aware UTC datetime.

    Naive values are taken as UTC. Returns None for missing or unparsable
    input.
    """
    if not value:
        return None
    try:
        parsed = date_parser.parse(value, tzinfos=RFC822_ZONES)
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None


def slugify(text: str) -> str:
    """Lowercase and collapse runs of non-alphanumerics into single hyphens."""
    return _NON_ALNUM.sub("-", text.lower()).strip("-")


def generate_episode_id(title: str, pub_date: str) -> str:
    """Build a stable id from publish date and title.

    The id is ``{YYYY-MM-DD}-{title-slug}`` truncated to 100 characters,
    using the UTC date. Unparsable dates use ``undated`` as the date part.
    """
    parsed = parse_pub_date(pub_date)
    date_slug = parsed.date().isoformat() if parsed else UNDATED
    return f"{date_slug}-{slugify(title)}"[:MAX_ID_LENGTH]


def coerce_episode_type(value: Any) -> str:
    """Validate ``itunes:episodeType``; unknown or missing values become ``full``."""
    if isinstance(value, str) and value.strip().lower() in EPISODE_TYPES:
        return value.strip().lower()
    if value:
        logger.debug(f"Unknown episode type {value!r}, using 'full'")
    return "full"


def normalize_episode(
    raw: Mapping[str, Any],
    redirector_prefixes: Iterable[str] = DEFAULT_REDIRECTOR_PREFIXES,
) -> PodcastEpisode:
    """Turn one raw feed item into a PodcastEpisode.

    Args:
        raw: Item mapping as produced by RSSParser
        redirector_prefixes: Redirector URL prefixes to strip from enclosures

    Returns:
        Normalized episode; absent optional fields take the model defaults
    """
    guid = extract_guid(raw.get("guid"))
    audio_url = resolve_audio_url(raw.get("enclosure_url") or "", redirector_prefixes)
    episode_id = guid or generate_episode_id(raw.get("title") or "", raw.get("pub_date") or "")

    # Empty strings fall back to the model defaults, as missing fields do
    values: dict[str, Any] = {
        name: raw[name] for name in _PASSTHROUGH_FIELDS if raw.get(name) not in (None, "")
    }

    show_notes = raw.get("content_encoded") or raw.get("description")
    if show_notes:
        values["show_notes"] = show_notes

    return PodcastEpisode(
        id=episode_id,
        audio_url=audio_url,
        episode_type=coerce_episode_type(raw.get("episode_type")),
        **values,
    )


def normalize_episodes(
    items: Iterable[Mapping[str, Any]],
    redirector_prefixes: Iterable[str] = DEFAULT_REDIRECTOR_PREFIXES,
) -> list[PodcastEpisode]:
    """Normalize every raw item, preserving feed order."""
    prefixes = tuple(redirector_prefixes)
    return [normalize_episode(item, prefixes) for item in items]


def sort_episodes(episodes: Sequence[PodcastEpisode]) -> list[PodcastEpisode]:
    """Sort newest first by publish date.

    Episodes whose date cannot be parsed go after every dated episode and
    keep their relative feed order.
    """

    def sort_key(episode: PodcastEpisode) -> tuple[bool, float]:
        parsed = parse_pub_date(episode.pub_date)
        if parsed is None:
            return (False, 0.0)
        return (True, parsed.timestamp())

    # reverse=True keeps the sort stable for equal keys
    return sorted(episodes, key=sort_key, reverse=True)
