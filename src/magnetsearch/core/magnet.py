"""Magnet URI parsing and construction.

A magnet URI carries only identity data (info-hash, display name, trackers),
so descriptors produced here never have size, seeder or leecher counts.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from urllib.parse import parse_qsl, quote_plus, urlsplit

from magnetsearch.core.errors import InvalidMagnetURI
from magnetsearch.models.descriptor import ResourceDescriptor

MAGNET_PREFIX = "magnet:?"
MAGNET_SOURCE = "magnet-link"
MAGNET_CATEGORY = "Direct Magnet"
DEFAULT_MAGNET_TITLE = "Magnet Link"

_BTIH_URN = "urn:btih:"
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def is_magnet_uri(text: str) -> bool:
    """Return True if *text* starts with ``magnet:?`` (case-insensitive, trimmed)."""
    return text.strip().lower().startswith(MAGNET_PREFIX)


def parse_magnet(uri: str) -> ResourceDescriptor:
    """Parse a magnet URI into a ``ResourceDescriptor``.

    Args:
        uri: The magnet URI. Surrounding whitespace is ignored.

    Returns:
        A descriptor with title, info-hash and trackers taken from the URI.

    Raises:
        InvalidMagnetURI: If the URI is malformed or its scheme is not ``magnet``.
    """
    candidate = uri.strip()
    if _CONTROL_CHARS.search(candidate):
        raise InvalidMagnetURI("Invalid magnet link: URI contains control characters")

    try:
        parts = urlsplit(candidate)
    except ValueError as e:
        raise InvalidMagnetURI(f"Invalid magnet link: {e}") from e

    if parts.scheme != "magnet":
        raise InvalidMagnetURI("Only magnet links are supported")

    params = parse_qsl(parts.query, keep_blank_values=True)

    display_name = next((value for key, value in params if key == "dn"), "")
    trackers = [value for key, value in params if key == "tr"]

    return ResourceDescriptor(
        title=display_name if display_name.strip() else DEFAULT_MAGNET_TITLE,
        magnet_uri=candidate,
        info_hash=_info_hash_from_params(params),
        trackers=trackers,
        seeders=None,
        leechers=None,
        size_bytes=None,
        category=MAGNET_CATEGORY,
        source=MAGNET_SOURCE,
    )


def extract_info_hash(magnet_uri: str | None) -> str | None:
    """Best-effort info-hash extraction; returns None instead of raising."""
    if not magnet_uri or not is_magnet_uri(magnet_uri):
        return None
    try:
        parts = urlsplit(magnet_uri.strip())
    except ValueError:
        return None
    return _info_hash_from_params(parse_qsl(parts.query, keep_blank_values=True))


def build_magnet(info_hash: str, title: str, trackers: Iterable[str] = ()) -> str:
    """Compose a magnet URI from a bare info-hash, a display name and trackers."""
    uri = f"{MAGNET_PREFIX}xt={_BTIH_URN}{info_hash.upper()}&dn={quote_plus(title)}"
    for tracker in trackers:
        uri += f"&tr={quote_plus(tracker)}"
    return uri


def _info_hash_from_params(params: list[tuple[str, str]]) -> str | None:
    topics = [value for key, value in params if key == "xt"]
    if not topics:
        return None
    # Prefer the BitTorrent v1 topic when several exact topics are present
    topic = next((t for t in topics if t.lower().startswith(_BTIH_URN)), topics[0])
    info_hash = topic.rsplit(":", 1)[-1].strip().upper()
    return info_hash or None
