"""Result normalizer — Map heterogeneous adapter records to ``ResourceDescriptor``.

Each adapter first renames its native fields into a ``RawRecord``; the
shared rules below then coerce values and fill in derived fields. Coercion
is deliberately forgiving: a malformed field becomes ``None``, it never
raises and never produces NaN.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import Any, TypedDict

from magnetsearch.core.magnet import build_magnet, extract_info_hash, is_magnet_uri
from magnetsearch.models.descriptor import UNKNOWN_CATEGORY, UNTITLED, ResourceDescriptor

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")

_SIZE_LABEL_RE = re.compile(r"^\s*(\d+(?:[.,]\d+)?)\s*([KMGTP]?)(i?)B\s*$", re.IGNORECASE)
_TIMESTAMP_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%d")


class RawRecord(TypedDict, total=False):
    """Adapter-agnostic intermediate record.

    Values are whatever the upstream sent (strings, numbers, None); the
    normalizer is responsible for coercing them.
    """

    title: Any
    info_hash: Any
    magnet: Any
    seeders: Any
    leechers: Any
    size: Any
    size_label: Any
    uploaded: Any
    category: Any
    trackers: Any


# ── Coercion helpers ─────────────────────────────────────────────────────


def coerce_int(value: Any) -> int | None:
    """Coerce *value* to a non-negative int, or None if that is not possible.

    Examples:
        >>> coerce_int("350")
        350
        >>> coerce_int("1,024")
        1024
        >>> coerce_int("n/a") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float):
        if not math.isfinite(value) or value < 0:
            return None
        return int(value)
    if isinstance(value, str):
        text = value.strip().replace(",", "").replace("_", "")
        if not text:
            return None
        try:
            number = int(text)
        except ValueError:
            try:
                return coerce_int(float(text))
            except ValueError:
                return None
        return number if number >= 0 else None
    return None


def format_size(size_bytes: int | None) -> str | None:
    """Render a byte count as a human-readable label (``"5.0 GB"``, ``"700 MB"``)."""
    if size_bytes is None or size_bytes < 0:
        return None
    try:
        value = float(size_bytes)
    except OverflowError:
        return None
    unit = 0
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    precision = 1 if value < 10 and unit > 0 else 0
    return f"{value:.{precision}f} {SIZE_UNITS[unit]}"


def parse_size_label(label: Any) -> int | None:
    """Parse a label such as ``"704.9 MiB"`` or ``"2 GB"`` into bytes (binary units)."""
    if not isinstance(label, str):
        return None
    match = _SIZE_LABEL_RE.match(label)
    if not match:
        return None
    number = float(match.group(1).replace(",", "."))
    exponent = "BKMGTP".index(match.group(2).upper() or "B")
    size = number * 1024**exponent
    if not math.isfinite(size):
        return None
    return int(size)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an epoch, ISO-8601, RFC 2822 or ``YYYY-MM-DD HH:MM[:SS]`` value as UTC.

    Naive timestamps are assumed to be UTC. Zero/negative epochs and
    unparseable values yield ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, int | float):
        return _from_epoch(value)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    if text.isascii() and text.isdigit():
        try:
            return _from_epoch(int(text))
        except ValueError:
            return None

    try:
        return _as_utc(datetime.fromisoformat(text))
    except ValueError:
        pass
    for fmt in _TIMESTAMP_FORMATS:
        try:
            return _as_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue
    try:
        return _as_utc(parsedate_to_datetime(text))
    except (TypeError, ValueError, IndexError):
        return None


def normalize_category(value: Any) -> str:
    """Return a category label, mapping blank and ``"0"`` to ``"Unknown"``."""
    text = _clean_str(value)
    if not text or text == "0":
        return UNKNOWN_CATEGORY
    return text


# ── Record normalization ─────────────────────────────────────────────────


def normalize_record(
    record: RawRecord,
    *,
    source: str,
    trackers: Iterable[str] = (),
) -> ResourceDescriptor | None:
    """Apply the shared normalization rules to one adapter record.

    Args:
        record: The adapter's record, already renamed into ``RawRecord`` keys.
        source: Id of the adapter; always wins over any source hint in the record.
        trackers: Default trackers used when the record carries none.

    Returns:
        The descriptor, or None when the record has neither a title nor an
        identifying hash.
    """
    title = _clean_str(record.get("title"))

    magnet = _clean_str(record.get("magnet"))
    if magnet and not is_magnet_uri(magnet):
        magnet = None

    # The magnet URI is authoritative so hash and URI never disagree
    info_hash = extract_info_hash(magnet) or (_clean_str(record.get("info_hash")) or "").upper() or None

    if not title and not info_hash:
        return None

    raw_trackers = record.get("trackers")
    if isinstance(raw_trackers, list | tuple) and raw_trackers:
        tracker_list = [str(t) for t in raw_trackers if t]
    else:
        tracker_list = list(trackers)

    if magnet is None and info_hash:
        magnet = build_magnet(info_hash, title or UNTITLED, tracker_list)

    size_bytes = coerce_int(record.get("size"))
    size_label = _clean_str(record.get("size_label"))
    if size_bytes is None and size_label:
        size_bytes = parse_size_label(size_label)
    if size_label is None:
        size_label = format_size(size_bytes)

    return ResourceDescriptor(
        title=title or UNTITLED,
        magnet_uri=magnet,
        info_hash=info_hash,
        size_bytes=size_bytes,
        size_label=size_label,
        seeders=coerce_int(record.get("seeders")),
        leechers=coerce_int(record.get("leechers")),
        uploaded_at=parse_timestamp(record.get("uploaded")),
        category=normalize_category(record.get("category")),
        trackers=tracker_list,
        source=source,
    )


def _clean_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_utc(value: datetime) -> datetime | None:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    try:
        return value.astimezone(UTC)
    except OverflowError:
        return None


def _from_epoch(value: int | float) -> datetime | None:
    if value <= 0 or (isinstance(value, float) and not math.isfinite(value)):
        return None
    try:
        return datetime.fromtimestamp(value, UTC)
    except (OverflowError, OSError, ValueError):
        return None
