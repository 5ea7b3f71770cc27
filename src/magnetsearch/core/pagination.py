"""Pagination controller — Slice result sets into pages.

Two modes:

- **Compute** (``paginate``) — the full result list is known, so the slice
  and every navigation flag are computed locally.
- **Pass-through** (``paginate_remote``) — the source paged remotely and
  cannot report a total, so ``total_pages`` is ``None`` and ``has_next_page``
  is the source's own signal, never a guess.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

from magnetsearch.models.descriptor import ResourceDescriptor
from magnetsearch.models.response import PageView


def clamp_page(value: Any) -> int:
    """Coerce a requested page to an integer ≥ 1.

    Non-integers (``None``, ``2.5``, ``"abc"``, booleans) and values below 1
    become 1. Integral strings such as ``"3"`` are accepted.
    """
    if isinstance(value, bool):
        return 1
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            return 1
    if not isinstance(value, int):
        return 1
    return max(1, value)


def paginate(items: Sequence[ResourceDescriptor], requested_page: Any, page_size: int) -> PageView:
    """Slice a complete result set and compute its navigation metadata."""
    _check_page_size(page_size)
    page = clamp_page(requested_page)

    start = (page - 1) * page_size
    end = start + page_size
    total_pages = max(1, math.ceil(len(items) / page_size))

    return PageView(
        current_page=page,
        page_size=page_size,
        has_prev_page=page > 1,
        has_next_page=end < len(items),
        total_pages=total_pages,
        page_items=list(items[start:end]),
    )


def paginate_remote(
    items: Sequence[ResourceDescriptor],
    requested_page: Any,
    page_size: int,
    *,
    has_next: bool,
) -> PageView:
    """Wrap a page that the source already sliced remotely."""
    _check_page_size(page_size)
    page = clamp_page(requested_page)

    return PageView(
        current_page=page,
        page_size=page_size,
        has_prev_page=page > 1,
        has_next_page=has_next,
        total_pages=None,
        page_items=list(items[:page_size]),
    )


def _check_page_size(page_size: int) -> None:
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
