from __future__ import annotations

import math
from typing import Sequence

from .models import Listing, Page


def total_pages(count: int, page_size: int) -> int:
    return math.ceil(count / page_size) if count > 0 else 0


def clamp_page(page: int, pages: int) -> int:
    if pages <= 0:
        return 1
    return min(max(1, page), pages)


def paginate(items: Sequence[Listing], page: int, page_size: int) -> Page:
    """Slice ``items`` into the requested fixed-size page.

    Out-of-range pages are clamped; an empty result is page 1 of 0.
    """
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    pages = total_pages(len(items), page_size)
    current = clamp_page(page, pages)
    start = (current - 1) * page_size
    return Page(
        items=tuple(items[start:start + page_size]),
        page=current,
        page_size=page_size,
        total=len(items),
        total_pages=pages,
    )


def page_range(pages: int, current: int, radius: int = 2) -> range:
    """Page numbers around ``current`` for a pager widget."""
    if pages <= 0:
        return range(1, 1)
    start = max(1, current - radius)
    end = min(pages, current + radius)
    return range(start, end + 1)
