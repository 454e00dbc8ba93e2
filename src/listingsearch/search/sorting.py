from __future__ import annotations

from typing import List, Optional, Sequence

from .config import ASC, AVAILABLE_STATUS, NUMERIC_FACETS, SORT_KEYS
from .filters import numeric_value
from .models import Listing, SortState


def is_available(listing: Listing) -> bool:
    return (listing.status or '').strip().lower() == AVAILABLE_STATUS


def sort_value(listing: Listing, key: str, transaction: Optional[str] = None) -> float:
    field = SORT_KEYS[key]
    if field in NUMERIC_FACETS:
        return numeric_value(listing, field, transaction)
    return float(getattr(listing, field))


def sort_listings(
    listings: Sequence[Listing],
    sort: Optional[SortState],
    transaction: Optional[str] = None,
) -> List[Listing]:
    """Order listings for display without touching the input.

    Available listings always come first. With no active sort, listings that
    carry a social link precede those without one and input (relevance)
    order is kept otherwise; with a sort key the field suited to the
    transaction type is compared in the stored direction.
    """
    if sort is None:
        return sorted(listings, key=lambda l: (not is_available(l), not (l.facebook_link or '').strip()))
    sign = 1.0 if sort.direction == ASC else -1.0
    return sorted(listings, key=lambda l: (not is_available(l), sign * sort_value(l, sort.key, transaction)))
