"""Facet filter pipeline.

Every stage is a plain predicate ``(listing, selection) -> bool`` that passes
everything when its facet has no selection, so each one can be exercised on a
single synthetic listing. :func:`filter_listings` ANDs them in
:data:`PIPELINE_STAGES` order; a listing flagged ``exact_id_match`` by the
matcher skips every stage.
"""
from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .config import (
    CATEGORY_KEYWORDS,
    LEASE,
    NUMERIC_FACETS,
    OPEN_BUCKET,
    OPEN_BUCKET_MIN,
    PROPERTY_TYPE_KEYWORDS,
    SALE,
    SALE_LEASE,
    UNAVAILABLE_STATUSES,
    ZERO_BUCKET_ALIASES,
)
from .models import FacetSelection, Listing

Stage = Callable[[Listing, FacetSelection], bool]


def normalized_status(listing: Listing) -> str:
    return (listing.status or '').strip().upper()


def numeric_value(listing: Listing, facet: str, transaction: Optional[str] = None) -> float:
    """Value of a numeric facet; price fields follow the transaction type."""
    if facet == 'price':
        return listing.lease_price if transaction == LEASE else listing.price
    if facet == 'price_per_sqm':
        return listing.lease_price_per_sqm if transaction == LEASE else listing.price_per_sqm
    return float(getattr(listing, facet))


def bucket_matches(value: float, label: str) -> bool:
    label = label.strip().upper()
    if label in ZERO_BUCKET_ALIASES:
        return int(value) == 0
    if label == OPEN_BUCKET:
        return value >= OPEN_BUCKET_MIN
    try:
        return int(value) == int(label)
    except ValueError:
        return False


def availability_stage(listing: Listing, selection: FacetSelection) -> bool:
    if selection.show_all:
        return True
    return normalized_status(listing) not in UNAVAILABLE_STATUSES


def transaction_stage(listing: Listing, selection: FacetSelection) -> bool:
    t = selection.transaction
    if t == SALE:
        return listing.price > 0
    if t == LEASE:
        return listing.lease_price > 0
    if t == SALE_LEASE:
        return listing.price > 0 and listing.lease_price > 0
    return True


def category_stage(listing: Listing, selection: FacetSelection) -> bool:
    if not selection.category:
        return True
    needle = CATEGORY_KEYWORDS.get(selection.category, selection.category.lower())
    haystack = f"{listing.category} {listing.category_fallback}".lower()
    return needle in haystack


def geography_stage(listing: Listing, selection: FacetSelection) -> bool:
    for level in ('region', 'province', 'city', 'barangay'):
        wanted = getattr(selection, level)
        if wanted and (getattr(listing, level) or '').strip() != wanted.strip():
            return False
    return True


def direct_stage(listing: Listing, selection: FacetSelection) -> bool:
    return listing.is_direct if selection.direct_only else True


def _numeric_stage(facet: str) -> Stage:
    def stage(listing: Listing, selection: FacetSelection) -> bool:
        f = selection.numeric(facet)
        value = numeric_value(listing, facet, selection.transaction)
        if f.exact is not None:
            return value == f.exact
        if f.range is not None:
            lo, hi = f.range
            return lo <= value <= hi
        return True
    stage.__name__ = f"{facet}_stage"
    return stage


NUMERIC_STAGE_BY_FACET: Dict[str, Stage] = {facet: _numeric_stage(facet) for facet in NUMERIC_FACETS}
price_stage = NUMERIC_STAGE_BY_FACET['price']
price_per_sqm_stage = NUMERIC_STAGE_BY_FACET['price_per_sqm']
lot_area_stage = NUMERIC_STAGE_BY_FACET['lot_area']
floor_area_stage = NUMERIC_STAGE_BY_FACET['floor_area']


def bedrooms_stage(listing: Listing, selection: FacetSelection) -> bool:
    if not selection.bedrooms:
        return True
    return any(bucket_matches(listing.bedrooms, b) for b in selection.bedrooms)


def parking_stage(listing: Listing, selection: FacetSelection) -> bool:
    if not selection.parking:
        return True
    return any(bucket_matches(listing.parking, b) for b in selection.parking)


def property_type_stage(listing: Listing, selection: FacetSelection) -> bool:
    if not selection.property_types:
        return True
    desc = (listing.type_description or '').upper()
    for label in selection.property_types:
        keywords = PROPERTY_TYPE_KEYWORDS.get(label.upper(), (label.upper(),))
        if any(k in desc for k in keywords):
            return True
    return False


NUMERIC_STAGES: Tuple[Stage, ...] = tuple(NUMERIC_STAGE_BY_FACET.values())

PIPELINE_STAGES: Tuple[Stage, ...] = (
    availability_stage,
    transaction_stage,
    category_stage,
    geography_stage,
    direct_stage,
    *NUMERIC_STAGES,
    bedrooms_stage,
    parking_stage,
    property_type_stage,
)


def passes(listing: Listing, selection: FacetSelection, stages: Sequence[Stage] = PIPELINE_STAGES) -> bool:
    if listing.exact_id_match:
        return True
    return all(stage(listing, selection) for stage in stages)


def filter_listings(
    listings: Sequence[Listing],
    selection: FacetSelection,
    stages: Sequence[Stage] = PIPELINE_STAGES,
) -> List[Listing]:
    """Keep listings passing every stage, preserving order."""
    return [l for l in listings if passes(l, selection, stages)]


def without_numeric_stages() -> Tuple[Stage, ...]:
    """Pipeline minus the numeric ranges, used to size the range selectors."""
    return tuple(s for s in PIPELINE_STAGES if s not in NUMERIC_STAGES)
