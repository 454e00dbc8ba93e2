"""Pure reducers over :class:`FacetSelection`, :class:`SortState` and
:class:`SearchState`.

Each reducer returns a new value and applies its cascade in one step: a
region change clears province, city and barangay in the same returned
selection, and any change that can alter the result set resets the page.
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple

from ..errors import InvalidFacetError
from .config import (
    ASC,
    BEDROOM_BUCKETS,
    CATEGORY_KEYWORDS,
    DESC,
    NUMERIC_FACETS,
    PARKING_BUCKETS,
    PROPERTY_TYPE_KEYWORDS,
    RELEVANCE_SORT,
    SORT_KEYS,
    TRANSACTION_TYPES,
)
from .models import FacetSelection, NumericFilter, SearchState, SortState
from .parsing import parse_manual_value

logger = logging.getLogger(__name__)

GEO_LEVELS: Tuple[str, ...] = ('region', 'province', 'city', 'barangay')


def _toggle(values: Tuple[str, ...], value: str) -> Tuple[str, ...]:
    if value in values:
        return tuple(v for v in values if v != value)
    return values + (value,)


def _check_numeric(facet: str) -> None:
    if facet not in NUMERIC_FACETS:
        raise InvalidFacetError(f"unknown numeric facet: {facet!r}")


# facet selection

def select_transaction(sel: FacetSelection, transaction: Optional[str]) -> FacetSelection:
    """Choose a transaction type; choosing the active one again clears it."""
    if transaction is not None and transaction not in TRANSACTION_TYPES:
        raise InvalidFacetError(f"unknown transaction type: {transaction!r}")
    if transaction == sel.transaction:
        transaction = None
    # price ranges are expressed in sale or lease units, so they go too
    return sel.model_copy(update={
        'transaction': transaction,
        'price': NumericFilter(),
        'price_per_sqm': NumericFilter(),
    })


def select_category(sel: FacetSelection, category: Optional[str]) -> FacetSelection:
    if category is not None and category not in CATEGORY_KEYWORDS:
        raise InvalidFacetError(f"unknown category: {category!r}")
    if category == sel.category:
        category = None
    return sel.model_copy(update={'category': category})


def select_geo(sel: FacetSelection, level: str, value: Optional[str]) -> FacetSelection:
    """Set one geographic level and clear every level below it."""
    if level not in GEO_LEVELS:
        raise InvalidFacetError(f"unknown geographic level: {level!r}")
    value = (value or '').strip() or None
    update = {level: value}
    for child in GEO_LEVELS[GEO_LEVELS.index(level) + 1:]:
        update[child] = None
    return sel.model_copy(update=update)


def select_region(sel: FacetSelection, region: Optional[str]) -> FacetSelection:
    return select_geo(sel, 'region', region)


def select_province(sel: FacetSelection, province: Optional[str]) -> FacetSelection:
    return select_geo(sel, 'province', province)


def select_city(sel: FacetSelection, city: Optional[str]) -> FacetSelection:
    return select_geo(sel, 'city', city)


def select_barangay(sel: FacetSelection, barangay: Optional[str]) -> FacetSelection:
    return select_geo(sel, 'barangay', barangay)


def toggle_bedrooms(sel: FacetSelection, bucket: str) -> FacetSelection:
    if bucket not in BEDROOM_BUCKETS:
        raise InvalidFacetError(f"unknown bedroom bucket: {bucket!r}")
    return sel.model_copy(update={'bedrooms': _toggle(sel.bedrooms, bucket)})


def toggle_parking(sel: FacetSelection, bucket: str) -> FacetSelection:
    if bucket not in PARKING_BUCKETS:
        raise InvalidFacetError(f"unknown parking bucket: {bucket!r}")
    return sel.model_copy(update={'parking': _toggle(sel.parking, bucket)})


def toggle_property_type(sel: FacetSelection, label: str) -> FacetSelection:
    if label not in PROPERTY_TYPE_KEYWORDS:
        raise InvalidFacetError(f"unknown property type: {label!r}")
    return sel.model_copy(update={'property_types': _toggle(sel.property_types, label)})


def set_range(sel: FacetSelection, facet: str, low: float, high: float) -> FacetSelection:
    """Activate a range on a numeric facet, dropping any exact value."""
    _check_numeric(facet)
    if low > high:
        low, high = high, low
    return sel.model_copy(update={facet: NumericFilter(range=(float(low), float(high)))})


def set_exact(sel: FacetSelection, facet: str, text: str) -> FacetSelection:
    """Activate an exact-match value typed by the user, dropping any range.

    Unparseable text leaves the selection as it was.
    """
    _check_numeric(facet)
    value = parse_manual_value(text)
    if value is None:
        logger.debug("Keeping %s filter, could not parse %r", facet, text)
        return sel
    return sel.model_copy(update={facet: NumericFilter(exact=value)})


def clear_numeric(sel: FacetSelection, facet: str) -> FacetSelection:
    _check_numeric(facet)
    return sel.model_copy(update={facet: NumericFilter()})


def set_show_all(sel: FacetSelection, show_all: bool) -> FacetSelection:
    return sel.model_copy(update={'show_all': bool(show_all)})


def set_direct_only(sel: FacetSelection, direct_only: bool) -> FacetSelection:
    return sel.model_copy(update={'direct_only': bool(direct_only)})


def reset_facet(sel: FacetSelection, facet: str) -> FacetSelection:
    """Return ``facet`` to its default, with the same cascade as setting it."""
    if facet in GEO_LEVELS:
        return select_geo(sel, facet, None)
    if facet == 'transaction':
        return select_transaction(sel, None) if sel.transaction else sel
    if facet not in FacetSelection.model_fields:
        raise InvalidFacetError(f"unknown facet: {facet!r}")
    default = FacetSelection.model_fields[facet].get_default()
    return sel.model_copy(update={facet: default})


# sort state

def select_sort(current: Optional[SortState], key: str) -> Optional[SortState]:
    """Relevance clears the sort; a new key starts descending; the same key flips."""
    if key == RELEVANCE_SORT:
        return None
    if key not in SORT_KEYS:
        raise InvalidFacetError(f"unknown sort key: {key!r}")
    if current is not None and current.key == key:
        return SortState(key=key, direction=ASC if current.direction == DESC else DESC)
    return SortState(key=key, direction=DESC)


# search state

def update_facets(state: SearchState, facets: FacetSelection) -> SearchState:
    if facets == state.facets:
        return state
    return state.model_copy(update={'facets': facets, 'page': 1})


def set_query(state: SearchState, query: str) -> SearchState:
    query = query or ''
    if query == state.query:
        return state
    return state.model_copy(update={'query': query, 'page': 1})


def set_relevance(state: SearchState, relevance: int) -> SearchState:
    relevance = min(100, max(0, int(relevance)))
    if relevance == state.relevance:
        return state
    return state.model_copy(update={'relevance': relevance, 'page': 1})


def sort_by(state: SearchState, key: str) -> SearchState:
    return state.model_copy(update={'sort': select_sort(state.sort, key), 'page': 1})


def go_to_page(state: SearchState, page: int) -> SearchState:
    return state.model_copy(update={'page': max(1, int(page))})


def toggle_shortlist(state: SearchState, listing_id: str, limit: int) -> SearchState:
    """Add or remove a listing from the shortlist; adds beyond ``limit`` are ignored."""
    if listing_id in state.shortlist:
        return state.model_copy(update={'shortlist': tuple(i for i in state.shortlist if i != listing_id)})
    if len(state.shortlist) >= limit:
        return state
    return state.model_copy(update={'shortlist': state.shortlist + (listing_id,)})


def reset_all(relevance: Optional[int] = None) -> SearchState:
    """Global reset: query, facets, sort, page and shortlist back to defaults."""
    if relevance is None:
        return SearchState()
    return SearchState(relevance=relevance)
