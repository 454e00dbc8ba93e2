"""Listing search engine.

Public API:
    match(listings, query, strictness)
    filter_listings(listings, selection)
    sort_listings(listings, sort, transaction)
    paginate(items, page, page_size)
    RangeSlider(domain_min, domain_max, step, ...)
    search(store, state, page_size)
"""
from .engine import run_pipeline, search  # noqa: F401
from .feed import ListingStore  # noqa: F401
from .filters import filter_listings  # noqa: F401
from .matcher import match  # noqa: F401
from .models import FacetSelection, Listing, SearchState, SortState  # noqa: F401
from .pagination import paginate  # noqa: F401
from .slider import RangeSlider  # noqa: F401
from .sorting import sort_listings  # noqa: F401

__all__ = [
    "match",
    "filter_listings",
    "sort_listings",
    "paginate",
    "RangeSlider",
    "run_pipeline",
    "search",
    "ListingStore",
    "Listing",
    "FacetSelection",
    "SearchState",
    "SortState",
]
