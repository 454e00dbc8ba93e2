from __future__ import annotations
import logging
import threading
from typing import Dict, List, Sequence

from .config import CACHE_MAX_ENTRIES, DEFAULT_PAGE_SIZE
from .feed import ListingStore
from .filters import filter_listings, without_numeric_stages
from .matcher import match
from .models import Domain, Listing, SearchResult, SearchState
from .pagination import paginate
from .sorting import sort_listings
from .stats import facet_domains, summary_stats

logger = logging.getLogger(__name__)

_CACHE: list[tuple[tuple, SearchResult]] = []  # simple LRU list [(key, value), ...]
_cache_max_entries = CACHE_MAX_ENTRIES
_CACHE_LOCK = threading.Lock()

def set_cache_size(n: int) -> None:
    global _cache_max_entries
    with _CACHE_LOCK:
        _cache_max_entries = n
        del _CACHE[max(0, n):]

def clear_cache() -> None:
    with _CACHE_LOCK:
        _CACHE.clear()

def _cache_get(key: tuple):
    if _cache_max_entries <= 0:
        return None
    with _CACHE_LOCK:
        for i,(k,v) in enumerate(_CACHE):
            if k == key:
                # move to front (MRU)
                _CACHE.insert(0, _CACHE.pop(i))
                return v
    return None

def _cache_set(key: tuple, value: SearchResult):
    if _cache_max_entries <= 0:
        return
    with _CACHE_LOCK:
        # remove existing
        for i,(k,_) in enumerate(_CACHE):
            if k == key:
                _CACHE.pop(i)
                break
        _CACHE.insert(0,(key,value))
        if len(_CACHE) > _cache_max_entries:
            _CACHE.pop()


def ordered_results(candidates: Sequence[Listing], state: SearchState) -> List[Listing]:
    """Facet filters then sort over matcher output."""
    filtered = filter_listings(candidates, state.facets)
    return sort_listings(filtered, state.sort, state.facets.transaction)


def slider_domains(candidates: Sequence[Listing], state: SearchState) -> Dict[str, Domain]:
    """Domains for the numeric facets given every other active facet.

    Numeric ranges are left out so a narrowed price range does not shrink its
    own slider.
    """
    base = filter_listings(candidates, state.facets, without_numeric_stages())
    return facet_domains(base, state.facets.transaction)


def run_pipeline(listings: Sequence[Listing], state: SearchState, page_size: int = DEFAULT_PAGE_SIZE) -> SearchResult:
    """Matcher, facet filters, sort and pagination for one state."""
    candidates = match(listings, state.query, state.relevance)
    ordered = ordered_results(candidates, state)
    return SearchResult(
        page=paginate(ordered, state.page, page_size),
        total=len(ordered),
        store_total=len(listings),
        domains=slider_domains(candidates, state),
        stats=summary_stats(ordered, state.facets.transaction),
    )


def search(store: ListingStore, state: SearchState, page_size: int = DEFAULT_PAGE_SIZE) -> SearchResult:
    """Cached :func:`run_pipeline` over a store; a reload invalidates by version."""
    # the shortlist never changes the result set
    key_state = state.model_copy(update={'shortlist': ()})
    cache_key = (store.version, key_state, page_size)
    cached = _cache_get(cache_key)
    if cached is not None:
        logger.debug("Search cache hit for %r page %d", state.query, state.page)
        return cached
    result = run_pipeline(store.listings, state, page_size)
    _cache_set(cache_key, result)
    return result
