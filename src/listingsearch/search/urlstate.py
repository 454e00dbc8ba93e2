"""Round-trip :class:`SearchState` through address-bar query parameters so a
shared link reproduces the same result set.

Decoding never fails: unknown keys are ignored and malformed values fall back
to defaults.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Union
from urllib.parse import urlencode

from .config import (
    ASC,
    BEDROOM_BUCKETS,
    CATEGORY_KEYWORDS,
    DEFAULT_RELEVANCE,
    DESC,
    NUMERIC_FACETS,
    PARKING_BUCKETS,
    PROPERTY_TYPE_KEYWORDS,
    SORT_KEYS,
    TRANSACTION_TYPES,
)
from .models import FacetSelection, NumericFilter, SearchState, SortState
from .parsing import parse_manual_value

Params = Dict[str, Union[str, List[str]]]

_TRUE = {'1', 'true', 'yes', 'on'}


def _fmt(v: float) -> str:
    return str(int(v)) if float(v).is_integer() else repr(float(v))


def encode_state(state: SearchState) -> Params:
    f = state.facets
    out: Params = {}
    if state.query:
        out['q'] = state.query
    out['relevance'] = str(state.relevance)
    if f.transaction:
        out['type'] = f.transaction
    if f.category:
        out['category'] = f.category
    for level in ('region', 'province', 'city', 'barangay'):
        if getattr(f, level):
            out[level] = getattr(f, level)
    if f.direct_only:
        out['direct'] = '1'
    if f.show_all:
        out['all'] = '1'
    if f.bedrooms:
        out['beds'] = list(f.bedrooms)
    if f.parking:
        out['parking'] = list(f.parking)
    if f.property_types:
        out['ptype'] = list(f.property_types)
    for facet in NUMERIC_FACETS:
        nf = f.numeric(facet)
        if nf.exact is not None:
            out[f'{facet}_exact'] = _fmt(nf.exact)
        elif nf.range is not None:
            out[f'{facet}_min'] = _fmt(nf.range[0])
            out[f'{facet}_max'] = _fmt(nf.range[1])
    if state.sort is not None:
        out['sort'] = state.sort.key
        out['dir'] = state.sort.direction
    if state.page > 1:
        out['page'] = str(state.page)
    return out


def to_query_string(state: SearchState) -> str:
    return urlencode(encode_state(state), doseq=True)


def _get_list(params: Mapping[str, Any], key: str) -> List[str]:
    if hasattr(params, 'getlist'):
        values = params.getlist(key)
    else:
        raw = params.get(key)
        if raw is None:
            values = []
        elif isinstance(raw, (list, tuple)):
            values = list(raw)
        else:
            values = [raw]
    return [str(v) for v in values if v is not None]


def _get(params: Mapping[str, Any], key: str) -> Optional[str]:
    values = _get_list(params, key)
    if not values:
        return None
    v = values[0].strip()
    return v or None


def _int(v: Optional[str], default: int) -> int:
    try:
        return int(v) if v is not None else default
    except ValueError:
        return default


def _choices(values: List[str], allowed) -> tuple:  # type: ignore[no-untyped-def]
    seen: List[str] = []
    for v in values:
        v = v.strip()
        if v in allowed and v not in seen:
            seen.append(v)
    return tuple(seen)


def _numeric(params: Mapping[str, Any], facet: str) -> NumericFilter:
    exact = parse_manual_value(_get(params, f'{facet}_exact'))
    if exact is not None:
        return NumericFilter(exact=exact)
    lo = parse_manual_value(_get(params, f'{facet}_min'))
    hi = parse_manual_value(_get(params, f'{facet}_max'))
    if lo is None or hi is None:
        return NumericFilter()
    if lo > hi:
        lo, hi = hi, lo
    return NumericFilter(range=(lo, hi))


def decode_state(params: Mapping[str, Any], default_relevance: int = DEFAULT_RELEVANCE) -> SearchState:
    transaction = _get(params, 'type')
    category = _get(params, 'category')
    facets = FacetSelection(
        show_all=(_get(params, 'all') or '').lower() in _TRUE,
        transaction=transaction if transaction in TRANSACTION_TYPES else None,
        category=category if category in CATEGORY_KEYWORDS else None,
        region=_get(params, 'region'),
        province=_get(params, 'province'),
        city=_get(params, 'city'),
        barangay=_get(params, 'barangay'),
        direct_only=(_get(params, 'direct') or '').lower() in _TRUE,
        bedrooms=_choices(_get_list(params, 'beds'), BEDROOM_BUCKETS),
        parking=_choices(_get_list(params, 'parking'), PARKING_BUCKETS),
        property_types=_choices(_get_list(params, 'ptype'), PROPERTY_TYPE_KEYWORDS),
        **{facet: _numeric(params, facet) for facet in NUMERIC_FACETS},
    )
    sort = None
    sort_key = _get(params, 'sort')
    if sort_key in SORT_KEYS:
        direction = _get(params, 'dir')
        sort = SortState(key=sort_key, direction=direction if direction in (ASC, DESC) else DESC)
    q_values = _get_list(params, 'q')
    return SearchState(
        query=q_values[0] if q_values else '',
        relevance=min(100, max(0, _int(_get(params, 'relevance'), default_relevance))),
        facets=facets,
        sort=sort,
        page=max(1, _int(_get(params, 'page'), 1)),
    )
