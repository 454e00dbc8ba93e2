"""Typed records shared by the search engine.

Everything here is frozen: the engine never mutates a listing or a piece of
UI state, it builds new values with ``model_copy(update=...)``.
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .config import ASC, DESC, DEFAULT_RELEVANCE


class Listing(BaseModel):
    """One row of the listing feed, normalized.

    Numeric fields use 0 for "not applicable/unknown"; text fields use ''.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    summary: str = ''
    price: float = Field(0.0, ge=0)
    lease_price: float = Field(0.0, ge=0)
    price_per_sqm: float = Field(0.0, ge=0)
    lease_price_per_sqm: float = Field(0.0, ge=0)
    lot_area: float = Field(0.0, ge=0)
    floor_area: float = Field(0.0, ge=0)
    bedrooms: int = Field(0, ge=0)
    parking: int = Field(0, ge=0)
    sale_type: str = ''
    category: str = ''
    category_fallback: str = ''
    type_description: str = ''
    kind: str = 'UNKNOWN'
    status: str = ''
    region: str = ''
    province: str = ''
    city: str = ''
    barangay: str = ''
    area: str = ''
    building: str = ''
    is_direct: bool = False
    lat: float = 0.0
    lng: float = 0.0
    facebook_link: str = ''
    photo_link: str = ''
    map_link: str = ''
    notes: str = ''
    # set by the matcher on a copy when the query equals the id
    exact_id_match: bool = False

    @property
    def for_sale(self) -> bool:
        return self.price > 0

    @property
    def for_lease(self) -> bool:
        return self.lease_price > 0


class NumericFilter(BaseModel):
    """Range or exact-value constraint on one numeric facet (never both)."""

    model_config = ConfigDict(frozen=True)

    range: Optional[Tuple[float, float]] = None
    exact: Optional[float] = None

    @model_validator(mode='after')
    def _range_xor_exact(self) -> 'NumericFilter':
        if self.range is not None and self.exact is not None:
            raise ValueError('a numeric facet holds either a range or an exact value, not both')
        if self.range is not None and self.range[0] > self.range[1]:
            raise ValueError(f'range lower bound exceeds upper bound: {self.range}')
        return self

    @property
    def active(self) -> bool:
        return self.range is not None or self.exact is not None


class FacetSelection(BaseModel):
    model_config = ConfigDict(frozen=True)

    show_all: bool = False
    transaction: Optional[str] = None
    category: Optional[str] = None
    region: Optional[str] = None
    province: Optional[str] = None
    city: Optional[str] = None
    barangay: Optional[str] = None
    direct_only: bool = False
    price: NumericFilter = NumericFilter()
    price_per_sqm: NumericFilter = NumericFilter()
    lot_area: NumericFilter = NumericFilter()
    floor_area: NumericFilter = NumericFilter()
    bedrooms: Tuple[str, ...] = ()
    parking: Tuple[str, ...] = ()
    property_types: Tuple[str, ...] = ()

    def numeric(self, facet: str) -> NumericFilter:
        return getattr(self, facet)


class SortState(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    direction: str = DESC

    @model_validator(mode='after')
    def _known_direction(self) -> 'SortState':
        if self.direction not in (ASC, DESC):
            raise ValueError(f'unknown sort direction: {self.direction!r}')
        return self


class SearchState(BaseModel):
    """Everything the address bar and the filter panel describe."""

    model_config = ConfigDict(frozen=True)

    query: str = ''
    relevance: int = Field(DEFAULT_RELEVANCE, ge=0, le=100)
    facets: FacetSelection = FacetSelection()
    sort: Optional[SortState] = None
    page: int = Field(1, ge=1)
    shortlist: Tuple[str, ...] = ()


class Domain(BaseModel):
    """Inclusive numeric domain handed to a range selector."""

    model_config = ConfigDict(frozen=True)

    min: float
    max: float
    step: float


class Page(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: Tuple[Listing, ...] = ()
    page: int = 1
    page_size: int
    total: int = 0
    total_pages: int = 0


class SearchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    page: Page
    total: int
    store_total: int
    domains: Dict[str, Domain] = Field(default_factory=dict)
    stats: Dict[str, Any] = Field(default_factory=dict)
