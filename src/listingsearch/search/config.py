from __future__ import annotations
from typing import Sequence, Dict

AVAILABLE_STATUS = 'available'
UNAVAILABLE_STATUSES = frozenset({'SOLD', 'LEASED OUT'})

SALE = 'Sale'
LEASE = 'Lease'
SALE_LEASE = 'Sale/Lease'
TRANSACTION_TYPES: Sequence[str] = (SALE, LEASE, SALE_LEASE)

# category label -> lowercase substring searched in "category + fallback"
CATEGORY_KEYWORDS: Dict[str, str] = {
    'Residential': 'residential',
    'Commercial': 'commercial',
    'Industrial': 'industrial',
    'Agricultural': 'agri',
}

NUMERIC_FACETS: Sequence[str] = ('price', 'price_per_sqm', 'lot_area', 'floor_area')

BEDROOM_BUCKETS: Sequence[str] = ('STUDIO', '1', '2', '3', '4', '5+')
PARKING_BUCKETS: Sequence[str] = ('0', '1', '2', '3', '4', '5+')
ZERO_BUCKET_ALIASES = frozenset({'0', 'STUDIO', 'NONE'})
OPEN_BUCKET = '5+'
OPEN_BUCKET_MIN = 5

# property-type label -> keywords searched in the uppercased type description
PROPERTY_TYPE_KEYWORDS: Dict[str, Sequence[str]] = {
    'CONDO': ('CONDO', 'CONDOMINIUM'),
    'TOWNHOUSE': ('TOWNHOUSE', 'TOWN HOUSE'),
    'HOUSE AND LOT': ('HOUSE AND LOT', 'HOUSE & LOT', 'H&L'),
    'VACANT LOT': ('VACANT LOT', 'LOT'),
    'WAREHOUSE': ('WAREHOUSE',),
    'OFFICE': ('OFFICE',),
    'BUILDING': ('BUILDING',),
    'FARM': ('FARM', 'AGRI'),
}

RELEVANCE_SORT = 'relevance'
# sort key -> numeric facet or listing attribute
SORT_KEYS: Dict[str, str] = {
    'price': 'price',
    'pricePerArea': 'price_per_sqm',
    'lotArea': 'lot_area',
    'floorArea': 'floor_area',
    'bedrooms': 'bedrooms',
    'parking': 'parking',
}
ASC = 'asc'
DESC = 'desc'

# text matcher
MATCH_FIELD_WEIGHTS: Dict[str, float] = {
    'summary': 1.0,
    'building': 1.0,
    'type_description': 1.0,
    'city': 1.0,
    'barangay': 1.0,
    'area': 0.9,
    'province': 0.9,
    'region': 0.8,
    'category': 0.8,
    'category_fallback': 0.6,
    'sale_type': 0.6,
}
EXACT_TOKEN = 1.0
PREFIX_TOKEN = 0.85
SUBSTRING_TOKEN = 0.7
FUZZY_TOKEN_CAP = 0.6
FUZZY_MIN_RATIO = 0.75
STOPWORDS = frozenset({'a', 'an', 'and', 'at', 'for', 'in', 'near', 'of', 'on', 'the', 'with'})

DEFAULT_RELEVANCE = 50
DEFAULT_PAGE_SIZE = 12

LOG_SCALE_K = 8.0

CACHE_MAX_ENTRIES = 50
