"""Listing feed loading.

The feed is a spreadsheet exported as CSV with no usable header names, so
rows are mapped by column position (:data:`COLUMNS`). Cells are parsed
leniently; rows that are not available or carry no asking price are dropped
here, before the search engine ever sees them.
"""
from __future__ import annotations

import csv
import io
import itertools
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

import chardet
import requests

from ..errors import FeedError
from .config import AVAILABLE_STATUS
from .models import Listing
from .parsing import parse_coordinates, parse_int, parse_number

logger = logging.getLogger(__name__)

# store versions are unique across all stores so caches can key on them alone
_VERSIONS = itertools.count(1)

# 0-indexed spreadsheet columns (A=0, B=1, ... Z=25, AA=26, ...)
COLUMNS: Dict[str, int] = {
    'summary': 0,             # A
    'category': 1,            # B
    'bedrooms': 2,            # C
    'parking': 3,             # D
    'lot_area': 4,            # E
    'floor_area': 5,          # F
    'price': 6,               # G
    'sale_type': 7,           # H
    'lease_price': 8,         # I
    'notes': 9,               # J
    'lease_price_per_sqm': 11,  # L
    'status': 14,             # O
    'photo_link': 16,         # Q
    'facebook_link': 17,      # R
    'type_description': 18,   # S
    'id': 19,                 # T
    'map_link': 20,           # U
    'is_direct': 22,          # W
    'price_per_sqm': 23,      # X
    'region': 24,             # Y
    'province': 25,           # Z
    'city': 26,               # AA
    'barangay': 27,           # AB
    'area': 28,               # AC
    'building': 29,           # AD
    'category_fallback': 30,  # AE
    'coordinates': 33,        # AH
}


def _cell(row: Sequence[str], column: str) -> str:
    i = COLUMNS[column]
    return (row[i] or '').strip() if i < len(row) else ''


def infer_kind(lot_area: float, floor_area: float) -> str:
    if not lot_area:
        return 'CONDO'
    if not floor_area:
        return 'LOT'
    return 'UNKNOWN'


def row_to_listing(row: Sequence[str]) -> Listing:
    """Normalize one positional feed row; never raises on bad cells."""
    lot_area = parse_number(_cell(row, 'lot_area'))
    floor_area = parse_number(_cell(row, 'floor_area'))
    price = parse_number(_cell(row, 'price'))
    lease_price = parse_number(_cell(row, 'lease_price'))
    price_per_sqm = parse_number(_cell(row, 'price_per_sqm'))
    lease_price_per_sqm = parse_number(_cell(row, 'lease_price_per_sqm'))
    sale_type = _cell(row, 'sale_type')
    # lease-only rows without a lease column carry their rent in the price column
    if sale_type.lower() == 'lease' and not lease_price:
        lease_price, price = price, 0.0
        if not lease_price_per_sqm:
            lease_price_per_sqm, price_per_sqm = price_per_sqm, 0.0
    lat, lng = parse_coordinates(_cell(row, 'coordinates'))
    return Listing(
        id=_cell(row, 'id'),
        summary=_cell(row, 'summary'),
        price=price,
        lease_price=lease_price,
        price_per_sqm=price_per_sqm,
        lease_price_per_sqm=lease_price_per_sqm,
        lot_area=lot_area,
        floor_area=floor_area,
        bedrooms=parse_int(_cell(row, 'bedrooms')),
        parking=parse_int(_cell(row, 'parking')),
        sale_type=sale_type,
        category=_cell(row, 'category'),
        category_fallback=_cell(row, 'category_fallback'),
        type_description=_cell(row, 'type_description'),
        kind=infer_kind(lot_area, floor_area),
        status=_cell(row, 'status'),
        region=_cell(row, 'region'),
        province=_cell(row, 'province'),
        city=_cell(row, 'city'),
        barangay=_cell(row, 'barangay'),
        area=_cell(row, 'area'),
        building=_cell(row, 'building'),
        is_direct=_cell(row, 'is_direct').upper() == 'YES',
        lat=lat,
        lng=lng,
        facebook_link=_cell(row, 'facebook_link'),
        photo_link=_cell(row, 'photo_link'),
        map_link=_cell(row, 'map_link'),
        notes=_cell(row, 'notes'),
    )


def keep_listing(listing: Listing) -> bool:
    return AVAILABLE_STATUS in listing.status.lower() and (listing.price > 0 or listing.lease_price > 0)


def load_rows(rows: Iterable[Sequence[str]], skip_header: bool = True) -> List[Listing]:
    """Normalize feed rows, drop unavailable/unpriced ones and duplicate ids."""
    out: List[Listing] = []
    seen: set[str] = set()
    total = dropped = duplicates = 0
    it: Iterator[Sequence[str]] = iter(rows)
    if skip_header:
        next(it, None)
    for row in it:
        if not any((c or '').strip() for c in row):
            continue
        total += 1
        listing = row_to_listing(row)
        if not listing.id or not keep_listing(listing):
            dropped += 1
            continue
        if listing.id in seen:
            duplicates += 1
            continue
        seen.add(listing.id)
        out.append(listing)
    logger.info("Loaded %d listings from %d feed rows (%d dropped, %d duplicate ids)",
                len(out), total, dropped, duplicates)
    return out


def decode_bytes(raw: bytes, declared: Optional[str] = None) -> str:
    """Decode feed bytes: BOM first, then the declared charset, then chardet."""
    if raw.startswith(b"\xef\xbb\xbf"):
        return raw.decode('utf-8-sig')
    if raw.startswith(b"\xff\xfe") or raw.startswith(b"\xfe\xff"):
        return raw.decode('utf-16')
    for enc in filter(None, (declared, 'utf-8')):
        try:
            return raw.decode(enc)
        except (UnicodeDecodeError, LookupError):
            continue
    guess = chardet.detect(raw).get('encoding') or 'cp1252'
    logger.debug("Feed is not UTF-8, decoding as %s", guess)
    return raw.decode(guess, errors='replace')


def parse_csv_text(text: str) -> List[Listing]:
    return load_rows(csv.reader(io.StringIO(text)))


def read_feed(path: Path | str) -> List[Listing]:
    try:
        raw = Path(path).read_bytes()
    except OSError as e:
        raise FeedError(f"Cannot read listing feed {path}: {e}") from e
    return parse_csv_text(decode_bytes(raw))


def fetch_feed(url: str, timeout: float = 30.0) -> List[Listing]:
    try:
        r = requests.get(url, timeout=timeout)
        r.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise FeedError(f"Cannot fetch listing feed {url}: {e}") from e
    # requests guesses ISO-8859-1 for text/csv without a charset; let decode_bytes decide
    declared = r.encoding if 'charset' in r.headers.get('content-type', '').lower() else None
    return parse_csv_text(decode_bytes(r.content, declared))


class ListingStore:
    """The in-memory listing collection, replaced wholesale on every load."""

    def __init__(self, listings: Iterable[Listing] = ()) -> None:
        self._listings: tuple[Listing, ...] = ()
        self._by_id: Dict[str, Listing] = {}
        self.version = 0
        self.loaded_at: Optional[datetime] = None
        self.replace(listings)

    @property
    def listings(self) -> tuple[Listing, ...]:
        return self._listings

    def __len__(self) -> int:
        return len(self._listings)

    def __iter__(self) -> Iterator[Listing]:
        return iter(self._listings)

    def get(self, listing_id: str) -> Optional[Listing]:
        return self._by_id.get(listing_id.strip().lower())

    def replace(self, listings: Iterable[Listing]) -> None:
        self._listings = tuple(listings)
        self._by_id = {l.id.strip().lower(): l for l in self._listings}
        self.version = next(_VERSIONS)
        self.loaded_at = datetime.now()

    def load(self, url: Optional[str] = None, path: Path | str | None = None, timeout: float = 30.0) -> int:
        """Load from a local file or URL, replacing the collection. Raises FeedError."""
        if path is not None:
            listings = read_feed(path)
        elif url:
            listings = fetch_feed(url, timeout=timeout)
        else:
            raise FeedError("No listing feed configured (set LISTINGSEARCH_FEED_URL or LISTINGSEARCH_FEED_PATH)")
        self.replace(listings)
        return len(listings)

    def reload(self, url: Optional[str] = None, path: Path | str | None = None, timeout: float = 30.0) -> bool:
        """Like :meth:`load` but keeps the current collection when the feed fails."""
        try:
            self.load(url=url, path=path, timeout=timeout)
            return True
        except FeedError as e:
            logger.warning("Listing feed reload failed, keeping %d listings: %s", len(self), e)
            return False
