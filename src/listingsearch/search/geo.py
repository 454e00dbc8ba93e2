from __future__ import annotations

import math
from typing import List, Sequence, Tuple

from .models import Listing

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi/2)**2 + math.cos(phi1)*math.cos(phi2)*math.sin(dlambda/2)**2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1-a))


def has_location(listing: Listing) -> bool:
    # 0 on either axis is the loader's "no coordinates" marker
    return bool(listing.lat) and bool(listing.lng)


def nearby(listings: Sequence[Listing], center: Listing, radius_km: float = 2.0) -> List[Tuple[Listing, float]]:
    """Listings within ``radius_km`` of ``center``, closest first, with distances.

    The center itself and listings without coordinates are skipped; a center
    without coordinates has no neighbours.
    """
    if not has_location(center):
        return []
    out: List[Tuple[Listing, float]] = []
    for l in listings:
        if l.id == center.id or not has_location(l):
            continue
        d = haversine_km(center.lat, center.lng, l.lat, l.lng)
        if d <= radius_km:
            out.append((l, round(d, 2)))
    out.sort(key=lambda pair: pair[1])
    return out
