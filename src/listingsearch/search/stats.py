from __future__ import annotations
from typing import List, Dict, Any, Optional, Sequence

from .config import NUMERIC_FACETS
from .filters import numeric_value
from .geo import has_location
from .models import Domain, Listing
from .slider import domain_for


def facet_values(listings: Sequence[Listing], facet: str, transaction: Optional[str] = None) -> List[float]:
    """Positive values of a numeric facet (0 means unknown and is skipped)."""
    return [v for v in (numeric_value(l, facet, transaction) for l in listings) if v > 0]


def facet_domain(values: Sequence[float]) -> Optional[Domain]:
    if not values:
        return None
    return domain_for(min(values), max(values))


def facet_domains(listings: Sequence[Listing], transaction: Optional[str] = None) -> Dict[str, Domain]:
    """Slider domain per numeric facet; facets with no known values are omitted."""
    out: Dict[str, Domain] = {}
    for facet in NUMERIC_FACETS:
        d = facet_domain(facet_values(listings, facet, transaction))
        if d is not None:
            out[facet] = d
    return out


def basic(series: Sequence[float]) -> Dict[str, Any]:
    if not series: return {'count': 0}
    s = sorted(series); n = len(s); mean = sum(s)/n
    med = s[n//2] if n % 2 == 1 else (s[n//2-1]+s[n//2])/2
    return {'count': n, 'mean': round(mean, 2), 'median': round(med, 2), 'min': round(s[0], 2), 'max': round(s[-1], 2)}


def summary_stats(listings: Sequence[Listing], transaction: Optional[str] = None) -> Dict[str, Any]:
    """Price and price-per-area summaries of a result set."""
    return {
        'price_stats': basic(facet_values(listings, 'price', transaction)),
        'price_per_sqm_stats': basic(facet_values(listings, 'price_per_sqm', transaction)),
        'with_location': sum(1 for l in listings if has_location(l)),
    }
