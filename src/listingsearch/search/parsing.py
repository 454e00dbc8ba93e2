"""Lenient parsers for feed cells and manual entries.

None of these raise: malformed input falls back to 0, ``(0, 0)`` or ``None``.
"""
from __future__ import annotations

import logging
import math
import re
from typing import Any, Optional, Tuple

logger = logging.getLogger(__name__)

# "P 4,200,000" -> "4200000", "PHP 35,000/mo" -> "35000/mo"
_CURRENCY_NOISE = re.compile(r"(?i)php|[p₱,\s]")
_NUMBER_PREFIX = re.compile(r"^[-+]?(\d+\.?\d*|\.\d+)")


def parse_number(v: Any) -> float:
    """Parse a feed cell such as ``"P 4,200,000"`` into ``4200000.0``.

    Leading numeric text is used when trailing junk remains (``"120 sqm"``);
    anything unparseable or negative becomes 0.
    """
    if v is None:
        return 0.0
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return float(v) if math.isfinite(v) and v > 0 else 0.0
    s = _CURRENCY_NOISE.sub('', str(v))
    m = _NUMBER_PREFIX.match(s)
    if not m:
        return 0.0
    try:
        out = float(m.group(0))
    except ValueError:
        return 0.0
    return out if math.isfinite(out) and out > 0 else 0.0


def parse_int(v: Any) -> int:
    return int(parse_number(v))


def parse_manual_value(text: Any) -> Optional[float]:
    """Parse a value typed into a range label or exact-match box.

    Thousands separators are accepted; any other non-numeric content makes the
    whole entry invalid and ``None`` is returned so the caller can keep its
    previous value.
    """
    if text is None:
        return None
    s = str(text).strip().replace(',', '')
    if not s:
        return None
    try:
        out = float(s)
    except ValueError:
        logger.debug("Ignoring non-numeric manual entry %r", text)
        return None
    if not math.isfinite(out):
        return None
    return out


def parse_coordinates(text: Any) -> Tuple[float, float]:
    """``"14.55, 121.02"`` -> ``(14.55, 121.02)``; malformed -> ``(0.0, 0.0)``."""
    if not text or ',' not in str(text):
        return 0.0, 0.0
    lat_s, _, lng_s = str(text).partition(',')
    try:
        lat, lng = float(lat_s.strip()), float(lng_s.strip())
    except ValueError:
        return 0.0, 0.0
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return 0.0, 0.0
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        return 0.0, 0.0
    return lat, lng
