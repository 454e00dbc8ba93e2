"""Dual-handle range selector used by the numeric facets.

The selector maps a bounded domain onto a 0-100 handle track, linearly or on
a logarithmic curve that gives the cheap end of a long-tailed price domain
most of the travel. Handles can also be set by typing a value into their
label. Whatever moves a handle, the pair keeps ``low + step <= high`` and the
``on_change`` callback sees the new pair immediately.
"""
from __future__ import annotations

import logging
import math
from typing import Callable, Optional, Tuple

from .config import LOG_SCALE_K
from .models import Domain
from .parsing import parse_manual_value

logger = logging.getLogger(__name__)

Pair = Tuple[float, float]


def magnitude_step(value: float) -> float:
    """Rounding granularity for a value: 1,000,000 / 10,000 / 10."""
    v = abs(value)
    if v >= 1_000_000:
        return 1_000_000.0
    if v >= 1_000:
        return 10_000.0
    return 10.0


def domain_for(low: float, high: float) -> Domain:
    """Snap raw ``[low, high]`` outward to magnitude steps.

    The slider step is the finer of the two endpoint steps. A degenerate
    range is widened by one step so the handles have room.
    """
    lo_step = magnitude_step(low)
    hi_step = magnitude_step(high)
    dmin = math.floor(low / lo_step) * lo_step
    dmax = math.ceil(high / hi_step) * hi_step
    step = min(lo_step, hi_step)
    if dmax - dmin < step:
        dmax = dmin + step
    return Domain(min=dmin, max=dmax, step=step)


def round_to_step(value: float, step: float) -> float:
    # half-up rounding; round() would bank to even
    return math.floor(value / step + 0.5) * step


class RangeSlider:
    """Two handles over ``[domain_min, domain_max]``.

    Positions (``drag_low``/``drag_high``) are percentages of the track;
    values (``set_low``/``set_high``) are domain units. Both go through the
    same clamp, which is idempotent.
    """

    def __init__(
        self,
        domain_min: float,
        domain_max: float,
        step: float = 1.0,
        value: Optional[Pair] = None,
        on_change: Optional[Callable[[Pair], None]] = None,
        log_scale: bool = False,
        k: float = LOG_SCALE_K,
    ) -> None:
        if not domain_max > domain_min:
            raise ValueError(f"domain_max must exceed domain_min ({domain_min}, {domain_max})")
        if step <= 0:
            raise ValueError(f"step must be positive, got {step}")
        self.domain_min = float(domain_min)
        self.domain_max = float(domain_max)
        # a step wider than the domain would leave no legal pair
        self.step = min(float(step), self.domain_max - self.domain_min)
        self.log_scale = log_scale
        self.k = k
        self.on_change = on_change
        low, high = value if value is not None else (self.domain_min, self.domain_max)
        self._low, self._high = self._normalize(low, high)

    @classmethod
    def from_domain(cls, domain: Domain, **kwargs) -> 'RangeSlider':  # type: ignore[no-untyped-def]
        return cls(domain.min, domain.max, domain.step, **kwargs)

    @property
    def low(self) -> float:
        return self._low

    @property
    def high(self) -> float:
        return self._high

    @property
    def value(self) -> Pair:
        return self._low, self._high

    # value <-> percent

    def percent(self, v: float) -> float:
        t = (v - self.domain_min) / (self.domain_max - self.domain_min)
        if self.log_scale:
            t = min(1.0, max(0.0, t))
            p = math.log(1 + t * math.expm1(self.k)) / self.k * 100
            return min(100.0, max(0.0, p))
        return t * 100

    def to_value(self, p: float) -> float:
        p = min(100.0, max(0.0, p))
        span = self.domain_max - self.domain_min
        if self.log_scale:
            t = math.expm1(self.k * p / 100) / math.expm1(self.k)
            v = round_to_step(t * span + self.domain_min, self.step)
            return min(self.domain_max, max(self.domain_min, v))
        return p / 100 * span + self.domain_min

    # clamping

    def _clamp_low(self, v: float, high: float) -> float:
        v = min(max(v, self.domain_min), self.domain_max)
        v = min(v, high - self.step)
        # high - step can round up by an ulp with fractional steps
        while v + self.step > high:
            v = math.nextafter(v, -math.inf)
        return v

    def _clamp_high(self, v: float, low: float) -> float:
        v = min(max(v, self.domain_min), self.domain_max)
        v = max(v, low + self.step)
        while low + self.step > v:
            v = math.nextafter(v, math.inf)
        return v

    def _normalize(self, low: float, high: float) -> Pair:
        high = min(max(high, self.domain_min + self.step), self.domain_max)
        low = self._clamp_low(low, high)
        return low, high

    def _emit(self) -> None:
        if self.on_change is not None:
            self.on_change(self.value)

    # handle movement

    def set_low(self, v: float) -> float:
        self._low = self._clamp_low(v, self._high)
        self._emit()
        return self._low

    def set_high(self, v: float) -> float:
        self._high = self._clamp_high(v, self._low)
        self._emit()
        return self._high

    def drag_low(self, percent: float) -> float:
        return self.set_low(self.to_value(percent))

    def drag_high(self, percent: float) -> float:
        return self.set_high(self.to_value(percent))

    def commit_low_text(self, text: str) -> bool:
        """Commit a typed low value; unparseable text keeps the old value silently."""
        v = parse_manual_value(text)
        if v is None:
            logger.debug("Reverting low handle, could not parse %r", text)
            return False
        self.set_low(v)
        return True

    def commit_high_text(self, text: str) -> bool:
        v = parse_manual_value(text)
        if v is None:
            logger.debug("Reverting high handle, could not parse %r", text)
            return False
        self.set_high(v)
        return True

    def sync(self, value: Pair) -> None:
        """Adopt a pair pushed from outside (e.g. a facet reset) without notifying."""
        self._low, self._high = self._normalize(*value)

    def track(self) -> Tuple[float, float]:
        """Left offset and width (percent) of the highlighted track segment."""
        lo = self.percent(self._low)
        hi = self.percent(self._high)
        return lo, hi - lo
