"""Deadline-based timers for the single-threaded UI event loop.

Nothing here sleeps or spawns threads. A timer records a deadline from an
injected clock and the event loop calls ``poll()``; a cancelled or closed
timer never fires.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')
Clock = Callable[[], float]


class Debouncer(Generic[T]):
    """Commit the latest pushed value once input has been quiet for ``delay`` seconds."""

    def __init__(self, delay: float, on_commit: Callable[[T], None], clock: Clock = time.monotonic) -> None:
        self.delay = delay
        self.on_commit = on_commit
        self._clock = clock
        self._pending: Optional[T] = None
        self._deadline: Optional[float] = None

    @property
    def pending(self) -> Optional[T]:
        return self._pending

    @property
    def armed(self) -> bool:
        return self._deadline is not None

    def push(self, value: T) -> None:
        self._pending = value
        self._deadline = self._clock() + self.delay

    def cancel(self) -> None:
        self._pending = None
        self._deadline = None

    def flush(self) -> bool:
        """Commit now (e.g. the user pressed Enter)."""
        if self._deadline is None:
            return False
        value = self._pending
        self.cancel()
        self.on_commit(value)  # type: ignore[arg-type]
        return True

    def poll(self) -> bool:
        if self._deadline is None or self._clock() < self._deadline:
            return False
        return self.flush()


class FacetPopover:
    """Open/closed state of one facet control with an inactivity auto-close.

    Any interaction re-arms the timer. Leaving the control with the pointer
    closes it at once, and the idle timer closes it when it expires, unless
    an input inside it has focus or a slider drag is in progress.
    """

    def __init__(
        self,
        idle_seconds: float,
        clock: Clock = time.monotonic,
        on_close: Optional[Callable[[], None]] = None,
    ) -> None:
        self.idle_seconds = idle_seconds
        self.on_close = on_close
        self._clock = clock
        self._deadline: Optional[float] = None
        self.is_open = False
        self.input_focused = False
        self.dragging = False

    @property
    def held(self) -> bool:
        return self.input_focused or self.dragging

    def _arm(self) -> None:
        self._deadline = self._clock() + self.idle_seconds

    def open(self) -> None:
        self.is_open = True
        self._arm()

    def close(self) -> None:
        if not self.is_open:
            return
        self.is_open = False
        self._deadline = None
        self.input_focused = False
        self.dragging = False
        if self.on_close is not None:
            self.on_close()

    def toggle(self) -> None:
        if self.is_open:
            self.close()
        else:
            self.open()

    def touch(self) -> None:
        if self.is_open:
            self._arm()

    def focus_input(self) -> None:
        self.input_focused = True
        self.touch()

    def blur_input(self) -> None:
        self.input_focused = False
        self.touch()

    def begin_drag(self) -> None:
        self.dragging = True
        self.touch()

    def end_drag(self) -> None:
        self.dragging = False
        self.touch()

    def pointer_left(self) -> bool:
        if not self.is_open or self.held:
            return False
        self.close()
        return True

    def poll(self) -> bool:
        """Close if the idle deadline passed; returns True when it closed."""
        if not self.is_open or self._deadline is None:
            return False
        if self._clock() < self._deadline:
            return False
        if self.held:
            self._arm()
            return False
        logger.debug("Facet popover closed after %.1fs idle", self.idle_seconds)
        self.close()
        return True
