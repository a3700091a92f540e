"""
Temporal stabilizer: turns a noisy per-frame category into a stable one.

Each frame the raw category joins a fixed-size history window. The
majority of that window is the *smoothed* category. The visible
``current`` category only switches to a smoothed candidate after the
candidate has persisted for ``hold_time`` ms, and never sooner than
``debounce`` ms after the previous switch.
"""
from collections import Counter, deque
from typing import Deque, Optional
import logging
import time

from .categories import Category, Classification
from .config import TransitionConfig

logger = logging.getLogger(__name__)


def now_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.perf_counter() * 1000.0


class TemporalStabilizer:
    """
    Majority vote plus hold/debounce state machine for one classifier.

    Majority ties are resolved deterministically:
    1. if ``current`` is among the leaders it is kept;
    2. otherwise the leader seen most recently in the window wins.

    Args:
        default: Category reported before any switch and after reset.
        config: Hold time, debounce and history length.
    """

    def __init__(self, default: Category, config: Optional[TransitionConfig] = None):
        self._default = default
        self._config = config or TransitionConfig()
        self._history: Deque[Category] = deque(maxlen=max(1, int(self._config.history_length)))
        self._current: Category = default
        self._pending: Optional[Category] = None
        self._hold_start: float = 0.0
        self._last_switch: Optional[float] = None
        self._confidence: float = 0.0

    @property
    def current(self) -> Category:
        return self._current

    @property
    def pending(self) -> Optional[Category]:
        return self._pending

    @property
    def history(self) -> list:
        return list(self._history)

    @property
    def confidence(self) -> float:
        """Raw confidence of the last frame."""
        return self._confidence

    def smoothed(self) -> Category:
        """Majority category of the history window."""
        if not self._history:
            return self._current
        counts = Counter(self._history)
        top = max(counts.values())
        leaders = {c for c, n in counts.items() if n == top}
        if self._current in leaders:
            return self._current
        for category in reversed(self._history):
            if category in leaders:
                return category
        return self._current  # unreachable, history is non-empty

    def update(self, raw: Classification, now: Optional[float] = None) -> Classification:
        """
        Feed one raw classification.

        Returns:
            The stable category paired with this frame's *raw* confidence.
        """
        if now is None:
            now = now_ms()

        self._history.append(raw.category)
        self._confidence = raw.confidence
        smoothed = self.smoothed()

        if smoothed == self._current:
            self._pending = None
        elif smoothed != self._pending:
            # New candidate: restart the hold timer
            self._pending = smoothed
            self._hold_start = now
        elif now - self._hold_start >= self._config.hold_time and self._debounced(now):
            logger.debug("Switch %s -> %s", self._current.value, smoothed.value)
            self._current = smoothed
            self._last_switch = now
            self._pending = None

        return Classification(self._current, raw.confidence)

    def _debounced(self, now: float) -> bool:
        if self._last_switch is None:
            return True
        return now - self._last_switch >= self._config.debounce

    def reset(self) -> None:
        """Clear history and state, back to the default category."""
        self._history.clear()
        self._current = self._default
        self._pending = None
        self._hold_start = 0.0
        self._last_switch = None
        self._confidence = 0.0
