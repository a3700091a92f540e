"""
Meme pool: randomized asset selection with variety.
"""
from collections import deque
from typing import Deque, Dict, Iterable, List, Mapping, Optional, Union
import logging
import random

from detection.categories import Category, category_name

logger = logging.getLogger(__name__)

RECENT_HISTORY_SIZE = 3


class MemePool:
    """
    Category-indexed asset identifiers with per-category recent buffers.

    ``select`` avoids returning any of the last ``recent_size`` picks of
    the same category, unless the category has no other assets left.
    Empty categories fall back to the default category's assets.

    Args:
        catalogue: Mapping from category name to asset identifiers.
        recent_size: Capacity of each recent buffer.
        default_category: Fallback category for empty pools.
        rng: Random source, injectable for reproducible tests.
    """

    def __init__(
        self,
        catalogue: Optional[Mapping[str, Iterable[str]]] = None,
        recent_size: int = RECENT_HISTORY_SIZE,
        default_category: Union[str, Category] = "neutral",
        rng: Optional[random.Random] = None,
    ):
        self._pool: Dict[str, List[str]] = {}
        self._recent: Dict[str, Deque[str]] = {}
        self._recent_size = max(0, int(recent_size))
        self._default = category_name(default_category)
        self._rng = rng or random.Random()

        for category, assets in (catalogue or {}).items():
            for asset in assets:
                self.add(category, asset)

    @property
    def default_category(self) -> str:
        return self._default

    def add(self, category: Union[str, Category], asset: str) -> None:
        self._pool.setdefault(category_name(category), []).append(asset)

    def assets(self, category: Union[str, Category]) -> List[str]:
        return list(self._pool.get(category_name(category), []))

    def recent(self, category: Union[str, Category]) -> List[str]:
        return list(self._recent.get(category_name(category), []))

    def select(self, category: Union[str, Category]) -> Optional[str]:
        """
        Pick a random asset for the category.

        Returns:
            An asset identifier, or None when neither the category nor the
            default category has any assets.
        """
        key = category_name(category)
        pool = self._pool.get(key)
        if not pool:
            # Fallback to the default category's assets
            key = self._default
            pool = self._pool.get(key)
            if not pool:
                return None

        recent = self._recent.setdefault(key, deque(maxlen=self._recent_size))
        available = [a for a in pool if a not in recent]
        if not available:
            available = pool

        selected = self._rng.choice(available)
        if self._recent_size:
            recent.append(selected)
        logger.debug("Meme selected for %s: %s", key, selected)
        return selected

    def count(self, category: Union[str, Category]) -> int:
        return len(self._pool.get(category_name(category), []))

    def total_count(self) -> int:
        return sum(len(assets) for assets in self._pool.values())

    def is_ready(self) -> bool:
        return self.total_count() > 0

    def categories(self) -> List[str]:
        return [c for c, assets in self._pool.items() if assets]

    def reset(self) -> None:
        """Forget recent picks. The catalogue itself is kept."""
        self._recent.clear()

    def summary(self) -> str:
        return ", ".join(f"{c}: {len(a)}" for c, a in self._pool.items() if a)
