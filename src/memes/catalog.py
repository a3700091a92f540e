"""
Asset discovery for the meme pool.

Layout under the assets directory:

    expressions/<category>/**/*.png
    gestures/<category>/**/*.png    also under camelCase names (thumbsUp, rockOn)
    *.png                          legacy flat files, matched by filename

Only png, jpg, jpeg and webp files are picked up.
"""
from pathlib import Path
from typing import Dict, List, Optional, Union
import logging

from detection.categories import Expression, Gesture
from detection.config import MemeConfig

from .pool import MemePool

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp"}

# Checked in order, first keyword found in the filename wins
LEGACY_KEYWORDS = [
    ("shock", Expression.SHOCK),
    ("scream", Expression.SCREAM),
    ("tongue", Expression.TONGUE),
    ("happy", Expression.HAPPY),
    ("sad", Expression.SAD),
    ("wink", Expression.WINK),
    ("glare", Expression.GLARE),
    ("suspicious", Expression.SUSPICIOUS),
    ("sleepy", Expression.SLEEPY),
    ("eyebrow", Expression.EYEBROW),
    ("confused", Expression.CONFUSED),
    ("pout", Expression.POUT),
    ("disgust", Expression.DISGUST),
    ("kissy", Expression.KISSY),
    ("blink", Expression.SLEEPY),
    ("larry", Expression.NEUTRAL),
    ("neutral", Expression.NEUTRAL),
]

# Directory names of older asset trees that used camelCase gesture keys
DIRECTORY_ALIASES = {
    "middleFinger": Gesture.MIDDLE_FINGER.value,
    "thumbsUp": Gesture.THUMBS_UP.value,
    "thumbsDown": Gesture.THUMBS_DOWN.value,
    "rockOn": Gesture.ROCK_ON.value,
}


def _is_image(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() in IMAGE_EXTENSIONS


def _scan_group(root: Path, known: set, catalogue: Dict[str, List[str]]) -> None:
    if not root.is_dir():
        return
    for category_dir in sorted(p for p in root.iterdir() if p.is_dir()):
        category = DIRECTORY_ALIASES.get(category_dir.name, category_dir.name)
        if category not in known:
            logger.warning("Skipping unknown category directory: %s", category_dir)
            continue
        for path in sorted(category_dir.rglob("*")):
            if _is_image(path):
                catalogue[category].append(str(path))


def legacy_category(filename: str) -> Optional[str]:
    """Category of a legacy flat asset, from keywords in its filename."""
    name = filename.lower()
    for keyword, category in LEGACY_KEYWORDS:
        if keyword in name:
            return category.value
    return None


def discover_assets(assets_dir: Union[str, Path]) -> Dict[str, List[str]]:
    """
    Build a catalogue of asset paths keyed by category name.

    Every category is present in the result, possibly with an empty list.
    """
    catalogue: Dict[str, List[str]] = {c.value: [] for c in list(Expression) + list(Gesture)}
    assets_dir = Path(assets_dir)
    if not assets_dir.is_dir():
        logger.warning("Assets directory not found: %s", assets_dir)
        return catalogue

    _scan_group(assets_dir / "expressions", {e.value for e in Expression}, catalogue)
    _scan_group(assets_dir / "gestures", {g.value for g in Gesture}, catalogue)

    for path in sorted(assets_dir.iterdir()):
        if not _is_image(path):
            continue
        category = legacy_category(path.name)
        if category is not None:
            catalogue[category].append(str(path))

    return catalogue


def build_pool(config: Optional[MemeConfig] = None, assets_dir: Union[str, Path, None] = None) -> MemePool:
    """Discover assets and load them into a new pool."""
    config = config or MemeConfig()
    catalogue = discover_assets(assets_dir if assets_dir is not None else config.assets_dir)
    pool = MemePool(
        catalogue,
        recent_size=config.recent_size,
        default_category=config.default_category,
    )
    logger.info("Meme pool initialized: %s", pool.summary() or "empty")
    return pool
