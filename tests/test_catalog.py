from pathlib import Path

import pytest

from detection.config import MemeConfig
from memes.catalog import build_pool, discover_assets, legacy_category


def touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    return path


@pytest.fixture
def assets_dir(tmp_path):
    touch(tmp_path / "expressions" / "happy" / "grin.png")
    touch(tmp_path / "expressions" / "happy" / "more" / "lol.JPG")
    touch(tmp_path / "expressions" / "happy" / "notes.txt")
    touch(tmp_path / "expressions" / "bored" / "yawn.png")
    touch(tmp_path / "gestures" / "wave" / "hi.webp")
    touch(tmp_path / "gestures" / "neutral" / "misplaced.png")
    touch(tmp_path / "shock_cat.png")
    touch(tmp_path / "larry.jpeg")
    touch(tmp_path / "random.png")
    return tmp_path


def test_discover_structured_layout(assets_dir):
    catalogue = discover_assets(assets_dir)
    assert catalogue["happy"] == [
        str(assets_dir / "expressions" / "happy" / "grin.png"),
        str(assets_dir / "expressions" / "happy" / "more" / "lol.JPG"),
    ]
    assert catalogue["wave"] == [str(assets_dir / "gestures" / "wave" / "hi.webp")]
    assert "bored" not in catalogue


def test_gesture_group_only_accepts_gestures(assets_dir):
    catalogue = discover_assets(assets_dir)
    assert str(assets_dir / "gestures" / "neutral" / "misplaced.png") not in catalogue["neutral"]


def test_legacy_flat_files(assets_dir):
    catalogue = discover_assets(assets_dir)
    assert catalogue["shock"] == [str(assets_dir / "shock_cat.png")]
    assert catalogue["neutral"] == [str(assets_dir / "larry.jpeg")]
    assert str(assets_dir / "random.png") not in sum(catalogue.values(), [])


def test_every_category_is_present(tmp_path):
    catalogue = discover_assets(tmp_path)
    assert "scream" in catalogue and "middle_finger" in catalogue and "none" in catalogue
    assert all(assets == [] for assets in catalogue.values())


def test_missing_directory(tmp_path):
    catalogue = discover_assets(tmp_path / "nope")
    assert catalogue["happy"] == []


@pytest.mark.parametrize("filename, category", [
    ("blink_twice.png", "sleepy"),
    ("Happy-Dog.png", "happy"),
    ("larry_stare.jpg", "neutral"),
    ("scream.gif", "scream"),
    ("cat.png", None),
])
def test_legacy_category(filename, category):
    assert legacy_category(filename) == category


def test_build_pool(assets_dir):
    pool = build_pool(MemeConfig(assets_dir=str(assets_dir), default_category="neutral"))
    assert pool.count("happy") == 2
    assert pool.total_count() == 5
    # Empty category falls back to the legacy neutral asset
    assert pool.select("sad") == str(assets_dir / "larry.jpeg")


def test_build_pool_directory_override(assets_dir, tmp_path_factory):
    empty = tmp_path_factory.mktemp("empty")
    pool = build_pool(MemeConfig(assets_dir=str(assets_dir)), assets_dir=empty)
    assert not pool.is_ready()


def test_camel_case_gesture_directories(tmp_path):
    for name in ("thumbsUp", "thumbsDown", "middleFinger", "rockOn"):
        touch(tmp_path / "gestures" / name / "a.png")
    catalogue = discover_assets(tmp_path)

    assert catalogue["thumbs_up"] == [str(tmp_path / "gestures" / "thumbsUp" / "a.png")]
    assert catalogue["thumbs_down"] == [str(tmp_path / "gestures" / "thumbsDown" / "a.png")]
    assert catalogue["middle_finger"] == [str(tmp_path / "gestures" / "middleFinger" / "a.png")]
    assert catalogue["rock_on"] == [str(tmp_path / "gestures" / "rockOn" / "a.png")]
    assert "thumbsUp" not in catalogue
