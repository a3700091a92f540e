import random

import pytest

from conftest import make_face, make_hand
from detection.categories import Expression, Gesture
from detection.config import Config, TransitionConfig
from detection.expressions import ExpressionDetector
from detection.gestures import GestureDetector
from detection.orchestrator import FrameOrchestrator
from memes.pool import MemePool

FAST = TransitionConfig(hold_time=0, debounce=0, history_length=1)


class FakePool:
    """Records every selection and hands out numbered asset names."""

    def __init__(self):
        self.calls = []

    def select(self, category):
        self.calls.append(category)
        return f"{category.value}-{len(self.calls)}"


def make_orchestrator(pool=None, confidence_floor=0.5, transitions=FAST):
    return FrameOrchestrator(
        ExpressionDetector(transitions=transitions),
        GestureDetector(transitions=transitions),
        pool=pool,
        confidence_floor=confidence_floor,
        target_fps=30,
    )


def run(orchestrator, face, hand, frames, start=0, spacing=33):
    result = None
    for i in range(frames):
        result = orchestrator.process(face, hand, now=start + i * spacing)
    return result


def test_expression_is_active_without_hand():
    orchestrator = make_orchestrator()
    result = run(orchestrator, make_face(smile=0.02), None, 3)
    assert result.expression == Expression.HAPPY
    assert result.gesture == Gesture.NONE
    assert result.gesture_confidence == 0.0
    assert result.active == Expression.HAPPY
    assert result.confidence == result.expression_confidence


def test_gesture_overrides_expression(open_palm):
    orchestrator = make_orchestrator()
    result = run(orchestrator, make_face(smile=0.02), open_palm, 3)
    assert result.expression == Expression.HAPPY
    assert result.gesture == Gesture.WAVE
    assert result.active == Gesture.WAVE
    assert result.confidence == 0.8


def test_gesture_confidence_must_exceed_floor(open_palm):
    # Wave is reported at exactly 0.8
    orchestrator = make_orchestrator(confidence_floor=0.8)
    result = run(orchestrator, make_face(smile=0.02), open_palm, 3)
    assert result.gesture == Gesture.WAVE
    assert result.active == Expression.HAPPY


def test_unmatched_hand_does_not_override(neutral_face):
    orchestrator = make_orchestrator()
    hand = make_hand(thumb=True, middle=True)
    result = run(orchestrator, neutral_face, hand, 3)
    assert result.active == Expression.NEUTRAL


def test_asset_selected_only_on_change(neutral_face, open_palm):
    pool = FakePool()
    orchestrator = make_orchestrator(pool)

    first = orchestrator.process(neutral_face, None, now=0)
    assert first.asset == "neutral-1"
    for i in range(1, 5):
        assert orchestrator.process(neutral_face, None, now=i * 33).asset == "neutral-1"
    assert pool.calls == [Expression.NEUTRAL]

    # Stable category switches on the second frame of the new gesture
    orchestrator.process(neutral_face, open_palm, now=200)
    result = orchestrator.process(neutral_face, open_palm, now=233)
    assert result.active == Gesture.WAVE
    assert result.asset == "wave-2"
    assert orchestrator.process(neutral_face, open_palm, now=266).asset == "wave-2"
    assert pool.calls == [Expression.NEUTRAL, Gesture.WAVE]


def test_no_pool_means_no_asset(neutral_face):
    result = make_orchestrator().process(neutral_face, None, now=0)
    assert result.asset is None


def test_stabilized_category_drives_the_switch(neutral_face):
    orchestrator = make_orchestrator(transitions=TransitionConfig())
    smiling = make_face(smile=0.02)
    result = run(orchestrator, smiling, None, 5)
    # Raw confidence is reported, the stable category has not switched yet
    assert result.expression == Expression.NEUTRAL
    assert result.expression_confidence == 1.0


def test_should_process_throttles():
    orchestrator = make_orchestrator()
    assert orchestrator.should_process(now=0)
    assert not orchestrator.should_process(now=10)
    assert not orchestrator.should_process(now=33)
    assert orchestrator.should_process(now=34)
    assert not orchestrator.should_process(now=50)


def test_throttle_disabled():
    orchestrator = FrameOrchestrator(ExpressionDetector(), GestureDetector(), target_fps=0)
    assert all(orchestrator.should_process(now=0) for _ in range(5))


def test_fps_published_after_one_second(neutral_face):
    orchestrator = make_orchestrator()
    for i in range(10):
        assert orchestrator.process(neutral_face, None, now=i * 100).fps == 0
    result = orchestrator.process(neutral_face, None, now=1000)
    assert result.fps == 11
    assert orchestrator.fps == 11


def test_reset_clears_session_but_not_pool(neutral_face, open_palm):
    pool = MemePool({"neutral": ["a", "b"], "wave": ["w"]}, rng=random.Random(0))
    orchestrator = make_orchestrator(pool)
    run(orchestrator, neutral_face, open_palm, 3)
    orchestrator.should_process(now=100)
    assert orchestrator.asset == "w"

    orchestrator.reset()
    assert orchestrator.asset is None
    assert orchestrator.fps == 0
    assert orchestrator.expression_detector.current == Expression.NEUTRAL
    assert orchestrator.gesture_detector.current == Gesture.NONE
    assert orchestrator.should_process(now=101)
    assert pool.recent("wave") == ["w"]


def test_from_config_uses_config_values():
    config = Config()
    config.gestures.confidence_floor = 0.9
    config.transitions.hold_time = 0
    config.transitions.debounce = 0
    orchestrator = FrameOrchestrator.from_config(config)

    hand = make_hand(thumb=True, index=True, middle=True, ring=True, pinky=True)
    result = run(orchestrator, make_face(), hand, 3)
    assert result.gesture == Gesture.WAVE
    assert result.active == Expression.NEUTRAL


@pytest.mark.parametrize("face", [None, [], make_face(size=400)])
def test_missing_face_is_neutral(face):
    result = make_orchestrator().process(face, None, now=0)
    assert result.expression == Expression.NEUTRAL
    assert result.expression_confidence == 0.0
    assert result.active == Expression.NEUTRAL
