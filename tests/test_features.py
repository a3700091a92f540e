import pytest

from conftest import make_face, make_hand
from detection.config import GestureConfig
from detection.features import (
    FaceFeatures,
    HandFeatures,
    distance,
    eye_ratio,
    finger_states,
    is_thumb_extended,
    lip_protrusion,
    palm_center_x,
    pucker_ratio,
)
from detection.landmarks import Landmark, HandLandmarkIndex as H


def test_face_features_from_synthetic_face():
    f = FaceFeatures.from_landmarks(make_face(
        left_eye=0.03, right_eye=0.01, brow=0.012, mouth_open=0.02,
        mouth_width=0.08, smile=0.01, nose_y=0.62, lower_lip_center_y=0.70,
    ))
    assert f.left_eye == pytest.approx(0.03)
    assert f.right_eye == pytest.approx(0.01)
    assert f.eye_opening == pytest.approx(0.02)
    assert f.eye_ratio == pytest.approx(1 / 3)
    assert f.mouth_open == pytest.approx(0.02)
    assert f.mouth_width == pytest.approx(0.08)
    assert f.smile_ratio == pytest.approx(0.01)
    assert f.pucker_ratio == pytest.approx(0.25)
    assert f.brow_height == pytest.approx(0.012)
    assert f.lip_protrusion == pytest.approx(0.05)
    assert f.lip_nose_distance == pytest.approx(0.06)


def test_distance_ignores_depth():
    points = [Landmark(0.0, 0.0, 0.0), Landmark(0.3, 0.4, 0.9)]
    assert distance(points, 0, 1) == pytest.approx(0.5)


def test_distance_missing_point_is_zero():
    assert distance([Landmark(0.1, 0.1)], 0, 5) == 0.0


def test_eye_ratio_both_closed():
    assert eye_ratio(make_face(left_eye=0.0, right_eye=0.0)) == 1.0


def test_pucker_ratio_zero_width():
    assert pucker_ratio(make_face(mouth_width=0.0)) == 0.0


def test_missing_lip_points_are_none():
    # Without the chin and lower lip center the feature is unavailable
    assert lip_protrusion(make_face(size=100)) is None
    assert FaceFeatures.from_landmarks(make_face(size=100)).lip_nose_distance is not None


def test_finger_states_open_palm(open_palm):
    assert tuple(finger_states(open_palm)) == (True, True, True, True, True)


def test_finger_states_fist(fist_hand):
    assert not any(finger_states(fist_hand))


def test_finger_states_peace(peace_hand):
    f = finger_states(peace_hand)
    assert (f.thumb, f.index, f.middle, f.ring, f.pinky) == (False, True, True, False, False)


def test_palm_center():
    assert palm_center_x(make_hand()) == pytest.approx(0.5)
    assert palm_center_x([Landmark(0.5, 0.5)]) is None


def test_thumb_extension_uses_spread_ratio():
    hand = make_hand(thumb=True)
    assert is_thumb_extended(hand, 1.2)
    # Tip is 0.2 from the palm center, MCP 0.08
    assert not is_thumb_extended(hand, 3.0)


def test_hand_features_thumb_direction():
    config = GestureConfig()
    up = HandFeatures.from_landmarks(make_hand(thumb=True, thumb_y=0.6), config)
    down = HandFeatures.from_landmarks(make_hand(thumb=True, thumb_y=0.95), config)
    level = HandFeatures.from_landmarks(make_hand(thumb=True), config)

    assert up.thumb_up and not up.thumb_down
    assert down.thumb_down and not down.thumb_up
    assert not level.thumb_up and not level.thumb_down


def test_curled_thumb_is_neither_up_nor_down():
    features = HandFeatures.from_landmarks(make_hand(thumb=False, thumb_y=0.6), GestureConfig())
    assert not features.thumb_up


def test_thumb_index_distance():
    hand = make_hand(thumb_tip=(0.40, 0.40), index_tip=(0.43, 0.44))
    features = HandFeatures.from_landmarks(hand, GestureConfig())
    assert features.thumb_index_distance == pytest.approx(0.05)

    short = HandFeatures.from_landmarks(hand[:H.THUMB_TIP + 1], GestureConfig())
    assert short.thumb_index_distance is None
