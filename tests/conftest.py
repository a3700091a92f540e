import pytest

from detection.landmarks import Landmark, FaceLandmarkIndex as F, HandLandmarkIndex as H

FACE_SIZE = 478
HAND_SIZE = 21

EYE_Y = 0.40
UPPER_LIP_Y = 0.68


def make_face(
    left_eye=0.025,
    right_eye=0.025,
    brow=0.004,
    mouth_open=0.005,
    mouth_width=0.1,
    smile=0.0,
    nose_y=0.60,
    lower_lip_center_y=0.72,
    chin_y=0.75,
    size=FACE_SIZE,
):
    """
    Synthetic face mesh. The defaults describe a relaxed, neutral face;
    every argument is the feature value the expression rules will see.
    """
    points = [Landmark(0.5, 0.5, 0.0) for _ in range(size)]

    def put(index, x, y):
        if index < size:
            points[index] = Landmark(x, y, 0.0)

    put(F.LEFT_EYE_TOP, 0.40, EYE_Y)
    put(F.LEFT_EYE_BOTTOM, 0.40, EYE_Y + left_eye)
    put(F.RIGHT_EYE_TOP, 0.60, EYE_Y)
    put(F.RIGHT_EYE_BOTTOM, 0.60, EYE_Y + right_eye)
    put(F.LEFT_BROW_TOP, 0.40, EYE_Y - brow)
    put(F.RIGHT_BROW_TOP, 0.60, EYE_Y - brow)
    put(F.NOSE_TIP, 0.50, nose_y)
    put(F.UPPER_LIP_TOP, 0.50, UPPER_LIP_Y)
    put(F.LOWER_LIP_BOTTOM, 0.50, UPPER_LIP_Y + mouth_open)
    put(F.MOUTH_LEFT, 0.50 - mouth_width / 2, UPPER_LIP_Y - smile)
    put(F.MOUTH_RIGHT, 0.50 + mouth_width / 2, UPPER_LIP_Y - smile)
    put(F.LOWER_LIP_CENTER, 0.50, lower_lip_center_y)
    put(F.CHIN, 0.50, chin_y)
    return points


FINGER_X = {"index": 0.44, "middle": 0.48, "ring": 0.52, "pinky": 0.56}
FINGER_IDS = {
    "index": (H.INDEX_MCP, H.INDEX_PIP, H.INDEX_DIP, H.INDEX_TIP),
    "middle": (H.MIDDLE_MCP, H.MIDDLE_PIP, H.MIDDLE_DIP, H.MIDDLE_TIP),
    "ring": (H.RING_MCP, H.RING_PIP, H.RING_DIP, H.RING_TIP),
    "pinky": (H.PINKY_MCP, H.PINKY_PIP, H.PINKY_DIP, H.PINKY_TIP),
}


def make_hand(
    thumb=False,
    index=False,
    middle=False,
    ring=False,
    pinky=False,
    thumb_y=0.75,
    thumb_tip=None,
    index_tip=None,
    size=HAND_SIZE,
):
    """
    Synthetic upright hand, wrist at the bottom (y=0.8), palm center x=0.5.

    Extended fingers put the tip well above the PIP joint, curled ones
    below it. An extended thumb sticks out sideways from the palm.
    """
    points = [Landmark(0.5, 0.5, 0.0) for _ in range(HAND_SIZE)]
    points[H.WRIST] = Landmark(0.50, 0.80)
    states = {"index": index, "middle": middle, "ring": ring, "pinky": pinky}

    for name, (mcp, pip, dip, tip) in FINGER_IDS.items():
        x = FINGER_X[name]
        extended = states[name]
        points[mcp] = Landmark(x, 0.62)
        points[pip] = Landmark(x, 0.50)
        points[dip] = Landmark(x, 0.42 if extended else 0.54)
        points[tip] = Landmark(x, 0.35 if extended else 0.55)

    points[H.THUMB_CMC] = Landmark(0.45, 0.72)
    points[H.THUMB_MCP] = Landmark(0.42, 0.68)
    points[H.THUMB_IP] = Landmark(0.38 if thumb else 0.44, thumb_y)
    points[H.THUMB_TIP] = Landmark(0.30 if thumb else 0.46, thumb_y)

    if thumb_tip is not None:
        points[H.THUMB_TIP] = Landmark(*thumb_tip)
    if index_tip is not None:
        points[H.INDEX_TIP] = Landmark(*index_tip)
    return points[:size]


@pytest.fixture
def neutral_face():
    return make_face()


@pytest.fixture
def open_palm():
    return make_hand(thumb=True, index=True, middle=True, ring=True, pinky=True)


@pytest.fixture
def fist_hand():
    return make_hand()


@pytest.fixture
def peace_hand():
    return make_hand(index=True, middle=True)
