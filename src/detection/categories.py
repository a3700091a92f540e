"""
Detection categories, per-frame results and display info.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


class Expression(Enum):
    """Facial expressions, declared in rule priority order. NEUTRAL is the default."""
    SCREAM = "scream"
    SHOCK = "shock"
    TONGUE = "tongue"
    KISSY = "kissy"
    HAPPY = "happy"
    WINK = "wink"
    SAD = "sad"
    GLARE = "glare"
    SUSPICIOUS = "suspicious"
    SLEEPY = "sleepy"
    EYEBROW = "eyebrow"
    POUT = "pout"
    DISGUST = "disgust"
    CONFUSED = "confused"
    NEUTRAL = "neutral"


class Gesture(Enum):
    """Hand gestures, declared in rule priority order. NONE is the default."""
    MIDDLE_FINGER = "middle_finger"
    THUMBS_UP = "thumbs_up"
    THUMBS_DOWN = "thumbs_down"
    PEACE = "peace"
    OK = "ok"
    ROCK_ON = "rock_on"
    POINTING = "pointing"
    WAVE = "wave"
    FIST = "fist"
    NONE = "none"


Category = Union[Expression, Gesture]


@dataclass(frozen=True)
class Classification:
    """A category with a heuristic confidence in [0, 1]."""
    category: Category
    confidence: float = 0.0


EXPRESSION_INFO = {
    Expression.SHOCK: ("😮", "Shock"),
    Expression.SCREAM: ("😱", "Scream"),
    Expression.TONGUE: ("😛", "Tongue"),
    Expression.HAPPY: ("😊", "Happy"),
    Expression.SAD: ("😢", "Sad"),
    Expression.WINK: ("😉", "Wink"),
    Expression.GLARE: ("😒", "Glare"),
    Expression.SUSPICIOUS: ("🤨", "Suspicious"),
    Expression.SLEEPY: ("😴", "Sleepy"),
    Expression.EYEBROW: ("🤔", "Eyebrow"),
    Expression.CONFUSED: ("😕", "Confused"),
    Expression.POUT: ("😤", "Pout"),
    Expression.DISGUST: ("🤢", "Disgust"),
    Expression.KISSY: ("😘", "Kissy"),
    Expression.NEUTRAL: ("😐", "Neutral"),
}

GESTURE_INFO = {
    Gesture.MIDDLE_FINGER: ("🖕", "Middle Finger"),
    Gesture.THUMBS_UP: ("👍", "Thumbs Up"),
    Gesture.THUMBS_DOWN: ("👎", "Thumbs Down"),
    Gesture.PEACE: ("✌️", "Peace"),
    Gesture.OK: ("👌", "OK"),
    Gesture.ROCK_ON: ("🤘", "Rock On"),
    Gesture.WAVE: ("👋", "Wave"),
    Gesture.FIST: ("👊", "Fist"),
    Gesture.POINTING: ("☝️", "Pointing"),
    Gesture.NONE: ("✋", "No Gesture"),
}

UNKNOWN_INFO = ("❓", "Unknown")


def parse_category(name: Union[str, Category, None]) -> Optional[Category]:
    """Resolve a category name to its enum member, expressions first."""
    if isinstance(name, (Expression, Gesture)):
        return name
    for enum_cls in (Expression, Gesture):
        try:
            return enum_cls(name)
        except ValueError:
            continue
    return None


def category_name(category: Union[str, Category]) -> str:
    """The string key of a category (its enum value)."""
    if isinstance(category, (Expression, Gesture)):
        return category.value
    return str(category)


def display_info(category: Union[str, Category, None]) -> Tuple[str, str]:
    """(emoji, name) for any expression or gesture."""
    member = parse_category(category)
    if isinstance(member, Expression):
        return EXPRESSION_INFO[member]
    if isinstance(member, Gesture):
        return GESTURE_INFO[member]
    return UNKNOWN_INFO


def format_badge(category: Union[str, Category, None], confidence: float) -> str:
    emoji, name = display_info(category)
    pct = round(max(0.0, min(1.0, confidence)) * 100)
    return f"{emoji} {name} {pct}%"
