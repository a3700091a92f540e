"""
Brainrot UI Module

PyQt5 window showing the selected meme.
"""
from .meme_window import MemeWindow

__all__ = [
    'MemeWindow',
]
