"""
Brainrot Meme Module

Category-indexed meme assets with variety-preserving selection.
"""
from .pool import MemePool
from .catalog import discover_assets, build_pool

__all__ = [
    'MemePool',
    'discover_assets',
    'build_pool',
]
