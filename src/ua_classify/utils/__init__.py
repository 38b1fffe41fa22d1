"""Utility modules for batch classification runs."""

from .decompress import Decompressor
from .progress import ProgressTracker

__all__ = ["Decompressor", "ProgressTracker"]
