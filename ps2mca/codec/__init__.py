"""Codec modules for the PS2 memory card converter."""

from .converter import MemoryCardConverter
from .extractor import MemoryCardExtractor

__all__ = [
    'MemoryCardConverter',
    'MemoryCardExtractor',
]
