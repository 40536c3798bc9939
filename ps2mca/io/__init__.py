"""I/O modules for the PS2 memory card converter."""

from .card_io import read_exact, write_exact, get_stream_size, open_card

__all__ = [
    'read_exact',
    'write_exact',
    'get_stream_size',
    'open_card',
]
