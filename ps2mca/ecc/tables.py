"""Parity and column parity mask lookup tables for the memory card ECC."""

from dataclasses import dataclass
from functools import lru_cache

import numpy as np

from ..constants import COLUMN_PARITY_MASKS


def parity(byte: int) -> int:
    """
    Return the parity (XOR of all 8 bits) of a byte.

    The byte is folded onto itself three times so bit 0 ends up holding
    the XOR of every bit.

    Args:
        byte: Value in range [0, 255]

    Returns:
        1 if the byte has an odd number of set bits, else 0
    """
    byte ^= byte >> 1
    byte ^= byte >> 2
    byte ^= byte >> 4
    return byte & 1


def column_parity_mask(byte: int, parity_table: np.ndarray) -> int:
    """
    Return the 7-bit column parity mask of a byte.

    Bit i holds the parity of ``byte & COLUMN_PARITY_MASKS[i]``.
    """
    mask = 0
    for i, cpmask in enumerate(COLUMN_PARITY_MASKS):
        mask |= int(parity_table[byte & cpmask]) << i
    return mask


def build_parity_table() -> np.ndarray:
    """Build the 256-entry parity lookup table (uint8)."""
    return np.array([parity(b) for b in range(256)], dtype=np.uint8)


def build_column_parity_masks(parity_table: np.ndarray) -> np.ndarray:
    """Build the 256-entry column parity mask table from a parity table."""
    return np.array([column_parity_mask(b, parity_table) for b in range(256)],
                    dtype=np.uint8)


@dataclass(frozen=True)
class EccTables:
    """Read-only pair of lookup tables shared by every ECC computation."""

    parity: np.ndarray
    column_parity_masks: np.ndarray

    def __post_init__(self):
        for name in ('parity', 'column_parity_masks'):
            table = getattr(self, name)
            if table.shape != (256,) or table.dtype != np.uint8:
                raise ValueError(f"{name} must be a 256-entry uint8 table")
            table.flags.writeable = False


def make_ecc_tables() -> EccTables:
    """Build a fresh set of ECC lookup tables."""
    parity_table = build_parity_table()
    return EccTables(parity=parity_table,
                     column_parity_masks=build_column_parity_masks(parity_table))


@lru_cache(maxsize=None)
def get_ecc_tables() -> EccTables:
    """Return the process-wide tables, building them on first use."""
    return make_ecc_tables()
