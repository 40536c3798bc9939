"""Hamming ECC for PS2 memory card pages.

Each 512-byte page is split into four 128-byte chunks. Every chunk gets a
3-byte code:

    byte 0: column parity (locates the bit inside a byte)
    byte 1: line parity over the complemented byte offsets (top bit clear)
    byte 2: line parity over the byte offsets

The twelve code bytes are followed by four zero bytes to form the 16-byte
ECC block stored after the page.

The default (EccMode.STANDARD) folds the byte offset inside the chunk into
the line parities, as mymc does. EccMode.LEGACY is the literal behaviour of
ps2_mca_converter 1.0: the line parities fold the chunk index i (0-3) once
per odd-parity byte and the column parity stays at its seed 0x77.
"""

from typing import Tuple, Union

import numpy as np

from ..constants import (
    BYTES_PER_PAGE, ECC_CHUNK_SIZE, ECC_CHUNKS_PER_PAGE, ECC_DATA_SIZE,
    ECC_GROUP_SIZE, ECC_SIZE, COLUMN_PARITY_SEED, LINE_PARITY_SEED,
)
from .tables import EccTables, get_ecc_tables
from .type import EccMode

BytesLike = Union[bytes, bytearray, memoryview, np.ndarray]

_CHUNK_OFFSETS = np.arange(ECC_CHUNK_SIZE, dtype=np.uint8)
_CHUNK_INDICES = np.arange(ECC_CHUNKS_PER_PAGE, dtype=np.uint8)


def _as_uint8(data: BytesLike) -> np.ndarray:
    if isinstance(data, np.ndarray):
        if data.dtype != np.uint8 and data.size and (data.min() < 0 or data.max() > 255):
            raise ValueError(
                f"Byte values must be in range [0, 255], got [{data.min()}, {data.max()}]")
        return data.astype(np.uint8, copy=False)
    return np.frombuffer(bytes(data), dtype=np.uint8)


def _standard_groups(chunks: np.ndarray,
                     tables: EccTables) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Compute the cumulative Hamming code of every 128-byte chunk.

    Args:
        chunks: uint8 array whose last axis has 128 entries
        tables: Lookup tables

    Returns:
        (column_parity, line_parity_0, line_parity_1), each shaped like
        chunks without its last axis
    """
    odd = tables.parity[chunks]

    column_parity = COLUMN_PARITY_SEED ^ np.bitwise_xor.reduce(
        tables.column_parity_masks[chunks], axis=-1)
    line_parity_0 = LINE_PARITY_SEED ^ np.bitwise_xor.reduce(
        odd * ~_CHUNK_OFFSETS, axis=-1)
    line_parity_1 = LINE_PARITY_SEED ^ np.bitwise_xor.reduce(
        odd * _CHUNK_OFFSETS, axis=-1)

    return column_parity, line_parity_0 & 0x7F, line_parity_1


def _legacy_groups(chunks: np.ndarray,
                   tables: EccTables) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Reproduce ps2_mca_converter 1.0 output for (n, 4, 128) chunks.

    Its column parity accumulator was shadowed inside the byte loop, so the
    emitted value is always the seed. Its line parities toggle with the
    chunk index once per odd-parity byte, so only the count's parity matters.
    """
    toggles = np.bitwise_xor.reduce(tables.parity[chunks], axis=-1)

    column_parity = np.full(toggles.shape, COLUMN_PARITY_SEED, dtype=np.uint8)
    line_parity_0 = LINE_PARITY_SEED ^ (toggles * ~_CHUNK_INDICES)
    line_parity_1 = LINE_PARITY_SEED ^ (toggles * _CHUNK_INDICES)

    return column_parity, line_parity_0 & 0x7F, line_parity_1


def calculate_pages_ecc(pages: BytesLike, tables: EccTables = None,
                        mode: EccMode = EccMode.STANDARD) -> np.ndarray:
    """
    Calculate the 16-byte ECC blocks for a run of pages.

    Pages are independent, so the whole run is computed at once.

    Args:
        pages: (n, 512) uint8 array, or a flat buffer of n * 512 bytes
        tables: Lookup tables (process-wide tables if None)
        mode: ECC variant to produce

    Returns:
        (n, 16) uint8 array; columns 12-15 are always zero

    Raises:
        ValueError: If the input is not a whole number of pages or holds
            values outside [0, 255]
    """
    if tables is None:
        tables = get_ecc_tables()

    pages = _as_uint8(pages)
    if pages.ndim == 1:
        if len(pages) % BYTES_PER_PAGE != 0:
            raise ValueError(
                f"Data length {len(pages)} is not a multiple of {BYTES_PER_PAGE}")
        pages = pages.reshape(-1, BYTES_PER_PAGE)
    elif pages.ndim != 2 or pages.shape[1] != BYTES_PER_PAGE:
        raise ValueError(f"Expected (n, {BYTES_PER_PAGE}) pages, got {pages.shape}")

    n = pages.shape[0]
    chunks = pages.reshape(n, ECC_CHUNKS_PER_PAGE, ECC_CHUNK_SIZE)

    if mode == EccMode.STANDARD:
        groups = _standard_groups(chunks, tables)
    elif mode == EccMode.LEGACY:
        groups = _legacy_groups(chunks, tables)
    else:
        raise ValueError(f"Unsupported ECC mode: {mode}")

    ecc = np.zeros((n, ECC_SIZE), dtype=np.uint8)
    for k, values in enumerate(groups):
        ecc[:, k:ECC_DATA_SIZE:ECC_GROUP_SIZE] = values
    return ecc


def calculate_page_ecc(page: BytesLike, tables: EccTables = None,
                       mode: EccMode = EccMode.STANDARD) -> bytes:
    """Return the 12 meaningful ECC bytes of a single 512-byte page."""
    return calculate_ecc_block(page, tables, mode)[:ECC_DATA_SIZE]


def calculate_ecc_block(page: BytesLike, tables: EccTables = None,
                        mode: EccMode = EccMode.STANDARD) -> bytes:
    """Return the full 16-byte ECC block of a single 512-byte page."""
    page = _as_uint8(page)
    if page.size != BYTES_PER_PAGE:
        raise ValueError(f"Page must be {BYTES_PER_PAGE} bytes, got {page.size}")
    return calculate_pages_ecc(page.reshape(1, BYTES_PER_PAGE), tables, mode)[0].tobytes()


def calculate_chunk_ecc(chunk: BytesLike, tables: EccTables = None) -> bytes:
    """Return the 3-byte standard Hamming code of one 128-byte chunk."""
    if tables is None:
        tables = get_ecc_tables()

    chunk = _as_uint8(chunk)
    if chunk.size != ECC_CHUNK_SIZE:
        raise ValueError(f"Chunk must be {ECC_CHUNK_SIZE} bytes, got {chunk.size}")

    column_parity, line_parity_0, line_parity_1 = _standard_groups(
        chunk.reshape(ECC_CHUNK_SIZE), tables)
    return bytes([int(column_parity), int(line_parity_0), int(line_parity_1)])
