"""Detection and correction of single bit errors in memory card pages."""

from typing import Tuple

from ..constants import (
    BYTES_PER_PAGE, ECC_CHUNK_SIZE, ECC_CHUNKS_PER_PAGE, ECC_DATA_SIZE, ECC_GROUP_SIZE,
)
from .hamming import BytesLike, calculate_chunk_ecc
from .tables import EccTables, get_ecc_tables
from .type import EccCheckResult


def _popcount(value: int) -> int:
    return bin(value).count('1')


def check_chunk_ecc(chunk: BytesLike, ecc: BytesLike,
                    tables: EccTables = None) -> Tuple[EccCheckResult, bytes, bytes]:
    """
    Check a 128-byte chunk against its stored 3-byte code.

    A single flipped bit in the data is located through the syndromes and
    flipped back. A single flipped bit in the code itself (or any change
    confined to its unused bits) is fixed by replacing the code.

    Args:
        chunk: 128 data bytes
        ecc: 3 stored ECC bytes
        tables: Lookup tables (process-wide tables if None)

    Returns:
        (result, chunk, ecc) with chunk and ecc corrected when possible
    """
    chunk = bytearray(chunk)
    ecc = bytes(ecc)
    if len(chunk) != ECC_CHUNK_SIZE or len(ecc) != ECC_GROUP_SIZE:
        raise ValueError(
            f"Expected {ECC_CHUNK_SIZE} data bytes and {ECC_GROUP_SIZE} ECC bytes, "
            f"got {len(chunk)} and {len(ecc)}")

    computed = calculate_chunk_ecc(chunk, tables)
    if computed == ecc:
        return EccCheckResult.OK, bytes(chunk), ecc

    cp_diff = (computed[0] ^ ecc[0]) & 0x77
    lp0_diff = (computed[1] ^ ecc[1]) & 0x7F
    lp1_diff = (computed[2] ^ ecc[2]) & 0x7F
    lp_comp = lp0_diff ^ lp1_diff
    cp_comp = (cp_diff >> 4) ^ (cp_diff & 0x07)

    if lp_comp == 0x7F and cp_comp == 0x07:
        # Single bit error in the data
        chunk[lp1_diff] ^= 1 << (cp_diff >> 4)
        return EccCheckResult.CORRECTED, bytes(chunk), ecc

    if ((cp_diff == 0 and lp0_diff == 0 and lp1_diff == 0)
            or _popcount(lp_comp) + _popcount(cp_comp) == 1):
        # Single bit error in the code
        return EccCheckResult.CORRECTED, bytes(chunk), computed

    return EccCheckResult.FAILED, bytes(chunk), ecc


def check_page_ecc(page: BytesLike, ecc: BytesLike,
                   tables: EccTables = None) -> Tuple[EccCheckResult, bytes, bytes]:
    """
    Check and correct a 512-byte page against its ECC block.

    Args:
        page: 512 data bytes
        ecc: ECC block (at least the 12 meaningful bytes)
        tables: Lookup tables (process-wide tables if None)

    Returns:
        (result, page, ecc). FAILED if any chunk failed, CORRECTED if any
        chunk was corrected, OK otherwise. The returned ECC keeps the length
        of the one passed in and bytes past the first 12 are untouched.
    """
    if tables is None:
        tables = get_ecc_tables()

    page = bytes(page)
    ecc = bytes(ecc)
    if len(page) != BYTES_PER_PAGE:
        raise ValueError(f"Page must be {BYTES_PER_PAGE} bytes, got {len(page)}")
    if len(ecc) < ECC_DATA_SIZE:
        raise ValueError(f"ECC must be at least {ECC_DATA_SIZE} bytes, got {len(ecc)}")

    results = []
    chunks = []
    groups = []
    for i in range(ECC_CHUNKS_PER_PAGE):
        result, chunk, group = check_chunk_ecc(
            page[i * ECC_CHUNK_SIZE:(i + 1) * ECC_CHUNK_SIZE],
            ecc[i * ECC_GROUP_SIZE:(i + 1) * ECC_GROUP_SIZE],
            tables)
        results.append(result)
        chunks.append(chunk)
        groups.append(group)

    result = EccCheckResult.OK
    if EccCheckResult.CORRECTED in results:
        # Chunks that could be fixed are returned fixed even if another failed
        page = b''.join(chunks)
        ecc = b''.join(groups) + ecc[ECC_DATA_SIZE:]
        result = EccCheckResult.CORRECTED
    if EccCheckResult.FAILED in results:
        result = EccCheckResult.FAILED
    return result, page, ecc
