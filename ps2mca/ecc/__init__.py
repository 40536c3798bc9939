"""ECC modules for the PS2 memory card converter."""

from .type import EccMode, EccCheckResult
from .tables import (
    EccTables,
    parity,
    column_parity_mask,
    build_parity_table,
    build_column_parity_masks,
    make_ecc_tables,
    get_ecc_tables,
)
from .hamming import (
    calculate_pages_ecc,
    calculate_page_ecc,
    calculate_ecc_block,
    calculate_chunk_ecc,
)
from .check import check_chunk_ecc, check_page_ecc

__all__ = [
    'EccMode',
    'EccCheckResult',
    'EccTables',
    'parity',
    'column_parity_mask',
    'build_parity_table',
    'build_column_parity_masks',
    'make_ecc_tables',
    'get_ecc_tables',
    'calculate_pages_ecc',
    'calculate_page_ecc',
    'calculate_ecc_block',
    'calculate_chunk_ecc',
    'check_chunk_ecc',
    'check_page_ecc',
]
