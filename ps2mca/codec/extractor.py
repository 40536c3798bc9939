"""Memory card extractor - ECC image back to a raw dump."""

from typing import BinaryIO, Optional

import numpy as np

from ..constants import (
    BYTES_PER_PAGE, PAGES_PER_BLOCK, BLOCKS_PER_CARD, ECC_CARD_SIZE, ECC_DATA_SIZE,
    RECORD_SIZE,
)
from ..ecc import (
    EccMode, EccCheckResult, EccTables, calculate_pages_ecc, check_page_ecc,
    get_ecc_tables,
)
from ..errors import CardSizeError, EccError
from ..io import read_exact, write_exact, get_stream_size, open_card
from .converter import ProgressCallback


class MemoryCardExtractor:
    """
    Extractor from an ECC memory card image to a raw dump.

    Pipeline (reverse of the converter):
    1. Validate input size (1024 blocks x 16 x (512 + 16) bytes)
    2. Read one block of page + ECC records
    3. Verify every page against its stored ECC, correcting single bit
       errors in STANDARD mode
    4. Write the (corrected) pages without their ECC
    """

    def __init__(self, mode: EccMode = EccMode.STANDARD, tables: EccTables = None,
                 correct: bool = True, strict: bool = False):
        self.mode = mode
        self.tables = tables if tables is not None else get_ecc_tables()
        self.correct = correct
        self.strict = strict

    def extract(self, in_stream: BinaryIO, out_stream: BinaryIO,
                progress: Optional[ProgressCallback] = None) -> dict:
        """
        Strip the ECC from a whole card.

        Args:
            in_stream: Readable, seekable stream holding the ECC image
            out_stream: Writable stream receiving the raw dump
            progress: Called as progress(block, total) after each block

        Returns:
            Dictionary with 'pages', 'ok', 'corrected', 'correctable', 'failed',
            'bytes_read', 'bytes_written'

        Raises:
            CardSizeError: If the input is not exactly one ECC card
            EccError: In strict mode, on the first uncorrectable page
            CardReadError / CardWriteError: On I/O failure
        """
        size = get_stream_size(in_stream)
        if size != ECC_CARD_SIZE:
            raise CardSizeError(size, ECC_CARD_SIZE)

        stats = {'pages': 0, 'ok': 0, 'corrected': 0, 'correctable': 0, 'failed': 0}
        bytes_written = 0

        for block in range(BLOCKS_PER_CARD):
            data = read_exact(in_stream, PAGES_PER_BLOCK * RECORD_SIZE)
            records = np.frombuffer(data, dtype=np.uint8).reshape(PAGES_PER_BLOCK, RECORD_SIZE)
            pages = records[:, :BYTES_PER_PAGE]
            stored = records[:, BYTES_PER_PAGE:BYTES_PER_PAGE + ECC_DATA_SIZE]

            computed = calculate_pages_ecc(pages, self.tables, self.mode)[:, :ECC_DATA_SIZE]
            mismatched = np.any(computed != stored, axis=1)

            out = []
            for i in range(PAGES_PER_BLOCK):
                page = pages[i].tobytes()
                if not mismatched[i]:
                    result = EccCheckResult.OK
                elif self.mode == EccMode.STANDARD:
                    result, fixed, _ = check_page_ecc(page, stored[i].tobytes(), self.tables)
                    if self.correct:
                        page = fixed
                else:
                    # No error location for the legacy code, only detection
                    result = EccCheckResult.FAILED

                key = result.name.lower()
                if result == EccCheckResult.CORRECTED and not self.correct:
                    # Fixable, but written as stored
                    key = 'correctable'
                stats[key] += 1
                if result == EccCheckResult.FAILED and self.strict:
                    raise EccError(block * PAGES_PER_BLOCK + i)
                out.append(page)

            write_exact(out_stream, b''.join(out))
            bytes_written += PAGES_PER_BLOCK * BYTES_PER_PAGE
            stats['pages'] += PAGES_PER_BLOCK

            if progress is not None:
                progress(block + 1, BLOCKS_PER_CARD)

        stats['bytes_read'] = size
        stats['bytes_written'] = bytes_written
        return stats

    def extract_file(self, input_path: str, output_path: str,
                     progress: Optional[ProgressCallback] = None) -> dict:
        """Strip the ECC from a card image on disk (see convert_file)."""
        with open_card(input_path, 'rb') as fin:
            size = get_stream_size(fin)
            if size != ECC_CARD_SIZE:
                raise CardSizeError(size, ECC_CARD_SIZE)

            with open_card(output_path, 'wb') as fout:
                return self.extract(fin, fout, progress)
