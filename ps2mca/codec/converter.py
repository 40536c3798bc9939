"""Memory card converter - raw dump to ECC image."""

from typing import BinaryIO, Callable, Optional

import numpy as np

from ..constants import (
    BYTES_PER_PAGE, PAGES_PER_BLOCK, BLOCKS_PER_CARD, NON_ECC_CARD_SIZE, RECORD_SIZE,
)
from ..ecc import EccMode, EccTables, calculate_pages_ecc, get_ecc_tables
from ..errors import CardSizeError
from ..io import read_exact, write_exact, get_stream_size, open_card

ProgressCallback = Callable[[int, int], None]


class MemoryCardConverter:
    """
    Converter from a non-ECC memory card dump to the ECC format.

    Pipeline:
    1. Validate input size (1024 blocks x 16 pages x 512 bytes)
    2. Read one block (16 pages)
    3. Compute the 16-byte ECC of every page
    4. Write each page followed by its ECC
    """

    def __init__(self, mode: EccMode = EccMode.STANDARD, tables: EccTables = None):
        self.mode = mode
        self.tables = tables if tables is not None else get_ecc_tables()

    def convert(self, in_stream: BinaryIO, out_stream: BinaryIO,
                progress: Optional[ProgressCallback] = None) -> dict:
        """
        Convert a whole card from one stream to another.

        Args:
            in_stream: Readable, seekable stream holding the raw dump
            out_stream: Writable stream receiving the ECC image
            progress: Called as progress(block, total) after each block

        Returns:
            Dictionary with 'blocks', 'pages', 'bytes_read', 'bytes_written'

        Raises:
            CardSizeError: If the input is not exactly one card; nothing is written
            CardReadError: If the input cannot be read
            CardWriteError: If the output cannot be written (output left truncated)
        """
        size = get_stream_size(in_stream)
        if size != NON_ECC_CARD_SIZE:
            raise CardSizeError(size, NON_ECC_CARD_SIZE)

        block_size = PAGES_PER_BLOCK * BYTES_PER_PAGE
        bytes_written = 0

        for block in range(BLOCKS_PER_CARD):
            data = read_exact(in_stream, block_size)
            pages = np.frombuffer(data, dtype=np.uint8).reshape(PAGES_PER_BLOCK, BYTES_PER_PAGE)
            ecc = calculate_pages_ecc(pages, self.tables, self.mode)

            # Each page immediately followed by its ECC block
            records = np.concatenate([pages, ecc], axis=1)
            write_exact(out_stream, records.tobytes())
            bytes_written += PAGES_PER_BLOCK * RECORD_SIZE

            if progress is not None:
                progress(block + 1, BLOCKS_PER_CARD)

        return {
            'blocks': BLOCKS_PER_CARD,
            'pages': BLOCKS_PER_CARD * PAGES_PER_BLOCK,
            'bytes_read': size,
            'bytes_written': bytes_written,
        }

    def convert_file(self, input_path: str, output_path: str,
                     progress: Optional[ProgressCallback] = None) -> dict:
        """
        Convert a card image on disk.

        The input size is checked before the output is created, so a
        mismatched input leaves no output file behind. Both files are
        closed on every exit path.
        """
        with open_card(input_path, 'rb') as fin:
            size = get_stream_size(fin)
            if size != NON_ECC_CARD_SIZE:
                raise CardSizeError(size, NON_ECC_CARD_SIZE)

            with open_card(output_path, 'wb') as fout:
                return self.convert(fin, fout, progress)
