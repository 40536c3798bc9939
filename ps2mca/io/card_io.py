"""Exact-size reads and writes on memory card image streams."""

import os
import sys
from contextlib import contextmanager
from typing import BinaryIO, Iterator

from ..constants import MAX_INTERRUPT_RETRIES
from ..errors import CardOpenError, CardReadError, CardWriteError


def read_exact(stream: BinaryIO, size: int,
               max_retries: int = MAX_INTERRUPT_RETRIES) -> bytes:
    """
    Read exactly ``size`` bytes from a binary stream.

    Partial reads are continued until the buffer is full. An interrupted
    read is retried up to ``max_retries`` times in a row.

    Args:
        stream: Readable binary stream
        size: Number of bytes to read
        max_retries: Consecutive InterruptedError retries allowed

    Returns:
        The bytes read

    Raises:
        CardReadError: On end of stream before ``size`` bytes, on too many
            interruptions, or on any other OS error
    """
    buf = bytearray(size)
    view = memoryview(buf)
    total = 0
    retries = 0

    while total < size:
        try:
            n = stream.readinto(view[total:])
        except InterruptedError as e:
            retries += 1
            if retries > max_retries:
                raise CardReadError(f"Read interrupted too many times: {e}") from e
            continue
        except OSError as e:
            raise CardReadError(f"Error reading input memcard: {e}") from e

        retries = 0
        if not n:
            raise CardReadError(
                f"Unexpected end of input memcard: got {total} of {size} bytes")
        total += n

    return bytes(buf)


def write_exact(stream: BinaryIO, data: bytes,
                max_retries: int = MAX_INTERRUPT_RETRIES) -> None:
    """
    Write all of ``data`` to a binary stream.

    Same contract as read_exact: partial writes are continued and
    interruptions retried up to ``max_retries`` times in a row.

    Raises:
        CardWriteError: If the stream stops accepting data, on too many
            interruptions, or on any other OS error
    """
    view = memoryview(data).cast('B')
    total = 0
    retries = 0

    while total < len(view):
        try:
            n = stream.write(view[total:])
        except InterruptedError as e:
            retries += 1
            if retries > max_retries:
                raise CardWriteError(f"Write interrupted too many times: {e}") from e
            continue
        except OSError as e:
            raise CardWriteError(f"Error writing output memcard: {e}") from e

        retries = 0
        if not n:
            raise CardWriteError(
                f"Output memcard accepted no data after {total} of {len(view)} bytes")
        total += n


def get_stream_size(stream: BinaryIO) -> int:
    """
    Return the total length of a seekable stream and rewind it to the start.

    Raises:
        CardReadError: If the stream cannot be sought
    """
    try:
        size = stream.seek(0, os.SEEK_END)
    except OSError as e:
        raise CardReadError(f"Unable to seek to the end of input: {e}") from e

    try:
        stream.seek(0, os.SEEK_SET)
    except OSError as e:
        raise CardReadError(f"Unable to seek to the start of input: {e}") from e

    return size


@contextmanager
def open_card(path: str, mode: str = 'rb') -> Iterator[BinaryIO]:
    """
    Open a memory card image and guarantee it is closed afterwards.

    A failure to close is reported on stderr but never replaces the outcome
    of the block that used the file.

    Args:
        path: Image path
        mode: 'rb' for input images, 'wb' for output images

    Raises:
        CardOpenError: If the file cannot be opened
    """
    role = 'source' if 'r' in mode else 'destination'
    try:
        f = open(path, mode)
    except OSError as e:
        raise CardOpenError(
            f"Unable to open {role} memory card {path}: {e.strerror or e}") from e

    try:
        yield f
    finally:
        try:
            f.close()
        except OSError as e:
            print(f"Unable to close file {path}: {e}", file=sys.stderr)
