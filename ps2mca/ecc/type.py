"""ECC variants the converter can produce."""

import enum


class EccMode(enum.Enum):

    # Cumulative Hamming code as read by PS2 memory card consumers
    STANDARD = enum.auto()

    # Bit-for-bit output of ps2_mca_converter 1.0 (C): column parity stuck at
    # its seed, line parity folded with the chunk index instead of the
    # byte offset
    LEGACY = enum.auto()


class EccCheckResult(enum.Enum):
    OK = enum.auto()
    CORRECTED = enum.auto()
    FAILED = enum.auto()
