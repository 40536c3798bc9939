"""Constants for the PS2 memory card ECC converter."""

PROGRAM_NAME = 'ps2_mca_converter'
PROGRAM_VERSION = '1.0'

# Card geometry
BYTES_PER_PAGE = 512
PAGES_PER_BLOCK = 16
BLOCKS_PER_CARD = 1024
PAGES_PER_CARD = BLOCKS_PER_CARD * PAGES_PER_BLOCK  # 16384

# ECC layout: one 3-byte group per 128-byte chunk, padded to 16 bytes
ECC_SIZE = 16
ECC_CHUNK_SIZE = 128
ECC_CHUNKS_PER_PAGE = BYTES_PER_PAGE // ECC_CHUNK_SIZE  # 4
ECC_GROUP_SIZE = 3
ECC_DATA_SIZE = ECC_CHUNKS_PER_PAGE * ECC_GROUP_SIZE  # 12
RECORD_SIZE = BYTES_PER_PAGE + ECC_SIZE  # 528

# Image sizes
NON_ECC_CARD_SIZE = PAGES_PER_CARD * BYTES_PER_PAGE  # 8,388,608
ECC_CARD_SIZE = PAGES_PER_CARD * RECORD_SIZE  # 8,650,752

# Hamming code seeds (fixed high bits of each ECC byte)
COLUMN_PARITY_SEED = 0x77
LINE_PARITY_SEED = 0x7F

# Bit groups for the seven column parity bits (bit 3 is unused)
COLUMN_PARITY_MASKS = (0x55, 0x33, 0x0F, 0x00, 0xAA, 0xCC, 0xF0)

# Consecutive InterruptedError retries tolerated by the exact read/write loops
MAX_INTERRUPT_RETRIES = 8
