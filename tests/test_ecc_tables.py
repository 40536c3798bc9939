"""Parity and column parity mask table verification."""

import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np
from ps2mca.constants import COLUMN_PARITY_MASKS
from ps2mca.ecc import (
    EccTables, parity, build_parity_table, build_column_parity_masks,
    make_ecc_tables, get_ecc_tables,
)


def test_parity_matches_bit_count():
    """Parity of every byte equals the XOR of its 8 bits."""
    print("=" * 60)
    print("Test 1: Parity Table")
    print("=" * 60)

    table = build_parity_table()
    assert table.shape == (256,)
    assert table.dtype == np.uint8

    for b in range(256):
        expected = bin(b).count('1') & 1
        assert parity(b) == expected, f"parity({b:#04x}) != {expected}"
        assert table[b] == expected
    print("   ✓ 256 parity entries match popcount parity")


def test_column_parity_masks():
    """Bit i of the mask table equals parity(b & M[i])."""
    print("\n" + "=" * 60)
    print("Test 2: Column Parity Mask Table")
    print("=" * 60)

    parity_table = build_parity_table()
    masks = build_column_parity_masks(parity_table)

    for b in range(256):
        for i, cpmask in enumerate(COLUMN_PARITY_MASKS):
            bit = (int(masks[b]) >> i) & 1
            assert bit == parity_table[b & cpmask], f"byte {b:#04x} bit {i}"
        # M[3] is 0x00, and only 7 bits are used
        assert masks[b] & 0x08 == 0
        assert masks[b] & 0x80 == 0
    print("   ✓ All 7 mask bits match for every byte")

    assert masks[0x00] == 0x00
    assert masks[0x01] == 0x07
    assert masks[0x80] == 0x70
    assert masks[0xFF] == 0x00
    print("   ✓ Spot values: 0x01 -> 0x07, 0x80 -> 0x70, 0xFF -> 0x00")


def test_tables_idempotent():
    """Building the tables twice yields identical tables."""
    print("\n" + "=" * 60)
    print("Test 3: Idempotent Construction")
    print("=" * 60)

    first = make_ecc_tables()
    second = make_ecc_tables()
    assert np.array_equal(first.parity, second.parity)
    assert np.array_equal(first.column_parity_masks, second.column_parity_masks)
    assert first.parity is not second.parity
    print("   ✓ Two builds are bit-identical")

    assert get_ecc_tables() is get_ecc_tables()
    print("   ✓ Shared tables are built once")


def test_tables_read_only():
    """Tables reject mutation once built."""
    print("\n" + "=" * 60)
    print("Test 4: Read-only Tables")
    print("=" * 60)

    tables = make_ecc_tables()
    for table in (tables.parity, tables.column_parity_masks):
        try:
            table[0] = 1
        except ValueError:
            pass
        else:
            raise AssertionError("table accepted a write")
    print("   ✓ Table arrays are not writeable")

    try:
        tables.parity = np.zeros(256, dtype=np.uint8)
    except AttributeError:
        pass
    else:
        raise AssertionError("tables object accepted a new attribute value")
    print("   ✓ Tables object is frozen")

    try:
        EccTables(parity=np.zeros(255, dtype=np.uint8),
                  column_parity_masks=np.zeros(256, dtype=np.uint8))
    except ValueError:
        pass
    else:
        raise AssertionError("short table accepted")
    print("   ✓ Malformed tables rejected")


def main():
    print("\n" + "=" * 60)
    print("ECC TABLES: Parity and Column Parity Masks")
    print("=" * 60 + "\n")

    tests = [
        ("Parity Table", test_parity_matches_bit_count),
        ("Column Parity Masks", test_column_parity_masks),
        ("Idempotent Construction", test_tables_idempotent),
        ("Read-only Tables", test_tables_read_only),
    ]

    results = []
    for name, test in tests:
        try:
            test()
            results.append((name, True))
        except Exception as e:
            print(f"❌ {name} failed: {e}")
            results.append((name, False))

    print("\n" + "=" * 60)
    print("SUMMARY")
    print("=" * 60)
    for name, passed in results:
        status = "✅ PASS" if passed else "❌ FAIL"
        print(f"   {name}: {status}")

    return 0 if all(passed for _, passed in results) else 1


if __name__ == "__main__":
    sys.exit(main())
