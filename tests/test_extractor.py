"""ECC image extraction and verification."""

import sys
import os
import io
import tempfile

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np
from ps2mca.constants import NON_ECC_CARD_SIZE, ECC_CARD_SIZE, PAGES_PER_CARD, RECORD_SIZE
from ps2mca.codec import MemoryCardConverter, MemoryCardExtractor
from ps2mca.ecc import EccMode
from ps2mca.errors import CardSizeError, EccError


def create_card(seed=42):
    """Random raw card and its ECC image."""
    card = np.random.RandomState(seed).randint(
        0, 256, NON_ECC_CARD_SIZE, dtype=np.uint8).tobytes()
    out = io.BytesIO()
    MemoryCardConverter().convert(io.BytesIO(card), out)
    return card, bytearray(out.getvalue())


def test_roundtrip():
    """Extracting a freshly converted card gives back the raw dump."""
    print("=" * 60)
    print("Test 1: Convert/Extract Roundtrip")
    print("=" * 60)

    card, image = create_card()
    out = io.BytesIO()
    stats = MemoryCardExtractor().extract(io.BytesIO(bytes(image)), out)

    assert out.getvalue() == card
    assert stats['pages'] == PAGES_PER_CARD
    assert stats['ok'] == PAGES_PER_CARD
    assert stats['corrected'] == 0 and stats['failed'] == 0
    assert stats['bytes_read'] == ECC_CARD_SIZE
    assert stats['bytes_written'] == NON_ECC_CARD_SIZE
    print("   ✓ Raw dump recovered, all pages OK")


def test_single_bit_corrected():
    """A flipped bit in page data is corrected unless disabled."""
    print("\n" + "=" * 60)
    print("Test 2: Single Bit Correction")
    print("=" * 60)

    card, image = create_card()
    page = 1000
    image[page * RECORD_SIZE + 77] ^= 0x08

    out = io.BytesIO()
    stats = MemoryCardExtractor().extract(io.BytesIO(bytes(image)), out)
    assert stats['corrected'] == 1 and stats['failed'] == 0
    assert stats['correctable'] == 0
    assert out.getvalue() == card
    print("   ✓ Corrected page written")

    out = io.BytesIO()
    stats = MemoryCardExtractor(correct=False).extract(io.BytesIO(bytes(image)), out)
    assert stats['corrected'] == 0
    assert stats['correctable'] == 1
    assert stats['ok'] == PAGES_PER_CARD - 1
    data = out.getvalue()
    assert data[page * 512 + 77] == card[page * 512 + 77] ^ 0x08
    print("   ✓ correct=False keeps the stored page and counts it as correctable")


def test_uncorrectable():
    """Two bad bits in one chunk are counted, or raised in strict mode."""
    print("\n" + "=" * 60)
    print("Test 3: Uncorrectable Page")
    print("=" * 60)

    card, image = create_card()
    page = 4321
    image[page * RECORD_SIZE + 3] ^= 0x01
    image[page * RECORD_SIZE + 4] ^= 0x04

    stats = MemoryCardExtractor().extract(io.BytesIO(bytes(image)), io.BytesIO())
    assert stats['failed'] == 1
    assert stats['ok'] == PAGES_PER_CARD - 1
    print("   ✓ Failure counted")

    try:
        MemoryCardExtractor(strict=True).extract(io.BytesIO(bytes(image)), io.BytesIO())
    except EccError as e:
        assert e.page == page
        print(f"   ✓ {e}")
    else:
        raise AssertionError("strict mode accepted a bad page")


def test_legacy_extract():
    """Legacy images verify against the legacy code."""
    print("\n" + "=" * 60)
    print("Test 4: Legacy Images")
    print("=" * 60)

    card = np.random.RandomState(5).randint(
        0, 256, NON_ECC_CARD_SIZE, dtype=np.uint8).tobytes()
    image = io.BytesIO()
    MemoryCardConverter(mode=EccMode.LEGACY).convert(io.BytesIO(card), image)

    out = io.BytesIO()
    stats = MemoryCardExtractor(mode=EccMode.LEGACY).extract(
        io.BytesIO(image.getvalue()), out)
    assert stats['ok'] == PAGES_PER_CARD
    assert out.getvalue() == card
    print("   ✓ Legacy roundtrip OK")

    damaged = bytearray(image.getvalue())
    damaged[5] ^= 0x01
    stats = MemoryCardExtractor(mode=EccMode.LEGACY).extract(
        io.BytesIO(bytes(damaged)), io.BytesIO())
    assert stats['failed'] == 1
    print("   ✓ Legacy mismatch detected")


def test_wrong_size():
    """Raw dumps are not ECC images."""
    print("\n" + "=" * 60)
    print("Test 5: Wrong Size")
    print("=" * 60)

    with tempfile.TemporaryDirectory() as tmp:
        src = os.path.join(tmp, 'card.bin')
        dst = os.path.join(tmp, 'out.bin')
        with open(src, 'wb') as f:
            f.write(bytes(NON_ECC_CARD_SIZE))
        try:
            MemoryCardExtractor().extract_file(src, dst)
        except CardSizeError as e:
            assert e.expected == ECC_CARD_SIZE
            print(f"   ✓ {e}")
        else:
            raise AssertionError("raw dump accepted as ECC image")
        assert not os.path.exists(dst)


def main():
    print("\n" + "=" * 60)
    print("MEMORY CARD EXTRACTOR")
    print("=" * 60 + "\n")

    tests = [
        ("Convert/Extract Roundtrip", test_roundtrip),
        ("Single Bit Correction", test_single_bit_corrected),
        ("Uncorrectable Page", test_uncorrectable),
        ("Legacy Images", test_legacy_extract),
        ("Wrong Size", test_wrong_size),
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
