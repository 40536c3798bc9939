#!/usr/bin/env python3
"""
PS2 Memory Card Extractor CLI

Strips the ECC from a memory card image, checking every page on the way
and correcting single bit errors.

Usage:
    python extract.py [-h | -v] INPUT OUTPUT

Example:
    python extract.py Mcd001.ps2 dump.bin
"""

import argparse
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from ps2mca.cli import CardArgumentParser, print_progress
from ps2mca.constants import PROGRAM_NAME, PROGRAM_VERSION
from ps2mca.codec import MemoryCardExtractor
from ps2mca.ecc import EccMode
from ps2mca.errors import Ps2mcaError


def build_parser() -> argparse.ArgumentParser:
    parser = CardArgumentParser(
        prog='ps2_mca_extractor',
        description='Strip and verify the ECC of a PS2 memory card image',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Extract, correcting single bit errors
  python extract.py Mcd001.ps2 dump.bin

  # Fail on the first page that cannot be corrected
  python extract.py --strict Mcd001.ps2 dump.bin
        """
    )

    parser.add_argument('input', metavar='INPUT',
                        help='ECC memory card image (8,650,752 bytes)')
    parser.add_argument('output', metavar='OUTPUT',
                        help='Destination raw dump')

    parser.add_argument('--version', '-v', action='version',
                        version=f'{PROGRAM_NAME} {PROGRAM_VERSION}',
                        help='Prints version')
    parser.add_argument('--legacy-ecc', action='store_true',
                        help='Input was written by ps2_mca_converter 1.0 (C)')
    parser.add_argument('--no-correct', action='store_true',
                        help='Write pages as stored, even when they can be corrected')
    parser.add_argument('--strict', action='store_true',
                        help='Fail on the first uncorrectable page')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Only print errors')
    return parser


def main(argv=None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    if not argv:
        print("No arguments provided", file=sys.stderr)
        parser.print_help(sys.stderr)
        return 1

    args = parser.parse_args(argv)

    mode = EccMode.LEGACY if args.legacy_ecc else EccMode.STANDARD
    extractor = MemoryCardExtractor(mode=mode, correct=not args.no_correct,
                                    strict=args.strict)

    if not args.quiet:
        print(f"Extracting {args.input} -> {args.output}", file=sys.stderr)
    try:
        stats = extractor.extract_file(
            args.input, args.output,
            progress=None if args.quiet else print_progress)
    except Ps2mcaError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Unable to extract memcard", file=sys.stderr)
        return 1

    if not args.quiet:
        print(f"\nResults:", file=sys.stderr)
        print(f"  Pages:     {stats['pages']:,}", file=sys.stderr)
        print(f"  OK:        {stats['ok']:,}", file=sys.stderr)
        print(f"  Corrected: {stats['corrected']:,}", file=sys.stderr)
        if args.no_correct:
            print(f"  Correctable (not applied): {stats['correctable']:,}", file=sys.stderr)
        print(f"  Failed:    {stats['failed']:,}", file=sys.stderr)
    if stats['failed']:
        print(f"Warning: {stats['failed']} page(s) have uncorrectable ECC errors",
              file=sys.stderr)
    return 0


if __name__ == '__main__':
    sys.exit(main())
