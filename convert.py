#!/usr/bin/env python3
"""
PS2 Memory Card Converter CLI

Converts a raw (non-ECC) memory card dump, such as a Memory Card
Annihilator dump, to the ECC format used by PCSX2 and others.

Usage:
    python convert.py [-h | -v] INPUT OUTPUT

Example:
    python convert.py dump.bin Mcd001.ps2
"""

import argparse
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from ps2mca.cli import CardArgumentParser, print_progress
from ps2mca.constants import PROGRAM_NAME, PROGRAM_VERSION
from ps2mca.codec import MemoryCardConverter
from ps2mca.ecc import EccMode
from ps2mca.errors import Ps2mcaError


def build_parser() -> argparse.ArgumentParser:
    parser = CardArgumentParser(
        prog=PROGRAM_NAME,
        description='Small utility to convert PS2 Memory Card Annihilator dumps '
                    'to regular ps2 format used by PCSX2 and others',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Convert a raw dump
  python convert.py dump.bin Mcd001.ps2

  # Byte-identical output to ps2_mca_converter 1.0 (C)
  python convert.py --legacy-ecc dump.bin Mcd001.ps2
        """
    )

    parser.add_argument('input', metavar='INPUT',
                        help='Raw memory card dump (8,388,608 bytes)')
    parser.add_argument('output', metavar='OUTPUT',
                        help='Destination ECC memory card image')

    parser.add_argument('--version', '-v', action='version',
                        version=f'{PROGRAM_NAME} {PROGRAM_VERSION}',
                        help='Prints version')
    parser.add_argument('--legacy-ecc', action='store_true',
                        help='Write ECC bytes identical to ps2_mca_converter 1.0 (C)')
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

    def info(message):
        if not args.quiet:
            print(message, file=sys.stderr)

    mode = EccMode.LEGACY if args.legacy_ecc else EccMode.STANDARD

    info("Generating parity tables...")
    converter = MemoryCardConverter(mode=mode)
    info("Finished parity tables generation")

    info(f"Converting {args.input} -> {args.output}")
    info("Begin conversion")
    try:
        stats = converter.convert_file(
            args.input, args.output,
            progress=None if args.quiet else print_progress)
    except Ps2mcaError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Unable to convert memcard", file=sys.stderr)
        return 1

    info(f"Successfully converted memcard ({stats['pages']:,} pages, "
         f"{stats['bytes_written']:,} bytes written)")
    return 0


if __name__ == '__main__':
    sys.exit(main())
