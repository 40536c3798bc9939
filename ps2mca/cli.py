"""Helpers shared by the command line scripts."""

import argparse
import sys


class CardArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports usage errors with help text and exit code 1."""

    def error(self, message):
        print(f"Error: {message}", file=sys.stderr)
        self.print_help(sys.stderr)
        sys.exit(1)


def print_progress(block: int, total: int) -> None:
    """Rewrite the previous stderr line with the current block."""
    print(f"\x1b[ABlock {block} of {total}", file=sys.stderr)
