#!/usr/bin/env python3
"""
PhraseKit CLI
=============
Command-line interface for passphrase generation.

Usage:
    phrasekit generate -b 60 -n 5
    phrasekit generate --no-separators --wordlist ./words.txt
    phrasekit info -b 60
    phrasekit languages
"""

import argparse
import json
import logging
import sys

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from phrasekit import __version__
from phrasekit.config import get_config
from phrasekit.errors import PhraseKitError
from phrasekit.generator import MAX_ENTROPY_BITS, MIN_ENTROPY_BITS, PassphraseGenerator
from phrasekit.settings import get_setting
from phrasekit.wordlists import available_languages

logger = logging.getLogger(__name__)


# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False, console: Console = None, err_console: Console = None):
        self.quiet = quiet
        self.console = console or Console(highlight=False)
        self.err_console = err_console or Console(stderr=True, highlight=False)

    def print(self, *args, **kwargs):
        if not self.quiet:
            self.console.print(*args, **kwargs)

    def result(self, text: str):
        """Print a result line; shown even in quiet mode, never styled."""
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)

    def error(self, msg: str):
        self.err_console.print(f"Error: {msg}", markup=False)

    def table(self, headers: list, rows: list, title: str = None):
        """Print a formatted table."""
        if self.quiet:
            return

        table = Table(title=title, box=box.SIMPLE)
        for header in headers:
            table.add_column(str(header))
        for row in rows:
            table.add_row(*(str(c) for c in row))
        self.console.print(table)


def setup_logging(verbose: bool = False):
    """Route log records through rich; debug level when verbose."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def bits_arg(value: str) -> float:
    """argparse type for an entropy target."""
    try:
        bits = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}")
    if not (MIN_ENTROPY_BITS <= bits <= MAX_ENTROPY_BITS):
        raise argparse.ArgumentTypeError(
            f"must be between {MIN_ENTROPY_BITS} and {MAX_ENTROPY_BITS}"
        )
    return bits


def build_generator(args) -> PassphraseGenerator:
    """Create a generator from app.yaml, environment and CLI flags."""
    wordlists = None
    if getattr(args, 'wordlist', None):
        wordlists = {f"cli{i}": path for i, path in enumerate(args.wordlist, 1)}

    config = get_config(
        separators=getattr(args, 'separators', None),
        encoding=getattr(args, 'encoding', None),
        always_use_separators=True if getattr(args, 'always_separators', False) else None,
        disable_separators=True if getattr(args, 'no_separators', False) else None,
        disable_word_modifier=True if getattr(args, 'no_modifier', False) else None,
        wordlists=wordlists,
    )
    if getattr(args, 'bits', None) is None:
        args.bits = config.bits
    return PassphraseGenerator.from_config(config)


# =============================================================================
# Commands
# =============================================================================

def cmd_generate(args, out: Output):
    """Generate passphrases."""
    gen = build_generator(args)
    count = args.count if args.count is not None else get_setting("cli.count", 1)

    if count < 1:
        out.error("Count must be at least 1")
        return 1

    phrases = [gen.generate(args.bits) for _ in range(count)]

    if args.json:
        out.result(json.dumps(phrases, ensure_ascii=False))
    else:
        for phrase in phrases:
            out.result(phrase)

    return 0


def cmd_info(args, out: Output):
    """Show the entropy figures used for a target."""
    gen = build_generator(args)
    est = gen.estimate(args.bits)

    if args.json:
        out.result(json.dumps({
            'target_bits': est.target_bits,
            'word_count': est.word_count,
            'multiplier': est.multiplier,
            'word_bits': est.word_bits,
            'separators': est.separators,
            'separator_bits': est.separator_bits,
            'use_separators': est.use_separators,
        }, ensure_ascii=False))
        return 0

    rows = [
        ['Target bits', f"{est.target_bits:.2f}"],
        ['Unique words', est.word_count],
        ['Modifier multiplier', est.multiplier],
        ['Bits per word', f"{est.word_bits:.2f}"],
        ['Separators', est.separators],
        ['Bits per separator', f"{est.separator_bits:.2f}"],
        ['Use separators', 'yes' if est.use_separators else 'no'],
    ]
    out.table(['Setting', 'Value'], rows, title='Entropy Estimate')
    return 0


def cmd_languages(args, out: Output):
    """List bundled word lists."""
    for name in available_languages():
        out.result(f"{name}.txt")
    return 0


# =============================================================================
# Main
# =============================================================================

def add_generator_args(p):
    p.add_argument('-b', '--bits', type=bits_arg, default=None,
                   help=f'Entropy target in bits ({MIN_ENTROPY_BITS:g}-{MAX_ENTROPY_BITS:g}, default from config)')
    p.add_argument('--separators', help='Separator characters (e.g. "-_!$")')
    p.add_argument('--always-separators', action='store_true',
                   help='Use separators even when they do not shorten the passphrase')
    p.add_argument('--no-separators', action='store_true', help='Join words with spaces only')
    p.add_argument('--no-modifier', action='store_true', help='Disable random capitalization')
    p.add_argument('--wordlist', '-w', action='append', metavar='PATH',
                   help='Word list file (repeatable; replaces the configured lists)')
    p.add_argument('--encoding', help='Text encoding of word lists (default: utf-8)')
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='phrasekit',
        description='PhraseKit - Passphrase Generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s generate
  %(prog)s generate -b 80 -n 5
  %(prog)s generate --no-separators --no-modifier
  %(prog)s generate -w english.txt -w spanish.txt
  %(prog)s info -b 60
  %(prog)s languages
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-essential output')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- generate ---
    p = subparsers.add_parser('generate', aliases=['gen', 'g'], help='Generate passphrases')
    p.add_argument('-n', '--count', type=int, default=None, help='Number of passphrases (default: 1)')
    add_generator_args(p)

    # --- info ---
    p = subparsers.add_parser('info', aliases=['i'], help='Show entropy estimate')
    add_generator_args(p)

    # --- languages ---
    subparsers.add_parser('languages', aliases=['langs'], help='List bundled word lists')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.verbose:
        setup_logging(verbose=True)

    cmd_map = {
        'gen': 'generate', 'g': 'generate',
        'i': 'info',
        'langs': 'languages',
    }
    command = cmd_map.get(args.command, args.command)

    out = Output(quiet=args.quiet)

    commands = {
        'generate': cmd_generate,
        'info': cmd_info,
        'languages': cmd_languages,
    }

    handler = commands[command]
    try:
        return handler(args, out)
    except KeyboardInterrupt:
        out.print("\nCancelled.")
        return 130
    except (PhraseKitError, ValueError) as e:
        out.error(str(e))
        if args.verbose:
            logger.exception("Command failed")
        return 1


if __name__ == '__main__':
    sys.exit(main())
