"""Command-line entry point for dotgrid.

Usage::

    dotgrid [options] SEQ1 SEQ2 OUTPUT

Writes the dotplot image of ``SEQ1`` (x axis) against ``SEQ2`` (y axis) to
``OUTPUT`` and prints the detected alignments to stdout as JSON.

Exit status: ``0`` success, ``1`` usage error, ``2`` output cannot be
written, ``3`` a sequence or weight file cannot be read, ``4`` filter and
dotplot sizes differ.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from dotgrid.fasta import read_sequence
from dotgrid.pipeline import (
    DEFAULT_MIN_LENGTH,
    EXIT_SOURCE_UNAVAILABLE,
    EXIT_USAGE,
    DotplotError,
    DotplotOptions,
    run_dotplot,
)
from dotgrid.render import DEFAULT_HEIGHT, DEFAULT_WIDTH, Axis, Region
from dotgrid.report import write_alignments

_log = logging.getLogger(__name__)


def _region(text: str) -> Region:
    """Parse ``AXIS:START:LENGTH[:COLOR]`` into a :class:`Region`."""
    parts = text.split(':', 3)
    if len(parts) < 3:
        raise argparse.ArgumentTypeError(
            f'expected AXIS:START:LENGTH[:COLOR], got {text!r}'
        )
    try:
        axis = Axis(parts[0].lower())
        start, length = int(parts[1]), int(parts[2])
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f'invalid region {text!r}: {exc}') from exc
    if len(parts) == 4:
        return Region(axis, start, length, parts[3])
    return Region(axis, start, length)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='dotgrid',
        description='Render the dotplot of two sequences and report diagonal alignments as JSON.',
    )
    parser.add_argument('seq1', help='First sequence (x axis), or a FASTA path with --fasta')
    parser.add_argument('seq2', help='Second sequence (y axis), or a FASTA path with --fasta')
    parser.add_argument('output', help='Output image path (format from the extension, PNG if unrecognised)')
    parser.add_argument('-x', dest='x_weights', metavar='FILE', help='x-axis weights, filter round 1')
    parser.add_argument('-y', dest='y_weights', metavar='FILE', help='y-axis weights, filter round 1')
    parser.add_argument('-p', dest='x_weights2', metavar='FILE', help='x-axis weights, filter round 2')
    parser.add_argument('-q', dest='y_weights2', metavar='FILE', help='y-axis weights, filter round 2')
    parser.add_argument(
        '-n',
        '--min-length',
        type=int,
        default=DEFAULT_MIN_LENGTH,
        help=f'Minimum alignment length; <= 1 disables alignment filtering (default {DEFAULT_MIN_LENGTH})',
    )
    parser.add_argument('-w', '--width', type=int, default=DEFAULT_WIDTH, help='Image width in pixels')
    parser.add_argument('-H', '--height', type=int, default=DEFAULT_HEIGHT, help='Image height in pixels')
    parser.add_argument(
        '-r',
        '--region',
        dest='regions',
        action='append',
        type=_region,
        default=[],
        metavar='AXIS:START:LENGTH[:COLOR]',
        help='Highlight matches in an axis band (repeatable)',
    )
    parser.add_argument('--fasta', action='store_true', help='Read SEQ1 and SEQ2 from FASTA files')
    parser.add_argument('--indent', type=int, default=None, help='Indent the JSON report')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line; return the process exit status."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return EXIT_USAGE if exc.code else 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    seq1, seq2 = args.seq1, args.seq2
    if args.fasta:
        seq1 = read_sequence(args.seq1)
        seq2 = read_sequence(args.seq2)
        if seq1 is None or seq2 is None:
            print("Can't open sequence file(s)", file=sys.stderr)
            return EXIT_SOURCE_UNAVAILABLE

    options = DotplotOptions(
        min_length=args.min_length,
        width=args.width,
        height=args.height,
        x_weights=args.x_weights,
        y_weights=args.y_weights,
        x_weights2=args.x_weights2,
        y_weights2=args.y_weights2,
        regions=args.regions,
    )
    try:
        result = run_dotplot(seq1, seq2, args.output, options)
    except DotplotError as exc:
        print(exc, file=sys.stderr)
        return exc.exit_code
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return EXIT_USAGE

    write_alignments(result.runs, seq1, sys.stdout, indent=args.indent)
    return 0


if __name__ == '__main__':
    sys.exit(main())
