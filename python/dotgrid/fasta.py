"""FASTA input for dotgrid.

Reads plain or gzip-compressed FASTA files.  A file may also hold a bare
sequence with no ``>`` header line.  Sequence text is returned exactly as
written apart from whitespace removal; no case folding is applied.
Files are decoded as Latin-1, one symbol per byte.
"""

from __future__ import annotations

import gzip
import logging
from pathlib import Path
from typing import Generator, Optional, TextIO, Union

from dotgrid.grid import Grid, build_grid

_log = logging.getLogger(__name__)

# Every byte decodes to one symbol, so any input is a valid sequence.
ENCODING = 'latin-1'


def _open_text(path: Union[str, Path]) -> TextIO:
    """Open *path* for reading text, decompressing ``.gz`` files."""
    if str(path).endswith('.gz'):
        return gzip.open(path, 'rt', encoding=ENCODING)
    return open(path, encoding=ENCODING)


def _parse_fasta(
    path: Union[str, Path],
) -> Generator[tuple[str, str], None, None]:
    """Yield ``(name, sequence)`` pairs from a FASTA file.

    Lines starting with ``;`` are comments.  Sequence lines before the first
    header are yielded under the empty name ``''``.

    Raises
    ------
    OSError
        If the file cannot be opened or decompressed.
    """
    name: Optional[str] = None
    chunks: list[str] = []
    with _open_text(path) as fh:
        for line in fh:
            line = line.strip()
            if not line or line.startswith(';'):
                continue
            if line.startswith('>'):
                if name is not None or chunks:
                    yield name or '', ''.join(chunks)
                name = line[1:].split(maxsplit=1)[0] if len(line) > 1 else ''
                chunks = []
                continue
            chunks.append(''.join(line.split()))
    if name is not None or chunks:
        yield name or '', ''.join(chunks)


def read_fasta(path: Union[str, Path]) -> Optional[dict[str, str]]:
    """Read every record of a FASTA file.

    Parameters
    ----------
    path : str or Path
        FASTA file, optionally gzip-compressed (``.gz``).

    Returns
    -------
    dict[str, str] or None
        Mapping of record name to sequence in file order, or ``None`` if
        the file cannot be read.
    """
    try:
        return dict(_parse_fasta(path))
    except OSError as exc:
        _log.warning('Cannot read FASTA file %s: %s', path, exc)
        return None


def read_sequence(path: Union[str, Path]) -> Optional[str]:
    """Return the first sequence of a FASTA file.

    Parameters
    ----------
    path : str or Path
        FASTA file, optionally gzip-compressed.

    Returns
    -------
    str or None
        The first record's sequence (``''`` for an empty file), or ``None``
        if the file cannot be read.
    """
    try:
        records = _parse_fasta(path)
        first = next(records, None)
        if first is not None and next(records, None) is not None:
            _log.warning('%s holds more than one record; using %r', path, first[0])
        records.close()
    except OSError as exc:
        _log.warning('Cannot read FASTA file %s: %s', path, exc)
        return None
    return first[1] if first is not None else ''


def grid_from_fasta(path1: Union[str, Path], path2: Union[str, Path]) -> Optional[Grid]:
    """Build the match grid of the first sequences of two FASTA files.

    Returns
    -------
    Grid or None
        The grid, or ``None`` if either file cannot be read.

    Raises
    ------
    ValueError
        If either file holds no sequence.
    """
    seq1 = read_sequence(path1)
    seq2 = read_sequence(path2)
    if seq1 is None or seq2 is None:
        return None
    return build_grid(seq1, seq2)
