"""JSON alignment reports.

Each detected :class:`~dotgrid.align.Run` is reported as an object holding
the symbols of the first sequence it covers and its first coordinate::

    [
      {"sequence": "ACTG", "position": {"x": 0, "y": 0}}
    ]
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Optional, Sequence, TextIO

from dotgrid.align import Run


def alignment_record(run: Run, seq1: Sequence) -> dict[str, Any]:
    """Return the report entry of a single run."""
    x, y = run.start
    return {'sequence': run.spell(seq1), 'position': {'x': x, 'y': y}}


def alignment_records(runs: Iterable[Run], seq1: Sequence) -> list[dict[str, Any]]:
    """Return the report entries of *runs* in order.

    Parameters
    ----------
    runs : iterable of Run
        Runs as returned by :func:`~dotgrid.align.find_runs`.
    seq1 : sequence
        The first (x axis) sequence the runs were found on.

    Returns
    -------
    list[dict]
        One ``{"sequence": ..., "position": {"x": ..., "y": ...}}`` per run.
    """
    return [alignment_record(run, seq1) for run in runs]


def alignments_to_json(
    runs: Iterable[Run],
    seq1: Sequence,
    indent: Optional[int] = None,
) -> str:
    """Serialise the alignment report of *runs* to a JSON string."""
    return json.dumps(alignment_records(runs, seq1), indent=indent)


def write_alignments(
    runs: Iterable[Run],
    seq1: Sequence,
    fh: TextIO,
    indent: Optional[int] = None,
) -> None:
    """Write the JSON alignment report of *runs* to an open text stream."""
    json.dump(alignment_records(runs, seq1), fh, indent=indent)
    fh.write('\n')
