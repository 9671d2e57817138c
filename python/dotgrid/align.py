"""Diagonal run detection on dotplot grids.

This module provides:
- :class:`Run` — an immutable diagonal stretch of matching cells.
- :func:`find_runs` — scan a :class:`~dotgrid.grid.Grid` for maximal
  diagonal runs of positive cells.
- :func:`project_runs` — rebuild a grid holding only the cells of a set of
  runs.
- :func:`reverse_run` — flip the point order of a run.

Scanning
--------
Both diagonal families are handled by one scan parameterised by a step
``(dx, dy)``:

``(1, 1)``
    Forward diagonals, walked from the top row and the left column towards
    increasing ``x`` and ``y``.
``(-1, 1)``
    Anti-diagonals, walked from the top row and the right column towards
    decreasing ``x`` and increasing ``y``.  Runs found on these lines are
    reversed before they are returned.

Every returned run therefore lists its points in increasing ``x``, i.e. in
the direction of the first sequence given to
:func:`~dotgrid.grid.build_grid`.

Examples
--------
>>> from dotgrid.grid import build_grid
>>> from dotgrid.align import find_runs
>>> runs = find_runs(build_grid("ACTG", "ACTG"), 2)
>>> [len(r) for r in runs]
[4]
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterable, Iterator, Sequence

import numpy as np

from dotgrid.grid import Grid

_log = logging.getLogger(__name__)

Point = tuple[int, int]

FORWARD = (1, 1)
ANTI_DIAGONAL = (-1, 1)


@dataclass(frozen=True)
class Run:
    """A diagonal run of matching cells.

    Parameters
    ----------
    points : tuple of (int, int)
        Cell coordinates in walk order.  Consecutive points differ by one
        step on each axis.
    """

    points: tuple[Point, ...]

    def __post_init__(self) -> None:
        object.__setattr__(
            self, 'points', tuple((int(x), int(y)) for x, y in self.points)
        )

    @property
    def start(self) -> Point:
        """First point of the run."""
        return self.points[0]

    @property
    def end(self) -> Point:
        """Last point of the run."""
        return self.points[-1]

    @property
    def is_forward(self) -> bool:
        """``True`` when ``y`` increases along with ``x`` (a forward diagonal)."""
        if len(self.points) < 2:
            return True
        (x0, y0), (x1, y1) = self.points[0], self.points[1]
        return (x1 - x0) == (y1 - y0)

    def reversed(self) -> 'Run':
        """Return a new run with the point order reversed."""
        return Run(self.points[::-1])

    def spell(self, seq1: Sequence) -> str:
        """Return the symbols of *seq1* at each point's ``x`` offset."""
        return ''.join(str(seq1[x]) for x, _ in self.points)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)


def reverse_run(run: Run) -> Run:
    """Return *run* with its point order reversed.

    Parameters
    ----------
    run : Run
        Source run; it is not modified.

    Returns
    -------
    Run
        A new run whose first point is the last point of *run*.
    """
    return run.reversed()


# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------


def _line_anchors(width: int, height: int, dx: int) -> Iterator[Point]:
    """Yield the start cell of every diagonal line for step ``(dx, 1)``.

    Lines start on each top-row cell, beginning at the column the walk moves
    away from, then on each cell of that column below the top row.
    """
    edge_x = 0 if dx > 0 else width - 1
    columns = range(width) if dx > 0 else range(width - 1, -1, -1)
    for x in columns:
        yield x, 0
    for y in range(1, height):
        yield edge_x, y


def _line_length(width: int, height: int, x: int, y: int, dx: int, dy: int) -> int:
    steps_x = width - x if dx > 0 else x + 1
    steps_y = height - y if dy > 0 else y + 1
    return min(steps_x, steps_y)


def _scan_line(
    cells: np.ndarray,
    x: int,
    y: int,
    dx: int,
    dy: int,
    min_length: int,
) -> Iterator[Run]:
    """Yield the runs of positive cells on one diagonal line.

    A run is closed either by a non-positive cell or by the end of the line;
    padding the line with a non-match at both ends makes the end-of-line
    flush happen exactly once.
    """
    width, height = cells.shape
    steps = np.arange(_line_length(width, height, x, y, dx, dy))
    xs = x + dx * steps
    ys = y + dy * steps
    lit = (cells[xs, ys] > 0).astype(np.int8)
    edges = np.diff(np.concatenate(([0], lit, [0])))
    starts = np.flatnonzero(edges == 1)
    stops = np.flatnonzero(edges == -1)
    for begin, stop in zip(starts, stops):
        if stop - begin >= min_length:
            yield Run(tuple(zip(xs[begin:stop].tolist(), ys[begin:stop].tolist())))


def _scan(grid: Grid, step: Point, min_length: int) -> list[Run]:
    dx, dy = step
    cells = grid.cells
    runs: list[Run] = []
    for x, y in _line_anchors(grid.width, grid.height, dx):
        runs.extend(_scan_line(cells, x, y, dx, dy, min_length))
    return runs


def find_runs(grid: Grid, min_length: int) -> list[Run]:
    """Find maximal diagonal runs of positive cells.

    Parameters
    ----------
    grid : Grid
        The dotplot grid to scan.  Cells with a value ``> 0`` count as
        matches.
    min_length : int
        Minimum run length (inclusive).  Shorter runs are dropped.  Values
        below ``1`` behave as ``1``; empty runs are never returned.

    Returns
    -------
    list[Run]
        Forward-diagonal runs followed by anti-diagonal runs.  Every run
        lists its points in increasing ``x``.
    """
    threshold = max(int(min_length), 1)
    forward = _scan(grid, FORWARD, threshold)
    anti = [reverse_run(run) for run in _scan(grid, ANTI_DIAGONAL, threshold)]
    _log.debug(
        'find_runs: %d forward and %d anti-diagonal run(s) of length >= %d',
        len(forward),
        len(anti),
        threshold,
    )
    return forward + anti


def project_runs(grid: Grid, runs: Iterable[Run]) -> Grid:
    """Return a zero grid with only the cells covered by *runs* set to ``1.0``.

    Coordinates outside the grid are ignored.

    Parameters
    ----------
    grid : Grid
        Grid whose dimensions the result takes.  It is not modified.
    runs : iterable of Run
        Runs to project.

    Returns
    -------
    Grid
        New grid of the same size and type as *grid*.
    """
    projected = grid.zeroed()
    for run in runs:
        for x, y in run:
            if projected.in_bounds(x, y):
                projected[x, y] = 1.0
    return projected
