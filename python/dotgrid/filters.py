"""Conservation filters for dotgrid dotplots.

A :class:`Filter` is a grid-shaped table of weights, usually built from two
per-position weight vectors (one per sequence) by averaging.  Applying a
filter replaces the value of every matching cell of a dotplot with the
filter's weight for that cell, leaving empty cells empty.

Weight files
------------
A weight file holds one decimal number per line, nominally in ``[0, 1]``.
Blank lines are skipped.  Values are not range-checked: a value outside
``[0, 1]`` is carried into the filter as-is.

Examples
--------
>>> from dotgrid.grid import build_grid
>>> from dotgrid.filters import apply_filter, build_filter
>>> grid = build_grid("AC", "AC")
>>> weighted = apply_filter(grid, build_filter([1.0, 0.5], [0.0, 0.5]))
>>> weighted[1, 1]
0.5
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

import numpy as np

from dotgrid.grid import EPSILON, Grid

_log = logging.getLogger(__name__)


class Filter(Grid):
    """A grid of weights to apply to a dotplot.

    Parameters
    ----------
    cells : array-like
        Two-dimensional table of weights indexed ``[x][y]``.
    """

    @classmethod
    def from_values(cls, values: Union[np.ndarray, Sequence[Sequence[float]]]) -> 'Filter':
        """Build a filter from an explicit ``[x][y]`` table of weights.

        Parameters
        ----------
        values : array-like
            Two-dimensional weight table.  It is copied.

        Returns
        -------
        Filter
            New filter with the table's dimensions.
        """
        return cls(values)


def build_filter(weights_x: Sequence[float], weights_y: Sequence[float]) -> Filter:
    """Build the average filter of two axis weight vectors.

    ``F(x, y) = (weights_x[x] + weights_y[y]) / 2``.

    Parameters
    ----------
    weights_x : sequence of float
        One weight per position of the first sequence (filter width).
    weights_y : sequence of float
        One weight per position of the second sequence (filter height).

    Returns
    -------
    Filter
        A ``len(weights_x) x len(weights_y)`` filter.
    """
    wx = np.asarray(weights_x, dtype=np.float64)
    wy = np.asarray(weights_y, dtype=np.float64)
    return Filter((wx[:, np.newaxis] + wy[np.newaxis, :]) / 2.0)


def apply_filter(base: Grid, f: Grid) -> Grid:
    """Re-weight the matching cells of *base* with the values of *f*.

    Only the overlap ``min(widths) x min(heights)`` is visited.  Within it,
    every cell of *base* whose magnitude is at least
    :data:`~dotgrid.grid.EPSILON` takes the filter's value; cells outside
    the overlap and empty cells keep their base value.

    Parameters
    ----------
    base : Grid
        The dotplot to filter.  It is not modified.
    f : Grid
        The filter (any grid of weights).

    Returns
    -------
    Grid
        A filtered copy of *base*.
    """
    width = min(base.width, f.width)
    height = min(base.height, f.height)
    if (width, height) != base.shape:
        _log.debug(
            'apply_filter: %dx%d filter on %dx%d grid; only %dx%d overlap is filtered',
            f.width,
            f.height,
            base.width,
            base.height,
            width,
            height,
        )
    values = np.array(base.cells)
    region = values[:width, :height]
    matched = np.abs(region) >= EPSILON
    region[matched] = f.cells[:width, :height][matched]
    return type(base)(values)


def apply_filter_checked(base: Grid, f: Grid) -> Optional[Grid]:
    """Apply *f* to *base* only when both have identical dimensions.

    Parameters
    ----------
    base : Grid
        The dotplot to filter.
    f : Grid
        The filter.

    Returns
    -------
    Grid or None
        The filtered copy of *base*, or ``None`` if the dimensions differ.
    """
    if base.shape != f.shape:
        _log.warning(
            'Filter size %dx%d does not match dotplot size %dx%d.',
            f.width,
            f.height,
            base.width,
            base.height,
        )
        return None
    return apply_filter(base, f)


# ---------------------------------------------------------------------------
# Weight files
# ---------------------------------------------------------------------------


def _parse_weights(path: Union[str, Path]) -> list[float]:
    """Read one float per non-blank line of *path*.

    Raises
    ------
    OSError
        If the file cannot be opened.
    ValueError
        If a line is not a decimal number.
    """
    weights: list[float] = []
    with open(path, encoding='utf-8') as fh:
        for line in fh:
            line = line.strip()
            if not line:
                continue
            weights.append(float(line))
    return weights


def read_weights(path: Union[str, Path]) -> Optional[list[float]]:
    """Load a per-position weight vector from a newline-delimited file.

    Parameters
    ----------
    path : str or Path
        Weight file.

    Returns
    -------
    list[float] or None
        The weights in file order, or ``None`` if the file cannot be read
        or is not text.

    Raises
    ------
    ValueError
        If a non-blank line is not a decimal number.
    """
    try:
        weights = _parse_weights(path)
    except (OSError, UnicodeDecodeError) as exc:
        _log.warning('Cannot read weight file %s: %s', path, exc)
        return None
    _log.debug('read_weights: %d value(s) from %s', len(weights), path)
    return weights


def filter_from_files(
    path_x: Union[str, Path],
    path_y: Union[str, Path],
) -> Optional[Filter]:
    """Build an average filter from two weight files.

    Parameters
    ----------
    path_x : str or Path
        Weights for the first sequence (x axis).
    path_y : str or Path
        Weights for the second sequence (y axis).

    Returns
    -------
    Filter or None
        The filter, or ``None`` if either file cannot be read.
    """
    weights_x = read_weights(path_x)
    weights_y = read_weights(path_y)
    if weights_x is None or weights_y is None:
        return None
    return build_filter(weights_x, weights_y)
