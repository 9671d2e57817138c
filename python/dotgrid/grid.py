"""Match grid for dotgrid dotplots.

Provides the :class:`Grid` class, a dense ``width x height`` matrix of
floating-point cell values, and :func:`build_grid` for constructing the
binary match grid of two symbol sequences.

The grid is indexed ``grid[x, y]`` where ``x`` runs along the first
sequence and ``y`` along the second.

Examples
--------
>>> from dotgrid.grid import build_grid
>>> grid = build_grid("ACTG", "ACTG")
>>> grid.width, grid.height
(4, 4)
>>> grid[2, 2]
1.0
"""

from __future__ import annotations

import logging
from typing import Sequence, Union

import numpy as np

_log = logging.getLogger(__name__)

# Values with a magnitude below this are treated as "no match".
EPSILON = 1e-5


class Grid:
    """A rectangular, fully populated matrix of cell values.

    Storage is a single owned ``numpy`` array of shape ``(width, height)``.
    The constructor copies the supplied values, so a grid never shares
    storage with its source.

    Parameters
    ----------
    cells : array-like
        Two-dimensional table of values indexed ``[x][y]``.

    Raises
    ------
    ValueError
        If *cells* is not two-dimensional.
    """

    def __init__(self, cells: Union[np.ndarray, Sequence[Sequence[float]]]) -> None:
        values = np.array(cells, dtype=np.float64)
        if values.ndim != 2:
            raise ValueError(
                f'Grid cells must be two-dimensional; got {values.ndim} dimension(s).'
            )
        self._cells = values

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def zeros(cls, width: int, height: int) -> 'Grid':
        """Return a zero-filled grid of the given size.

        Parameters
        ----------
        width : int
            Number of columns (x positions).
        height : int
            Number of rows (y positions).

        Returns
        -------
        Grid
            New grid with every cell set to ``0.0``.
        """
        if width < 0 or height < 0:
            raise ValueError(f'Invalid grid size {width}x{height}.')
        return cls(np.zeros((width, height), dtype=np.float64))

    def zeroed(self) -> 'Grid':
        """Return a zero-filled grid with the same dimensions as this one."""
        return type(self).zeros(self.width, self.height)

    def clone(self) -> 'Grid':
        """Return a value-equal copy that shares no storage with this grid."""
        return type(self)(self._cells)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return int(self._cells.shape[0])

    @property
    def height(self) -> int:
        return int(self._cells.shape[1])

    @property
    def shape(self) -> tuple[int, int]:
        """``(width, height)`` of the grid."""
        return self.width, self.height

    @property
    def cells(self) -> np.ndarray:
        """A read-only view of the cell values, indexed ``[x, y]``."""
        view = self._cells.view()
        view.flags.writeable = False
        return view

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f'Cell ({x}, {y}) is outside a {self.width}x{self.height} grid.'
            )

    def __getitem__(self, key: tuple[int, int]) -> float:
        x, y = key
        self._check_bounds(x, y)
        return float(self._cells[x, y])

    def __setitem__(self, key: tuple[int, int], value: float) -> None:
        x, y = key
        self._check_bounds(x, y)
        self._cells[x, y] = value

    def in_bounds(self, x: int, y: int) -> bool:
        """Return ``True`` when ``(x, y)`` addresses a cell of this grid."""
        return 0 <= x < self.width and 0 <= y < self.height

    def set_value(self, x: int, y: int, value: float) -> bool:
        """Overwrite a cell only if it currently holds a match.

        A cell whose magnitude is below :data:`EPSILON` is treated as empty
        and left untouched.

        Parameters
        ----------
        x, y : int
            Cell coordinates.
        value : float
            Replacement value.

        Returns
        -------
        bool
            ``True`` if the cell was overwritten, ``False`` if it was empty.
        """
        self._check_bounds(x, y)
        if abs(self._cells[x, y]) < EPSILON:
            return False
        self._cells[x, y] = value
        return True

    # ------------------------------------------------------------------
    # Comparison / display
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.shape == other.shape and bool(
            np.array_equal(self._cells, other._cells)
        )

    __hash__ = None  # type: ignore[assignment]

    def to_text(self) -> str:
        """Return the grid as text, one line per ``y`` row of ``%g`` values."""
        lines = []
        for y in range(self.height):
            lines.append(''.join('%g' % v for v in self._cells[:, y]))
        return '\n'.join(lines)

    def __repr__(self) -> str:
        return f'{type(self).__name__}(width={self.width}, height={self.height})'


def build_grid(seq1: Sequence, seq2: Sequence) -> Grid:
    """Build the binary match grid of two sequences.

    Cell ``(x, y)`` is ``1.0`` when ``seq1[x] == seq2[y]`` and ``0.0``
    otherwise.  Symbols are compared exactly; no case folding is applied.

    Parameters
    ----------
    seq1 : sequence
        Sequence along the x axis (grid width).
    seq2 : sequence
        Sequence along the y axis (grid height).

    Returns
    -------
    Grid
        A ``len(seq1) x len(seq2)`` grid.

    Raises
    ------
    ValueError
        If either sequence is empty.
    """
    if len(seq1) == 0 or len(seq2) == 0:
        raise ValueError('Cannot build a dotplot grid from an empty sequence.')
    xs = np.array(list(seq1))
    ys = np.array(list(seq2))
    cells = (xs[:, np.newaxis] == ys[np.newaxis, :]).astype(np.float64)
    _log.debug('build_grid: %dx%d grid, %d matching cell(s)', len(xs), len(ys), int(cells.sum()))
    return Grid(cells)
