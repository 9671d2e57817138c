"""Value-range colour selection for continuous dotplots.

A :class:`ColorChooser` holds an ordered list of ``[start, end]``
sub-intervals of ``[0, 1]``, each mapped to a colour, plus a default colour
for values that fall in no interval.  Intervals may overlap; the first one
registered that contains a value wins.

Colours are any Matplotlib colour specification (``'black'``,
``'#a6a6a6'``, ``(0.3, 0.3, 0.3)``).
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any

import matplotlib.colors as mcolors
import numpy as np

_log = logging.getLogger(__name__)

Color = Any


@dataclass(frozen=True)
class ColorRange:
    """A closed value interval ``[start, end]`` and its colour."""

    start: float
    end: float
    color: Color

    def contains(self, value: float) -> bool:
        return self.start <= value <= self.end


def to_rgb8(color: Color) -> tuple[int, int, int]:
    """Convert a Matplotlib colour specification to 8-bit ``(r, g, b)``.

    Parameters
    ----------
    color : str or tuple
        Any colour accepted by :func:`matplotlib.colors.to_rgb`.

    Returns
    -------
    tuple[int, int, int]
        Red, green and blue channels in ``0..255``.
    """
    r, g, b = mcolors.to_rgb(color)
    return round(r * 255), round(g * 255), round(b * 255)


class ColorChooser:
    """Map cell values to colour buckets.

    Parameters
    ----------
    default_color : str or tuple, optional
        Colour for values outside every registered range.
        Default is ``'black'``.

    Examples
    --------
    >>> cc = ColorChooser(default_color='black')
    >>> cc.add_range(0.0, 0.5, 'white')
    True
    >>> cc.add_range(0.5, 1.5, 'red')
    False
    >>> cc.color_index(0.25), cc.color_index(0.75)
    (0, 1)
    """

    def __init__(self, default_color: Color = 'black') -> None:
        self.default_color = default_color
        self._ranges: list[ColorRange] = []

    def add_range(self, start: float, end: float, color: Color) -> bool:
        """Register a colour for the closed interval ``[start, end]``.

        Parameters
        ----------
        start, end : float
            Interval bounds; both must lie within ``[0, 1]``.
        color : str or tuple
            Matplotlib colour specification.

        Returns
        -------
        bool
            ``True`` if the range was added, ``False`` if it lies outside
            ``[0, 1]`` (nothing is registered).
        """
        if start < 0 or end > 1:
            _log.warning(
                'Ignoring colour range [%g, %g]: bounds must lie within [0, 1].',
                start,
                end,
            )
            return False
        self._ranges.append(ColorRange(start, end, color))
        return True

    @property
    def ranges(self) -> list[ColorRange]:
        """Registered ranges in insertion order (a copy)."""
        return list(self._ranges)

    def __len__(self) -> int:
        return len(self._ranges)

    def color_index(self, value: float) -> int:
        """Return the index of the first range containing *value*.

        Returns ``len(self)`` when no range matches, meaning "use the
        default colour".
        """
        for i, color_range in enumerate(self._ranges):
            if color_range.contains(value):
                return i
        return len(self._ranges)

    def color_indices(self, values: np.ndarray) -> np.ndarray:
        """Vectorised :meth:`color_index` over an array of values."""
        indices = np.full(np.shape(values), len(self._ranges), dtype=np.intp)
        # Assign in reverse so the earliest matching range is written last.
        for i in range(len(self._ranges) - 1, -1, -1):
            color_range = self._ranges[i]
            matched = (values >= color_range.start) & (values <= color_range.end)
            indices[matched] = i
        return indices

    def color_for(self, value: float) -> Color:
        """Return the colour of the first range containing *value*, or the default."""
        return self.palette()[self.color_index(value)]

    def palette(self) -> list[Color]:
        """Return the range colours followed by the default colour.

        Position ``i`` is the colour for :meth:`color_index` result ``i``.
        """
        return [r.color for r in self._ranges] + [self.default_color]

    def __repr__(self) -> str:
        return (
            f'ColorChooser({len(self._ranges)} range(s), '
            f'default_color={self.default_color!r})'
        )


def grayscale_chooser() -> ColorChooser:
    """Return the standard four-band grey-scale chooser.

    ``[0, 0.25]`` white, ``[0.25, 0.5]`` light grey, ``[0.5, 0.75]`` dark
    grey and ``[0.75, 1]`` black, with black as the default.
    """
    cc = ColorChooser(default_color='#000000')
    cc.add_range(0.0, 0.25, '#ffffff')
    cc.add_range(0.25, 0.5, '#a6a6a6')
    cc.add_range(0.5, 0.75, '#4b4b4b')
    cc.add_range(0.75, 1.0, '#000000')
    return cc
