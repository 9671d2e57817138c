"""Raster rendering of dotplot grids.

Renders a :class:`~dotgrid.grid.Grid` into an RGB pixel image (a ``uint8``
``numpy`` array of shape ``(height, width, 3)``) and writes it to disk with
Matplotlib.

Two renderers are provided:

:func:`render_dotplot`
    Binary rendering: every cell with a value ``> 0`` is painted in a single
    match colour.
:func:`render_dotplot_continuous`
    Continuous rendering: every cell with a value ``> 0`` is painted in the
    colour bucket a :class:`~dotgrid.colors.ColorChooser` assigns to it.

Images are never scaled up: a requested size larger than the grid is
clamped to the grid's own size.  Cells are placed at their exact linear
offset (see :func:`cell_spans`) and are never narrower than one pixel.

Both renderers accept :class:`Region` bands; a matching cell inside a band
is painted in the band's colour instead.

Examples
--------
>>> from dotgrid.grid import build_grid
>>> from dotgrid.render import render_dotplot, write_image
>>> image = render_dotplot(build_grid("ACGT" * 50, "TACG" * 50), 100, 100)
>>> image.shape
(100, 100, 3)
>>> write_image(image, "dotplot.png")
True
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from pathlib import Path
from typing import Optional, Sequence, Union

import matplotlib.pyplot as plt
import numpy as np

from dotgrid.colors import Color, ColorChooser, to_rgb8
from dotgrid.grid import Grid

_log = logging.getLogger(__name__)

DEFAULT_WIDTH = 2000
DEFAULT_HEIGHT = 2000

BACKGROUND_COLOR = '#ffffff'
MATCH_COLOR = '#000000'
REGION_COLOR = '#2f2fcb'

DEFAULT_FORMAT = 'png'
# Extension -> format name for the writers Matplotlib and Pillow provide.
IMAGE_FORMATS = {
    'png': 'png',
    'jpg': 'jpeg',
    'jpeg': 'jpeg',
    'tif': 'tiff',
    'tiff': 'tiff',
    'bmp': 'bmp',
    'pdf': 'pdf',
    'svg': 'svg',
}


class Axis(str, Enum):
    """A dotplot axis."""

    X = 'x'
    Y = 'y'


@dataclass(frozen=True)
class Region:
    """A band of one axis rendered in its own colour.

    Parameters
    ----------
    axis : Axis
        Axis the band lies on.
    start : int
        First cell of the band (inclusive).
    length : int
        Number of cells in the band; the band is ``[start, start + length)``.
    color : str or tuple, optional
        Matplotlib colour specification.  Default is a mid blue.
    """

    axis: Axis
    start: int
    length: int
    color: Color = REGION_COLOR

    @property
    def end(self) -> int:
        """Exclusive end of the band."""
        return self.start + self.length

    def contains(self, x: int, y: int) -> bool:
        position = x if self.axis == Axis.X else y
        return self.start <= position < self.end


def find_region(regions: Sequence[Region], x: int, y: int) -> Optional[Region]:
    """Return the first region containing cell ``(x, y)``, or ``None``."""
    for region in regions:
        if region.contains(x, y):
            return region
    return None


def clamp_size(requested: int, cells: int) -> int:
    """Clamp a requested image dimension so the image is never enlarged.

    Raises
    ------
    ValueError
        If *requested* is not positive.
    """
    if requested < 1:
        raise ValueError(f'Image dimensions must be positive; got {requested}.')
    return min(requested, cells)


def cell_spans(n_cells: int, n_pixels: int) -> np.ndarray:
    """Return the ``[start, stop)`` pixel span of each cell along one axis.

    Cell ``i`` starts at its accumulated offset ``i * n_pixels / n_cells``
    (computed exactly with integer arithmetic, so no drift builds up) and
    covers at least one pixel.

    Parameters
    ----------
    n_cells : int
        Number of grid cells along the axis.
    n_pixels : int
        Image size along the axis.

    Returns
    -------
    numpy.ndarray
        Integer array of shape ``(n_cells, 2)``.
    """
    index = np.arange(n_cells, dtype=np.int64)
    starts = (index * n_pixels) // n_cells
    stops = ((index + 1) * n_pixels) // n_cells
    stops = np.maximum(stops, starts + 1)
    return np.stack([starts, np.minimum(stops, max(n_pixels, 1))], axis=1)


def _region_indices(
    grid: Grid,
    regions: Sequence[Region],
    indices: np.ndarray,
    first_index: int,
) -> None:
    """Overwrite the colour index of lit cells that fall inside a region."""
    xs = np.arange(grid.width)[:, np.newaxis]
    ys = np.arange(grid.height)[np.newaxis, :]
    lit = grid.cells > 0
    # Reverse order so the first region containing a cell wins.
    for i in range(len(regions) - 1, -1, -1):
        region = regions[i]
        position = xs if region.axis == Axis.X else ys
        inside = (position >= region.start) & (position < region.end)
        indices[inside & lit] = first_index + i


def _pixel_groups(n_cells: int, n_pixels: int) -> np.ndarray:
    """Return the first cell index of each pixel along one axis.

    With ``n_pixels <= n_cells`` every cell covers exactly one pixel and
    the cells sharing a pixel are contiguous, so the result splits the axis
    into ``n_pixels`` consecutive groups.
    """
    starts = cell_spans(n_cells, n_pixels)[:, 0]
    return np.searchsorted(starts, np.arange(n_pixels), side='left')


def _paint(
    grid: Grid,
    indices: np.ndarray,
    palette: list[Color],
    width: int,
    height: int,
    background: Color,
) -> np.ndarray:
    """Paint each lit cell's span with its palette colour.

    *indices* holds a palette index per cell and ``-1`` for background.
    Where several cells share a pixel, the last lit one in row-major order
    (``y`` first, then ``x``) wins.
    """
    width = clamp_size(width, grid.width)
    height = clamp_size(height, grid.height)
    if (width, height) != grid.shape:
        _log.debug(
            'Rendering %dx%d grid into %dx%d image', grid.width, grid.height, width, height
        )
    # Row-major rank of every lit cell, -1 for background.
    rank = np.arange(grid.width * grid.height).reshape(grid.height, grid.width).T
    rank = np.where(indices >= 0, rank, -1)
    rank = np.maximum.reduceat(rank, _pixel_groups(grid.width, width), axis=0)
    rank = np.maximum.reduceat(rank, _pixel_groups(grid.height, height), axis=1)

    colors = np.array(
        [to_rgb8(c) for c in palette] + [to_rgb8(background)], dtype=np.uint8
    )
    cell_colors = indices.T.ravel()
    pixel_colors = np.where(rank >= 0, cell_colors[np.maximum(rank, 0)], len(palette))
    return colors[pixel_colors.T]


def render_dotplot(
    grid: Grid,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    match_color: Color = MATCH_COLOR,
    background: Color = BACKGROUND_COLOR,
    regions: Optional[Sequence[Region]] = None,
) -> np.ndarray:
    """Render a grid with every matching cell in one colour.

    Parameters
    ----------
    grid : Grid
        Grid to render.
    width, height : int, optional
        Requested image size in pixels, clamped to the grid size.
        Default is ``2000 x 2000``.
    match_color : str or tuple, optional
        Colour of cells with a value ``> 0``.  Default is black.
    background : str or tuple, optional
        Colour of every other pixel.  Default is white.
    regions : sequence of Region, optional
        Bands whose matching cells take the band's colour instead.

    Returns
    -------
    numpy.ndarray
        ``uint8`` RGB image of shape ``(height, width, 3)``.
    """
    regions = list(regions or [])
    indices = np.where(grid.cells > 0, 0, -1).astype(np.intp)
    _region_indices(grid, regions, indices, first_index=1)
    palette = [match_color] + [r.color for r in regions]
    return _paint(grid, indices, palette, width, height, background)


def render_dotplot_continuous(
    grid: Grid,
    chooser: ColorChooser,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    background: Color = BACKGROUND_COLOR,
    regions: Optional[Sequence[Region]] = None,
) -> np.ndarray:
    """Render a grid of continuous values through a colour chooser.

    Each cell with a value ``> 0`` is painted in the colour of the first
    range of *chooser* containing its value, or in the chooser's default
    colour when no range does.

    Parameters
    ----------
    grid : Grid
        Grid of (typically filtered) values to render.
    chooser : ColorChooser
        Value-range to colour mapping.
    width, height : int, optional
        Requested image size in pixels, clamped to the grid size.
    background : str or tuple, optional
        Colour of non-matching pixels.  Default is white.
    regions : sequence of Region, optional
        Bands whose matching cells take the band's colour instead.

    Returns
    -------
    numpy.ndarray
        ``uint8`` RGB image of shape ``(height, width, 3)``.
    """
    regions = list(regions or [])
    values = grid.cells
    indices = np.where(values > 0, chooser.color_indices(values), -1).astype(np.intp)
    palette = chooser.palette()
    _region_indices(grid, regions, indices, first_index=len(palette))
    palette += [r.color for r in regions]
    return _paint(grid, indices, palette, width, height, background)


def image_format(path: Union[str, Path]) -> str:
    """Return the image format implied by *path*'s extension.

    Unknown or missing extensions fall back to :data:`DEFAULT_FORMAT`.
    """
    suffix = Path(path).suffix.lower().lstrip('.')
    return IMAGE_FORMATS.get(suffix, DEFAULT_FORMAT)


def write_image(image: np.ndarray, path: Union[str, Path], format: Optional[str] = None) -> bool:
    """Write a rendered image to disk.

    Parameters
    ----------
    image : numpy.ndarray
        ``uint8`` RGB image from one of the renderers.
    path : str or Path
        Output file.  The format is inferred from the extension unless
        *format* is given; an unrecognised extension is written as PNG.
    format : str, optional
        Image format such as ``'png'``.  Default is ``None``.

    Returns
    -------
    bool
        ``True`` on success, ``False`` if the file cannot be written.
    """
    format = format or image_format(path)
    try:
        plt.imsave(str(path), image, format=format)
    except (OSError, ValueError, KeyError) as exc:
        _log.warning('Cannot write image %s: %s', path, exc)
        return False
    _log.debug('Wrote %dx%d image to %s', image.shape[1], image.shape[0], path)
    return True
