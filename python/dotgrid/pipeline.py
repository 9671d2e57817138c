"""End-to-end dotplot generation.

Chains the dotgrid stages for one sequence pair::

    sequences -> Grid -> find_runs -> project_runs
              -> [filter round 1 -> [filter round 2]] -> render -> PNG

The first filter round must match the dotplot size exactly; the second
round is applied to the overlapping region only.

Core stages report recoverable failures as ``None``/``False``; this module
turns them into :class:`DotplotError` carrying the process exit code the
command line uses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Optional, Sequence, Union

import numpy as np

from dotgrid.align import Run, find_runs, project_runs
from dotgrid.colors import ColorChooser, grayscale_chooser
from dotgrid.filters import Filter, apply_filter, apply_filter_checked, filter_from_files
from dotgrid.grid import Grid, build_grid
from dotgrid.render import (
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    Region,
    render_dotplot,
    render_dotplot_continuous,
    write_image,
)

_log = logging.getLogger(__name__)

DEFAULT_MIN_LENGTH = 5

EXIT_USAGE = 1
EXIT_OUTPUT_UNWRITABLE = 2
EXIT_SOURCE_UNAVAILABLE = 3
EXIT_DIMENSION_MISMATCH = 4

PathLike = Union[str, Path]


class DotplotError(RuntimeError):
    """A dotplot could not be produced.

    Parameters
    ----------
    message : str
        Human-readable diagnostic.
    exit_code : int
        Process exit status for the command line.
    """

    def __init__(self, message: str, exit_code: int) -> None:
        super().__init__(message)
        self.exit_code = exit_code


@dataclass
class DotplotOptions:
    """Settings for one dotplot.

    Parameters
    ----------
    min_length : int
        Minimum run length.  Values ``<= 1`` disable run detection and the
        raw match grid is rendered.  Default is ``5``.
    width, height : int
        Requested image size in pixels.  Default is ``2000 x 2000``.
    x_weights, y_weights : path, optional
        Weight files for the first filter round.  Filtering happens only
        when both are given.
    x_weights2, y_weights2 : path, optional
        Weight files for the second filter round (requires the first).
    chooser : ColorChooser, optional
        Colour buckets for filtered dotplots.  Defaults to
        :func:`~dotgrid.colors.grayscale_chooser`.
    regions : list[Region]
        Axis bands rendered in their own colour.
    """

    min_length: int = DEFAULT_MIN_LENGTH
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    x_weights: Optional[PathLike] = None
    y_weights: Optional[PathLike] = None
    x_weights2: Optional[PathLike] = None
    y_weights2: Optional[PathLike] = None
    chooser: Optional[ColorChooser] = None
    regions: list[Region] = field(default_factory=list)

    @property
    def filtered(self) -> bool:
        """``True`` when a first filter round is configured."""
        return self.x_weights is not None and self.y_weights is not None

    @property
    def second_round(self) -> bool:
        """``True`` when a second filter round is configured."""
        return self.x_weights2 is not None and self.y_weights2 is not None


@dataclass
class DotplotResult:
    """Output of :func:`build_dotplot`.

    Attributes
    ----------
    grid : Grid
        The grid that was rendered (after run projection and filtering).
    runs : list[Run]
        Detected runs; empty when run detection is disabled.
    image : numpy.ndarray
        ``uint8`` RGB image.
    """

    grid: Grid
    runs: list[Run]
    image: np.ndarray


def _load_filter(path_x: PathLike, path_y: PathLike) -> Filter:
    f = filter_from_files(path_x, path_y)
    if f is None:
        raise DotplotError("Can't open filter values file(s)", EXIT_SOURCE_UNAVAILABLE)
    return f


def _apply_filters(grid: Grid, options: DotplotOptions) -> Grid:
    conserved = apply_filter_checked(grid, _load_filter(options.x_weights, options.y_weights))
    if conserved is None:
        raise DotplotError('Unequal dimension size', EXIT_DIMENSION_MISMATCH)
    if options.second_round:
        conserved = apply_filter(
            conserved, _load_filter(options.x_weights2, options.y_weights2)
        )
    elif options.x_weights2 is not None or options.y_weights2 is not None:
        _log.warning('Second filter round needs both x and y weight files; skipping it.')
    return conserved


def build_dotplot(
    seq1: Sequence,
    seq2: Sequence,
    options: Optional[DotplotOptions] = None,
) -> DotplotResult:
    """Compute and render the dotplot of two sequences.

    Parameters
    ----------
    seq1 : sequence
        Sequence along the x axis.
    seq2 : sequence
        Sequence along the y axis.
    options : DotplotOptions, optional
        Settings; defaults are used when ``None``.

    Returns
    -------
    DotplotResult
        Rendered image, the grid it shows and the detected runs.

    Raises
    ------
    DotplotError
        If a weight file cannot be read or the first-round filter does not
        match the dotplot size.
    ValueError
        If either sequence is empty.
    """
    options = options or DotplotOptions()
    grid = build_grid(seq1, seq2)

    runs: list[Run] = []
    if options.min_length > 1:
        runs = find_runs(grid, options.min_length)
        grid = project_runs(grid, runs)
    else:
        _log.debug('Run detection disabled (min_length=%d)', options.min_length)

    if options.filtered:
        grid = _apply_filters(grid, options)
        chooser = options.chooser if options.chooser is not None else grayscale_chooser()
        image = render_dotplot_continuous(
            grid, chooser, options.width, options.height, regions=options.regions
        )
    else:
        image = render_dotplot(grid, options.width, options.height, regions=options.regions)

    return DotplotResult(grid=grid, runs=runs, image=image)


def run_dotplot(
    seq1: Sequence,
    seq2: Sequence,
    output_path: PathLike,
    options: Optional[DotplotOptions] = None,
) -> DotplotResult:
    """Build a dotplot and write its image to *output_path*.

    Raises
    ------
    DotplotError
        As :func:`build_dotplot`, or if the image cannot be written.
    """
    result = build_dotplot(seq1, seq2, options)
    if not write_image(result.image, output_path):
        raise DotplotError(f"Can't create {output_path}", EXIT_OUTPUT_UNWRITABLE)
    return result
