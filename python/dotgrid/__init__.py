"""
dotgrid: dotplots of two symbol sequences with diagonal alignment detection.

This package provides:
- A dense match grid built from two sequences
- Diagonal run (local alignment) detection and projection
- Conservation filters built from per-position weight vectors
- Value-range colour buckets and raster rendering to PNG
- A JSON alignment report and a command-line entry point

Examples
--------
Basic usage:

>>> from dotgrid import build_grid, find_runs, project_runs, render_dotplot
>>> grid = build_grid("ACTGACTG", "ACTGTTTT")
>>> runs = find_runs(grid, 4)
>>> image = render_dotplot(project_runs(grid, runs), 800, 800)
"""

from dotgrid.align import Run, find_runs, project_runs, reverse_run  # noqa: F401
from dotgrid.colors import ColorChooser, ColorRange, grayscale_chooser  # noqa: F401
from dotgrid.filters import (  # noqa: F401
    Filter,
    apply_filter,
    apply_filter_checked,
    build_filter,
    filter_from_files,
    read_weights,
)
from dotgrid.grid import Grid, build_grid  # noqa: F401
from dotgrid.pipeline import (  # noqa: F401
    DotplotError,
    DotplotOptions,
    DotplotResult,
    build_dotplot,
    run_dotplot,
)
from dotgrid.render import (  # noqa: F401
    Axis,
    Region,
    render_dotplot,
    render_dotplot_continuous,
    write_image,
)
from dotgrid.report import alignments_to_json  # noqa: F401

__version__ = '0.1.0'
__all__ = [
    'Grid',
    'build_grid',
    'Run',
    'find_runs',
    'project_runs',
    'reverse_run',
    'Filter',
    'build_filter',
    'apply_filter',
    'apply_filter_checked',
    'read_weights',
    'filter_from_files',
    'ColorChooser',
    'ColorRange',
    'grayscale_chooser',
    'Axis',
    'Region',
    'render_dotplot',
    'render_dotplot_continuous',
    'write_image',
    'alignments_to_json',
    'DotplotOptions',
    'DotplotResult',
    'DotplotError',
    'build_dotplot',
    'run_dotplot',
]
