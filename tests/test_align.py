"""Tests for diagonal run detection and projection."""

import random

import pytest

from dotgrid.align import Run, find_runs, project_runs, reverse_run
from dotgrid.grid import Grid, build_grid


def _random_grid(seed, alphabet='ACGT', max_len=15):
    rng = random.Random(seed)
    seq1 = ''.join(rng.choice(alphabet) for _ in range(rng.randint(1, max_len)))
    seq2 = ''.join(rng.choice(alphabet) for _ in range(rng.randint(1, max_len)))
    return build_grid(seq1, seq2)


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------


class TestRun:
    def test_start_end_len(self):
        run = Run(((0, 3), (1, 2), (2, 1)))
        assert run.start == (0, 3)
        assert run.end == (2, 1)
        assert len(run) == 3

    def test_iteration(self):
        run = Run(((1, 1), (2, 2)))
        assert list(run) == [(1, 1), (2, 2)]

    def test_reversed(self):
        run = Run(((0, 0), (1, 1), (2, 2)))
        assert run.reversed().points == ((2, 2), (1, 1), (0, 0))
        assert run.points == ((0, 0), (1, 1), (2, 2))

    def test_reverse_run_function(self):
        run = Run(((0, 3), (1, 2)))
        assert reverse_run(run) == Run(((1, 2), (0, 3)))

    def test_is_forward(self):
        assert Run(((0, 0), (1, 1))).is_forward
        assert not Run(((0, 1), (1, 0))).is_forward

    def test_spell(self):
        run = Run(((1, 0), (2, 1), (3, 2)))
        assert run.spell('ACGT') == 'CGT'

    def test_points_coerced_to_int_tuples(self):
        run = Run([[0, 0], [1, 1]])
        assert run.points == ((0, 0), (1, 1))

    def test_hashable(self):
        assert len({Run(((0, 0),)), Run(((0, 0),))}) == 1


# ---------------------------------------------------------------------------
# find_runs
# ---------------------------------------------------------------------------


def test_identical_sequences_single_diagonal_run():
    """ACTG against itself gives one run covering the main diagonal."""
    runs = find_runs(build_grid('ACTG', 'ACTG'), 2)
    assert runs == [Run(((0, 0), (1, 1), (2, 2), (3, 3)))]


def test_anti_diagonal_run_reads_in_increasing_x():
    runs = find_runs(build_grid('ACGT', 'TGCA'), 2)
    assert runs == [Run(((0, 3), (1, 2), (2, 1), (3, 0)))]


def test_forward_runs_come_before_anti_diagonal_runs():
    runs = find_runs(build_grid('ABBA', 'ABBA'), 2)
    assert runs == [
        Run(((0, 0), (1, 1), (2, 2), (3, 3))),
        Run(((0, 3), (1, 2), (2, 1), (3, 0))),
    ]


def test_threshold_is_inclusive():
    grid = build_grid('ACG', 'ACG')
    assert len(find_runs(grid, 3)) == 1
    assert find_runs(grid, 4) == []


def test_gap_splits_runs_without_merging():
    grid = build_grid('ABCDE', 'ABZDE')
    assert find_runs(grid, 2) == [
        Run(((0, 0), (1, 1))),
        Run(((3, 3), (4, 4))),
    ]
    assert find_runs(grid, 3) == []


def test_run_open_at_boundary_is_emitted_once():
    grid = build_grid('XXAB', 'AB')
    assert find_runs(grid, 2) == [Run(((2, 0), (3, 1)))]


def test_run_at_right_edge_of_anti_diagonal():
    # 'B' at x=3,y=0 and 'A' at x=2,y=1 lie on the anti-diagonal anchored
    # at the top-right corner.
    grid = build_grid('XXAB', 'BA')
    assert find_runs(grid, 2) == [Run(((2, 1), (3, 0)))]


def test_run_starting_in_left_column():
    grid = build_grid('ABC', 'XABC')
    assert find_runs(grid, 3) == [Run(((0, 1), (1, 2), (2, 3)))]


def test_run_starting_in_right_column():
    grid = build_grid('CBA', 'XABC')
    assert find_runs(grid, 3) == [Run(((0, 3), (1, 2), (2, 1)))]


def test_min_length_below_one_never_yields_empty_runs():
    runs = find_runs(build_grid('A', 'A'), 0)
    # The single cell lies on one forward and one anti-diagonal line.
    assert runs == [Run(((0, 0),)), Run(((0, 0),))]


def test_no_matches_no_runs():
    assert find_runs(build_grid('AAAA', 'CCCC'), 1) == []


def test_zero_and_negative_cells_are_not_matches():
    grid = Grid([[1.0, 0.0], [0.0, -1.0]])
    assert find_runs(grid, 2) == []


def test_continuous_positive_values_count_as_matches():
    grid = Grid([[0.3, 0.0], [0.0, 0.9]])
    assert find_runs(grid, 2) == [Run(((0, 0), (1, 1)))]


@pytest.mark.parametrize('seed', range(10))
def test_runs_respect_min_length(seed):
    grid = _random_grid(seed)
    for min_length in range(1, 6):
        assert all(len(run) >= min_length for run in find_runs(grid, min_length))


@pytest.mark.parametrize('seed', range(10))
def test_lowering_min_length_never_removes_runs(seed):
    grid = _random_grid(seed, alphabet='AC')
    for min_length in range(2, 7):
        higher = set(find_runs(grid, min_length))
        lower = set(find_runs(grid, min_length - 1))
        assert higher <= lower


@pytest.mark.parametrize('seed', range(10))
def test_run_points_are_lit_in_bounds_diagonal_steps(seed):
    grid = _random_grid(seed, alphabet='AC')
    for run in find_runs(grid, 2):
        for x, y in run:
            assert grid.in_bounds(x, y)
            assert grid[x, y] > 0
        for (x0, y0), (x1, y1) in zip(run.points, run.points[1:]):
            assert x1 - x0 == 1
            assert abs(y1 - y0) == 1
            assert y1 - y0 == run.points[1][1] - run.points[0][1]


@pytest.mark.parametrize('seed', range(10))
def test_runs_are_maximal(seed):
    grid = _random_grid(seed, alphabet='AC')
    for run in find_runs(grid, 2):
        dy = run.points[1][1] - run.points[0][1]
        (xs, ys), (xe, ye) = run.start, run.end
        before = (xs - 1, ys - dy)
        after = (xe + 1, ye + dy)
        for x, y in (before, after):
            assert not grid.in_bounds(x, y) or grid[x, y] <= 0


# ---------------------------------------------------------------------------
# project_runs
# ---------------------------------------------------------------------------


def test_project_runs_keeps_only_run_cells():
    grid = build_grid('ABCDE', 'ABZDE')
    runs = find_runs(grid, 2)
    projected = project_runs(grid, runs)
    lit = {(x, y) for x in range(5) for y in range(5) if projected[x, y] > 0}
    assert lit == {(0, 0), (1, 1), (3, 3), (4, 4)}


def test_project_runs_drops_short_matches():
    grid = build_grid('AAB', 'ACB')
    projected = project_runs(grid, find_runs(grid, 3))
    assert projected[0, 0] == 0.0
    assert projected[1, 0] == 0.0
    assert not projected.cells.any()


def test_project_runs_does_not_modify_source():
    grid = build_grid('ACTG', 'ACTG')
    before = grid.clone()
    project_runs(grid, [])
    assert grid == before


def test_project_runs_ignores_out_of_bounds_points():
    grid = Grid.zeros(4, 4)
    projected = project_runs(grid, [Run(((-1, -1), (0, 0), (4, 4), (5, 5)))])
    assert projected[0, 0] == 1.0
    assert projected.cells.sum() == 1.0


def test_project_runs_overlap_is_idempotent():
    grid = Grid.zeros(3, 3)
    run = Run(((0, 0), (1, 1), (2, 2)))
    projected = project_runs(grid, [run, run, Run(((1, 1),))])
    assert projected[1, 1] == 1.0
    assert projected.cells.sum() == 3.0


@pytest.mark.parametrize('seed', range(10))
def test_projection_is_idempotent_subset(seed):
    grid = _random_grid(seed, alphabet='AC')
    runs = find_runs(grid, 3)
    once = project_runs(grid, runs)
    twice = project_runs(once, runs)
    assert once == twice
    for x in range(grid.width):
        for y in range(grid.height):
            if once[x, y] > 0:
                assert grid[x, y] > 0
