import cmath

import pytest

from newtonfractal.model.newton import (
    Basin, BasinInfo, ComplexNewton, Converged, CubicNewton, Diverged, ExhaustedBudget, classify, solve
)
from newtonfractal.model.roots import RootSet

MAX_ITERATION = 32
EPSILON = 1e-9


@pytest.fixture
def unity():
    return RootSet.cube_roots_of_unity()


# --- solve ---

def test_solve_counts_updates_before_convergence():
    outcome = solve(0j, lambda z: z - 2.0, lambda z: 1.0 + 0j, MAX_ITERATION, EPSILON)
    assert outcome == Converged(2 + 0j, 1)


def test_solve_converges_immediately_on_a_root():
    outcome = solve(3 + 0j, lambda z: z - 3.0, lambda z: 1.0 + 0j, MAX_ITERATION, EPSILON)
    assert outcome == Converged(3 + 0j, 0)


def test_solve_zero_derivative_diverges():
    # f(z) = z^2 + 1 has a critical point at 0
    outcome = solve(0j, lambda z: z * z + 1, lambda z: 2 * z, MAX_ITERATION, EPSILON)
    assert outcome == Diverged(0)


def test_solve_overflow_diverges():
    outcome = solve(0j, lambda z: 1e308 + 0j, lambda z: 1e-308 + 0j, MAX_ITERATION, EPSILON)
    assert isinstance(outcome, Diverged)
    assert outcome.iterations == 0


def test_solve_exhausts_budget():
    # Real starting points never leave the real axis, where z^2 + 1 >= 1
    outcome = solve(0.5 + 0j, lambda z: z * z + 1, lambda z: 2 * z, MAX_ITERATION, EPSILON)
    assert outcome == ExhaustedBudget(MAX_ITERATION)


def test_solve_with_zero_budget():
    outcome = solve(1 + 0j, lambda z: z - 1, lambda z: 1 + 0j, 0, EPSILON)
    assert outcome == ExhaustedBudget(0)


@pytest.mark.parametrize("z0", [0j, 1e300 + 1e300j, -7.5 + 0.1j, 0.3 - 2.2j, complex(1e-300, 0)])
def test_solve_always_terminates_with_bounded_count(z0, unity):
    newton = CubicNewton(unity, MAX_ITERATION, EPSILON)
    outcome = newton.solve(z0)
    assert isinstance(outcome, (Converged, Diverged, ExhaustedBudget))
    assert 0 <= outcome.iterations <= MAX_ITERATION


def test_invalid_parameters(unity):
    with pytest.raises(ValueError):
        CubicNewton(unity, -1, EPSILON)
    with pytest.raises(ValueError):
        CubicNewton(unity, MAX_ITERATION, -1e-9)
    with pytest.raises(ValueError):
        CubicNewton(unity, MAX_ITERATION, float("nan"))


def test_complex_newton_is_abstract():
    with pytest.raises(TypeError):
        ComplexNewton(MAX_ITERATION, EPSILON)


# --- CubicNewton ---

def test_cubic_and_derivative_match_the_roots():
    roots = RootSet(1 + 2j, -0.5, 3 - 1j)
    newton = CubicNewton(roots, MAX_ITERATION, EPSILON)
    z = 0.7 - 0.2j
    expected_f = (z - roots.first) * (z - roots.second) * (z - roots.third)
    h = 1e-6
    numeric_fd = (newton.f(z + h) - newton.f(z - h)) / (2 * h)
    assert cmath.isclose(newton.f(z), expected_f, rel_tol=1e-12)
    assert cmath.isclose(newton.fd(z), numeric_fd, rel_tol=1e-6)
    for root in roots:
        assert abs(newton.f(root)) < 1e-12


def test_canonical_root_at_depth_zero(unity):
    assert classify(1 + 0j, unity, MAX_ITERATION, EPSILON) == BasinInfo(Basin.FIRST, 0)


def test_every_root_is_its_own_basin_at_depth_zero(unity):
    for basin, root in zip((Basin.FIRST, Basin.SECOND, Basin.THIRD), unity):
        assert classify(root, unity, MAX_ITERATION, EPSILON) == BasinInfo(basin, 0)


def test_nearby_points_converge_to_the_nearest_root(unity):
    newton = CubicNewton(unity, MAX_ITERATION, EPSILON)
    info = newton.which_basin(1.1 + 0.05j)
    assert info.basin == Basin.FIRST
    assert 0 < info.depth < MAX_ITERATION
    assert newton.which_basin(unity.second * 1.1).basin == Basin.SECOND
    assert newton.which_basin(unity.third * 0.9).basin == Basin.THIRD


def test_tie_break_prefers_first_matching_root():
    # With a large epsilon, 0.1 lies within tolerance of both 0 and 0.1
    roots = RootSet(0, 0.1, 5)
    assert classify(0.1 + 0j, roots, MAX_ITERATION, 1.0) == BasinInfo(Basin.FIRST, 0)


def test_converged_far_from_every_root_is_unknown():
    # Triple root at 0: |f(0.5)| = 0.125 < 0.2 but |0.5 - 0| >= 0.2
    roots = RootSet(0, 0, 0)
    assert classify(0.5 + 0j, roots, MAX_ITERATION, 0.2) == BasinInfo(Basin.UNKNOWN, 0)


def test_exhausted_budget_is_unknown_with_depth(unity):
    assert classify(1.5 + 0j, unity, 1, EPSILON) == BasinInfo(Basin.UNKNOWN, 1)


def test_divergence_is_unknown():
    # f'(z) = 3z(z - 2) vanishes at z = 2 for roots {0, 0, 3}
    roots = RootSet(0, 0, 3)
    newton = CubicNewton(roots, MAX_ITERATION, EPSILON)
    assert newton.fd(2 + 0j) == 0
    assert newton.which_basin(2 + 0j) == BasinInfo(Basin.UNKNOWN, 0)
