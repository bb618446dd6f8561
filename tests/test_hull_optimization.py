# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

import numpy as np
import pytest

from npc_analysis.errors import InvalidParameter
from npc_analysis.geometry import optimize_hull, trim_budget
from npc_analysis.geometry.optimization import (
    STOP_BUDGET_EXHAUSTED,
    STOP_DEGENERATE,
    STOP_NO_BUDGET,
    STOP_RATIO_DECREASED,
)
from npc_analysis.simulation import generate_sphere_points

"""Unit tests for hull optimization (outlier trimming)."""


def sphere_with_outliers(rng, n=100, radius=1.2, outlier_distance=1.8):
    pts = generate_sphere_points(n, radius, rng=rng)
    outliers = outlier_distance * np.array([[1.0, 0, 0], [-1.0, 0, 0], [0, 0, 1.0]])
    return np.vstack([pts, outliers])


def test_trim_budget_is_floor_of_tenth():
    assert trim_budget(9) == 0
    assert trim_budget(10) == 1
    assert trim_budget(30) == 3
    assert trim_budget(131) == 13
    assert trim_budget(250) == 25


@pytest.mark.parametrize("n", [4, 12, 57, 131, 250])
def test_never_removes_more_than_budget_and_counts_add_up(n):
    rng = np.random.default_rng(n)
    pts = generate_sphere_points(n, 1.2, rng=rng) + rng.normal(scale=0.05, size=(n, 3))
    res = optimize_hull(pts)
    assert res.removed_count <= n // 10
    assert res.removed_count + len(res.points) == n
    assert len(res.removed_indices) == res.removed_count
    assert sorted(res.kept_indices.tolist() + res.removed_indices.tolist()) == list(range(n))


def test_survivors_keep_input_order(rng):
    pts = sphere_with_outliers(rng)
    res = optimize_hull(pts)
    assert np.all(np.diff(res.kept_indices) > 0)
    assert np.array_equal(res.points, pts[res.kept_indices])
    assert np.array_equal(res.removed_points, pts[res.removed_indices])


def test_far_outliers_are_removed_first(rng):
    pts = sphere_with_outliers(rng)
    res = optimize_hull(pts)
    outlier_idx = {100, 101, 102}
    assert outlier_idx <= set(res.removed_indices.tolist())
    assert set(res.removed_indices[:3].tolist()) == outlier_idx
    assert res.removed_count <= trim_budget(len(pts))


def test_points_on_sphere_exhaust_budget(rng):
    # all points are hull vertices, so the ratio never drops
    pts = generate_sphere_points(60, 1.2, rng=rng)
    res = optimize_hull(pts)
    assert res.removed_count == 6
    assert res.stop_reason == STOP_BUDGET_EXHAUSTED
    assert all(step.accepted for step in res.steps)


def test_stops_when_vertex_usage_ratio_drops(rng):
    shell = generate_sphere_points(40, 1.2, rng=rng)
    core = rng.uniform(-0.03, 0.03, size=(10, 3))
    res = optimize_hull(np.vstack([shell, core]))
    assert res.removed_count == 0
    assert res.stop_reason == STOP_RATIO_DECREASED
    step = res.steps[0]
    assert step.loop == 1
    assert not step.accepted
    assert np.isclose(step.current_ratio, 40 / 50)
    assert np.isclose(step.test_ratio, 39 / 49)


def test_small_samples_have_no_budget():
    pts = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0], [0, 0, 1], [5, 5, 5]], dtype=float)
    res = optimize_hull(pts)
    assert res.removed_count == 0
    assert res.stop_reason == STOP_NO_BUDGET
    assert res.steps == ()
    assert len(res.points) == 5


def test_degenerate_current_set_stops_without_error():
    xs, ys = np.meshgrid(np.linspace(-1, 1, 4), np.linspace(-1, 1, 3))
    pts = np.column_stack([xs.ravel(), ys.ravel(), np.zeros(12)])
    res = optimize_hull(pts)
    assert res.removed_count == 0
    assert res.stop_reason == STOP_DEGENERATE
    assert res.steps[0].current_ratio is None


def test_degenerate_test_set_stops_at_current_cutoff():
    xs, ys = np.meshgrid(np.linspace(-1, 1, 3), np.linspace(-1, 1, 3))
    plane = np.column_stack([xs.ravel(), ys.ravel(), np.zeros(9)])
    pts = np.vstack([plane, [[0.0, 0.0, 5.0]]])
    res = optimize_hull(pts)
    assert res.budget == 1
    assert res.removed_count == 0
    assert res.stop_reason == STOP_DEGENERATE
    assert res.steps[0].current_ratio is not None
    assert res.steps[0].test_ratio is None


def test_legacy_sphericity_only_changes_the_trace(rng):
    pts = sphere_with_outliers(rng)
    fixed = optimize_hull(pts)
    legacy = optimize_hull(pts, legacy_sphericity=True)
    assert fixed.removed_count == legacy.removed_count
    assert np.array_equal(fixed.kept_indices, legacy.kept_indices)
    for step in legacy.steps:
        assert step.test_sphericity == step.current_sphericity
    assert any(s.test_sphericity != s.current_sphericity for s in fixed.steps)


def test_zero_trim_fraction_removes_nothing(rng):
    pts = sphere_with_outliers(rng)
    res = optimize_hull(pts, max_trim_fraction=0.0)
    assert res.removed_count == 0
    assert len(res.points) == len(pts)


def test_invalid_trim_fraction():
    with pytest.raises(InvalidParameter):
        optimize_hull(np.zeros((20, 3)), max_trim_fraction=1.0)
    with pytest.raises(InvalidParameter):
        optimize_hull(np.zeros((20, 3)), max_trim_fraction=-0.1)


def test_input_is_not_modified(rng):
    pts = sphere_with_outliers(rng)
    before = pts.copy()
    optimize_hull(pts)
    assert np.array_equal(pts, before)


def test_each_candidate_hull_is_computed_once(rng, monkeypatch):
    from npc_analysis.geometry import optimization

    calls = []
    real_compute_hull = optimization.compute_hull

    def counting_compute_hull(points):
        calls.append(len(points))
        return real_compute_hull(points)

    monkeypatch.setattr(optimization, "compute_hull", counting_compute_hull)
    pts = generate_sphere_points(60, 1.2, rng=rng)
    res = optimize_hull(pts)

    assert res.removed_count == 6
    # sets of 60, 59, ..., 54 points, one hull each
    assert calls == list(range(60, 53, -1))


def test_step_trace_chains_test_into_current(rng):
    res = optimize_hull(generate_sphere_points(60, 1.2, rng=rng))
    for prev, step in zip(res.steps, res.steps[1:]):
        assert step.current_ratio == prev.test_ratio
