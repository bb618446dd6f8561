# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

import numpy as np

from npc_analysis.geometry import compute_hull, compute_stats, sphericity
from npc_analysis.simulation import generate_sphere_points

"""Unit tests for surface area, volume, sphericity and density."""


def test_sphericity_of_cube():
    expected = np.pi ** (1 / 3) * 6 ** (2 / 3) / 6
    assert np.isclose(sphericity(1.0, 6.0), expected)
    assert 0.80 < expected < 0.81


def test_sphericity_of_exact_sphere_is_one():
    r = 1.3
    assert np.isclose(sphericity(4 / 3 * np.pi * r ** 3, 4 * np.pi * r ** 2), 1.0)


def test_sphericity_unavailable_for_zero_area():
    assert sphericity(1.0, 0.0) is None


def test_dense_sphere_sampling_approaches_unit_sphericity(rng):
    pts = generate_sphere_points(1000, 1.2, rng=rng)
    stats = compute_stats(pts)
    assert stats.available
    assert abs(stats.sphericity - 1.0) < 0.05
    assert stats.sphericity <= 1.0


def test_density_is_points_per_area(rng):
    pts = generate_sphere_points(131, 1.2, rng=rng)
    hull = compute_hull(pts)
    stats = compute_stats(pts, hull)
    assert stats.point_count == 131
    assert np.isclose(stats.density, 131 / hull.surface_area)
    assert np.isclose(stats.surface_area, hull.surface_area)
    assert np.isclose(stats.volume, hull.volume)


def test_degenerate_points_give_missing_values_not_errors():
    pts = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0], [1, 1, 0], [0.5, 0.5, 0]], dtype=float)
    stats = compute_stats(pts)
    assert not stats.available
    assert stats.surface_area is None
    assert stats.volume is None
    assert stats.sphericity is None
    assert stats.density is None
    assert stats.point_count == 5


def test_empty_point_set_is_unavailable():
    stats = compute_stats(np.empty((0, 3)))
    assert not stats.available
    assert stats.point_count == 0
