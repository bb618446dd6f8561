# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

import numpy as np
import pytest

from npc_analysis.errors import DegenerateGeometry, NPCAnalysisError
from npc_analysis.geometry import (
    compute_hull,
    try_compute_hull,
    vertex_usage_ratio,
    nearest_neighbor_distances,
    sort_by_centroid_distance,
    scale_to_microns,
)
from npc_analysis.errors import InvalidParameter
from npc_analysis.simulation import generate_sphere_points

"""Unit tests for the convex hull kernel and spatial helpers."""


def unit_cube(with_center=False):
    corners = np.array([[x, y, z] for x in (0.0, 1.0) for y in (0.0, 1.0) for z in (0.0, 1.0)])
    if with_center:
        corners = np.vstack([corners, [0.5, 0.5, 0.5]])
    return corners


def test_cube_area_volume_and_vertices():
    pts = unit_cube(with_center=True)
    hull = compute_hull(pts)
    assert np.isclose(hull.surface_area, 6.0)
    assert np.isclose(hull.volume, 1.0)
    assert hull.n_vertices == 8
    assert 8 not in hull.vertices.tolist()
    assert np.isclose(hull.vertex_usage_ratio, 8 / 9)


def test_tetrahedron_area_volume():
    pts = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0], [0, 0, 1]], dtype=float)
    hull = compute_hull(pts)
    assert np.isclose(hull.volume, 1.0 / 6.0)
    assert np.isclose(hull.surface_area, 1.5 + np.sqrt(3) / 2)
    assert len(hull.simplices) == 4


def test_facet_indices_in_range_and_measures_non_negative(rng):
    pts = generate_sphere_points(200, 1.2, rng=rng)
    hull = compute_hull(pts)
    assert hull.simplices.shape[1] == 3
    assert hull.simplices.min() >= 0
    assert hull.simplices.max() < len(pts)
    assert hull.surface_area >= 0
    assert hull.volume >= 0
    assert np.isclose(hull.facet_areas.sum(), hull.surface_area)
    # every point on a sphere is an extreme point
    assert hull.n_vertices == len(pts)


def test_too_few_points_raise_degenerate():
    with pytest.raises(DegenerateGeometry):
        compute_hull(np.zeros((3, 3)))


def test_coplanar_points_raise_degenerate():
    xs, ys = np.meshgrid(np.linspace(0, 1, 4), np.linspace(0, 1, 4))
    pts = np.column_stack([xs.ravel(), ys.ravel(), np.zeros(16)])
    with pytest.raises(DegenerateGeometry):
        compute_hull(pts)


def test_collinear_points_raise_degenerate():
    t = np.linspace(0, 1, 10)
    pts = np.column_stack([t, 2 * t, 3 * t])
    with pytest.raises(DegenerateGeometry):
        compute_hull(pts)


def test_nan_coordinates_raise_degenerate():
    pts = unit_cube()
    pts[0, 0] = np.nan
    with pytest.raises(DegenerateGeometry):
        compute_hull(pts)


def test_degenerate_geometry_is_package_error():
    assert issubclass(DegenerateGeometry, NPCAnalysisError)


def test_try_compute_hull_returns_none_on_failure():
    assert try_compute_hull(np.zeros((2, 3))) is None
    assert try_compute_hull(unit_cube()) is not None


def test_vertex_usage_ratio_helper():
    assert np.isclose(vertex_usage_ratio(unit_cube(with_center=True)), 8 / 9)


def test_wrong_shape_rejected():
    with pytest.raises(InvalidParameter):
        compute_hull(np.zeros((10, 2)))


def test_input_not_modified():
    pts = unit_cube(with_center=True)
    before = pts.copy()
    compute_hull(pts)
    sort_by_centroid_distance(pts)
    assert np.array_equal(pts, before)


def test_sort_by_centroid_distance_farthest_first():
    pts = np.array([[0.1, 0, 0], [5.0, 0, 0], [-1.0, 0, 0], [0, 0, 0]])
    order = sort_by_centroid_distance(pts)
    # centroid x = 1.025
    assert order[0] == 1
    assert order[1] == 2


def test_nearest_neighbor_distances_exclude_self():
    pts = np.array([[0, 0, 0], [1, 0, 0], [3, 0, 0]], dtype=float)
    assert np.allclose(nearest_neighbor_distances(pts), [1.0, 1.0, 2.0])
    assert np.isinf(nearest_neighbor_distances(pts[:1]))[0]


def test_scale_to_microns_per_axis():
    pts = np.array([[10, 10, 10], [1, 2, 3]], dtype=float)
    out = scale_to_microns(pts, (0.1, 0.1, 0.5))
    assert np.allclose(out, [[1.0, 1.0, 5.0], [0.1, 0.2, 1.5]])
    with pytest.raises(InvalidParameter):
        scale_to_microns(pts, (0.1, 0.0, 0.5))
