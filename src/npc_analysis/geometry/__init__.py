# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""Geometry module: convex hulls, shape statistics and hull optimization."""

from .spatial import (
    as_point_array,
    compute_centroid,
    distances_from_centroid,
    sort_by_centroid_distance,
    pairwise_distances,
    nearest_neighbor_distances,
    scale_to_microns
)

from .hull import (
    HullGeometry,
    compute_hull,
    try_compute_hull,
    vertex_usage_ratio
)

from .shape import (
    ShapeStats,
    sphericity,
    compute_stats
)

from .optimization import (
    OptimizationStep,
    HullOptimizationResult,
    trim_budget,
    optimize_hull
)

__all__ = [
    # Spatial
    'as_point_array',
    'compute_centroid',
    'distances_from_centroid',
    'sort_by_centroid_distance',
    'pairwise_distances',
    'nearest_neighbor_distances',
    'scale_to_microns',
    # Hull
    'HullGeometry',
    'compute_hull',
    'try_compute_hull',
    'vertex_usage_ratio',
    # Shape
    'ShapeStats',
    'sphericity',
    'compute_stats',
    # Optimization
    'OptimizationStep',
    'HullOptimizationResult',
    'trim_budget',
    'optimize_hull',
]
