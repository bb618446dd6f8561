# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""
Convex hull geometry of 3D point sets.

The hull approximates the nuclear envelope surface spanned by the pore
complexes. It is computed with Qhull through :class:`scipy.spatial.ConvexHull`;
Qhull failures are reported as :class:`~npc_analysis.errors.DegenerateGeometry`.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy.spatial import ConvexHull, QhullError

from ..errors import DegenerateGeometry
from .spatial import as_point_array

logger = logging.getLogger(__name__)

MIN_HULL_POINTS = 4


@dataclass(frozen=True)
class HullGeometry:
    """
    Read-only view of a convex hull over a point set.

    :ivar simplices: (M, 3) triangular facets as indices into the point set.
    :ivar vertices: Sorted unique indices of points lying on the hull.
    :ivar facet_areas: (M,) area of every facet.
    :ivar surface_area: Sum of the facet areas.
    :ivar volume: Enclosed volume.
    :ivar n_points: Size of the point set the hull was computed from.
    """

    simplices: np.ndarray
    vertices: np.ndarray
    facet_areas: np.ndarray
    surface_area: float
    volume: float
    n_points: int

    @property
    def n_vertices(self) -> int:
        return int(len(self.vertices))

    @property
    def vertex_usage_ratio(self) -> float:
        """Fraction of the points that are hull vertices."""
        return self.n_vertices / self.n_points


def _facet_areas(points: np.ndarray, simplices: np.ndarray) -> np.ndarray:
    T = points[simplices]  # (M, 3, 3) - M facets, 3 corners, xyz
    cross = np.cross(T[:, 1] - T[:, 0], T[:, 2] - T[:, 0])
    return 0.5 * np.linalg.norm(cross, axis=1)


def compute_hull(points: np.ndarray) -> HullGeometry:
    """
    Compute the convex hull of a 3D point set.

    :param points: (N, 3) array of point coordinates.
    :type points: np.ndarray
    :return: Hull facets, vertices, surface area and volume.
    :rtype: HullGeometry
    :raises DegenerateGeometry: If there are fewer than 4 points, non-finite
        coordinates, or the points are coplanar/collinear.
    """
    points = as_point_array(points)
    n = len(points)

    if n < MIN_HULL_POINTS:
        raise DegenerateGeometry(f"Need at least {MIN_HULL_POINTS} points for a hull, got {n}")
    if not np.all(np.isfinite(points)):
        raise DegenerateGeometry("Point coordinates contain NaN or inf")

    try:
        hull = ConvexHull(points)
    except (QhullError, ValueError) as exc:
        raise DegenerateGeometry(f"Qhull failed on {n} points: {exc}") from exc

    simplices = np.asarray(hull.simplices, dtype=int)
    facet_areas = _facet_areas(points, simplices)

    return HullGeometry(
        simplices=simplices,
        vertices=np.unique(hull.vertices),
        facet_areas=facet_areas,
        surface_area=float(facet_areas.sum()),
        volume=float(hull.volume),
        n_points=n,
    )


def try_compute_hull(points: np.ndarray) -> Optional[HullGeometry]:
    """
    Compute the hull, returning None instead of raising on degenerate input.

    :param points: (N, 3) array of point coordinates.
    :type points: np.ndarray
    :return: Hull geometry, or None if it could not be built.
    :rtype: Optional[HullGeometry]
    """
    try:
        return compute_hull(points)
    except DegenerateGeometry as exc:
        logger.debug("Hull unavailable: %s", exc)
        return None


def vertex_usage_ratio(points: np.ndarray) -> float:
    """
    Unique hull vertex count divided by point count.

    :raises DegenerateGeometry: If the hull cannot be built.
    """
    return compute_hull(points).vertex_usage_ratio
