# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""
Shape statistics derived from the convex hull.

Sphericity is the surface area of the sphere with the hull's volume divided
by the hull's surface area, so it is 1.0 for a perfect sphere and smaller
for any other convex solid. Density is pore complexes per square micron of
hull surface.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..errors import DegenerateGeometry
from .hull import HullGeometry, compute_hull
from .spatial import as_point_array

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShapeStats:
    """
    Shape descriptors of one sample; None marks an unavailable value.
    """

    surface_area: Optional[float]
    volume: Optional[float]
    sphericity: Optional[float]
    density: Optional[float]
    point_count: int

    @property
    def available(self) -> bool:
        return self.surface_area is not None

    @classmethod
    def unavailable(cls, point_count: int) -> 'ShapeStats':
        return cls(surface_area=None, volume=None, sphericity=None,
                   density=None, point_count=int(point_count))


def sphericity(volume: float, surface_area: float) -> Optional[float]:
    """
    Compute sphericity π^(1/3)·(6V)^(2/3) / A.

    :param volume: Enclosed volume.
    :type volume: float
    :param surface_area: Surface area.
    :type surface_area: float
    :return: Sphericity, or None when the area is not positive.
    :rtype: Optional[float]
    """
    if surface_area is None or volume is None or surface_area <= 0:
        return None
    return float(np.pi ** (1.0 / 3.0) * (6.0 * max(volume, 0.0)) ** (2.0 / 3.0) / surface_area)


def compute_stats(points: np.ndarray, hull: Optional[HullGeometry] = None) -> ShapeStats:
    """
    Compute surface area, volume, sphericity and density of a point set.

    If no hull is given it is computed here. A hull that cannot be built
    yields unavailable fields rather than an exception, so one bad sample
    does not abort a batch.

    :param points: (N, 3) array of point coordinates.
    :type points: np.ndarray
    :param hull: Precomputed hull of ``points``.
    :type hull: Optional[HullGeometry]
    :return: Shape statistics record.
    :rtype: ShapeStats
    """
    points = as_point_array(points)
    n = len(points)

    if hull is None:
        try:
            hull = compute_hull(points)
        except DegenerateGeometry as exc:
            logger.warning("Shape statistics unavailable for %d points: %s", n, exc)
            return ShapeStats.unavailable(n)

    area = hull.surface_area
    density = n / area if area > 0 else None

    return ShapeStats(
        surface_area=area,
        volume=hull.volume,
        sphericity=sphericity(hull.volume, area),
        density=density,
        point_count=n,
    )
