# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""
Hull optimization: trimming of outlying points before shape statistics.

Segmentation noise and background spots tend to sit far from the nucleus
centre and inflate the convex hull. Points are considered for removal from
the farthest to the nearest (distance to the centroid). Removing a point is
accepted as long as the fraction of points that are hull vertices does not
drop; the first step that lowers it ends the trimming. At most
``floor(max_trim_fraction * N)`` points are ever removed.

The procedure is a small state machine over an immutable sorted order:

    state      = cursor into the farthest-first order (= points removed)
    transition = compare the set starting at the cursor with the set
                 starting one point later
    terminal   = ratio decreased, hull failed, or budget exhausted
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..config import MAX_TRIM_FRACTION
from ..errors import DegenerateGeometry, InvalidParameter
from .hull import compute_hull
from .shape import sphericity
from .spatial import as_point_array, sort_by_centroid_distance

logger = logging.getLogger(__name__)

STOP_NO_BUDGET = "no_budget"
STOP_RATIO_DECREASED = "ratio_decreased"
STOP_DEGENERATE = "degenerate_hull"
STOP_BUDGET_EXHAUSTED = "budget_exhausted"


@dataclass(frozen=True)
class OptimizationStep:
    """
    Trace of one evaluated removal step.

    ``loop`` is 1-based: step ``loop`` compares the set without the
    ``loop - 1`` farthest points (current) against the set without the
    ``loop`` farthest points (test).
    """

    loop: int
    current_ratio: Optional[float]
    test_ratio: Optional[float]
    current_area: Optional[float]
    current_volume: Optional[float]
    current_sphericity: Optional[float]
    test_sphericity: Optional[float]
    accepted: bool


@dataclass(frozen=True)
class HullOptimizationResult:
    """
    Outcome of :func:`optimize_hull`.

    :ivar points: Surviving points, in their original relative order.
    :ivar kept_indices: Ascending input indices of the survivors.
    :ivar removed_indices: Input indices of removed points, farthest first.
    :ivar removed_points: Coordinates of the removed points, farthest first.
    :ivar removed_count: Number of removed points (the cutoff).
    :ivar budget: Maximum number of removable points.
    :ivar steps: Evaluated steps in order.
    :ivar stop_reason: Why trimming ended.
    """

    points: np.ndarray
    kept_indices: np.ndarray
    removed_indices: np.ndarray
    removed_points: np.ndarray
    removed_count: int
    budget: int
    steps: Tuple[OptimizationStep, ...]
    stop_reason: str

    @property
    def n_points(self) -> int:
        return int(len(self.points))


def trim_budget(n_points: int, max_trim_fraction: float = MAX_TRIM_FRACTION) -> int:
    """
    Maximum number of points hull optimization may remove.

    :param n_points: Size of the sample.
    :type n_points: int
    :param max_trim_fraction: Fraction of the sample that may be removed.
    :type max_trim_fraction: float
    :return: ``floor(max_trim_fraction * n_points)``.
    :rtype: int
    """
    # small epsilon guards against 0.1 * 30 = 3.0000000000000004 style rounding
    return int(math.floor(max_trim_fraction * n_points + 1e-9))


def _evaluate(points: np.ndarray):
    """Return (ratio, area, volume) of a candidate set, or None on hull failure."""
    try:
        hull = compute_hull(points)
    except DegenerateGeometry as exc:
        logger.debug("Candidate of %d points has no hull: %s", len(points), exc)
        return None
    return hull.vertex_usage_ratio, hull.surface_area, hull.volume


def optimize_hull(points: np.ndarray,
                  max_trim_fraction: float = MAX_TRIM_FRACTION,
                  legacy_sphericity: bool = False) -> HullOptimizationResult:
    """
    Remove the most outlying points while the hull vertex-usage ratio holds.

    :param points: (N, 3) array of point coordinates.
    :type points: np.ndarray
    :param max_trim_fraction: Upper bound on the removed fraction (default 0.1).
    :type max_trim_fraction: float
    :param legacy_sphericity: If True, the recorded test sphericity is computed
        from the current set's volume and area, as in historical results.
        It never affects which points are removed.
    :type legacy_sphericity: bool
    :return: Trimmed points, removal count and a per-step trace.
    :rtype: HullOptimizationResult
    :raises InvalidParameter: If ``max_trim_fraction`` is outside [0, 1).
    """
    if not 0.0 <= max_trim_fraction < 1.0:
        raise InvalidParameter(f"max_trim_fraction must be in [0, 1), got {max_trim_fraction}")

    points = as_point_array(points)
    n = len(points)
    budget = trim_budget(n, max_trim_fraction)
    order = sort_by_centroid_distance(points) if n else np.empty(0, dtype=int)

    steps = []
    cutoff = 0
    stop_reason = STOP_NO_BUDGET if budget == 0 else STOP_BUDGET_EXHAUSTED

    # the test set of an accepted step is the current set of the next one
    carried = None
    for loop in range(1, budget + 1):
        cur = carried if carried is not None else _evaluate(points[order[loop - 1:]])
        tst = _evaluate(points[order[loop:]])

        if cur is None or tst is None:
            steps.append(OptimizationStep(
                loop=loop,
                current_ratio=cur[0] if cur else None,
                test_ratio=tst[0] if tst else None,
                current_area=cur[1] if cur else None,
                current_volume=cur[2] if cur else None,
                current_sphericity=sphericity(cur[2], cur[1]) if cur else None,
                test_sphericity=None,
                accepted=False,
            ))
            cutoff = loop - 1
            stop_reason = STOP_DEGENERATE
            break

        cur_ratio, cur_area, cur_volume = cur
        test_ratio, test_area, test_volume = tst
        cur_sph = sphericity(cur_volume, cur_area)
        test_sph = cur_sph if legacy_sphericity else sphericity(test_volume, test_area)
        accepted = not test_ratio < cur_ratio

        steps.append(OptimizationStep(
            loop=loop,
            current_ratio=cur_ratio,
            test_ratio=test_ratio,
            current_area=cur_area,
            current_volume=cur_volume,
            current_sphericity=cur_sph,
            test_sphericity=test_sph,
            accepted=accepted,
        ))

        if not accepted:
            cutoff = loop - 1
            stop_reason = STOP_RATIO_DECREASED
            break
        cutoff = loop
        carried = tst

    removed = order[:cutoff]
    kept = np.sort(order[cutoff:])

    logger.debug("Hull optimization removed %d/%d points (budget %d, %s)",
                 cutoff, n, budget, stop_reason)

    return HullOptimizationResult(
        points=points[kept],
        kept_indices=kept,
        removed_indices=removed,
        removed_points=points[removed],
        removed_count=int(cutoff),
        budget=budget,
        steps=tuple(steps),
        stop_reason=stop_reason,
    )
