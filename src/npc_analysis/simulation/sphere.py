# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""
Null model of complete spatial randomness on a sphere surface.

Random point sets stand in for nuclei with randomly placed pore complexes.
The optional minimum separation mimics the physical exclusion between
neighboring pores: after drawing, every point whose nearest neighbor is
closer than ``min_dist`` is discarded. The filter is applied once over the
full set, so both members of a close pair are removed and the retained
count can fall well below the requested count.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from ..clustering import cluster, clustered_fraction
from ..config import DEFAULT_BORDER_POLICY
from ..errors import InvalidParameter
from ..geometry.spatial import nearest_neighbor_distances

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationSummary:
    """
    Mean and standard deviation over repeated min-separation simulations.
    """

    n_runs: int
    requested_count: int
    retained_counts: np.ndarray
    fractions_clustered: np.ndarray

    @property
    def mean_retained(self) -> float:
        return float(np.mean(self.retained_counts))

    @property
    def std_retained(self) -> float:
        return float(np.std(self.retained_counts, ddof=1)) if self.n_runs > 1 else 0.0

    @property
    def mean_retention_ratio(self) -> float:
        return self.mean_retained / self.requested_count

    @property
    def mean_fraction_clustered(self) -> float:
        return float(np.mean(self.fractions_clustered))

    @property
    def std_fraction_clustered(self) -> float:
        return float(np.std(self.fractions_clustered, ddof=1)) if self.n_runs > 1 else 0.0


def _check_sphere_params(count: int, radius: float) -> None:
    if int(count) != count or count <= 0:
        raise InvalidParameter(f"count must be a positive integer, got {count}")
    if not radius > 0:
        raise InvalidParameter(f"radius must be positive, got {radius}")


def generate_sphere_points(count: int,
                           radius: float,
                           rng: Optional[np.random.Generator] = None,
                           center: Optional[Sequence[float]] = None) -> np.ndarray:
    """
    Draw points uniformly on the surface of a sphere.

    Isotropic Gaussian vectors are normalized to unit length and scaled by
    the radius, which gives a rotationally symmetric distribution.

    :param count: Number of points.
    :type count: int
    :param radius: Sphere radius (um).
    :type radius: float
    :param rng: NumPy random generator for reproducibility.
    :type rng: Optional[np.random.Generator]
    :param center: Optional sphere center, default the origin.
    :type center: Optional[Sequence[float]]
    :return: (count, 3) array of coordinates.
    :rtype: np.ndarray
    :raises InvalidParameter: On non-positive count or radius.
    """
    _check_sphere_params(count, radius)
    if rng is None:
        rng = np.random.default_rng()

    v = rng.standard_normal((int(count), 3))
    norms = np.linalg.norm(v, axis=1)
    # a zero vector has probability zero but would divide by zero
    while np.any(norms == 0):
        bad = norms == 0
        v[bad] = rng.standard_normal((int(bad.sum()), 3))
        norms = np.linalg.norm(v, axis=1)

    points = radius * v / norms[:, None]
    if center is not None:
        points = points + np.asarray(center, dtype=float)[None, :]
    return points


def generate_with_min_separation(count: int,
                                 radius: float,
                                 min_dist: float,
                                 rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """
    Draw sphere points and keep those whose nearest neighbor is >= min_dist away.

    :param count: Number of points drawn before filtering.
    :type count: int
    :param radius: Sphere radius (um).
    :type radius: float
    :param min_dist: Minimum nearest-neighbor distance of a retained point.
    :type min_dist: float
    :param rng: NumPy random generator for reproducibility.
    :type rng: Optional[np.random.Generator]
    :return: (M, 3) array with M <= count.
    :rtype: np.ndarray
    :raises InvalidParameter: On non-positive count/radius or negative min_dist.
    """
    if not min_dist >= 0:
        raise InvalidParameter(f"min_dist must be non-negative, got {min_dist}")

    points = generate_sphere_points(count, radius, rng=rng)
    keep = nearest_neighbor_distances(points) >= min_dist
    logger.debug("Min-separation filter kept %d/%d points (min_dist=%g)",
                 int(keep.sum()), count, min_dist)
    return points[keep]


def simulate_random_group(n_samples: int,
                          count: int,
                          radius: float,
                          min_dist: Optional[float] = None,
                          rng: Optional[np.random.Generator] = None) -> List[np.ndarray]:
    """
    Generate the point sets of a simulated "Random" group.

    :param n_samples: Number of simulated nuclei.
    :type n_samples: int
    :param count: Points drawn per nucleus.
    :type count: int
    :param radius: Sphere radius (um).
    :type radius: float
    :param min_dist: Optional minimum separation filter.
    :type min_dist: Optional[float]
    :param rng: NumPy random generator for reproducibility.
    :type rng: Optional[np.random.Generator]
    :return: List of (M, 3) arrays.
    :rtype: List[np.ndarray]
    """
    if int(n_samples) != n_samples or n_samples < 0:
        raise InvalidParameter(f"n_samples must be a non-negative integer, got {n_samples}")
    if rng is None:
        rng = np.random.default_rng()

    if min_dist is None:
        return [generate_sphere_points(count, radius, rng=rng) for _ in range(n_samples)]
    return [generate_with_min_separation(count, radius, min_dist, rng=rng)
            for _ in range(n_samples)]


def simulate_retention(n_runs: int,
                       count: int,
                       radius: float,
                       min_dist: float,
                       eps: float,
                       min_points: int,
                       border_policy: str = DEFAULT_BORDER_POLICY,
                       rng: Optional[np.random.Generator] = None) -> SimulationSummary:
    """
    Repeat the min-separation simulation and cluster every run.

    Gives the empirical retention of the separation filter and the
    fraction clustered expected under spatial randomness.

    :param n_runs: Number of repetitions.
    :type n_runs: int
    :param count: Points drawn per run.
    :type count: int
    :param radius: Sphere radius (um).
    :type radius: float
    :param min_dist: Minimum separation filter.
    :type min_dist: float
    :param eps: Clustering neighborhood radius.
    :type eps: float
    :param min_points: Minimum neighborhood size of a core point.
    :type min_points: int
    :param border_policy: ``"include_borders"`` or ``"core_only"``.
    :type border_policy: str
    :param rng: NumPy random generator for reproducibility.
    :type rng: Optional[np.random.Generator]
    :return: Retained counts and fractions clustered of every run.
    :rtype: SimulationSummary
    """
    if int(n_runs) != n_runs or n_runs <= 0:
        raise InvalidParameter(f"n_runs must be a positive integer, got {n_runs}")

    sets = simulate_random_group(n_runs, count, radius, min_dist=min_dist, rng=rng)
    retained = np.array([len(s) for s in sets], dtype=int)
    fractions = np.array([
        clustered_fraction(cluster(s, eps, min_points, border_policy)) for s in sets
    ], dtype=float)

    summary = SimulationSummary(
        n_runs=int(n_runs),
        requested_count=int(count),
        retained_counts=retained,
        fractions_clustered=fractions,
    )
    logger.info("Simulated %d runs: retained %.1f ± %.1f of %d, fraction clustered %.3f ± %.3f",
                n_runs, summary.mean_retained, summary.std_retained, count,
                summary.mean_fraction_clustered, summary.std_fraction_clustered)
    return summary
