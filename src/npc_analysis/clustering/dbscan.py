# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""
Density-based clustering (DBSCAN / DBSCAN*) of pore complex positions.

A point is a core point when at least ``min_points`` points, itself
included, lie within distance ``eps``. Core points within ``eps`` of each
other share a cluster. Non-core points within ``eps`` of a core point are
border points: they join a cluster under ``"include_borders"`` and stay
noise under ``"core_only"`` (DBSCAN*). Noise is labeled 0, clusters 1, 2, ...

Labels come from scikit-learn's DBSCAN, whose traversal is deterministic:
clusters are seeded from the lowest unlabeled core index and fully
expanded before the next seed is taken. A border point reachable from two
clusters therefore belongs to the cluster whose seed has the lower index.
"""

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable

import numpy as np
from sklearn.cluster import DBSCAN

from ..config import DEFAULT_BORDER_POLICY, validate_cluster_params
from ..geometry.spatial import as_point_array

logger = logging.getLogger(__name__)

NOISE = 0


@dataclass(frozen=True)
class ClusterLabeling:
    """
    Cluster id per point of the clustered set.

    :ivar labels: (N,) int array, 0 = noise, >= 1 = cluster id.
    :ivar core_mask: (N,) bool array marking core points.
    """

    labels: np.ndarray
    core_mask: np.ndarray
    eps: float
    min_points: int
    border_policy: str

    @property
    def total_points(self) -> int:
        return int(len(self.labels))

    @property
    def cluster_ids(self) -> np.ndarray:
        ids = np.unique(self.labels)
        return ids[ids > NOISE]

    @property
    def n_clusters(self) -> int:
        return int(len(self.cluster_ids))

    def cluster_sizes(self) -> Dict[int, int]:
        return {int(c): int(np.sum(self.labels == c)) for c in self.cluster_ids}

    def partition(self) -> FrozenSet[FrozenSet[int]]:
        """Cluster memberships as index sets, independent of cluster numbering."""
        return frozenset(
            frozenset(np.flatnonzero(self.labels == c).tolist())
            for c in self.cluster_ids
        )


@dataclass(frozen=True)
class ClusterMetrics:
    total_points: int
    clustered_points: int
    fraction_clustered: float
    n_clusters: int


def cluster(points: np.ndarray,
            eps: float,
            min_points: int,
            border_policy: str = DEFAULT_BORDER_POLICY) -> ClusterLabeling:
    """
    Label points by density-based clustering.

    :param points: (N, 3) array of point coordinates.
    :type points: np.ndarray
    :param eps: Neighborhood radius (inclusive).
    :type eps: float
    :param min_points: Minimum neighborhood size, self included, of a core point.
    :type min_points: int
    :param border_policy: ``"include_borders"`` or ``"core_only"``.
    :type border_policy: str
    :return: Labeling over exactly the input index range.
    :rtype: ClusterLabeling
    :raises InvalidParameter: On negative eps, non-positive min_points or an
        unknown border policy.
    """
    validate_cluster_params(eps, min_points, border_policy)
    points = as_point_array(points)
    n = len(points)

    labels = np.zeros(n, dtype=int)
    core = np.zeros(n, dtype=bool)

    # Fewer points than a single neighborhood needs: everything is noise
    if n < min_points:
        return ClusterLabeling(labels, core, float(eps), int(min_points), border_policy)

    # DBSCAN requires eps > 0; the smallest positive radius links exact duplicates only
    radius = max(float(eps), np.finfo(float).tiny)
    db = DBSCAN(eps=radius, min_samples=int(min_points)).fit(points)

    labels = db.labels_.astype(int) + 1
    core[db.core_sample_indices_] = True
    if border_policy == "core_only":
        labels[~core] = NOISE

    n_clusters = len(np.unique(labels[labels > NOISE]))
    logger.debug("Clustered %d points: %d clusters, %d core points (eps=%g, min_points=%d, %s)",
                 n, n_clusters, int(core.sum()), eps, min_points, border_policy)

    return ClusterLabeling(labels, core, float(eps), int(min_points), border_policy)


def clustered_fraction(labeling: ClusterLabeling) -> float:
    """
    Fraction of points assigned to any cluster.

    :param labeling: Result of :func:`cluster`.
    :type labeling: ClusterLabeling
    :return: count(label > 0) / total; 0.0 for an empty set.
    :rtype: float
    """
    total = labeling.total_points
    if total == 0:
        return 0.0
    return float(np.sum(labeling.labels > NOISE)) / total


def cluster_metrics(labeling: ClusterLabeling) -> ClusterMetrics:
    """
    Summarize a labeling into total, clustered and fraction clustered.

    :param labeling: Result of :func:`cluster`.
    :type labeling: ClusterLabeling
    :rtype: ClusterMetrics
    """
    return ClusterMetrics(
        total_points=labeling.total_points,
        clustered_points=int(np.sum(labeling.labels > NOISE)),
        fraction_clustered=clustered_fraction(labeling),
        n_clusters=labeling.n_clusters,
    )


def eps_sweep(points: np.ndarray,
              eps_values: Iterable[float],
              min_points: int,
              border_policy: str = DEFAULT_BORDER_POLICY) -> Dict[float, ClusterMetrics]:
    """
    Cluster the same point set over several neighborhood radii.

    :param points: (N, 3) array of point coordinates.
    :type points: np.ndarray
    :param eps_values: Radii to evaluate.
    :type eps_values: Iterable[float]
    :param min_points: Minimum neighborhood size of a core point.
    :type min_points: int
    :param border_policy: ``"include_borders"`` or ``"core_only"``.
    :type border_policy: str
    :return: Metrics keyed by eps, in the order given.
    :rtype: Dict[float, ClusterMetrics]
    """
    return {
        float(eps): cluster_metrics(cluster(points, eps, min_points, border_policy))
        for eps in eps_values
    }
