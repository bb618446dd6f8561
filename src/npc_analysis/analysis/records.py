# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""
Per-sample pipeline and batch processing.

Each nucleus goes through hull optimization, then shape statistics and
density clustering on the trimmed points, and is summarized as one
:class:`SampleRecord`. Samples are independent, so a batch runs them on a
thread pool; a failure in one sample degrades that record to missing
values instead of aborting the batch.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ..clustering import ClusterMetrics, cluster, cluster_metrics
from ..config import AnalysisConfig, RECORD_COLUMNS
from ..geometry import ShapeStats, compute_stats, optimize_hull

logger = logging.getLogger(__name__)

# (sample_id, group_label, points)
Sample = Tuple[str, str, np.ndarray]


@dataclass(frozen=True)
class SampleRecord:
    """
    Metrics of one nucleus or one simulated point set.

    :ivar points_removed: Points trimmed by hull optimization; None if the
        sample failed before trimming.
    :ivar error: Message of an unexpected failure, None otherwise.
    """

    sample_id: str
    group_label: str
    shape: ShapeStats
    clusters: Optional[ClusterMetrics]
    points_removed: Optional[int]
    error: Optional[str] = None

    @property
    def fraction_clustered(self) -> Optional[float]:
        return self.clusters.fraction_clustered if self.clusters else None

    @property
    def clustered_points(self) -> Optional[int]:
        return self.clusters.clustered_points if self.clusters else None

    def metric(self, name: str) -> Optional[float]:
        """Value of a tabular column, None when unavailable."""
        return self.as_row()[name]

    def as_row(self) -> Dict[str, Any]:
        """Flat row with the columns of :data:`~npc_analysis.config.RECORD_COLUMNS`."""
        c = self.clusters
        row = {
            'sample_id': self.sample_id,
            'group_label': self.group_label,
            'surface_area': self.shape.surface_area,
            'volume': self.shape.volume,
            'sphericity': self.shape.sphericity,
            'num_points': self.shape.point_count,
            'density': self.shape.density,
            'total': c.total_points if c else None,
            'clustered': c.clustered_points if c else None,
            'fraction_clustered': c.fraction_clustered if c else None,
            'n_clusters': c.n_clusters if c else None,
            'points_removed': self.points_removed,
            'error': self.error,
        }
        return {k: row[k] for k in RECORD_COLUMNS}


def analyze_sample(sample_id: str,
                   group_label: str,
                   points: np.ndarray,
                   config: Optional[AnalysisConfig] = None) -> SampleRecord:
    """
    Run hull optimization, shape statistics and clustering on one sample.

    :param sample_id: Identifier of the sample (e.g. file name).
    :type sample_id: str
    :param group_label: Group of the sample (e.g. "Random", "WT").
    :type group_label: str
    :param points: (N, 3) coordinates in microns.
    :type points: np.ndarray
    :param config: Analysis parameters; defaults when None.
    :type config: Optional[AnalysisConfig]
    :return: Metrics of the sample.
    :rtype: SampleRecord
    """
    config = (config or AnalysisConfig()).validate()

    trimmed = optimize_hull(points,
                            max_trim_fraction=config.max_trim_fraction,
                            legacy_sphericity=config.legacy_sphericity)
    shape = compute_stats(trimmed.points)
    labeling = cluster(trimmed.points, config.eps, config.min_points, config.border_policy)

    return SampleRecord(
        sample_id=str(sample_id),
        group_label=str(group_label),
        shape=shape,
        clusters=cluster_metrics(labeling),
        points_removed=trimmed.removed_count,
    )


def _failed_record(sample_id: str, group_label: str, points, exc: Exception) -> SampleRecord:
    try:
        n = len(points)
    except TypeError:
        n = 0
    return SampleRecord(
        sample_id=str(sample_id),
        group_label=str(group_label),
        shape=ShapeStats.unavailable(n),
        clusters=None,
        points_removed=None,
        error=f"{type(exc).__name__}: {exc}",
    )


def _analyze_isolated(sample: Sample, config: AnalysisConfig) -> SampleRecord:
    sample_id, group_label, points = sample
    try:
        return analyze_sample(sample_id, group_label, points, config)
    except Exception as exc:  # one broken sample must not abort the batch
        logger.error("Sample %s (%s) failed: %s", sample_id, group_label, exc)
        return _failed_record(sample_id, group_label, points, exc)


def analyze_batch(samples: Iterable[Sample],
                  config: Optional[AnalysisConfig] = None,
                  max_workers: Optional[int] = None) -> List[SampleRecord]:
    """
    Analyze many samples concurrently.

    :param samples: (sample_id, group_label, points) tuples.
    :type samples: Iterable[Sample]
    :param config: Analysis parameters shared by all samples.
    :type config: Optional[AnalysisConfig]
    :param max_workers: Thread pool size; 1 runs sequentially.
    :type max_workers: Optional[int]
    :return: One record per sample, in input order.
    :rtype: List[SampleRecord]
    :raises InvalidParameter: If the config is invalid (checked before any work).
    """
    config = (config or AnalysisConfig()).validate()
    samples = list(samples)

    if max_workers == 1 or len(samples) <= 1:
        records = [_analyze_isolated(s, config) for s in samples]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            records = list(pool.map(lambda s: _analyze_isolated(s, config), samples))

    n_failed = sum(1 for r in records if r.error is not None)
    logger.info("Analyzed %d samples (%d failed)", len(records), n_failed)
    return records


def records_to_rows(records: Sequence[SampleRecord]) -> List[Dict[str, Any]]:
    """
    Convert records to flat table rows.

    :param records: Sample records.
    :type records: Sequence[SampleRecord]
    :rtype: List[Dict[str, Any]]
    """
    return [r.as_row() for r in records]
