# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""
Comparative statistics across sample groups.

Groups (the simulated "Random" null model and the biological conditions)
are compared with rank-based tests: Kruskal–Wallis across all groups and
two-sided Mann–Whitney U tests for every pair. Missing per-sample values
(failed hulls) are skipped, never propagated.
"""

import logging
from dataclasses import dataclass, field
from itertools import combinations
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np
from scipy.stats import kruskal, mannwhitneyu

from ..errors import InvalidParameter
from .records import SampleRecord

logger = logging.getLogger(__name__)

SUMMARY_METRICS = ('fraction_clustered', 'points_removed', 'density', 'sphericity')
CORRECTIONS = ('bonferroni', 'holm', 'none')


@dataclass(frozen=True)
class MetricSummary:
    n: int
    mean: Optional[float]
    std: Optional[float]


@dataclass(frozen=True)
class ClusterPresence:
    """Samples with no cluster at all vs. samples with at least one."""

    n_samples: int
    without_clusters: int
    with_clusters: int

    @property
    def fraction_with_clusters(self) -> Optional[float]:
        counted = self.without_clusters + self.with_clusters
        return self.with_clusters / counted if counted else None


@dataclass(frozen=True)
class RankTestResult:
    metric: str
    statistic: float
    p_value: float
    groups: tuple


@dataclass(frozen=True)
class PairwiseResult:
    metric: str
    group_a: str
    group_b: str
    statistic: float
    p_value: float
    p_adjusted: float


@dataclass(frozen=True)
class ComparisonReport:
    summaries: Dict[str, Dict[str, MetricSummary]]
    presence: Dict[str, ClusterPresence]
    omnibus: RankTestResult
    pairwise: List[PairwiseResult] = field(default_factory=list)


def group_records(records: Iterable[SampleRecord]) -> Dict[str, List[SampleRecord]]:
    """
    Group records by label, preserving first-seen group order.

    :param records: Sample records.
    :type records: Iterable[SampleRecord]
    :rtype: Dict[str, List[SampleRecord]]
    """
    groups: Dict[str, List[SampleRecord]] = {}
    for r in records:
        groups.setdefault(r.group_label, []).append(r)
    return groups


def metric_values(records: Sequence[SampleRecord], metric: str) -> np.ndarray:
    """
    Non-missing values of one metric.

    :param records: Sample records.
    :type records: Sequence[SampleRecord]
    :param metric: Column name (see ``RECORD_COLUMNS``).
    :type metric: str
    :return: Float array without missing entries.
    :rtype: np.ndarray
    """
    values = [r.metric(metric) for r in records]
    return np.array([v for v in values if v is not None and np.isfinite(v)], dtype=float)


def summarize_metric(values: Sequence[float]) -> MetricSummary:
    """
    Mean and sample standard deviation (ddof=1) of the present values.

    The standard deviation is None for fewer than two values, the mean is
    None for none.
    """
    vals = np.asarray([v for v in values if v is not None], dtype=float)
    vals = vals[np.isfinite(vals)]
    n = len(vals)
    mean = float(np.mean(vals)) if n else None
    std = float(np.std(vals, ddof=1)) if n > 1 else None
    return MetricSummary(n=n, mean=mean, std=std)


def summarize_groups(groups: Dict[str, Sequence[SampleRecord]],
                     metrics: Sequence[str] = SUMMARY_METRICS) -> Dict[str, Dict[str, MetricSummary]]:
    """
    Per-group mean and standard deviation of the summary metrics.

    :param groups: Records keyed by group label.
    :type groups: Dict[str, Sequence[SampleRecord]]
    :param metrics: Metric columns to summarize.
    :type metrics: Sequence[str]
    :return: ``summaries[group][metric]``.
    :rtype: Dict[str, Dict[str, MetricSummary]]
    """
    return {
        label: {m: summarize_metric(metric_values(recs, m)) for m in metrics}
        for label, recs in groups.items()
    }


def nuclei_with_clusters(groups: Dict[str, Sequence[SampleRecord]]) -> Dict[str, ClusterPresence]:
    """
    Count samples with zero clustered points vs. at least one.

    Samples whose clustering failed are counted in ``n_samples`` only.

    :param groups: Records keyed by group label.
    :type groups: Dict[str, Sequence[SampleRecord]]
    :rtype: Dict[str, ClusterPresence]
    """
    presence = {}
    for label, recs in groups.items():
        clustered = [r.clustered_points for r in recs if r.clustered_points is not None]
        presence[label] = ClusterPresence(
            n_samples=len(recs),
            without_clusters=sum(1 for c in clustered if c == 0),
            with_clusters=sum(1 for c in clustered if c > 0),
        )
    return presence


def _group_arrays(groups: Dict[str, Sequence[SampleRecord]], metric: str) -> Dict[str, np.ndarray]:
    return {label: metric_values(recs, metric) for label, recs in groups.items()}


def kruskal_test(groups: Dict[str, Sequence[SampleRecord]],
                 metric: str = 'fraction_clustered') -> RankTestResult:
    """
    Kruskal–Wallis H-test of one metric across all groups.

    Returns NaN statistic and p-value when fewer than two groups have data
    or all values are identical.

    :param groups: Records keyed by group label.
    :type groups: Dict[str, Sequence[SampleRecord]]
    :param metric: Metric column to test.
    :type metric: str
    :rtype: RankTestResult
    """
    arrays = {k: v for k, v in _group_arrays(groups, metric).items() if len(v)}
    return kruskal_arrays(arrays, metric)


def kruskal_arrays(arrays: Dict[str, np.ndarray], metric: str = 'value') -> RankTestResult:
    """Kruskal–Wallis H-test on plain value arrays keyed by group."""
    labels = tuple(arrays)
    samples = [np.asarray(arrays[k], dtype=float) for k in labels]

    stat = p = np.nan
    if len(samples) >= 2 and all(len(s) for s in samples):
        pooled = np.concatenate(samples)
        if np.ptp(pooled) > 0:
            res = kruskal(*samples)
            stat, p = float(res.statistic), float(res.pvalue)

    logger.debug("Kruskal-Wallis on %s across %s: H=%.4g, p=%.4g", metric, labels, stat, p)
    return RankTestResult(metric=metric, statistic=stat, p_value=p, groups=labels)


def adjust_pvalues(p_values: Sequence[float], method: str = 'bonferroni') -> np.ndarray:
    """
    Multiple-comparison adjustment of p-values (NaN entries are left alone).

    :param p_values: Raw p-values.
    :type p_values: Sequence[float]
    :param method: ``"bonferroni"``, ``"holm"`` or ``"none"``.
    :type method: str
    :return: Adjusted p-values capped at 1.
    :rtype: np.ndarray
    :raises InvalidParameter: On an unknown method.
    """
    if method not in CORRECTIONS:
        raise InvalidParameter(f"Unknown correction '{method}'. Choose from {CORRECTIONS}")

    p = np.asarray(p_values, dtype=float)
    adjusted = p.copy()
    valid = np.flatnonzero(np.isfinite(p))
    m = len(valid)
    if method == 'none' or m == 0:
        return adjusted

    if method == 'bonferroni':
        adjusted[valid] = np.minimum(p[valid] * m, 1.0)
        return adjusted

    # Holm step-down: running maximum over the sorted, scaled p-values
    order = valid[np.argsort(p[valid], kind='stable')]
    running = 0.0
    for rank, idx in enumerate(order):
        running = max(running, (m - rank) * p[idx])
        adjusted[idx] = min(running, 1.0)
    return adjusted


def pairwise_mannwhitney(groups: Dict[str, Sequence[SampleRecord]],
                         metric: str = 'fraction_clustered',
                         correction: str = 'bonferroni') -> List[PairwiseResult]:
    """
    Two-sided, unpaired Mann–Whitney U tests for every pair of groups.

    :param groups: Records keyed by group label.
    :type groups: Dict[str, Sequence[SampleRecord]]
    :param metric: Metric column to test.
    :type metric: str
    :param correction: p-value adjustment across pairs.
    :type correction: str
    :rtype: List[PairwiseResult]
    """
    arrays = _group_arrays(groups, metric)
    pairs = list(combinations(arrays, 2))

    stats, raw = [], []
    for a, b in pairs:
        x, y = arrays[a], arrays[b]
        if len(x) and len(y):
            res = mannwhitneyu(x, y, alternative='two-sided')
            stats.append(float(res.statistic))
            raw.append(float(res.pvalue))
        else:
            stats.append(np.nan)
            raw.append(np.nan)

    adjusted = adjust_pvalues(raw, correction)
    return [
        PairwiseResult(metric=metric, group_a=a, group_b=b,
                       statistic=s, p_value=p, p_adjusted=float(pa))
        for (a, b), s, p, pa in zip(pairs, stats, raw, adjusted)
    ]


def compare_groups(records: Iterable[SampleRecord],
                   metric: str = 'fraction_clustered',
                   correction: str = 'bonferroni') -> ComparisonReport:
    """
    Full comparison: summaries, cluster presence and rank tests.

    :param records: Records of all groups.
    :type records: Iterable[SampleRecord]
    :param metric: Metric used by the rank tests.
    :type metric: str
    :param correction: p-value adjustment of the pairwise tests.
    :type correction: str
    :rtype: ComparisonReport
    """
    groups = group_records(records)
    report = ComparisonReport(
        summaries=summarize_groups(groups),
        presence=nuclei_with_clusters(groups),
        omnibus=kruskal_test(groups, metric),
        pairwise=pairwise_mannwhitney(groups, metric, correction),
    )
    logger.info("Compared %d groups on %s: Kruskal-Wallis p=%.4g",
                len(groups), metric, report.omnibus.p_value)
    return report
