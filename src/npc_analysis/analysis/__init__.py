# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""Analysis module: per-sample pipeline and group comparison."""

from .records import (
    Sample,
    SampleRecord,
    analyze_sample,
    analyze_batch,
    records_to_rows
)

from .comparison import (
    SUMMARY_METRICS,
    MetricSummary,
    ClusterPresence,
    RankTestResult,
    PairwiseResult,
    ComparisonReport,
    group_records,
    metric_values,
    summarize_metric,
    summarize_groups,
    nuclei_with_clusters,
    kruskal_test,
    kruskal_arrays,
    adjust_pvalues,
    pairwise_mannwhitney,
    compare_groups
)

__all__ = [
    # Records
    'Sample',
    'SampleRecord',
    'analyze_sample',
    'analyze_batch',
    'records_to_rows',
    # Comparison
    'SUMMARY_METRICS',
    'MetricSummary',
    'ClusterPresence',
    'RankTestResult',
    'PairwiseResult',
    'ComparisonReport',
    'group_records',
    'metric_values',
    'summarize_metric',
    'summarize_groups',
    'nuclei_with_clusters',
    'kruskal_test',
    'kruskal_arrays',
    'adjust_pvalues',
    'pairwise_mannwhitney',
    'compare_groups',
]
