# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""Clustering module for density-based grouping of pore complexes."""

from .dbscan import (
    NOISE,
    ClusterLabeling,
    ClusterMetrics,
    cluster,
    clustered_fraction,
    cluster_metrics,
    eps_sweep
)

__all__ = [
    'NOISE',
    'ClusterLabeling',
    'ClusterMetrics',
    'cluster',
    'clustered_fraction',
    'cluster_metrics',
    'eps_sweep',
]
