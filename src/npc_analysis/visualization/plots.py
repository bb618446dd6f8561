# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""
Point cloud and group comparison plots.

This module renders a nucleus with its hull and clusters in 3D, per-group
box plots of a metric, and fraction-clustered curves of an eps sweep.
"""

import os
from typing import Dict, Optional, Sequence, Union

import numpy as np
import matplotlib.pyplot as plt

from ..analysis import SampleRecord, group_records, metric_values
from ..clustering import ClusterLabeling, ClusterMetrics, NOISE
from ..geometry import HullGeometry
from ..utils import compute_figure_size, generate_cluster_colors


def _save(fig, output_path: str, dpi: int) -> None:
    os.makedirs(os.path.dirname(output_path) if os.path.dirname(output_path) else '.', exist_ok=True)
    fig.tight_layout()
    fig.savefig(output_path, dpi=dpi)
    plt.close(fig)


def plot_point_cloud(
    points: np.ndarray,
    output_path: str,
    hull: Optional[HullGeometry] = None,
    labeling: Optional[ClusterLabeling] = None,
    removed_points: Optional[np.ndarray] = None,
    title: str = 'Nuclear pore complexes',
    dpi: int = 300
) -> None:
    """
    Plot a point set in 3D with optional hull and cluster coloring.

    :param points: (N, 3) array of point coordinates.
    :type points: np.ndarray
    :param output_path: Output filepath (PNG).
    :type output_path: str
    :param hull: Hull drawn as a translucent surface.
    :type hull: Optional[HullGeometry]
    :param labeling: Cluster labels of ``points``; noise drawn in grey.
    :type labeling: Optional[ClusterLabeling]
    :param removed_points: Points trimmed by hull optimization, drawn as crosses.
    :type removed_points: Optional[np.ndarray]
    :param title: Plot title.
    :type title: str
    :param dpi: Figure DPI.
    :type dpi: int
    """
    points = np.asarray(points, dtype=float)
    fig = plt.figure(figsize=compute_figure_size(0.6, aspect=1.0))
    ax = fig.add_subplot(projection='3d')

    if labeling is None:
        ax.scatter(points[:, 0], points[:, 1], points[:, 2], s=8, color='tab:blue')
    else:
        noise = labeling.labels == NOISE
        ax.scatter(points[noise, 0], points[noise, 1], points[noise, 2],
                   s=6, color='lightgray', label='noise')
        colors = generate_cluster_colors(labeling.n_clusters, seed=0)
        for color, cid in zip(colors, labeling.cluster_ids):
            m = labeling.labels == cid
            ax.scatter(points[m, 0], points[m, 1], points[m, 2], s=14, color=color)

    if hull is not None:
        ax.plot_trisurf(points[:, 0], points[:, 1], points[:, 2],
                        triangles=hull.simplices, color='tab:cyan', alpha=0.15,
                        edgecolor='none')

    if removed_points is not None and len(removed_points):
        r = np.asarray(removed_points, dtype=float)
        ax.scatter(r[:, 0], r[:, 1], r[:, 2], s=20, marker='x', color='red', label='removed')

    ax.set_title(title, weight='bold')
    ax.set_xlabel('x (µm)')
    ax.set_ylabel('y (µm)')
    ax.set_zlabel('z (µm)')
    _save(fig, output_path, dpi)


def plot_group_metric(
    records: Sequence[SampleRecord],
    metric: str,
    output_path: str,
    group_order: Optional[Sequence[str]] = None,
    ylabel: Optional[str] = None,
    dpi: int = 300
) -> None:
    """
    Box plot of one metric per group with the individual samples overlaid.

    :param records: Records of all groups.
    :type records: Sequence[SampleRecord]
    :param metric: Column to plot (e.g. ``"fraction_clustered"``).
    :type metric: str
    :param output_path: Output filepath (PNG).
    :type output_path: str
    :param group_order: Order of the groups on the x axis.
    :type group_order: Optional[Sequence[str]]
    :param ylabel: Axis label, default the metric name.
    :type ylabel: Optional[str]
    :param dpi: Figure DPI.
    :type dpi: int
    """
    groups = group_records(records)
    labels = list(group_order) if group_order else list(groups)
    data = [metric_values(groups.get(g, []), metric) for g in labels]

    fig, ax = plt.subplots(figsize=compute_figure_size(0.5, aspect=0.9))
    ax.boxplot(data, showfliers=False)
    ax.set_xticks(range(1, len(labels) + 1))
    ax.set_xticklabels(labels)

    rng = np.random.default_rng(0)
    for i, values in enumerate(data, start=1):
        jitter = rng.uniform(-0.12, 0.12, size=len(values))
        ax.scatter(np.full(len(values), i) + jitter, values, s=8, alpha=0.6, color='k')

    ax.set_ylabel(ylabel or metric.replace('_', ' '))
    ax.grid(True, axis='y')
    _save(fig, output_path, dpi)


def plot_eps_sweep(
    sweeps: Dict[str, Dict[float, Union[ClusterMetrics, float]]],
    output_path: str,
    dpi: int = 300
) -> None:
    """
    Fraction clustered against eps, one line per sample or group.

    :param sweeps: ``{name: {eps: ClusterMetrics or fraction clustered}}``.
    :type sweeps: Dict[str, Dict[float, Union[ClusterMetrics, float]]]
    :param output_path: Output filepath (PNG).
    :type output_path: str
    :param dpi: Figure DPI.
    :type dpi: int
    """
    fig, ax = plt.subplots(figsize=compute_figure_size(0.5, aspect=0.9))
    for name, sweep in sweeps.items():
        eps = sorted(sweep)
        fractions = [getattr(sweep[e], 'fraction_clustered', sweep[e]) for e in eps]
        ax.plot(eps, fractions, marker='o', label=name)

    ax.set_xlabel('eps (µm)')
    ax.set_ylabel('fraction clustered')
    ax.set_ylim(0, 1)
    ax.grid(True)
    if sweeps:
        ax.legend(fontsize=7)
    _save(fig, output_path, dpi)
