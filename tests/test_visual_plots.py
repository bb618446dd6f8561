# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""Plot smoke tests and interactive visual checks.

The interactive tests are marked with @pytest.mark.interactive and are
skipped unless selected. Each shows a deterministic plot and prompts the
user to confirm that it looks correct. Run them with: pytest -m interactive
"""

import numpy as np
import matplotlib.pyplot as plt
import pytest

from npc_analysis.analysis import analyze_batch
from npc_analysis.clustering import cluster, eps_sweep
from npc_analysis.geometry import compute_hull, optimize_hull
from npc_analysis.simulation import generate_sphere_points
from npc_analysis.utils import (
    FIGURE_WIDTH_IN,
    compute_figure_size,
    format_mean_std,
    generate_cluster_colors,
    output_file,
)
from npc_analysis.visualization import plot_eps_sweep, plot_group_metric, plot_point_cloud


def clustered_nucleus(seed=3):
    rng = np.random.default_rng(seed)
    background = generate_sphere_points(110, 1.2, rng=rng)
    center = 1.2 * np.array([0.0, 0.6, 0.8])
    blob = center + rng.normal(scale=0.03, size=(12, 3))
    far = np.array([[2.2, 0.0, 0.0]])
    return np.vstack([background, blob, far])


def test_point_cloud_plot_is_written(tmp_path):
    pts = clustered_nucleus()
    trimmed = optimize_hull(pts)
    hull = compute_hull(trimmed.points)
    lab = cluster(trimmed.points, eps=0.2, min_points=3)
    out = tmp_path / "figs" / "nucleus.png"
    plot_point_cloud(trimmed.points, str(out), hull=hull, labeling=lab,
                     removed_points=trimmed.removed_points, dpi=50)
    assert out.exists()
    assert out.stat().st_size > 0


def test_group_metric_plot_is_written(tmp_path):
    rng = np.random.default_rng(0)
    samples = [(f"r{i}", "Random", generate_sphere_points(80, 1.2, rng=rng)) for i in range(4)]
    samples += [(f"c{i}", "ConditionA", clustered_nucleus(i)) for i in range(4)]
    records = analyze_batch(samples, max_workers=1)
    out = tmp_path / "fraction.png"
    plot_group_metric(records, "fraction_clustered", str(out),
                      group_order=["Random", "ConditionA"], dpi=50)
    assert out.exists()


def test_eps_sweep_plot_accepts_metrics_and_fractions(tmp_path):
    sweep = eps_sweep(clustered_nucleus(), [0.1, 0.2, 0.3], min_points=3)
    out = tmp_path / "sweep.png"
    plot_eps_sweep({"nucleus": sweep, "random": {0.1: 0.0, 0.2: 0.02, 0.3: 0.1}},
                   str(out), dpi=50)
    assert out.exists()


def test_cluster_colors_and_figure_size():
    colors = generate_cluster_colors(5, seed=1)
    assert colors.shape == (5, 4)
    assert len({tuple(c) for c in colors}) == 5
    assert np.array_equal(colors, generate_cluster_colors(5, seed=1))
    assert generate_cluster_colors(0).shape == (0, 4)

    assert compute_figure_size(0.5, aspect=0.5) == pytest.approx(
        (FIGURE_WIDTH_IN / 2, FIGURE_WIDTH_IN / 4))


def test_output_file_creates_directory(tmp_path):
    path = output_file(str(tmp_path / "results" / "run1"), "records.csv")
    assert path.endswith("records.csv")
    assert (tmp_path / "results" / "run1").is_dir()


def test_format_mean_std_marks_missing_values():
    assert format_mean_std(0.12345, 0.0456) == "0.123 ± 0.046"
    assert format_mean_std(80.04, None, digits=1) == "80.0 ± NA"
    assert format_mean_std(None, None) == "NA"
    assert format_mean_std(0.5, float("nan")) == "0.500 ± NA"


@pytest.mark.interactive
def test_interactive_cluster_coloring():
    pts = clustered_nucleus()
    lab = cluster(pts, eps=0.2, min_points=3)

    fig = plt.figure()
    ax = fig.add_subplot(projection="3d")
    colors = np.where(lab.labels > 0, "red", "lightgray")
    ax.scatter(pts[:, 0], pts[:, 1], pts[:, 2], c=colors, s=10)
    ax.set_title("Interactive check: sub-cluster near +y+z in red")
    plt.show(block=True)

    answer = input("Is the tight sub-cluster near (0, 0.7, 1.0) shown in red? [y/N]: ").strip().lower()
    assert answer == "y"


@pytest.mark.interactive
def test_interactive_hull_trimming():
    pts = clustered_nucleus()
    trimmed = optimize_hull(pts)

    fig = plt.figure()
    ax = fig.add_subplot(projection="3d")
    kept = trimmed.points
    ax.scatter(kept[:, 0], kept[:, 1], kept[:, 2], s=8, color="tab:blue")
    r = trimmed.removed_points
    ax.scatter(r[:, 0], r[:, 1], r[:, 2], s=30, marker="x", color="red")
    ax.set_title("Interactive check: far spot at x=2.2 removed (red cross)")
    plt.show(block=True)

    answer = input("Is the far spot at x=2.2 marked as removed? [y/N]: ").strip().lower()
    assert answer == "y"
