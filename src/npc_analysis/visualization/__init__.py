# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""Visualization module for point clouds and group comparisons."""

from .plots import (
    plot_point_cloud,
    plot_group_metric,
    plot_eps_sweep
)

__all__ = [
    'plot_point_cloud',
    'plot_group_metric',
    'plot_eps_sweep',
]
