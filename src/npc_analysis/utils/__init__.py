# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""Utils module for helper functions and utilities."""

from .helpers import (
    FIGURE_WIDTH_IN,
    compute_figure_size,
    output_file,
    format_mean_std,
    generate_cluster_colors
)

__all__ = [
    'FIGURE_WIDTH_IN',
    'compute_figure_size',
    'output_file',
    'format_mean_std',
    'generate_cluster_colors',
]
