# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""
Helpers shared by the plotting functions and the analysis scripts.
"""

import math
import os
from typing import Optional, Tuple

import numpy as np

# Text width of the figures in inches
FIGURE_WIDTH_IN = 6.3


def compute_figure_size(width_fraction: float = 1.0,
                        aspect: float = 0.75) -> Tuple[float, float]:
    """
    Figure size from a fraction of the text width and a height/width ratio.

    :param width_fraction: Fraction of :data:`FIGURE_WIDTH_IN`.
    :type width_fraction: float
    :param aspect: Height divided by width.
    :type aspect: float
    :return: (width, height) in inches.
    :rtype: Tuple[float, float]
    """
    width = FIGURE_WIDTH_IN * width_fraction
    return width, width * aspect


def output_file(directory: str, filename: str) -> str:
    """Path of ``filename`` inside ``directory``, creating the directory."""
    os.makedirs(directory, exist_ok=True)
    return os.path.join(directory, filename)


def format_mean_std(mean: Optional[float], std: Optional[float], digits: int = 3) -> str:
    """
    Format a mean and standard deviation as ``"m ± s"``.

    Missing or NaN values are written as ``NA``.
    """
    def fmt(v):
        if v is None or (isinstance(v, float) and math.isnan(v)):
            return 'NA'
        return f"{v:.{digits}f}"

    if mean is None:
        return 'NA'
    return f"{fmt(mean)} ± {fmt(std)}"


def generate_cluster_colors(n: int, seed: Optional[int] = None) -> np.ndarray:
    """
    Generate n distinct colors for cluster labels, shuffled so that
    neighboring cluster ids do not get similar hues.

    :param n: Number of colors to generate.
    :type n: int
    :param seed: Random seed for reproducibility.
    :type seed: Optional[int]
    :return: (n, 4) array of RGBA colors.
    :rtype: np.ndarray
    """
    import matplotlib.pyplot as plt

    if n <= 0:
        return np.empty((0, 4))
    cmap = plt.get_cmap('gist_ncar', n + 1)
    colors = np.array([cmap(i / (n + 1)) for i in range(n)])
    rng = np.random.default_rng(seed)
    return colors[rng.permutation(n)]
