# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""
Default parameters of the NPC clustering analysis.

Coordinates are expected in microns. The defaults reproduce the values
used for the nuclear pore complex datasets (eps = 0.2 um, 3 points per
core neighborhood, at most 10% of a nucleus trimmed by hull optimization).
"""

from dataclasses import dataclass
from typing import Tuple

from .errors import InvalidParameter

# Random seed for reproducible simulations
RANDOM_SEED = 42

# Density clustering
DEFAULT_EPS = 0.2
DEFAULT_MIN_POINTS = 3
BORDER_POLICIES = ("include_borders", "core_only")
DEFAULT_BORDER_POLICY = "include_borders"
DEFAULT_EPS_SWEEP = (0.15, 0.2, 0.25, 0.3)

# Hull optimization: never trim more than this fraction of a sample
MAX_TRIM_FRACTION = 0.1

# Null model (typical nucleus radius and NPC exclusion distance, in um)
DEFAULT_SPHERE_RADIUS = 1.2
DEFAULT_POINT_COUNT = 150
DEFAULT_MIN_SEPARATION = 0.16

# Pixel -> micron scale factors (x, y, z) of the acquisition
DEFAULT_VOXEL_SIZE = (0.0645, 0.0645, 0.2)

# Group labels used in the comparative analysis
RANDOM_GROUP = "Random"

# Columns of the per-sample table
RECORD_COLUMNS = (
    'sample_id',
    'group_label',
    'surface_area',
    'volume',
    'sphericity',
    'num_points',
    'density',
    'total',
    'clustered',
    'fraction_clustered',
    'n_clusters',
    'points_removed',
    'error',
)


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Parameters applied to every sample of a batch.

    :ivar eps: Neighborhood radius of the density clustering (um).
    :ivar min_points: Points (self included) needed within ``eps`` for a core point.
    :ivar border_policy: ``"include_borders"`` or ``"core_only"`` (DBSCAN*).
    :ivar max_trim_fraction: Upper bound of the hull optimization trimming.
    :ivar legacy_sphericity: Reproduce the historical optimizer trace where the
        test configuration's sphericity is taken from the current geometry.
    """

    eps: float = DEFAULT_EPS
    min_points: int = DEFAULT_MIN_POINTS
    border_policy: str = DEFAULT_BORDER_POLICY
    max_trim_fraction: float = MAX_TRIM_FRACTION
    legacy_sphericity: bool = False

    def validate(self) -> 'AnalysisConfig':
        """
        Check parameter ranges.

        :return: The config itself, so calls can be chained.
        :rtype: AnalysisConfig
        :raises InvalidParameter: If a parameter is out of range.
        """
        validate_cluster_params(self.eps, self.min_points, self.border_policy)
        if not 0.0 <= self.max_trim_fraction < 1.0:
            raise InvalidParameter(
                f"max_trim_fraction must be in [0, 1), got {self.max_trim_fraction}")
        return self


def validate_cluster_params(eps: float, min_points: int, border_policy: str) -> None:
    """
    Validate density clustering parameters.

    :raises InvalidParameter: On negative eps, non-positive min_points or an
        unknown border policy.
    """
    if not eps >= 0:
        raise InvalidParameter(f"eps must be non-negative, got {eps}")
    if int(min_points) != min_points or min_points < 1:
        raise InvalidParameter(f"min_points must be a positive integer, got {min_points}")
    if border_policy not in BORDER_POLICIES:
        raise InvalidParameter(
            f"Unknown border policy '{border_policy}'. Choose from {BORDER_POLICIES}")


def voxel_size_from_string(text: str) -> Tuple[float, float, float]:
    """
    Parse a ``"sx,sy,sz"`` voxel size string (command line helper).

    :raises InvalidParameter: If the string does not hold three positive numbers.
    """
    try:
        values = tuple(float(v) for v in text.split(','))
    except ValueError as exc:
        raise InvalidParameter(f"Invalid voxel size '{text}'") from exc
    if len(values) != 3 or any(v <= 0 for v in values):
        raise InvalidParameter(f"Voxel size needs three positive values, got '{text}'")
    return values
