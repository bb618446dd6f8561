# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""
Spatial operations on 3D point sets.

This module provides centroid and distance computations and
nearest-neighbor queries used by the hull optimizer and the simulator. Point sets are ``(N, 3)``
arrays in microns; no function modifies its input.
"""

import numpy as np
from scipy.spatial.distance import pdist, squareform
from typing import Sequence

from ..errors import InvalidParameter


def as_point_array(points) -> np.ndarray:
    """
    Convert input coordinates to a float ``(N, 3)`` array.

    :param points: Array-like of shape (N, 3).
    :return: New float array (the input is never aliased).
    :rtype: np.ndarray
    :raises InvalidParameter: If the input is not (N, 3).
    """
    arr = np.array(points, dtype=float)
    if arr.size == 0:
        return arr.reshape(0, 3)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise InvalidParameter(f"Expected an (N, 3) point array, got shape {arr.shape}")
    return arr


def compute_centroid(points: np.ndarray) -> np.ndarray:
    """
    Mean of all coordinates.

    :param points: (N, 3) array of point coordinates.
    :type points: np.ndarray
    :return: (3,) centroid. NaN if the set is empty.
    :rtype: np.ndarray
    """
    points = as_point_array(points)
    if len(points) == 0:
        return np.full(3, np.nan)
    return points.mean(axis=0)


def distances_from_centroid(points: np.ndarray) -> np.ndarray:
    """
    Euclidean distance of every point to the centroid of the set.

    :param points: (N, 3) array of point coordinates.
    :type points: np.ndarray
    :return: (N,) array of distances.
    :rtype: np.ndarray
    """
    points = as_point_array(points)
    if len(points) == 0:
        return np.empty(0)
    return np.linalg.norm(points - compute_centroid(points), axis=1)


def sort_by_centroid_distance(points: np.ndarray) -> np.ndarray:
    """
    Order point indices by descending distance from the centroid.

    The sort is stable, so equidistant points keep their input order.

    :param points: (N, 3) array of point coordinates.
    :type points: np.ndarray
    :return: Index array, farthest point first.
    :rtype: np.ndarray
    """
    d = distances_from_centroid(points)
    return np.argsort(-d, kind='stable')


def pairwise_distances(points: np.ndarray) -> np.ndarray:
    """
    Full (N, N) Euclidean distance matrix.

    :param points: (N, 3) array of point coordinates.
    :type points: np.ndarray
    :return: Symmetric distance matrix with a zero diagonal.
    :rtype: np.ndarray
    """
    points = as_point_array(points)
    if len(points) < 2:
        return np.zeros((len(points), len(points)))
    return squareform(pdist(points))


def nearest_neighbor_distances(points: np.ndarray) -> np.ndarray:
    """
    Distance from every point to its nearest other point.

    :param points: (N, 3) array of point coordinates.
    :type points: np.ndarray
    :return: (N,) array; ``inf`` when a point has no other point.
    :rtype: np.ndarray
    """
    dist = pairwise_distances(points)
    if len(dist) == 0:
        return np.empty(0)
    np.fill_diagonal(dist, np.inf)
    return dist.min(axis=1)


def scale_to_microns(points: np.ndarray, voxel_size: Sequence[float]) -> np.ndarray:
    """
    Convert pixel coordinates to microns with per-axis scale factors.

    :param points: (N, 3) array in pixels.
    :type points: np.ndarray
    :param voxel_size: (sx, sy, sz) microns per pixel.
    :type voxel_size: Sequence[float]
    :return: New (N, 3) array in microns.
    :rtype: np.ndarray
    :raises InvalidParameter: If the scale does not have three positive entries.
    """
    scale = np.asarray(voxel_size, dtype=float)
    if scale.shape != (3,) or np.any(scale <= 0):
        raise InvalidParameter(f"voxel_size must hold three positive values, got {voxel_size}")
    return as_point_array(points) * scale[None, :]
