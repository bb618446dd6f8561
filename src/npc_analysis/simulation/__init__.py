# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""Simulation module for the spatial randomness null model."""

from .sphere import (
    SimulationSummary,
    generate_sphere_points,
    generate_with_min_separation,
    simulate_random_group,
    simulate_retention
)

__all__ = [
    'SimulationSummary',
    'generate_sphere_points',
    'generate_with_min_separation',
    'simulate_random_group',
    'simulate_retention',
]
