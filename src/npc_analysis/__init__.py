# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""
NPC Analysis Package

Quantifies spatial clustering of nuclear pore complexes (NPCs) on the
nuclear envelope from 3D spot coordinates, and compares it with complete
spatial randomness on a sphere.

Modules:
--------
- geometry: Convex hull, shape statistics and hull optimization
- clustering: Density-based clustering (DBSCAN / DBSCAN*)
- simulation: Random point sets on a sphere (null model)
- analysis: Per-sample pipeline and group comparison statistics
- io: Coordinate table reading and result tables
- visualization: Plotting and figure generation
- utils: Helper functions and utilities

Example Usage:
--------------
    import npc_analysis as npc

    points = npc.io.load_coordinates('data/WT/nucleus_01.csv',
                                     voxel_size=(0.0645, 0.0645, 0.2))
    record = npc.analysis.analyze_sample('nucleus_01', 'WT', points)

    rng = np.random.default_rng(42)
    random_sets = npc.simulation.simulate_random_group(30, 150, 1.2, rng=rng)
    # ... (see scripts/ directory for complete examples)
"""

__version__ = '0.1.0'
__author__ = 'NPC Analysis Team'

from . import errors
from . import config
from . import geometry
from . import clustering
from . import simulation
from . import analysis
from . import io
from . import visualization
from . import utils

from .config import AnalysisConfig
from .errors import DegenerateGeometry, InvalidParameter, NPCAnalysisError

__all__ = [
    'errors',
    'config',
    'geometry',
    'clustering',
    'simulation',
    'analysis',
    'io',
    'visualization',
    'utils',
    'AnalysisConfig',
    'DegenerateGeometry',
    'InvalidParameter',
    'NPCAnalysisError',
]
