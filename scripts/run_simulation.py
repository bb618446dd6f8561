#!/usr/bin/env python3
# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""
Null model simulation script.

Repeats the minimum-separation simulation on a sphere and reports how many
points survive the separation filter and how much clustering appears by
chance, for a list of eps values.
"""

import argparse
import sys
import os

# Add src to path if running from source
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import numpy as np
import npc_analysis as npc
from npc_analysis import config as cfg


def main():
    """Main entry point for the null model simulation."""
    parser = argparse.ArgumentParser(
        description='Spatial randomness baseline of NPC clustering on a sphere'
    )
    parser.add_argument('--runs', type=int, default=100,
                        help='Number of simulated nuclei (default: 100)')
    parser.add_argument('--count', type=int, default=cfg.DEFAULT_POINT_COUNT,
                        help=f'Points drawn per nucleus (default: {cfg.DEFAULT_POINT_COUNT})')
    parser.add_argument('--radius', type=float, default=1.25,
                        help='Sphere radius in microns (default: 1.25)')
    parser.add_argument('--min-dist', type=float, default=cfg.DEFAULT_MIN_SEPARATION,
                        help=f'Minimum NPC separation (default: {cfg.DEFAULT_MIN_SEPARATION})')
    parser.add_argument('--eps', type=float, nargs='+', default=list(cfg.DEFAULT_EPS_SWEEP),
                        help=f'Clustering radii to evaluate (default: {cfg.DEFAULT_EPS_SWEEP})')
    parser.add_argument('--min-points', type=int, default=cfg.DEFAULT_MIN_POINTS,
                        help=f'Points within eps for a core point (default: {cfg.DEFAULT_MIN_POINTS})')
    parser.add_argument('--border-policy', choices=cfg.BORDER_POLICIES,
                        default=cfg.DEFAULT_BORDER_POLICY,
                        help=f'Border point handling (default: {cfg.DEFAULT_BORDER_POLICY})')
    parser.add_argument('--seed', type=int, default=cfg.RANDOM_SEED,
                        help=f'Random seed (default: {cfg.RANDOM_SEED})')
    parser.add_argument('--output', type=str, default=None,
                        help='Optional directory for the eps sweep figure')

    args = parser.parse_args()

    print(f"Simulating {args.runs} nuclei: {args.count} points on radius {args.radius} um, "
          f"min separation {args.min_dist} um")

    sweeps = {}
    for eps in args.eps:
        rng = np.random.default_rng(args.seed)
        summary = npc.simulation.simulate_retention(
            args.runs, args.count, args.radius, args.min_dist,
            eps=eps, min_points=args.min_points,
            border_policy=args.border_policy, rng=rng)
        retained = npc.utils.format_mean_std(summary.mean_retained, summary.std_retained, digits=1)
        fraction = npc.utils.format_mean_std(summary.mean_fraction_clustered,
                                             summary.std_fraction_clustered)
        print(f"eps={eps:.3f}: retained {retained} ({100 * summary.mean_retention_ratio:.1f}%), "
              f"fraction clustered {fraction}")
        sweeps[eps] = summary

    if args.output:
        curves = {'random (mean)': {eps: s.mean_fraction_clustered for eps, s in sweeps.items()}}
        out = npc.utils.output_file(args.output, 'random_eps_sweep.png')
        npc.visualization.plot_eps_sweep(curves, out)
        print(f"Saved {out}")


if __name__ == '__main__':
    main()
