#!/usr/bin/env python3
# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""
NPC clustering analysis script.

Loads one directory of coordinate tables per condition, optionally adds a
simulated "Random" group, runs hull optimization, shape statistics and
density clustering on every nucleus, and compares the groups.
"""

import argparse
import logging
import sys
import os

# Add src to path if running from source
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import numpy as np
import npc_analysis as npc
from npc_analysis import config as cfg
from npc_analysis.logging_config import setup_logging


def parse_group(text: str):
    """Parse a ``LABEL=DIRECTORY`` group argument."""
    if '=' not in text:
        raise argparse.ArgumentTypeError(f"Expected LABEL=DIRECTORY, got '{text}'")
    label, directory = text.split('=', 1)
    return label.strip(), directory.strip()


def main():
    """Main entry point for the NPC clustering analysis."""
    parser = argparse.ArgumentParser(
        description='Nuclear pore complex clustering analysis against spatial randomness'
    )
    parser.add_argument(
        '--group',
        type=parse_group,
        action='append',
        default=[],
        help='Condition as LABEL=DIRECTORY of coordinate tables (repeatable)'
    )
    parser.add_argument(
        '--voxel-size',
        type=cfg.voxel_size_from_string,
        default=None,
        help='Pixel to micron factors "sx,sy,sz" (default: coordinates already in microns)'
    )
    parser.add_argument(
        '--eps',
        type=float,
        default=cfg.DEFAULT_EPS,
        help=f'Clustering neighborhood radius in microns (default: {cfg.DEFAULT_EPS})'
    )
    parser.add_argument(
        '--min-points',
        type=int,
        default=cfg.DEFAULT_MIN_POINTS,
        help=f'Points within eps for a core point, self included (default: {cfg.DEFAULT_MIN_POINTS})'
    )
    parser.add_argument(
        '--border-policy',
        choices=cfg.BORDER_POLICIES,
        default=cfg.DEFAULT_BORDER_POLICY,
        help=f'Border point handling (default: {cfg.DEFAULT_BORDER_POLICY})'
    )
    parser.add_argument(
        '--max-trim',
        type=float,
        default=cfg.MAX_TRIM_FRACTION,
        help=f'Maximum fraction trimmed by hull optimization (default: {cfg.MAX_TRIM_FRACTION})'
    )
    parser.add_argument(
        '--simulate',
        type=int,
        default=0,
        help='Number of simulated Random nuclei to add (default: 0)'
    )
    parser.add_argument(
        '--sim-count',
        type=int,
        default=cfg.DEFAULT_POINT_COUNT,
        help=f'Points drawn per simulated nucleus (default: {cfg.DEFAULT_POINT_COUNT})'
    )
    parser.add_argument(
        '--sim-radius',
        type=float,
        default=cfg.DEFAULT_SPHERE_RADIUS,
        help=f'Radius of simulated nuclei in microns (default: {cfg.DEFAULT_SPHERE_RADIUS})'
    )
    parser.add_argument(
        '--sim-min-dist',
        type=float,
        default=cfg.DEFAULT_MIN_SEPARATION,
        help='Minimum NPC separation of simulated nuclei, 0 disables '
             f'(default: {cfg.DEFAULT_MIN_SEPARATION})'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=cfg.RANDOM_SEED,
        help=f'Random seed (default: {cfg.RANDOM_SEED})'
    )
    parser.add_argument(
        '--workers',
        type=int,
        default=None,
        help='Worker threads (default: Python default)'
    )
    parser.add_argument(
        '--output',
        type=str,
        default='Results_npc_clustering',
        help='Output directory (default: Results_npc_clustering)'
    )
    parser.add_argument(
        '--dpi',
        type=int,
        default=300,
        help='Figure DPI (default: 300)'
    )
    parser.add_argument(
        '--skip-plots',
        action='store_true',
        help='Skip figures (faster)'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Debug logging'
    )

    args = parser.parse_args()
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    if not args.group and args.simulate <= 0:
        parser.error('Give at least one --group or --simulate N')

    config = npc.AnalysisConfig(
        eps=args.eps,
        min_points=args.min_points,
        border_policy=args.border_policy,
        max_trim_fraction=args.max_trim,
    ).validate()

    samples = []
    for label, directory in args.group:
        print(f"Loading group {label} from: {directory}")
        group_samples = npc.io.load_group_directory(directory, label, voxel_size=args.voxel_size)
        print(f"  {len(group_samples)} nuclei")
        samples.extend(group_samples)

    if args.simulate > 0:
        print(f"Simulating {args.simulate} random nuclei "
              f"({args.sim_count} points, radius {args.sim_radius} um)")
        rng = np.random.default_rng(args.seed)
        sets = npc.simulation.simulate_random_group(
            args.simulate, args.sim_count, args.sim_radius,
            min_dist=args.sim_min_dist, rng=rng)
        samples.extend((f"random_{i:03d}", cfg.RANDOM_GROUP, pts) for i, pts in enumerate(sets))

    print(f"Analyzing {len(samples)} nuclei (eps={config.eps}, min_points={config.min_points}, "
          f"{config.border_policy})...")
    records = npc.analysis.analyze_batch(samples, config, max_workers=args.workers)

    failed = [r for r in records if r.error]
    for r in failed:
        print(f"  Failed: {r.sample_id} ({r.group_label}): {r.error}")

    records_path = npc.utils.output_file(args.output, 'sample_records.csv')
    npc.io.write_records_csv(records, records_path)
    print(f"Saved {records_path}")

    report = npc.analysis.compare_groups(records)
    summary_path = npc.utils.output_file(args.output, 'group_summary.csv')
    npc.io.write_summary_csv(report.summaries, summary_path)
    print(f"Saved {summary_path}")

    print("\nGroup summary (mean ± std):")
    for label, metrics in report.summaries.items():
        parts = [f"{metric}={npc.utils.format_mean_std(s.mean, s.std)}"
                 for metric, s in metrics.items()]
        print(f"  {label} (n={len([r for r in records if r.group_label == label])}): " + ', '.join(parts))

    print("\nNuclei with at least one cluster:")
    for label, p in report.presence.items():
        frac = p.fraction_with_clusters
        frac_txt = 'NA' if frac is None else f"{frac:.2f}"
        print(f"  {label}: {p.with_clusters} with, {p.without_clusters} without ({frac_txt})")

    print(f"\nKruskal-Wallis ({report.omnibus.metric}): "
          f"H={report.omnibus.statistic:.3f}, p={report.omnibus.p_value:.4g}")
    for pair in report.pairwise:
        print(f"  Mann-Whitney {pair.group_a} vs {pair.group_b}: "
              f"U={pair.statistic:.1f}, p={pair.p_value:.4g}, adjusted p={pair.p_adjusted:.4g}")

    if not args.skip_plots:
        for metric in npc.analysis.SUMMARY_METRICS:
            out = npc.utils.output_file(args.output, f'{metric}_by_group.png')
            npc.visualization.plot_group_metric(records, metric, out, dpi=args.dpi)
            print(f"Saved {out}")

    print("\nDone.")


if __name__ == '__main__':
    main()
