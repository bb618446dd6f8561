# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""
Tabular output of per-sample records and group summaries.

Missing values are written as empty cells and read back as None.
"""

import csv
import os
from typing import Dict, List, Optional, Sequence

from ..analysis import MetricSummary, SampleRecord
from ..clustering import ClusterMetrics
from ..config import RECORD_COLUMNS
from ..geometry import ShapeStats

_INT_COLUMNS = ('num_points', 'total', 'clustered', 'n_clusters', 'points_removed')
_FLOAT_COLUMNS = ('surface_area', 'volume', 'sphericity', 'density', 'fraction_clustered')


def _ensure_parent(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def write_records_csv(records: Sequence[SampleRecord], path: str) -> None:
    """
    Write one row per sample record.

    :param records: Sample records.
    :type records: Sequence[SampleRecord]
    :param path: Output CSV path (parent directories are created).
    :type path: str
    """
    _ensure_parent(path)
    with open(path, 'w', newline='', encoding='utf-8') as fh:
        writer = csv.DictWriter(fh, fieldnames=list(RECORD_COLUMNS))
        writer.writeheader()
        for record in records:
            row = record.as_row()
            writer.writerow({k: ('' if v is None else v) for k, v in row.items()})


def _parse(value: str, cast) -> Optional[object]:
    if value is None or value == '':
        return None
    return cast(float(value)) if cast is int else cast(value)


def read_records_csv(path: str) -> List[SampleRecord]:
    """
    Read sample records written by :func:`write_records_csv`.

    :param path: CSV path.
    :type path: str
    :rtype: List[SampleRecord]
    :raises FileNotFoundError: If the file does not exist.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Records file not found: {path}")

    records = []
    with open(path, 'r', newline='', encoding='utf-8') as fh:
        for row in csv.DictReader(fh):
            v = {k: _parse(row.get(k), int) for k in _INT_COLUMNS}
            v.update({k: _parse(row.get(k), float) for k in _FLOAT_COLUMNS})

            clusters = None
            if v['total'] is not None:
                clusters = ClusterMetrics(
                    total_points=v['total'],
                    clustered_points=v['clustered'],
                    fraction_clustered=v['fraction_clustered'],
                    n_clusters=v['n_clusters'] or 0,
                )
            records.append(SampleRecord(
                sample_id=row['sample_id'],
                group_label=row['group_label'],
                shape=ShapeStats(
                    surface_area=v['surface_area'],
                    volume=v['volume'],
                    sphericity=v['sphericity'],
                    density=v['density'],
                    point_count=v['num_points'] or 0,
                ),
                clusters=clusters,
                points_removed=v['points_removed'],
                error=row.get('error') or None,
            ))
    return records


def write_summary_csv(summaries: Dict[str, Dict[str, MetricSummary]], path: str) -> None:
    """
    Write per-group mean/std of each metric, one row per (group, metric).

    :param summaries: Output of :func:`~npc_analysis.analysis.summarize_groups`.
    :type summaries: Dict[str, Dict[str, MetricSummary]]
    :param path: Output CSV path.
    :type path: str
    """
    _ensure_parent(path)
    with open(path, 'w', newline='', encoding='utf-8') as fh:
        writer = csv.writer(fh)
        writer.writerow(['group_label', 'metric', 'n', 'mean', 'std'])
        for label, metrics in summaries.items():
            for metric, s in metrics.items():
                writer.writerow([label, metric, s.n,
                                 '' if s.mean is None else s.mean,
                                 '' if s.std is None else s.std])
