# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""
Coordinate table reading utilities.

Spot detection exports one table per nucleus with a header row and one row
per pore complex. The x, y and z columns are located by header name
(case-insensitive). Supported formats:
- ``.csv`` / ``.tsv`` / ``.txt``: delimited text (delimiter sniffed if not given)
- ``.xls``: Excel workbook, first sheet (xlrd)
- ``.ods``: OpenDocument spreadsheet, first sheet (ezodf)
"""

import csv
import logging
import os
from typing import List, Optional, Sequence, Tuple

import ezodf
import numpy as np
import xlrd

from ..geometry.spatial import scale_to_microns

logger = logging.getLogger(__name__)

DEFAULT_COLUMNS = ('x', 'y', 'z')
TEXT_EXTENSIONS = ('.csv', '.tsv', '.txt')
SUPPORTED_EXTENSIONS = TEXT_EXTENSIONS + ('.xls', '.ods')


def _read_text_rows(path: str, delimiter: Optional[str]) -> List[List[str]]:
    with open(path, 'r', newline='', encoding='utf-8') as f:
        if delimiter is None:
            sample = f.read(4096)
            f.seek(0)
            try:
                delimiter = csv.Sniffer().sniff(sample, delimiters=',\t;').delimiter
            except csv.Error:
                delimiter = '\t' if path.lower().endswith('.tsv') else ','
        return [row for row in csv.reader(f, delimiter=delimiter) if row]


def _read_xls_rows(path: str, sheet_index: int) -> List[list]:
    workbook = xlrd.open_workbook(path)
    sheet = workbook.sheet_by_index(sheet_index)
    return [sheet.row_values(row_idx) for row_idx in range(sheet.nrows)]


def _read_ods_rows(path: str, sheet_index: int) -> List[list]:
    doc = ezodf.opendoc(path)
    sheet = doc.sheets[sheet_index]
    rows = []
    for row in sheet.rows():
        values = [cell.value for cell in row]
        if any(v is not None and v != '' for v in values):
            rows.append(values)
    return rows


def read_table_rows(path: str,
                    delimiter: Optional[str] = None,
                    sheet_index: int = 0) -> List[list]:
    """
    Read all non-empty rows of a coordinate table, header included.

    :param path: Path of the table file.
    :type path: str
    :param delimiter: Delimiter of text files (sniffed when None).
    :type delimiter: Optional[str]
    :param sheet_index: Sheet to read from spreadsheet files (0-based).
    :type sheet_index: int
    :return: Rows as lists of raw cell values.
    :rtype: List[list]
    :raises FileNotFoundError: If the file does not exist.
    :raises ValueError: If the extension is not supported.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Coordinate file not found: {path}")

    ext = os.path.splitext(path)[1].lower()
    if ext in TEXT_EXTENSIONS:
        return _read_text_rows(path, delimiter)
    if ext == '.xls':
        return _read_xls_rows(path, sheet_index)
    if ext == '.ods':
        return _read_ods_rows(path, sheet_index)
    raise ValueError(f"Unsupported coordinate file '{path}'. Supported: {SUPPORTED_EXTENSIONS}")


def _column_indices(header: Sequence, columns: Sequence[str]) -> List[int]:
    names = [str(h).strip().lower() if h is not None else '' for h in header]
    indices = []
    for col in columns:
        key = col.strip().lower()
        if key not in names:
            raise ValueError(f"Column '{col}' not found. Available: {list(header)}")
        indices.append(names.index(key))
    return indices


def load_coordinates(path: str,
                     columns: Sequence[str] = DEFAULT_COLUMNS,
                     delimiter: Optional[str] = None,
                     sheet_index: int = 0,
                     voxel_size: Optional[Sequence[float]] = None) -> np.ndarray:
    """
    Load one point set from a coordinate table.

    Rows with a missing or non-numeric coordinate are skipped.

    :param path: Path of the table file.
    :type path: str
    :param columns: Header names of the x, y and z columns.
    :type columns: Sequence[str]
    :param delimiter: Delimiter of text files (sniffed when None).
    :type delimiter: Optional[str]
    :param sheet_index: Sheet to read from spreadsheet files (0-based).
    :type sheet_index: int
    :param voxel_size: Optional (sx, sy, sz) pixel -> micron factors.
    :type voxel_size: Optional[Sequence[float]]
    :return: (N, 3) float array.
    :rtype: np.ndarray
    :raises ValueError: If the table is empty or a column is missing.
    """
    if len(columns) != 3:
        raise ValueError(f"Exactly three coordinate columns are needed, got {columns}")

    rows = read_table_rows(path, delimiter=delimiter, sheet_index=sheet_index)
    if not rows:
        raise ValueError(f"Coordinate file is empty: {path}")

    idx = _column_indices(rows[0], columns)
    coords = []
    skipped = 0
    for row in rows[1:]:
        try:
            coords.append([float(row[i]) for i in idx])
        except (IndexError, TypeError, ValueError):
            skipped += 1

    if skipped:
        logger.warning("Skipped %d incomplete rows in %s", skipped, path)

    points = np.array(coords, dtype=float).reshape(-1, 3)
    if voxel_size is not None:
        points = scale_to_microns(points, voxel_size)
    return points


def load_group_directory(directory: str,
                         group_label: str,
                         columns: Sequence[str] = DEFAULT_COLUMNS,
                         voxel_size: Optional[Sequence[float]] = None) -> List[Tuple[str, str, np.ndarray]]:
    """
    Load every supported coordinate file of a directory as one group.

    Files are read in sorted name order; the sample id is the file name
    without extension.

    :param directory: Directory holding one table per nucleus.
    :type directory: str
    :param group_label: Label assigned to all samples.
    :type group_label: str
    :param columns: Header names of the x, y and z columns.
    :type columns: Sequence[str]
    :param voxel_size: Optional (sx, sy, sz) pixel -> micron factors.
    :type voxel_size: Optional[Sequence[float]]
    :return: (sample_id, group_label, points) tuples.
    :rtype: List[Tuple[str, str, np.ndarray]]
    :raises FileNotFoundError: If the directory does not exist.
    """
    if not os.path.isdir(directory):
        raise FileNotFoundError(f"Group directory not found: {directory}")

    samples = []
    for name in sorted(os.listdir(directory)):
        if os.path.splitext(name)[1].lower() not in SUPPORTED_EXTENSIONS:
            continue
        path = os.path.join(directory, name)
        points = load_coordinates(path, columns=columns, voxel_size=voxel_size)
        samples.append((os.path.splitext(name)[0], group_label, points))

    logger.info("Loaded %d samples for group %s from %s", len(samples), group_label, directory)
    return samples
