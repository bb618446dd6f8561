# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""I/O module for coordinate tables and result tables."""

from .coordinates import (
    DEFAULT_COLUMNS,
    SUPPORTED_EXTENSIONS,
    read_table_rows,
    load_coordinates,
    load_group_directory
)

from .tables import (
    write_records_csv,
    read_records_csv,
    write_summary_csv
)

__all__ = [
    'DEFAULT_COLUMNS',
    'SUPPORTED_EXTENSIONS',
    'read_table_rows',
    'load_coordinates',
    'load_group_directory',
    'write_records_csv',
    'read_records_csv',
    'write_summary_csv',
]
