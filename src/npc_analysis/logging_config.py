# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""
Logging configuration for the ``npc_analysis`` namespace.

Library modules only create module loggers; handlers are attached here,
usually once from a script entry point.
"""

import logging
import sys
from typing import Optional


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger with a console handler.

    :param level: Logging level (e.g. ``logging.DEBUG``).
    :type level: int
    :param log_file: Optional path of a log file written alongside stdout.
    :type log_file: Optional[str]
    :return: The configured package logger.
    :rtype: logging.Logger
    """
    logger = logging.getLogger("npc_analysis")
    logger.setLevel(level)

    # Avoid duplicate output when called twice (e.g. from notebooks)
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger
