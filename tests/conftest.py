# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

import os
import sys

import numpy as np
import pytest

# Headless plotting unless a backend is chosen explicitly
os.environ.setdefault("MPLBACKEND", "Agg")

# Add src to path when running from a source checkout
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "interactive: manual visual check, run with pytest -m interactive"
    )


def pytest_collection_modifyitems(config, items):
    if "interactive" in (config.getoption("-m") or ""):
        return
    skip = pytest.mark.skip(reason="interactive test, run with pytest -m interactive")
    for item in items:
        if "interactive" in item.keywords:
            item.add_marker(skip)


def fibonacci_sphere(count, radius):
    """Near-regular lattice on a sphere: no two points closer than ~0.8 * mean spacing."""
    i = np.arange(count) + 0.5
    phi = np.arccos(1.0 - 2.0 * i / count)
    theta = np.pi * (1.0 + 5.0 ** 0.5) * i
    return radius * np.column_stack([
        np.cos(theta) * np.sin(phi),
        np.sin(theta) * np.sin(phi),
        np.cos(phi),
    ])


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def lattice_background():
    return fibonacci_sphere(115, 1.2)
