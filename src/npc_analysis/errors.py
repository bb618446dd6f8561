# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025  Rami Ardati

"""
Exception types raised by the NPC analysis package.

Hull failures are expected on some real samples, so most callers catch
:class:`DegenerateGeometry` and report missing values instead of aborting.
:class:`InvalidParameter` marks a programming error at an API boundary.
"""


class NPCAnalysisError(Exception):
    """Base class for all package errors."""


class DegenerateGeometry(NPCAnalysisError):
    """A convex hull cannot be built (too few, coplanar or collinear points)."""


class InvalidParameter(NPCAnalysisError, ValueError):
    """A caller supplied an out-of-range or malformed argument."""
