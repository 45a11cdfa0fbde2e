# ──────────────────────────────────────────────────────────────────────
# Spatial Moments — Error Taxonomy
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""Exceptions raised by the equilibrium moment solvers."""

from __future__ import annotations


class SpatialMomentsError(Exception):
    """Base class for all package errors."""


class InvalidConfigurationError(SpatialMomentsError, ValueError):
    """Raised before any numerical work when a problem definition is unusable."""


class InvalidKernelParametersError(SpatialMomentsError, ValueError):
    """Raised at kernel construction when parameters cannot yield a density."""


class SingularSystemError(SpatialMomentsError, RuntimeError):
    """Raised when the Nystrom system matrix is numerically singular."""


class NonConvergenceError(SpatialMomentsError, RuntimeError):
    """Raised when an iterate blows up, or on budget exhaustion in strict mode."""
