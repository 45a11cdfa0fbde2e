# ──────────────────────────────────────────────────────────────────────
# Spatial Moments — Package Init
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""Equilibrium second spatial moment of the Dieckmann-Law birth-death model."""

from .core import Closure, Problem, Result, build_kernels, solve, validate_problem
from .errors import (
    InvalidConfigurationError,
    InvalidKernelParametersError,
    NonConvergenceError,
    SingularSystemError,
    SpatialMomentsError,
)

__version__ = "1.0.0"

__all__ = [
    "Closure",
    "InvalidConfigurationError",
    "InvalidKernelParametersError",
    "NonConvergenceError",
    "Problem",
    "Result",
    "SingularSystemError",
    "SpatialMomentsError",
    "build_kernels",
    "solve",
    "validate_problem",
]
