# ──────────────────────────────────────────────────────────────────────
# Spatial Moments — Solver Contract
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

from spatial_moments.core.config_schema import Problem
from spatial_moments.core.result import Result


class SolverMethod(str, Enum):
    NEUMAN_FFT = "neuman-fft"
    LINEAR_NEUMAN = "lneuman"
    NYSTROM = "nystrom"
    DHT_NAIVE = "dht-naive"


class AbstractSolver(ABC):
    """One instance per solve; nothing is carried over between calls."""

    method: SolverMethod

    @abstractmethod
    def solve(self, problem: Problem) -> Result:
        """Return the equilibrium (C, N) for a validated problem."""
