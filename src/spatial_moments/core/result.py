# ──────────────────────────────────────────────────────────────────────
# Spatial Moments — Solve Result
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

FloatArray = NDArray[np.float64]


@dataclass(frozen=True)
class Result:
    """Equilibrium second moment ``C`` on the radial grid and first moment ``N``."""

    C: FloatArray
    N: float
    step: float
    origin: float = 0.0
    method: str = ""
    iterations: int = 0
    converged: bool = True
    residual: float = 0.0

    def __post_init__(self) -> None:
        values = np.array(self.C, dtype=np.float64, copy=True)
        values.setflags(write=False)
        object.__setattr__(self, "C", values)
        object.__setattr__(self, "N", float(self.N))

    @property
    def c0(self) -> float:
        """Second moment at zero separation."""
        return float(self.C[0])

    @property
    def radii(self) -> FloatArray:
        return self.origin + self.step * np.arange(self.C.size, dtype=np.float64)

    @property
    def pair_correlation(self) -> FloatArray:
        """``C / N^2``; tends to 1 where individuals are uncorrelated."""
        return self.C / (self.N * self.N)

    def summary(self, accuracy: int = 6, ascetic: bool = False) -> str:
        if ascetic:
            return f"{self.N:15.{accuracy}f}"
        return f"First moment: {self.N:.{accuracy}f}\nC(0) = {self.c0:.{accuracy}f}"
