# ──────────────────────────────────────────────────────────────────────
# Spatial Moments — Third-Moment Closure
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Second-order closure of the third spatial moment.

              1   C(x)C(y)    C(x)C(y-x)    C(y)C(y-x)
    T(x, y) =---(A-------- + B---------- + G---------- - BN^3)
             A+B     N            N             N

With ``C = N (N + D)`` and the first-moment balance
``s (N + ∫ w D) = b - d``, the competition integral
``(s / N) ∫ w(y) T(x, y) dy`` splits into a term proportional to ``D(x)``
(:meth:`Closure.diagonal`) and an explicit remainder
(:meth:`Closure.remainder`) built from the convolutions ``w*D`` and
``(wD)*D``.  Both convolutions carry the ``C(y-x)`` dependence and are
only needed when beta or gamma is non-zero.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike, NDArray

from spatial_moments.errors import InvalidConfigurationError

FloatArray = NDArray[np.float64]


@dataclass(frozen=True)
class Closure:
    """Closure weights (alpha, beta, gamma)."""

    alpha: float = 1.0
    beta: float = 0.0
    gamma: float = 0.0

    def __post_init__(self) -> None:
        for name in ("alpha", "beta", "gamma"):
            value = getattr(self, name)
            if isinstance(value, bool) or not math.isfinite(float(value)):
                raise InvalidConfigurationError(f"{name} must be finite, got {value!r}")
            object.__setattr__(self, name, float(value))
        if self.alpha + self.beta == 0.0:
            raise InvalidConfigurationError(
                "alpha + beta must be non-zero for the closure to be defined"
            )

    @classmethod
    def linear(cls) -> "Closure":
        """Asymmetric closure (1, 0, 0) that makes the equilibrium equation linear."""
        return cls(1.0, 0.0, 0.0)

    @property
    def norm(self) -> float:
        return self.alpha + self.beta

    @property
    def is_linear(self) -> bool:
        return self.beta == 0.0 and self.gamma == 0.0

    @property
    def needs_cross_terms(self) -> bool:
        return not self.is_linear

    def evaluate(
        self,
        c_x: ArrayLike,
        c_y: ArrayLike,
        c_yx: Optional[ArrayLike],
        n: float,
    ) -> FloatArray:
        """Pointwise third-moment approximation T(x, y).

        ``c_yx`` is the second moment at offset ``y - x``.  It is not read
        for the linear closure and may be ``None`` there.
        """
        cx = np.asarray(c_x, dtype=np.float64)
        cy = np.asarray(c_y, dtype=np.float64)
        value = self.alpha * cx * cy / n
        if not self.is_linear:
            if c_yx is None:
                raise ValueError("c_yx is required when beta or gamma is non-zero")
            cyx = np.asarray(c_yx, dtype=np.float64)
            value = value + (self.beta * cx + self.gamma * cy) * cyx / n - self.beta * n**3
        return value / self.norm

    def diagonal(self, n: float, b: float, d: float, s: float) -> float:
        """Coefficient of D(x) in the w-integrated closure."""
        return (self.alpha * (b - d) + s * self.beta * n) / self.norm

    def remainder(
        self,
        n: float,
        field: FloatArray,
        w_conv: Optional[FloatArray],
        wd_conv: Optional[FloatArray],
        b: float,
        d: float,
        s: float,
    ) -> FloatArray:
        """Part of the w-integrated closure not proportional to D(x).

        ``w_conv`` is ``w*D`` and ``wd_conv`` is ``(wD)*D``; both may be
        ``None`` for the linear closure.
        """
        out = np.full_like(field, (self.alpha + self.gamma) * (b - d) * n)
        if self.needs_cross_terms and (w_conv is None or wd_conv is None):
            raise ValueError("cross convolutions are required when beta or gamma is non-zero")
        if self.beta != 0.0:
            out += s * self.beta * (n + field) * w_conv
        if self.gamma != 0.0:
            out += s * self.gamma * (n * w_conv + wd_conv)
        return out / self.norm
