# ──────────────────────────────────────────────────────────────────────
# Spatial Moments — Dispersal Kernels
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Radially symmetric birth and death dispersal kernels.

Every family provides a birth kernel ``m(r)`` and a death (competition)
kernel ``w(r)``.  Both are probability densities on R^D, i.e.

    ∫_{R^D} m(|x|) dx = S_D ∫_0^∞ r^{D-1} m(r) dr = 1,

where ``S_D = 2 π^{D/2} / Γ(D/2)`` is the surface area of the unit sphere.
The normalisation is fixed once at construction for the dimension the
kernel pair is bound to.

Families (letter codes follow the command line):

* ``n`` normal: Gaussian densities with standard deviations sigma_m, sigma_w.
* ``k`` kurtic: equal-weight mixture of two Gaussians (s0, s1), m = w.
* ``K`` general kurtic: independent mixtures for m (s0m, s1m) and w (s0w, s1w).
* ``e`` exponent: ``exp(-r/A)`` for m and ``exp(-r/B)`` for w.
* ``r`` Roughgarden: ``exp(-(r/s)^gamma)`` per kernel.
* ``p`` exponent-polynomial: ``exp(-(a r + b r^2))`` per kernel.
* ``c`` constant: uniform density on the ball of the given radius.
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Sequence, Tuple, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.integrate import quad
from scipy.optimize import brentq
from scipy.special import gamma as gamma_fn

from spatial_moments.errors import InvalidKernelParametersError

logger = logging.getLogger(__name__)

FloatArray = NDArray[np.float64]

_MIN_TAIL_EPS = 1e-12


class KernelFamily(str, Enum):
    NORMAL = "n"
    KURTIC = "k"
    GENERAL_KURTIC = "K"
    EXPONENT = "e"
    ROUGHGARDEN = "r"
    EXPONENT_POLYNOMIAL = "p"
    CONSTANT = "c"


def sphere_area(dimension: int) -> float:
    """Surface area of the unit sphere in R^D (2 for D = 1)."""
    return float(2.0 * math.pi ** (dimension / 2.0) / gamma_fn(dimension / 2.0))


def ball_volume(dimension: int, radius: float) -> float:
    """Volume of the D-ball of the given radius."""
    return float(
        math.pi ** (dimension / 2.0) * radius**dimension / gamma_fn(dimension / 2.0 + 1.0)
    )


def _require_positive_finite(name: str, value: float) -> float:
    if isinstance(value, bool):
        raise InvalidKernelParametersError(f"{name} must be finite and > 0, got {value!r}")
    try:
        parsed = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidKernelParametersError(
            f"{name} must be finite and > 0, got {value!r}"
        ) from exc
    if not math.isfinite(parsed) or parsed <= 0.0:
        raise InvalidKernelParametersError(f"{name} must be finite and > 0, got {value!r}")
    return parsed


def _require_finite(name: str, value: float) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidKernelParametersError(f"{name} must be finite, got {value!r}") from exc
    if not math.isfinite(parsed):
        raise InvalidKernelParametersError(f"{name} must be finite, got {value!r}")
    return parsed


def _gaussian(r: FloatArray, sigma: float, dimension: int) -> FloatArray:
    norm = (2.0 * math.pi * sigma * sigma) ** (-dimension / 2.0)
    return norm * np.exp(-0.5 * (r / sigma) ** 2)


class DispersalKernels(ABC):
    """Birth/death kernel pair bound to a spatial dimension.

    Parameters
    ----------
    dimension : int
        Dimension D of the space the densities are normalised in.
    cutoff : float | None
        Optional truncation radius; both densities vanish beyond it.
    """

    family: KernelFamily
    param_names: Tuple[str, ...] = ()

    def __init__(self, dimension: int = 1, cutoff: float | None = None) -> None:
        if isinstance(dimension, bool) or int(dimension) != dimension or int(dimension) < 1:
            raise InvalidKernelParametersError(
                f"dimension must be an integer >= 1, got {dimension!r}"
            )
        self.dimension = int(dimension)
        self.cutoff = None if cutoff is None else _require_positive_finite("cutoff", cutoff)

    # ── evaluation ────────────────────────────────────────────────────

    def birth(self, r: ArrayLike) -> FloatArray:
        """Birth dispersal density m(r)."""
        return self._evaluate("m", r)

    def death(self, r: ArrayLike) -> FloatArray:
        """Death (competition) density w(r)."""
        return self._evaluate("w", r)

    def _evaluate(self, which: str, r: ArrayLike) -> FloatArray:
        radii = np.abs(np.asarray(r, dtype=np.float64))
        values = np.asarray(self._density(which, radii), dtype=np.float64)
        if self.cutoff is not None:
            values = np.where(radii > self.cutoff, 0.0, values)
        return values

    @abstractmethod
    def _density(self, which: str, r: FloatArray) -> FloatArray:
        """Normalised radial density of kernel ``which`` ("m" or "w")."""

    @abstractmethod
    def _scale(self, which: str) -> float:
        """Characteristic length of kernel ``which``."""

    # ── support ───────────────────────────────────────────────────────

    def tail_mass(self, which: str, radius: float) -> float:
        """Mass of kernel ``which`` ('m' or 'w') outside the ball of ``radius``."""
        area = sphere_area(self.dimension)
        dim = self.dimension

        def integrand(x: float) -> float:
            return float(area * x ** (dim - 1) * self._density(which, np.asarray(x)))

        mass, _ = quad(integrand, float(radius), np.inf, limit=200)
        return max(float(mass), 0.0)

    def tail_radius(self, which: str, eps: float) -> float:
        """Smallest radius whose outside mass drops below ``eps``."""
        eps = max(float(eps), _MIN_TAIL_EPS)
        upper = self._scale(which)
        for _ in range(64):
            if self.tail_mass(which, upper) < eps:
                break
            upper *= 2.0
        else:
            raise InvalidKernelParametersError(
                f"{self.family.name.lower()} kernel '{which}' has no finite support at eps={eps:g}"
            )
        return float(brentq(lambda x: self.tail_mass(which, x) - eps, 0.0, upper, xtol=1e-10))

    def support_radius(self, eps: float) -> float:
        return max(self.tail_radius("m", eps), self.tail_radius("w", eps))

    # ── diagnostics ───────────────────────────────────────────────────

    def parameters(self) -> Dict[str, float]:
        return {name: float(getattr(self, name)) for name in self.param_names}

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={v:g}" for k, v in self.parameters().items())
        return f"{type(self).__name__}({args}, dimension={self.dimension})"


class NormalKernels(DispersalKernels):
    family = KernelFamily.NORMAL
    param_names = ("sigma_m", "sigma_w")

    def __init__(self, sigma_m: float, sigma_w: float, dimension: int = 1,
                 cutoff: float | None = None) -> None:
        super().__init__(dimension, cutoff)
        self.sigma_m = _require_positive_finite("sigma_m", sigma_m)
        self.sigma_w = _require_positive_finite("sigma_w", sigma_w)

    def _density(self, which: str, r: FloatArray) -> FloatArray:
        sigma = self.sigma_m if which == "m" else self.sigma_w
        return _gaussian(r, sigma, self.dimension)

    def _scale(self, which: str) -> float:
        return self.sigma_m if which == "m" else self.sigma_w


class GeneralKurticKernels(DispersalKernels):
    """Equal-weight two-Gaussian mixtures; heavier tails than a single normal."""

    family = KernelFamily.GENERAL_KURTIC
    param_names = ("s0m", "s1m", "s0w", "s1w")

    def __init__(self, s0m: float, s1m: float, s0w: float, s1w: float,
                 dimension: int = 1, cutoff: float | None = None) -> None:
        super().__init__(dimension, cutoff)
        self.s0m = _require_positive_finite("s0m", s0m)
        self.s1m = _require_positive_finite("s1m", s1m)
        self.s0w = _require_positive_finite("s0w", s0w)
        self.s1w = _require_positive_finite("s1w", s1w)

    def _pair(self, which: str) -> Tuple[float, float]:
        return (self.s0m, self.s1m) if which == "m" else (self.s0w, self.s1w)

    def _density(self, which: str, r: FloatArray) -> FloatArray:
        s0, s1 = self._pair(which)
        return 0.5 * (_gaussian(r, s0, self.dimension) + _gaussian(r, s1, self.dimension))

    def _scale(self, which: str) -> float:
        return max(self._pair(which))


class KurticKernels(GeneralKurticKernels):
    family = KernelFamily.KURTIC
    param_names = ("s0", "s1")

    def __init__(self, s0: float, s1: float, dimension: int = 1,
                 cutoff: float | None = None) -> None:
        s0 = _require_positive_finite("s0", s0)
        s1 = _require_positive_finite("s1", s1)
        super().__init__(s0, s1, s0, s1, dimension=dimension, cutoff=cutoff)
        self.s0 = s0
        self.s1 = s1


class ExponentKernels(DispersalKernels):
    family = KernelFamily.EXPONENT
    param_names = ("A", "B")

    def __init__(self, A: float, B: float, dimension: int = 1,
                 cutoff: float | None = None) -> None:
        super().__init__(dimension, cutoff)
        self.A = _require_positive_finite("A", A)
        self.B = _require_positive_finite("B", B)

    def _density(self, which: str, r: FloatArray) -> FloatArray:
        scale = self._scale(which)
        dim = self.dimension
        norm = 1.0 / (sphere_area(dim) * scale**dim * gamma_fn(dim))
        return norm * np.exp(-r / scale)

    def _scale(self, which: str) -> float:
        return self.A if which == "m" else self.B


class RoughgardenKernels(DispersalKernels):
    family = KernelFamily.ROUGHGARDEN
    param_names = ("sm", "gamma_m", "sw", "gamma_w")

    def __init__(self, sm: float, gamma_m: float, sw: float, gamma_w: float,
                 dimension: int = 1, cutoff: float | None = None) -> None:
        super().__init__(dimension, cutoff)
        self.sm = _require_positive_finite("sm", sm)
        self.gamma_m = _require_positive_finite("gamma_m", gamma_m)
        self.sw = _require_positive_finite("sw", sw)
        self.gamma_w = _require_positive_finite("gamma_w", gamma_w)

    def _density(self, which: str, r: FloatArray) -> FloatArray:
        if which == "m":
            scale, shape = self.sm, self.gamma_m
        else:
            scale, shape = self.sw, self.gamma_w
        dim = self.dimension
        norm = shape / (sphere_area(dim) * scale**dim * gamma_fn(dim / shape))
        return norm * np.exp(-((r / scale) ** shape))

    def _scale(self, which: str) -> float:
        return self.sm if which == "m" else self.sw


class ExponentPolynomialKernels(DispersalKernels):
    """Densities ``exp(-(a r + b r^2))``, normalised numerically once."""

    family = KernelFamily.EXPONENT_POLYNOMIAL
    param_names = ("am", "bm", "aw", "bw")

    def __init__(self, am: float, bm: float, aw: float, bw: float,
                 dimension: int = 1, cutoff: float | None = None) -> None:
        super().__init__(dimension, cutoff)
        self.am, self.bm = self._validate_pair("am", am, "bm", bm)
        self.aw, self.bw = self._validate_pair("aw", aw, "bw", bw)
        self._norm = {
            "m": self._normaliser(self.am, self.bm),
            "w": self._normaliser(self.aw, self.bw),
        }

    @staticmethod
    def _validate_pair(a_name: str, a: float, b_name: str, b: float) -> Tuple[float, float]:
        a_val = _require_finite(a_name, a)
        b_val = _require_finite(b_name, b)
        if b_val < 0.0:
            raise InvalidKernelParametersError(
                f"{b_name} must be >= 0 for an integrable density, got {b!r}"
            )
        if b_val == 0.0 and a_val <= 0.0:
            raise InvalidKernelParametersError(
                f"{a_name} must be > 0 when {b_name} == 0, got {a!r}"
            )
        return a_val, b_val

    def _normaliser(self, a: float, b: float) -> float:
        dim = self.dimension
        mass, _ = quad(lambda x: x ** (dim - 1) * math.exp(-(a * x + b * x * x)), 0.0, np.inf)
        mass *= sphere_area(dim)
        if not math.isfinite(mass) or mass <= 0.0:
            raise InvalidKernelParametersError(
                f"exponent-polynomial kernel with a={a:g}, b={b:g} is not normalisable"
            )
        return 1.0 / mass

    def _coefficients(self, which: str) -> Tuple[float, float]:
        return (self.am, self.bm) if which == "m" else (self.aw, self.bw)

    def _density(self, which: str, r: FloatArray) -> FloatArray:
        a, b = self._coefficients(which)
        return self._norm[which] * np.exp(-(a * r + b * r * r))

    def _scale(self, which: str) -> float:
        a, b = self._coefficients(which)
        if b > 0.0:
            return 1.0 / math.sqrt(b) + max(-a, 0.0) / (2.0 * b)
        return 1.0 / a


class ConstantKernels(DispersalKernels):
    family = KernelFamily.CONSTANT
    param_names = ("rm", "rw")

    def __init__(self, rm: float, rw: float, dimension: int = 1,
                 cutoff: float | None = None) -> None:
        super().__init__(dimension, cutoff)
        self.rm = _require_positive_finite("rm", rm)
        self.rw = _require_positive_finite("rw", rw)

    def _density(self, which: str, r: FloatArray) -> FloatArray:
        radius = self._scale(which)
        return np.where(r <= radius, 1.0 / ball_volume(self.dimension, radius), 0.0)

    def _scale(self, which: str) -> float:
        return self.rm if which == "m" else self.rw

    def tail_mass(self, which: str, radius: float) -> float:
        outer = self._scale(which)
        if radius >= outer:
            return 0.0
        return 1.0 - (max(float(radius), 0.0) / outer) ** self.dimension


KERNEL_CLASSES: Dict[KernelFamily, type] = {
    KernelFamily.NORMAL: NormalKernels,
    KernelFamily.KURTIC: KurticKernels,
    KernelFamily.GENERAL_KURTIC: GeneralKurticKernels,
    KernelFamily.EXPONENT: ExponentKernels,
    KernelFamily.ROUGHGARDEN: RoughgardenKernels,
    KernelFamily.EXPONENT_POLYNOMIAL: ExponentPolynomialKernels,
    KernelFamily.CONSTANT: ConstantKernels,
}


def build_kernels(
    family: Union[str, KernelFamily],
    params: Sequence[float],
    dimension: int = 1,
    cutoff: float | None = None,
) -> DispersalKernels:
    """Construct a kernel pair from a family letter and its parameter list."""
    try:
        tag = KernelFamily(family)
    except ValueError as exc:
        letters = ", ".join(f.value for f in KernelFamily)
        raise InvalidKernelParametersError(
            f"Unknown kernel family {family!r}; expected one of: {letters}"
        ) from exc
    cls: Any = KERNEL_CLASSES[tag]
    values = list(params)
    if len(values) != len(cls.param_names):
        raise InvalidKernelParametersError(
            f"{tag.name.lower()} kernels expect {len(cls.param_names)} parameters "
            f"({', '.join(cls.param_names)}), got {len(values)}"
        )
    kernels = cls(*values, dimension=dimension, cutoff=cutoff)
    logger.debug("Built %r", kernels)
    return kernels
