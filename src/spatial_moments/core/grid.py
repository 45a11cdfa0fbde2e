# ──────────────────────────────────────────────────────────────────────
# Spatial Moments — Radial Grid
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""Uniform radial grid ``r_i = i h`` on ``[0, R)`` shared by all solvers."""

from __future__ import annotations

import logging
from typing import Tuple

import numpy as np
from numpy.typing import NDArray

from spatial_moments.core.kernels import DispersalKernels, sphere_area
from spatial_moments.errors import InvalidConfigurationError

logger = logging.getLogger(__name__)

FloatArray = NDArray[np.float64]

# Domain radius in units of the widest kernel support.
AUTO_RADIUS_FACTOR = 2.0


def auto_radius(kernels: DispersalKernels, accuracy: int) -> float:
    """Domain radius outside of which both kernels hold less than 10^-accuracy mass."""
    support = kernels.support_radius(10.0 ** (-int(accuracy)))
    radius = AUTO_RADIUS_FACTOR * support
    logger.debug("Auto radius: support=%.6g -> R=%.6g", support, radius)
    return radius


class RadialGrid:
    """Radial sample points plus the volume quadrature used by every method.

    In one dimension the radial samples stand for the even extension on
    ``(-R, R)``, so every node except the origin carries weight ``2h``.
    In higher dimensions the weight is ``S_D h r^{D-1}``.
    """

    def __init__(self, dimension: int, nodes: int, radius: float) -> None:
        if int(dimension) < 1:
            raise InvalidConfigurationError(f"dimension must be >= 1, got {dimension!r}")
        if int(nodes) < 1:
            raise InvalidConfigurationError(f"nodes must be >= 1, got {nodes!r}")
        if not np.isfinite(radius) or radius <= 0.0:
            raise InvalidConfigurationError(f"radius must be finite and > 0, got {radius!r}")
        self.dimension = int(dimension)
        self.nodes = int(nodes)
        self.radius = float(radius)
        self.step = self.radius / self.nodes
        self.origin = 0.0
        self.radii: FloatArray = self.origin + self.step * np.arange(self.nodes, dtype=np.float64)

    @property
    def volume_weights(self) -> FloatArray:
        h = self.step
        if self.dimension == 1:
            weights = np.full(self.nodes, 2.0 * h)
            weights[0] = h
            return weights
        return sphere_area(self.dimension) * h * self.radii ** (self.dimension - 1)

    def integrate(self, values: FloatArray) -> float:
        """Quadrature of a radial field over the D-dimensional domain."""
        return float(np.dot(self.volume_weights, values))

    def sample(self, kernels: DispersalKernels) -> Tuple[FloatArray, FloatArray]:
        """Sample (m, w) on the grid, rescaled to unit discrete mass."""
        return self._normalised(kernels.birth(self.radii), "m"), self._normalised(
            kernels.death(self.radii), "w"
        )

    def _normalised(self, values: FloatArray, name: str) -> FloatArray:
        mass = self.integrate(values)
        if not np.isfinite(mass) or mass <= 0.0:
            raise InvalidConfigurationError(
                f"kernel '{name}' has no mass on a {self.dimension}D grid of "
                f"{self.nodes} node(s) with R={self.radius:g}; refine the grid"
            )
        if mass < 0.9:
            logger.warning(
                "Kernel '%s' keeps only %.3f of its mass on the grid (R=%.4g); "
                "results are truncation dominated.",
                name,
                mass,
                self.radius,
            )
        return values / mass

    def __repr__(self) -> str:
        return (
            f"RadialGrid(dimension={self.dimension}, nodes={self.nodes}, "
            f"radius={self.radius:g}, step={self.step:g})"
        )
