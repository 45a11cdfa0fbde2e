# ──────────────────────────────────────────────────────────────────────
# Spatial Moments — Neumann Fixed-Point Solvers
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Neumann (Picard) iteration for the equilibrium moment equations.

The second moment is carried as ``C = N (N + D)``.  Each step convolves
the previous reduced correlation ``D`` with the sampled kernels, applies
the w-integrated closure from :mod:`spatial_moments.core.closure`, and
writes

    D_new = [b m + (b-d) N - s N w + b (m*D) - R] / [d + s w + Δ]

into a fresh buffer.  ``N`` follows from the first-moment balance
``N = (b - d)/s - ∫ w D_new`` (``b/s`` under the linear closure).
Iteration stops when the sup-norm change of ``C`` and the change of ``N``
both drop below ``10^-accuracy``, or when the iteration budget is spent.
Running out of budget is not fatal unless ``fail_on_nonconvergence`` is
set; the last iterate is returned with ``converged=False``.

Variants
--------
* :class:`SolverFFT`: spectral convolution, D in {1, 3}, any closure.
* :class:`LinearSolver`: asymmetric closure (1, 0, 0) only: one
  convolution per step against a cached birth-kernel spectrum.
* :class:`SolverDHTNaive`: naive Hankel-transform convolution, any D.
"""

from __future__ import annotations

import logging
import time
from abc import abstractmethod
from typing import Any, List

import numpy as np
from numpy.typing import NDArray

from spatial_moments.core.closure import Closure
from spatial_moments.core.config_schema import Problem
from spatial_moments.core.convolution import FFTRadialConvolution, HankelRadialConvolution
from spatial_moments.core.grid import RadialGrid
from spatial_moments.core.result import Result
from spatial_moments.core.solver_base import AbstractSolver, SolverMethod
from spatial_moments.errors import InvalidConfigurationError, NonConvergenceError

logger = logging.getLogger(__name__)

FloatArray = NDArray[np.float64]


def anderson_mix(
    history: List[FloatArray],
    residuals: List[FloatArray],
    depth: int = 5,
) -> FloatArray:
    """Anderson acceleration of a fixed-point sequence.

    Computes mixing coefficients from the last ``depth`` residuals via a
    regularised least-squares solve and returns the mixed image
    ``Σ a_j (x_j + r_j)``.

    Parameters
    ----------
    history : list[FloatArray]
        Recent iterates ``x_j``.
    residuals : list[FloatArray]
        Corresponding residuals ``g(x_j) - x_j``.
    depth : int
        Mixing depth.
    """
    k = len(residuals)
    mk = min(depth, k)
    latest = history[-1] + residuals[-1]
    if mk < 2:
        return latest.copy()

    F = np.column_stack(residuals[-mk:])
    dF = np.diff(F, axis=1)
    gram = dF.T @ dF
    gram += 1e-10 * np.eye(gram.shape[0])
    try:
        gamma = np.linalg.solve(gram, dF.T @ F[:, -1])
    except np.linalg.LinAlgError:
        return latest.copy()

    # Differences of consecutive columns map back to weights summing to one.
    weights = np.zeros(mk)
    weights[-1] = 1.0
    weights[1:] -= gamma
    weights[:-1] += gamma

    mixed = np.zeros_like(latest)
    for j, (x_j, r_j) in enumerate(zip(history[-mk:], residuals[-mk:])):
        mixed += weights[j] * (x_j + r_j)
    return mixed


class NeumannSolver(AbstractSolver):
    """Shared fixed-point loop; subclasses choose the operator and update."""

    label = "neuman"

    @abstractmethod
    def _operator(self, grid: RadialGrid) -> Any:
        """Convolution operator for the problem grid."""

    def _balance(self, problem: Problem) -> float:
        return (problem.b - problem.d) / problem.s

    def _context(
        self, problem: Problem, iterations: int, residual: float, density: float
    ) -> dict:
        return {
            "method": self.method.value,
            "dimension": problem.dimension,
            "nodes": problem.nodes,
            "iterations": iterations,
            "residual": residual,
            "N": density,
        }

    def _closure(self, problem: Problem) -> Closure:
        return problem.closure

    def _setup(self, problem: Problem, grid: RadialGrid) -> None:
        self._op = self._operator(grid)
        self._m, self._w = grid.sample(problem.kernels)
        self._closure_used = self._closure(problem)
        self._m_hat = self._op.prepare(self._m)
        self._w_hat = (
            self._op.prepare(self._w) if self._closure_used.needs_cross_terms else None
        )

    def _update(self, problem: Problem, field: FloatArray, density: float) -> FloatArray:
        b, s, d = problem.b, problem.s, problem.d
        closure = self._closure_used
        m, w = self._m, self._w

        m_conv = self._op.apply(self._m_hat, field)
        w_conv = wd_conv = None
        if closure.needs_cross_terms:
            w_conv = self._op.apply(self._w_hat, field)
            wd_conv = self._op(w * field, field)

        numerator = (
            b * m
            + (b - d) * density
            - s * density * w
            + b * m_conv
            - closure.remainder(density, field, w_conv, wd_conv, b, d, s)
        )
        denominator = d + s * w + closure.diagonal(density, b, d, s)
        if np.any(denominator <= 0.0):
            raise NonConvergenceError(
                f"{self.label}: balance denominator is not positive (N={density:.6g})"
            )
        return numerator / denominator

    def solve(self, problem: Problem) -> Result:
        t0 = time.perf_counter()
        grid = problem.grid()
        self._setup(problem, grid)

        balance = self._balance(problem)
        tol = problem.tolerance
        depth = problem.anderson_depth
        logger.debug("%s: %r, closure=%r, iterations=%d", self.label, grid,
                     self._closure_used, problem.iterations)

        field = np.zeros(grid.nodes, dtype=np.float64)
        density = balance
        second = density * (density + field)

        history: List[FloatArray] = []
        residuals: List[FloatArray] = []
        converged = False
        residual = float("inf")
        iterations = 0

        for k in range(problem.iterations):
            iterations = k + 1
            new_field = self._update(problem, field, density)

            if depth > 0:
                history.append(field)
                residuals.append(new_field - field)
                new_field = anderson_mix(history, residuals, depth)
                if len(history) > depth:
                    history.pop(0)
                    residuals.pop(0)

            new_density = balance - grid.integrate(self._w * new_field)
            if not np.all(np.isfinite(new_field)) or not np.isfinite(new_density):
                raise NonConvergenceError(f"{self.label} diverged at iter={k}")

            new_second = new_density * (new_density + new_field)
            residual = max(
                float(np.max(np.abs(new_second - second))),
                abs(new_density - density),
            )
            field, density, second = new_field, new_density, new_second

            if residual < tol:
                converged = True
                context = self._context(problem, iterations, residual, density)
                logger.info(
                    "%s converged at iter %d.  Update residual: %.6e | N=%.6g",
                    self.label,
                    k,
                    residual,
                    density,
                    extra={"solver_context": context},
                )
                break

            if k % 100 == 0:
                logger.debug("%s iter %d: res=%.3e | N=%.6g", self.label, k, residual, density)

        if not converged:
            context = self._context(problem, iterations, residual, density)
            logger.warning(
                "%s did not reach 1e-%d within %d iterations (residual %.3e); "
                "returning the last iterate.",
                self.label,
                problem.accuracy,
                problem.iterations,
                residual,
                extra={"solver_context": context},
            )
            if problem.fail_on_nonconvergence:
                raise NonConvergenceError(
                    f"{self.label} did not converge in {problem.iterations} iterations "
                    f"(residual={residual:.3e})"
                )

        logger.debug("%s finished in %.3fs", self.label, time.perf_counter() - t0)
        return Result(
            C=second,
            N=density,
            step=grid.step,
            origin=grid.origin,
            method=self.method.value,
            iterations=iterations,
            converged=converged,
            residual=residual,
        )


class SolverFFT(NeumannSolver):
    """Nonlinear Neumann iteration with spectral convolution (D = 1 or 3)."""

    method = SolverMethod.NEUMAN_FFT
    label = "neuman"

    def _operator(self, grid: RadialGrid) -> FFTRadialConvolution:
        return FFTRadialConvolution(grid)


class LinearSolver(SolverFFT):
    """Neumann iteration for the asymmetric linear closure (D = 1 or 3).

    ``D_new = [b m - s N w + b (m*D)] / (b + s w)``

    Under this closure the third-moment term integrates to ``(b - d) C``,
    so ``d`` cancels from the pair equation.  Integrating what is left over
    space gives ``N = b/s - ∫ w D`` for any decaying ``D``; that balance
    fixes ``N`` here.  With ``d > 0`` the first-moment balance
    ``(b - d)/s - ∫ w D`` has no decaying solution in one dimension, and
    imposing it on a truncated grid makes ``N`` drift with the radius.
    """

    method = SolverMethod.LINEAR_NEUMAN
    label = "lneuman"

    def _closure(self, problem: Problem) -> Closure:
        return Closure.linear()

    def _setup(self, problem: Problem, grid: RadialGrid) -> None:
        super()._setup(problem, grid)
        denominator = problem.b + problem.s * self._w
        if np.any(denominator <= 0.0):
            raise InvalidConfigurationError(
                "linear closure needs b + s*w(r) > 0 on the whole grid; "
                "use b > 0 or a death kernel without compact support"
            )
        self._inv_denominator = 1.0 / denominator
        self._source = problem.b * self._m

    def _balance(self, problem: Problem) -> float:
        return problem.b / problem.s

    def _update(self, problem: Problem, field: FloatArray, density: float) -> FloatArray:
        m_conv = self._op.apply(self._m_hat, field)
        numerator = self._source - problem.s * density * self._w + problem.b * m_conv
        return numerator * self._inv_denominator


class SolverDHTNaive(NeumannSolver):
    """Nonlinear Neumann iteration with a naive Hankel-transform convolution.

    Used for dimensions without a spectral shortcut (D not in {1, 3}).
    Each convolution costs O(n²).
    """

    method = SolverMethod.DHT_NAIVE
    label = "dht-naive"

    def _operator(self, grid: RadialGrid) -> HankelRadialConvolution:
        return HankelRadialConvolution(grid)
