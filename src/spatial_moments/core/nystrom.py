# ──────────────────────────────────────────────────────────────────────
# Spatial Moments — Nystrom Solver
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Direct quadrature solve of the linear-closure equilibrium equations.

Unknowns are the reduced correlation samples ``D_0 .. D_{n-1}`` and the
first moment ``N``::

    (b + s w_i) D_i - b Σ_j M_ij D_j + s w_i N = b m_i
    N + Σ_j q_j w_j D_j                       = b / s

``M`` is the birth-kernel convolution matrix and ``q`` the volume
quadrature weights of the grid.  The closure weights never enter.  The
last row is the space-integrated pair equation; under the linear closure
the environmental death rate cancels from it, see
:class:`spatial_moments.core.neumann.LinearSolver`.
"""

from __future__ import annotations

import logging
import time

import numpy as np
from scipy.linalg import LinAlgError, lu_factor, lu_solve

from spatial_moments.core.config_schema import Problem
from spatial_moments.core.convolution import convolution_matrix
from spatial_moments.core.result import Result
from spatial_moments.core.solver_base import AbstractSolver, SolverMethod
from spatial_moments.errors import SingularSystemError

logger = logging.getLogger(__name__)


class NystromSolver(AbstractSolver):
    """Single dense LU solve; no iteration (D = 1 or 3)."""

    method = SolverMethod.NYSTROM

    def assemble(self, problem: Problem) -> tuple[np.ndarray, np.ndarray]:
        """Build the (n+1) x (n+1) system matrix and right-hand side."""
        grid = problem.grid()
        m, w = grid.sample(problem.kernels)
        b, s, d = problem.b, problem.s, problem.d
        n = grid.nodes

        A = np.zeros((n + 1, n + 1), dtype=np.float64)
        A[:n, :n] = np.diag(b + s * w) - b * convolution_matrix(grid, m)
        A[:n, n] = s * w
        A[n, :n] = grid.volume_weights * w
        A[n, n] = 1.0

        rhs = np.empty(n + 1, dtype=np.float64)
        rhs[:n] = b * m
        rhs[n] = b / s
        return A, rhs

    def solve(self, problem: Problem) -> Result:
        t0 = time.perf_counter()
        A, rhs = self.assemble(problem)
        n = A.shape[0] - 1

        with np.errstate(divide="ignore", invalid="ignore"):
            cond = float(np.linalg.cond(A))
        rcond = 0.0 if not np.isfinite(cond) or cond == 0.0 else 1.0 / cond
        if rcond < problem.singular_rcond:
            raise SingularSystemError(
                f"Nystrom matrix is numerically singular (rcond={rcond:.3e} < "
                f"{problem.singular_rcond:.1e}, n={n})"
            )

        try:
            lu, piv = lu_factor(A, check_finite=True)
        except (LinAlgError, ValueError) as exc:
            raise SingularSystemError(f"LU factorisation failed: {exc}") from exc
        x = lu_solve((lu, piv), rhs)
        if not np.all(np.isfinite(x)):
            raise SingularSystemError("Nystrom solve produced non-finite values")

        field = x[:n]
        density = float(x[n])
        residual = float(np.max(np.abs(A @ x - rhs)))
        logger.info(
            "Nystrom solved n=%d in %.3fs (rcond=%.3e, residual=%.3e, N=%.6g)",
            n,
            time.perf_counter() - t0,
            rcond,
            residual,
            density,
            extra={
                "solver_context": {
                    "method": self.method.value,
                    "dimension": problem.dimension,
                    "nodes": n,
                    "rcond": rcond,
                    "residual": residual,
                    "N": density,
                }
            },
        )
        grid_step = problem.step
        return Result(
            C=density * (density + field),
            N=density,
            step=grid_step,
            origin=problem.origin,
            method=self.method.value,
            iterations=1,
            converged=True,
            residual=residual,
        )
