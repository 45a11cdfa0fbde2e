# ──────────────────────────────────────────────────────────────────────
# Spatial Moments — Solver Dispatch
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""Pick the solver for a problem and run it."""

from __future__ import annotations

import logging
from typing import Dict, Optional, Type, Union

from spatial_moments.core.config_schema import Method, Problem
from spatial_moments.core.convolution import FFT_DIMENSIONS
from spatial_moments.core.neumann import LinearSolver, SolverDHTNaive, SolverFFT
from spatial_moments.core.nystrom import NystromSolver
from spatial_moments.core.result import Result
from spatial_moments.core.solver_base import AbstractSolver, SolverMethod

logger = logging.getLogger(__name__)

SOLVERS: Dict[SolverMethod, Type[AbstractSolver]] = {
    SolverMethod.NEUMAN_FFT: SolverFFT,
    SolverMethod.LINEAR_NEUMAN: LinearSolver,
    SolverMethod.NYSTROM: NystromSolver,
    SolverMethod.DHT_NAIVE: SolverDHTNaive,
}


def select_method(problem: Problem) -> SolverMethod:
    """Dimension first: anything outside {1, 3} goes to the naive transform."""
    if problem.dimension not in FFT_DIMENSIONS:
        return SolverMethod.DHT_NAIVE
    if problem.method is Method.LNEUMAN:
        return SolverMethod.LINEAR_NEUMAN
    if problem.method is Method.NYSTROM:
        return SolverMethod.NYSTROM
    return SolverMethod.NEUMAN_FFT


def solve(problem: Problem, method: Optional[Union[str, SolverMethod]] = None) -> Result:
    tag = select_method(problem) if method is None else SolverMethod(method)
    solver = SOLVERS[tag]()
    logger.info("Solving with %s (dimension=%d, nodes=%d)", tag.value, problem.dimension,
                problem.nodes)
    return solver.solve(problem)
