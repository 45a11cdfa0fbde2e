# ──────────────────────────────────────────────────────────────────────
# Spatial Moments — Core Package Init
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
from .closure import Closure
from .config_schema import Method, Problem, validate_problem
from .convolution import FFTRadialConvolution, HankelRadialConvolution, convolution_matrix
from .grid import RadialGrid, auto_radius
from .kernels import (
    ConstantKernels,
    DispersalKernels,
    ExponentKernels,
    ExponentPolynomialKernels,
    GeneralKurticKernels,
    KernelFamily,
    KurticKernels,
    NormalKernels,
    RoughgardenKernels,
    build_kernels,
)
from .neumann import LinearSolver, SolverDHTNaive, SolverFFT
from .nystrom import NystromSolver
from .result import Result
from .solver import SOLVERS, select_method, solve
from .solver_base import AbstractSolver, SolverMethod

__all__ = [
    "AbstractSolver",
    "Closure",
    "ConstantKernels",
    "DispersalKernels",
    "ExponentKernels",
    "ExponentPolynomialKernels",
    "FFTRadialConvolution",
    "GeneralKurticKernels",
    "HankelRadialConvolution",
    "KernelFamily",
    "KurticKernels",
    "LinearSolver",
    "Method",
    "NormalKernels",
    "NystromSolver",
    "Problem",
    "RadialGrid",
    "Result",
    "RoughgardenKernels",
    "SOLVERS",
    "SolverDHTNaive",
    "SolverFFT",
    "SolverMethod",
    "auto_radius",
    "build_kernels",
    "convolution_matrix",
    "select_method",
    "solve",
    "validate_problem",
]
