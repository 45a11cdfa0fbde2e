# ─────────────────────────────────────────────────────────────────────
# Spatial Moments — Problem Configuration Schema
# © 1998–2026 Miroslav Šotek. All rights reserved.
# ─────────────────────────────────────────────────────────────────────
"""
Strict schema validation for equilibrium problems using Pydantic.
Rejects incompatible dimension/method pairs and undefined closures before
any numerical work starts.
"""

from __future__ import annotations

import math
from enum import Enum
from functools import cached_property
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from spatial_moments.core.closure import Closure
from spatial_moments.core.grid import RadialGrid, auto_radius
from spatial_moments.core.kernels import DispersalKernels, build_kernels
from spatial_moments.errors import InvalidConfigurationError

LINEAR_DIMENSIONS = (1, 3)


class Method(str, Enum):
    NEUMAN = "neuman"
    LNEUMAN = "lneuman"
    NYSTROM = "nystrom"

    @property
    def is_linear(self) -> bool:
        return self is not Method.NEUMAN


class Problem(BaseModel):
    """Read-only bundle handed to every solver."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    dimension: int = Field(default=1, ge=1)
    nodes: int = Field(default=1000, ge=1)
    iterations: int = Field(default=500, ge=1)
    radius: Optional[float] = Field(default=None, gt=0)
    b: float = Field(default=1.0, ge=0)
    s: float = Field(default=1.0, gt=0)
    d: float = Field(default=0.0, ge=0)
    alpha: float = 0.4
    beta: float = 0.2
    gamma: float = 0.2
    accuracy: int = Field(default=6, ge=1, le=15)
    kernels: DispersalKernels
    method: Method = Method.NEUMAN
    anderson_depth: int = Field(default=0, ge=0)
    fail_on_nonconvergence: bool = False
    singular_rcond: float = Field(default=1e-12, gt=0, lt=1)
    path: Optional[str] = None

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise InvalidConfigurationError(str(exc)) from exc

    @field_validator("b", "s", "d", "alpha", "beta", "gamma", "radius")
    @classmethod
    def check_finite(cls, v: Optional[float], info):
        if v is not None and not math.isfinite(v):
            raise ValueError(f"{info.field_name} must be finite")
        return v

    @model_validator(mode="after")
    def check_compatibility(self) -> "Problem":
        if self.method.is_linear and self.dimension not in LINEAR_DIMENSIONS:
            raise ValueError(
                f"method '{self.method.value}' is only available for dimensions "
                f"{LINEAR_DIMENSIONS}, got dimension={self.dimension}"
            )
        if not self.method.is_linear and self.alpha + self.beta == 0.0:
            raise ValueError("alpha + beta must be non-zero for the closure to be defined")
        if self.kernels.dimension != self.dimension:
            raise ValueError(
                f"kernels are normalised for dimension {self.kernels.dimension}, "
                f"problem has dimension {self.dimension}"
            )
        return self

    # ── derived, read-only ────────────────────────────────────────────

    @property
    def is_linear(self) -> bool:
        return self.method.is_linear

    @property
    def closure(self) -> Closure:
        """Effective closure; linear methods always use (1, 0, 0)."""
        if self.is_linear:
            return Closure.linear()
        return Closure(self.alpha, self.beta, self.gamma)

    @cached_property
    def effective_radius(self) -> float:
        if self.radius is not None:
            return float(self.radius)
        return auto_radius(self.kernels, self.accuracy)

    @property
    def step(self) -> float:
        return self.effective_radius / self.nodes

    @property
    def origin(self) -> float:
        return 0.0

    @property
    def tolerance(self) -> float:
        return 10.0 ** (-self.accuracy)

    def grid(self) -> RadialGrid:
        return RadialGrid(self.dimension, self.nodes, self.effective_radius)


def validate_problem(config: Dict[str, Any]) -> Problem:
    """Build a Problem from a raw mapping.

    ``kernels`` may be a kernel instance or a mapping
    ``{"family": "n", "params": [0.3, 0.3]}``; the kernels are then bound
    to the problem's dimension.
    """
    data = dict(config)
    kernels = data.get("kernels")
    if isinstance(kernels, dict):
        try:
            dimension = int(data.get("dimension", 1))
        except (TypeError, ValueError) as exc:
            raise InvalidConfigurationError(
                f"dimension must be an integer, got {data.get('dimension')!r}"
            ) from exc
        data["kernels"] = build_kernels(
            kernels.get("family", "n"),
            kernels.get("params", ()),
            dimension=dimension,
        )
    try:
        return Problem.model_validate(data)
    except ValidationError as exc:
        raise InvalidConfigurationError(str(exc)) from exc
