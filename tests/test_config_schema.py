from __future__ import annotations

import pytest
from pydantic import ValidationError

from spatial_moments.core.closure import Closure
from spatial_moments.core.config_schema import Method, Problem, validate_problem
from spatial_moments.core.kernels import NormalKernels
from spatial_moments.errors import InvalidConfigurationError, InvalidKernelParametersError


def _base_config() -> dict:
    return {
        "dimension": 1,
        "nodes": 64,
        "iterations": 500,
        "b": 1.0,
        "s": 0.5,
        "d": 0.1,
        "kernels": {"family": "n", "params": [0.3, 0.3]},
        "method": "lneuman",
    }


def test_validate_problem_returns_model() -> None:
    problem = validate_problem(_base_config())
    assert isinstance(problem, Problem)
    assert problem.method is Method.LNEUMAN
    assert problem.kernels.dimension == 1
    assert problem.accuracy == 6


def test_kernel_mapping_is_bound_to_problem_dimension() -> None:
    cfg = _base_config()
    cfg["dimension"] = 3
    problem = validate_problem(cfg)
    assert problem.kernels.dimension == 3


@pytest.mark.parametrize("method", ["lneuman", "nystrom"])
@pytest.mark.parametrize("dimension", [2, 4])
def test_linear_methods_reject_unsupported_dimension(method: str, dimension: int) -> None:
    cfg = _base_config()
    cfg["method"] = method
    cfg["dimension"] = dimension
    with pytest.raises(InvalidConfigurationError, match="only available"):
        validate_problem(cfg)


def test_nonlinear_method_accepts_any_dimension() -> None:
    cfg = _base_config()
    cfg["method"] = "neuman"
    cfg["dimension"] = 2
    assert validate_problem(cfg).dimension == 2


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("s", 0.0),
        ("s", -1.0),
        ("b", -0.5),
        ("d", -0.1),
        ("radius", 0.0),
        ("nodes", 0),
        ("iterations", 0),
        ("accuracy", 0),
        ("alpha", float("nan")),
        ("radius", float("inf")),
    ],
)
def test_validate_problem_rejects_invalid_values(field: str, value) -> None:
    cfg = _base_config()
    cfg["method"] = "neuman"
    cfg[field] = value
    with pytest.raises(InvalidConfigurationError, match=field):
        validate_problem(cfg)


def test_undefined_closure_rejected_for_nonlinear_method() -> None:
    cfg = _base_config()
    cfg.update(method="neuman", alpha=1.0, beta=-1.0)
    with pytest.raises(InvalidConfigurationError, match="alpha \\+ beta"):
        validate_problem(cfg)


def test_linear_method_forces_asymmetric_closure() -> None:
    cfg = _base_config()
    cfg.update(alpha=1.0, beta=-1.0, gamma=5.0)
    problem = validate_problem(cfg)
    assert problem.closure == Closure.linear()
    assert problem.is_linear


def test_nonlinear_method_keeps_user_closure() -> None:
    cfg = _base_config()
    cfg.update(method="neuman", alpha=0.5, beta=0.3, gamma=0.1)
    assert validate_problem(cfg).closure == Closure(0.5, 0.3, 0.1)


def test_unknown_method_rejected() -> None:
    cfg = _base_config()
    cfg["method"] = "simpson"
    with pytest.raises(InvalidConfigurationError, match="method"):
        validate_problem(cfg)


def test_kernel_dimension_mismatch_rejected() -> None:
    cfg = _base_config()
    cfg.update(dimension=3, kernels=NormalKernels(0.3, 0.3, dimension=1))
    with pytest.raises(InvalidConfigurationError, match="normalised for dimension 1"):
        validate_problem(cfg)


def test_bad_kernel_parameters_surface_before_validation() -> None:
    cfg = _base_config()
    cfg["kernels"] = {"family": "n", "params": [0.3, -0.3]}
    with pytest.raises(InvalidKernelParametersError, match="sigma_w"):
        validate_problem(cfg)


def test_auto_radius_covers_kernel_support() -> None:
    problem = validate_problem(_base_config())
    support = problem.kernels.support_radius(1e-6)
    assert problem.effective_radius == pytest.approx(2.0 * support)
    assert problem.step == pytest.approx(problem.effective_radius / 64)
    assert problem.origin == 0.0
    assert problem.tolerance == pytest.approx(1e-6)


def test_explicit_radius_is_used() -> None:
    cfg = _base_config()
    cfg["radius"] = 2.5
    problem = validate_problem(cfg)
    assert problem.effective_radius == 2.5
    grid = problem.grid()
    assert grid.nodes == 64
    assert grid.radii[-1] == pytest.approx(2.5 - 2.5 / 64)


def test_problem_is_immutable() -> None:
    problem = validate_problem(_base_config())
    with pytest.raises(ValidationError):
        problem.b = 2.0  # type: ignore[misc]


def test_direct_construction_rejects_linear_method_in_two_dimensions() -> None:
    with pytest.raises(InvalidConfigurationError, match="only available"):
        Problem(dimension=2, method="lneuman", kernels=NormalKernels(0.3, 0.3, dimension=2))


def test_direct_construction_rejects_undefined_closure() -> None:
    with pytest.raises(InvalidConfigurationError, match="alpha \\+ beta"):
        Problem(alpha=1.0, beta=-1.0, kernels=NormalKernels(0.3, 0.3))


def test_direct_construction_rejects_non_positive_rate() -> None:
    with pytest.raises(InvalidConfigurationError, match="s"):
        Problem(s=0.0, kernels=NormalKernels(0.3, 0.3))


def test_direct_construction_accepts_valid_fields() -> None:
    problem = Problem(dimension=3, method="nystrom", kernels=NormalKernels(0.3, 0.3, dimension=3))
    assert problem.method is Method.NYSTROM
    assert problem.is_linear
