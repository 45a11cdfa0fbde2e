# ──────────────────────────────────────────────────────────────────────
# Spatial Moments — Command Line
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
from __future__ import annotations

import logging
import sys
from typing import Dict, Optional, Tuple

import click

from spatial_moments.core.config_schema import Method, validate_problem
from spatial_moments.core.kernels import KernelFamily
from spatial_moments.core.solver import solve
from spatial_moments.errors import (
    InvalidConfigurationError,
    InvalidKernelParametersError,
    SpatialMomentsError,
)
from spatial_moments.io.logging_config import setup_logging
from spatial_moments.io.vector_store import store_result

LOGGER = logging.getLogger("spatial_moments.cli")

DEFAULT_KERNEL_PARAMS: Dict[str, Tuple[float, ...]] = {
    KernelFamily.NORMAL.value: (0.3, 0.3),
    KernelFamily.KURTIC.value: (0.2, 0.6),
    KernelFamily.GENERAL_KURTIC.value: (0.2, 0.6, 0.2, 0.6),
    KernelFamily.EXPONENT.value: (0.2, 0.2),
    KernelFamily.ROUGHGARDEN.value: (0.3, 2.0, 0.3, 2.0),
    KernelFamily.EXPONENT_POLYNOMIAL.value: (1.0, 1.0, 1.0, 1.0),
    KernelFamily.CONSTANT.value: (0.5, 0.5),
}

DISABLED = "n"


class SolveFailed(click.ClickException):
    exit_code = 2


def _configure_logging(level: str, json_logs: bool) -> None:
    numeric = getattr(logging, level.upper(), logging.WARNING)
    if json_logs:
        setup_logging(level=numeric, json_output=True)
        return
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def _parse_radius(value: str) -> Optional[float]:
    if value == DISABLED:
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise click.BadParameter(f"expected a number or '{DISABLED}', got {value!r}") from exc


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("kernel_params", nargs=-1, type=float)
@click.option(
    "-k",
    "--kernel",
    default=KernelFamily.NORMAL.value,
    show_default=True,
    type=click.Choice([f.value for f in KernelFamily], case_sensitive=True),
    help="Kernel family letter.",
)
@click.option("-A", "--alpha", default=0.4, show_default=True, type=float, help="Closure alpha.")
@click.option("-B", "--beta", default=0.2, show_default=True, type=float, help="Closure beta.")
@click.option("-G", "--gamma", default=0.2, show_default=True, type=float, help="Closure gamma.")
@click.option(
    "-m",
    "--method",
    default=Method.NEUMAN.value,
    show_default=True,
    type=click.Choice([m.value for m in Method]),
    help="Equation solving method.",
)
@click.option("-d", "--env-death", "d", default=0.0, show_default=True, type=float,
              help="Environmental death rate.")
@click.option("-b", "--birth", "b", default=1.0, show_default=True, type=float,
              help="Birth rate.")
@click.option("-s", "--death", "s", default=1.0, show_default=True, type=float,
              help="Density-dependent death rate.")
@click.option("-r", "--radius", default=DISABLED, show_default=True,
              help="Domain radius, or 'n' to compute it from the kernels.")
@click.option("-D", "--dimension", default=1, show_default=True, type=int,
              help="Dimensionality of space.")
@click.option("-i", "--iterations", default=500, show_default=True, type=int,
              help="Iteration budget.")
@click.option("-n", "--nodes", default=1000, show_default=True, type=int,
              help="Grid node count.")
@click.option("-p", "--path", default=DISABLED, show_default=True,
              help="Where to store C(r), or 'n' for no data file.")
@click.option("-e", "--accuracy", default=6, show_default=True, type=int,
              help="Accuracy in decimal places.")
@click.option("--ascetic", is_flag=True, help="Print only the first moment.")
@click.option("--plot", "plot_path", default=None, help="Render C(r)/N^2 to this PNG.")
@click.option("--json-logs", is_flag=True, help="Emit structured JSON logs on stdout.")
@click.option(
    "--log-level",
    default="WARNING",
    show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level.",
)
def cli(
    kernel_params: Tuple[float, ...],
    kernel: str,
    alpha: float,
    beta: float,
    gamma: float,
    method: str,
    d: float,
    b: float,
    s: float,
    radius: str,
    dimension: int,
    iterations: int,
    nodes: int,
    path: str,
    accuracy: int,
    ascetic: bool,
    plot_path: Optional[str],
    json_logs: bool,
    log_level: str,
) -> None:
    """EQUILIBRIUM EQUATION SOLVER

    Solves the integral equation for the second spatial moment of the
    Ulf Dieckmann and Richard Law one-species model in equilibrium,
    using the second order closure of the third moment:

    \b
                  1   C(x)C(y)    C(x)C(y-x)    C(y)C(y-x)
        T(x, y) =---(A-------- + B---------- + G---------- - BN^3)
                 A+B     N            N             N

    \b
    KERNEL_PARAMS follow the kernel letter (put them after '--'):
      n  sigma_m sigma_w          normal kernels
      k  s0 s1                    kurtic kernels, m(x) = w(x)
      K  s0m s1m s0w s1w          general kurtic kernels
      e  A B                      exponent kernels
      r  sm gamma_m sw gamma_w    Roughgarden kernels
      p  am bm aw bw              exponent polynomial kernels
      c  rm rw                    constant kernels

    Methods 'lneuman' and 'nystrom' are LINEAR: they ignore A, B and G and
    use the asymmetric closure (A = 1, B = G = 0); they are only available
    in 1D and 3D.  Other dimensions use the naive Hankel transform solver.
    """
    _configure_logging(log_level, json_logs)

    params = kernel_params or DEFAULT_KERNEL_PARAMS[kernel]
    config = {
        "dimension": dimension,
        "nodes": nodes,
        "iterations": iterations,
        "radius": _parse_radius(radius),
        "b": b,
        "s": s,
        "d": d,
        "alpha": alpha,
        "beta": beta,
        "gamma": gamma,
        "accuracy": accuracy,
        "kernels": {"family": kernel, "params": list(params)},
        "method": method,
        "path": None if path == DISABLED else path,
    }
    try:
        problem = validate_problem(config)
    except (InvalidConfigurationError, InvalidKernelParametersError) as exc:
        raise click.ClickException(f"{exc}\n\nRun with -h to get reference.") from exc
    LOGGER.debug("Problem: %s", problem)

    try:
        answer = solve(problem)
    except InvalidConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc
    except SpatialMomentsError as exc:
        raise SolveFailed(str(exc)) from exc

    click.echo(answer.summary(problem.accuracy, ascetic=ascetic))

    if problem.path:
        store_result(answer, problem.path, problem.accuracy)
    if plot_path:
        from spatial_moments.io.plotting import render_result

        render_result(answer, plot_path)


def main() -> int:
    try:
        cli.main(standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.exceptions.Abort:
        return 1
    except SystemExit as exc:
        code = exc.code if isinstance(exc.code, int) else 1
        return code
    return 0


if __name__ == "__main__":
    sys.exit(main())
