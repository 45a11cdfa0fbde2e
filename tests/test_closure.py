# ──────────────────────────────────────────────────────────────────────
# Spatial Moments — Closure Tests
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
import numpy as np
import pytest

from spatial_moments.core.closure import Closure
from spatial_moments.errors import InvalidConfigurationError


def test_linear_closure_is_product_over_n() -> None:
    closure = Closure.linear()
    value = closure.evaluate([2.0, 3.0], [4.0, 5.0], None, 2.0)
    np.testing.assert_allclose(value, [4.0, 7.5])


def test_linear_closure_flags() -> None:
    closure = Closure.linear()
    assert closure.is_linear
    assert not closure.needs_cross_terms
    assert closure.norm == 1.0


def test_symmetric_closure_matches_formula() -> None:
    closure = Closure(0.4, 0.2, 0.2)
    cx, cy, cyx, n = 1.5, 1.2, 1.1, 1.0
    expected = (0.4 * cx * cy + 0.2 * cx * cyx + 0.2 * cy * cyx - 0.2 * n**4) / (0.6 * n)
    assert float(closure.evaluate(cx, cy, cyx, n)) == pytest.approx(expected)


def test_uncorrelated_population_reproduces_n_cubed() -> None:
    closure = Closure(0.4, 0.2, 0.2)
    n = 1.7
    c = n * n
    assert float(closure.evaluate(c, c, c, n)) == pytest.approx(n**3)


def test_nonlinear_closure_requires_offset_moment() -> None:
    with pytest.raises(ValueError, match="c_yx"):
        Closure(0.4, 0.2, 0.2).evaluate(1.0, 1.0, None, 1.0)


@pytest.mark.parametrize(
    ("alpha", "beta", "gamma", "field"),
    [
        (1.0, -1.0, 0.0, "alpha \\+ beta"),
        (0.0, 0.0, 1.0, "alpha \\+ beta"),
        (float("nan"), 0.0, 0.0, "alpha"),
        (1.0, 0.0, float("inf"), "gamma"),
    ],
)
def test_closure_rejects_undefined_weights(alpha, beta, gamma, field) -> None:
    with pytest.raises(InvalidConfigurationError, match=field):
        Closure(alpha, beta, gamma)


def test_diagonal_coefficient() -> None:
    closure = Closure(0.4, 0.2, 0.2)
    assert closure.diagonal(n=2.0, b=1.0, d=0.2, s=0.5) == pytest.approx(
        (0.4 * 0.8 + 0.5 * 0.2 * 2.0) / 0.6
    )


def test_linear_remainder_ignores_convolutions() -> None:
    closure = Closure.linear()
    field = np.array([0.3, 0.1, 0.0])
    out = closure.remainder(2.0, field, None, None, b=1.0, d=0.2, s=0.5)
    np.testing.assert_allclose(out, np.full(3, 0.8 * 2.0))


def test_remainder_includes_cross_terms() -> None:
    closure = Closure(0.4, 0.2, 0.2)
    field = np.array([0.3, 0.1])
    w_conv = np.array([0.05, 0.02])
    wd_conv = np.array([0.01, 0.004])
    n, b, d, s = 1.5, 1.0, 0.1, 0.6
    expected = (
        0.6 * (b - d) * n
        + s * 0.2 * (n + field) * w_conv
        + s * 0.2 * (n * w_conv + wd_conv)
    ) / 0.6
    np.testing.assert_allclose(
        closure.remainder(n, field, w_conv, wd_conv, b, d, s), expected
    )


def test_remainder_requires_cross_terms_when_nonlinear() -> None:
    with pytest.raises(ValueError, match="cross convolutions"):
        Closure(0.4, 0.2, 0.2).remainder(1.0, np.zeros(2), None, None, 1.0, 0.0, 1.0)
