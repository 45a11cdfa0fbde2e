# ──────────────────────────────────────────────────────────────────────
# Spatial Moments — Radial Convolution Operators
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
D-dimensional convolution of radial fields sampled on a :class:`RadialGrid`.

Two operators share one interface (``prepare`` a fixed left operand once,
``apply`` it to many right operands, or simply call ``op(g, f)``):

* :class:`FFTRadialConvolution`: D = 1 and D = 3 only.  In 1D the radial
  samples are extended evenly and convolved on the line.  In 3D the
  identity

      r (g*f)(r) = 2π ∫ ρ f(ρ) G(r - ρ) dρ,   G(t) = ∫_|t|^∞ s g(s) ds

  reduces the problem to a 1D convolution of the odd field ``ρ f(ρ)``
  with the even antiderivative ``G``.
* :class:`HankelRadialConvolution`: any D.  Naive O(n²) discrete Hankel
  transform of order ``ν = D/2 - 1`` on a zero-padded grid, product of
  spectra, inverse transform.

:func:`convolution_matrix` assembles the dense Nystrom matrix whose
product with a field reproduces the FFT operator's quadrature exactly.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from scipy import fft as sp_fft
from scipy.special import gamma as gamma_fn
from scipy.special import jv

from spatial_moments.core.grid import RadialGrid
from spatial_moments.errors import InvalidConfigurationError

FloatArray = NDArray[np.float64]

FFT_DIMENSIONS = (1, 3)


def _even_extension(values: FloatArray) -> FloatArray:
    return np.concatenate([values[:0:-1], values])


def _odd_extension(values: FloatArray) -> FloatArray:
    return np.concatenate([-values[:0:-1], values])


def radial_antiderivative(grid: RadialGrid, g: FloatArray) -> FloatArray:
    """Trapezoid table of ``G(r_i) = ∫_{r_i}^R s g(s) ds``."""
    integrand = grid.radii * g
    tail = np.cumsum(integrand[::-1])[::-1]
    return grid.step * (tail - 0.5 * integrand)


@dataclass(frozen=True)
class _Prepared:
    spectrum: np.ndarray
    kernel: FloatArray


class FFTRadialConvolution:
    """Spectral radial convolution for D in {1, 3}."""

    def __init__(self, grid: RadialGrid) -> None:
        if grid.dimension not in FFT_DIMENSIONS:
            raise InvalidConfigurationError(
                f"FFT convolution supports dimensions {FFT_DIMENSIONS}, got {grid.dimension}"
            )
        self.grid = grid
        n = grid.nodes
        line = 2 * n - 1
        self._full = 2 * line - 1
        self._nfft = sp_fft.next_fast_len(self._full, real=True)
        # Full-convolution index of the r = 0 sample.
        self._offset = 2 * (n - 1)

    def prepare(self, g: FloatArray) -> _Prepared:
        g = np.asarray(g, dtype=np.float64)
        if self.grid.dimension == 1:
            line = _even_extension(g)
        else:
            line = _even_extension(radial_antiderivative(self.grid, g))
        return _Prepared(sp_fft.rfft(line, n=self._nfft), g)

    def apply(self, prepared: _Prepared, f: FloatArray) -> FloatArray:
        grid = self.grid
        f = np.asarray(f, dtype=np.float64)
        h = grid.step
        n = grid.nodes
        if grid.dimension == 1:
            line = _even_extension(f)
        else:
            line = _odd_extension(grid.radii * f)
        full = sp_fft.irfft(sp_fft.rfft(line, n=self._nfft) * prepared.spectrum, n=self._nfft)
        window = full[self._offset:self._offset + n]
        if grid.dimension == 1:
            return h * window

        out = np.empty(n, dtype=np.float64)
        out[0] = 4.0 * math.pi * h * float(np.dot(grid.radii**2, f * prepared.kernel))
        out[1:] = 2.0 * math.pi * h * window[1:] / grid.radii[1:]
        return out

    def __call__(self, g: FloatArray, f: FloatArray) -> FloatArray:
        return self.apply(self.prepare(g), f)


def convolution_matrix(grid: RadialGrid, g: FloatArray) -> FloatArray:
    """Dense matrix M with ``M @ f`` equal to ``FFTRadialConvolution(grid)(g, f)``."""
    if grid.dimension not in FFT_DIMENSIONS:
        raise InvalidConfigurationError(
            f"Nystrom quadrature supports dimensions {FFT_DIMENSIONS}, got {grid.dimension}"
        )
    n = grid.nodes
    h = grid.step
    idx = np.arange(n)
    diff = np.abs(idx[:, None] - idx[None, :])
    total = idx[:, None] + idx[None, :]

    if grid.dimension == 1:
        padded = np.concatenate([np.asarray(g, dtype=np.float64), np.zeros(n)])
        matrix = h * (padded[diff] + padded[total])
        matrix[:, 0] = h * padded[idx]
        return matrix

    G = np.concatenate([radial_antiderivative(grid, g), np.zeros(n)])
    r = grid.radii
    matrix = np.empty((n, n), dtype=np.float64)
    matrix[0, :] = 4.0 * math.pi * h * r**2 * g
    if n > 1:
        matrix[1:, :] = (
            2.0 * math.pi * h * (r[None, :] / r[1:, None]) * (G[diff[1:]] - G[total[1:]])
        )
    return matrix


class HankelRadialConvolution:
    """Naive discrete Hankel transform convolution, valid for every D.

    The grid is zero-padded to ``2R`` (``2n + 1`` samples) so that the
    product of spectra does not alias the convolution back onto ``[0, R)``.
    Frequencies are ``k_m = m π / 2R``.  For D = 1 the transform pair is
    the DCT-I and reproduces the 1D FFT operator.
    """

    def __init__(self, grid: RadialGrid) -> None:
        self.grid = grid
        dim = grid.dimension
        n = grid.nodes
        h = grid.step
        size = 2 * n + 1
        self._size = size
        length = 2 * n * h
        self.r = h * np.arange(size, dtype=np.float64)
        self.k = (math.pi / length) * np.arange(size, dtype=np.float64)
        dk = self.k[1] - self.k[0]

        nu = dim / 2.0 - 1.0
        z = np.outer(self.k, self.r)
        basis = np.empty_like(z)
        positive = z > 0.0
        basis[positive] = jv(nu, z[positive]) * z[positive] ** (-nu)
        basis[~positive] = 1.0 / (2.0**nu * gamma_fn(nu + 1.0))
        self._basis = basis

        wr = np.full(size, h)
        wr[[0, -1]] *= 0.5
        wk = np.full(size, dk)
        wk[[0, -1]] *= 0.5
        scale = (2.0 * math.pi) ** (dim / 2.0)
        self._forward_weights = scale * wr * self.r ** (dim - 1)
        self._inverse_weights = wk * self.k ** (dim - 1) / scale

    def _pad(self, values: FloatArray) -> FloatArray:
        out = np.zeros(self._size, dtype=np.float64)
        out[: self.grid.nodes] = values
        return out

    def transform(self, values: FloatArray) -> FloatArray:
        """Forward D-dimensional Fourier transform of a radial field."""
        return self._basis @ (self._forward_weights * self._pad(np.asarray(values, dtype=np.float64)))

    def inverse(self, spectrum: FloatArray) -> FloatArray:
        """Inverse transform, returned on the unpadded grid."""
        full = self._basis.T @ (self._inverse_weights * spectrum)
        return full[: self.grid.nodes]

    def prepare(self, g: FloatArray) -> FloatArray:
        return self.transform(g)

    def apply(self, prepared: FloatArray, f: FloatArray) -> FloatArray:
        return self.inverse(prepared * self.transform(f))

    def __call__(self, g: FloatArray, f: FloatArray) -> FloatArray:
        return self.apply(self.prepare(g), f)
