# ──────────────────────────────────────────────────────────────────────
# Spatial Moments — Vector Store
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Plain-text storage of sampled radial fields.

One ``x value`` pair per line, ``x = origin + i * step``, both printed with
``accuracy`` decimal places.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray

from spatial_moments.core.result import Result

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def store_vector(
    values: ArrayLike,
    path: PathLike,
    step: float,
    origin: float = 0.0,
    accuracy: int = 6,
) -> Path:
    data = np.asarray(values, dtype=np.float64).ravel()
    if step <= 0.0 or not np.isfinite(step):
        raise ValueError(f"step must be finite and > 0, got {step!r}")
    if int(accuracy) < 0:
        raise ValueError(f"accuracy must be >= 0, got {accuracy!r}")
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    x = origin + step * np.arange(data.size, dtype=np.float64)
    np.savetxt(out, np.column_stack([x, data]), fmt=f"%.{int(accuracy)}f", delimiter=" ")
    logger.info("Saved %d samples: %s", data.size, out)
    return out


def store_result(result: Result, path: PathLike, accuracy: int = 6) -> Path:
    return store_vector(result.C, path, result.step, result.origin, accuracy)


def load_vector(path: PathLike) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Return ``(x, values)`` from a file written by :func:`store_vector`."""
    data = np.loadtxt(Path(path), dtype=np.float64, ndmin=2)
    if data.shape[1] != 2:
        raise ValueError(f"{path}: expected two columns, found {data.shape[1]}")
    return data[:, 0], data[:, 1]
