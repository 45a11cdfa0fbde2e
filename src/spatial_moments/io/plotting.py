# ──────────────────────────────────────────────────────────────────────
# Spatial Moments — Result Rendering
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from spatial_moments.core.result import Result

logger = logging.getLogger(__name__)


def render_result(result: Result, filename: Union[str, Path], title: str = "") -> Path:
    """Render the pair correlation C(r)/N^2 to a PNG using matplotlib."""
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    output_path = Path(filename)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(6.0, 4.0))
    ax.plot(result.radii, result.pair_correlation, lw=1.5, label=result.method or "C/N^2")
    ax.axhline(1.0, color="0.6", lw=0.8, ls="--")
    ax.set_xlabel("r")
    ax.set_ylabel("C(r) / N^2")
    ax.set_title(title or f"N = {result.N:.6g}")
    ax.legend(loc="best")
    fig.tight_layout()
    fig.savefig(output_path, dpi=120)
    plt.close(fig)
    logger.info("Rendered: %s", output_path)
    return output_path
