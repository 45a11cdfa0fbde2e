# ──────────────────────────────────────────────────────────────────────
# Spatial Moments — IO Package Init
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""Result persistence, rendering and logging setup."""

from .logging_config import MomentsJSONFormatter, setup_logging
from .plotting import render_result
from .vector_store import load_vector, store_result, store_vector

__all__ = [
    "MomentsJSONFormatter",
    "load_vector",
    "render_result",
    "setup_logging",
    "store_result",
    "store_vector",
]
