"""Centralised default constants for pmmltargets.

Every project-wide magic number / string lives here.
Import these instead of hard-coding values in function signatures or CLI options.
"""

from __future__ import annotations

from typing import Final

# ── Fields ──
# Name of the unnamed/primary output of a single-output model.
DEFAULT_TARGET: Final[None] = None
# JSON/YAML spelling of DEFAULT_TARGET (object keys must be strings).
DEFAULT_TARGET_KEY: Final[str] = "__default__"

# ── Target post-processing ──
DEFAULT_RESCALE_FACTOR: Final[float] = 1.0
DEFAULT_RESCALE_CONSTANT: Final[float] = 0.0

# ── Distributions ──
PROBABILITY_SUM_TOLERANCE: Final[float] = 1e-6

# ── CLI ──
DEFAULT_LOG_LEVEL: Final[str] = "WARNING"
