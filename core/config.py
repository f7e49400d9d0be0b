from __future__ import annotations

import os
from pathlib import Path
from typing import Tuple

# ---------------------------------------------------------------------------
# Project paths
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[1]
DATA_DIR = PROJECT_ROOT / "data"
DEFAULT_DATA_FILE = DATA_DIR / "bmi.csv"

# ---------------------------------------------------------------------------
# App identity
# ---------------------------------------------------------------------------

APP_NAME = "Global Obesity Dashboard"
APP_VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Dashboard defaults
# ---------------------------------------------------------------------------

DASHBOARD_TOP_N = 5
REPORT_TOP_N = 20
RAW_PAGE_SIZE = 10

# Obesity is held as a percentage in [0, 100] once loaded. A source that
# stores fractions is validated against [0, 1] and rescaled.
SCALE_PERCENT = "percent"
SCALE_FRACTION = "fraction"
SCALE_DOMAINS = {
    SCALE_PERCENT: (0.0, 100.0),
    SCALE_FRACTION: (0.0, 1.0),
}
SCALE_FACTORS = {
    SCALE_PERCENT: 1.0,
    SCALE_FRACTION: 100.0,
}


def get_data_path() -> Path:
    """Input CSV, overridable with OBESITY_DATA_PATH."""
    override = os.getenv("OBESITY_DATA_PATH", "").strip()
    return Path(override) if override else DEFAULT_DATA_FILE


def get_obesity_scale() -> str:
    scale = (os.getenv("OBESITY_SCALE", SCALE_PERCENT).strip() or SCALE_PERCENT).lower()
    if scale not in SCALE_DOMAINS:
        raise ValueError(f"OBESITY_SCALE must be one of {sorted(SCALE_DOMAINS)}, got {scale!r}")
    return scale


def scale_domain(scale: str) -> Tuple[float, float]:
    if scale not in SCALE_DOMAINS:
        raise ValueError(f"Unknown obesity scale: {scale!r}")
    return SCALE_DOMAINS[scale]
