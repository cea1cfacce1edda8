"""Centralised configuration loaded from environment variables and dotenv."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# ── Paths ──────────────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# ── Logging ────────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("RANKIRO_LOG_LEVEL", "INFO").upper()

# ── Read-side paging ───────────────────────────────────────────────────────
DEFAULT_PAGE_SIZE: int = int(os.getenv("RANKIRO_PAGE_SIZE", "50"))
DEFAULT_TOP_LIMIT: int = int(os.getenv("RANKIRO_TOP_LIMIT", "10"))

# ── Scoring ────────────────────────────────────────────────────────────────
MAX_WORKERS: int = int(os.getenv("RANKIRO_MAX_WORKERS", "1"))
TRENDING_WINDOW_HOURS: float = float(os.getenv("RANKIRO_TRENDING_WINDOW_HOURS", "24"))
TRENDING_BOOST: float = float(os.getenv("RANKIRO_TRENDING_BOOST", "1.10"))
FACTOR_SUM_TOLERANCE = 0.001

# ── Factor profiles ────────────────────────────────────────────────────────
FACTOR_PROFILES_PATH: Path = Path(
    os.getenv("RANKIRO_FACTOR_PROFILES", str(PROJECT_ROOT / "config" / "factors.yml"))
)
DEFAULT_PROFILE: str = os.getenv("RANKIRO_PROFILE", "default")
