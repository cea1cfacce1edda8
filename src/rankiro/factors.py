"""Load named ranking-factor profiles from YAML."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from rankiro import config
from rankiro.exceptions import FactorProfileError
from rankiro.models import RankingFactors

logger = logging.getLogger(__name__)

# YAML key → RankingFactors field
_WEIGHT_KEYS: dict[str, str] = {
    "views": "views_weight",
    "engagement": "engagement_weight",
    "recency": "recency_weight",
    "quality": "quality_weight",
    "trending": "trending_weight",
}


def _parse_profile(name: str, raw: Any) -> RankingFactors:
    if not isinstance(raw, dict):
        raise FactorProfileError(f"Profile '{name}' must be a mapping of weights")

    unknown = set(raw) - set(_WEIGHT_KEYS)
    if unknown:
        logger.warning("Profile '%s': ignoring unknown keys %s", name, sorted(unknown))

    try:
        weights = {field: float(raw.get(key, 0) or 0) for key, field in _WEIGHT_KEYS.items()}
    except (TypeError, ValueError) as exc:
        raise FactorProfileError(f"Profile '{name}' has a non-numeric weight: {exc}") from exc
    return RankingFactors(**weights)


def load_factor_profiles(path: Path = config.FACTOR_PROFILES_PATH) -> dict[str, RankingFactors]:
    """Parse a profiles file and return a dict of profile-name → factors.

    Layout::

        profiles:
          default: {views: 0.4, engagement: 0.3, recency: 0.1, quality: 0.1, trending: 0.1}

    Missing weights default to 0. Profiles are not checked against the
    sum-to-one rule here; that happens when one is handed to
    ``RankingService.update_ranking_factors``.
    """
    try:
        with open(path) as fh:
            cfg = yaml.safe_load(fh) or {}
    except OSError as exc:
        raise FactorProfileError(f"Cannot read factor profiles from {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise FactorProfileError(f"Invalid YAML in {path}: {exc}") from exc

    profiles = cfg.get("profiles") if isinstance(cfg, dict) else None
    if not isinstance(profiles, dict):
        raise FactorProfileError(f"{path} has no 'profiles' mapping")

    loaded = {str(name): _parse_profile(str(name), raw) for name, raw in profiles.items()}
    logger.info("Loaded %d factor profiles from %s", len(loaded), path)
    return loaded


def load_factor_profile(
    name: str = config.DEFAULT_PROFILE, path: Path = config.FACTOR_PROFILES_PATH
) -> RankingFactors:
    """Return a single named profile from *path*."""
    profiles = load_factor_profiles(path)
    if name not in profiles:
        raise FactorProfileError(f"Unknown factor profile '{name}' (have: {', '.join(sorted(profiles))})")
    return profiles[name]
