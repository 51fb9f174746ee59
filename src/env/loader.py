# src/env/loader.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, Tuple

import yaml

from .schema import BeliefConfig


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[2]
CONFIG_ROOT = PROJECT_ROOT / "config"
DEFAULT_CONFIG_PATH = CONFIG_ROOT / "belief.yaml"


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML config file, requiring a mapping at the top level."""
    if not path.exists():
        raise FileNotFoundError(f"Missing config file: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected mapping at top of {path}, got {type(data)}")
    return data


def _str_tuple(raw: Any, key: str) -> Tuple[str, ...]:
    """Accept a single string or a list of strings."""
    if isinstance(raw, str):
        return (raw,)
    if not isinstance(raw, Iterable):
        raise ValueError(f"'{key}' must be a string or a list of strings, got {raw!r}")
    return tuple(str(item) for item in raw)


def _positive_float(raw: Any, key: str) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"'{key}' must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"'{key}' must be positive, got {value}")
    return value


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def belief_config_from_mapping(raw: Dict[str, Any]) -> BeliefConfig:
    """Build a BeliefConfig from a parsed `belief:` section; missing keys keep defaults."""
    defaults = BeliefConfig()
    section = raw.get("belief", raw)
    if not isinstance(section, dict):
        raise ValueError(f"'belief' section must be a mapping, got {type(section)}")

    unknown = set(section) - {
        "obstacle_tags",
        "button_tags",
        "button_id_prefixes",
        "waypoint_tolerance",
        "within_range",
        "interaction_range",
    }
    if unknown:
        raise ValueError(f"Unknown belief config keys: {sorted(unknown)}")

    return BeliefConfig(
        obstacle_tags=_str_tuple(section.get("obstacle_tags", defaults.obstacle_tags), "obstacle_tags"),
        button_tags=_str_tuple(section.get("button_tags", defaults.button_tags), "button_tags"),
        button_id_prefixes=_str_tuple(
            section.get("button_id_prefixes", defaults.button_id_prefixes),
            "button_id_prefixes",
        ),
        waypoint_tolerance=_positive_float(
            section.get("waypoint_tolerance", defaults.waypoint_tolerance),
            "waypoint_tolerance",
        ),
        within_range=_positive_float(section.get("within_range", defaults.within_range), "within_range"),
        interaction_range=_positive_float(
            section.get("interaction_range", defaults.interaction_range),
            "interaction_range",
        ),
    )


def load_belief_config(path: Path | str | None = None) -> BeliefConfig:
    """Main entry point: load config/belief.yaml (or `path`) into a BeliefConfig."""
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    return belief_config_from_mapping(_load_yaml(config_path))
