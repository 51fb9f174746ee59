# src/env/__init__.py
"""Configuration loading for the belief core."""

from __future__ import annotations

from .schema import BeliefConfig
from .loader import belief_config_from_mapping, load_belief_config

__all__ = ["BeliefConfig", "belief_config_from_mapping", "load_belief_config"]
