# src/nav/__init__.py
"""
Navigation subsystem for the belief core.

Provides:
- NavGraph: read-only weighted graph with geometry queries
- find_path / PathFinder: Dijkstra with hard node exclusion
- MentalMap: route cache, waypoint progress and known-node tracking
"""

from __future__ import annotations

from .graph import NavGraph
from .pathfinder import PathFinder, PathfindingResult, find_path
from .mental_map import MentalMap

__all__ = [
    "NavGraph",
    "PathFinder",
    "PathfindingResult",
    "find_path",
    "MentalMap",
]
