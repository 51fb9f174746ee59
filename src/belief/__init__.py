# src/belief/__init__.py
"""
Belief core package.

Exports:
    - BeliefState: facade owning the entity store, mental map and the
      blocked-node caches
    - recalculate_blocked_nodes / is_blocking: pure blocked-node helpers
    - render_belief_table: rich debug view
"""

from __future__ import annotations

from world.errors import BeliefStateError, EntityPropertyError, InvalidObservationError

from .blocking import is_blocking, recalculate_blocked_nodes
from .state import BeliefState
from .debug_view import belief_to_text, render_belief_table

__all__ = [
    "BeliefState",
    "BeliefStateError",
    "EntityPropertyError",
    "InvalidObservationError",
    "belief_to_text",
    "is_blocking",
    "recalculate_blocked_nodes",
    "render_belief_table",
]
