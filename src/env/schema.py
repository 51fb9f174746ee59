# BeliefConfig dataclass
# src/env/schema.py

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class BeliefConfig:
    """Tunables for the belief core. Defaults mirror the reference level setup."""

    # Interactive entities with these tags block nav nodes while inactive (closed).
    obstacle_tags: Tuple[str, ...] = ("Door",)
    # An interactive entity is a button if its tag is listed here...
    button_tags: Tuple[str, ...] = ()
    # ...or if its id starts with one of these prefixes.
    button_id_prefixes: Tuple[str, ...] = ("b", "B")

    waypoint_tolerance: float = 0.4   # distance at which a waypoint is reached
    within_range: float = 0.4         # "agent is at this point" radius
    interaction_range: float = 1.0    # reach for interacting with an entity
