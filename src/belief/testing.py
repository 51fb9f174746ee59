# src/belief/testing.py
"""
Testing helpers for the belief core.

Provides:
  - entity factories (doors, buttons, moving objects)
  - observation factory
  - small nav graph fixtures (line, ladder)
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from nav.graph import NavGraph
from world.entity import ACTIVE_PROPERTY, Entity
from world.geometry import Vec3
from world.observation import Observation


def make_door(
    entity_id: str,
    position: Vec3,
    *,
    is_open: bool = False,
    extent: Vec3 = Vec3(0.5, 0.5, 0.5),
    tag: str = "Door",
) -> Entity:
    return Entity(
        id=entity_id,
        tag=tag,
        interactable=True,
        position=position,
        extent=extent,
        properties={ACTIVE_PROPERTY: is_open},
    )


def make_button(
    entity_id: str,
    position: Vec3,
    *,
    is_on: bool = False,
    tag: str = "Switch",
) -> Entity:
    return Entity(
        id=entity_id,
        tag=tag,
        interactable=True,
        position=position,
        extent=Vec3(0.2, 0.2, 0.2),
        properties={ACTIVE_PROPERTY: is_on},
    )


def make_mover(entity_id: str, position: Vec3, velocity: Optional[Vec3] = Vec3.zero()) -> Entity:
    return Entity(
        id=entity_id,
        tag="Mover",
        dynamic=True,
        position=position,
        extent=Vec3(0.5, 0.5, 0.5),
        velocity=velocity,
    )


def make_observation(
    agent_position: Vec3 = Vec3.zero(),
    entities: Iterable[Entity] = (),
    *,
    nav_mesh_indices: Optional[Sequence[int]] = None,
    velocity: Optional[Vec3] = None,
    did_nothing: bool = False,
) -> Observation:
    return Observation(
        agent_position=agent_position,
        velocity=velocity,
        did_nothing=did_nothing,
        entities=list(entities),
        nav_mesh_indices=None if nav_mesh_indices is None else list(nav_mesh_indices),
    )


def make_line_graph(length: int = 3, spacing: float = 1.0) -> NavGraph:
    """Nodes 0..length-1 along the x axis, each linked to the next."""
    positions = [Vec3(i * spacing, 0.0, 0.0) for i in range(length)]
    edges = [(i, i + 1) for i in range(length - 1)]
    return NavGraph.from_positions(positions, edges)


def make_ladder_graph() -> NavGraph:
    """
    Two parallel rows joined at both ends:

        3 - 4 - 5
        |       |
        0 - 1 - 2

    The bottom row is the short way from 0 to 2; the top row is the detour.
    """
    positions: Dict[int, Vec3] = {
        0: Vec3(0.0, 0.0, 0.0),
        1: Vec3(1.0, 0.0, 0.0),
        2: Vec3(2.0, 0.0, 0.0),
        3: Vec3(0.0, 0.0, 1.0),
        4: Vec3(1.0, 0.0, 1.0),
        5: Vec3(2.0, 0.0, 1.0),
    }
    edges: List[tuple[int, int]] = [(0, 1), (1, 2), (0, 3), (3, 4), (4, 5), (5, 2)]
    return NavGraph.from_positions(positions, edges)


__all__ = [
    "make_button",
    "make_door",
    "make_ladder_graph",
    "make_line_graph",
    "make_mover",
    "make_observation",
]
