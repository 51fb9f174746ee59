# src/belief/state.py
"""
BeliefState: the agent's accumulated model of the world.

This module wires together:
- EntityStore (what the agent believes about each entity)
- MentalMap (known nav nodes, current route, waypoint progress)
- the blocked-node caches (per-entity contributions + derived set)

Public surface (for the decision layer):
    BeliefState.from_config_file(path)  build from a YAML config file
    mark_observation(obs) -> tick     the only mutating call
    known_* / is_* / age / distance_to / within_range / ...   queries
    can_reach / find_path_to / cached_find_path_to            path queries

Design constraints:
- Single owner, single thread: updates and queries strictly alternate.
- Unknown ids are normal ("not observed yet"): queries return None,
  False or infinity instead of raising.
- A missing observation is a caller bug and raises.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple, Union

from env.loader import load_belief_config
from env.schema import BeliefConfig
from nav.graph import NavGraph
from nav.mental_map import MentalMap
from nav.pathfinder import PathFinder, PathfindingResult
from world.entity import Entity, EntityKind
from world.errors import InvalidObservationError
from world.geometry import Vec3
from world.observation import Observation
from world.store import EntityStore, sort_by_age_and_distance

from .blocking import (
    active_flags,
    any_interactive_changed,
    node_contribution,
    recalculate_blocked_nodes,
    stored_active_flags,
)

log = logging.getLogger(__name__)

EntityRef = Union[Entity, str, None]


class BeliefState:
    """
    Stores what the agent knows about itself, the entities it has observed,
    which parts of the nav graph it has seen, and its current route.
    """

    def __init__(
        self,
        nav_graph: Optional[NavGraph] = None,
        *,
        config: Optional[BeliefConfig] = None,
        agent_id: Optional[str] = None,
    ) -> None:
        self.config = config or BeliefConfig()
        self.agent_id = agent_id

        self.position: Optional[Vec3] = None
        self.velocity: Optional[Vec3] = None
        self.did_nothing_previous_turn: bool = False

        # Tick of the last applied observation; -1 before the first one.
        self.last_updated: int = -1

        self.entities = EntityStore()
        self.mental_map: Optional[MentalMap] = None

        self._nodes_blocked_by_entity: Dict[str, Tuple[int, ...]] = {}
        self._blocked_nodes: FrozenSet[int] = frozenset()

        if nav_graph is not None:
            self.attach_nav_graph(nav_graph)

    @classmethod
    def from_config_file(
        cls,
        path: Optional[Union[Path, str]] = None,
        nav_graph: Optional[NavGraph] = None,
        *,
        agent_id: Optional[str] = None,
    ) -> "BeliefState":
        """Build a BeliefState configured from a YAML file (default: config/belief.yaml)."""
        config = load_belief_config(path)
        log.info("Loaded belief config from %s", path or "default location")
        return cls(nav_graph, config=config, agent_id=agent_id)

    def attach_nav_graph(self, nav_graph: NavGraph) -> "BeliefState":
        """(Re)create the mental map over `nav_graph`."""
        self.mental_map = MentalMap(
            PathFinder(nav_graph),
            waypoint_tolerance=self.config.waypoint_tolerance,
        )
        return self

    # ------------------------------------------------------------------
    # Update protocol
    # ------------------------------------------------------------------

    def mark_observation(self, observation: Optional[Observation], *, tick: Optional[int] = None) -> int:
        """
        Fold one observation into the belief and return the tick it was
        applied at.

        `tick` defaults to the previous tick + 1. Passing an explicit tick
        lets a caller replay observations; entities older than what is
        already stored are dropped by the store's freshness guard.
        """
        if observation is None:
            raise InvalidObservationError(code="null_observation")

        applied_tick = self.last_updated + 1 if tick is None else int(tick)
        self.last_updated = max(self.last_updated, applied_tick)

        self.did_nothing_previous_turn = observation.did_nothing
        self.position = observation.agent_position
        self.velocity = observation.velocity

        # Must be taken before merging: afterwards the store already holds
        # the incoming flags.
        incoming = active_flags(observation.entities)
        before = stored_active_flags(self.entities, incoming.keys())
        interactive_changed = any_interactive_changed(before, incoming)

        for observed in observation.entities:
            self.entities.upsert(observed, applied_tick)

        graph = self._nav_graph()
        if graph is not None:
            for entity_id in incoming:
                stored = self.entities.get(entity_id)
                if stored is not None:
                    self._nodes_blocked_by_entity[entity_id] = node_contribution(stored, graph)

        if self.mental_map is not None:
            self.mental_map.update_known_vertices(observation.nav_mesh_indices)
            self.mental_map.update_current_way_point(self.position)

        if interactive_changed:
            self._recalculate_blocked_nodes()

        return applied_tick

    def _recalculate_blocked_nodes(self) -> None:
        self._blocked_nodes = recalculate_blocked_nodes(
            self.entities,
            self._nodes_blocked_by_entity,
            self.config.obstacle_tags,
        )
        log.debug(
            "Recomputed blocked nav nodes at tick %d: %d node(s)",
            self.last_updated,
            len(self._blocked_nodes),
        )

    def _nav_graph(self) -> Optional[NavGraph]:
        if self.mental_map is None:
            return None
        return self.mental_map.path_finder.navmesh

    # ------------------------------------------------------------------
    # Entity lookup
    # ------------------------------------------------------------------

    def _resolve(self, ref: EntityRef) -> Optional[Entity]:
        if isinstance(ref, Entity):
            return ref
        return self.entities.get(ref)

    def get_entity(self, entity_id: Optional[str]) -> Optional[Entity]:
        return self.entities.get(entity_id)

    def get_interactive_entity(self, entity_id: Optional[str]) -> Optional[Entity]:
        entity = self.entities.get(entity_id)
        if entity is None or entity.kind is not EntityKind.INTERACTIVE:
            return None
        return entity

    def get_dynamic_entity(self, entity_id: Optional[str]) -> Optional[Entity]:
        entity = self.entities.get(entity_id)
        if entity is None or entity.kind is not EntityKind.DYNAMIC:
            return None
        return entity

    def entity_exists(self, entity_id: Optional[str]) -> bool:
        return self.get_entity(entity_id) is not None

    def evaluate_entity(self, entity_id: Optional[str], predicate: Callable[[Entity], bool]) -> bool:
        entity = self.get_entity(entity_id)
        if entity is None:
            return False
        return bool(predicate(entity))

    def evaluate_interactive_entity(
        self, entity_id: Optional[str], predicate: Callable[[Entity], bool]
    ) -> bool:
        entity = self.get_interactive_entity(entity_id)
        if entity is None:
            return False
        return bool(predicate(entity))

    def has_changed(self, entity_id: str) -> bool:
        """Oracle hook: first sighting, or state differs from the previous one."""
        return self.entities.changed(entity_id)

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    def known_entities(self) -> List[Entity]:
        return self.entities.all()

    def known_interactive_entities(self) -> List[Entity]:
        return self.entities.interactive()

    def known_dynamic_entities(self) -> List[Entity]:
        return self.entities.dynamic()

    def is_door(self, ref: EntityRef) -> bool:
        entity = self._resolve(ref)
        return (
            entity is not None
            and entity.kind is EntityKind.INTERACTIVE
            and entity.tag in self.config.obstacle_tags
        )

    def is_button(self, ref: EntityRef) -> bool:
        entity = self._resolve(ref)
        if entity is None or entity.kind is not EntityKind.INTERACTIVE:
            return False
        if entity.tag in self.config.button_tags:
            return True
        return any(entity.id.startswith(p) for p in self.config.button_id_prefixes)

    def known_buttons(self) -> List[Entity]:
        return [e for e in self.known_interactive_entities() if self.is_button(e)]

    def known_buttons_sorted_by_age_and_distance(self) -> List[Entity]:
        """Buttons from most recently updated to oldest, nearer first on ties."""
        return sort_by_age_and_distance(self.known_buttons(), self.last_updated, self.position)

    def known_doors(self) -> List[Entity]:
        return [e for e in self.known_interactive_entities() if self.is_door(e)]

    def known_doors_sorted_by_age_and_distance(self) -> List[Entity]:
        return sort_by_age_and_distance(self.known_doors(), self.last_updated, self.position)

    # ------------------------------------------------------------------
    # Per-entity queries
    # ------------------------------------------------------------------

    def is_on(self, ref: EntityRef) -> bool:
        entity = self._resolve(ref)
        return entity is not None and entity.kind is EntityKind.INTERACTIVE and entity.is_active

    def is_open(self, ref: EntityRef) -> bool:
        return self.is_on(ref)

    def age(self, ref: EntityRef) -> Optional[int]:
        """Update rounds since the entity was last refreshed."""
        entity = self._resolve(ref)
        if entity is None:
            return None
        return self.last_updated - entity.last_updated

    def entity_is_up_to_date(self, ref: EntityRef) -> bool:
        entity = self._resolve(ref)
        return entity is not None and entity.last_updated == self.last_updated

    def distance_to(self, ref: EntityRef) -> float:
        """Straight-line distance from the agent, ignoring reachability."""
        entity = self._resolve(ref)
        if entity is None or self.position is None:
            return float("inf")
        return self.position.distance(entity.position)

    def within_range(self, target: Union[Entity, str, Vec3, None]) -> bool:
        """True if the agent is in close vicinity of a point or entity."""
        if isinstance(target, Vec3):
            point: Optional[Vec3] = target
        else:
            entity = self._resolve(target)
            point = entity.position if entity is not None else None
        if point is None or self.position is None:
            return False
        radius = self.config.within_range
        return self.position.distance_squared(point) < radius * radius

    def can_interact_with(self, entity_id: Optional[str]) -> bool:
        entity = self.get_interactive_entity(entity_id)
        if entity is None:
            return False
        return entity.can_interact(self.position, self.config.interaction_range)

    def get_nodes_blocked_by_entity(self, entity_id: str) -> Tuple[int, ...]:
        return self._nodes_blocked_by_entity.get(entity_id, ())

    @property
    def blocked_nodes(self) -> FrozenSet[int]:
        return self._blocked_nodes

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def find_path_to(self, goal: Vec3) -> PathfindingResult:
        """Fresh path search from the agent's position, using the latest belief."""
        if self.mental_map is None or self.position is None:
            return PathfindingResult.unreachable("no_navigation")
        return self.mental_map.navigate_force(self.position, goal, self._blocked_nodes)

    def cached_find_path_to(self, goal: Vec3) -> PathfindingResult:
        """Like find_path_to, but reuses the current route if it still applies."""
        if self.mental_map is None or self.position is None:
            return PathfindingResult.unreachable("no_navigation")
        return self.mental_map.navigate(self.position, goal, self._blocked_nodes)

    def can_reach(self, target: Union[Entity, str, Vec3, None]) -> Optional[List[Vec3]]:
        """
        Path to `target` if the agent believes it is reachable, else None.

        Always triggers a fresh search, so it is not free.
        """
        if isinstance(target, Vec3):
            goal: Optional[Vec3] = target
        else:
            entity = self._resolve(target)
            goal = entity.position if entity is not None else None
        if goal is None:
            return None
        result = self.find_path_to(goal)
        return result.path if result.success else None

    def get_goal_location(self) -> Optional[Vec3]:
        if self.mental_map is None:
            return None
        return self.mental_map.get_goal_location()

    def get_next_way_point(self) -> Optional[Vec3]:
        if self.mental_map is None:
            return None
        return self.mental_map.get_next_way_point()

    def get_unknown_neighbour_closest_to(self, start: Vec3, target: Vec3) -> Optional[Vec3]:
        """Frontier node next to `start` that leads towards `target`, if any."""
        if self.mental_map is None:
            return None
        return self.mental_map.get_unknown_neighbour_closest_to(start, target, self._blocked_nodes)

    def __str__(self) -> str:
        lines = ["BeliefState", " ["]
        for entity in self.entities:
            lines.append(f"\t{entity}")
        lines.append("]")
        return "\n".join(lines)


__all__ = ["BeliefState"]
