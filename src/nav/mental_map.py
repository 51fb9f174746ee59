# src/nav/mental_map.py
"""
MentalMap: the agent's navigation memory.

Tracks:
- which nav nodes the agent has seen (monotonic, never shrinks)
- the current route: goal point, waypoint list, blocked set it was
  computed against, and which waypoint is next
- the latest agent position pushed by the belief update

It does NOT decide where to go; callers pick goals.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, FrozenSet, Iterable, List, Optional, Set

from world.geometry import Vec3
from .pathfinder import PathFinder, PathfindingResult

log = logging.getLogger(__name__)

# Distance at which a waypoint counts as reached.
DEFAULT_WAYPOINT_TOLERANCE = 0.4


class MentalMap:
    """
    Single-entry, goal-keyed route cache plus node visibility.

    The agent pursues one navigation goal at a time, so only the last
    successful route is kept.
    """

    def __init__(
        self,
        path_finder: PathFinder,
        *,
        waypoint_tolerance: float = DEFAULT_WAYPOINT_TOLERANCE,
    ) -> None:
        self.path_finder = path_finder
        self.waypoint_tolerance = waypoint_tolerance

        self.known_vertices: Set[int] = set()
        self.agent_position: Optional[Vec3] = None

        self._goal: Optional[Vec3] = None
        self._path: List[Vec3] = []
        self._path_blocked: FrozenSet[int] = frozenset()
        self._route: Optional[PathfindingResult] = None
        self._next_index: int = 0

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    def navigate_force(
        self,
        start: Vec3,
        goal: Vec3,
        blocked: AbstractSet[int] = frozenset(),
    ) -> PathfindingResult:
        """Fresh search, ignoring and not touching the cached route."""
        return self.path_finder.find_path(start, goal, blocked)

    def navigate(
        self,
        start: Vec3,
        goal: Vec3,
        blocked: AbstractSet[int] = frozenset(),
    ) -> PathfindingResult:
        """
        Return the cached route if it was computed for the same goal and the
        same blocked set; otherwise search again and refresh the cache.

        A failed search clears the cache.
        """
        blocked_key = frozenset(blocked)
        if self._goal is not None and self._goal == goal and self._path_blocked == blocked_key:
            log.debug("Route cache hit for goal %s", goal)
            route = self._route
            return PathfindingResult(
                path=list(self._path),
                success=True,
                nodes=list(route.nodes) if route else [],
                cost=route.cost if route else 0.0,
            )

        log.debug("Route cache miss for goal %s; searching", goal)
        result = self.navigate_force(start, goal, blocked_key)
        if result.success:
            self._goal = goal
            self._path = list(result.path)
            self._path_blocked = blocked_key
            self._route = result
            self._next_index = 0
        else:
            self.clear_route()
        return result

    def clear_route(self) -> None:
        self._goal = None
        self._path = []
        self._path_blocked = frozenset()
        self._route = None
        self._next_index = 0

    # ------------------------------------------------------------------
    # Progress / visibility
    # ------------------------------------------------------------------

    def update_known_vertices(self, indices: Optional[Iterable[int]]) -> None:
        if indices is None:
            return
        self.known_vertices.update(indices)

    def update_current_way_point(self, position: Optional[Vec3]) -> None:
        """
        Record the agent position and step past the next waypoint once the
        agent is within tolerance of it.
        """
        self.agent_position = position
        if position is None or self._next_index >= len(self._path):
            return
        target = self._path[self._next_index]
        if target.distance_squared(position) < self.waypoint_tolerance ** 2:
            self._next_index += 1

    def get_goal_location(self) -> Optional[Vec3]:
        return self._goal

    def get_next_way_point(self) -> Optional[Vec3]:
        if self._next_index >= len(self._path):
            return None
        return self._path[self._next_index]

    @property
    def path(self) -> List[Vec3]:
        return list(self._path)

    # ------------------------------------------------------------------
    # Exploration
    # ------------------------------------------------------------------

    def get_unknown_neighbour_closest_to(
        self,
        start: Vec3,
        target: Vec3,
        blocked: AbstractSet[int] = frozenset(),
    ) -> Optional[Vec3]:
        """
        Among the unseen, unblocked neighbours of the node nearest `start`,
        return the position closest to `target`.
        """
        graph = self.path_finder.navmesh
        start_node = graph.nearest_node(start)
        if start_node is None:
            return None

        best: Optional[Vec3] = None
        best_d = float("inf")
        for neighbour, _ in graph.neighbours(start_node):
            if neighbour in self.known_vertices or neighbour in blocked:
                continue
            pos = graph.position(neighbour)
            d = pos.distance_squared(target)
            if d < best_d:
                best, best_d = pos, d
        return best


__all__ = ["DEFAULT_WAYPOINT_TOLERANCE", "MentalMap"]
