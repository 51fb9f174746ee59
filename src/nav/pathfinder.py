# src/nav/pathfinder.py
"""
Shortest-path search over NavGraph.

- Dijkstra on non-negative edge costs (heap based).
- Blocked nodes are removed from the search space, not penalised.
- Ties are broken by neighbour insertion order, so equal-cost searches
  always return the same path.
- No step limit: a search always runs to completion.
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import AbstractSet, Dict, List, Optional, Tuple

from world.geometry import Vec3
from .graph import NavGraph

UNREACHABLE = "unreachable"
EMPTY_GRAPH = "empty_graph"


@dataclass
class PathfindingResult:
    """Structured result for a pathfinding attempt."""

    path: List[Vec3]
    success: bool
    reason: str | None = None
    nodes: List[int] = field(default_factory=list)
    cost: float = float("inf")

    @classmethod
    def unreachable(cls, reason: str = UNREACHABLE) -> "PathfindingResult":
        return cls(path=[], success=False, reason=reason)


def find_path(
    graph: NavGraph,
    start: int,
    goal: int,
    blocked: AbstractSet[int] = frozenset(),
) -> Tuple[List[int], float] | None:
    """
    Dijkstra from node `start` to node `goal` avoiding `blocked`.

    Returns (node path including both ends, total cost), or None when the
    goal cannot be reached. A blocked start or goal is unreachable.
    """
    if start in blocked or goal in blocked:
        return None
    if start == goal:
        return [start], 0.0

    # The counter keeps heap order stable for equal costs.
    order = itertools.count()
    open_heap: List[tuple[float, int, int]] = [(0.0, next(order), start)]

    came_from: Dict[int, int] = {}
    g_score: Dict[int, float] = {start: 0.0}
    closed: set[int] = set()

    while open_heap:
        cost, _, current = heapq.heappop(open_heap)
        if current in closed:
            continue
        if current == goal:
            return _reconstruct_path(came_from, current), cost
        closed.add(current)

        for nxt, edge_cost in graph.neighbours(current):
            if nxt in blocked or nxt in closed:
                continue
            tentative_g = cost + edge_cost
            if tentative_g < g_score.get(nxt, float("inf")):
                came_from[nxt] = current
                g_score[nxt] = tentative_g
                heapq.heappush(open_heap, (tentative_g, next(order), nxt))

    return None


def _reconstruct_path(came_from: Dict[int, int], current: int) -> List[int]:
    """Reconstruct full path from came_from map."""
    path: List[int] = [current]
    while current in came_from:
        current = came_from[current]
        path.append(current)
    path.reverse()
    return path


class PathFinder:
    """
    Point-to-point path queries on top of a NavGraph.

    Both endpoints are snapped to their nearest graph node. The returned
    waypoint list holds the node positions along the way, followed by the
    exact target point when it is not itself a node position.
    """

    def __init__(self, navmesh: NavGraph) -> None:
        self.navmesh = navmesh

    def find_path(
        self,
        start: Vec3,
        goal: Vec3,
        blocked: AbstractSet[int] = frozenset(),
    ) -> PathfindingResult:
        start_node = self.navmesh.nearest_node(start)
        goal_node = self.navmesh.nearest_node(goal)
        if start_node is None or goal_node is None:
            return PathfindingResult.unreachable(EMPTY_GRAPH)

        found = find_path(self.navmesh, start_node, goal_node, blocked)
        if found is None:
            return PathfindingResult.unreachable()

        nodes, cost = found
        waypoints = [self.navmesh.position(n) for n in nodes]
        if waypoints[-1] != goal:
            waypoints.append(goal)
        return PathfindingResult(path=waypoints, success=True, nodes=nodes, cost=cost)

    def nearest_node(self, point: Vec3) -> Optional[int]:
        return self.navmesh.nearest_node(point)


__all__ = ["EMPTY_GRAPH", "UNREACHABLE", "PathFinder", "PathfindingResult", "find_path"]
