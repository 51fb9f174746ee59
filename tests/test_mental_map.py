# tests/test_mental_map.py
"""
Unit tests for MentalMap.

Covers:
- goal-keyed single-entry route cache (navigate vs navigate_force)
- waypoint progress with the 0.4 tolerance
- monotonic known-vertex set and frontier selection
"""

from __future__ import annotations

from belief.testing import make_ladder_graph, make_line_graph
from nav import MentalMap, PathFinder
from world.geometry import Vec3

A = Vec3(0.0, 0.0, 0.0)
B = Vec3(1.0, 0.0, 0.0)
C = Vec3(2.0, 0.0, 0.0)


class CountingPathFinder(PathFinder):
    """PathFinder that counts how many searches actually ran."""

    def __init__(self, navmesh) -> None:
        super().__init__(navmesh)
        self.calls = 0

    def find_path(self, start, goal, blocked=frozenset()):
        self.calls += 1
        return super().find_path(start, goal, blocked)


def test_navigate_reuses_route_for_same_goal_and_blocked_set() -> None:
    finder = CountingPathFinder(make_line_graph(3))
    mm = MentalMap(finder)

    first = mm.navigate(A, C, frozenset())
    second = mm.navigate(B, C, frozenset())

    assert finder.calls == 1
    assert first.path == second.path == mm.navigate_force(A, C, frozenset()).path
    assert mm.get_goal_location() == C


def test_navigate_searches_again_when_blocked_set_changes() -> None:
    finder = CountingPathFinder(make_ladder_graph())
    mm = MentalMap(finder)

    open_route = mm.navigate(A, C, frozenset())
    detour = mm.navigate(A, C, frozenset({1}))

    assert finder.calls == 2
    assert open_route.nodes == [0, 1, 2]
    assert detour.nodes == [0, 3, 4, 5, 2]


def test_navigate_searches_again_for_new_goal() -> None:
    finder = CountingPathFinder(make_line_graph(3))
    mm = MentalMap(finder)

    mm.navigate(A, C)
    mm.navigate(A, B)

    assert finder.calls == 2
    assert mm.get_goal_location() == B


def test_navigate_force_always_searches_and_leaves_cache_alone() -> None:
    finder = CountingPathFinder(make_line_graph(3))
    mm = MentalMap(finder)
    mm.navigate(A, C)

    mm.navigate_force(A, B)
    mm.navigate_force(A, B)

    assert finder.calls == 3
    assert mm.get_goal_location() == C


def test_failed_navigation_clears_route() -> None:
    mm = MentalMap(PathFinder(make_line_graph(3)))
    mm.navigate(A, C)

    result = mm.navigate(A, C, frozenset({1}))

    assert not result.success
    assert mm.get_goal_location() is None
    assert mm.get_next_way_point() is None


def test_waypoints_advance_within_tolerance() -> None:
    mm = MentalMap(PathFinder(make_line_graph(3)))
    mm.navigate(A, C)

    assert mm.get_next_way_point() == A
    mm.update_current_way_point(Vec3(0.3, 0.0, 0.0))
    assert mm.get_next_way_point() == B

    # Still too far from B.
    mm.update_current_way_point(Vec3(0.5, 0.0, 0.0))
    assert mm.get_next_way_point() == B

    mm.update_current_way_point(Vec3(0.7, 0.0, 0.0))
    assert mm.get_next_way_point() == C
    assert mm.agent_position == Vec3(0.7, 0.0, 0.0)

    mm.update_current_way_point(Vec3(2.0, 0.0, 0.1))
    assert mm.get_next_way_point() is None


def test_no_route_means_no_waypoint_or_goal() -> None:
    mm = MentalMap(PathFinder(make_line_graph(3)))

    mm.update_current_way_point(A)

    assert mm.get_goal_location() is None
    assert mm.get_next_way_point() is None


def test_known_vertices_only_grow() -> None:
    mm = MentalMap(PathFinder(make_line_graph(3)))

    mm.update_known_vertices([0, 1])
    mm.update_known_vertices([1])
    mm.update_known_vertices(None)
    mm.update_known_vertices([])

    assert mm.known_vertices == {0, 1}


def test_unknown_neighbour_closest_to_target() -> None:
    mm = MentalMap(PathFinder(make_ladder_graph()))
    mm.update_known_vertices([0])

    # Neighbours of node 0 are 1 (towards +x) and 3 (towards +z).
    assert mm.get_unknown_neighbour_closest_to(A, Vec3(2, 0, 0)) == Vec3(1, 0, 0)
    assert mm.get_unknown_neighbour_closest_to(A, Vec3(0, 0, 5)) == Vec3(0, 0, 1)


def test_unknown_neighbour_skips_known_and_blocked() -> None:
    mm = MentalMap(PathFinder(make_ladder_graph()))
    mm.update_known_vertices([0, 1])

    assert mm.get_unknown_neighbour_closest_to(A, Vec3(2, 0, 0)) == Vec3(0, 0, 1)
    assert mm.get_unknown_neighbour_closest_to(A, Vec3(2, 0, 0), frozenset({3})) is None
