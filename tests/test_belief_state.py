# tests/test_belief_state.py
"""
Tests for BeliefState.mark_observation and the query surface.

Covers the per-tick protocol end to end:
- door scenario: closed door blocks its nodes, opening it unblocks them
- recompute gating on interactive on/off changes
- empty observations still move the agent and the tick
- path queries against the derived blocked set
"""

from __future__ import annotations

import logging

import pytest

from belief import BeliefState
from belief.testing import (
    make_button,
    make_door,
    make_line_graph,
    make_mover,
    make_observation,
)
from env.schema import BeliefConfig
from world.entity import Entity
from world.errors import InvalidObservationError
from world.geometry import Vec3

# Door centred between nodes 4 and 5 of a 7-node line graph.
DOOR_POS = Vec3(4.5, 0.0, 0.0)
DOOR_EXTENT = Vec3(0.6, 0.5, 0.5)


def _door(is_open: bool, entity_id: str = "d1") -> Entity:
    return make_door(entity_id, DOOR_POS, is_open=is_open, extent=DOOR_EXTENT)


@pytest.fixture
def belief() -> BeliefState:
    return BeliefState(make_line_graph(7))


def test_null_observation_is_rejected(belief: BeliefState) -> None:
    with pytest.raises(InvalidObservationError):
        belief.mark_observation(None)
    assert belief.last_updated == -1


def test_closed_door_blocks_then_open_door_unblocks(belief: BeliefState) -> None:
    tick = belief.mark_observation(make_observation(Vec3.zero(), [_door(False)]))
    assert tick == 0
    assert belief.get_nodes_blocked_by_entity("d1") == (4, 5)
    assert belief.blocked_nodes == frozenset({4, 5})

    tick = belief.mark_observation(make_observation(Vec3.zero(), [_door(True)]))
    assert tick == 1
    assert belief.blocked_nodes == frozenset()


def test_unchanged_flags_skip_recompute(belief: BeliefState, caplog) -> None:
    belief.mark_observation(make_observation(Vec3.zero(), [_door(False)]))
    before = belief.blocked_nodes

    with caplog.at_level(logging.DEBUG, logger="belief.state"):
        belief.mark_observation(make_observation(Vec3.zero(), [_door(False)]))

    assert belief.blocked_nodes is before
    assert "Recomputed blocked nav nodes" not in caplog.text


def test_new_interactive_entity_triggers_recompute(belief: BeliefState) -> None:
    belief.mark_observation(make_observation(Vec3.zero(), [_door(True)]))
    assert belief.blocked_nodes == frozenset()

    # First sighting of a second, closed door must not be missed.
    second = make_door("d2", Vec3(1.0, 0.0, 0.0), is_open=False, extent=Vec3(0.2, 0.2, 0.2))
    belief.mark_observation(make_observation(Vec3.zero(), [second]))

    assert belief.blocked_nodes == frozenset({1})


def test_empty_observation_keeps_entities_but_advances(belief: BeliefState) -> None:
    belief.mark_observation(
        make_observation(Vec3.zero(), [_door(False)], nav_mesh_indices=[0, 1])
    )
    door_before = belief.get_entity("d1")
    blocked_before = belief.blocked_nodes

    tick = belief.mark_observation(
        make_observation(Vec3(1.0, 0.0, 0.0), [], velocity=Vec3(1.0, 0.0, 0.0), did_nothing=True)
    )

    assert tick == 1
    assert belief.last_updated == 1
    assert belief.get_entity("d1") is door_before
    assert belief.blocked_nodes == blocked_before
    assert belief.position == Vec3(1.0, 0.0, 0.0)
    assert belief.velocity == Vec3(1.0, 0.0, 0.0)
    assert belief.did_nothing_previous_turn
    assert belief.mental_map.known_vertices == {0, 1}
    assert belief.age("d1") == 1
    assert not belief.entity_is_up_to_date("d1")


def test_explicit_tick_replay_is_dropped_by_freshness_guard(belief: BeliefState) -> None:
    belief.mark_observation(make_observation(Vec3.zero(), [_door(True)]), tick=5)

    applied = belief.mark_observation(make_observation(Vec3.zero(), [_door(False)]), tick=3)

    assert applied == 3
    assert belief.last_updated == 5
    assert belief.is_open("d1")
    assert belief.get_entity("d1").last_updated == 5


def test_path_queries_follow_door_state(belief: BeliefState) -> None:
    goal = Vec3(6.0, 0.0, 0.0)
    belief.mark_observation(make_observation(Vec3.zero(), [_door(False)]))

    assert belief.can_reach(goal) is None
    assert not belief.find_path_to(goal).success

    belief.mark_observation(make_observation(Vec3.zero(), [_door(True)]))

    path = belief.can_reach(goal)
    assert path is not None
    assert path[-1] == goal
    assert belief.can_reach("d1") is not None
    assert belief.can_reach("nope") is None


def test_cached_route_and_waypoints(belief: BeliefState) -> None:
    belief.mark_observation(make_observation(Vec3.zero(), []))
    goal = Vec3(2.0, 0.0, 0.0)

    route = belief.cached_find_path_to(goal)
    assert route.success
    assert belief.get_goal_location() == goal
    assert belief.get_next_way_point() == Vec3(0.0, 0.0, 0.0)

    belief.mark_observation(make_observation(Vec3(0.1, 0.0, 0.0), []))
    assert belief.get_next_way_point() == Vec3(1.0, 0.0, 0.0)


def test_frontier_avoids_known_and_blocked_nodes(belief: BeliefState) -> None:
    belief.mark_observation(make_observation(Vec3(3.0, 0.0, 0.0), [_door(False)], nav_mesh_indices=[3]))

    # Node 4 is behind the closed door; node 2 is the only frontier left.
    assert belief.get_unknown_neighbour_closest_to(Vec3(3, 0, 0), Vec3(6, 0, 0)) == Vec3(2, 0, 0)

    belief.mark_observation(make_observation(Vec3(3.0, 0.0, 0.0), [_door(True)]))
    assert belief.get_unknown_neighbour_closest_to(Vec3(3, 0, 0), Vec3(6, 0, 0)) == Vec3(4, 0, 0)


def test_buttons_and_doors_classification(belief: BeliefState) -> None:
    belief.mark_observation(
        make_observation(
            Vec3.zero(),
            [
                _door(False),
                make_button("b1", Vec3(1, 0, 0), is_on=True),
                make_button("lever", Vec3(2, 0, 0), tag="Lever"),
                make_mover("bot", Vec3(3, 0, 0)),
            ],
        )
    )

    assert [e.id for e in belief.known_doors()] == ["d1"]
    assert [e.id for e in belief.known_buttons()] == ["b1"]
    assert belief.is_on("b1")
    assert not belief.is_open("d1")
    assert not belief.is_on("missing")
    assert not belief.is_button("bot")
    assert {e.id for e in belief.known_interactive_entities()} == {"d1", "b1", "lever"}
    assert [e.id for e in belief.known_dynamic_entities()] == ["bot"]
    assert len(belief.known_entities()) == 4


def test_button_classification_is_configurable() -> None:
    belief = BeliefState(
        make_line_graph(3),
        config=BeliefConfig(button_tags=("Lever",), button_id_prefixes=()),
    )
    belief.mark_observation(
        make_observation(
            Vec3.zero(),
            [make_button("b1", Vec3(1, 0, 0)), make_button("lever", Vec3(2, 0, 0), tag="Lever")],
        )
    )

    assert [e.id for e in belief.known_buttons()] == ["lever"]


def test_sorted_buttons_prefer_fresh_then_near(belief: BeliefState) -> None:
    belief.mark_observation(make_observation(Vec3.zero(), [make_button("b_old", Vec3(1, 0, 0))]))
    belief.mark_observation(
        make_observation(
            Vec3.zero(),
            [make_button("b_far", Vec3(5, 0, 0)), make_button("b_near", Vec3(2, 0, 0))],
        )
    )

    ordered = belief.known_buttons_sorted_by_age_and_distance()

    assert [e.id for e in ordered] == ["b_near", "b_far", "b_old"]


def test_unknown_ids_degrade_gracefully(belief: BeliefState) -> None:
    belief.mark_observation(make_observation(Vec3.zero(), []))

    assert belief.get_entity("x") is None
    assert not belief.entity_exists("x")
    assert belief.age("x") is None
    assert belief.distance_to("x") == float("inf")
    assert not belief.within_range("x")
    assert not belief.can_interact_with("x")
    assert not belief.has_changed("x")
    assert belief.get_nodes_blocked_by_entity("x") == ()
    assert not belief.evaluate_entity("x", lambda e: True)


def test_range_and_interaction(belief: BeliefState) -> None:
    belief.mark_observation(
        make_observation(Vec3.zero(), [make_button("b1", Vec3(0.3, 0, 0)), make_button("b2", Vec3(0.9, 0, 0))])
    )

    assert belief.within_range("b1")
    assert not belief.within_range("b2")
    assert belief.within_range(Vec3(0.0, 0.0, 0.39))
    assert belief.can_interact_with("b1")
    assert belief.can_interact_with("b2")
    assert belief.distance_to("b2") == pytest.approx(0.9)
    assert belief.evaluate_interactive_entity("b1", lambda e: not e.is_active)


def test_has_changed_reports_oracle_transitions(belief: BeliefState) -> None:
    belief.mark_observation(make_observation(Vec3.zero(), [_door(False)]))
    assert belief.has_changed("d1")

    belief.mark_observation(make_observation(Vec3.zero(), [_door(False)]))
    assert not belief.has_changed("d1")

    belief.mark_observation(make_observation(Vec3.zero(), [_door(True)]))
    assert belief.has_changed("d1")


def test_belief_without_nav_graph_still_tracks_entities() -> None:
    belief = BeliefState()
    belief.mark_observation(make_observation(Vec3.zero(), [_door(False)], nav_mesh_indices=[1]))

    assert belief.entity_exists("d1")
    assert belief.blocked_nodes == frozenset()
    assert belief.can_reach(Vec3(1, 0, 0)) is None
    assert belief.get_next_way_point() is None
    assert belief.get_unknown_neighbour_closest_to(Vec3.zero(), Vec3.zero()) is None


def test_str_lists_entities(belief: BeliefState) -> None:
    belief.mark_observation(make_observation(Vec3.zero(), [_door(False)]))

    text = str(belief)

    assert text.startswith("BeliefState")
    assert "d1" in text
