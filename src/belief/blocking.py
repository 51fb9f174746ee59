# src/belief/blocking.py
"""
Pure helpers behind the blocked-node bookkeeping.

- active_flags / any_interactive_changed: before/after diff of the on/off
  flags of interactive entities, used to gate the global recompute.
- node_contribution: which nav nodes an entity's bounding box covers.
- is_blocking / recalculate_blocked_nodes: which of those nodes are
  currently excluded from path search.

Nothing here mutates state; BeliefState owns the caches.
"""

from __future__ import annotations

from typing import Collection, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

from nav.graph import NavGraph
from world.entity import Entity, EntityKind
from world.store import EntityStore


def active_flags(entities: Iterable[Entity]) -> Dict[str, bool]:
    """Map id -> is_active for the interactive entities among `entities`."""
    return {e.id: e.is_active for e in entities if e.kind is EntityKind.INTERACTIVE}


def any_interactive_changed(
    before: Mapping[str, bool],
    incoming: Mapping[str, bool],
) -> bool:
    """
    True if any incoming interactive entity is new or flipped its flag.

    An id absent from `before` counts as changed: a first sighting must
    trigger a recompute just like a toggle does.
    """
    for entity_id, active in incoming.items():
        if entity_id not in before or before[entity_id] != active:
            return True
    return False


def stored_active_flags(store: EntityStore, ids: Iterable[str]) -> Dict[str, bool]:
    """Active flags currently believed for `ids`; unknown ids are left out."""
    flags: Dict[str, bool] = {}
    for entity_id in ids:
        entity = store.get(entity_id)
        if entity is not None and entity.kind is EntityKind.INTERACTIVE:
            flags[entity_id] = entity.is_active
    return flags


def node_contribution(entity: Entity, graph: NavGraph) -> Tuple[int, ...]:
    """Sorted indices of the nav nodes inside the entity's bounding box."""
    return graph.nodes_within(entity.bounding_box())


def is_blocking(entity: Optional[Entity], obstacle_tags: Collection[str]) -> bool:
    """
    Whether an entity currently blocks navigation.

    Only interactive entities of an obstacle type block, and only while
    inactive (closed). Generic and dynamic entities never block.
    """
    if entity is None:
        return False
    if entity.kind is EntityKind.INTERACTIVE:
        return entity.tag in obstacle_tags and not entity.is_active
    return False


def recalculate_blocked_nodes(
    store: EntityStore,
    contributions: Mapping[str, Iterable[int]],
    obstacle_tags: Collection[str],
) -> FrozenSet[int]:
    """Rebuild the blocked-node set from scratch."""
    blocked: set[int] = set()
    for entity_id, nodes in contributions.items():
        if is_blocking(store.get(entity_id), obstacle_tags):
            blocked.update(nodes)
    return frozenset(blocked)


__all__ = [
    "active_flags",
    "any_interactive_changed",
    "is_blocking",
    "node_contribution",
    "recalculate_blocked_nodes",
    "stored_active_flags",
]
