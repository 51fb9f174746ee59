# src/world/store.py
"""
EntityStore: id -> Entity mapping with a freshness-guarded merge.

Rules:
- A merge is rejected when the stored record is as new or newer than the
  incoming tick. Observations can arrive late or be replayed; the store
  never regresses to older data.
- Records are never removed. Absence from an observation only means
  "not reported this tick".
- Each stored record keeps exactly one previous snapshot for change
  detection.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, Iterator, List, Optional

from .entity import Entity, EntityKind
from .geometry import Vec3

log = logging.getLogger(__name__)


class EntityStore:
    """Owns the belief's entity records."""

    def __init__(self) -> None:
        self._entities: Dict[str, Entity] = {}

    # ------------------------------------------------------------------
    # Merge
    # ------------------------------------------------------------------

    def upsert(self, observed: Entity, tick: int) -> bool:
        """
        Merge `observed` into the store at `tick`.

        Returns True if the record was applied, False if the freshness
        guard dropped it. The observed object itself is not mutated; the
        store keeps its own copy.
        """
        current = self._entities.get(observed.id)
        if current is not None and current.last_updated >= tick:
            log.debug(
                "Dropping stale update for %s (stored tick %d >= %d)",
                observed.id,
                current.last_updated,
                tick,
            )
            return False

        record = observed.snapshot()
        record.assign_time_stamp(tick)
        record.link_previous_state(current)
        self._entities[record.id] = record
        return True

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, entity_id: Optional[str]) -> Optional[Entity]:
        if entity_id is None:
            return None
        return self._entities.get(entity_id)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entities

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[Entity]:
        return iter(self._entities.values())

    def changed(self, entity_id: str) -> bool:
        """
        True if the entity was just seen for the first time or its state
        differs from its previous snapshot. Unknown ids are unchanged.
        """
        entity = self._entities.get(entity_id)
        if entity is None:
            return False
        return entity.has_changed_state()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def all(self) -> List[Entity]:
        return list(self._entities.values())

    def filter(self, predicate: Callable[[Entity], bool]) -> List[Entity]:
        return [e for e in self._entities.values() if predicate(e)]

    def interactive(self) -> List[Entity]:
        return self.filter(lambda e: e.kind is EntityKind.INTERACTIVE)

    def dynamic(self) -> List[Entity]:
        return self.filter(lambda e: e.kind is EntityKind.DYNAMIC)


def sort_by_age_and_distance(
    entities: Iterable[Entity],
    current_tick: int,
    reference: Optional[Vec3],
) -> List[Entity]:
    """
    Order entities by ascending age, then ascending distance to `reference`.

    Age is `current_tick - last_updated`, so the freshest knowledge comes
    first. Without a reference point only age is used.
    """

    def key(entity: Entity) -> tuple[int, float]:
        age = current_tick - entity.last_updated
        if reference is None:
            return (age, 0.0)
        return (age, entity.position.distance(reference))

    return sorted(entities, key=key)


__all__ = ["EntityStore", "sort_by_age_and_distance"]
