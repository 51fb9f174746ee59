# src/world/__init__.py
"""
Entity-level belief model.

Exports:
    - Vec3, BoundingBox: geometry values
    - Entity, EntityKind: one perceived entity with depth-1 history
    - EntityStore: freshness-guarded id -> Entity mapping
    - Observation: one tick's report, plus payload decoding
    - BeliefStateError, InvalidObservationError, EntityPropertyError
"""

from __future__ import annotations

from .errors import BeliefStateError, EntityPropertyError, InvalidObservationError
from .geometry import BoundingBox, Vec3
from .entity import ACTIVE_PROPERTY, Entity, EntityKind
from .store import EntityStore, sort_by_age_and_distance
from .observation import Observation, entity_from_payload, observation_from_payload

__all__ = [
    "ACTIVE_PROPERTY",
    "BeliefStateError",
    "BoundingBox",
    "Entity",
    "EntityKind",
    "EntityPropertyError",
    "EntityStore",
    "InvalidObservationError",
    "Observation",
    "Vec3",
    "entity_from_payload",
    "observation_from_payload",
    "sort_by_age_and_distance",
]
