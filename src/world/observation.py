# src/world/observation.py
"""
Observation: one tick's report from the environment.

The belief core only consumes these fields; it does not own the wire
format. observation_from_payload() decodes the JSON-like mapping delivered
by the observation source into an Observation and nothing more.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .entity import ACTIVE_PROPERTY, Entity
from .errors import InvalidObservationError
from .geometry import Vec3


@dataclass
class Observation:
    """
    Snapshot of agent pose plus the entities and nav nodes visible this tick.

    `entities` may be a strict subset of everything seen so far.
    `nav_mesh_indices` is None when the source sent no visibility update.
    """

    agent_position: Vec3
    velocity: Optional[Vec3] = None
    did_nothing: bool = False
    entities: List[Entity] = field(default_factory=list)
    nav_mesh_indices: Optional[List[int]] = None
    agent_id: Optional[str] = None


# Entity "type" strings used by the observation source.
_INTERACTIVE_TYPES = ("interactive", "interactiveentity")
_DYNAMIC_TYPES = ("dynamic", "dynamicentity")


def _vec(raw: Any, what: str) -> Vec3:
    try:
        if isinstance(raw, Vec3):
            return raw
        if isinstance(raw, Mapping):
            return Vec3.from_mapping(raw)
        if isinstance(raw, Sequence) and not isinstance(raw, str):
            return Vec3.from_sequence(raw)
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidObservationError(
            code="bad_vector", details={"field": what, "value": repr(raw)}
        ) from exc
    raise InvalidObservationError(
        code="bad_vector", details={"field": what, "value": repr(raw)}
    )


def _optional_vec(raw: Any, what: str) -> Optional[Vec3]:
    if raw is None:
        return None
    return _vec(raw, what)


def entity_from_payload(raw: Mapping[str, Any]) -> Entity:
    """
    Decode one entity mapping.

    Expected fields:
        - "id": str (required)
        - "tag": str
        - "type": "Interactive" / "Dynamic" / anything else for generic
        - "interactable", "dynamic": bool overrides of the type
        - "position", "extent", "velocity": {"x","y","z"} or [x, y, z]
        - "isActive": bool or null (interactive entities); anything else is rejected
        - "properties": mapping, "elements": list or mapping of entities
    """
    if not isinstance(raw, Mapping) or "id" not in raw:
        raise InvalidObservationError(code="bad_entity", details={"value": repr(raw)})

    entity_id = str(raw["id"])
    kind = str(raw.get("type", "")).lower()
    interactable = bool(raw.get("interactable", kind in _INTERACTIVE_TYPES))
    dynamic = bool(raw.get("dynamic", kind in _DYNAMIC_TYPES))

    properties: Dict[str, Any] = dict(raw.get("properties") or {})
    active = raw.get("isActive")
    if active is not None:
        if not isinstance(active, bool):
            raise InvalidObservationError(
                code="bad_active_flag",
                details={"entity": entity_id, "value": repr(active)},
            )
        properties[ACTIVE_PROPERTY] = active

    raw_elements = raw.get("elements") or []
    if isinstance(raw_elements, Mapping):
        raw_elements = list(raw_elements.values())
    elements: Dict[str, Entity] = {}
    for child_raw in raw_elements:
        child = entity_from_payload(child_raw)
        elements[child.id] = child

    return Entity(
        id=entity_id,
        tag=str(raw.get("tag", "")),
        interactable=interactable,
        dynamic=dynamic,
        position=_vec(raw.get("position", (0.0, 0.0, 0.0)), f"{entity_id}.position"),
        extent=_vec(raw.get("extent", (0.0, 0.0, 0.0)), f"{entity_id}.extent"),
        velocity=_optional_vec(raw.get("velocity"), f"{entity_id}.velocity"),
        properties=properties,
        elements=elements,
    )


def observation_from_payload(payload: Optional[Mapping[str, Any]]) -> Observation:
    """
    Decode an observation mapping.

    Expected fields:
        - "agentPosition": vector (required)
        - "velocity": vector or null
        - "didNothing": bool
        - "entities": list of entity mappings
        - "navMeshIndices": list of ints, or absent for "no update"
        - "agentID": optional str
    """
    if payload is None:
        raise InvalidObservationError(code="null_observation")
    if not isinstance(payload, Mapping):
        raise InvalidObservationError(
            code="bad_observation", details={"type": type(payload).__name__}
        )
    if "agentPosition" not in payload:
        raise InvalidObservationError(code="missing_agent_position")

    indices = payload.get("navMeshIndices")
    nav_mesh_indices = None if indices is None else [int(i) for i in indices]

    return Observation(
        agent_position=_vec(payload["agentPosition"], "agentPosition"),
        velocity=_optional_vec(payload.get("velocity"), "velocity"),
        did_nothing=bool(payload.get("didNothing", False)),
        entities=[entity_from_payload(e) for e in payload.get("entities") or []],
        nav_mesh_indices=nav_mesh_indices,
        agent_id=payload.get("agentID"),
    )


__all__ = ["Observation", "entity_from_payload", "observation_from_payload"]
