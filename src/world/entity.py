# src/world/entity.py
"""
Entity model for the agent's belief.

An Entity is the belief core's record of one perceived thing in the world
(door, button, moving object, ...). It carries:

- immutable identity: id, tag, interactable, dynamic
- spatial state: position, extent (half-size bounding box), optional velocity
- typed properties and nested child entities (elements)
- bookkeeping for change detection: last_updated tick and ONE previous
  snapshot of itself

Variants are a closed set (EntityKind) derived from the static flags.
Behaviour that differs per variant is dispatched on `kind` by the callers
(see belief.blocking); there are no subclasses to override.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional

from .errors import EntityPropertyError
from .geometry import BoundingBox, Vec3

# Property carrying the on/open (True) vs off/closed (False) flag of
# interactive entities.
ACTIVE_PROPERTY = "isActive"


class EntityKind(str, Enum):
    GENERIC = "generic"
    INTERACTIVE = "interactive"
    DYNAMIC = "dynamic"


def _same_value(a: Any, b: Any) -> bool:
    """Equality that also requires matching types, so True != 1 != 1.0."""
    if type(a) is not type(b):
        return False
    if isinstance(a, dict):
        return a.keys() == b.keys() and all(_same_value(v, b[k]) for k, v in a.items())
    if isinstance(a, (list, tuple)):
        return len(a) == len(b) and all(_same_value(x, y) for x, y in zip(a, b))
    return a == b


@dataclass
class Entity:
    """
    One entity as believed by the agent.

    `previous` is owned by this record and never chains further back:
    link_previous_state() clears the predecessor's own history before
    linking it.
    """

    id: str
    tag: str
    interactable: bool = False
    dynamic: bool = False

    position: Vec3 = field(default_factory=Vec3.zero)
    extent: Vec3 = field(default_factory=Vec3.zero)
    velocity: Optional[Vec3] = None

    properties: Dict[str, Any] = field(default_factory=dict)
    elements: Dict[str, "Entity"] = field(default_factory=dict)

    last_updated: int = -1
    previous: Optional["Entity"] = field(default=None, repr=False, compare=False)

    # ------------------------------------------------------------------
    # Variant / derived flags
    # ------------------------------------------------------------------

    @property
    def kind(self) -> EntityKind:
        if self.interactable:
            return EntityKind.INTERACTIVE
        if self.dynamic:
            return EntityKind.DYNAMIC
        return EntityKind.GENERIC

    @property
    def is_active(self) -> bool:
        """On/open state of an interactive entity; False when unreported."""
        return self.get_bool_property(ACTIVE_PROPERTY)

    def is_moving(self) -> bool:
        """
        True if the entity reports a velocity at all.

        A zero velocity still counts as moving; only absence means static.
        """
        return self.velocity is not None

    def bounding_box(self) -> BoundingBox:
        return BoundingBox(center=self.position, extent=self.extent)

    def can_interact(self, agent_position: Optional[Vec3], reach: float) -> bool:
        """True if `agent_position` is strictly closer than `reach`."""
        if agent_position is None or self.kind is not EntityKind.INTERACTIVE:
            return False
        return self.position.distance_squared(agent_position) < reach * reach

    # ------------------------------------------------------------------
    # Typed property accessors
    # ------------------------------------------------------------------

    def get_property(self, name: str) -> Any:
        return self.properties.get(name)

    def get_bool_property(self, name: str) -> bool:
        value = self.properties.get(name)
        if value is None:
            return False
        if not isinstance(value, bool):
            raise EntityPropertyError(self.id, name, "boolean", value)
        return value

    def get_int_property(self, name: str) -> int:
        value = self.properties.get(name)
        # bool is an int subclass; a flag is not a count.
        if value is None or isinstance(value, bool) or not isinstance(value, int):
            raise EntityPropertyError(self.id, name, "integer", value)
        return value

    def get_string_property(self, name: str) -> Optional[str]:
        value = self.properties.get(name)
        if value is None:
            return None
        return str(value)

    # ------------------------------------------------------------------
    # Change detection
    # ------------------------------------------------------------------

    def has_same_state(self, other: "Entity") -> bool:
        """
        Structural state equality.

        Compares position, extent, velocity, properties and, recursively,
        the children. Identity and static flags are not compared: they are
        fixed per id.
        """
        if (
            self.position != other.position
            or self.extent != other.extent
            or self.velocity != other.velocity
        ):
            return False
        if self.properties.keys() != other.properties.keys():
            return False
        for name, value in self.properties.items():
            if not _same_value(value, other.properties[name]):
                return False

        if self.elements.keys() != other.elements.keys():
            return False
        for key, child in self.elements.items():
            if not child.has_same_state(other.elements[key]):
                return False
        return True

    def link_previous_state(self, other: Optional["Entity"]) -> None:
        """Make `other` this entity's only history entry."""
        if other is not None:
            other.previous = None
        self.previous = other

    def has_changed_state(self) -> bool:
        """True on first sighting, or when the state differs from the previous one."""
        if self.previous is None:
            return True
        return not self.has_same_state(self.previous)

    def assign_time_stamp(self, tick: int) -> None:
        """Stamp this entity and all nested elements with `tick`."""
        self.last_updated = tick
        for child in self.elements.values():
            child.assign_time_stamp(tick)

    def snapshot(self) -> "Entity":
        """
        History-free copy owned by whoever asked for it.

        Children are copied recursively. The properties dict is new but its
        values are shared: property values are treated as immutable.
        """
        return replace(
            self,
            properties=dict(self.properties),
            elements={key: child.snapshot() for key, child in self.elements.items()},
            previous=None,
        )


__all__ = ["ACTIVE_PROPERTY", "Entity", "EntityKind"]
