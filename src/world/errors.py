# src/world/errors.py
"""
Domain errors for the belief core.

Only contract violations are errors here:
- a missing/garbled observation handed to the update protocol
- a typed property accessor used on a value of the wrong type

"Not observed yet" and "unreachable" are ordinary answers and are returned
as None / False / failed PathfindingResult instead of raised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class BeliefStateError(RuntimeError):
    """
    Base error for the belief core.

    Mirrors the BotCoreError shape: a short machine-readable code plus a
    details mapping for logs.
    """

    code: str
    details: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, details={self.details!r})"


@dataclass
class InvalidObservationError(BeliefStateError):
    """Raised when the update protocol receives no (or unusable) observation."""


class EntityPropertyError(TypeError):
    """Raised when a typed property accessor finds a value of another type."""

    def __init__(self, entity_id: str, property_name: str, expected: str, actual: Any) -> None:
        self.entity_id = entity_id
        self.property_name = property_name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{entity_id} has no {expected} property {property_name!r} "
            f"(found {type(actual).__name__})"
        )


__all__ = ["BeliefStateError", "InvalidObservationError", "EntityPropertyError"]
