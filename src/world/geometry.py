# src/world/geometry.py
"""
Spatial value types shared by the belief and navigation layers.

- Vec3: immutable 3D point / vector.
- BoundingBox: axis-aligned box given as center + half-extents.

These are plain values; they do not know about entities or graphs.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Sequence


@dataclass(frozen=True)
class Vec3:
    """Immutable 3D vector."""

    x: float
    y: float
    z: float

    def __add__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def distance_squared(self, other: "Vec3") -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        dz = self.z - other.z
        return dx * dx + dy * dy + dz * dz

    def distance(self, other: "Vec3") -> float:
        return math.sqrt(self.distance_squared(other))

    @classmethod
    def zero(cls) -> "Vec3":
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Vec3":
        """Build from {"x": .., "y": .., "z": ..}; raises on missing/garbage."""
        return cls(float(data["x"]), float(data["y"]), float(data["z"]))

    @classmethod
    def from_sequence(cls, data: Sequence[Any]) -> "Vec3":
        if len(data) != 3:
            raise ValueError(f"Expected 3 components, got {len(data)}")
        return cls(float(data[0]), float(data[1]), float(data[2]))

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class BoundingBox:
    """
    Axis-aligned bounding box.

    `extent` holds the half-size along each axis, so the box spans
    [center - extent, center + extent]. Faces are inclusive.
    """

    center: Vec3
    extent: Vec3

    @property
    def lower(self) -> Vec3:
        return self.center - self.extent

    @property
    def upper(self) -> Vec3:
        return self.center + self.extent

    def contains(self, point: Vec3) -> bool:
        lo = self.lower
        hi = self.upper
        return (
            lo.x <= point.x <= hi.x
            and lo.y <= point.y <= hi.y
            and lo.z <= point.z <= hi.z
        )


__all__ = ["Vec3", "BoundingBox"]
