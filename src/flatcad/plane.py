"""Plane and extents value types.

A :class:`Plane` is an origin and a unit normal.  Its local frame is the
arbitrary-axis frame of the normal, which is also the frame a polyline
with that normal stores its vertices in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from flatcad import geom
from flatcad.xform import OCS, PlaneToWorld, WorldToPlane


ORIGIN = [0.0, 0.0, 0.0, 1.0]
ZAXIS = [0.0, 0.0, 1.0, 1.0]


@dataclass(frozen=True)
class Plane:
    """Immutable infinite plane through ``origin`` with unit ``normal``."""

    origin: List[float] = field(default_factory=lambda: list(ORIGIN))
    normal: List[float] = field(default_factory=lambda: list(ZAXIS))

    def __post_init__(self) -> None:
        if len(self.origin) < 3 or len(self.normal) < 3:
            raise ValueError("plane origin and normal need three components")
        if geom.mag(self.normal) < geom.epsilon:
            raise ValueError("zero-length plane normal")
        object.__setattr__(self, "origin", geom.point(*[float(c) for c in self.origin[:3]]))
        object.__setattr__(self, "normal", geom.unit(self.normal))

    @classmethod
    def xy(cls) -> "Plane":
        """The world XY plane."""
        return cls()

    @property
    def axes(self) -> List[list]:
        """In-plane ``[xaxis, yaxis]`` of the plane's local frame."""
        return geom.arbitraryaxis(self.normal)

    def negate(self) -> "Plane":
        """Same geometric plane, opposite orientation."""
        return Plane(self.origin, geom.neg(self.normal))

    def worldtoplane(self):
        """Matrix taking world coordinates into the plane's local frame."""
        return WorldToPlane(self)

    def planetoworld(self):
        """Matrix taking plane-local coordinates back to world space."""
        return PlaneToWorld(self)

    def projectpoint(self, p, direction) -> list:
        """Project point ``p`` onto the plane along ``direction``.

        Raises ``ValueError`` when the direction is parallel to the plane.
        """
        denom = geom.dot(self.normal, direction)
        if abs(denom) < geom.epsilon * max(1.0, geom.mag(direction)):
            raise ValueError("projection direction is parallel to the plane")
        t = geom.dot(self.normal, geom.sub(self.origin, p)) / denom
        return geom.add(p, geom.scale3(direction, t))

    def projectvector(self, v, direction) -> list:
        """Image of displacement ``v`` under the projection along ``direction``."""
        denom = geom.dot(self.normal, direction)
        if abs(denom) < geom.epsilon * max(1.0, geom.mag(direction)):
            raise ValueError("projection direction is parallel to the plane")
        t = geom.dot(self.normal, v) / denom
        return geom.sub(v, geom.scale3(direction, t))

    def tolocal(self, p) -> list:
        """Coordinates of ``p`` in the OCS of the normal.

        The third coordinate of a point lying on the plane is the plane's
        elevation.
        """
        q = OCS(self.normal, inverse=True).mul([p[0], p[1], p[2], 1.0])
        return geom.point(q[0], q[1], q[2])

    def to2d(self, p) -> list:
        """Plane-local 2D point (z == 0) of ``p``."""
        q = self.tolocal(p)
        return geom.point(q[0], q[1])

    def fromlocal(self, p, elevation: float = 0.0) -> list:
        """Lift local ``(x, y)`` at ``elevation`` back into world space."""
        q = OCS(self.normal).mul([p[0], p[1], elevation, 1.0])
        return geom.point(q[0], q[1], q[2])

    def contains(self, p, tol: float = geom.epsilon) -> bool:
        return abs(geom.dot(self.normal, geom.sub(p, self.origin))) < tol


@dataclass(frozen=True)
class Extents:
    """Axis-aligned 3D box spanning ``minpoint`` to ``maxpoint``."""

    minpoint: List[float]
    maxpoint: List[float]

    def __post_init__(self) -> None:
        object.__setattr__(self, "minpoint", geom.point(*[float(c) for c in self.minpoint[:3]]))
        object.__setattr__(self, "maxpoint", geom.point(*[float(c) for c in self.maxpoint[:3]]))
        if any(self.minpoint[i] > self.maxpoint[i] for i in range(3)):
            raise ValueError("extents minpoint exceeds maxpoint")

    @classmethod
    def frompoints(cls, points) -> "Extents":
        pts = list(points)
        if not pts:
            raise ValueError("no points to bound")
        lo = [min(p[i] for p in pts) for i in range(3)]
        hi = [max(p[i] for p in pts) for i in range(3)]
        return cls(lo, hi)

    @property
    def bbox(self) -> List[list]:
        return [self.minpoint, self.maxpoint]

    def isinside(self, p) -> bool:
        """Is point ``p`` inside or on the box?"""
        return geom.isinsidebbox(self.bbox, p)


__all__ = ["ORIGIN", "ZAXIS", "Plane", "Extents"]
