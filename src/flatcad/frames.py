"""Coordinate frame descriptors for the transform gateway.

A frame is either a named coordinate-system code, a reference to a
planar entity whose ECS is meant, or an extrusion direction whose OCS
is meant.  Descriptors are arguments only; nothing stores them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Tuple

from flatcad.geom import isgoodnum


class CoordSystem(IntEnum):
    """Named coordinate systems of the host."""

    WCS = 0    # world
    UCS = 1    # current user coordinate system
    DCS = 2    # display coordinate system of the current viewport
    PSDCS = 3  # paper space display, only valid against DCS


class FrameKind(Enum):
    CODE = "code"
    ENTITY = "entity"
    EXTRUSION = "extrusion"


@dataclass(frozen=True)
class EntityRef:
    """Reference to a planar entity, by handle."""

    handle: str


@dataclass(frozen=True)
class Frame:
    """Tagged coordinate frame descriptor."""

    kind: FrameKind
    value: Any

    @classmethod
    def code(cls, value: int) -> "Frame":
        return cls(FrameKind.CODE, int(value))

    @classmethod
    def entity(cls, ref) -> "Frame":
        if not isinstance(ref, EntityRef):
            ref = EntityRef(str(ref))
        return cls(FrameKind.ENTITY, ref)

    @classmethod
    def extrusion(cls, v) -> "Frame":
        if len(v) < 3 or not all(isgoodnum(c) for c in v[:3]):
            raise ValueError("bad extrusion vector: {}".format(v))
        return cls(FrameKind.EXTRUSION, (float(v[0]), float(v[1]), float(v[2])))

    @classmethod
    def of(cls, x) -> "Frame":
        """Coerce a code, ``CoordSystem``, ``EntityRef`` or vector into a frame.

        Integers are accepted whatever their value; range checking is the
        gateway's business.
        """
        if isinstance(x, Frame):
            return x
        if isinstance(x, EntityRef):
            return cls.entity(x)
        if isgoodnum(x) and float(x).is_integer():
            return cls.code(int(x))
        if isinstance(x, (list, tuple)):
            return cls.extrusion(x)
        raise ValueError("cannot interpret {!r} as a coordinate frame".format(x))

    @property
    def iscode(self) -> bool:
        return self.kind is FrameKind.CODE

    def extrusionvector(self) -> Tuple[float, float, float]:
        if self.kind is not FrameKind.EXTRUSION:
            raise ValueError("frame is not direction-relative")
        return self.value

    def __str__(self) -> str:
        if self.kind is FrameKind.CODE:
            try:
                return CoordSystem(self.value).name
            except ValueError:
                return "code {}".format(self.value)
        if self.kind is FrameKind.ENTITY:
            return "entity {}".format(self.value.handle)
        return "extrusion {}".format(self.value)


__all__ = ["CoordSystem", "FrameKind", "EntityRef", "Frame"]
