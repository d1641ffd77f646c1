"""Curve values handed to the projector.

A :class:`Curve` is a :class:`CurveKind` tag carried alongside the data
of that kind.  The three polyline kinds hold vertices and bulges; the
others hold a single flatcad figure (line, arc, ellipse or spline).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from flatcad import geom
from flatcad.xform import OCS


class CurveKind(Enum):
    POLYLINE = "polyline"      # lightweight, planar, bulged
    POLYLINE2D = "polyline2d"  # heavy 2D polyline, planar, bulged
    POLYLINE3D = "polyline3d"  # 3D polyline, straight segments only
    LINE = "line"
    ARC = "arc"
    CIRCLE = "circle"
    ELLIPSE = "ellipse"
    SPLINE = "spline"


POLYLINE_KINDS = frozenset((CurveKind.POLYLINE, CurveKind.POLYLINE2D, CurveKind.POLYLINE3D))
PLANAR_KINDS = frozenset((CurveKind.POLYLINE, CurveKind.POLYLINE2D))


@dataclass
class Curve:
    """A curve to be projected.

    For ``POLYLINE`` and ``POLYLINE2D`` the vertices are 2D coordinates
    in the OCS of ``normal`` at ``elevation``; ``bulges[i]`` belongs to
    the segment leaving vertex ``i``.  ``POLYLINE3D`` vertices are WCS
    points.  Other kinds keep their figure in ``figure``.
    """

    kind: CurveKind
    vertices: List[list] = field(default_factory=list)
    bulges: List[float] = field(default_factory=list)
    closed: bool = False
    normal: List[float] = field(default_factory=lambda: [0.0, 0.0, 1.0, 1.0])
    elevation: float = 0.0
    figure: Optional[list] = None

    @property
    def ispolyline(self) -> bool:
        return self.kind in POLYLINE_KINDS

    @property
    def segmentcount(self) -> int:
        if not self.ispolyline:
            return 1
        n = len(self.vertices)
        if n < 2:
            return 0
        return n if self.closed else n - 1

    def vertex3d(self, i: int) -> list:
        """WCS position of vertex ``i``."""
        v = self.vertices[i]
        if self.kind in PLANAR_KINDS:
            q = OCS(self.normal).mul([v[0], v[1], self.elevation, 1.0])
            return geom.point(q[0], q[1], q[2])
        return geom.point(v)

    @property
    def startpoint(self) -> list:
        if self.ispolyline:
            if not self.vertices:
                raise ValueError("polyline has no vertices")
            return self.vertex3d(0)
        return geom.startpoint(self.figure)

    @property
    def endpoint(self) -> list:
        if self.ispolyline:
            if not self.vertices:
                raise ValueError("polyline has no vertices")
            if self.closed:
                return self.vertex3d(0)
            return self.vertex3d(len(self.vertices) - 1)
        return geom.endpoint(self.figure)

    def bulge(self, i: int) -> float:
        if self.kind is CurveKind.POLYLINE3D or i >= len(self.bulges):
            return 0.0
        return self.bulges[i]


def _planar(kind, points, bulges, closed, normal, elevation) -> Curve:
    pts = [geom.point(p[0], p[1]) for p in points]
    if bulges is None:
        bulges = [0.0] * len(pts)
    bulges = list(bulges)
    if len(bulges) != len(pts):
        raise ValueError("need one bulge per vertex, got {} for {}".format(len(bulges), len(pts)))
    if normal is None:
        normal = [0.0, 0.0, 1.0]
    return Curve(kind, pts, bulges, closed, geom.unit(normal), float(elevation))


def lwpolyline(points: Sequence, bulges: Optional[Sequence[float]] = None, closed: bool = False,
               normal=None, elevation: float = 0.0) -> Curve:
    """Lightweight polyline from OCS 2D points and per-vertex bulges."""
    return _planar(CurveKind.POLYLINE, points, bulges, closed, normal, elevation)


def polyline2d(points: Sequence, bulges: Optional[Sequence[float]] = None, closed: bool = False,
               normal=None, elevation: float = 0.0) -> Curve:
    """Heavy 2D polyline; same geometry rules as :func:`lwpolyline`."""
    return _planar(CurveKind.POLYLINE2D, points, bulges, closed, normal, elevation)


def polyline3d(points: Sequence, closed: bool = False) -> Curve:
    """3D polyline through WCS points."""
    return Curve(CurveKind.POLYLINE3D, [geom.point(p) for p in points], [], closed)


def linecurve(p1, p2) -> Curve:
    return Curve(CurveKind.LINE, figure=geom.line(geom.point(p1), geom.point(p2)))


def arccurve(a) -> Curve:
    if not geom.isarc(a):
        raise ValueError("not an arc: {}".format(geom.vstr(a)))
    kind = CurveKind.CIRCLE if geom.iscircle(a) else CurveKind.ARC
    return Curve(kind, figure=geom.arc(a))


def ellipsecurve(e) -> Curve:
    if not geom.isellipse(e):
        raise ValueError("not an ellipse: {}".format(geom.vstr(e)))
    return Curve(CurveKind.ELLIPSE, figure=geom.deepcopy(e))


def splinecurve(ctrl, degree: int = 3, closed: bool = False) -> Curve:
    return Curve(CurveKind.SPLINE, figure=geom.spline(ctrl, degree, closed))


__all__ = [
    "CurveKind",
    "POLYLINE_KINDS",
    "Curve",
    "lwpolyline",
    "polyline2d",
    "polyline3d",
    "linecurve",
    "arccurve",
    "ellipsecurve",
    "splinecurve",
]
