"""Bulged polyline segments, polylines, and the operations between them.

A :class:`PolylineSegment` is a 2D start, a 2D end and a bulge, the
tangent of a quarter of the included angle of the arc between them.
Positive bulges turn counter-clockwise, negative ones clockwise, and a
zero bulge is a straight segment.

A :class:`Polyline` is a chain of such segments stored as vertices with
per-vertex bulges, embedded in 3D by a normal and an elevation: vertex
``(x, y)`` sits at OCS coordinates ``(x, y, elevation)`` of the normal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from math import atan, atan2, ceil, cos, degrees, radians, sin, tan
from typing import List, Sequence

from flatcad import geom
from flatcad.xform import OCS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tolerance:
    """Point and vector equality tolerances."""

    equalpoint: float = 1e-10
    equalvector: float = 1e-12

    def pointsequal(self, a, b) -> bool:
        return geom.dist(a, b) <= self.equalpoint

    def vectorsequal(self, a, b) -> bool:
        return geom.dist(a, b) <= self.equalvector


JOIN_TOLERANCE = Tolerance(1e-9, 1e-9)

## largest sweep, in degrees, covered by one arc when an ellipse is
## approximated; circles are represented exactly and use the larger
## step.
ELLIPSE_STEP = 45.0
CIRCLE_STEP = 90.0


## bulge arithmetic
## ----------------

def bulgefromsweep(sweep: float) -> float:
    """bulge of an arc with signed included angle ``sweep`` degrees"""
    return tan(radians(sweep) / 4.0)

def sweepfrombulge(bulge: float) -> float:
    """signed included angle, in degrees, of a bulge"""
    return degrees(4.0 * atan(bulge))

def _cross2(a, b) -> float:
    return a[0] * b[1] - a[1] * b[0]

def bulgethrough(p0, pm, p1) -> float:
    """bulge of the circular arc from ``p0`` to ``p1`` through ``pm``"""
    a = geom.sub(p0, pm)
    b = geom.sub(p1, pm)
    if geom.mag(a) < geom.epsilon or geom.mag(b) < geom.epsilon:
        raise ValueError("degenerate three-point arc")
    turn = _cross2(geom.sub(p1, p0), geom.sub(pm, p0))
    if abs(turn) < geom.epsilon * geom.epsilon:
        return 0.0
    inscribed = geom.angleto(a, b)
    mag = tan(radians(180.0 - inscribed) / 2.0)
    return mag if turn < 0 else -mag

def arcfrombulge(p0, p1, bulge: float):
    """Return ``(center, radius, startangle, endangle)`` of a bulged span.

    Angles are in degrees and are the angles of ``p0`` and ``p1`` seen
    from the center, in the frame the points are given in.
    """
    if bulge == 0.0:
        raise ValueError("a straight segment has no arc")
    chord = geom.sub(p1, p0)
    length = geom.mag(chord)
    if length < geom.epsilon:
        raise ValueError("zero-length bulged segment")
    half = 2.0 * atan(abs(bulge))
    radius = length / (2.0 * sin(half))
    mid = geom.scale3(geom.add(p0, p1), 0.5)
    left = [-chord[1] / length, chord[0] / length, 0.0, 1.0]
    offset = radius * cos(half)
    if bulge < 0:
        offset = -offset
    center = geom.add(mid, geom.scale3(left, offset))
    center[2] = p0[2]
    a0 = degrees(atan2(p0[1] - center[1], p0[0] - center[0])) % 360.0
    a1 = degrees(atan2(p1[1] - center[1], p1[0] - center[0])) % 360.0
    return center, radius, a0, a1


@dataclass(frozen=True)
class PolylineSegment:
    """One 2D span of a polyline."""

    start: List[float]
    end: List[float]
    bulge: float = 0.0

    @property
    def isarc(self) -> bool:
        return self.bulge != 0.0

    @property
    def sweep(self) -> float:
        return sweepfrombulge(self.bulge)

    def reverse(self) -> "PolylineSegment":
        return PolylineSegment(self.end, self.start, -self.bulge)


@dataclass
class Polyline:
    """Planar chain of bulged segments embedded by a normal and elevation."""

    vertices: List[list] = field(default_factory=list)
    bulges: List[float] = field(default_factory=list)
    closed: bool = False
    normal: List[float] = field(default_factory=lambda: [0.0, 0.0, 1.0, 1.0])
    elevation: float = 0.0

    @classmethod
    def fromsegments(cls, chain: Sequence[PolylineSegment], tol: Tolerance = JOIN_TOLERANCE) -> "Polyline":
        """Build a polyline from a continuous chain.

        A chain whose last end meets its first start is closed, and the
        repeated vertex is dropped.
        """
        if not chain:
            raise ValueError("cannot build a polyline from an empty chain")
        verts = [geom.point(s.start[0], s.start[1]) for s in chain]
        bulges = [s.bulge for s in chain]
        last = chain[-1].end
        if len(chain) > 1 and tol.pointsequal(last, chain[0].start):
            return cls(verts, bulges, True)
        verts.append(geom.point(last[0], last[1]))
        bulges.append(0.0)
        return cls(verts, bulges, False)

    @property
    def numverts(self) -> int:
        return len(self.vertices)

    def segments(self) -> List[PolylineSegment]:
        n = len(self.vertices)
        count = n if self.closed else n - 1
        return [PolylineSegment(self.vertices[i], self.vertices[(i + 1) % n], self.bulges[i])
                for i in range(count)]

    def vertex3d(self, i: int) -> list:
        """WCS position of vertex ``i``."""
        v = self.vertices[i]
        q = OCS(self.normal).mul([v[0], v[1], self.elevation, 1.0])
        return geom.point(q[0], q[1], q[2])

    def vertices3d(self) -> List[list]:
        return [self.vertex3d(i) for i in range(len(self.vertices))]

    @property
    def startpoint(self) -> list:
        return self.vertex3d(0)

    @property
    def endpoint(self) -> list:
        if self.closed:
            return self.vertex3d(0)
        return self.vertex3d(len(self.vertices) - 1)

    def mirrored(self) -> "Polyline":
        """The same 3D curve expressed with the opposite normal.

        The OCS of ``-n`` is the OCS of ``n`` turned half a revolution
        about its Y axis, so local x, the elevation, and every bulge
        change sign.
        """
        return Polyline([geom.point(-v[0], v[1]) for v in self.vertices],
                        [-b for b in self.bulges], self.closed,
                        geom.neg(self.normal), -self.elevation)

    def reversed(self) -> "Polyline":
        """The same curve traversed the other way."""
        segs = [s.reverse() for s in reversed(self.segments())]
        if not segs:
            return Polyline(list(self.vertices), list(self.bulges), self.closed,
                            list(self.normal), self.elevation)
        pl = Polyline.fromsegments(segs)
        pl.normal = list(self.normal)
        pl.elevation = self.elevation
        return pl


## ellipse and circle rings
## ------------------------

def ellipsesegments(fig, plane) -> List[PolylineSegment]:
    """Approximate an ellipse, elliptical arc or circle by bulged segments.

    Each span is the circular arc through the span's end points and its
    parametric midpoint, taken in the local frame of ``plane``.  Spans
    on a circle reproduce it exactly.
    """
    if geom.isarc(fig):
        sweep = geom.arcsweep(fig)
        step = CIRCLE_STEP
    elif geom.isellipse(fig):
        sweep = geom.ellipsesweep(fig)
        step = CIRCLE_STEP if geom.close(fig[2][0], 1.0) else ELLIPSE_STEP
    else:
        raise ValueError("not an ellipse or circle: {}".format(geom.vstr(fig)))
    n = max(1, int(ceil(abs(sweep) / step - 1e-9)))
    pts = [plane.to2d(geom.sample(fig, i / (2.0 * n))) for i in range(2 * n + 1)]
    if geom.isclosedfigure(fig):
        pts[-1] = pts[0]
    return [PolylineSegment(pts[2 * i], pts[2 * i + 2],
                            bulgethrough(pts[2 * i], pts[2 * i + 1], pts[2 * i + 2]))
            for i in range(n)]


## joining
## -------

def joinsegments(segments: Sequence[PolylineSegment], tol: Tolerance = JOIN_TOLERANCE) -> List[List[PolylineSegment]]:
    """Group segments into maximal continuous chains.

    Chains grow from the first unused segment, forward from its end and
    then backward from its start, for as long as an unused segment
    touches the open end.  A segment that only fits reversed is
    reversed, which negates its bulge.  Passing back over the chain's
    first vertex does not end it; a chain is closed only when nothing
    continues from its last vertex.
    """
    pool = list(segments)
    used = [False] * len(pool)
    chains = []

    def _take(point, forward):
        for i, seg in enumerate(pool):
            if used[i]:
                continue
            near, far = (seg.start, seg.end) if forward else (seg.end, seg.start)
            if tol.pointsequal(near, point):
                used[i] = True
                return seg
            if tol.pointsequal(far, point):
                used[i] = True
                return seg.reverse()
        return None

    for idx, seg in enumerate(pool):
        if used[idx]:
            continue
        used[idx] = True
        chain = [seg]
        nxt = _take(chain[-1].end, True)
        while nxt is not None:
            chain.append(nxt)
            nxt = _take(chain[-1].end, True)
        prv = _take(chain[0].start, False)
        while prv is not None:
            chain.insert(0, prv)
            prv = _take(chain[0].start, False)
        chains.append(chain)

    logger.debug("joined %d segments into %d chain(s)", len(pool), len(chains))
    return chains


__all__ = [
    "Tolerance",
    "JOIN_TOLERANCE",
    "ELLIPSE_STEP",
    "CIRCLE_STEP",
    "bulgefromsweep",
    "sweepfrombulge",
    "bulgethrough",
    "arcfrombulge",
    "PolylineSegment",
    "Polyline",
    "ellipsesegments",
    "joinsegments",
]
