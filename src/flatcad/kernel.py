"""Geometry kernel used by the projector.

The projector talks to the kernel through four operations: explode a
curve into primitive figures, project one figure onto a plane along a
direction, join 2D segments into chains, and release the figures it was
handed.  :class:`NativeKernel` implements them on flatcad's own
geometry; a CAD-hosted kernel would wrap the host's entities instead.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from math import atan2, cos, degrees, radians, sin
from typing import List, Sequence

from flatcad import geom
from flatcad.curve import Curve, CurveKind, PLANAR_KINDS
from flatcad.segments import JOIN_TOLERANCE, PolylineSegment, Tolerance, arcfrombulge, joinsegments
from flatcad.xform import OCS

logger = logging.getLogger(__name__)


class Kernel(ABC):
    """Primitive operations the projector relies on."""

    @abstractmethod
    def explode(self, curve: Curve) -> List[list]:
        """Decompose ``curve`` into primitive figures."""

    @abstractmethod
    def projectprimitive(self, figure: list, plane, direction) -> list:
        """Project ``figure`` onto ``plane`` along ``direction``."""

    @abstractmethod
    def joinsegments(self, segments: Sequence[PolylineSegment],
                     tol: Tolerance) -> List[List[PolylineSegment]]:
        """Group segments into maximal continuous chains."""

    def release(self, figures: List[list]) -> None:
        """Give back figures obtained from :meth:`explode` or
        :meth:`projectprimitive`."""


class NativeKernel(Kernel):
    """Kernel implemented with flatcad geometry lists."""

    def explode(self, curve):
        if curve.kind in PLANAR_KINDS:
            return self._explodeplanar(curve)
        if curve.kind is CurveKind.POLYLINE3D:
            pts = [curve.vertex3d(i) for i in range(len(curve.vertices))]
            if curve.closed and len(pts) > 2:
                pts.append(pts[0])
            return [geom.line(pts[i], pts[i + 1]) for i in range(len(pts) - 1)
                    if geom.dist(pts[i], pts[i + 1]) > geom.epsilon]
        if curve.kind is CurveKind.SPLINE:
            raise NotImplementedError("splines cannot be exploded into lines and arcs")
        return [geom.deepcopy(curve.figure)]

    def _explodeplanar(self, curve):
        toworld = OCS(curve.normal)
        n = len(curve.vertices)
        figures = []
        for i in range(curve.segmentcount):
            v0 = curve.vertices[i]
            v1 = curve.vertices[(i + 1) % n]
            if geom.dist(v0, v1) < geom.epsilon:
                logger.debug("skipping zero-length segment %d", i)
                continue
            b = curve.bulge(i)
            if b == 0.0:
                figures.append(geom.line(curve.vertex3d(i), curve.vertex3d((i + 1) % n)))
                continue
            center, r, a0, a1 = arcfrombulge(v0, v1, b)
            c = toworld.mul([center[0], center[1], curve.elevation, 1.0])
            c = geom.point(c[0], c[1], c[2])
            if b > 0:
                figures.append(geom.arc(c, r, a0, a1, curve.normal))
            else:
                figures.append(geom.arc(c, r, a1, a0, curve.normal, samplereverse=True))
        logger.debug("exploded %s into %d figure(s)", curve.kind.value, len(figures))
        return figures

    def projectprimitive(self, figure, plane, direction):
        if geom.isline(figure):
            return geom.line(plane.projectpoint(figure[0], direction),
                             plane.projectpoint(figure[1], direction))
        if geom.isarc(figure):
            r = figure[1][0]
            ax, ay = geom.arbitraryaxis(geom.arcnormal(figure))
            t0 = geom.samplearc(figure, 0.0, polar=True)[2]
            return _projectconic(figure[0], geom.scale3(ax, r), geom.scale3(ay, r),
                                 t0, geom.arcsweep(figure), geom.iscircle(figure),
                                 plane, direction)
        if geom.isellipse(figure):
            c, major, psu, n = figure
            minor = geom.scale3(geom.cross(n, major), psu[0])
            return _projectconic(c, major, minor, psu[1], geom.ellipsesweep(figure),
                                 geom.isfullellipse(figure), plane, direction)
        if geom.isspline(figure):
            raise NotImplementedError("spline projection is not supported")
        raise ValueError("cannot project {}".format(geom.vstr(figure)))

    def joinsegments(self, segments, tol=JOIN_TOLERANCE):
        return joinsegments(segments, tol)

    def release(self, figures):
        logger.debug("releasing %d figure(s)", len(figures))


## a conic through c + u cos t + v sin t, traversed from t0 over a
## signed sweep (degrees), projected along a direction.  The image is a
## circular arc when the projected u and v are orthogonal and of equal
## length, an elliptical arc otherwise.
def _projectconic(c, u, v, t0, sweep, full, plane, direction):
    cc = plane.projectpoint(c, direction)
    pu = plane.projectvector(u, direction)
    pv = plane.projectvector(v, direction)
    if sweep < 0:
        pv = geom.neg(pv)
        t0 = -t0
        sweep = -sweep
    m = geom.cross(pu, pv)
    uu = geom.dot(pu, pu)
    vv = geom.dot(pv, pv)
    scale = max(uu, vv)
    if geom.mag(m) < geom.epsilon * scale:
        raise ValueError("conic is seen edge-on along the projection direction")

    if abs(uu - vv) < geom.epsilon * scale and abs(geom.dot(pu, pv)) < geom.epsilon * scale:
        n = plane.normal
        ccw = geom.dot(m, n) > 0
        r = geom.mag(pu)
        if full:
            return geom.arc(cc, r, 0, 360, n, samplereverse=not ccw)
        ax, ay = geom.arbitraryaxis(n)

        def _angle(t):
            rad = radians(t)
            d = geom.add(geom.scale3(pu, cos(rad)), geom.scale3(pv, sin(rad)))
            return degrees(atan2(geom.dot(d, ay), geom.dot(d, ax))) % 360.0

        a_start = _angle(t0)
        a_end = _angle(t0 + sweep)
        if ccw:
            return geom.arc(cc, r, a_start, a_end, n)
        return geom.arc(cc, r, a_end, a_start, n, samplereverse=True)

    tau = 0.5 * atan2(2.0 * geom.dot(pu, pv), uu - vv)
    major = geom.add(geom.scale3(pu, cos(tau)), geom.scale3(pv, sin(tau)))
    minor = geom.add(geom.scale3(pu, -sin(tau)), geom.scale3(pv, cos(tau)))
    ratio = min(1.0, geom.mag(minor) / geom.mag(major))
    normal = geom.unit(geom.cross(major, minor))
    if full:
        return geom.ellipse(cc, major, ratio, 0, 360, normal)
    start = (t0 - degrees(tau)) % 360.0
    return geom.ellipse(cc, major, ratio, start, (start + sweep) % 360.0, normal)


__all__ = ["Kernel", "NativeKernel"]
