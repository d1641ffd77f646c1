"""Curve projector.

:func:`project` turns a polyline curve into a bulged, planar
:class:`~flatcad.segments.Polyline` lying on a target plane, as seen
along a projection direction:

1. the curve is exploded into lines and arcs by the kernel;
2. every piece is projected onto the plane along the direction;
3. every projected piece is encoded as plane-local bulged segments,
   lines with a zero bulge, circular arcs with ``tan(sweep/4)``, and
   full circles or ellipses as a ring of three-point arcs;
4. the segments are joined and the first chain becomes the polyline;
5. the polyline gets the plane normal and the plane's elevation along
   it, and both are negated if its start point does not land where the
   curve's own start point projects to.

Everything the kernel hands out during a call is given back to
:meth:`~flatcad.kernel.Kernel.release` before the call returns, however
it returns.

:func:`projectextents` projects the diagonal of a bounding box.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from flatcad import geom
from flatcad.curve import Curve, POLYLINE_KINDS
from flatcad.errors import NullArgument
from flatcad.kernel import Kernel, NativeKernel
from flatcad.plane import ORIGIN, Extents, Plane
from flatcad.segments import (
    JOIN_TOLERANCE,
    Polyline,
    PolylineSegment,
    bulgefromsweep,
    ellipsesegments,
)

logger = logging.getLogger(__name__)


class _Scratch:
    """Figures obtained from a kernel during one projection."""

    def __init__(self, kernel: Kernel):
        self.kernel = kernel
        self.figures: List[list] = []

    def keep(self, figure):
        self.figures.append(figure)
        return figure

    def __enter__(self) -> "_Scratch":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        figures, self.figures = self.figures, []
        if figures:
            self.kernel.release(figures)
        return False


def encode(figure, plane: Plane) -> List[PolylineSegment]:
    """Plane-local bulged segments for one projected figure."""
    if geom.isclosedfigure(figure) or geom.isellipse(figure):
        return ellipsesegments(figure, plane)
    start = geom.startpoint(figure)
    end = geom.endpoint(figure)
    bulge = 0.0
    if geom.isarc(figure):
        n = geom.arcnormal(figure)
        c = figure[0]
        sweep = geom.angleto(geom.sub(start, c), geom.sub(end, c), n)
        if geom.isreversed(figure):
            sweep -= 360.0
        if geom.dot(n, plane.normal) < 0:
            sweep = -sweep
        bulge = bulgefromsweep(sweep)
    return [PolylineSegment(plane.to2d(start), plane.to2d(end), bulge)]


def elevation(origin, normal) -> float:
    """Distance of ``origin`` along ``normal`` from the world origin."""
    return Plane(ORIGIN, normal).worldtoplane().mul(geom.point(origin))[2]


def project(curve: Curve, plane: Plane, direction, kernel: Optional[Kernel] = None) -> Optional[Polyline]:
    """Project a polyline curve onto ``plane`` along ``direction``.

    Returns ``None`` for curves that are not one of the polyline kinds.
    Raises :class:`~flatcad.errors.NullArgument` for a missing curve or
    plane, and lets kernel failures propagate.
    """
    if curve is None:
        raise NullArgument("curve")
    if plane is None:
        raise NullArgument("plane")
    if curve.kind not in POLYLINE_KINDS:
        logger.debug("not projecting a %s curve", curve.kind.value)
        return None
    if kernel is None:
        kernel = NativeKernel()

    with _Scratch(kernel) as scratch:
        pieces = kernel.explode(curve)
        for piece in pieces:
            scratch.keep(piece)
        segments = []
        for piece in pieces:
            flat = scratch.keep(kernel.projectprimitive(piece, plane, direction))
            segments.extend(encode(flat, plane))
        chains = kernel.joinsegments(segments, JOIN_TOLERANCE)

    if not chains or not chains[0]:
        raise ValueError("curve has no segments to project")
    if len(chains) > 1:
        logger.debug("projection is discontinuous, keeping the first of %d chains", len(chains))

    pline = Polyline.fromsegments(chains[0], JOIN_TOLERANCE)
    pline.normal = list(plane.normal)
    pline.elevation = elevation(plane.origin, plane.normal)

    expected = plane.projectpoint(curve.startpoint, direction)
    if not JOIN_TOLERANCE.pointsequal(expected, pline.startpoint):
        logger.debug("projected polyline starts at %s, not %s; flipping its normal",
                     geom.vstr(pline.startpoint), geom.vstr(expected))
        pline.normal = geom.neg(plane.normal)
        pline.elevation = elevation(plane.origin, pline.normal)
    return pline


def projectextents(extents: Extents, plane: Plane, direction, dirplane: Plane) -> Polyline:
    """Project the diagonal of ``extents`` onto ``plane``.

    The box corners are given in the local frame of ``dirplane``; they
    are lifted to world space, projected along ``direction`` and the
    result is a two-vertex polyline through their world XY coordinates.
    """
    if plane is None:
        raise NullArgument("plane")
    if dirplane is None:
        raise NullArgument("dirplane")
    toworld = dirplane.planetoworld()
    corners = [toworld.mul(geom.point(p)) for p in (extents.minpoint, extents.maxpoint)]
    flat = [geom.convert2d(plane.projectpoint(p, direction)) for p in corners]
    return Polyline(flat, [0.0, 0.0])


__all__ = ["encode", "elevation", "project", "projectextents"]
