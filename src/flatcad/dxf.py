"""
DXF bridge for flatcad curves and polylines.

Reads DXF curve entities into :class:`~flatcad.curve.Curve` values and
writes projected :class:`~flatcad.segments.Polyline` values back as
LWPOLYLINE entities, using the ezdxf library.

Copyright (c) 2024 flatcad contributors
All rights reserved (MIT License)
"""

import logging
from pathlib import Path
from typing import Iterable, Union

import ezdxf

from flatcad import geom
from flatcad.curve import (
    Curve,
    arccurve,
    linecurve,
    lwpolyline,
    polyline2d,
    polyline3d,
    splinecurve,
)
from flatcad.segments import Polyline
from flatcad.xform import OCS

logger = logging.getLogger(__name__)

DEFAULT_LAYER = 'PATHS'


def _vec(v) -> list:
    return geom.point(float(v[0]), float(v[1]), float(v[2]))


def _extrusion(entity) -> list:
    return geom.unit(_vec(entity.dxf.get('extrusion', (0.0, 0.0, 1.0))))


def _ocscenter(entity, normal) -> list:
    c = entity.dxf.center
    q = OCS(normal).mul([float(c[0]), float(c[1]), float(c[2]), 1.0])
    return geom.point(q[0], q[1], q[2])


def curvefromentity(entity) -> Curve:
    """Build a :class:`Curve` from an ezdxf entity.

    LWPOLYLINE, 2D and 3D POLYLINE, LINE, ARC, CIRCLE and SPLINE are
    understood; anything else raises ``ValueError``.
    """
    kind = entity.dxftype()
    if kind == 'LWPOLYLINE':
        pts = list(entity.get_points('xyb'))
        return lwpolyline([(p[0], p[1]) for p in pts], [p[2] for p in pts],
                          closed=entity.closed, normal=_extrusion(entity),
                          elevation=float(entity.dxf.get('elevation', 0.0)))
    if kind == 'POLYLINE':
        if entity.is_3d_polyline:
            return polyline3d([_vec(v.dxf.location) for v in entity.vertices],
                              closed=entity.is_closed)
        if entity.is_2d_polyline:
            elev = entity.dxf.get('elevation', (0.0, 0.0, 0.0))
            verts = list(entity.vertices)
            return polyline2d([(v.dxf.location[0], v.dxf.location[1]) for v in verts],
                              [float(v.dxf.get('bulge', 0.0)) for v in verts],
                              closed=entity.is_closed, normal=_extrusion(entity),
                              elevation=float(elev[2]))
        raise ValueError('unsupported POLYLINE subtype (mesh or polyface)')
    if kind == 'LINE':
        return linecurve(_vec(entity.dxf.start), _vec(entity.dxf.end))
    if kind == 'ARC':
        n = _extrusion(entity)
        return arccurve(geom.arc(_ocscenter(entity, n), float(entity.dxf.radius),
                                 float(entity.dxf.start_angle) % 360.0,
                                 float(entity.dxf.end_angle) % 360.0, n))
    if kind == 'CIRCLE':
        n = _extrusion(entity)
        return arccurve(geom.arc(_ocscenter(entity, n), float(entity.dxf.radius), 0, 360, n))
    if kind == 'SPLINE':
        ctrl = list(entity.control_points)
        if not ctrl:
            ctrl = list(entity.fit_points)
        return splinecurve([_vec(p) for p in ctrl], int(entity.dxf.degree), bool(entity.closed))
    raise ValueError('cannot make a curve from a {} entity'.format(kind))


def addpolyline(msp, polyline: Polyline, layer: str = DEFAULT_LAYER):
    """Add ``polyline`` to layout ``msp`` as an LWPOLYLINE.

    Bulges, the closed flag, the elevation and the normal (as the
    extrusion) are carried over unchanged.
    """
    points = [(v[0], v[1], b) for v, b in zip(polyline.vertices, polyline.bulges)]
    n = polyline.normal
    return msp.add_lwpolyline(points, format='xyb', close=polyline.closed,
                              dxfattribs={'layer': layer,
                                          'elevation': polyline.elevation,
                                          'extrusion': (n[0], n[1], n[2])})


def writepolylines(polylines: Iterable[Polyline], path: Union[str, Path],
                   layer: str = DEFAULT_LAYER) -> Path:
    """Write ``polylines`` to a new R2010 drawing at ``path``."""
    doc = ezdxf.new(dxfversion='R2010', setup=False)
    if not doc.layers.has_entry(layer):
        doc.layers.new(layer, dxfattribs={'color': 7})
    msp = doc.modelspace()
    count = 0
    for pl in polylines:
        addpolyline(msp, pl, layer)
        count += 1
    path = Path(path)
    doc.saveas(path)
    logger.debug("wrote %d polyline(s) to %s", count, path)
    return path


__all__ = ['curvefromentity', 'addpolyline', 'writepolylines']
