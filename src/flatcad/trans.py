"""Coordinate transform gateway.

Translates a point or a displacement between coordinate frames by
delegating to the host's raw transform primitive, after checking the
frame pair against the host's rules:

- a named code must lie in ``0..3`` (WCS, UCS, DCS, PSDCS);
- PSDCS is only legal outside tile mode and only against DCS.

Each named-code argument is checked against the other one, so both
``(frm, to)`` and ``(to, frm)`` are validated.

Example::

    from flatcad import trans
    from flatcad.frames import CoordSystem
    from flatcad.geom import point
    from flatcad.host import MatrixHost

    trans.sethost(MatrixHost())
    p = trans.transpoint(point(1, 2, 3), CoordSystem.UCS, CoordSystem.WCS)
"""

from __future__ import annotations

import logging
from typing import Optional

from flatcad import geom
from flatcad.errors import (
    HostNotConfigured,
    InvalidFrameCode,
    InvalidFrameCombination,
    NativeTransformFailure,
)
from flatcad.frames import CoordSystem, Frame
from flatcad.host import RTNORM, Host

logger = logging.getLogger(__name__)

_host: Optional[Host] = None


def sethost(host: Optional[Host]) -> None:
    """Set (or clear, with ``None``) the process-wide default host."""
    global _host
    _host = host


def gethost() -> Host:
    if _host is None:
        raise HostNotConfigured("no host configured for coordinate transforms")
    return _host


def _validate(a: Frame, b: Frame, host: Host) -> None:
    if not a.iscode:
        return
    code = a.value
    if code < CoordSystem.WCS or code > CoordSystem.PSDCS:
        raise InvalidFrameCode(code)
    if code == CoordSystem.PSDCS and (
            host.tilemode or not b.iscode or b.value != CoordSystem.DCS):
        raise InvalidFrameCombination(code)


def validate(frm, to, host: Optional[Host] = None) -> None:
    """Check a frame pair, raising ``InvalidFrameCode`` or
    ``InvalidFrameCombination``.

    The host's tile mode is only consulted when PSDCS is involved.
    """
    frm = Frame.of(frm)
    to = Frame.of(to)
    if host is None:
        host = gethost()
    _validate(frm, to, host)
    _validate(to, frm, host)


def trans(coords, frm, to, disp: bool = False, host: Optional[Host] = None) -> list:
    """Translate ``coords`` from frame ``frm`` to frame ``to``.

    ``coords`` is a flatcad point or vector.  The result has the same
    kind: a ``w == 0`` input comes back as a vector, anything else as a
    point.  ``disp`` selects displacement semantics for the host call.
    """
    frm = Frame.of(frm)
    to = Frame.of(to)
    if host is None:
        host = gethost()
    _validate(frm, to, host)
    _validate(to, frm, host)

    status, result = host.rawtrans([coords[0], coords[1], coords[2]], frm, to, bool(disp))
    if status != RTNORM:
        logger.debug("host transform %s -> %s failed with status %s", frm, to, status)
        raise NativeTransformFailure(status)

    if len(coords) > 3 and coords[3] == 0:
        return geom.vector(result[0], result[1], result[2])
    return geom.point(result[0], result[1], result[2])


def transpoint(p, frm, to, host: Optional[Host] = None) -> list:
    """Translate a point; the translation part of the frames applies."""
    return trans(geom.aspoint(p), frm, to, False, host)


def transvector(v, frm, to, host: Optional[Host] = None) -> list:
    """Translate a displacement; only the rotation part of the frames applies."""
    return trans(geom.asvector(v), frm, to, True, host)


__all__ = ["sethost", "gethost", "validate", "trans", "transpoint", "transvector"]
