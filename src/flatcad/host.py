"""Host application services consumed by the transform gateway.

The gateway needs two things from the host: whether the drawing is in
tile (single-viewport) mode, and a raw point/displacement transform
between frames that reports a status code instead of raising.

:class:`MatrixHost` is a self-contained host built from matrices, for
use outside a CAD session and in tests.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence, Tuple

from flatcad import geom
from flatcad.frames import CoordSystem, Frame, FrameKind
from flatcad.xform import OCS, Matrix

logger = logging.getLogger(__name__)

RTNORM = 5100
RTERROR = -5001


class Host(ABC):
    """Interface to the host application."""

    @property
    @abstractmethod
    def tilemode(self) -> bool:
        """True when model space is shown in a single tiled viewport."""

    @abstractmethod
    def rawtrans(self, coords: Sequence[float], frm: Frame, to: Frame,
                 disp: bool) -> Tuple[int, Optional[List[float]]]:
        """Transform three coordinates, returning ``(status, result)``.

        ``status == RTNORM`` signals success.
        """


class MatrixHost(Host):
    """Host whose coordinate systems are plain matrices.

    ``ucs`` maps UCS to WCS, ``view`` maps WCS to DCS and ``paper`` maps
    DCS to PSDCS.  Entities are registered by handle with their normal.
    """

    def __init__(self, ucs: Optional[Matrix] = None, view: Optional[Matrix] = None,
                 paper: Optional[Matrix] = None, tilemode: bool = True,
                 entities: Optional[Dict[str, Sequence[float]]] = None):
        self.ucs = ucs if ucs is not None else Matrix()
        self.view = view if view is not None else Matrix()
        self.paper = paper if paper is not None else Matrix()
        self._tilemode = tilemode
        self.entities: Dict[str, Sequence[float]] = dict(entities or {})

    @property
    def tilemode(self) -> bool:
        return self._tilemode

    @tilemode.setter
    def tilemode(self, value: bool) -> None:
        self._tilemode = bool(value)

    def addentity(self, handle: str, normal: Sequence[float]) -> None:
        self.entities[handle] = normal

    def _ocs(self, frame: Frame) -> Optional[Matrix]:
        if frame.kind is FrameKind.ENTITY:
            normal = self.entities.get(frame.value.handle)
            if normal is None:
                return None
        else:
            normal = frame.value
        if geom.mag(normal) < geom.epsilon:
            return None
        return OCS(normal)

    def _toworld(self, frame: Frame) -> Optional[Matrix]:
        if frame.kind is FrameKind.CODE:
            if frame.value == CoordSystem.WCS:
                return Matrix()
            if frame.value == CoordSystem.UCS:
                return self.ucs
            if frame.value == CoordSystem.DCS:
                return self.view.inverse()
            return None
        return self._ocs(frame)

    def _matrix(self, frm: Frame, to: Frame) -> Optional[Matrix]:
        psdcs = int(CoordSystem.PSDCS)
        dcs = int(CoordSystem.DCS)
        if frm.iscode and frm.value == psdcs:
            if to.iscode and to.value == dcs:
                return self.paper.inverse()
            return None
        if to.iscode and to.value == psdcs:
            if frm.iscode and frm.value == dcs:
                return self.paper
            return None
        src = self._toworld(frm)
        dst = self._toworld(to)
        if src is None or dst is None:
            return None
        return dst.inverse().mul(src)

    def rawtrans(self, coords, frm, to, disp):
        try:
            m = self._matrix(frm, to)
        except ValueError as e:
            logger.debug("singular frame matrix for %s -> %s: %s", frm, to, e)
            return RTERROR, None
        if m is None:
            return RTERROR, None
        w = 0.0 if disp else 1.0
        r = m.mul([float(coords[0]), float(coords[1]), float(coords[2]), w])
        return RTNORM, [r[0], r[1], r[2]]


__all__ = ["RTNORM", "RTERROR", "Host", "MatrixHost"]
