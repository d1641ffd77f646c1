import pytest
from math import radians, sqrt, tan

from flatcad.curve import linecurve, lwpolyline, polyline2d, polyline3d, splinecurve
from flatcad.errors import NullArgument
from flatcad.geom import arc, close, neg, point, unit, vclose, vector
from flatcad.kernel import NativeKernel
from flatcad.plane import Extents, Plane
from flatcad.project import elevation, encode, project, projectextents
from flatcad.segments import PolylineSegment

## unit tests for the curve projector

Z = vector(0,0,1)


def samepolyline(a, b):
    assert a.closed == b.closed
    assert len(a.vertices) == len(b.vertices)
    for p, q in zip(a.vertices, b.vertices):
        assert vclose(p,q)
    for x, y in zip(a.bulges, b.bulges):
        assert close(x,y)
    assert vclose(a.normal,b.normal)
    assert close(a.elevation,b.elevation)


def bulgedsquare():
    return lwpolyline([(0,0),(2,0),(2,2),(0,2)],[1.0,0.0,-0.5,0.0],closed=True)


class CountingKernel(NativeKernel):
    """Native kernel that tracks what it hands out and gets back."""

    def __init__(self, failat=None, failjoin=False):
        self.failat = failat
        self.failjoin = failjoin
        self.projected = 0
        self.acquired = []
        self.released = []

    def explode(self, curve):
        figs = super().explode(curve)
        self.acquired.extend(figs)
        return figs

    def projectprimitive(self, figure, plane, direction):
        if self.projected == self.failat:
            raise RuntimeError('projection failed')
        self.projected += 1
        fig = super().projectprimitive(figure, plane, direction)
        self.acquired.append(fig)
        return fig

    def joinsegments(self, segments, tol):
        if self.failjoin:
            raise RuntimeError('join failed')
        return super().joinsegments(segments, tol)

    def release(self, figures):
        self.released.extend(figures)

    def balanced(self):
        return sorted(map(id,self.acquired)) == sorted(map(id,self.released))


class MirrorKernel(NativeKernel):
    """Kernel whose joiner answers with the chain mirrored across local y."""

    def joinsegments(self, segments, tol):
        chains = super().joinsegments(segments, tol)
        return [[PolylineSegment(point(-s.start[0],s.start[1]),
                                 point(-s.end[0],s.end[1]),-s.bulge)
                 for s in chain] for chain in chains]


class ArcKernel(NativeKernel):
    """Kernel that explodes any curve into one counter-clockwise arc."""

    def __init__(self, sweep):
        self.sweep = sweep

    def explode(self, curve):
        return [arc(point(0,0),1.0,0,self.sweep)]


class TestArguments:
    def test_null(self):
        with pytest.raises(NullArgument) as exc:
            project(None,Plane.xy(),Z)
        assert exc.value.name == 'curve'
        assert isinstance(exc.value, ValueError)
        with pytest.raises(NullArgument) as exc:
            project(bulgedsquare(),None,Z)
        assert exc.value.name == 'plane'

    def test_unsupported_kind(self):
        k = CountingKernel()
        spl = splinecurve([point(0,0),point(1,1),point(2,0),point(3,1)])
        assert project(spl,Plane.xy(),Z,k) is None
        assert project(linecurve(point(0,0),point(1,0)),Plane.xy(),Z,k) is None
        assert k.acquired == [] and k.released == []


class TestProject:
    def test_identity(self):
        c = bulgedsquare()
        for d in (Z, vector(0,0,-1)):
            pl = project(c,Plane.xy(),d)
            assert pl.closed
            assert len(pl.vertices) == 4
            for p, q in zip(pl.vertices,c.vertices):
                assert vclose(p,q)
            for x, y in zip(pl.bulges,c.bulges):
                assert close(x,y)
            assert vclose(pl.normal,point(0,0,1))
            assert close(pl.elevation,0.0)

    def test_heavy_polyline(self):
        c = polyline2d([(0,0),(2,0),(2,2)],[0.5,0.0,0.0])
        pl = project(c,Plane.xy(),Z)
        assert not pl.closed
        assert len(pl.vertices) == 3
        assert close(pl.bulges[0],0.5)

    def test_elevation(self):
        c = bulgedsquare()
        pl = project(c,Plane(point(0,0,7),Z),Z)
        assert close(pl.elevation,7.0)
        for p, q in zip(pl.vertices3d(),[c.vertex3d(i) for i in range(4)]):
            assert vclose(p,point(q[0],q[1],7.0))

    def test_polyline3d(self):
        c = polyline3d([(0,0,5),(1,0,7),(1,1,9)])
        pl = project(c,Plane.xy(),Z)
        assert not pl.closed
        assert [vclose(p,q) for p, q in zip(pl.vertices,[point(0,0),point(1,0),point(1,1)])] == [True]*3
        assert pl.bulges == [0.0,0.0,0.0]

    @pytest.mark.parametrize('sweep', [90.0, 180.0, 270.0])
    def test_arc_bulge(self, sweep):
        c = lwpolyline([(1,0),(0,1)])
        pl = project(c,Plane.xy(),Z,ArcKernel(sweep))
        assert len(pl.vertices) == 2
        assert close(pl.bulges[0],tan(radians(sweep)/4.0))
        assert pl.bulges[1] == 0.0

    def test_direction_sign(self):
        c = bulgedsquare()
        pl = Plane(point(0,0,-3),point(0,1,1))
        d = vector(0,0.2,1)
        samepolyline(project(c,pl,d),project(c,pl,neg(d)))

    def test_negated_plane(self):
        c = bulgedsquare()
        pl = Plane(point(0,0,3),Z)
        a = project(c,pl,Z)
        b = project(c,pl.negate(),Z)
        assert vclose(b.normal,neg(a.normal))
        assert close(b.elevation,-a.elevation)
        for x, y in zip(a.bulges,b.bulges):
            assert close(x,-y)
        for p, q in zip(a.vertices,b.vertices):
            assert close(p[0],-q[0]) and close(p[1],q[1])
        for p, q in zip(a.vertices3d(),b.vertices3d()):
            assert vclose(p,q)
        samepolyline(b,a.mirrored())

    def test_flip(self):
        c = lwpolyline([(1,0),(3,0),(3,2)],[0.5,0.0,0.0])
        pl = Plane(point(0,0,4),Z)
        native = project(c,pl,Z)
        flipped = project(c,pl,Z,MirrorKernel())
        assert vclose(native.normal,point(0,0,1))
        assert close(native.elevation,4.0)
        assert vclose(flipped.normal,point(0,0,-1))
        assert close(flipped.elevation,-4.0)
        for p, q in zip(native.vertices3d(),flipped.vertices3d()):
            assert vclose(p,q)
        assert vclose(flipped.startpoint,point(1,0,4))

    def test_oblique(self):
        ## a semicircle seen along Z on a tilted plane is half an ellipse
        c = lwpolyline([(1,0),(-1,0)],[1.0,0.0])
        pl = Plane(point(0,0,0),point(0,1,1))
        r = project(c,pl,Z)
        assert len(r.vertices) == 5
        assert vclose(r.normal,unit(point(0,1,1)))
        pts = r.vertices3d()
        assert vclose(pts[0],point(1,0,0))
        assert vclose(pts[2],point(0,1,-1))
        assert vclose(pts[4],point(-1,0,0))
        for p in pts:
            assert close(p[0]*p[0]+p[1]*p[1],1.0)
            assert close(p[2],-p[1])
        assert all(b > 0 for b in r.bulges[:-1]) or all(b < 0 for b in r.bulges[:-1])

    def test_path_through_start(self):
        pts = [(0,0),(4,0),(4,4),(0,0),(-3,1)]
        pl = project(lwpolyline(pts),Plane.xy(),Z)
        assert not pl.closed
        assert len(pl.vertices) == 5
        for p, q in zip(pl.vertices,pts):
            assert vclose(p,point(*q))
        assert vclose(pl.normal,point(0,0,1))

    def test_polyline3d_through_start(self):
        c = polyline3d([(0,0,0),(4,0,0),(4,4,0),(0,0,3),(-3,1,0)])
        pl = project(c,Plane.xy(),Z)
        assert not pl.closed
        assert len(pl.vertices) == 5
        assert vclose(pl.vertices[3],point(0,0))
        assert vclose(pl.vertices[4],point(-3,1))

    def test_parallel_direction(self):
        with pytest.raises(ValueError):
            project(bulgedsquare(),Plane.xy(),vector(1,0,0))

    def test_first_chain(self):
        c = lwpolyline([(0,0),(1,0)])
        ## two pieces that do not meet
        k = NativeKernel()
        k.explode = lambda curve: [[point(0,0),point(1,0)],[point(5,5),point(6,5)]]
        pl = project(c,Plane.xy(),Z,k)
        assert len(pl.vertices) == 2
        assert vclose(pl.vertices[1],point(1,0))


class TestRelease:
    def test_normal(self):
        k = CountingKernel()
        project(bulgedsquare(),Plane.xy(),Z,k)
        assert len(k.acquired) == 8
        assert k.balanced()

    def test_projection_failure(self):
        k = CountingKernel(failat=2)
        with pytest.raises(RuntimeError):
            project(bulgedsquare(),Plane.xy(),Z,k)
        assert len(k.acquired) == 6
        assert k.balanced()

    def test_join_failure(self):
        k = CountingKernel(failjoin=True)
        with pytest.raises(RuntimeError):
            project(bulgedsquare(),Plane.xy(),Z,k)
        assert len(k.acquired) == 8
        assert k.balanced()

    def test_geometry_failure(self):
        k = CountingKernel()
        with pytest.raises(ValueError):
            project(bulgedsquare(),Plane.xy(),vector(1,0,0),k)
        assert len(k.acquired) == 4
        assert k.balanced()


class TestEncode:
    def test_line(self):
        segs = encode([point(0,0,2),point(1,0,2)],Plane.xy())
        assert len(segs) == 1
        assert segs[0].bulge == 0.0
        assert vclose(segs[0].start,point(0,0))

    def test_arc_against_plane(self):
        ## a counter-clockwise arc about -Z reads clockwise on the XY plane
        a = arc(point(0,0),1.0,0,90,point(0,0,-1))
        segs = encode(a,Plane.xy())
        assert close(segs[0].bulge,-tan(radians(22.5)))

    def test_circle(self):
        segs = encode(arc(point(0,0),1.0),Plane.xy())
        assert len(segs) == 4

    def test_elevation(self):
        assert close(elevation(point(0,0,3),point(0,0,1)),3.0)
        assert close(elevation(point(0,0,3),point(0,0,-1)),-3.0)
        assert close(elevation(point(1,1,1),unit(point(1,1,1))),sqrt(3.0))


class TestExtents:
    def test_box(self):
        e = Extents((0,0,0),(10,5,0))
        pl = projectextents(e,Plane.xy(),vector(0,0,-1),Plane.xy())
        assert len(pl.vertices) == 2
        assert vclose(pl.vertices[0],point(0,0))
        assert vclose(pl.vertices[1],point(10,5))
        assert pl.bulges == [0.0,0.0]
        assert pl.elevation == 0.0
        assert not pl.closed

    def test_dirplane(self):
        e = Extents((0,0,0),(10,5,0))
        pl = projectextents(e,Plane.xy(),vector(0,0,-1),Plane(point(1,1,1),Z))
        assert vclose(pl.vertices[0],point(1,1))
        assert vclose(pl.vertices[1],point(11,6))

    def test_null(self):
        e = Extents((0,0,0),(1,1,1))
        with pytest.raises(NullArgument):
            projectextents(e,None,Z,Plane.xy())
        with pytest.raises(NullArgument):
            projectextents(e,Plane.xy(),Z,None)
