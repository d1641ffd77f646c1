import pytest
from math import sqrt

from flatcad.curve import linecurve, lwpolyline, polyline3d, splinecurve, arccurve
from flatcad.geom import (
    arc, arcnormal, close, dist, ellipse, endpoint, isarc, isellipse,
    isfullellipse, iscircle, isline, isreversed, mag, point, sample, startpoint,
    unit, vclose, vect, vector,
)
from flatcad.kernel import Kernel, NativeKernel
from flatcad.plane import Plane
from flatcad.segments import PolylineSegment

## unit tests for the native geometry kernel

Z = vector(0,0,1)


class TestExplode:
    def test_abstract(self):
        with pytest.raises(TypeError):
            Kernel()

    def test_bulged(self):
        c = lwpolyline([(0,0),(2,0),(2,2),(0,2)],[1.0,0.0,-0.5,0.0],closed=True)
        figs = NativeKernel().explode(c)
        assert len(figs) == 4
        assert isarc(figs[0]) and not isreversed(figs[0])
        assert vclose(figs[0][0],point(1,0))
        assert vclose(startpoint(figs[0]),point(0,0))
        assert vclose(endpoint(figs[0]),point(2,0))
        ## a positive bulge turns counter-clockwise, through (1,-1)
        assert vclose(sample(figs[0],0.5),point(1,-1))
        assert isline(figs[1])
        assert isarc(figs[2]) and isreversed(figs[2])
        assert vclose(startpoint(figs[2]),point(2,2))
        assert vclose(endpoint(figs[2]),point(0,2))
        assert isline(figs[3])
        assert vclose(endpoint(figs[3]),point(0,0))

    def test_ocs(self):
        c = lwpolyline([(1,0),(3,0)],[1.0,0.0],normal=(0,0,-1),elevation=4.0)
        figs = NativeKernel().explode(c)
        assert len(figs) == 1
        assert vclose(arcnormal(figs[0]),point(0,0,-1))
        assert vclose(startpoint(figs[0]),c.vertex3d(0))
        assert vclose(endpoint(figs[0]),c.vertex3d(1))
        assert close(figs[0][0][2],-4.0)

    def test_zero_length(self):
        c = lwpolyline([(0,0),(0,0),(1,0)],[0.5,0.0,0.0])
        figs = NativeKernel().explode(c)
        assert len(figs) == 1
        assert isline(figs[0])

    def test_polyline3d(self):
        c = polyline3d([(0,0,0),(1,0,1),(1,1,2)],closed=True)
        figs = NativeKernel().explode(c)
        assert len(figs) == 3
        assert all(isline(f) for f in figs)
        assert vclose(figs[2][1],point(0,0,0))

    def test_primitives(self):
        k = NativeKernel()
        figs = k.explode(linecurve(point(0,0),point(1,1)))
        assert len(figs) == 1 and isline(figs[0])
        figs = k.explode(arccurve(arc(point(0,0),1)))
        assert isarc(figs[0])
        with pytest.raises(NotImplementedError):
            k.explode(splinecurve([point(0,0),point(1,1),point(2,0)]))


class TestProjectPrimitive:
    def test_line(self):
        l = [point(0,0,3),point(1,2,-4)]
        r = NativeKernel().projectprimitive(l,Plane.xy(),Z)
        assert vclose(r[0],point(0,0,0))
        assert vclose(r[1],point(1,2,0))

    def test_arc_identity(self):
        a = arc(point(1,1,5),2.0,30,120)
        r = NativeKernel().projectprimitive(a,Plane.xy(),Z)
        assert isarc(r)
        assert vclose(r[0],point(1,1,0))
        assert close(r[1][0],2.0)
        assert vclose(startpoint(r),point(startpoint(a)[0],startpoint(a)[1]))
        assert vclose(endpoint(r),point(endpoint(a)[0],endpoint(a)[1]))
        assert not isreversed(r)

    def test_arc_negated_plane(self):
        a = arc(point(0,0),1.0,0,90)
        r = NativeKernel().projectprimitive(a,Plane.xy().negate(),Z)
        assert isarc(r) and isreversed(r)
        assert vclose(arcnormal(r),point(0,0,-1))
        assert vclose(startpoint(r),point(1,0))
        assert vclose(endpoint(r),point(0,1))

    def test_reversed_arc(self):
        a = arc(point(0,0),1.0,0,90,samplereverse=True)
        r = NativeKernel().projectprimitive(a,Plane.xy(),Z)
        assert isreversed(r)
        assert vclose(startpoint(r),point(0,1))
        assert vclose(endpoint(r),point(1,0))

    def test_circle_oblique(self):
        pl = Plane(point(0,0,0),point(0,1,1))
        r = NativeKernel().projectprimitive(arc(point(0,0),1.0),pl,Z)
        assert isellipse(r) and isfullellipse(r)
        assert close(r[2][0],1.0/sqrt(2.0))
        assert close(mag(r[1]),sqrt(2.0))
        assert vclose(r[3],unit(point(0,1,1)))
        for i in range(8):
            p = sample(r,i/8.0)
            assert close(p[0]*p[0]+p[1]*p[1],1.0)
            assert close(p[2],-p[1])

    def test_arc_oblique(self):
        pl = Plane(point(0,0,0),point(0,1,1))
        a = arc(point(0,0),1.0,0,180)
        r = NativeKernel().projectprimitive(a,pl,Z)
        assert isellipse(r) and not isfullellipse(r)
        assert vclose(startpoint(r),point(1,0,0))
        assert vclose(endpoint(r),point(-1,0,0))
        assert vclose(sample(r,0.5),point(0,1,-1))

    def test_circle_parallel_plane(self):
        ## an oblique projection between parallel planes is a translation
        r = NativeKernel().projectprimitive(arc(point(0,0,1),1.0),Plane.xy(),vector(1,0,-1))
        assert iscircle(r)
        assert vclose(r[0],point(1,0,0))
        assert close(r[1][0],1.0)

    def test_ellipse_identity(self):
        e = ellipse(point(0,0),vect(2,0,0),0.5,0,90)
        r = NativeKernel().projectprimitive(e,Plane.xy(),Z)
        assert isellipse(r)
        assert vclose(startpoint(r),point(2,0))
        assert vclose(endpoint(r),point(0,1))
        assert close(r[2][0],0.5)

    def test_edge_on(self):
        a = arc(point(0,0),1.0,0,90,point(1,0,0))
        with pytest.raises(ValueError):
            NativeKernel().projectprimitive(a,Plane.xy(),Z)

    def test_parallel(self):
        with pytest.raises(ValueError):
            NativeKernel().projectprimitive([point(0,0),point(1,0)],Plane.xy(),vector(1,0,0))

    def test_unsupported(self):
        k = NativeKernel()
        with pytest.raises(NotImplementedError):
            k.projectprimitive(['spline',[point(0,0),point(1,0)],{'degree': 3}],Plane.xy(),Z)
        with pytest.raises(ValueError):
            k.projectprimitive(point(0,0),Plane.xy(),Z)


class TestJoin:
    def test_delegates(self):
        a = PolylineSegment(point(0,0),point(1,0))
        b = PolylineSegment(point(2,0),point(1,0))
        chains = NativeKernel().joinsegments([a,b])
        assert len(chains) == 1
        assert chains[0][1] == b.reverse()

    def test_release(self):
        figs = [[point(0,0),point(1,0)]]
        NativeKernel().release(figs)
        assert len(figs) == 1
