import pytest
from flatcad.xform import *
from flatcad.plane import Plane
## unit tests for flatcad xform.py

class TestXform:
    """unit tests for flatcad matrix operations"""

    def test_matrix(self):
        foo = Matrix([1,2,3,4,5,6,7,8,9,10,11,12,13,14,15,16])
        fooC = Matrix(foo)
        bar = Matrix([[1,0,0,1],[0,1,0,1],[0,0,1,1],[0,0,0,1]])
        baz = geom.vect(1,2,3)
        I = Matrix()
        a = 10.0
        assert(I.mul(bar).m == bar.m)
        assert(I.mul(foo).m == foo.m)
        assert(foo.mul(I).m == foo.m)
        assert(fooC.m == foo.m)
        fooC.set(0,0,99)
        assert(foo.get(0,0) == 1)
        assert(foo.mul(bar).m == [[1,2,3,10],[5,6,7,26],[9,10,11,42],[13,14,15,58]])
        assert(foo.mul(baz) == [18, 46, 74, 102])
        assert(foo.mul(a).getrow(0) == [10.0,20.0,30.0,40.0])
        assert(foo.getcol(0) == [1,5,9,13])
        assert(geom.homo(foo.mul(baz)) ==
               [18.0/102.0, 46.0/102.0, 74.0/102.0, 1.0])

    def test_bad_init(self):
        with pytest.raises(ValueError):
            Matrix([1,2,3])
        with pytest.raises(ValueError):
            Matrix('abc')

    def test_point_vs_displacement(self):
        T = Translation(geom.point(1,2,3))
        assert geom.vclose(T.mul(geom.point(0,0,0)),geom.point(1,2,3))
        assert T.mul(geom.vector(1,0,0)) == [1,0,0,0.0]

    def test_inverse(self):
        M = Translation(geom.point(1,2,3)).mul(Rotation(geom.point(0,0,1),30.0))
        Mi = M.inverse()
        p = geom.point(4,-2,7)
        assert geom.vclose(Mi.mul(M.mul(p)),p)
        R = Rotation(geom.point(1,1,0),45.0)
        Ri = Rotation(geom.point(1,1,0),45.0,inverse=True)
        assert geom.vclose(Ri.mul(R.mul(p)),p)
        S = Scale(2.0)
        assert geom.vclose(S.inverse().mul(geom.point(2,4,6)),geom.point(1,2,3))
        assert geom.vclose(Scale(2.0,inverse=True).mul(geom.point(2,4,6)),geom.point(1,2,3))

    def test_singular(self):
        with pytest.raises(ValueError):
            Scale(1.0,0.0,1.0).inverse()

    def test_rotation(self):
        R = Rotation(geom.point(0,0,1),90.0)
        assert geom.vclose(R.mul(geom.point(1,0,0)),geom.point(0,1,0))
        with pytest.raises(ValueError):
            Rotation(geom.point(0,0,0),90.0)


class TestFrames:
    def test_ocs_z(self):
        M = OCS(geom.point(0,0,1))
        assert geom.vclose(M.mul(geom.point(1,2,3)),geom.point(1,2,3))

    def test_ocs_negative_z(self):
        M = OCS(geom.point(0,0,-1))
        assert geom.vclose(M.mul(geom.point(1,2,3)),geom.point(-1,2,-3))
        assert geom.vclose(OCS(geom.point(0,0,-1),inverse=True).mul(geom.point(-1,2,-3)),
                           geom.point(1,2,3))

    def test_ocs_columns(self):
        n = geom.unit(geom.point(1,1,1))
        M = OCS(n)
        ax, ay = geom.arbitraryaxis(n)
        assert geom.vclose(M.getcol(0),ax)
        assert geom.vclose(M.getcol(2),n)

    def test_plane_round_trip(self):
        pl = Plane(geom.point(1,2,3),geom.point(0,1,1))
        p = geom.point(5,-4,2)
        q = WorldToPlane(pl).mul(p)
        assert geom.vclose(PlaneToWorld(pl).mul(q),p)
        ## the plane origin maps to the local origin
        assert geom.vclose(WorldToPlane(pl).mul(pl.origin),geom.point(0,0,0))
