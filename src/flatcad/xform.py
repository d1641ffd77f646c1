## generalized matrix transformation operations for 3D homogeneous
## coordinates in flatcad

## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2024 flatcad contributors
## All rights reserved

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

from math import *
import flatcad.geom as geom

## a matrix is represented as a list of four four vectors, one per
## row.  Because vectors are represented as lists (not as instances
## of a class with meta-info) we assume that operations like Mx imply
## a column vector.

## Points (w=1) pick up the translation column when multiplied,
## displacements (w=0) do not.  That is the whole difference between
## transforming a point and transforming a displacement.


class Matrix:
    """4x4 transformation matrix class for transforming homogemenous 3D coordinates"""

    def __init__(self,a=False):
        self.m = [[1,0,0,0],
                  [0,1,0,0],
                  [0,0,1,0],
                  [0,0,0,1]]

        if isinstance(a,Matrix):
            for i in range(4):
                self.setrow(i,list(a.getrow(i)))

        elif isinstance(a,(tuple,list)):
            if len(a) == 4:
                if not all(len(r) == 4 for r in a):
                    raise ValueError('bad row length in matrix initialization')
                rows = a
            elif len(a)==16:
                rows = [a[i*4:i*4+4] for i in range(4)]
            else:
                raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))
            for i in range(4):
                for j in range(4):
                    x = rows[i][j]
                    if not geom.isgoodnum(x):
                        raise ValueError('bad element in matrix initialization: {}'.format(x))
                    self.m[i][j]=x
        elif a is not False:
            raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))

    def __repr__(self):
        return "Matrix({},{},{},{})".format(self.m[0],self.m[1],
                                            self.m[2],self.m[3])

    #return value indexed by i,j
    def get(self,i,j):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise ValueError('bad index passed to get: {},{}'.format(i,j))
        return self.m[i][j]

    #set value indexed by i,j
    def set(self,i,j,x):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise ValueError('bad index passed to set: {},{}'.format(i,j))
        if not geom.isgoodnum(x):
            raise ValueError('bad value passed to set: {}'.format(x))
        self.m[i][j]=x

    def getrow(self,i):
        if i < 0 or i > 3:
            raise ValueError('bad row passed to getrow: {}'.format(i))
        return self.m[i]

    def getcol(self,j):
        if j < 0 or j > 3:
            raise ValueError('bad column passed to getcol: {}'.format(j))
        return [self.m[i][j] for i in range(4)]

    def setrow(self,i,x):
        if not geom.isvect(x):
            raise ValueError('bad non-vector passed to setrow: {}'.format(x))
        if i < 0 or i > 3:
            raise ValueError('bad row index passed to setrow: {}'.format(i))
        self.m[i] = list(x)

    def setcol(self,j,x):
        if not geom.isvect(x):
            raise ValueError('bad non-vector passed to setcol: {}'.format(x))
        if j < 0 or j > 3:
            raise ValueError('bad column index passed to setcol: {}'.format(j))
        for i in range(4):
            self.m[i][j] = x[i]

    # matrix multiply.  If x is a matrix, compute MX.  If X is a
    # vector, compute Mx. If x is a scalar, compute xM. If x isn't any
    # of these, raise ValueError.

    def mul(self,x):
        if isinstance(x,Matrix):
            result = Matrix()
            for i in range(4):
                for j in range(4):
                    result.set(i,j,
                               geom.dot4(self.getrow(i),x.getcol(j)))
            return result
        elif geom.isvect(x):
            result = geom.vect()
            for i in range(4):
                result[i]=geom.dot4(self.getrow(i),x)
            return result
        elif geom.isgoodnum(x):
            result = Matrix()
            for i in range(4):
                result.setrow(i,geom.scale4(self.getrow(i),x))
            return result

        raise ValueError('bad thing passed to mul(): {}'.format(x))

    # numeric inverse by Gauss-Jordan elimination with partial
    # pivoting.  Singular matrices raise ValueError.
    def inverse(self):
        a = [list(self.getrow(i)) + [1.0 if i == j else 0.0 for j in range(4)]
             for i in range(4)]
        for col in range(4):
            piv = max(range(col,4),key=lambda r: abs(a[r][col]))
            if abs(a[piv][col]) < 1e-12:
                raise ValueError('singular matrix cannot be inverted')
            a[col], a[piv] = a[piv], a[col]
            pv = a[col][col]
            a[col] = [x/pv for x in a[col]]
            for r in range(4):
                if r != col:
                    f = a[r][col]
                    if f != 0.0:
                        a[r] = [x - f*y for x,y in zip(a[r],a[col])]
        return Matrix([row[4:] for row in a])


# return the generalized 4x4 arbitrary axis rotation matrix
def Rotation(axis,angle,inverse=False):
    m = geom.mag(axis)
    u = axis
    if m < geom.epsilon:
        raise ValueError('zero-length rotation axis not allowed')
    if not geom.close(m,1.0):
        u = geom.scale3(axis,1.0/m)

    if inverse:
        angle *= -1.0
    rad = (angle%360.0)*geom.pi2/360.0

    ux = u[0]
    uy = u[1]
    uz = u[2]

    cang = cos(rad)
    cmin = 1.0-cang
    sang = sin(rad)

    # see http://www.opengl-tutorial.org/assets/faq_quaternions/index.html#Q38
    R = [[cang + ux*ux*cmin, ux*uy*cmin-uz*sang, ux*uz*cmin+uy*sang,0],
         [uy*ux*cmin+uz*sang, cang + uy*uy*cmin, uy*uz*cmin - ux*sang,0],
         [uz*ux*cmin-uy*sang, uz*uy*cmin+ux*sang, cang+uz*uz*cmin,0],
         [0,0,0,1]]

    return Matrix(R)

def Translation(delta,inverse=False):
    if inverse:
        delta = geom.scale3(delta,-1.0)
    dx = delta[0]
    dy = delta[1]
    dz = delta[2]
    T = [[1,0,0,dx],
         [0,1,0,dy],
         [0,0,1,dz],
         [0,0,0,1]]
    return Matrix(T)

def Scale(x,y=False,z=False,inverse=False):
    sx = sy = sz = 1.0
    if geom.isgoodnum(x):
        sx = x
        if geom.isgoodnum(y) and geom.isgoodnum(z):
            sy = y
            sz = z
        else:
            sy = sz = x
    elif geom.isvect(x):
        sx = x[0]
        sy = x[1]
        sz = x[2]
    else:
        raise ValueError('bad scaling values passed to Scale')

    if inverse:
        sx = 1.0/sx
        sy = 1.0/sy
        sz = 1.0/sz

    S = [[sx,0,0,0],
         [0,sy,0,0],
         [0,0,sz,0],
         [0,0,0,1.0]]
    return Matrix(S)


## coordinate system matrices
## --------------------------

## the object coordinate system of a normal: columns are the
## arbitrary-axis X and Y and the normal itself.  Maps OCS
## coordinates to WCS.
def OCS(normal,inverse=False):
    n = geom.unit(normal)
    ax, ay = geom.arbitraryaxis(n)
    if inverse:
        return Matrix([[ax[0],ax[1],ax[2],0],
                       [ay[0],ay[1],ay[2],0],
                       [n[0],n[1],n[2],0],
                       [0,0,0,1]])
    return Matrix([[ax[0],ay[0],n[0],0],
                   [ax[1],ay[1],n[1],0],
                   [ax[2],ay[2],n[2],0],
                   [0,0,0,1]])

## plane-local to world.  The plane's axes are the OCS axes of its
## normal, its origin the plane origin.
def PlaneToWorld(plane):
    m = OCS(plane.normal)
    o = plane.origin
    m.setcol(3,[o[0],o[1],o[2],1])
    return m

## world to plane-local, the rigid inverse of PlaneToWorld
def WorldToPlane(plane):
    m = OCS(plane.normal,inverse=True)
    o = plane.origin
    t = m.mul([o[0],o[1],o[2],0])
    m.setcol(3,[-t[0],-t[1],-t[2],1])
    return m
