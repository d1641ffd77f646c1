## foundational point, vector and figure representations for flatcad
## Copyright (c) 2020 Richard DeVaul
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

"""foundational geometry representations for **flatcad**

====================
OVERVIEW
====================

The flatcad.geom module provides the scalar, vector, point and figure
representations that the rest of **flatcad** is built on.  Figures are
plain Python lists, not class instances, so they are cheap to copy,
easy to print, and easy to hand across the kernel and host seams.

vectors and points
==================

Vectors are lists of four numbers, ``[x, y, z, w]``.  The ``w``
coordinate is a homogeneous normalization factor.  A vector with
``w > 0`` is a located point and transforms with the full affine
matrix; a vector with ``w == 0`` is a free displacement and ignores
translation.  ``point()`` makes the former, ``vector()`` the latter,
and ``aspoint()`` / ``asvector()`` relabel one as the other without
touching the three coordinates.

Directions that are part of a figure definition (arc normals, ellipse
axes) are stored as ordinary ``w == 1`` lists, as they always have been
in this module.

2D points are ordinary points in the ``z == 0`` plane.

lines
=====

A line is a list of two points, parameterized over ``0 <= u <= 1``.

arcs
====

An arc is ``[center, [radius, start, end, w], <normal>]``.  Angles are
in degrees and are measured counter-clockwise about the normal, in the
arbitrary-axis frame (OCS) of that normal.  The normal defaults to
``[0, 0, 1]``, in which case the OCS is the world XY frame.  ``w == -1``
marks an ordinary arc, ``w == -2`` a sample-reversed arc, which is
traversed from the end angle to the start angle.  A full circle is
flagged by the integer values ``start == 0`` and ``end == 360``.

elliptical arcs
===============

An ellipse is ``[center, majoraxis, [ratio, start, end, -3], normal]``,
where ``majoraxis`` points from the center to the end of the major
axis, ``ratio`` is minor over major, and ``start`` / ``end`` are
parametric angles in degrees.  The minor axis is ``ratio * normal x
majoraxis``.  As with arcs, ``start == 0 and end == 360`` flags the
full figure.

splines
=======

Splines are carried as ``['spline', controlpoints, meta]`` where
``meta`` is a dictionary holding at least ``degree``.  They can be
described and sampled at their control points, but no operation in
this package flattens them.

"""

from math import *
import copy

## constants
epsilon=0.000005
pi2 = 2.0*pi

## operations on scalars
## -----------------------

## utility function to determine if argument is a "real" python
## number, since booleans are considered ints (True=1 and False=0 for
## integer arithmetic) but 1 and 0 are not considered boolean

def isgoodnum(n):
    """ determine if an argument is actually a scalar number, and not boolean
    """
    return (not isinstance(n,bool)) and isinstance(n,(int,float))

## utilty function to determine if scalars a and b are the same to
## within epsilon
def close(a,b):
    """ are two scalars the same within epsilon
    """
    return abs(a-b) < epsilon


## operations on vectors
## ------------------------

def vect(a=False,b=False,c=False,d=False):
    """Convenience function for making a homogeneous coordinates 4 vector
from practically anything
    """
    r = [0,0,0,1]
    if isgoodnum(a):
        r[0]=a
        if isgoodnum(b):
            r[1]=b
            if isgoodnum(c):
                r[2]=c
                if isgoodnum(d):
                    r[3]=d
    elif isinstance(a,(tuple,list)):
        for i in range(min(4,len(a))):
            x=a[i]
            if isgoodnum(x):
                r[i]=x
    return r

## determine if two vectors are the same, to within epsilon
def vclose(a,b,tol=False):
    if not tol:
        tol = epsilon
    return mag(sub(a,b)) < tol

## check to see if argument is a proper vector for our purposes
def isvect(x):
    """
    check to see if argument is a proper vector for our purposes
    """
    return isinstance(x,list) and len(x) == 4 and isgoodnum(x[0]) and isgoodnum(x[1]) and isgoodnum(x[2]) and isgoodnum(x[3])

## a displacement is a vector that lives in the w=0 hyperplane
def vector(x=0.0,y=0.0,z=0.0):
    """make a free displacement vector, `[x, y, z, 0]`"""
    if isinstance(x,(tuple,list)):
        return [x[0],x[1],x[2] if len(x) > 2 else 0.0,0.0]
    if not (isgoodnum(x) and isgoodnum(y) and isgoodnum(z)):
        raise ValueError('bad arguments to vector(): {} {} {}'.format(x,y,z))
    return [x,y,z,0.0]

def isdirection(x):
    """ is it a free displacement vector (w == 0)?"""
    return isvect(x) and x[3] == 0

## relabel a displacement as a point sharing the same three
## coordinates, and back again.  No arithmetic is performed.
def aspoint(v):
    """ reinterpret vector ``v`` as a point with the same coordinates"""
    return [v[0],v[1],v[2] if len(v) > 2 else 0.0,1.0]

def asvector(p):
    """ reinterpret point ``p`` as a displacement with the same coordinates"""
    return [p[0],p[1],p[2] if len(p) > 2 else 0.0,0.0]

## R^3 -> R^3 functions: ignore w component
## ------------------------------------------------
def add(a,b):
    """ 3 vector, `a + b`"""
    return [a[0]+b[0],a[1]+b[1],a[2]+b[2],1.0]

def sub(a,b):
    """ 3 vector, `a - b`"""
    return [a[0]-b[0],a[1]-b[1],a[2]-b[2],1.0]

def scale3(a,c):
    """ 3 vector, vector ''a'' times scalar ``c``, `a * c`"""
    return [a[0]*c,a[1]*c,a[2]*c,1.0]

def neg(a):
    """ 3 vector, `-a`"""
    return [-a[0],-a[1],-a[2],1.0]

## Compute the cross generalized product of a x b, assuming that both
## fall into the w=1 hyperplane
def cross(a,b):
    """Compute the cross generalized product of a x b, assuming that both
    fall into the w=1 hyperplane

    """

    return [ a[1]*b[2] - a[2]*b[1],
             a[2]*b[0] - a[0]*b[2],
             a[0]*b[1] - a[1]*b[0],
             1.0 ]

## R^4 -> R^4 functions: operate on w component
def scale4(a,c):
    """ 4 vector ``a`` times scalar ``c``"""
    return [a[0]*c,a[1]*c,a[2]*c,a[3]*c]

## Homogenize, or project back to the w=1 plane by scaling all values
## by w
def homo(a):
    """Homogenize, or project back to the w=1 plane by scaling all values by w"""
    return [ a[0]/a[3],
             a[1]/a[3],
             a[2]/a[3],
             1 ]

## R^3 -> R functions -- ignore w component
## ----------------------------------------
def dot(a,b):
    """ 3 vector ``a`` dot ``b`` """
    return a[0]*b[0]+a[1]*b[1]+a[2]*b[2]

def mag(a):
    """ compute the magnitude of 3 vector ``a``"""
    return sqrt(a[0]*a[0]+a[1]*a[1]+a[2]*a[2])

def dist(a,b):  # compute distance between two points a & b
    """ compute the euclidean disgtance between two 3 vector points ``a`` and ``b``"""
    return mag(sub(a,b))

def unit(a):
    """ return 3 vector ``a`` scaled to unit length"""
    m = mag(a)
    if m < epsilon:
        raise ValueError('cannot normalize zero-length vector: {}'.format(vstr(a)))
    return scale3(a,1.0/m)

## R^4 -> R functions
## ----------------------------------------
def dot4(a,b):
    """ 4 vect dot product"""
    return a[0]*b[0]+a[1]*b[1]+a[2]*b[2]+a[3]*b[3]


## angles between vectors
## ----------------------

## angle in degrees, in [0,360), swept counter-clockwise about
## ``ref`` to carry ``a`` onto ``b``.  Components of ``a`` and ``b``
## along ``ref`` are ignored.  With no reference the result is the
## unsigned angle in [0,180].
def angleto(a,b,ref=False):
    """return the angle in degrees from vector ``a`` to vector ``b``,
    measured counter-clockwise about ``ref`` if given"""
    if not ref:
        c = dot(a,b)/(mag(a)*mag(b))
        return degrees(acos(max(-1.0,min(1.0,c))))
    n = unit(ref)
    aa = sub(a,scale3(n,dot(a,n)))
    bb = sub(b,scale3(n,dot(b,n)))
    ang = degrees(atan2(dot(cross(aa,bb),n),dot(aa,bb)))
    return ang % 360.0


## the arbitrary-axis algorithm: the in-plane axes of the object
## coordinate system (OCS) implied by a normal vector.
_ARBITRARY_BOUND = 1.0/64.0

def arbitraryaxis(n):
    """return the unit ``[xaxis, yaxis]`` of the OCS of normal ``n``"""
    nn = unit(n)
    if abs(nn[0]) < _ARBITRARY_BOUND and abs(nn[1]) < _ARBITRARY_BOUND:
        ax = unit(cross([0,1,0,1],nn))
    else:
        ax = unit(cross([0,0,1,1],nn))
    ay = unit(cross(nn,ax))
    return [ax,ay]


## misc operations
## -----------------------------------------

deepcopy = copy.deepcopy

# pretty printing string formatter for vectors, lines, and polygons.
# You can use this anywhere you use str(), since it will fall back to
# str() if the argument isn't a flatcad vector, line, or polygon.
def vstr(a):
    """ utility function for recursively checking and formatting lists
    """
    if not isinstance(a,list):
        return str(a)
    if isvect(a):
        if abs(a[3]-1.0) > epsilon: # not in w=1
            return "[{}, {}, {}, {}]".format(a[0],a[1],a[2],a[3])
        elif abs(a[2]) > epsilon: # not in z=0
            return "[{}, {}, {}]".format(a[0],a[1],a[2])
        else: # in x-y plane
            return "[{}, {}]".format(a[0],a[1])
    if len(a) > 0 and all(isinstance(x,list) for x in a):
        return "[" + ", ".join(vstr(x) for x in a) + "]"
    return str(a)


## COMPUTATIONAL GEOMETRY
## ======================
## operations on points
## --------------------

def point(x=False,y=False,z=False,w=False):
    """Point creation from point or scalars"""
    if ispoint(x):
        return deepcopy(x)
    r = [0,0,0,1]
    if isgoodnum(x):
        r[0]=x
        if isgoodnum(y):
            r[1]=y
            if isgoodnum(z):
                r[2]=z
                if isgoodnum(w):
                    r[3]=w
    elif isinstance(x,(tuple,list)) and len(x) in (2,3):
        for i in range(len(x)):
            if not isgoodnum(x[i]):
                raise ValueError('bad coordinate passed to point(): {}'.format(x))
            r[i]=x[i]
    if r[3] > 0:
        return r
    else:
        raise ValueError('bad w argument to point()')


def ispoint(x):
    """ is it a point?"""
    if isvect(x) and x[3] > 0.0:
        return True
    return False

## project onto the world XY plane
def flatten(p):
    """ drop the z coordinate of point or vector ``p``, keeping its kind"""
    return [p[0],p[1],0.0,p[3]]

## WCS 2D conversion is a projection on the world XY plane
def convert2d(p):
    """ return the 2D point (z == 0) under 3D point ``p``"""
    return point(p[0],p[1])

## polar construction, angle in degrees from the X axis, in the XY
## plane of the base point
def polar(p,ang,d):
    """ return the point at angle ``ang`` and distance ``d`` from ``p``"""
    rad = radians(ang)
    return point(p[0]+d*cos(rad),p[1]+d*sin(rad),p[2])

## does ``p`` lie on the segment ``p1`` ``p2``?  An endpoint counts as
## lying on the segment.
def isbetween(p,p1,p2,tol=False):
    """ does point ``p`` lie on the segment from ``p1`` to ``p2``?"""
    if not tol:
        tol = epsilon
    if dist(p,p1) < tol or dist(p,p2) < tol:
        return True
    return vclose(unit(sub(p,p1)),unit(sub(p2,p)),tol)

# does point p lie inside 3D bounding box bbox
def isinsidebbox(bbox,p):
    """ does point ``p`` lie inside 3D bounding box ``bbox``?"""
    return p[0] >= bbox[0][0] and p[0] <= bbox[1][0] and\
        p[1] >= bbox[0][1] and p[1] <= bbox[1][1] and\
        p[2] >= bbox[0][2] and p[2] <= bbox[1][2]


## operations on lines
## -------------------

## make a line, copying points, value-safe
def line(p1,p2=False):
    """ make a line from two points, or copy a line"""
    if isline(p1):
        return deepcopy(p1)
    if ispoint(p1) and ispoint(p2):
        return [point(p1),point(p2)]
    raise ValueError('bad arguments passed to line()')

def isline(l):
    """ is it a line?"""
    return isinstance(l,list) and len(l) == 2 and ispoint(l[0]) and ispoint(l[1])

def sampleline(l,u):
    """ sample line ``l`` at parameter ``u``"""
    p1=l[0]
    p2=l[1]
    return add(p1,scale3(sub(p2,p1),u))


## operations on arcs
## ------------------

## make an arc, copying points, value-safe
## NOTE: if start and end are not specified, a full circle is created
def arc(c,rp=False,sn=False,e=False,n=False,samplereverse=False):
    """
    Construct an arc by copying an existing arc or specifying a center
    ``c``, radius ``rp``, start and end angles, and an optional unit
    normal ``n``.

    """
    if isarc(c):
        return deepcopy(c)
    elif ispoint(c):
        cen = point(c)
        w=-1
        if samplereverse:
            w=-2
        if isgoodnum(rp):
            r = rp
            if r < 0:
                raise ValueError('negative radius not allowed for arc')
            start = 0
            end = 360
            if isgoodnum(sn) and isgoodnum(e):
                start = sn
                end = e
            psu = vect(r,start,end,w)
            if not n:
                return [ cen, psu ]
            else:
                if not isvect(n) or abs(mag(n)-1.0) > epsilon:
                    raise ValueError('bad (non-unitary) plane vector for arc')
                return [ cen, psu, point(n[0],n[1],n[2]) ]

    raise ValueError('bad arguments passed to arc()')

## function to determine if argument can be interpreted as a valid
## arc.

def isarc(a):
    """ is it an arc? """
    if not isinstance(a,list):
        return False
    n = len(a)
    if n < 2 or n > 3:
        return False
    if not (ispoint(a[0]) and isvect(a[1])):
        return False
    if a[1][3] not in (-1,-2):           # is psuedovector marked?
        return False
    if a[1][0] < 0:
        return False
    if n == 3 and ( not ispoint(a[2]) or abs(mag(a[2])-1.0) > epsilon):
        return False
    return True

## test to see if an arc is a circle.  NOTE that due to modulus
## arithmetic, it's not possible to specify an arc with a full 360
## degees range, as this would "wrap around" to an arc of 0 degrees
## range.  To solve this, we use a special integer convention for
## start and end to signal a true full circle

def iscircle(a):
    """ is it a circle? """
    if isarc(a):
        start=a[1][1]
        end=a[1][2]
        return start==0 and end==360
    return False

def arcnormal(c):
    """ return the unit normal of arc ``c``"""
    if len(c) == 3:
        return point(c[2])
    return point(0,0,1)

def isreversed(c):
    """ is the arc or ellipse traversed from end to start?"""
    return c[1][3] == -2

## signed sweep, in degrees, of the traversal of an arc about its own
## normal.  Negative for sample-reversed arcs.
def arcsweep(c):
    """ return the signed sweep of arc ``c`` in degrees"""
    start=c[1][1]
    end=c[1][2]
    if start == 0 and end == 360:
        sweep = 360.0
    else:
        sweep = (end - start) % 360.0
    if isreversed(c):
        return -sweep
    return sweep

## Sample the arc over the start-end angle interval
def samplearc(c,u,polar=False):
    """sample the arc ``c`` at parameter ``u`` and return the resulting
    point.  If ``polar`` is true, return the center, radius and angle
    instead."""
    p=c[0]
    r=c[1][0]
    start=c[1][1]
    end=c[1][2]
    if isreversed(c): # if arc is flagged as sample-reversed, flip u
        u=1.0-u
    if not (start == 0 and end == 360):
        start = start % 360.0
        end = end % 360.0
        if end < start:
            end += 360.0
    angle = ((end-start)*u+start)%360.0
    if polar:
        return [ p,r,angle]
    rad = radians(angle)
    ax, ay = arbitraryaxis(arcnormal(c))
    q = add(scale3(ax,r*cos(rad)),scale3(ay,r*sin(rad)))
    return add(p,q)


## operations on elliptical arcs
## -----------------------------

def ellipse(c,major,ratio,start=0,end=360,n=False):
    """ make an ellipse or elliptical arc with center ``c``, major axis
    vector ``major``, minor/major ``ratio`` and unit normal ``n``"""
    if not ispoint(c) or not isvect(major):
        raise ValueError('bad center or axis passed to ellipse()')
    if not isgoodnum(ratio) or ratio <= 0 or ratio > 1.0+epsilon:
        raise ValueError('bad axis ratio passed to ellipse(): {}'.format(ratio))
    if not n:
        n = [0,0,1,1]
    if abs(mag(n)-1.0) > epsilon:
        raise ValueError('bad (non-unitary) plane vector for ellipse')
    if abs(dot(major,n)) > epsilon*max(1.0,mag(major)):
        raise ValueError('ellipse major axis does not lie in its plane')
    return [ point(c), point(major[0],major[1],major[2]),
             vect(ratio,start,end,-3), point(n[0],n[1],n[2]) ]

def isellipse(e):
    """ is it an ellipse?"""
    return isinstance(e,list) and len(e) == 4 and ispoint(e[0]) and \
        isvect(e[1]) and isvect(e[2]) and e[2][3] == -3 and ispoint(e[3])

def isfullellipse(e):
    """ is it a closed ellipse?"""
    return isellipse(e) and e[2][1] == 0 and e[2][2] == 360

def ellipsesweep(e):
    """ return the parametric sweep of ellipse ``e`` in degrees"""
    start=e[2][1]
    end=e[2][2]
    if start == 0 and end == 360:
        return 360.0
    return (end - start) % 360.0

def sampleellipse(e,u):
    """ sample ellipse ``e`` at parameter ``u``"""
    c, major, psu, n = e
    start = psu[1]
    t = radians(start + ellipsesweep(e)*u)
    minor = scale3(cross(n,major),psu[0])
    return add(c,add(scale3(major,cos(t)),scale3(minor,sin(t))))


## operations on splines
## ---------------------

def spline(ctrl,degree=3,closed=False):
    """ make a spline definition from control points"""
    if len(ctrl) < 2:
        raise ValueError('a spline needs at least two control points')
    return ['spline',[point(p) for p in ctrl],{'degree': degree, 'closed': closed}]

def isspline(s):
    """ is it a spline?"""
    return isinstance(s,list) and len(s) == 3 and s[0] == 'spline'


## generic figure operations
## -------------------------

def isclosedfigure(x):
    """ is the figure a full circle or a full ellipse?"""
    return iscircle(x) or isfullellipse(x)

def sample(x,u):
    """ sample line, arc, ellipse or spline ``x`` at parameter ``u``"""
    if isline(x):
        return sampleline(x,u)
    elif isarc(x):
        return samplearc(x,u)
    elif isellipse(x):
        return sampleellipse(x,u)
    elif isspline(x):
        pts = x[1]
        if u <= 0:
            return point(pts[0])
        if u >= 1:
            return point(pts[-1])
        raise NotImplementedError('interior spline sampling not supported')
    raise ValueError('bad figure passed to sample(): {}'.format(vstr(x)))

def startpoint(x):
    """ first point of the traversal of figure ``x``"""
    return sample(x,0.0)

def endpoint(x):
    """ last point of the traversal of figure ``x``"""
    return sample(x,1.0)
