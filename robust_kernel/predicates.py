"""
Robust Predicates Kernel

Orientation, point-on-segment, point-in-ring and segment/segment
intersection tests over plain ``(x, y)`` tuples. Every predicate takes the
same epsilon (see ``tolerance.py``) and measures it as a *distance*, which
keeps the tests mutually consistent:

- a point within epsilon of a segment is on it, and collinear with it;
- a point within epsilon of a ring is on the ring's boundary and is never
  reported as inside or outside (boundary wins the tie-break).

All functions are pure. Nothing here raises for finite input except
``segment_frame``, whose ``DegenerateCase`` is meant to be caught by callers.

References:
- O'Rourke (1998) - Computational Geometry in C, ch. 1 and 7
- Shewchuk (1997) - Adaptive Precision Floating-Point Arithmetic and Fast
  Robust Geometric Predicates
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple

from .tolerance import Coord


class DegenerateCase(Exception):
    """A segment collapsed to a point within tolerance."""


class Orientation(Enum):
    """Turn direction of an ordered triple of coordinates."""
    COUNTERCLOCKWISE = 1
    CLOCKWISE = -1
    COLLINEAR = 0


class RingPosition(Enum):
    """Position of a coordinate relative to a closed ring."""
    INSIDE = "inside"
    ON_BOUNDARY = "on_boundary"
    OUTSIDE = "outside"


class IntersectionKind(Enum):
    """Shape of the intersection of two segments."""
    NONE = "none"
    POINT = "point"
    COLLINEAR = "collinear"


@dataclass(frozen=True)
class SegmentIntersection:
    """
    Result of intersecting two closed segments.

    Attributes:
        kind: NONE, POINT or COLLINEAR
        points: The intersection point, or both ends of a collinear overlap
        is_proper: True when the segments cross at a point interior to both
    """
    kind: IntersectionKind
    points: Tuple[Coord, ...] = ()
    is_proper: bool = False


NO_INTERSECTION = SegmentIntersection(IntersectionKind.NONE)


def distance(p: Coord, q: Coord) -> float:
    """Euclidean distance between two coordinates."""
    return math.hypot(q[0] - p[0], q[1] - p[1])


def coords_equal(p: Coord, q: Coord, eps: float) -> bool:
    """Check whether two coordinates coincide within tolerance."""
    return distance(p, q) <= eps


def cross(o: Coord, a: Coord, b: Coord) -> float:
    """Z component of (a - o) x (b - o)."""
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def orientation(p: Coord, q: Coord, r: Coord, eps: float) -> Orientation:
    """
    Orientation of ``r`` relative to the directed line ``p -> q``.

    ``r`` is collinear when its distance to the line is at most ``eps``.
    A line whose defining points coincide within ``eps`` makes every
    triple collinear.
    """
    length = distance(p, q)
    if length <= eps:
        return Orientation.COLLINEAR
    det = cross(p, q, r)
    if abs(det) <= eps * length:
        return Orientation.COLLINEAR
    return Orientation.COUNTERCLOCKWISE if det > 0 else Orientation.CLOCKWISE


def closest_point_on_segment(p: Coord, a: Coord, b: Coord) -> Coord:
    """Point of the closed segment ``a-b`` nearest to ``p``."""
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    length_sq = dx * dx + dy * dy
    if length_sq == 0.0:
        return a

    t = ((p[0] - a[0]) * dx + (p[1] - a[1]) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    return (a[0] + t * dx, a[1] + t * dy)


def point_on_segment(p: Coord, a: Coord, b: Coord, eps: float) -> bool:
    """Check whether ``p`` lies within ``eps`` of the closed segment ``a-b``."""
    if (p[0] < min(a[0], b[0]) - eps or p[0] > max(a[0], b[0]) + eps or
            p[1] < min(a[1], b[1]) - eps or p[1] > max(a[1], b[1]) + eps):
        return False
    return distance(p, closest_point_on_segment(p, a, b)) <= eps


def point_in_ring(p: Coord, ring: Sequence[Coord], eps: float) -> RingPosition:
    """
    Locate ``p`` relative to a closed ring.

    The boundary test runs first, so anything within ``eps`` of an edge is
    ON_BOUNDARY. Otherwise an even-odd crossing test decides, which also
    gives a deterministic answer for self-intersecting rings.

    Args:
        p: Query coordinate
        ring: Closed coordinate sequence (first == last)
        eps: Working tolerance

    Returns:
        INSIDE, ON_BOUNDARY or OUTSIDE
    """
    for a, b in zip(ring, ring[1:]):
        if point_on_segment(p, a, b, eps):
            return RingPosition.ON_BOUNDARY

    x, y = p
    inside = False
    for (xi, yi), (xj, yj) in zip(ring, ring[1:]):
        if (yi > y) != (yj > y):
            x_cross = xi + (y - yi) * (xj - xi) / (yj - yi)
            if x < x_cross:
                inside = not inside

    return RingPosition.INSIDE if inside else RingPosition.OUTSIDE


def signed_ring_area(ring: Sequence[Coord]) -> float:
    """Shoelace area of a closed ring; positive when counter-clockwise."""
    total = 0.0
    for (x1, y1), (x2, y2) in zip(ring, ring[1:]):
        total += x1 * y2 - x2 * y1
    return total / 2.0


def segment_frame(a: Coord, b: Coord, eps: float) -> Tuple[float, float, float]:
    """
    Length and unit direction of the segment ``a -> b``.

    Raises:
        DegenerateCase: if the segment is no longer than ``eps``
    """
    length = distance(a, b)
    if length <= eps:
        raise DegenerateCase(f"Zero-length segment at {a}")
    return length, (b[0] - a[0]) / length, (b[1] - a[1]) / length


def project(p: Coord, origin: Coord, ux: float, uy: float) -> float:
    """Signed distance of ``p`` along the unit direction from ``origin``."""
    return (p[0] - origin[0]) * ux + (p[1] - origin[1]) * uy


def segment_intersection(a: Coord, b: Coord, c: Coord, d: Coord,
                         eps: float) -> SegmentIntersection:
    """
    Intersect the closed segments ``a-b`` and ``c-d``.

    Distinguishes a collinear overlap, a touch at an endpoint and a proper
    crossing. The inputs are put in a canonical order first, so swapping
    the segments or reversing either one yields the identical result.

    Args:
        a, b: First segment
        c, d: Second segment
        eps: Working tolerance

    Returns:
        SegmentIntersection describing the overlap
    """
    first = (a, b) if a <= b else (b, a)
    second = (c, d) if c <= d else (d, c)
    if second < first:
        first, second = second, first
    (a, b), (c, d) = first, second

    if (max(a[0], b[0]) + eps < min(c[0], d[0]) or max(c[0], d[0]) + eps < min(a[0], b[0]) or
            max(a[1], b[1]) + eps < min(c[1], d[1]) or max(c[1], d[1]) + eps < min(a[1], b[1])):
        return NO_INTERSECTION

    # Zero-length segments behave as points
    first_degenerate = coords_equal(a, b, eps)
    second_degenerate = coords_equal(c, d, eps)
    if first_degenerate and second_degenerate:
        if coords_equal(a, c, eps):
            return SegmentIntersection(IntersectionKind.POINT, (a,))
        return NO_INTERSECTION
    if first_degenerate:
        if point_on_segment(a, c, d, eps):
            return SegmentIntersection(IntersectionKind.POINT, (a,))
        return NO_INTERSECTION
    if second_degenerate:
        if point_on_segment(c, a, b, eps):
            return SegmentIntersection(IntersectionKind.POINT, (c,))
        return NO_INTERSECTION

    o1 = orientation(a, b, c, eps)
    o2 = orientation(a, b, d, eps)
    o3 = orientation(c, d, a, eps)
    o4 = orientation(c, d, b, eps)

    if (o1 is Orientation.COLLINEAR and o2 is Orientation.COLLINEAR) or \
            (o3 is Orientation.COLLINEAR and o4 is Orientation.COLLINEAR):
        return _collinear_intersection(a, b, c, d, eps)

    for point, (s, t) in ((c, (a, b)), (d, (a, b)), (a, (c, d)), (b, (c, d))):
        if point_on_segment(point, s, t, eps):
            return SegmentIntersection(IntersectionKind.POINT, (point,))

    if (Orientation.COLLINEAR not in (o1, o2, o3, o4)
            and o1 is not o2 and o3 is not o4):
        return SegmentIntersection(
            IntersectionKind.POINT,
            (_crossing_point(a, b, c, d),),
            is_proper=True,
        )

    return NO_INTERSECTION


def _collinear_intersection(a: Coord, b: Coord, c: Coord, d: Coord,
                            eps: float) -> SegmentIntersection:
    """Overlap of two segments lying on a common line."""
    # Project onto the longer segment
    if distance(a, b) < distance(c, d):
        a, b, c, d = c, d, a, b
    length, ux, uy = segment_frame(a, b, eps)

    tc = project(c, a, ux, uy)
    td = project(d, a, ux, uy)
    if td < tc:
        c, d, tc, td = d, c, td, tc

    lo_t = max(0.0, tc)
    hi_t = min(length, td)
    if hi_t < lo_t - eps:
        return NO_INTERSECTION

    lo = c if tc > 0.0 else a
    hi = d if td < length else b
    if coords_equal(lo, hi, eps):
        return SegmentIntersection(IntersectionKind.POINT, (lo,))
    return SegmentIntersection(IntersectionKind.COLLINEAR, (lo, hi))


def _crossing_point(a: Coord, b: Coord, c: Coord, d: Coord) -> Coord:
    """Intersection point of two properly crossing segments."""
    dx1 = b[0] - a[0]
    dy1 = b[1] - a[1]
    dx2 = d[0] - c[0]
    dy2 = d[1] - c[1]

    det = dx1 * dy2 - dy1 * dx2
    if det == 0.0:
        return a

    t = ((c[0] - a[0]) * dy2 - (c[1] - a[1]) * dx2) / det
    x = a[0] + t * dx1
    y = a[1] + t * dy1

    # Keep the computed point inside both segments' envelopes
    x = min(max(x, max(min(a[0], b[0]), min(c[0], d[0]))), min(max(a[0], b[0]), max(c[0], d[0])))
    y = min(max(y, max(min(a[1], b[1]), min(c[1], d[1]))), min(max(a[1], b[1]), max(c[1], d[1])))
    return (x, y)
