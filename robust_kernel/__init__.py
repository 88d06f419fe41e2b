"""
Robust Kernel Module - tolerant geometric predicates

This module provides the floating-point predicates that every topological
computation is routed through.

Includes:
- A single tolerance policy scaled to the input magnitude
- Orientation and point-on-segment tests
- Point-in-ring location with a boundary-first tie-break
- Segment/segment intersection (crossing, touching, collinear overlap)
"""

from .tolerance import (
    Coord,
    Tolerance,
    EXACT,
    DEFAULT_RELATIVE_TOLERANCE,
    DEFAULT_ABSOLUTE_TOLERANCE,
)
from .predicates import (
    DegenerateCase,
    Orientation,
    RingPosition,
    IntersectionKind,
    SegmentIntersection,
    NO_INTERSECTION,
    distance,
    coords_equal,
    cross,
    orientation,
    closest_point_on_segment,
    point_on_segment,
    point_in_ring,
    signed_ring_area,
    segment_frame,
    project,
    segment_intersection,
)

__all__ = [
    'Coord',
    'Tolerance',
    'EXACT',
    'DEFAULT_RELATIVE_TOLERANCE',
    'DEFAULT_ABSOLUTE_TOLERANCE',
    'DegenerateCase',
    'Orientation',
    'RingPosition',
    'IntersectionKind',
    'SegmentIntersection',
    'NO_INTERSECTION',
    'distance',
    'coords_equal',
    'cross',
    'orientation',
    'closest_point_on_segment',
    'point_on_segment',
    'point_in_ring',
    'signed_ring_area',
    'segment_frame',
    'project',
    'segment_intersection',
]
