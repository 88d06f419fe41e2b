"""
Geometry Base Module - planar geometry and its topology

This module provides the geometry model and the DE-9IM vocabulary that
the relationship engine is built on.

Includes:
- Immutable geometry variants, from Point to GeometryCollection
- Topological decomposition into interior, boundary and exterior
- The DE-9IM intersection matrix, its string form and pattern matching
- Error types raised for malformed input
"""

from .errors import (
    GeometryError,
    InvalidGeometry,
    InvalidPattern,
)
from .geometry import (
    GeometryKind,
    Geometry,
    GEOMETRY_TYPES,
    Point,
    Line,
    LineString,
    Polygon,
    MultiPoint,
    MultiLineString,
    MultiPolygon,
    GeometryCollection,
    Rect,
    Triangle,
    coords_iter,
    bounding_rect,
)
from .intersection_matrix import (
    Dimension,
    Part,
    PARTS,
    IntersectionMatrix,
    PREDICATE_PATTERNS,
    CROSSES_PATTERNS,
    OVERLAPS_PATTERNS,
    predicate_patterns,
)
from .topology import (
    Components,
    PartKind,
    TopologicalPart,
    decompose,
    polygon_position,
    interior_dimension,
    boundary_dimension,
    boundary,
    topological_part,
    coordinate_position,
)

__all__ = [
    'GeometryError',
    'InvalidGeometry',
    'InvalidPattern',
    'GeometryKind',
    'Geometry',
    'GEOMETRY_TYPES',
    'Point',
    'Line',
    'LineString',
    'Polygon',
    'MultiPoint',
    'MultiLineString',
    'MultiPolygon',
    'GeometryCollection',
    'Rect',
    'Triangle',
    'coords_iter',
    'bounding_rect',
    'Dimension',
    'Part',
    'PARTS',
    'IntersectionMatrix',
    'PREDICATE_PATTERNS',
    'CROSSES_PATTERNS',
    'OVERLAPS_PATTERNS',
    'predicate_patterns',
    'Components',
    'PartKind',
    'TopologicalPart',
    'decompose',
    'polygon_position',
    'interior_dimension',
    'boundary_dimension',
    'boundary',
    'topological_part',
    'coordinate_position',
]
