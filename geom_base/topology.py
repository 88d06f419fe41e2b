"""
Topological Decomposition

Derives the interior, boundary and exterior of a geometry on demand. Any
geometry is flattened into three lists of plain coordinate tuples:

- points: isolated 0-dimensional members
- lines: coordinate runs of 1-dimensional members (open or closed)
- polygons: rings of 2-dimensional members, exterior ring first

Key concepts:
- The boundary of a set of lines follows the mod-2 rule: an endpoint is on
  the boundary when an odd number of open lines end there.
- Degenerate members are recovered rather than rejected: a line whose
  coordinates coincide is a point, a flat triangle or rectangle is a line.
  Once the working epsilon is known, members no wider than it collapse
  the same way.
- Location is answered with the kernel's tolerance, and anything within
  epsilon of a polygon ring is on the boundary.

References:
- OGC 06-103r4 - Simple Feature Access, Part 1, section 6.1.15.2
- Egenhofer & Herring (1990) - Categorizing Binary Topological Relations
"""

import logging
from enum import Enum
from typing import Collection, List, Optional, Sequence, Tuple, Union
from dataclasses import dataclass, field

from robust_kernel import (
    Coord,
    Tolerance,
    RingPosition,
    coords_equal,
    cross,
    distance,
    point_in_ring,
    point_on_segment,
)

from .errors import InvalidGeometry
from .geometry import (
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
)
from .intersection_matrix import Dimension, Part

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64

Ring = Tuple[Coord, ...]
Envelope = Tuple[float, float, float, float]


def _envelope(coords: Sequence[Coord]) -> Envelope:
    xs = [c[0] for c in coords]
    ys = [c[1] for c in coords]
    return (min(xs), min(ys), max(xs), max(ys))


def _in_envelope(p: Coord, env: Envelope, eps: float) -> bool:
    return (env[0] - eps <= p[0] <= env[2] + eps and
            env[1] - eps <= p[1] <= env[3] + eps)


def _thin_span(ring: Ring, eps: float) -> Optional[Tuple[Coord, Coord]]:
    """The segment a ring collapses onto, or None if it is wider than ``eps``."""
    origin = ring[0]
    a = max(ring, key=lambda c: distance(origin, c))
    b = max(ring, key=lambda c: distance(a, c))
    if all(point_on_segment(c, a, b, eps) for c in ring):
        return (a, b)
    return None


@dataclass
class Components:
    """
    A geometry flattened into its point, line and polygon members.

    Attributes:
        points: Isolated coordinates
        lines: Coordinate runs of curves, each with at least 2 coordinates
        polygons: Ring tuples, exterior ring first
    """
    points: List[Coord] = field(default_factory=list)
    lines: List[Tuple[Coord, ...]] = field(default_factory=list)
    polygons: List[Tuple[Ring, ...]] = field(default_factory=list)
    line_envelopes: List[Envelope] = field(default_factory=list)
    polygon_envelopes: List[Envelope] = field(default_factory=list)

    def add_point(self, coord: Coord) -> None:
        self.points.append(coord)

    def add_line(self, coords: Tuple[Coord, ...], eps: float = 0.0) -> None:
        # A curve whose every segment is within eps is a point
        if all(coords_equal(a, b, eps) for a, b in zip(coords, coords[1:])):
            self.add_point(coords[0])
            return
        self.lines.append(coords)
        self.line_envelopes.append(_envelope(coords))

    def add_polygon(self, rings: Tuple[Ring, ...]) -> None:
        self.polygons.append(rings)
        self.polygon_envelopes.append(_envelope(rings[0]))

    def collapsed(self, eps: float) -> 'Components':
        """
        Copy with members no wider than ``eps`` reduced in dimension.

        A line whose segments are all within ``eps`` becomes its first
        point. A polygon whose shell lies within ``eps`` of one segment
        becomes that segment (or a point).
        """
        result = Components(points=list(self.points))
        for line in self.lines:
            result.add_line(line, eps)
        for rings in self.polygons:
            span = _thin_span(rings[0], eps)
            if span is None:
                result.add_polygon(rings)
            else:
                result.add_line(span, eps)
        return result

    def is_empty(self) -> bool:
        return not (self.points or self.lines or self.polygons)

    def coords(self) -> List[Coord]:
        """Every coordinate of every member."""
        result = list(self.points)
        for line in self.lines:
            result.extend(line)
        for rings in self.polygons:
            for ring in rings:
                result.extend(ring)
        return result

    def envelope(self) -> Optional[Envelope]:
        if self.is_empty():
            return None
        return _envelope(self.coords())

    def edges(self) -> List[Tuple[Coord, Coord, Optional[int], Optional[int]]]:
        """
        Consecutive coordinate pairs of every line and ring.

        Each pair carries the index of its polygon and ring, or None twice
        for a line.
        """
        result = []
        for line in self.lines:
            result.extend((a, b, None, None) for a, b in zip(line, line[1:]))
        for polygon_index, rings in enumerate(self.polygons):
            for ring_index, ring in enumerate(rings):
                result.extend((a, b, polygon_index, ring_index) for a, b in zip(ring, ring[1:]))
        return result

    def interior_dimension(self) -> Dimension:
        if self.polygons:
            return Dimension.AREA
        if self.lines:
            return Dimension.CURVE
        if self.points:
            return Dimension.POINT
        return Dimension.EMPTY

    def boundary_points(self, eps: float) -> List[Coord]:
        """
        Endpoints shared by an odd number of open lines (mod-2 rule).

        Each line contributes at most once per position; a line whose two
        ends coincide within ``eps`` is closed and contributes nothing.
        """
        ends = []
        for line in self.lines:
            if not coords_equal(line[0], line[-1], eps):
                ends.append((line[0], line[-1]))

        result = []
        for first, last in ends:
            for candidate in (first, last):
                if any(coords_equal(candidate, known, eps) for known in result):
                    continue
                count = sum(
                    1 for a, b in ends
                    if coords_equal(candidate, a, eps) or coords_equal(candidate, b, eps)
                )
                if count % 2 == 1:
                    result.append(candidate)
        return result

    def boundary_dimension(self, eps: float = 0.0) -> Dimension:
        if self.polygons:
            return Dimension.CURVE
        if self.boundary_points(eps):
            return Dimension.POINT
        return Dimension.EMPTY

    def locate(self, p: Coord, eps: float, include_points: bool = True,
               on_polygons: Collection[int] = (), on_line: bool = False) -> Part:
        """
        Locate a coordinate in the union of the members.

        Precedence: inside any polygon, then on any polygon ring, then the
        mod-2 endpoint rule, then on any line, then equal to a point.

        Args:
            p: Query coordinate
            eps: Working tolerance
            include_points: Whether isolated points take part
            on_polygons: Indexes of polygons whose rings ``p`` is known to lie on
            on_line: Whether ``p`` is known to lie on one of the lines

        Returns:
            INTERIOR, BOUNDARY or EXTERIOR
        """
        on_ring = False
        for index, (rings, env) in enumerate(zip(self.polygons, self.polygon_envelopes)):
            if index in on_polygons:
                on_ring = True
                continue
            if not _in_envelope(p, env, eps):
                continue
            position = polygon_position(p, rings, eps)
            if position is RingPosition.INSIDE:
                return Part.INTERIOR
            if position is RingPosition.ON_BOUNDARY:
                on_ring = True
        if on_ring:
            return Part.BOUNDARY

        endpoint_count = 0
        for line, env in zip(self.lines, self.line_envelopes):
            if not _in_envelope(p, env, eps):
                continue
            if not coords_equal(line[0], line[-1], eps) and (
                    coords_equal(p, line[0], eps) or coords_equal(p, line[-1], eps)):
                endpoint_count += 1
            if not on_line:
                on_line = any(point_on_segment(p, a, b, eps) for a, b in zip(line, line[1:]))

        if endpoint_count % 2 == 1:
            return Part.BOUNDARY
        if on_line or endpoint_count > 0:
            return Part.INTERIOR

        if include_points and any(coords_equal(p, q, eps) for q in self.points):
            return Part.INTERIOR
        return Part.EXTERIOR


def polygon_position(p: Coord, rings: Sequence[Ring], eps: float) -> RingPosition:
    """Position of ``p`` relative to a polygon given as shell followed by holes."""
    position = point_in_ring(p, rings[0], eps)
    if position is not RingPosition.INSIDE:
        return position

    for hole in rings[1:]:
        hole_position = point_in_ring(p, hole, eps)
        if hole_position is RingPosition.ON_BOUNDARY:
            return RingPosition.ON_BOUNDARY
        if hole_position is RingPosition.INSIDE:
            return RingPosition.OUTSIDE
    return RingPosition.INSIDE


def _add_triangle(components: Components, triangle: Triangle) -> None:
    a, b, c = triangle.corners()
    if cross(a, b, c) != 0.0:
        components.add_polygon((triangle.to_polygon().exterior.coords,))
        return
    # Collinear corners: the segment between the two farthest corners
    pairs = [(a, b), (a, c), (b, c)]
    start, end = max(pairs, key=lambda pair: distance(*pair))
    components.add_line((start, end))


def _add_rect(components: Components, rect: Rect) -> None:
    if rect.width() > 0.0 and rect.height() > 0.0:
        components.add_polygon((rect.to_polygon().exterior.coords,))
    else:
        components.add_line((rect.min_coord, rect.max_coord))


def decompose(geometry: Geometry, max_depth: int = DEFAULT_MAX_DEPTH) -> Components:
    """
    Flatten a geometry into its point, line and polygon components.

    Args:
        geometry: Any supported geometry
        max_depth: Deepest GeometryCollection nesting accepted

    Returns:
        Components of the geometry

    Raises:
        InvalidGeometry: for unsupported types or nesting beyond ``max_depth``
    """
    components = Components()
    stack = [(geometry, 0)]

    while stack:
        current, depth = stack.pop()

        if isinstance(current, Point):
            components.add_point(current.coord)
        elif isinstance(current, MultiPoint):
            for point in current.points:
                components.add_point(point.coord)
        elif isinstance(current, Line):
            components.add_line((current.start, current.end))
        elif isinstance(current, LineString):
            components.add_line(current.coords)
        elif isinstance(current, MultiLineString):
            for line_string in current.line_strings:
                components.add_line(line_string.coords)
        elif isinstance(current, Polygon):
            components.add_polygon(tuple(ring.coords for ring in current.rings()))
        elif isinstance(current, MultiPolygon):
            for polygon in current.polygons:
                components.add_polygon(tuple(ring.coords for ring in polygon.rings()))
        elif isinstance(current, Rect):
            _add_rect(components, current)
        elif isinstance(current, Triangle):
            _add_triangle(components, current)
        elif isinstance(current, GeometryCollection):
            if depth >= max_depth:
                logger.warning("GeometryCollection nested deeper than %d levels", max_depth)
                raise InvalidGeometry(f"GeometryCollection nesting exceeds {max_depth} levels")
            for member in reversed(current.geometries):
                stack.append((member, depth + 1))
        else:
            raise InvalidGeometry(f"Unsupported geometry type: {type(current).__name__}")

    return components


def _resolved(geometry: Geometry, tolerance: Optional[Tolerance]) -> Tuple[Components, float]:
    """Decompose with the working epsilon of the geometry applied."""
    components = decompose(geometry)
    eps = (tolerance or Tolerance()).epsilon_for(components.coords())
    return components.collapsed(eps), eps


def interior_dimension(geometry: Geometry, tolerance: Optional[Tolerance] = None) -> Dimension:
    """Dimension of the interior: EMPTY for empty geometries, else 0, 1 or 2."""
    components, _ = _resolved(geometry, tolerance)
    return components.interior_dimension()


def boundary_dimension(geometry: Geometry, tolerance: Optional[Tolerance] = None) -> Dimension:
    components, eps = _resolved(geometry, tolerance)
    return components.boundary_dimension(eps)


def _line_string_boundary(line_string: LineString) -> MultiPoint:
    if line_string.is_closed():
        return MultiPoint()
    return MultiPoint((line_string.coords[0], line_string.coords[-1]))


def _polygon_boundary(polygon: Polygon) -> Union[LineString, MultiLineString]:
    if not polygon.interiors:
        return polygon.exterior
    return MultiLineString(polygon.rings())


def boundary(geometry: Geometry) -> Geometry:
    """
    Boundary of a geometry as a geometry.

    Points have an empty boundary. An open line string is bounded by its
    two endpoints, a closed one has none, and a MultiLineString keeps only
    the endpoints shared by an odd number of members. Areas are bounded by
    their rings. A collection is bounded by the rings of its areas and by
    the endpoints of its lines under the same odd-count rule, taken across
    all members at once.
    """
    if isinstance(geometry, (Point, MultiPoint)):
        return GeometryCollection()
    if isinstance(geometry, Line):
        return _line_string_boundary(geometry.to_line_string())
    if isinstance(geometry, LineString):
        return _line_string_boundary(geometry)
    if isinstance(geometry, MultiLineString):
        components = Components()
        for line_string in geometry.line_strings:
            components.add_line(line_string.coords)
        return MultiPoint(components.boundary_points(0.0))
    if isinstance(geometry, Polygon):
        return _polygon_boundary(geometry)
    if isinstance(geometry, MultiPolygon):
        rings = []
        for polygon in geometry.polygons:
            rings.extend(polygon.rings())
        return MultiLineString(rings)
    if isinstance(geometry, Rect):
        if geometry.width() > 0.0 and geometry.height() > 0.0:
            return geometry.to_polygon().exterior
        if geometry.min_coord == geometry.max_coord:
            return GeometryCollection()
        return MultiPoint((geometry.min_coord, geometry.max_coord))
    if isinstance(geometry, Triangle):
        components = Components()
        _add_triangle(components, geometry)
        if components.polygons:
            return geometry.to_polygon().exterior
        if components.points:
            return GeometryCollection()
        return _line_string_boundary(LineString(components.lines[0]))
    if isinstance(geometry, GeometryCollection):
        components = decompose(geometry)
        parts = []
        if components.polygons:
            parts.append(MultiLineString([ring for rings in components.polygons for ring in rings]))
        ends = components.boundary_points(0.0)
        if ends:
            parts.append(MultiPoint(ends))
        return GeometryCollection(tuple(parts))
    raise InvalidGeometry(f"Unsupported geometry type: {type(geometry).__name__}")


class PartKind(Enum):
    """Shape of a labelled part of a geometry."""
    EMPTY = "empty"
    POINTS = "points"
    CURVES = "curves"
    AREA = "area"

    def __repr__(self) -> str:
        return self.name


_KIND_BY_DIMENSION = {
    Dimension.EMPTY: PartKind.EMPTY,
    Dimension.POINT: PartKind.POINTS,
    Dimension.CURVE: PartKind.CURVES,
    Dimension.AREA: PartKind.AREA,
}


@dataclass(frozen=True)
class TopologicalPart:
    """
    One labelled part (interior, boundary or exterior) of a geometry.

    Attributes:
        part: Which part this is
        kind: EMPTY, POINTS, CURVES or AREA
        dimension: Topological dimension of the part
    """
    part: Part
    kind: PartKind
    dimension: Dimension


def topological_part(geometry: Union[Geometry, Components], part: Part,
                     eps: float = 0.0) -> TopologicalPart:
    """
    Describe a labelled part of a geometry.

    A geometry is resolved with the default tolerance; ``eps`` applies when
    ``geometry`` is already decomposed. The exterior of a bounded planar
    set is always an area.
    """
    if isinstance(geometry, Components):
        components = geometry
    else:
        components, eps = _resolved(geometry, None)
    if part is Part.INTERIOR:
        dimension = components.interior_dimension()
    elif part is Part.BOUNDARY:
        dimension = components.boundary_dimension(eps)
    else:
        dimension = Dimension.AREA
    return TopologicalPart(part, _KIND_BY_DIMENSION[dimension], dimension)


def coordinate_position(geometry: Geometry, coord: Coord,
                        tolerance: Optional[Tolerance] = None) -> Part:
    """
    Locate a coordinate in a geometry's interior, boundary or exterior.

    Args:
        geometry: Any supported geometry
        coord: Query coordinate
        tolerance: Comparison tolerance, default relative 1e-10

    Returns:
        The part of ``geometry`` containing ``coord``
    """
    if not isinstance(geometry, GEOMETRY_TYPES):
        raise InvalidGeometry(f"Unsupported geometry type: {type(geometry).__name__}")
    tolerance = tolerance or Tolerance()
    coord = Point(*coord).coord
    components = decompose(geometry)
    eps = tolerance.epsilon_for(components.coords() + [coord])
    return components.collapsed(eps).locate(coord, eps)
