"""
Geometry Model

The closed set of 2-D geometry variants the relationship engine accepts:

- Point, MultiPoint: 0-dimensional
- Line, LineString, MultiLineString: 1-dimensional
- Polygon, MultiPolygon, Rect, Triangle: 2-dimensional
- GeometryCollection: any mix of the above, possibly nested

Every variant is an immutable dataclass whose coordinates are plain
``(x, y)`` float tuples. Input is validated at construction and malformed
input raises ``InvalidGeometry``; nothing is silently repaired.
"""

import math
import numbers
from enum import Enum
from typing import ClassVar, Iterator, Optional, Tuple, Union
from dataclasses import dataclass

from robust_kernel import Coord

from .errors import InvalidGeometry


class GeometryKind(Enum):
    """Tag identifying a geometry variant."""
    POINT = "Point"
    LINE = "Line"
    LINE_STRING = "LineString"
    POLYGON = "Polygon"
    MULTI_POINT = "MultiPoint"
    MULTI_LINE_STRING = "MultiLineString"
    MULTI_POLYGON = "MultiPolygon"
    GEOMETRY_COLLECTION = "GeometryCollection"
    RECT = "Rect"
    TRIANGLE = "Triangle"

    def __str__(self) -> str:
        return self.value


def _coerce_coord(value, context: str) -> Coord:
    """Validate one coordinate and normalise it to a float pair."""
    if isinstance(value, Point):
        return value.coord
    try:
        x, y = value
    except (TypeError, ValueError):
        raise InvalidGeometry(f"{context}: expected an (x, y) pair, got {value!r}")
    # Numeric strings are not coordinates
    if not (isinstance(x, numbers.Real) and isinstance(y, numbers.Real)):
        raise InvalidGeometry(f"{context}: expected an (x, y) pair of numbers, got {value!r}")
    x = float(x)
    y = float(y)
    if not (math.isfinite(x) and math.isfinite(y)):
        raise InvalidGeometry(f"{context}: non-finite coordinate ({x}, {y})")
    return (x, y)


def _coerce_coords(values, context: str) -> Tuple[Coord, ...]:
    if isinstance(values, LineString):
        return values.coords
    try:
        items = list(values)
    except TypeError:
        raise InvalidGeometry(f"{context}: expected a coordinate sequence, got {values!r}")
    return tuple(_coerce_coord(item, context) for item in items)


def _validate_ring(coords: Tuple[Coord, ...], context: str) -> None:
    if not coords:
        raise InvalidGeometry(f"{context}: empty ring")
    if coords[0] != coords[-1]:
        raise InvalidGeometry(f"{context}: ring is not closed ({coords[0]} != {coords[-1]})")
    if len(coords) < 4:
        raise InvalidGeometry(f"{context}: a ring needs at least 4 coordinates, got {len(coords)}")
    if len(set(coords)) < 3:
        raise InvalidGeometry(f"{context}: a ring needs at least 3 distinct coordinates")


@dataclass(frozen=True)
class Point:
    """A single position."""
    x: float
    y: float

    kind: ClassVar[GeometryKind] = GeometryKind.POINT

    def __post_init__(self):
        x, y = _coerce_coord((self.x, self.y), "Point")
        object.__setattr__(self, 'x', x)
        object.__setattr__(self, 'y', y)

    @property
    def coord(self) -> Coord:
        return (self.x, self.y)


@dataclass(frozen=True)
class Line:
    """A single straight segment."""
    start: Coord
    end: Coord

    kind: ClassVar[GeometryKind] = GeometryKind.LINE

    def __post_init__(self):
        object.__setattr__(self, 'start', _coerce_coord(self.start, "Line start"))
        object.__setattr__(self, 'end', _coerce_coord(self.end, "Line end"))

    def to_line_string(self) -> 'LineString':
        return LineString((self.start, self.end))


@dataclass(frozen=True)
class LineString:
    """
    An ordered sequence of at least two coordinates.

    A line string whose first and last coordinates are equal is closed and
    has no boundary.
    """
    coords: Tuple[Coord, ...]

    kind: ClassVar[GeometryKind] = GeometryKind.LINE_STRING

    def __post_init__(self):
        coords = _coerce_coords(self.coords, "LineString")
        if len(coords) < 2:
            raise InvalidGeometry(f"LineString needs at least 2 coordinates, got {len(coords)}")
        object.__setattr__(self, 'coords', coords)

    def is_closed(self) -> bool:
        return self.coords[0] == self.coords[-1]

    def lines(self) -> Iterator[Tuple[Coord, Coord]]:
        """Consecutive coordinate pairs."""
        return zip(self.coords, self.coords[1:])

    def __len__(self) -> int:
        return len(self.coords)


@dataclass(frozen=True)
class Polygon:
    """
    An area bounded by one exterior ring, minus zero or more holes.

    Rings must be closed, with at least 4 coordinates of which at least 3
    are distinct. Self-intersecting rings are accepted; location inside
    them follows the even-odd rule.
    """
    exterior: LineString
    interiors: Tuple[LineString, ...] = ()

    kind: ClassVar[GeometryKind] = GeometryKind.POLYGON

    def __post_init__(self):
        exterior = _coerce_coords(self.exterior, "Polygon exterior")
        _validate_ring(exterior, "Polygon exterior")

        interiors = () if self.interiors is None else self.interiors
        try:
            interiors = list(interiors)
        except TypeError:
            raise InvalidGeometry(f"Polygon holes: expected a sequence of rings, got {interiors!r}")

        holes = []
        for index, hole in enumerate(interiors):
            coords = _coerce_coords(hole, f"Polygon hole {index}")
            _validate_ring(coords, f"Polygon hole {index}")
            holes.append(LineString(coords))

        object.__setattr__(self, 'exterior', LineString(exterior))
        object.__setattr__(self, 'interiors', tuple(holes))

    def rings(self) -> Tuple[LineString, ...]:
        """Exterior ring followed by the holes."""
        return (self.exterior,) + self.interiors


@dataclass(frozen=True)
class MultiPoint:
    points: Tuple[Point, ...] = ()

    kind: ClassVar[GeometryKind] = GeometryKind.MULTI_POINT

    def __post_init__(self):
        points = tuple(
            p if isinstance(p, Point) else Point(*_coerce_coord(p, "MultiPoint member"))
            for p in self.points
        )
        object.__setattr__(self, 'points', points)


@dataclass(frozen=True)
class MultiLineString:
    line_strings: Tuple[LineString, ...] = ()

    kind: ClassVar[GeometryKind] = GeometryKind.MULTI_LINE_STRING

    def __post_init__(self):
        members = tuple(
            ls if isinstance(ls, LineString) else LineString(ls)
            for ls in self.line_strings
        )
        object.__setattr__(self, 'line_strings', members)


@dataclass(frozen=True)
class MultiPolygon:
    polygons: Tuple[Polygon, ...] = ()

    kind: ClassVar[GeometryKind] = GeometryKind.MULTI_POLYGON

    def __post_init__(self):
        polygons = tuple(self.polygons)
        for member in polygons:
            if not isinstance(member, Polygon):
                raise InvalidGeometry(f"MultiPolygon members must be Polygons, got {type(member).__name__}")
        object.__setattr__(self, 'polygons', polygons)


@dataclass(frozen=True)
class GeometryCollection:
    """A heterogeneous, possibly nested, sequence of geometries."""
    geometries: Tuple['Geometry', ...] = ()

    kind: ClassVar[GeometryKind] = GeometryKind.GEOMETRY_COLLECTION

    def __post_init__(self):
        members = tuple(self.geometries)
        for member in members:
            if not isinstance(member, GEOMETRY_TYPES):
                raise InvalidGeometry(f"GeometryCollection members must be geometries, got {type(member).__name__}")
        object.__setattr__(self, 'geometries', members)

    def __len__(self) -> int:
        return len(self.geometries)


@dataclass(frozen=True)
class Rect:
    """
    An axis-aligned rectangle given by two opposite corners.

    The corners are stored as (min, max); a rectangle with zero width or
    height is a degenerate line or point.
    """
    min_coord: Coord
    max_coord: Coord

    kind: ClassVar[GeometryKind] = GeometryKind.RECT

    def __post_init__(self):
        (x1, y1) = _coerce_coord(self.min_coord, "Rect corner")
        (x2, y2) = _coerce_coord(self.max_coord, "Rect corner")
        object.__setattr__(self, 'min_coord', (min(x1, x2), min(y1, y2)))
        object.__setattr__(self, 'max_coord', (max(x1, x2), max(y1, y2)))

    def width(self) -> float:
        return self.max_coord[0] - self.min_coord[0]

    def height(self) -> float:
        return self.max_coord[1] - self.min_coord[1]

    def intersects(self, other: 'Rect', eps: float = 0.0) -> bool:
        """Envelope overlap test, optionally expanded by ``eps``."""
        return not (self.max_coord[0] + eps < other.min_coord[0] or
                    other.max_coord[0] + eps < self.min_coord[0] or
                    self.max_coord[1] + eps < other.min_coord[1] or
                    other.max_coord[1] + eps < self.min_coord[1])

    def to_polygon(self) -> Polygon:
        """Counter-clockwise polygon of a non-degenerate rectangle."""
        (x0, y0), (x1, y1) = self.min_coord, self.max_coord
        return Polygon(((x1, y0), (x1, y1), (x0, y1), (x0, y0), (x1, y0)))


@dataclass(frozen=True)
class Triangle:
    a: Coord
    b: Coord
    c: Coord

    kind: ClassVar[GeometryKind] = GeometryKind.TRIANGLE

    def __post_init__(self):
        for name in ('a', 'b', 'c'):
            object.__setattr__(self, name, _coerce_coord(getattr(self, name), "Triangle corner"))

    def corners(self) -> Tuple[Coord, Coord, Coord]:
        return (self.a, self.b, self.c)

    def to_polygon(self) -> Polygon:
        return Polygon((self.a, self.b, self.c, self.a))


Geometry = Union[
    Point, Line, LineString, Polygon,
    MultiPoint, MultiLineString, MultiPolygon,
    GeometryCollection, Rect, Triangle,
]

GEOMETRY_TYPES = (
    Point, Line, LineString, Polygon,
    MultiPoint, MultiLineString, MultiPolygon,
    GeometryCollection, Rect, Triangle,
)


def coords_iter(geometry: Geometry) -> Iterator[Coord]:
    """
    Iterate over every coordinate of a geometry.

    Nested collections are walked with an explicit stack, so arbitrarily
    deep input cannot exhaust the interpreter stack here.
    """
    stack = [geometry]
    while stack:
        current = stack.pop()
        if isinstance(current, Point):
            yield current.coord
        elif isinstance(current, Line):
            yield current.start
            yield current.end
        elif isinstance(current, LineString):
            yield from current.coords
        elif isinstance(current, Polygon):
            for ring in current.rings():
                yield from ring.coords
        elif isinstance(current, MultiPoint):
            for point in current.points:
                yield point.coord
        elif isinstance(current, MultiLineString):
            for line_string in current.line_strings:
                yield from line_string.coords
        elif isinstance(current, MultiPolygon):
            stack.extend(reversed(current.polygons))
        elif isinstance(current, GeometryCollection):
            stack.extend(reversed(current.geometries))
        elif isinstance(current, Rect):
            yield current.min_coord
            yield current.max_coord
        elif isinstance(current, Triangle):
            yield from current.corners()
        else:
            raise InvalidGeometry(f"Unsupported geometry type: {type(current).__name__}")


def bounding_rect(geometry: Geometry) -> Optional[Rect]:
    """Smallest axis-aligned rectangle covering the geometry, or None if empty."""
    xs = []
    ys = []
    for x, y in coords_iter(geometry):
        xs.append(x)
        ys.append(y)
    if not xs:
        return None
    return Rect((min(xs), min(ys)), (max(xs), max(ys)))
