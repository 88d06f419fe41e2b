"""
DE-9IM: Dimensionally Extended 9-Intersection Model

Main orchestration module for the relationship engine.

This module provides a unified interface for:
1. Computing the DE-9IM matrix of two geometries
2. Evaluating the named spatial predicates
3. Matching custom DE-9IM patterns
4. Inspecting a geometry's boundary and dimension

Usage:
    from de9im import DE9IM
    from geom_base import Point, Polygon

    engine = DE9IM()

    square = Polygon([(0, 0), (4, 0), (4, 4), (0, 4), (0, 0)])
    matrix = engine.relate(square, Point(2, 2))     # 0F2FF1FF2

    engine.contains(square, Point(2, 2))            # True
    engine.relate_pattern(square, Point(2, 2), "T*****FF*")

References:
- Egenhofer & Herring (1990) - Categorizing Binary Topological Relations
- Clementini, Di Felice & van Oosterom (1993) - A Small Set of Formal
  Topological Relationships Suitable for End-User Interaction
"""

import time
from typing import Dict, Optional
from dataclasses import dataclass, field

from de9im_config import De9imGlobalConfig, DEFAULT_CONFIG
from de9im_logging import configure_library_logging

from geom_base import (
    Geometry,
    Dimension,
    IntersectionMatrix,
    Point,
    LineString,
    Polygon,
    MultiPoint,
    GeometryCollection,
    Rect,
    Triangle,
    boundary,
    interior_dimension,
)
from relate_engine import MatrixBuilder

PREDICATE_NAMES = (
    'intersects',
    'disjoint',
    'contains',
    'within',
    'touches',
    'crosses',
    'overlaps',
    'covers',
    'covered_by',
    'equals_topo',
)

# Predicate name -> IntersectionMatrix method
_MATRIX_METHODS = {
    'intersects': 'is_intersects',
    'disjoint': 'is_disjoint',
    'contains': 'is_contains',
    'within': 'is_within',
    'touches': 'is_touches',
    'crosses': 'is_crosses',
    'overlaps': 'is_overlaps',
    'covers': 'is_covers',
    'covered_by': 'is_coveredby',
    'equals_topo': 'is_equal_topo',
}


@dataclass
class RelateResult:
    """Result of relating two geometries."""
    matrix: IntersectionMatrix
    predicates: Dict[str, bool] = field(default_factory=dict)

    # Metadata
    processing_time_ms: float = 0.0

    def holds(self) -> Dict[str, bool]:
        """Only the predicates that are true."""
        return {name: value for name, value in self.predicates.items() if value}


class DE9IM:
    """
    Main relationship engine class.

    Provides unified interface for relate queries under one configuration.
    """

    def __init__(self, config: Optional[De9imGlobalConfig] = None):
        """
        Initialize the engine.

        Args:
            config: Configuration options (uses defaults if None)
        """
        self.config = config or DEFAULT_CONFIG
        self.builder = MatrixBuilder(self.config.relate)

        if self.config.verbose:
            configure_library_logging(self.config.log_level)

    def relate(self, a: Geometry, b: Geometry) -> IntersectionMatrix:
        """
        Compute the DE-9IM matrix of A against B.

        Raises:
            InvalidGeometry: if either input is malformed
        """
        return self.builder.build(a, b)

    def evaluate(self, a: Geometry, b: Geometry) -> RelateResult:
        """
        Compute the matrix and every named predicate at once.

        Args:
            a: First geometry
            b: Second geometry

        Returns:
            RelateResult with the matrix and a name -> bool map
        """
        start_time = time.time()
        matrix = self.builder.build(a, b)
        predicates = {
            name: getattr(matrix, _MATRIX_METHODS[name])()
            for name in PREDICATE_NAMES
        }
        elapsed_ms = (time.time() - start_time) * 1000
        return RelateResult(matrix=matrix, predicates=predicates,
                            processing_time_ms=elapsed_ms)

    def predicate(self, name: str, a: Geometry, b: Geometry) -> bool:
        """
        Evaluate one named predicate.

        Raises:
            ValueError: for an unknown predicate name
        """
        if name not in _MATRIX_METHODS:
            raise ValueError(f"Unknown predicate {name!r}; expected one of {', '.join(PREDICATE_NAMES)}")
        return getattr(self.relate(a, b), _MATRIX_METHODS[name])()

    def relate_pattern(self, a: Geometry, b: Geometry, pattern: str) -> bool:
        return self.relate(a, b).matches(pattern)

    def intersects(self, a: Geometry, b: Geometry) -> bool:
        return self.predicate('intersects', a, b)

    def disjoint(self, a: Geometry, b: Geometry) -> bool:
        return self.predicate('disjoint', a, b)

    def contains(self, a: Geometry, b: Geometry) -> bool:
        return self.predicate('contains', a, b)

    def within(self, a: Geometry, b: Geometry) -> bool:
        return self.predicate('within', a, b)

    def touches(self, a: Geometry, b: Geometry) -> bool:
        return self.predicate('touches', a, b)

    def crosses(self, a: Geometry, b: Geometry) -> bool:
        return self.predicate('crosses', a, b)

    def overlaps(self, a: Geometry, b: Geometry) -> bool:
        return self.predicate('overlaps', a, b)

    def covers(self, a: Geometry, b: Geometry) -> bool:
        return self.predicate('covers', a, b)

    def covered_by(self, a: Geometry, b: Geometry) -> bool:
        return self.predicate('covered_by', a, b)

    def equals_topo(self, a: Geometry, b: Geometry) -> bool:
        return self.predicate('equals_topo', a, b)

    def boundary(self, geometry: Geometry) -> Geometry:
        return boundary(geometry)

    def dimension(self, geometry: Geometry) -> Dimension:
        return interior_dimension(geometry, self.builder.tolerance)


def create_example_geometries() -> Dict[str, Geometry]:
    """Create example geometries for demonstration."""
    return {
        'square': Polygon([(0, 0), (4, 0), (4, 4), (0, 4), (0, 0)]),
        'centre': Point(2, 2),
        'shifted square': Rect((2, 2), (6, 6)),
        'diagonal': LineString([(-1, -1), (5, 5)]),
        'edge path': LineString([(4, 0), (8, 0)]),
        'triangle': Triangle((4, 4), (8, 4), (6, 8)),
        'corner points': MultiPoint([(0, 0), (10, 10)]),
        'collection': GeometryCollection((Point(1, 1), LineString([(1, 3), (3, 3)]))),
    }


def main():
    """Main demonstration of DE-9IM capabilities."""
    print("=" * 60)
    print("DE-9IM: Dimensionally Extended 9-Intersection Model")
    print("=" * 60)

    engine = DE9IM()
    geometries = create_example_geometries()
    square = geometries['square']

    # Example 1: Matrices against the square
    print("\n1. Relating Geometries to a Square")
    print("-" * 40)

    for name, geometry in geometries.items():
        if name == 'square':
            continue
        result = engine.evaluate(square, geometry)
        holds = ', '.join(result.holds()) or 'none'
        print(f"  square vs {name:15s} {result.matrix}  [{holds}]")

    # Example 2: Symmetry
    print("\n2. Argument Order")
    print("-" * 40)

    line = geometries['diagonal']
    forward = engine.relate(square, line)
    backward = engine.relate(line, square)
    print(f"  relate(square, diagonal) = {forward}")
    print(f"  relate(diagonal, square) = {backward}")
    print(f"  transposes agree: {forward.transpose() == backward}")

    # Example 3: Boundaries
    print("\n3. Boundaries and Dimensions")
    print("-" * 40)

    for name in ('centre', 'edge path', 'square'):
        geometry = geometries[name]
        print(f"  {name}: dimension {int(engine.dimension(geometry))}, boundary {engine.boundary(geometry)}")

    # Example 4: Custom pattern
    print("\n4. Custom Patterns")
    print("-" * 40)

    pattern = "T*F**F***"
    print(f"  centre matches {pattern} against square: "
          f"{engine.relate_pattern(geometries['centre'], square, pattern)}")

    print("\n" + "=" * 60)
    print("DE-9IM Demonstration Complete")
    print("=" * 60)


if __name__ == "__main__":
    main()
