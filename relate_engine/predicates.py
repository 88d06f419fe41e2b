"""
Named Spatial Predicates

Boolean relationship tests between two geometries, each a thin layer over
``relate`` and the pattern templates of ``IntersectionMatrix``.

Mutual consistency follows from the matrix being transposed when the
arguments are swapped:
- contains(A, B) == within(B, A)
- covers(A, B) == covered_by(B, A)
- disjoint(A, B) == not intersects(A, B)
"""

from typing import Optional

from de9im_config import RelateConfig
from geom_base.geometry import Geometry

from .builder import relate


def intersects(a: Geometry, b: Geometry, config: Optional[RelateConfig] = None) -> bool:
    """A and B share at least one point."""
    return relate(a, b, config).is_intersects()


def disjoint(a: Geometry, b: Geometry, config: Optional[RelateConfig] = None) -> bool:
    """A and B share no point."""
    return relate(a, b, config).is_disjoint()


def contains(a: Geometry, b: Geometry, config: Optional[RelateConfig] = None) -> bool:
    """No point of B lies outside A, and their interiors meet."""
    return relate(a, b, config).is_contains()


def within(a: Geometry, b: Geometry, config: Optional[RelateConfig] = None) -> bool:
    """No point of A lies outside B, and their interiors meet."""
    return relate(a, b, config).is_within()


def touches(a: Geometry, b: Geometry, config: Optional[RelateConfig] = None) -> bool:
    """A and B meet only on their boundaries."""
    return relate(a, b, config).is_touches()


def crosses(a: Geometry, b: Geometry, config: Optional[RelateConfig] = None) -> bool:
    return relate(a, b, config).is_crosses()


def overlaps(a: Geometry, b: Geometry, config: Optional[RelateConfig] = None) -> bool:
    return relate(a, b, config).is_overlaps()


def covers(a: Geometry, b: Geometry, config: Optional[RelateConfig] = None) -> bool:
    """No point of B lies in the exterior of A."""
    return relate(a, b, config).is_covers()


def covered_by(a: Geometry, b: Geometry, config: Optional[RelateConfig] = None) -> bool:
    """No point of A lies in the exterior of B."""
    return relate(a, b, config).is_coveredby()


def equals_topo(a: Geometry, b: Geometry, config: Optional[RelateConfig] = None) -> bool:
    """A and B are the same point set."""
    return relate(a, b, config).is_equal_topo()


def relate_pattern(a: Geometry, b: Geometry, pattern: str,
                   config: Optional[RelateConfig] = None) -> bool:
    """
    Test the matrix of A and B against a DE-9IM pattern.

    Raises:
        InvalidPattern: if the pattern is malformed
    """
    return relate(a, b, config).matches(pattern)
