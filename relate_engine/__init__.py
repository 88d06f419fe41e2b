"""
Relate Engine Module

This module computes DE-9IM intersection matrices between geometries and
evaluates the named spatial predicates from them.

Includes:
- Intersection classification of labelled geometry parts
- Matrix construction with a bounding-box short-circuit
- Named predicates (contains, within, touches, crosses, ...)
"""

from .classifier import (
    IntersectionClassifier,
    segment_pair_dimension,
)
from .builder import (
    MatrixBuilder,
    relate,
)
from .predicates import (
    intersects,
    disjoint,
    contains,
    within,
    touches,
    crosses,
    overlaps,
    covers,
    covered_by,
    equals_topo,
    relate_pattern,
)

__all__ = [
    'IntersectionClassifier',
    'segment_pair_dimension',
    'MatrixBuilder',
    'relate',
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
    'relate_pattern',
]
