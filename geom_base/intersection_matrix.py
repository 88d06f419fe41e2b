"""
DE-9IM (Dimensionally Extended 9-Intersection Model) Implementation

This module defines the intersection matrix that records how the interior,
boundary and exterior of one geometry meet those of another, together with
the pattern language used to derive the named spatial predicates from it.

Each of the 9 cells holds the dimension of one pairwise intersection:
- F / -1: empty
- 0: point-like
- 1: curve-like
- 2: area-like

The 9-character string form (row-major, I·I, I·B, I·E, B·I, B·B, B·E, E·I,
E·B, E·E) is the interchange format shared with other DE-9IM systems.

References:
- Egenhofer & Herring (1990) - Categorizing Binary Topological Relations
- Clementini, Di Felice & van Oosterom (1993) - A Small Set of Formal
  Topological Relationships Suitable for End-User Interaction
- OGC 06-103r4 - Simple Feature Access, Part 1, section 6.1.15
"""

from enum import Enum, IntEnum
from typing import Callable, Dict, Tuple
from dataclasses import dataclass
from functools import lru_cache
from itertools import product

from .errors import InvalidPattern


class Dimension(IntEnum):
    """
    Dimension of a point set.
    Ordered so that ``max`` picks the larger intersection.
    """
    EMPTY = -1
    POINT = 0
    CURVE = 1
    AREA = 2

    def __repr__(self) -> str:
        return self.name

    @property
    def symbol(self) -> str:
        """Character used in the DE-9IM string form."""
        return 'F' if self is Dimension.EMPTY else str(int(self))

    @classmethod
    def from_symbol(cls, char: str) -> 'Dimension':
        """Parse one character of a DE-9IM matrix string."""
        symbols = {'F': cls.EMPTY, '0': cls.POINT, '1': cls.CURVE, '2': cls.AREA}
        if char not in symbols:
            raise InvalidPattern(f"Expected one of '0', '1', '2' or 'F', found {char!r}")
        return symbols[char]


class Part(Enum):
    """
    A topological part of a geometry.
    Values give the row/column index in the matrix.
    """
    INTERIOR = 0
    BOUNDARY = 1
    EXTERIOR = 2

    def __repr__(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.name[0]


PARTS = (Part.INTERIOR, Part.BOUNDARY, Part.EXTERIOR)


def _dimension_matcher(char: str) -> Callable[[Dimension], bool]:
    """Build the test for a single pattern character."""
    if char == '*':
        return lambda dim: True
    if char in ('t', 'T'):
        return lambda dim: dim is not Dimension.EMPTY
    if char in ('f', 'F'):
        return lambda dim: dim is Dimension.EMPTY
    if char in ('0', '1', '2'):
        expected = Dimension(int(char))
        return lambda dim: dim is expected
    raise InvalidPattern(f"Invalid DE-9IM pattern character: {char!r}")


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> Tuple[Callable[[Dimension], bool], ...]:
    """
    Compile a 9-character pattern over ``T F * 0 1 2``.

    Raises:
        InvalidPattern: if the pattern is malformed
    """
    if not isinstance(pattern, str) or len(pattern) != 9:
        raise InvalidPattern(f"DE-9IM pattern must be exactly 9 characters, got {pattern!r}")
    return tuple(_dimension_matcher(char) for char in pattern)


@dataclass(frozen=True)
class IntersectionMatrix:
    """
    Immutable DE-9IM matrix of geometry A (rows) against geometry B (columns).

    Attributes:
        cells: The 9 dimensions in row-major order
    """
    cells: Tuple[Dimension, ...]

    def __post_init__(self):
        if len(self.cells) != 9:
            raise InvalidPattern(f"An intersection matrix has 9 cells, got {len(self.cells)}")
        object.__setattr__(self, 'cells', tuple(Dimension(cell) for cell in self.cells))

    @classmethod
    def empty(cls) -> 'IntersectionMatrix':
        """Matrix with every cell empty."""
        return cls((Dimension.EMPTY,) * 9)

    @classmethod
    def empty_disjoint(cls) -> 'IntersectionMatrix':
        """Matrix of two empty geometries: only the exteriors meet."""
        return cls((Dimension.EMPTY,) * 8 + (Dimension.AREA,))

    @classmethod
    def disjoint_for(cls, interior_a: Dimension, boundary_a: Dimension,
                     interior_b: Dimension, boundary_b: Dimension) -> 'IntersectionMatrix':
        """
        Matrix of two geometries known not to meet.

        Each geometry's interior and boundary lie wholly in the other's
        exterior, and the exteriors of two bounded sets always share an area.
        """
        E = Dimension.EMPTY
        return cls((
            E, E, interior_a,
            E, E, boundary_a,
            interior_b, boundary_b, Dimension.AREA,
        ))

    @classmethod
    def from_string(cls, text: str) -> 'IntersectionMatrix':
        """
        Parse the 9-character string form, e.g. ``"212101212"``.

        Raises:
            InvalidPattern: on wrong length or characters outside ``F012``
        """
        if not isinstance(text, str) or len(text) != 9:
            raise InvalidPattern(f"Expected a 9-character matrix string, got {text!r}")
        return cls(tuple(Dimension.from_symbol(char) for char in text))

    def get(self, part_a: Part, part_b: Part) -> Dimension:
        """Dimension of the intersection of A's ``part_a`` with B's ``part_b``."""
        return self.cells[part_a.value * 3 + part_b.value]

    def transpose(self) -> 'IntersectionMatrix':
        """The matrix of the same pair with the arguments swapped."""
        return IntersectionMatrix(tuple(
            self.get(b, a) for a, b in product(PARTS, PARTS)
        ))

    def matches(self, pattern: str) -> bool:
        """
        Test the matrix against a DE-9IM pattern.

        Pattern characters:
        - 0, 1, 2: exactly that dimension
        - F (or f): empty
        - T (or t): anything non-empty
        - *: anything

        Raises:
            InvalidPattern: if the pattern is malformed
        """
        if not isinstance(pattern, str):
            raise InvalidPattern(f"DE-9IM pattern must be a string, got {type(pattern).__name__}")
        matchers = compile_pattern(pattern)
        return all(test(cell) for test, cell in zip(matchers, self.cells))

    def matches_any(self, patterns: Tuple[str, ...]) -> bool:
        """True if any of the patterns matches."""
        return any(self.matches(pattern) for pattern in patterns)

    # Dimensions of A and B as seen through the matrix
    def dimension_a(self) -> Dimension:
        return max(self.cells[0], self.cells[1], self.cells[2])

    def dimension_b(self) -> Dimension:
        return max(self.cells[0], self.cells[3], self.cells[6])

    def is_disjoint(self) -> bool:
        """A and B have no point in common. Matches ``FF*FF****``."""
        return self.matches_any(PREDICATE_PATTERNS['disjoint'])

    def is_intersects(self) -> bool:
        """A and B have at least one point in common."""
        return not self.is_disjoint()

    def is_within(self) -> bool:
        """A lies in B and their interiors meet. Matches ``T*F**F***``."""
        return self.matches_any(PREDICATE_PATTERNS['within'])

    def is_contains(self) -> bool:
        """B lies in A and their interiors meet. Matches ``T*****FF*``."""
        return self.matches_any(PREDICATE_PATTERNS['contains'])

    def is_equal_topo(self) -> bool:
        """
        A and B are the same point set. Matches ``T*F**FFF*``.

        Any two empty geometries are equal.
        """
        if self == IntersectionMatrix.empty_disjoint():
            return True
        return self.matches_any(PREDICATE_PATTERNS['equals_topo'])

    def is_covers(self) -> bool:
        """No point of B lies in A's exterior, and they meet."""
        return self.matches_any(PREDICATE_PATTERNS['covers'])

    def is_coveredby(self) -> bool:
        """No point of A lies in B's exterior, and they meet."""
        return self.matches_any(PREDICATE_PATTERNS['covered_by'])

    def is_touches(self) -> bool:
        """A and B meet, but only on their boundaries."""
        return self.matches_any(PREDICATE_PATTERNS['touches'])

    def is_crosses(self) -> bool:
        """
        Interiors meet in a set of lower dimension than the larger
        geometry, and neither geometry is a subset of the other.

        Two areas never cross; two points never cross.
        """
        dims_a = self.dimension_a()
        dims_b = self.dimension_b()
        if dims_a < dims_b:
            return self.matches(CROSSES_PATTERNS['lower'])
        if dims_a > dims_b:
            return self.matches(CROSSES_PATTERNS['higher'])
        if dims_a is Dimension.CURVE:
            return self.matches(CROSSES_PATTERNS['lines'])
        return False

    def is_overlaps(self) -> bool:
        """
        Same-dimension geometries whose interiors meet in that dimension,
        each having points outside the other.
        """
        dims_a = self.dimension_a()
        dims_b = self.dimension_b()
        if dims_a is not dims_b:
            return False
        if dims_a is Dimension.CURVE:
            return self.matches(OVERLAPS_PATTERNS['lines'])
        if dims_a in (Dimension.POINT, Dimension.AREA):
            return self.matches(OVERLAPS_PATTERNS['points_or_areas'])
        return False

    def __str__(self) -> str:
        return ''.join(cell.symbol for cell in self.cells)

    def __repr__(self) -> str:
        return f"IntersectionMatrix({self})"


def predicate_patterns() -> Dict[str, Tuple[str, ...]]:
    """
    Return the DE-9IM pattern templates of the named predicates.

    A predicate holds when any one of its patterns matches.
    """
    return {
        'equals_topo': ('T*F**FFF*',),

        'disjoint': ('FF*FF****',),

        'touches': ('FT*******', 'F**T*****', 'F***T****'),

        'within': ('T*F**F***',),

        'contains': ('T*****FF*',),

        'covers': ('T*****FF*', '*T****FF*', '***T**FF*', '****T*FF*'),

        'covered_by': ('T*F**F***', '*TF**F***', '**FT*F***', '**F*TF***'),
    }


PREDICATE_PATTERNS = predicate_patterns()

# Crosses and overlaps pick their pattern by the dimensions involved
CROSSES_PATTERNS = {
    'lower': 'T*T******',    # dim(A) < dim(B)
    'higher': 'T*****T**',   # dim(A) > dim(B)
    'lines': '0********',    # line / line
}

OVERLAPS_PATTERNS = {
    'points_or_areas': 'T*T***T**',
    'lines': '1*T***T**',
}


if __name__ == "__main__":
    print("DE-9IM Intersection Matrix Module")
    print("=" * 50)

    matrix = IntersectionMatrix.from_string("212101212")
    print(f"\nMatrix: {matrix!r}")
    print(f"Transpose: {matrix.transpose()!r}")

    print("\nPredicates:")
    for name in ('is_intersects', 'is_disjoint', 'is_touches', 'is_crosses',
                 'is_overlaps', 'is_within', 'is_contains'):
        print(f"  {name}: {getattr(matrix, name)()}")

    print("\nPredicate templates:")
    for name, patterns in PREDICATE_PATTERNS.items():
        print(f"  {name}: {', '.join(patterns)}")
