"""
Tolerance Policy

A single epsilon governs every coordinate comparison made while relating two
geometries. It is derived once per query from the magnitude of both inputs
and then passed unchanged to every kernel predicate, so that orientation,
point-on-segment and point-in-ring tests agree with each other.

    epsilon = max(absolute, relative * max(1, max |coordinate|))
"""

import math
from dataclasses import dataclass
from typing import Iterable, Tuple

Coord = Tuple[float, float]

# Default relative tolerance; about six orders of magnitude above double
# precision rounding for well-scaled input.
DEFAULT_RELATIVE_TOLERANCE = 1e-10
DEFAULT_ABSOLUTE_TOLERANCE = 0.0


@dataclass(frozen=True)
class Tolerance:
    """
    Configurable comparison tolerance.

    Attributes:
        relative: Fraction of the input magnitude used as epsilon
        absolute: Lower bound on epsilon, in coordinate units
    """
    relative: float = DEFAULT_RELATIVE_TOLERANCE
    absolute: float = DEFAULT_ABSOLUTE_TOLERANCE

    def __post_init__(self):
        for name in ('relative', 'absolute'):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"Tolerance {name} must be a finite non-negative number, got {value!r}")

    def epsilon_for(self, coords: Iterable[Coord]) -> float:
        """
        Compute the working epsilon for a set of coordinates.

        Args:
            coords: Every coordinate taking part in the query

        Returns:
            The epsilon to hand to the kernel predicates
        """
        scale = 1.0
        for x, y in coords:
            scale = max(scale, abs(x), abs(y))
        return max(self.absolute, self.relative * scale)


EXACT = Tolerance(relative=0.0, absolute=0.0)
