"""
DE-9IM Matrix Builder

Orchestrates one relate query:

1. Validate and decompose both geometries
2. Derive a single epsilon from the coordinates of both
3. Short-circuit on disjoint bounding boxes or empty input
4. Otherwise ask the classifier for all nine cells

Because the epsilon covers both inputs and the classifier nodes the
combined linework, swapping the arguments yields exactly the transposed
matrix.
"""

import logging
from itertools import product
from typing import Optional

from de9im_config import RelateConfig
from geom_base.errors import InvalidGeometry
from geom_base.geometry import Geometry, GEOMETRY_TYPES, Rect
from geom_base.intersection_matrix import Dimension, IntersectionMatrix, Part, PARTS
from geom_base.topology import Components, decompose

from .classifier import IntersectionClassifier

logger = logging.getLogger(__name__)


class MatrixBuilder:
    """
    Computes DE-9IM matrices under one configuration.

    Attributes:
        config: Tolerance, nesting limit and envelope short-circuit switch
    """

    def __init__(self, config: Optional[RelateConfig] = None):
        self.config = config or RelateConfig()
        self.tolerance = self.config.tolerance.to_tolerance()

    def decompose(self, geometry: Geometry) -> Components:
        """
        Validate and flatten one input.

        Raises:
            InvalidGeometry: for non-geometries or over-deep collections
        """
        if not isinstance(geometry, GEOMETRY_TYPES):
            raise InvalidGeometry(f"Expected a geometry, got {type(geometry).__name__}")
        return decompose(geometry, self.config.max_collection_depth)

    def build(self, a: Geometry, b: Geometry) -> IntersectionMatrix:
        """
        Compute the intersection matrix of A (rows) against B (columns).

        Args:
            a: First geometry
            b: Second geometry

        Returns:
            The DE-9IM matrix

        Raises:
            InvalidGeometry: if either input is malformed
        """
        components_a = self.decompose(a)
        components_b = self.decompose(b)
        eps = self.tolerance.epsilon_for(components_a.coords() + components_b.coords())
        components_a = components_a.collapsed(eps)
        components_b = components_b.collapsed(eps)

        if self._disjoint_envelopes(components_a, components_b, eps):
            matrix = IntersectionMatrix.disjoint_for(
                components_a.interior_dimension(), components_a.boundary_dimension(eps),
                components_b.interior_dimension(), components_b.boundary_dimension(eps),
            )
            logger.debug("relate %s: envelope short-circuit (eps=%g)", matrix, eps)
            return matrix

        classifier = IntersectionClassifier(components_a, components_b, eps)
        cells = []
        for part_a, part_b in product(PARTS, PARTS):
            if part_a is Part.EXTERIOR and part_b is Part.EXTERIOR:
                cells.append(Dimension.AREA)
            else:
                cells.append(classifier.classify(part_a, part_b))

        matrix = IntersectionMatrix(tuple(cells))
        logger.debug("relate %s (eps=%g)", matrix, eps)
        return matrix

    def _disjoint_envelopes(self, components_a: Components, components_b: Components,
                            eps: float) -> bool:
        env_a = components_a.envelope()
        env_b = components_b.envelope()
        if env_a is None or env_b is None:
            return True
        if not self.config.use_envelope_shortcut:
            return False
        return not Rect(env_a[:2], env_a[2:]).intersects(Rect(env_b[:2], env_b[2:]), eps)


def relate(a: Geometry, b: Geometry, config: Optional[RelateConfig] = None) -> IntersectionMatrix:
    """Compute the DE-9IM matrix of two geometries."""
    return MatrixBuilder(config).build(a, b)
