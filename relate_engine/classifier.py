"""
Intersection Classifier

Computes the dimension of the intersection between a labelled part
(interior, boundary or exterior) of geometry A and a labelled part of
geometry B, without clipping polygons.

The linework of both geometries is noded once: every segment is split at
each point where it meets any other segment of either geometry, including
the ends of collinear overlaps and touching endpoints. After noding, the
location of every piece is constant along it, so a handful of labelled
witnesses recovers the whole arrangement:

- 0-dim: every vertex, isolated point and intersection node
- 1-dim: the midpoint of every noded sub-segment
- 2-dim: the faces immediately left and right of every sub-segment

Each witness is located in A and in B; the pair of parts it lands in
proves that those two parts share a set of at least the witness's
dimension.

Key concepts:
- The result for a part pair is the largest witnessed dimension, capped by
  the smaller of the two parts' own dimensions
- EXTERIOR x EXTERIOR is always an area
- A face next to a single simple ring takes its side from the ring's
  orientation; other faces are sampled just off the piece with an exact
  point-in-area test

References:
- Egenhofer & Herring (1990) - Categorizing Binary Topological Relations
- JTS Topology Suite - RelateComputer and GeometryGraph design notes
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple

from robust_kernel import (
    Coord,
    DegenerateCase,
    EXACT,
    IntersectionKind,
    Orientation,
    RingPosition,
    coords_equal,
    orientation,
    point_on_segment,
    project,
    segment_frame,
    segment_intersection,
    signed_ring_area,
)
from geom_base.intersection_matrix import Dimension, Part, PARTS
from geom_base.topology import Components, polygon_position, topological_part

logger = logging.getLogger(__name__)

Segment = Tuple[Coord, Coord]
Envelope = Tuple[float, float, float, float]

SIDE_A = 0
SIDE_B = 1


def segment_pair_dimension(a: Coord, b: Coord, c: Coord, d: Coord, eps: float) -> Dimension:
    """
    Dimension of the intersection of two closed segments.

    EMPTY for no contact, POINT for a touch or a crossing and CURVE for a
    collinear overlap.
    """
    result = segment_intersection(a, b, c, d, eps)
    if result.kind is IntersectionKind.COLLINEAR:
        return Dimension.CURVE
    if result.kind is IntersectionKind.POINT:
        return Dimension.POINT
    return Dimension.EMPTY


def _segment_envelope(segment: Segment) -> Envelope:
    (ax, ay), (bx, by) = segment
    return (min(ax, bx), min(ay, by), max(ax, bx), max(ay, by))


def _candidate_pairs(envelopes: Sequence[Envelope], eps: float) -> Iterator[Tuple[int, int]]:
    """Index pairs whose envelopes overlap once expanded by ``eps``."""
    order = sorted(range(len(envelopes)), key=lambda i: envelopes[i][0])
    # Sweep along x; a pair is visited only if their x-ranges overlap
    for position, i in enumerate(order):
        env_i = envelopes[i]
        for k in range(position + 1, len(order)):
            j = order[k]
            env_j = envelopes[j]
            if env_j[0] > env_i[2] + eps:
                break
            if env_j[1] > env_i[3] + eps or env_i[1] > env_j[3] + eps:
                continue
            yield i, j


def _ring_is_simple(coords: Tuple[Coord, ...], eps: float) -> bool:
    """True when no two edges of the ring meet except adjacent ones at their shared vertex."""
    edges = list(zip(coords, coords[1:]))
    count = len(edges)
    envelopes = [_segment_envelope(edge) for edge in edges]
    for i, j in _candidate_pairs(envelopes, eps):
        first, second = min(i, j), max(i, j)
        (a, b), (c, d) = edges[first], edges[second]
        result = segment_intersection(a, b, c, d, eps)
        if result.kind is IntersectionKind.NONE:
            continue
        adjacent = second == first + 1 or (first == 0 and second == count - 1)
        if adjacent and result.kind is IntersectionKind.POINT:
            continue
        return False
    return True


class _PolygonRing:
    """A ring of a polygon together with the side its interior lies on."""

    def __init__(self, coords: Tuple[Coord, ...], is_shell: bool, eps: float):
        self.coords = coords
        self.eps = eps
        area = signed_ring_area(coords)
        # Counter-clockwise shells and clockwise holes have the polygon
        # interior on their left
        self.interior_on_left = (area > 0) if is_shell else (area < 0)
        self._is_simple: Optional[bool] = None

    @property
    def is_simple(self) -> bool:
        # Orientation says nothing about the sides of a self-intersecting ring
        if self._is_simple is None:
            self._is_simple = _ring_is_simple(self.coords, self.eps)
        return self._is_simple


@dataclass(frozen=True)
class _Edge:
    """A segment of one input, with the polygon ring it belongs to if any."""
    start: Coord
    end: Coord
    side: int
    polygon: Optional[int] = None
    ring: Optional[int] = None


class IntersectionClassifier:
    """
    Dimension of intersection between labelled parts of two geometries.

    Attributes:
        components_a: Decomposition of geometry A
        components_b: Decomposition of geometry B
        eps: Working tolerance shared by every predicate
    """

    def __init__(self, components_a: Components, components_b: Components, eps: float):
        self.components_a = components_a
        self.components_b = components_b
        self.eps = eps
        self._witnessed: Optional[Dict[Tuple[Part, Part], Dimension]] = None
        self._rings = (self._polygon_rings(components_a, eps),
                       self._polygon_rings(components_b, eps))
        self._dims_a = {part: topological_part(components_a, part, eps).dimension for part in PARTS}
        self._dims_b = {part: topological_part(components_b, part, eps).dimension for part in PARTS}

    @staticmethod
    def _polygon_rings(components: Components, eps: float) -> List[List[_PolygonRing]]:
        return [
            [_PolygonRing(ring, index == 0, eps) for index, ring in enumerate(rings)]
            for rings in components.polygons
        ]

    def classify(self, part_a: Part, part_b: Part) -> Dimension:
        """
        Dimension of ``part_a`` of A intersected with ``part_b`` of B.

        Args:
            part_a: INTERIOR, BOUNDARY or EXTERIOR of A
            part_b: INTERIOR, BOUNDARY or EXTERIOR of B

        Returns:
            EMPTY, POINT, CURVE or AREA
        """
        cap = min(self._dims_a[part_a], self._dims_b[part_b])
        if cap is Dimension.EMPTY:
            return Dimension.EMPTY
        if part_a is Part.EXTERIOR and part_b is Part.EXTERIOR:
            return Dimension.AREA

        witnessed = self._witnesses().get((part_a, part_b), Dimension.EMPTY)
        return min(witnessed, cap)

    def _witnesses(self) -> Dict[Tuple[Part, Part], Dimension]:
        if self._witnessed is None:
            self._witnessed = {}
            self._collect()
        return self._witnessed

    def _record(self, part_a: Part, part_b: Part, dimension: Dimension) -> None:
        key = (part_a, part_b)
        if dimension > self._witnessed.get(key, Dimension.EMPTY):
            self._witnessed[key] = dimension

    def _locate_pair(self, p: Coord, edges: List[_Edge], on_edges: Iterable[int],
                     include_points: bool) -> Tuple[Part, Part]:
        """
        Locate a witness in A and in B.

        Args:
            p: Witness coordinate
            edges: Every usable edge of both inputs
            on_edges: Indexes of edges ``p`` is known to lie on
            include_points: Whether isolated points take part
        """
        on_polygons: Tuple[Set[int], Set[int]] = (set(), set())
        on_line = [False, False]
        for index in on_edges:
            edge = edges[index]
            if edge.polygon is None:
                on_line[edge.side] = True
            else:
                on_polygons[edge.side].add(edge.polygon)
        return (
            self.components_a.locate(p, self.eps, include_points,
                                     on_polygons[SIDE_A], on_line[SIDE_A]),
            self.components_b.locate(p, self.eps, include_points,
                                     on_polygons[SIDE_B], on_line[SIDE_B]),
        )

    def _collect(self) -> None:
        # Phase 1: node the combined linework
        edges = self._usable_edges()
        splits, partners = self._node(edges)

        # Phase 2: point witnesses, with the edges each is known to lie on
        owners: Dict[Coord, Set[int]] = {}
        for p in self.components_a.coords() + self.components_b.coords():
            owners.setdefault(p, set())
        for index, edge in enumerate(edges):
            for p in (edge.start, edge.end):
                owners[p].add(index)
            for p in splits[index]:
                owners.setdefault(p, set()).add(index)
        for p, on_edges in owners.items():
            part_a, part_b = self._locate_pair(p, edges, on_edges, include_points=True)
            self._record(part_a, part_b, Dimension.POINT)

        # Phase 3: curve and area witnesses along every noded piece
        has_area = bool(self.components_a.polygons or self.components_b.polygons)
        for index, edge in enumerate(edges):
            candidates = [index] + sorted(partners[index])
            for start, end in self._split(edge.start, edge.end, splits[index]):
                mid = ((start[0] + end[0]) / 2.0, (start[1] + end[1]) / 2.0)
                part_a, part_b = self._locate_pair(mid, edges, (index,), include_points=False)
                self._record(part_a, part_b, Dimension.CURVE)
                if has_area:
                    self._record_faces(edges, candidates, start, end, mid)

        logger.debug("Witnessed %d part pairs over %d segments",
                     len(self._witnessed), len(edges))

    def _usable_edges(self) -> List[_Edge]:
        result = []
        for side, components in ((SIDE_A, self.components_a), (SIDE_B, self.components_b)):
            for start, end, polygon, ring in components.edges():
                try:
                    segment_frame(start, end, self.eps)
                except DegenerateCase as exc:
                    logger.debug("Skipping segment: %s", exc)
                    continue
                result.append(_Edge(start, end, side, polygon, ring))
        return result

    def _node(self, edges: List[_Edge]) -> Tuple[List[Set[Coord]], List[Set[int]]]:
        """
        Intersect every pair of edges that can meet.

        Returns:
            Split points for each edge, and the other edges each one meets
        """
        splits: List[Set[Coord]] = [set() for _ in edges]
        partners: List[Set[int]] = [set() for _ in edges]
        envelopes = [_segment_envelope((edge.start, edge.end)) for edge in edges]

        for i, j in _candidate_pairs(envelopes, self.eps):
            result = segment_intersection(edges[i].start, edges[i].end,
                                          edges[j].start, edges[j].end, self.eps)
            if result.kind is IntersectionKind.NONE:
                continue
            partners[i].add(j)
            partners[j].add(i)
            for point in result.points:
                splits[i].add(point)
                splits[j].add(point)

        return splits, partners

    def _split(self, a: Coord, b: Coord, points: Set[Coord]) -> List[Segment]:
        """Cut ``a-b`` at the given points, merging cuts closer than eps."""
        eps = self.eps
        length, ux, uy = segment_frame(a, b, eps)

        interior = []
        for point in points:
            t = project(point, a, ux, uy)
            if eps < t < length - eps:
                interior.append((t, point))
        interior.sort()

        chain = [a]
        for _, point in interior:
            if not coords_equal(point, chain[-1], eps):
                chain.append(point)
        if coords_equal(chain[-1], b, eps) and len(chain) > 1:
            chain.pop()
        chain.append(b)

        return list(zip(chain, chain[1:]))

    def _record_faces(self, edges: List[_Edge], candidates: List[int],
                      start: Coord, end: Coord, mid: Coord) -> None:
        left_a, right_a = self._face_sides(SIDE_A, edges, candidates, start, end, mid)
        left_b, right_b = self._face_sides(SIDE_B, edges, candidates, start, end, mid)
        self._record(left_a, left_b, Dimension.AREA)
        self._record(right_a, right_b, Dimension.AREA)

    def _face_sides(self, side: int, edges: List[_Edge], candidates: List[int],
                    start: Coord, end: Coord, mid: Coord) -> Tuple[Part, Part]:
        """
        Parts of one geometry holding the faces left and right of a piece.

        Args:
            side: SIDE_A or SIDE_B
            edges: Every usable edge of both inputs
            candidates: The piece's own edge and every edge it meets
            start: Start of the piece
            end: End of the piece
            mid: Midpoint of the piece
        """
        eps = self.eps
        components = self.components_a if side == SIDE_A else self.components_b
        polygon_rings = self._rings[side]
        dx = end[0] - start[0]
        dy = end[1] - start[1]

        # Ring edges carrying this piece, by polygon
        carriers: Dict[int, List[Tuple[_PolygonRing, bool]]] = {}
        for index in candidates:
            edge = edges[index]
            if edge.side != side or edge.polygon is None:
                continue
            e0, e1 = edge.start, edge.end
            if (point_on_segment(mid, e0, e1, eps) and
                    orientation(e0, e1, start, eps) is Orientation.COLLINEAR and
                    orientation(e0, e1, end, eps) is Orientation.COLLINEAR):
                ring = polygon_rings[edge.polygon][edge.ring]
                same_direction = (e1[0] - e0[0]) * dx + (e1[1] - e0[1]) * dy > 0
                carriers.setdefault(edge.polygon, []).append(
                    (ring, ring.interior_on_left == same_direction))

        left = right = False
        for index, (rings, env) in enumerate(zip(polygon_rings, components.polygon_envelopes)):
            if left and right:
                break

            found = carriers.get(index)
            if found:
                if len(found) == 1 and found[0][0].is_simple:
                    if found[0][1]:
                        left = True
                    else:
                        right = True
                else:
                    side_left, side_right = self._offset_sides(rings, start, end, mid)
                    left = left or side_left
                    right = right or side_right
                continue

            if not (env[0] - eps <= mid[0] <= env[2] + eps and
                    env[1] - eps <= mid[1] <= env[3] + eps):
                continue
            position = polygon_position(mid, [ring.coords for ring in rings], eps)
            if position is RingPosition.INSIDE:
                left = right = True
            elif position is RingPosition.ON_BOUNDARY:
                side_left, side_right = self._offset_sides(rings, start, end, mid)
                left = left or side_left
                right = right or side_right

        return (Part.INTERIOR if left else Part.EXTERIOR,
                Part.INTERIOR if right else Part.EXTERIOR)

    @staticmethod
    def _offset_sides(rings: List[_PolygonRing], start: Coord, end: Coord,
                      mid: Coord) -> Tuple[bool, bool]:
        """
        Sample just off either side of a piece with an exact test.

        Used where ring orientation cannot decide: rings that share an
        edge, and self-intersecting rings under the even-odd rule.
        """
        length, ux, uy = segment_frame(start, end, 0.0)
        offset = length * 1e-6
        coords = [ring.coords for ring in rings]
        left_point = (mid[0] - uy * offset, mid[1] + ux * offset)
        right_point = (mid[0] + uy * offset, mid[1] - ux * offset)
        eps = EXACT.epsilon_for(())
        return (polygon_position(left_point, coords, eps) is RingPosition.INSIDE,
                polygon_position(right_point, coords, eps) is RingPosition.INSIDE)
