"""
Integration tests for the relate engine: concrete matrices and predicates
over point, line and polygon combinations.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import math
import unittest
from unittest import mock
from de9im_config import RelateConfig, ToleranceConfig
from geom_base import (
    InvalidGeometry,
    InvalidPattern,
    Dimension,
    Part,
    Point,
    LineString,
    Polygon,
    MultiPoint,
    MultiLineString,
    MultiPolygon,
    GeometryCollection,
    Rect,
    Triangle,
    interior_dimension,
)
from relate_engine import (
    MatrixBuilder,
    relate,
    segment_pair_dimension,
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
from robust_kernel import point_in_ring, segment_intersection

SQUARE = Polygon([(0, 0), (4, 0), (4, 4), (0, 4), (0, 0)])


class TestPointRelations(unittest.TestCase):
    """Test relations involving points."""

    def test_square_contains_centre(self):
        """Square vs its centre point."""
        centre = Point(2, 2)
        self.assertEqual(str(relate(SQUARE, centre)), '0F2FF1FF2')
        self.assertEqual(str(relate(centre, SQUARE)), '0FFFFF212')
        self.assertTrue(contains(SQUARE, centre))
        self.assertTrue(within(centre, SQUARE))
        self.assertFalse(touches(SQUARE, centre))

    def test_point_on_square_edge(self):
        point = Point(4, 2)
        self.assertEqual(str(relate(point, SQUARE)), 'F0FFFF212')
        self.assertTrue(touches(point, SQUARE))
        self.assertFalse(within(point, SQUARE))
        self.assertTrue(covered_by(point, SQUARE))

    def test_equal_and_distinct_points(self):
        self.assertEqual(str(relate(Point(1, 1), Point(1, 1))), '0FFFFFFF2')
        self.assertEqual(str(relate(Point(0, 0), Point(1, 1))), 'FF0FFF0F2')
        self.assertTrue(equals_topo(Point(1, 1), Point(1, 1)))

    def test_point_on_line(self):
        line = LineString([(0, 0), (2, 0)])
        self.assertEqual(str(relate(Point(1, 0), line)), '0FFFFF102')
        self.assertEqual(str(relate(Point(0, 0), line)), 'F0FFFF102')
        self.assertEqual(str(relate(Point(5, 5), line)), 'FF0FFF102')

    def test_multi_point_partly_inside(self):
        points = MultiPoint([(2, 2), (10, 10)])
        matrix = relate(points, SQUARE)
        self.assertEqual(str(matrix), '0F0FFF212')
        self.assertTrue(intersects(points, SQUARE))
        self.assertFalse(within(points, SQUARE))


class TestLineRelations(unittest.TestCase):
    """Test relations between curves."""

    def test_lines_sharing_an_endpoint(self):
        a = LineString([(0, 0), (1, 0)])
        b = LineString([(1, 0), (2, 0)])
        self.assertEqual(str(relate(a, b)), 'FF1F00102')
        self.assertTrue(touches(a, b))
        self.assertFalse(crosses(a, b))
        self.assertFalse(overlaps(a, b))

    def test_crossing_lines(self):
        a = LineString([(0, 0), (2, 2)])
        b = LineString([(0, 2), (2, 0)])
        self.assertEqual(str(relate(a, b)), '0F1FF0102')
        self.assertTrue(crosses(a, b))
        self.assertFalse(touches(a, b))

    def test_collinear_overlap(self):
        a = LineString([(0, 0), (2, 0)])
        b = LineString([(1, 0), (3, 0)])
        self.assertEqual(str(relate(a, b)), '1010F0102')
        self.assertTrue(overlaps(a, b))
        self.assertFalse(crosses(a, b))

    def test_line_within_line(self):
        outer = LineString([(0, 0), (4, 0)])
        inner = LineString([(1, 0), (3, 0)])
        self.assertTrue(contains(outer, inner))
        self.assertTrue(within(inner, outer))
        self.assertEqual(str(relate(inner, outer)), '1FF0FF102')

    def test_identical_lines(self):
        line = LineString([(0, 0), (1, 1), (2, 0)])
        self.assertEqual(str(relate(line, line)), '1FFF0FFF2')
        self.assertTrue(equals_topo(line, line))

    def test_reversed_line_is_equal(self):
        forward = LineString([(0, 0), (1, 1), (2, 0)])
        backward = LineString([(2, 0), (1, 1), (0, 0)])
        self.assertTrue(equals_topo(forward, backward))

    def test_closed_ring_meets_line(self):
        """A closed line string has no boundary."""
        ring = LineString([(0, 0), (2, 0), (2, 2), (0, 2), (0, 0)])
        tail = LineString([(0, 0), (-1, -1)])
        self.assertEqual(str(relate(ring, tail)), 'F01FFF102')

    def test_segment_pair_dimension(self):
        eps = 1e-10
        self.assertEqual(segment_pair_dimension((0, 0), (2, 0), (1, 0), (3, 0), eps), Dimension.CURVE)
        self.assertEqual(segment_pair_dimension((0, 0), (2, 2), (0, 2), (2, 0), eps), Dimension.POINT)
        self.assertEqual(segment_pair_dimension((0, 0), (1, 0), (0, 1), (1, 1), eps), Dimension.EMPTY)


class TestAreaRelations(unittest.TestCase):
    """Test relations involving areas."""

    def test_overlapping_rectangles(self):
        a = Rect((0, 0), (2, 2))
        b = Rect((1, 1), (3, 3))
        self.assertEqual(str(relate(a, b)), '212101212')
        self.assertTrue(overlaps(a, b))
        self.assertTrue(intersects(a, b))
        self.assertFalse(touches(a, b))

    def test_rectangles_sharing_an_edge(self):
        a = Rect((0, 0), (2, 2))
        b = Rect((2, 0), (4, 2))
        self.assertEqual(str(relate(a, b)), 'FF2F11212')
        self.assertTrue(touches(a, b))
        self.assertFalse(overlaps(a, b))

    def test_rectangles_sharing_a_corner(self):
        a = Rect((0, 0), (2, 2))
        b = Rect((2, 2), (4, 4))
        self.assertEqual(str(relate(a, b)), 'FF2F01212')
        self.assertTrue(touches(a, b))

    def test_identical_polygons(self):
        self.assertEqual(str(relate(SQUARE, SQUARE)), '2FFF1FFF2')
        self.assertTrue(equals_topo(SQUARE, Rect((0, 0), (4, 4))))

    def test_clockwise_ring_is_equal(self):
        clockwise = Polygon([(0, 0), (0, 4), (4, 4), (4, 0), (0, 0)])
        self.assertEqual(str(relate(SQUARE, clockwise)), '2FFF1FFF2')

    def test_nested_polygons(self):
        inner = Rect((1, 1), (2, 2))
        self.assertEqual(str(relate(SQUARE, inner)), '212FF1FF2')
        self.assertTrue(contains(SQUARE, inner))
        self.assertTrue(within(inner, SQUARE))

    def test_inner_polygon_touching_from_inside(self):
        inner = Rect((0, 0), (2, 2))
        self.assertEqual(str(relate(SQUARE, inner)), '212F11FF2')
        self.assertTrue(contains(SQUARE, inner))
        self.assertTrue(covers(SQUARE, inner))
        self.assertFalse(touches(SQUARE, inner))

    def test_polygon_with_hole(self):
        donut = Polygon([(0, 0), (10, 0), (10, 10), (0, 10), (0, 0)],
                        [[(2, 2), (2, 4), (4, 4), (4, 2), (2, 2)]])
        self.assertTrue(contains(donut, Point(1, 1)))
        self.assertFalse(contains(donut, Point(3, 3)))
        self.assertTrue(disjoint(donut, Point(3, 3)))
        self.assertTrue(touches(donut, Point(2, 3)))
        # A square filling the hole exactly touches the donut
        plug = Rect((2, 2), (4, 4))
        self.assertEqual(str(relate(donut, plug)), 'FF2F112F2')

    def test_line_crossing_square(self):
        line = LineString([(-1, 2), (5, 2)])
        self.assertEqual(str(relate(line, SQUARE)), '101FF0212')
        self.assertTrue(crosses(line, SQUARE))
        self.assertTrue(crosses(SQUARE, line))

    def test_line_along_edge(self):
        edge = LineString([(0, 0), (4, 0)])
        self.assertEqual(str(relate(edge, SQUARE)), 'F1FF0F212')
        self.assertTrue(touches(edge, SQUARE))
        self.assertTrue(covered_by(edge, SQUARE))
        self.assertFalse(within(edge, SQUARE))

    def test_line_inside_square(self):
        line = LineString([(1, 1), (3, 3)])
        self.assertEqual(str(relate(line, SQUARE)), '1FF0FF212')
        self.assertTrue(within(line, SQUARE))

    def test_triangle(self):
        triangle = Triangle((0, 0), (4, 0), (0, 4))
        self.assertTrue(contains(triangle, Point(1, 1)))
        self.assertTrue(touches(triangle, Point(2, 2)))
        self.assertFalse(intersects(triangle, Point(3, 3)))

    def test_multi_polygon(self):
        pair = MultiPolygon([
            Polygon([(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)]),
            Polygon([(5, 5), (6, 5), (6, 6), (5, 6), (5, 5)]),
        ])
        self.assertTrue(contains(pair, Point(5.5, 5.5)))
        self.assertTrue(overlaps(pair, Rect((0.5, 0.5), (3, 3))))


class TestCollections(unittest.TestCase):
    """Test heterogeneous and empty inputs."""

    def test_collection_within_square(self):
        collection = GeometryCollection([Point(1, 1), LineString([(1, 3), (3, 3)])])
        self.assertTrue(within(collection, SQUARE))
        self.assertEqual(str(relate(collection, SQUARE)), '1FF0FF212')

    def test_multi_line_string(self):
        lines = MultiLineString([[(0, 0), (1, 0)], [(1, 0), (2, 0)]])
        single = LineString([(0, 0), (2, 0)])
        self.assertTrue(equals_topo(lines, single))

    def test_empty_geometries(self):
        self.assertEqual(str(relate(GeometryCollection(), GeometryCollection())), 'FFFFFFFF2')
        self.assertTrue(equals_topo(MultiPoint(), GeometryCollection()))
        self.assertEqual(str(relate(MultiPoint(), Point(0, 0))), 'FFFFFF0F2')
        self.assertFalse(intersects(MultiPolygon(), SQUARE))

    def test_degenerate_members(self):
        """A flat triangle behaves as the segment it collapses to."""
        flat = Triangle((0, 2), (2, 2), (4, 2))
        self.assertEqual(relate(flat, SQUARE), relate(LineString([(0, 2), (4, 2)]), SQUARE))


class TestEngineBehaviour(unittest.TestCase):
    """Test configuration, errors and the envelope short-circuit."""

    def test_invalid_input(self):
        with self.assertRaises(InvalidGeometry):
            relate("POLYGON EMPTY", SQUARE)

    def test_nesting_limit(self):
        geometry = Point(0, 0)
        for _ in range(10):
            geometry = GeometryCollection([geometry])
        config = RelateConfig(max_collection_depth=5)
        with self.assertRaises(InvalidGeometry):
            relate(geometry, Point(0, 0), config)
        self.assertTrue(intersects(geometry, Point(0, 0)))

    def test_invalid_pattern(self):
        with self.assertRaises(InvalidPattern):
            relate_pattern(SQUARE, Point(2, 2), 'T*T')
        self.assertTrue(relate_pattern(SQUARE, Point(2, 2), 'T*****FF*'))

    def test_envelope_shortcut_matches_full_computation(self):
        far = Polygon([(10, 10), (12, 10), (11, 12), (10, 10)])
        with_shortcut = relate(SQUARE, far)
        without = relate(SQUARE, far, RelateConfig(use_envelope_shortcut=False))
        self.assertEqual(with_shortcut, without)
        self.assertEqual(str(with_shortcut), 'FF2FF1212')

    def test_envelope_shortcut_logs(self):
        with self.assertLogs('relate_engine.builder', level='DEBUG') as captured:
            MatrixBuilder().build(Point(0, 0), Point(5, 5))
        self.assertTrue(any('short-circuit' in line for line in captured.output))

    def test_tolerance_controls_near_contact(self):
        point = Point(4 + 1e-12, 2)
        self.assertTrue(touches(point, SQUARE))
        exact = RelateConfig(tolerance=ToleranceConfig(relative=0.0, absolute=0.0))
        self.assertTrue(disjoint(point, SQUARE, exact))

    def test_large_coordinates(self):
        offset = 1e7
        big = Rect((offset, offset), (offset + 4, offset + 4))
        inner = Point(offset + 2, offset + 2)
        self.assertTrue(contains(big, inner))

    def test_point_in_many_sided_polygon_stays_linear(self):
        """Vertices and edge pieces already known to be on the ring are not located again."""
        sides = 400
        ring = [(10 * math.cos(2 * math.pi * k / sides), 10 * math.sin(2 * math.pi * k / sides))
                for k in range(sides)]
        polygon = Polygon(ring + [ring[0]])
        with mock.patch('relate_engine.classifier.segment_intersection',
                        wraps=segment_intersection) as intersections, \
                mock.patch('geom_base.topology.point_in_ring', wraps=point_in_ring) as located:
            matrix = relate(polygon, Point(0, 0))
        self.assertEqual(str(matrix), '0F2FF1FF2')
        self.assertLess(intersections.call_count, 6 * sides)
        self.assertLessEqual(located.call_count, 5)


class TestThinGeometries(unittest.TestCase):
    """Test members no wider than the working tolerance."""

    def test_sub_tolerance_line_is_a_point(self):
        line = LineString([(0, 0), (1e-12, 0)])
        matrix = relate(line, line)
        self.assertEqual(str(matrix), '0FFFFFFF2')
        self.assertEqual(interior_dimension(line), Dimension.POINT)
        self.assertEqual(matrix.get(Part.INTERIOR, Part.INTERIOR), interior_dimension(line))

    def test_sub_tolerance_rect_is_a_line(self):
        sliver = Rect((0, 0), (1e-12, 5))
        self.assertEqual(interior_dimension(sliver), Dimension.CURVE)
        self.assertEqual(str(relate(sliver, sliver)), '1FFF0FFF2')
        self.assertEqual(str(relate(sliver, LineString([(0, 0), (0, 5)]))), '1FFF0FFF2')


if __name__ == '__main__':
    unittest.main()
