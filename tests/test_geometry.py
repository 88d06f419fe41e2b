"""
Unit tests for the geometry model.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import unittest
from geom_base import (
    GeometryError,
    InvalidGeometry,
    GeometryKind,
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
    coords_iter,
    bounding_rect,
)

SQUARE = [(0, 0), (4, 0), (4, 4), (0, 4), (0, 0)]


class TestValidation(unittest.TestCase):
    """Test that malformed input is rejected."""

    def test_errors_are_value_errors(self):
        self.assertTrue(issubclass(InvalidGeometry, GeometryError))
        self.assertTrue(issubclass(InvalidGeometry, ValueError))

    def test_non_finite_coordinates(self):
        with self.assertRaises(InvalidGeometry):
            Point(float('nan'), 0)
        with self.assertRaises(InvalidGeometry):
            Point(0, float('inf'))
        with self.assertRaises(InvalidGeometry):
            LineString([(0, 0), (float('-inf'), 1)])

    def test_non_numeric_coordinates(self):
        with self.assertRaises(InvalidGeometry):
            Point('a', 'b')
        with self.assertRaises(InvalidGeometry):
            LineString([(0, 0), (1, 2, 3)])
        with self.assertRaises(InvalidGeometry):
            LineString(None)

    def test_numeric_strings_are_rejected(self):
        with self.assertRaises(InvalidGeometry):
            Point('1', '2')
        with self.assertRaises(InvalidGeometry):
            LineString([(0, 0), (b'1', 1)])
        with self.assertRaises(InvalidGeometry):
            Rect('12', (1, 1))

    def test_line_string_too_short(self):
        with self.assertRaises(InvalidGeometry):
            LineString([(0, 0)])
        with self.assertRaises(InvalidGeometry):
            LineString([])

    def test_unclosed_ring(self):
        """Rings are never closed automatically."""
        with self.assertRaises(InvalidGeometry):
            Polygon([(0, 0), (4, 0), (4, 4), (0, 4)])

    def test_ring_too_short(self):
        with self.assertRaises(InvalidGeometry):
            Polygon([(0, 0), (1, 0), (0, 0)])
        with self.assertRaises(InvalidGeometry):
            Polygon([])

    def test_ring_too_few_distinct(self):
        with self.assertRaises(InvalidGeometry):
            Polygon([(0, 0), (1, 0), (1, 0), (0, 0)])

    def test_bad_hole(self):
        with self.assertRaises(InvalidGeometry):
            Polygon(SQUARE, [[(1, 1), (2, 1), (2, 2)]])
        with self.assertRaises(InvalidGeometry):
            Polygon(SQUARE, 5)

    def test_wrong_member_types(self):
        with self.assertRaises(InvalidGeometry):
            MultiPolygon([Point(0, 0)])
        with self.assertRaises(InvalidGeometry):
            GeometryCollection([object()])


class TestConstruction(unittest.TestCase):
    """Test construction and normalisation."""

    def test_point(self):
        point = Point(1, 2)
        self.assertEqual(point.coord, (1.0, 2.0))
        self.assertIsInstance(point.x, float)
        self.assertEqual(point.kind, GeometryKind.POINT)

    def test_polygon_rings(self):
        polygon = Polygon(SQUARE, [[(1, 1), (2, 1), (2, 2), (1, 1)]])
        rings = polygon.rings()
        self.assertEqual(len(rings), 2)
        self.assertIsInstance(rings[0], LineString)
        self.assertTrue(all(ring.is_closed() for ring in rings))

    def test_polygon_accepts_line_string(self):
        self.assertEqual(Polygon(LineString(SQUARE)), Polygon(SQUARE))

    def test_polygon_without_holes(self):
        self.assertEqual(Polygon(SQUARE, None), Polygon(SQUARE))
        self.assertEqual(Polygon(SQUARE, None).interiors, ())

    def test_rect_normalises_corners(self):
        rect = Rect((4, 0), (0, 3))
        self.assertEqual(rect.min_coord, (0.0, 0.0))
        self.assertEqual(rect.max_coord, (4.0, 3.0))
        self.assertEqual(rect.width(), 4.0)
        self.assertEqual(rect.height(), 3.0)

    def test_rect_intersects(self):
        rect = Rect((0, 0), (2, 2))
        self.assertTrue(rect.intersects(Rect((2, 2), (3, 3))))
        self.assertFalse(rect.intersects(Rect((2.5, 0), (3, 1))))
        self.assertTrue(rect.intersects(Rect((2.5, 0), (3, 1)), eps=0.5))

    def test_rect_to_polygon(self):
        polygon = Rect((0, 0), (2, 1)).to_polygon()
        self.assertEqual(len(polygon.exterior), 5)
        self.assertTrue(polygon.exterior.is_closed())

    def test_triangle_to_polygon(self):
        polygon = Triangle((0, 0), (1, 0), (0, 1)).to_polygon()
        self.assertEqual(polygon.exterior.coords[0], polygon.exterior.coords[-1])

    def test_line_helpers(self):
        line_string = Line((0, 0), (1, 1)).to_line_string()
        self.assertEqual(line_string.coords, ((0.0, 0.0), (1.0, 1.0)))
        self.assertEqual(list(LineString([(0, 0), (1, 0), (1, 1)]).lines()),
                         [((0.0, 0.0), (1.0, 0.0)), ((1.0, 0.0), (1.0, 1.0))])

    def test_empty_collections_are_valid(self):
        for geometry in (MultiPoint(), MultiLineString(), MultiPolygon(), GeometryCollection()):
            self.assertEqual(list(coords_iter(geometry)), [])

    def test_multi_point_coerces_members(self):
        multi = MultiPoint([(0, 0), Point(1, 1)])
        self.assertEqual(multi.points, (Point(0, 0), Point(1, 1)))

    def test_geometries_are_immutable(self):
        point = Point(0, 0)
        with self.assertRaises(AttributeError):
            point.x = 5


class TestCoordinateAccess(unittest.TestCase):
    """Test coordinate iteration and bounding rectangles."""

    def test_nested_collection(self):
        nested = GeometryCollection([
            Point(-1, 5),
            GeometryCollection([LineString([(0, 0), (3, -2)])]),
        ])
        self.assertEqual(list(coords_iter(nested)), [(-1.0, 5.0), (0.0, 0.0), (3.0, -2.0)])
        self.assertEqual(bounding_rect(nested), Rect((-1, -2), (3, 5)))

    def test_bounding_rect_of_empty(self):
        self.assertIsNone(bounding_rect(GeometryCollection()))

    def test_deep_nesting_iterates(self):
        geometry = Point(1, 1)
        for _ in range(5000):
            geometry = GeometryCollection([geometry])
        self.assertEqual(list(coords_iter(geometry)), [(1.0, 1.0)])


if __name__ == '__main__':
    unittest.main()
