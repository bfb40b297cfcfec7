"""Tests for pixel-grid geometry helpers."""

import math

import numpy as np
import pytest

from py_lagrange.core.geometry import (
    Rect,
    avg,
    clamp,
    distance_field,
    find_min_distance_to_rect,
    find_rect_overlaps,
    offset_of,
    rect_from_bounds,
    round4,
    truncate_to,
)


class TestPrecision:
    """Test fixed-precision truncation."""

    def test_truncates_toward_zero(self):
        assert truncate_to(0.123456) == 0.1234
        assert truncate_to(0.99999) == 0.9999
        assert truncate_to(-0.123456) == -0.1234

    def test_noise_below_precision_is_dropped(self):
        assert round4(25.0) == round4(25.0 + 1e-7)
        assert round4(0.5) == round4(0.5 + 4e-6)

    def test_array_input(self):
        values = np.array([0.11119, 0.5, 1.0])
        np.testing.assert_array_equal(truncate_to(values), np.array([0.1111, 0.5, 1.0]))

    def test_clamp_and_avg(self):
        assert clamp(5, 0, 3) == 3
        assert clamp(-1, 0, 3) == 0
        assert avg(2.0, 4.0) == 3.0
        assert avg() == 0.0


class TestRect:
    """Test rect mapping and indexing."""

    def test_offset_of(self):
        assert offset_of(0, 0, 10) == 0
        assert offset_of(3, 2, 10) == 92
        assert offset_of(9, 9, 10) == 396

    def test_rect_from_bounds(self):
        rect = rect_from_bounds(0.25, 0.5, 0.0, 0.75, 8)
        assert rect == Rect(2, 0, 2, 6)

    def test_rect_from_bounds_floors_origin_and_ceils_extent(self):
        rect = rect_from_bounds(0.25, 0.5, 0.25, 0.5, 10)
        assert (rect.x, rect.y) == (2, 2)
        assert (rect.w, rect.h) == (3, 3)

    def test_inverted_bounds_are_empty(self):
        rect = rect_from_bounds(0.75, 0.25, 0.0, 1.0, 8)
        assert rect.is_empty
        assert rect.area == 0

    def test_clip(self):
        assert Rect(-2, -2, 5, 5).clip(10, 10) == Rect(0, 0, 3, 3)
        assert Rect(8, 8, 5, 5).clip(10, 10) == Rect(8, 8, 2, 2)
        assert Rect(12, 0, 2, 2).clip(10, 10).is_empty


class TestOverlaps:
    """Test overlap detection."""

    def test_finds_touching_and_intersecting(self):
        rect = Rect(0, 0, 5, 5)
        touching = Rect(5, 0, 5, 5)
        inside = Rect(2, 2, 2, 2)
        disjoint = Rect(7, 7, 2, 2)

        overlaps = find_rect_overlaps(rect, [touching, inside, disjoint], 10, 10)
        assert overlaps == [touching, inside]

    def test_overlaps_are_clipped_to_bounds(self):
        overlaps = find_rect_overlaps(Rect(0, 0, 5, 5), [Rect(3, 3, 20, 20)], 10, 10)
        assert overlaps == [Rect(3, 3, 7, 7)]

    def test_empty_rect_has_no_overlaps(self):
        assert find_rect_overlaps(Rect(0, 0, 0, 5), [Rect(0, 0, 5, 5)], 10, 10) == []


class TestDistance:
    """Test distance-to-edge computation."""

    def test_distance_without_overlaps(self):
        rect = Rect(0, 0, 10, 10)
        assert find_min_distance_to_rect(rect, 0, 5) == 0
        assert find_min_distance_to_rect(rect, 9, 5) == 0
        assert find_min_distance_to_rect(rect, 3, 5) == 3
        assert find_min_distance_to_rect(rect, 5, 5) == 4
        assert find_min_distance_to_rect(rect, 5, 1) == 1

    def test_shared_edge_is_ignored(self):
        rect = Rect(0, 0, 5, 10)
        neighbour = Rect(5, 0, 5, 10)

        # right edge is shared, so the left edge is the nearest border
        assert find_min_distance_to_rect(rect, 4, 5, [neighbour]) == 4
        assert find_min_distance_to_rect(rect, 4, 5) == 0

    def test_fully_shared_rect_has_infinite_distance(self):
        rect = Rect(2, 2, 3, 3)
        cover = Rect(0, 0, 10, 10)
        assert math.isinf(find_min_distance_to_rect(rect, 3, 3, [cover]))

    def test_field_matches_scalar(self):
        rect = Rect(2, 1, 7, 6)
        overlaps = [Rect(0, 0, 3, 4), Rect(8, 5, 4, 4), Rect(4, 7, 2, 2)]
        field = distance_field(rect, overlaps)

        assert field.shape == (rect.h, rect.w)
        for row in range(rect.h):
            for col in range(rect.w):
                expected = find_min_distance_to_rect(rect, rect.x + col, rect.y + row, overlaps)
                assert field[row, col] == expected

    def test_field_window(self):
        rect = Rect(-2, 0, 6, 4)
        window = rect.clip(10, 10)
        field = distance_field(rect, [], window)

        assert field.shape == (4, 4)
        # column 0 of the window is pixel x=0, two pixels in from the left edge
        assert field[1, 0] == 1
        assert field[0, 0] == 0
