"""
Tests for coordinate and course mathematics.

Tests cover:
- Course to vector interpolation
- Course and warp validation
- Sub-sector rounding and quadrant bounds
- The ratio-based direction/distance calculator
- Quadrant boundary crossing

Run with: python -m pytest tests/test_navigation.py -v
"""

import math

import numpy as np
import pytest
from numpy.testing import assert_array_almost_equal

from startrek.errors import InvalidInputError
from startrek.navigation import (
    Position,
    Vector2D,
    course_vector,
    direction_and_distance,
    quadrant_crossing,
    sector_distance,
    validate_course,
    validate_warp,
)


@pytest.fixture
def fractional_courses():
    """Courses sampled across the whole valid range."""
    return np.linspace(1.0, 8.99, 97)


# =============================================================================
# Course vectors
# =============================================================================

class TestCourseVector:
    """Tests for course_vector interpolation."""

    @pytest.mark.parametrize("course,expected", [
        (1, (1.0, 0.0)),
        (2, (1.0, -1.0)),
        (3, (0.0, -1.0)),
        (4, (-1.0, -1.0)),
        (5, (-1.0, 0.0)),
        (6, (-1.0, 1.0)),
        (7, (0.0, 1.0)),
        (8, (1.0, 1.0)),
    ])
    def test_integer_courses(self, course, expected):
        """Integer courses map to the compass table."""
        assert_array_almost_equal(course_vector(course).to_tuple(), expected)

    def test_half_course_is_midpoint(self):
        """Course 1.5 lies halfway between east and north-east."""
        assert_array_almost_equal(course_vector(1.5).to_tuple(), (1.0, -0.5))

    def test_course_near_nine_interpolates_toward_east(self):
        """Courses just below 9 blend course 8 into course 1."""
        assert_array_almost_equal(course_vector(8.5).to_tuple(), (1.0, 0.5))

    def test_interpolation_stays_on_segment(self, fractional_courses):
        """Every course vector lies on the segment between its neighbours."""
        for course in fractional_courses:
            r = math.floor(course)
            start = np.array(course_vector(r).to_tuple())
            end = np.array(
                course_vector(r + 1).to_tuple() if r < 8 else course_vector(1).to_tuple()
            )
            frac = course - r
            expected = start + (end - start) * frac
            assert_array_almost_equal(course_vector(course).to_tuple(), expected)

    def test_diagonals_are_not_normalized(self):
        """Course 2 moves a full sector on each axis."""
        assert course_vector(2).magnitude == pytest.approx(math.sqrt(2))

    @pytest.mark.parametrize("course", [0.0, 0.99, 9.0, 12.0, -3.0])
    def test_out_of_range_course_rejected(self, course):
        """Courses outside [1, 9) raise InvalidInputError."""
        with pytest.raises(InvalidInputError):
            course_vector(course)


class TestValidation:
    """Tests for course and warp validation."""

    def test_valid_course_returned_as_float(self):
        assert validate_course(3) == 3.0

    @pytest.mark.parametrize("warp", [0.0, 0.2, 1.0, 8.0])
    def test_valid_warp(self, warp):
        assert validate_warp(warp) == warp

    @pytest.mark.parametrize("warp", [-0.1, 8.01, 100.0])
    def test_invalid_warp(self, warp):
        """Warp factors outside [0, 8] raise InvalidInputError."""
        with pytest.raises(InvalidInputError):
            validate_warp(warp)


# =============================================================================
# Positions and vectors
# =============================================================================

class TestPositionAndVector:
    """Tests for Position and Vector2D helpers."""

    def test_rounding_uses_floor_plus_half(self):
        """Halves round up on both axes."""
        assert Vector2D(2.5, 3.49).rounded() == Position(3, 3)
        assert Vector2D(7.6, 0.5).rounded() == Position(8, 1)

    @pytest.mark.parametrize("x,y,inside", [
        (0.5, 4.0, True),
        (8.49, 8.49, True),
        (8.5, 4.0, False),
        (0.49, 4.0, False),
        (4.0, 8.5, False),
    ])
    def test_sector_bounds(self, x, y, inside):
        """The quadrant spans [0.5, 8.5) on each axis."""
        assert Vector2D(x, y).in_sector_bounds() is inside

    def test_adjacency_includes_diagonals_and_self(self):
        center = Position(4, 4)
        assert center.is_adjacent_to(Position(3, 3))
        assert center.is_adjacent_to(Position(4, 4))
        assert not center.is_adjacent_to(Position(6, 4))

    def test_position_bounds(self):
        assert Position(1, 8).in_bounds()
        assert not Position(0, 3).in_bounds()
        assert not Position(3, 9).in_bounds()

    def test_vector_arithmetic(self):
        v = Vector2D(1.0, -0.5) * 2 + Vector2D(0.5, 0.5)
        assert_array_almost_equal(v.to_tuple(), (2.5, -0.5))

    def test_sector_distance(self):
        """Distance is Euclidean on integer sectors."""
        assert sector_distance(Position(1, 1), Position(4, 5)) == pytest.approx(5.0)


# =============================================================================
# Direction and distance
# =============================================================================

class TestDirectionAndDistance:
    """Tests for the ratio-based direction calculator."""

    @pytest.mark.parametrize("target,expected_direction", [
        (Position(7, 4), 1.0),
        (Position(7, 1), 2.0),
        (Position(4, 1), 3.0),
        (Position(1, 1), 4.0),
        (Position(1, 4), 5.0),
        (Position(1, 7), 6.0),
        (Position(4, 7), 7.0),
        (Position(7, 7), 8.0),
    ])
    def test_compass_points(self, target, expected_direction):
        """Multiples of 45 degrees give the integer course."""
        direction, _ = direction_and_distance(Position(4, 4), target)
        assert direction == pytest.approx(expected_direction)

    def test_straight_up_target(self):
        """Ship at 4,4 and target at 4,1: direction 3, distance 3."""
        direction, distance = direction_and_distance(Position(4, 4), Position(4, 1))
        assert direction == pytest.approx(3.0)
        assert distance == pytest.approx(3.0)

    def test_non_diagonal_angle_uses_ratio(self):
        """Two east and one up blends halfway from course 1 to course 2."""
        direction, distance = direction_and_distance(Position(4, 4), Position(6, 3))
        assert direction == pytest.approx(1.5)
        assert distance == pytest.approx(math.sqrt(5))

    def test_ratio_differs_from_true_bearing(self):
        """The calculator is not arctangent based."""
        direction, _ = direction_and_distance(Position(1, 8), Position(3, 7))
        bearing = 1.0 + math.degrees(math.atan2(1, 2)) / 45.0
        assert direction != pytest.approx(bearing)

    def test_same_position_returns_five(self):
        direction, distance = direction_and_distance(Position(2, 2), Position(2, 2))
        assert direction == 5.0
        assert distance == 0.0


# =============================================================================
# Quadrant crossing
# =============================================================================

class TestQuadrantCrossing:
    """Tests for quadrant_crossing."""

    def test_full_warp_east(self):
        """Warp 1 east from sector 8 lands on sector 8 of the next quadrant."""
        new_q, new_s = quadrant_crossing(Position(4, 4), Position(8, 4), Vector2D(1.0, 0.0), 8)
        assert new_q == Position(5, 4)
        assert new_s == Position(8, 4)

    def test_uses_full_displacement(self):
        """The planned N steps count, not only the path inside the quadrant."""
        new_q, new_s = quadrant_crossing(Position(4, 4), Position(1, 4), Vector2D(1.0, 0.0), 8)
        assert new_q == Position(5, 4)
        assert new_s == Position(1, 4)

    def test_sector_zero_wraps_to_previous_quadrant(self):
        """A zero sector remainder becomes sector 8 one quadrant back."""
        new_q, new_s = quadrant_crossing(Position(2, 3), Position(4, 5), Vector2D(1.0, 0.0), 4)
        assert new_q == Position(2, 3)
        assert new_s == Position(8, 5)

    def test_clamped_at_galaxy_edge(self):
        """Leaving the galaxy keeps the ship in the edge quadrant."""
        new_q, new_s = quadrant_crossing(Position(1, 1), Position(1, 1), Vector2D(-1.0, 0.0), 8)
        assert new_q == Position(1, 1)
        assert new_s == Position(1, 1)

    def test_diagonal_crossing(self):
        """Moving up and right changes both quadrant coordinates."""
        new_q, new_s = quadrant_crossing(Position(3, 3), Position(7, 2), Vector2D(1.0, -1.0), 8)
        assert new_q == Position(4, 2)
        assert new_s == Position(7, 2)
