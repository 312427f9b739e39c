"""Unit tests for RGB colors.

Tests cover:
- Channel access and approximate equality
- Adding, subtracting and scaling colors
- Blending colors with the channel-wise product
"""

import dataclasses

import pytest


class TestColorBasics:
    """Tests for construction and equality."""

    def test_channels(self):
        """Test red, green and blue are stored as given."""
        from raykernel.core.color import Color

        c = Color(-0.5, 0.4, 1.7)
        assert c.red == -0.5
        assert c.green == 0.4
        assert c.blue == 1.7
        assert c.to_tuple() == (-0.5, 0.4, 1.7)

    def test_equality_is_approximate(self):
        """Test channels closer than EPSILON compare equal."""
        from raykernel.core.color import Color

        assert Color(0.9, 0.2, 0.04) == Color(0.90004, 0.19996, 0.04)
        assert Color(0.9, 0.2, 0.04) != Color(0.901, 0.2, 0.04)

    def test_not_equal_to_plain_tuple(self):
        """Test a Color never equals a bare tuple."""
        from raykernel.core.color import Color

        assert Color(1.0, 0.0, 0.0) != (1.0, 0.0, 0.0)

    def test_immutable_and_unhashable(self):
        """Test colors are frozen and cannot be hashed."""
        from raykernel.core.color import Color

        c = Color(1.0, 0.0, 0.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            c.red = 0.5
        with pytest.raises(TypeError):
            hash(c)

    def test_constants(self):
        """Test the named colors."""
        from raykernel.core.color import BLACK, RED, WHITE, Color

        assert BLACK == Color(0.0, 0.0, 0.0)
        assert WHITE == Color(1.0, 1.0, 1.0)
        assert RED == Color(1.0, 0.0, 0.0)


class TestColorArithmetic:
    """Tests for color operations."""

    def test_add(self):
        """Test channel-wise addition."""
        from raykernel.core.color import Color

        c1 = Color(0.9, 0.6, 0.75)
        c2 = Color(0.7, 0.1, 0.25)
        assert c1.add(c2) == Color(1.6, 0.7, 1.0)
        assert c1 + c2 == Color(1.6, 0.7, 1.0)

    def test_subtract(self):
        """Test channel-wise subtraction."""
        from raykernel.core.color import Color

        c1 = Color(0.9, 0.6, 0.75)
        c2 = Color(0.7, 0.1, 0.25)
        assert c1.subtract(c2) == Color(0.2, 0.5, 0.5)
        assert c1 - c2 == Color(0.2, 0.5, 0.5)

    def test_multiply_by_scalar(self):
        """Test scaling every channel."""
        from raykernel.core.color import Color

        c = Color(0.2, 0.3, 0.4)
        assert c.multiply(2.0) == Color(0.4, 0.6, 0.8)
        assert c * 2.0 == Color(0.4, 0.6, 0.8)
        assert 2.0 * c == Color(0.4, 0.6, 0.8)

    def test_multiply_color(self):
        """Test the channel-wise product of two colors."""
        from raykernel.core.color import Color

        a = Color(1.0, 0.2, 0.4)
        b = Color(0.9, 1.0, 0.1)
        assert a.multiply_color(b) == Color(0.9, 0.2, 0.04)
        assert a * b == Color(0.9, 0.2, 0.04)

    def test_multiply_by_white_is_identity(self):
        """Test blending with white leaves a color unchanged."""
        from raykernel.core.color import WHITE, Color

        c = Color(0.3, 0.6, 0.9)
        assert c.multiply_color(WHITE) == c
