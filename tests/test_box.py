"""Tests for PeriodicBox class."""

from dataclasses import FrozenInstanceError

import numpy as np
import pytest

from argonmd.parallel import SerialBackend, ThreadPoolBackend
from argonmd.system.box import PeriodicBox


class TestBoxCreation:
    """Test box creation."""

    def test_cubic_box(self):
        """Test creating a box."""
        box = PeriodicBox(10.0)
        assert box.length == 10.0
        assert np.isclose(box.volume, 1000.0)

    def test_invalid_length(self):
        """Test that non-positive lengths raise errors."""
        with pytest.raises(ValueError):
            PeriodicBox(0.0)
        with pytest.raises(ValueError):
            PeriodicBox(-1.0)

    def test_frozen(self):
        """Test that the box is immutable."""
        box = PeriodicBox(5.0)
        with pytest.raises(FrozenInstanceError):
            box.length = 6.0


class TestImageShifts:
    """Test periodic replica translations."""

    def test_count(self):
        """Test number of replicas."""
        box = PeriodicBox(2.0)
        assert box.image_shifts(3).shape == (343, 3)
        assert box.image_shifts(0).shape == (1, 3)

    def test_zero_shift_in_middle(self):
        """Test that the primary cell sits at the middle index."""
        shifts = PeriodicBox(2.0).image_shifts(1)
        assert np.allclose(shifts[len(shifts) // 2], 0.0)

    def test_extent(self):
        """Test that shifts span +-n_images box lengths."""
        shifts = PeriodicBox(2.0).image_shifts(3)
        assert shifts.min() == pytest.approx(-6.0)
        assert shifts.max() == pytest.approx(6.0)

    def test_negative_images(self):
        """Test that negative replica counts are rejected."""
        with pytest.raises(ValueError):
            PeriodicBox(2.0).image_shifts(-1)


class TestWrap:
    """Test re-imaging into the primary cell."""

    def test_wrap_above(self):
        """Test that coordinates above L are shifted down."""
        box = PeriodicBox(10.0)
        positions = np.array([[10.5, 5.0, 5.0]])
        previous = np.array([[10.4, 5.0, 5.0]])

        box.wrap(positions, previous)

        assert np.allclose(positions, [[0.5, 5.0, 5.0]])
        assert np.allclose(previous, [[0.4, 5.0, 5.0]])

    def test_wrap_below(self):
        """Test that negative coordinates are shifted up."""
        box = PeriodicBox(10.0)
        positions = np.array([[5.0, -0.5, 5.0]])
        previous = np.array([[5.0, -0.4, 5.0]])

        box.wrap(positions, previous)

        assert np.allclose(positions, [[5.0, 9.5, 5.0]])
        assert np.allclose(previous, [[5.0, 9.6, 5.0]])

    def test_displacement_preserved(self):
        """Test that positions - previous is unchanged by wrapping."""
        rng = np.random.default_rng(0)
        box = PeriodicBox(4.0)
        positions = rng.uniform(-3.0, 7.0, (50, 3))
        previous = positions - rng.uniform(-0.01, 0.01, (50, 3))
        displacement = positions - previous

        box.wrap(positions, previous)

        assert np.allclose(positions - previous, displacement)

    def test_inside_untouched(self):
        """Test that atoms already inside do not move."""
        box = PeriodicBox(10.0)
        positions = np.array([[0.0, 10.0, 3.0]])
        previous = positions.copy()

        box.wrap(positions, previous)

        assert np.allclose(positions, [[0.0, 10.0, 3.0]])

    def test_idempotent(self):
        """Test that wrapping twice equals wrapping once."""
        rng = np.random.default_rng(1)
        box = PeriodicBox(5.0)
        positions = rng.uniform(-4.0, 9.0, (40, 3))
        previous = positions.copy()

        box.wrap(positions, previous)
        once = positions.copy()
        box.wrap(positions, previous)

        np.testing.assert_array_equal(positions, once)
        assert box.contains(positions)

    def test_backends_agree(self):
        """Test that chunked wrapping matches serial wrapping."""
        rng = np.random.default_rng(2)
        box = PeriodicBox(5.0)
        positions = rng.uniform(-4.0, 9.0, (101, 3))
        serial_pos, serial_prev = positions.copy(), positions.copy()
        thread_pos, thread_prev = positions.copy(), positions.copy()

        box.wrap(serial_pos, serial_prev, SerialBackend())
        with ThreadPoolBackend(n_workers=4) as backend:
            box.wrap(thread_pos, thread_prev, backend)

        np.testing.assert_array_equal(serial_pos, thread_pos)
        np.testing.assert_array_equal(serial_prev, thread_prev)
