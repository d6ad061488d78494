"""Unit tests for orthonormal bases."""

import logging
import math

import pytest

from tiletracer.core.vector import Vector
from tiletracer.geometry.basis import OrthonormalBasis


def assert_orthonormal(basis):
    for axis in (basis.u, basis.v, basis.w):
        assert math.isclose(axis.length(), 1.0, abs_tol=1e-12)
    assert abs(basis.u.dot(basis.v)) < 1e-12
    assert abs(basis.v.dot(basis.w)) < 1e-12
    assert abs(basis.w.dot(basis.u)) < 1e-12


class TestFromVector:
    """Tests for bases built from a single direction."""

    @pytest.mark.parametrize(
        "direction",
        [
            Vector(0.0, 0.0, 1.0),
            Vector(1.0, 0.0, 0.0),
            Vector(0.0, -3.0, 0.0),
            Vector(1.0, 2.0, 3.0),
            Vector(-0.3, 0.1, -5.0),
        ],
    )
    def test_is_orthonormal(self, direction):
        """Test that any non-zero direction yields an orthonormal basis around it."""
        basis = OrthonormalBasis.from_vector(direction)
        assert_orthonormal(basis)
        assert math.isclose(basis.w.dot(direction.normalize()), 1.0)

    def test_is_right_handed(self):
        """Test that w x u == v."""
        basis = OrthonormalBasis.from_vector(Vector(1.0, 2.0, 3.0))
        v = basis.w.cross(basis.u)
        assert math.isclose(v.dot(basis.v), 1.0)

    def test_zero_vector_raises(self):
        """Test that a zero direction is rejected."""
        with pytest.raises(ValueError):
            OrthonormalBasis.from_vector(Vector(0.0, 0.0, 0.0))


class TestFromVectors:
    """Tests for bases built from a direction and an up hint."""

    def test_camera_frame(self):
        """Test the standard camera frame: looking down +z with +y up."""
        basis = OrthonormalBasis.from_vectors(Vector(0.0, 0.0, 1.0), Vector(0.0, 1.0, 0.0))
        assert basis.w == Vector(0.0, 0.0, 1.0)
        assert basis.u == Vector(1.0, 0.0, 0.0)
        assert basis.v == Vector(0.0, 1.0, 0.0)

    def test_up_hint_need_not_be_perpendicular(self):
        """Test that v lies in the plane of a and b even for a tilted hint."""
        a = Vector(0.0, 0.0, 2.0)
        b = Vector(0.0, 1.0, 1.0)
        basis = OrthonormalBasis.from_vectors(a, b)
        assert_orthonormal(basis)
        assert abs(basis.u.dot(a)) < 1e-12
        assert abs(basis.u.dot(b)) < 1e-12
        assert basis.v.y > 0.0

    def test_collinear_inputs_fall_back_and_warn(self, caplog):
        """Test that parallel a and b still give a valid basis and log a warning."""
        with caplog.at_level(logging.WARNING, logger="tiletracer.geometry.basis"):
            basis = OrthonormalBasis.from_vectors(Vector(0.0, 0.0, 1.0), Vector(0.0, 0.0, 3.0))
        assert_orthonormal(basis)
        assert basis.w == Vector(0.0, 0.0, 1.0)
        assert "collinear" in caplog.text

    def test_zero_up_raises(self):
        """Test that a zero-length up vector is rejected."""
        with pytest.raises(ValueError):
            OrthonormalBasis.from_vectors(Vector(0.0, 0.0, 1.0), Vector(0.0, 0.0, 0.0))


class TestToWorld:
    """Tests for basis-to-world conversion."""

    def test_combines_axes(self):
        """Test that to_world returns x*u + y*v + z*w."""
        basis = OrthonormalBasis(Vector(1.0, 0.0, 0.0), Vector(0.0, 1.0, 0.0), Vector(0.0, 0.0, 1.0))
        assert basis.to_world(2.0, -3.0, 4.0) == Vector(2.0, -3.0, 4.0)
