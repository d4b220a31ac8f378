"""Unit tests for the ray module.

Tests cover:
- Ray dataclass and make_ray
- Vector utility functions (distance, normalize, reflect)
"""

import pytest
import taichi as ti


class TestRayBasics:
    """Tests for Ray dataclass and basic operations."""

    def test_make_ray_keeps_direction(self):
        """Test make_ray stores origin and direction without normalizing."""
        from whitted.core.ray import make_ray, vec3

        origin = ti.field(dtype=ti.math.vec3, shape=())
        direction = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(1.0, 2.0, 3.0), vec3(0.5, 0.0, -2.0))
            origin[None] = ray.origin
            direction[None] = ray.direction

        test_kernel()
        o = origin[None]
        d = direction[None]
        assert (o[0], o[1], o[2]) == pytest.approx((1.0, 2.0, 3.0))
        assert (d[0], d[1], d[2]) == pytest.approx((0.5, 0.0, -2.0))


class TestVectorUtilities:
    """Tests for the vector helpers."""

    def test_distance(self):
        """Test distance between two points of a 3-4-5 triangle."""
        from whitted.core.ray import distance, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = distance(vec3(1.0, 1.0, 1.0), vec3(4.0, 5.0, 1.0))

        test_kernel()
        assert result[None] == pytest.approx(5.0)

    def test_normalize(self):
        """Test normalize produces a unit vector."""
        from whitted.core.ray import normalize, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = normalize(vec3(0.0, 3.0, 4.0))

        test_kernel()
        r = result[None]
        assert r[0] == pytest.approx(0.0)
        assert r[1] == pytest.approx(0.6)
        assert r[2] == pytest.approx(0.8)

    def test_normalize_zero_vector(self):
        """Test normalize of a zero vector gives zeros instead of NaN."""
        from whitted.core.ray import normalize, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = normalize(vec3(0.0, 0.0, 0.0))

        test_kernel()
        r = result[None]
        assert (r[0], r[1], r[2]) == (0.0, 0.0, 0.0)

    def test_reflect(self):
        """Test reflect mirrors the normal component only."""
        from whitted.core.ray import reflect, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())
        flipped = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            incident = vec3(1.0, -1.0, 0.0)
            result[None] = reflect(incident, vec3(0.0, 1.0, 0.0))
            flipped[None] = reflect(incident, vec3(0.0, -1.0, 0.0))

        test_kernel()
        r = result[None]
        assert r[0] == pytest.approx(1.0)
        assert r[1] == pytest.approx(1.0)
        assert r[2] == pytest.approx(0.0)
        # Reflection does not depend on which way the normal faces
        f = flipped[None]
        assert f[0] == pytest.approx(1.0)
        assert f[1] == pytest.approx(1.0)
