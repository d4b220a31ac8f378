"""Triangle primitive with Möller–Trumbore ray-triangle intersection.

A triangle is given by its three vertices a, b, c. The surface normal is
normalize(cross(b - a, c - a)), so counter-clockwise vertices (seen from the
viewer) produce a normal facing the viewer.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.geometry.triangle import Triangle, hit_triangle
    >>> tri = Triangle(
    ...     a=ti.math.vec3(-1, -1, -3),
    ...     b=ti.math.vec3(1, -1, -3),
    ...     c=ti.math.vec3(0, 1, -3),
    ... )
    >>> # Use hit_triangle within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from .sphere import HitRecord

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Determinants smaller than this mean the ray is parallel to the triangle
_PARALLEL_EPSILON = 1e-8


@ti.dataclass
class Triangle:
    """A triangle defined by three vertices.

    Attributes:
        a: First vertex (vec3).
        b: Second vertex (vec3).
        c: Third vertex (vec3).
    """

    a: vec3
    b: vec3
    c: vec3


@ti.func
def triangle_normal(tri: Triangle) -> vec3:
    """Compute the unit normal of a triangle.

    Returns:
        normalize(cross(b - a, c - a)), or a zero vector for a degenerate
        (zero-area) triangle.
    """
    n = tm.cross(tri.b - tri.a, tri.c - tri.a)
    result = vec3(0.0, 0.0, 0.0)
    len_sq = tm.dot(n, n)
    if len_sq > 0.0:
        result = n / ti.sqrt(len_sq)
    return result


@ti.func
def hit_triangle(
    ray_origin: vec3,
    ray_direction: vec3,
    tri: Triangle,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-triangle intersection using the Möller–Trumbore algorithm.

    Solves ray_origin + t * ray_direction = a + u * (b - a) + v * (c - a)
    and accepts the hit when u >= 0, v >= 0, u + v <= 1 and t is inside
    (t_min, t_max).

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        tri: The triangle to test intersection against.
        t_min: Exclusive lower bound on t.
        t_max: Exclusive upper bound on t.

    Returns:
        A HitRecord; check the hit field to determine if intersection occurred.
        Degenerate triangles and rays parallel to the triangle are misses.
    """
    edge1 = tri.b - tri.a
    edge2 = tri.c - tri.a

    h = tm.cross(ray_direction, edge2)
    det = tm.dot(edge1, h)

    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)

    if ti.abs(det) > _PARALLEL_EPSILON:
        inv_det = 1.0 / det
        s = ray_origin - tri.a
        u = inv_det * tm.dot(s, h)

        if u >= 0.0 and u <= 1.0:
            q = tm.cross(s, edge1)
            v = inv_det * tm.dot(ray_direction, q)

            if v >= 0.0 and u + v <= 1.0:
                t = inv_det * tm.dot(edge2, q)

                if t > t_min and t < t_max:
                    did_hit = 1
                    hit_t = t
                    hit_point = ray_origin + t * ray_direction
                    hit_normal = triangle_normal(tri)

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        point=hit_point,
        normal=hit_normal,
    )
