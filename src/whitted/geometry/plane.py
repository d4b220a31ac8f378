"""Infinite plane primitive with ray-plane intersection.

A plane is defined by a point on the plane and a unit normal. The normal
fixes which side is lit: diffuse and specular terms use the stored normal as
is, so a floor should be given an upward normal.

Ray-plane intersection solves:
    dot(normal, ray_origin + t * ray_direction - point) = 0
    t = dot(normal, point - ray_origin) / dot(normal, ray_direction)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.geometry.plane import Plane, hit_plane
    >>> floor = Plane(point=ti.math.vec3(0, -1, 0), normal=ti.math.vec3(0, 1, 0))
    >>> # Use hit_plane within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from .sphere import HitRecord

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Plane:
    """An infinite plane.

    Attributes:
        point: Any point on the plane (vec3).
        normal: Unit normal of the plane (vec3).
    """

    point: vec3
    normal: vec3


@ti.func
def hit_plane(
    ray_origin: vec3,
    ray_direction: vec3,
    plane: Plane,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-plane intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        plane: The plane to test intersection against.
        t_min: Exclusive lower bound on t.
        t_max: Exclusive upper bound on t.

    Returns:
        A HitRecord; check the hit field to determine if intersection occurred.
        Rays parallel to the plane (including zero-length directions and
        planes with a zero normal) are reported as misses.
    """
    denom = tm.dot(plane.normal, ray_direction)

    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)

    if ti.abs(denom) > 1e-8:
        t = tm.dot(plane.normal, plane.point - ray_origin) / denom

        if t > t_min and t < t_max:
            did_hit = 1
            hit_t = t
            hit_point = ray_origin + t * ray_direction
            hit_normal = plane.normal

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        point=hit_point,
        normal=hit_normal,
    )
