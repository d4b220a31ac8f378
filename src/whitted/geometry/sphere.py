"""Sphere primitive with robust ray-sphere intersection.

This module provides the Sphere dataclass, the geometric HitRecord shared by
all primitives, and the ray-sphere intersection function. The quadratic is
solved with the reformulation from Ray Tracing Gems to avoid catastrophic
cancellation when b^2 is nearly equal to 4ac.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.geometry.sphere import Sphere, HitRecord, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -3), radius=1.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Geometric record of a ray-primitive intersection.

    Attributes:
        hit: Number of reported intersections (1 if hit, 0 if miss).
        t: The parameter value along the ray where intersection occurred.
            Only valid if hit == 1.
        point: The 3D point where the ray intersected the primitive.
            Only valid if hit == 1.
        normal: The unit surface normal at the intersection point. For
            spheres it always points away from the center, for planes and
            triangles it is the primitive's own normal; it is never flipped
            toward the ray. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3


@ti.func
def make_miss_hit_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
    )


@ti.func
def _solve_quadratic_robust(h: ti.f32, a: ti.f32, c: ti.f32, sqrt_d: ti.f32):
    """Solve quadratic equation using robust formula from Ray Tracing Gems.

    Solves a*t^2 + 2*h*t + c = 0 using a numerically stable method.

    Args:
        h: Half of the linear coefficient.
        a: Quadratic coefficient.
        c: Constant term.
        sqrt_d: Square root of discriminant (h^2 - a*c).

    Returns:
        Tuple of (t0, t1) where t0 <= t1.
    """
    # q = -(h + sign(h) * sqrt(discriminant))
    sign_h = ti.select(h < 0.0, -1.0, 1.0)
    q = -(h + sign_h * sqrt_d)

    t0 = 0.0
    t1 = 0.0

    if ti.abs(q) < 1e-10:
        # Tangent ray through the origin of the parameterization
        t0 = (-h - sqrt_d) / a
        t1 = (-h + sqrt_d) / a
    else:
        t0 = q / a
        t1 = c / q

    if t0 > t1:
        temp = t0
        t0 = t1
        t1 = temp

    return t0, t1


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-sphere intersection.

    The intersection is found by solving:
        |ray_origin + t * ray_direction - center|^2 = radius^2

    which expands to a*t^2 + 2*h*t + c = 0 with
        a = dot(direction, direction)
        h = dot(direction, origin - center)
        c = dot(origin - center, origin - center) - radius^2

    The nearer root inside (t_min, t_max) is reported; if only the far root
    qualifies (ray starting inside the sphere) that one is reported instead.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        sphere: The sphere to test intersection against.
        t_min: Exclusive lower bound on t. Scene queries pass 0 so that only
            hits in front of the ray origin count.
        t_max: Exclusive upper bound on t.

    Returns:
        A HitRecord; check the hit field to determine if intersection occurred.
        A zero-length direction or non-positive radius is reported as a miss.
    """
    oc = ray_origin - sphere.center

    a = tm.dot(ray_direction, ray_direction)
    h = tm.dot(ray_direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius

    discriminant = h * h - a * c

    # Taichi requires outer-scope declaration
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)

    if a > 1e-12 and sphere.radius > 0.0 and discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t0, t1 = _solve_quadratic_robust(h, a, c, sqrt_d)

        t = t0
        valid = (t > t_min) and (t < t_max)

        if not valid:
            t = t1
            valid = (t > t_min) and (t < t_max)

        if valid:
            did_hit = 1
            hit_t = t
            hit_point = ray_origin + t * ray_direction

            # Outward normal: points from center to hit point
            hit_normal = (hit_point - sphere.center) / sphere.radius

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        point=hit_point,
        normal=hit_normal,
    )
