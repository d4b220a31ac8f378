"""Ray data structure and vector utilities for the Whitted tracer.

This module provides the Ray dataclass and the vector helpers used by the
scene queries, shading and the tracer. All functions are Taichi functions so
they can be called from inside kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Primary rays are
            not normalized; reflection and shadow rays are.
    """

    origin: vec3
    direction: vec3


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction inside a Taichi kernel."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def distance(a: vec3, b: vec3) -> ti.f32:
    """Compute the Euclidean distance between two points."""
    return tm.length(a - b)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v. A zero-length input gives
        a zero vector rather than NaNs.
    """
    result = vec3(0.0, 0.0, 0.0)
    len_sq = tm.dot(v, v)
    if len_sq > 0.0:
        result = v / ti.sqrt(len_sq)
    return result


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector. The result does not depend on which
        side the normal points to.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal
