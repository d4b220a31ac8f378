"""Whitted-style recursive tracer.

For a ray, the tracer finds the nearest hit, shades it with the Phong model,
tests a shadow ray toward the point light and follows the mirror reflection
while the depth budget lasts:

    trace(ray, budget, exclude) =
        background                                if nothing is hit
        L                                         if budget <= 0
        L + R * trace(reflected, budget - 1, id)  otherwise

where L is the full Phong color (ambient only when the light is occluded) and
R is the per-channel reflective strength of the hit material. The reflected
ray starts exactly on the surface; excluding the surface it left stands in
for an origin offset.

Taichi functions cannot recurse, so the chain runs as a loop carrying the
product of reflective strengths seen so far. This evaluates the same sum,
L0 + R0 * (L1 + R1 * (L2 + ...)), term by term.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.tracer import trace_single_ray
    >>> from whitted.scene.intersection import load_scene
    >>> from whitted.scene.presets import create_scene_one
    >>> load_scene(create_scene_one())
    >>> color, bounces = trace_single_ray((0, 0, 0), (0, 0, -2))
"""

import taichi as ti
import taichi.math as tm

from whitted.config import (
    BACKGROUND_COLOR,
    DEFAULT_DEPTH_BUDGET,
    NO_SHAPE,
    validate_depth_budget,
)
from whitted.core.ray import Ray, make_ray, normalize, reflect
from whitted.materials.phong import shade_phong
from whitted.scene.intersection import find_nearest, is_occluded, light_position

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def trace_ray(ray: Ray, depth_budget: ti.i32, exclude_id: ti.i32):
    """Trace a ray through the scene and return its color.

    Args:
        ray: The ray to trace.
        depth_budget: Number of reflection rays that may still be cast.
        exclude_id: Id of the shape the ray starts on (NO_SHAPE for
            primary rays).

    Returns:
        A tuple of (color, bounces) where color is the RGB value seen along
        the ray and bounces is the number of reflection rays cast.
    """
    color = vec3(0.0, 0.0, 0.0)
    weight = vec3(1.0, 1.0, 1.0)
    bounces = 0

    current = ray
    current_exclude = exclude_id
    remaining = depth_budget

    # Active flag replaces break (Taichi doesn't support break in ti.func loops)
    active = 1

    for _ in range(depth_budget + 1):
        if active == 1:
            hit = find_nearest(current, current_exclude)

            if hit.count == 0:
                background = vec3(BACKGROUND_COLOR[0], BACKGROUND_COLOR[1], BACKGROUND_COLOR[2])
                color += weight * background
                active = 0
            else:
                light = light_position[None]
                ambient, diffuse, specular, combined = shade_phong(
                    current, light, hit.point, hit.normal, hit.material
                )

                shadow = make_ray(hit.point, normalize(light - hit.point))
                lighting = combined
                if is_occluded(shadow, hit.shape_id) != NO_SHAPE:
                    lighting = ambient

                color += weight * lighting

                if remaining <= 0:
                    active = 0
                else:
                    weight *= hit.material.reflection
                    direction = reflect(normalize(current.direction), hit.normal)
                    current = make_ray(hit.point, direction)
                    current_exclude = hit.shape_id
                    remaining -= 1
                    bounces += 1

    return color, bounces


# =============================================================================
# Host-side Helper (debugging and tests)
# =============================================================================

_query_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_direction = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_color = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_bounces = ti.field(dtype=ti.i32, shape=())


@ti.kernel
def _trace_query_kernel(depth_budget: ti.i32, exclude_id: ti.i32):
    # Single-iteration outer loop keeps the trace serial
    for _ in range(1):
        ray = make_ray(_query_origin[None], _query_direction[None])
        color, bounces = trace_ray(ray, depth_budget, exclude_id)
        _query_color[None] = color
        _query_bounces[None] = bounces


def trace_single_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth_budget: int = DEFAULT_DEPTH_BUDGET,
    exclude_id: int = NO_SHAPE,
) -> tuple[tuple[float, float, float], int]:
    """Trace one ray against the loaded scene from Python.

    Args:
        origin: Ray origin.
        direction: Ray direction (need not be normalized).
        depth_budget: Number of reflection rays that may be cast.
        exclude_id: Id of a shape to ignore for the first hit.

    Returns:
        A tuple of ((R, G, B), bounces).

    Raises:
        ValueError: If depth_budget is negative.
    """
    validate_depth_budget(depth_budget)

    _query_origin[None] = [float(origin[0]), float(origin[1]), float(origin[2])]
    _query_direction[None] = [float(direction[0]), float(direction[1]), float(direction[2])]
    _trace_query_kernel(depth_budget, exclude_id)

    c = _query_color[None]
    return (float(c[0]), float(c[1]), float(c[2])), int(_query_bounces[None])
