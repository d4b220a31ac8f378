"""Core tracing module.

Components:
    ray: Ray data structure and vector utilities
    image_buffer: Per-pixel RGB storage written by the render kernel
    tracer: Whitted reflection chain (nearest hit, Phong, shadow, reflection)
    renderer: Primary ray driver and the RenderSession that owns scene + image

Primary rays are traced in a Taichi parallel loop, one pixel per iteration.
The tracer itself is serial per ray and bounded by an explicit depth budget.
"""

from .ray import Ray, distance, make_ray, normalize, reflect, vec3

# Note: tracer and renderer are NOT imported here to avoid circular imports.
# Import directly from whitted.core.tracer or whitted.core.renderer when needed.

__all__ = [
    "Ray",
    "make_ray",
    "vec3",
    "distance",
    "normalize",
    "reflect",
]
