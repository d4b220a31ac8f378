"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive and the shared geometric HitRecord
    plane: Infinite plane primitive
    triangle: Triangle primitive (Möller–Trumbore)

Every primitive exposes the same intersection signature:
    rec = hit_<shape>(ray_origin, ray_direction, shape, t_min, t_max)

and reports the nearest hit with t inside (t_min, t_max). Primitives never
offset the ray origin; avoiding self-intersection is left to the caller.
"""

from .plane import Plane, hit_plane
from .sphere import HitRecord, Sphere, hit_sphere, make_miss_hit_record
from .triangle import Triangle, hit_triangle, triangle_normal

__all__ = [
    "HitRecord",
    "make_miss_hit_record",
    "Sphere",
    "hit_sphere",
    "Plane",
    "hit_plane",
    "Triangle",
    "hit_triangle",
    "triangle_normal",
]
