"""Camera module for primary ray generation.

Components:
    pinhole: Fixed pinhole camera at the origin looking down -z

Pixel coordinates run left to right (x) and bottom to top (y). Every pixel
gets exactly one ray through its lower-left image plane point; there is no
jitter and no supersampling.
"""

from .pinhole import get_camera_origin, get_primary_ray, get_primary_ray_direction

__all__ = [
    "get_camera_origin",
    "get_primary_ray",
    "get_primary_ray_direction",
]
