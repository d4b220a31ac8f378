"""Fixed pinhole camera for primary ray generation.

The camera sits at PINHOLE_POSITION (the origin) and looks down -z. The
virtual image plane is the square [-1, 1] x [-1, 1] at distance
IMAGE_PLANE_DISTANCE in front of the pinhole. Pixel (x, y) of a W x H image
maps to the plane point

    i = -1 + 2 * x / W
    j = -1 + 2 * y / H

so the ray direction is (i, j, -IMAGE_PLANE_DISTANCE). Directions are not
normalized; the scene queries accept any non-zero direction. Pixel y = 0 is
the bottom row. Non-square images stretch the square plane, so the caller
picks the aspect.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.camera.pinhole import get_primary_ray_direction
    >>> get_primary_ray_direction(0, 0, 4, 4)
    (-1.0, -1.0, -2.0)
"""

import taichi as ti
import taichi.math as tm

from whitted.config import IMAGE_PLANE_DISTANCE, PINHOLE_POSITION
from whitted.core.ray import Ray, make_ray

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.func
def get_camera_origin() -> vec3:
    """Get the pinhole position."""
    return vec3(PINHOLE_POSITION[0], PINHOLE_POSITION[1], PINHOLE_POSITION[2])


@ti.func
def get_primary_ray(pixel_x: ti.i32, pixel_y: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray through a pixel.

    Args:
        pixel_x: Pixel x-coordinate (0 = left).
        pixel_y: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray from the pinhole through the pixel's image plane point.
    """
    i = -1.0 + 2.0 * ti.cast(pixel_x, ti.f32) / ti.cast(width, ti.f32)
    j = -1.0 + 2.0 * ti.cast(pixel_y, ti.f32) / ti.cast(height, ti.f32)
    direction = vec3(i, j, -IMAGE_PLANE_DISTANCE)
    return make_ray(get_camera_origin(), direction)


def get_primary_ray_direction(x: int, y: int, width: int, height: int) -> tuple[float, float, float]:
    """Compute the direction of the primary ray through a pixel on the host.

    Mirrors get_primary_ray() for debugging and tests.

    Returns:
        The un-normalized direction (i, j, -IMAGE_PLANE_DISTANCE).
    """
    i = -1.0 + 2.0 * x / width
    j = -1.0 + 2.0 * y / height
    return (i, j, -IMAGE_PLANE_DISTANCE)
