"""Device-side shape table and scene queries.

The active scene is copied into Taichi fields laid out as a structure of
arrays. Every slot holds a shape kind tag, the shape id, up to three vec3
parameters and the shape's Phong material:

    SPHERE:   p0 = center, radius = radius
    PLANE:    p0 = point,  p1 = unit normal
    TRIANGLE: p0 = a, p1 = b, p2 = c

Two queries are built on the table, both linear scans in scene order:

    find_nearest(ray, exclude_id)  -> Intersection of the closest shape
    is_occluded(ray, exclude_id)   -> id of the first occluder or NO_SHAPE

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.intersection import load_scene, query_nearest
    >>> from whitted.scene.presets import create_scene_one
    >>> load_scene(create_scene_one())
    >>> hit = query_nearest((0, 0, 0), (0, 0, -1))
    >>> hit.shape_id
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from whitted.config import (
    LIGHT_DISTANCE_MARGIN,
    MAX_SHAPES,
    NO_SHAPE,
    SELF_INTERSECTION_EPSILON,
)
from whitted.core.ray import Ray, distance, make_ray
from whitted.geometry.plane import Plane, hit_plane
from whitted.geometry.sphere import HitRecord, Sphere, hit_sphere, make_miss_hit_record
from whitted.geometry.triangle import Triangle, hit_triangle
from whitted.materials.phong import Material, PhongMaterial, make_black_material
from whitted.scene.scene import (
    PlaneShape,
    Scene,
    Shape,
    ShapeKind,
    SphereShape,
    TriangleShape,
)

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Primitives only report hits strictly in front of the ray origin
T_MIN = 0.0
T_MAX = 1e30

_SPHERE = int(ShapeKind.SPHERE)
_PLANE = int(ShapeKind.PLANE)
_TRIANGLE = int(ShapeKind.TRIANGLE)


@ti.dataclass
class Intersection:
    """Record of a ray hitting one shape of the scene.

    Attributes:
        count: Number of intersections reported (0 = miss).
        t: The ray parameter of the hit.
        point: The hit point.
        normal: The unit surface normal at the hit point.
        material: Copy of the hit shape's material.
        shape_id: Id of the hit shape, NO_SHAPE for a miss.

    The geometric fields of a miss record are zeros and carry no meaning.
    """

    count: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    material: Material
    shape_id: ti.i32


# =============================================================================
# Shape Table (Structure of Arrays)
# =============================================================================

shape_kinds = ti.field(dtype=ti.i32, shape=MAX_SHAPES)
shape_ids = ti.field(dtype=ti.i32, shape=MAX_SHAPES)
shape_p0 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SHAPES)
shape_p1 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SHAPES)
shape_p2 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SHAPES)
shape_radii = ti.field(dtype=ti.f32, shape=MAX_SHAPES)
num_shapes = ti.field(dtype=ti.i32, shape=())

# Per-shape material storage (materials are owned by their shape)
material_ambient = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SHAPES)
material_diffuse = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SHAPES)
material_specular = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SHAPES)
material_shininess = ti.field(dtype=ti.f32, shape=MAX_SHAPES)
material_reflection = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SHAPES)

# The single point light
light_position = ti.Vector.field(3, dtype=ti.f32, shape=())


def clear_scene() -> None:
    """Remove all shapes from the table.

    Resets the shape count to zero and moves the light to the origin. Field
    data is overwritten when new shapes are added.
    """
    num_shapes[None] = 0
    light_position[None] = [0.0, 0.0, 0.0]


def set_light_position(position: tuple[float, float, float]) -> None:
    """Set the position of the point light."""
    light_position[None] = [position[0], position[1], position[2]]


def get_light_position() -> tuple[float, float, float]:
    """Get the position of the point light."""
    p = light_position[None]
    return (float(p[0]), float(p[1]), float(p[2]))


def get_shape_count() -> int:
    """Get the number of shapes in the table."""
    return int(num_shapes[None])


def _store_material(idx: int, material: PhongMaterial) -> None:
    material_ambient[idx] = list(material.ambient)
    material_diffuse[idx] = list(material.diffuse)
    material_specular[idx] = list(material.specular)
    material_shininess[idx] = material.shininess
    material_reflection[idx] = list(material.reflection)


def add_shape(shape: Shape) -> int:
    """Append a shape to the table.

    Args:
        shape: The sphere, plane or triangle to add.

    Returns:
        The table index of the added shape.

    Raises:
        RuntimeError: If the maximum number of shapes is exceeded.
        TypeError: If the shape is not a known shape type.
    """
    idx = num_shapes[None]
    if idx >= MAX_SHAPES:
        raise RuntimeError(f"Maximum number of shapes ({MAX_SHAPES}) exceeded")

    zero = [0.0, 0.0, 0.0]
    if isinstance(shape, SphereShape):
        shape_p0[idx] = list(shape.center)
        shape_p1[idx] = zero
        shape_p2[idx] = zero
        shape_radii[idx] = shape.radius
    elif isinstance(shape, PlaneShape):
        shape_p0[idx] = list(shape.point)
        shape_p1[idx] = list(shape.normal)
        shape_p2[idx] = zero
        shape_radii[idx] = 0.0
    elif isinstance(shape, TriangleShape):
        shape_p0[idx] = list(shape.a)
        shape_p1[idx] = list(shape.b)
        shape_p2[idx] = list(shape.c)
        shape_radii[idx] = 0.0
    else:
        raise TypeError(f"Unsupported shape type: {type(shape).__name__}")

    shape_kinds[idx] = int(shape.kind)
    shape_ids[idx] = shape.shape_id
    _store_material(idx, shape.material)
    num_shapes[None] = idx + 1
    return idx


def load_scene(scene: Scene) -> None:
    """Replace the table contents with a scene.

    Args:
        scene: The scene to upload. It is validated first, so an invalid
            scene leaves the current table untouched.

    Raises:
        ValueError: If the scene violates its id invariants.
        RuntimeError: If the scene has more than MAX_SHAPES shapes.
    """
    scene.validate()
    if len(scene.shapes) > MAX_SHAPES:
        raise RuntimeError(
            f"Scene has {len(scene.shapes)} shapes, maximum is {MAX_SHAPES}"
        )

    clear_scene()
    for shape in scene.shapes:
        add_shape(shape)
    set_light_position(scene.light_position)


# =============================================================================
# Device-side Queries
# =============================================================================


@ti.func
def get_material(idx: ti.i32) -> Material:
    """Read the material of the shape stored at a table index."""
    return Material(
        ambient=material_ambient[idx],
        diffuse=material_diffuse[idx],
        specular=material_specular[idx],
        shininess=material_shininess[idx],
        reflection=material_reflection[idx],
    )


@ti.func
def make_miss_intersection() -> Intersection:
    """Create the zero-count "no intersection" record."""
    return Intersection(
        count=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material=make_black_material(),
        shape_id=NO_SHAPE,
    )


@ti.func
def _intersect_geometry(idx: ti.i32, ray: Ray) -> HitRecord:
    """Dispatch the ray to the primitive solver for the shape's kind."""
    kind = shape_kinds[idx]
    rec = make_miss_hit_record()

    if kind == _SPHERE:
        sphere = Sphere(center=shape_p0[idx], radius=shape_radii[idx])
        rec = hit_sphere(ray.origin, ray.direction, sphere, T_MIN, T_MAX)
    elif kind == _PLANE:
        plane = Plane(point=shape_p0[idx], normal=shape_p1[idx])
        rec = hit_plane(ray.origin, ray.direction, plane, T_MIN, T_MAX)
    elif kind == _TRIANGLE:
        tri = Triangle(a=shape_p0[idx], b=shape_p1[idx], c=shape_p2[idx])
        rec = hit_triangle(ray.origin, ray.direction, tri, T_MIN, T_MAX)

    return rec


@ti.func
def intersect_shape(idx: ti.i32, ray: Ray) -> Intersection:
    """Intersect a ray with the shape stored at a table index.

    Args:
        idx: Table index of the shape.
        ray: The ray to test.

    Returns:
        An Intersection carrying the shape's material and id, or the miss
        record if the shape is not hit in front of the ray origin.
    """
    rec = _intersect_geometry(idx, ray)
    result = make_miss_intersection()
    if rec.hit == 1:
        result = Intersection(
            count=1,
            t=rec.t,
            point=rec.point,
            normal=rec.normal,
            material=get_material(idx),
            shape_id=shape_ids[idx],
        )
    return result


@ti.func
def find_nearest(ray: Ray, exclude_id: ti.i32) -> Intersection:
    """Find the closest shape hit by a ray.

    Shapes whose id equals exclude_id are skipped. Among the remaining hits
    the one with the smallest distance from the ray origin wins; on equal
    distances the shape stored first wins.

    Args:
        ray: The ray to trace.
        exclude_id: Id of a shape to ignore (NO_SHAPE to test all shapes).

    Returns:
        The nearest Intersection, or the miss record.
    """
    closest = make_miss_intersection()
    closest_distance = T_MAX

    for i in range(num_shapes[None]):
        if shape_ids[i] != exclude_id:
            candidate = intersect_shape(i, ray)
            if candidate.count != 0:
                d = distance(candidate.point, ray.origin)
                if d < closest_distance:
                    closest_distance = d
                    closest = candidate

    return closest


@ti.func
def is_occluded(shadow_ray: Ray, exclude_id: ti.i32) -> ti.i32:
    """Find a shape blocking the light from the shadow ray's origin.

    A shape counts as an occluder when its id differs from exclude_id, it is
    hit by the shadow ray, the hit is farther than SELF_INTERSECTION_EPSILON
    from the ray origin, and the hit is closer than the light minus
    LIGHT_DISTANCE_MARGIN. The scan stops at the first occluder.

    Args:
        shadow_ray: Ray from a surface point toward the light.
        exclude_id: Id of the surface the ray starts on.

    Returns:
        The id of the first occluder in scene order, or NO_SHAPE if the
        light is visible.
    """
    occluder = NO_SHAPE
    light_distance = distance(shadow_ray.origin, light_position[None])

    for i in range(num_shapes[None]):
        if occluder == NO_SHAPE and shape_ids[i] != exclude_id:
            candidate = intersect_shape(i, shadow_ray)
            if candidate.count != 0:
                d = distance(candidate.point, shadow_ray.origin)
                if d > SELF_INTERSECTION_EPSILON and d < light_distance - LIGHT_DISTANCE_MARGIN:
                    occluder = shape_ids[i]

    return occluder


# =============================================================================
# Host-side Query Helpers (debugging and tests)
# =============================================================================


@dataclass
class NearestHit:
    """Host copy of a find_nearest() result.

    Attributes:
        count: Number of intersections (0 = miss).
        t: The ray parameter of the hit.
        point: The hit point.
        normal: The unit surface normal.
        shape_id: Id of the hit shape (NO_SHAPE for a miss).
    """

    count: int
    t: float
    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    shape_id: int

    @property
    def hit(self) -> bool:
        """Whether anything was hit."""
        return self.count != 0


_query_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_direction = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_count = ti.field(dtype=ti.i32, shape=())
_query_t = ti.field(dtype=ti.f32, shape=())
_query_point = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_normal = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_shape_id = ti.field(dtype=ti.i32, shape=())


@ti.kernel
def _nearest_kernel(exclude_id: ti.i32):
    # Single-iteration outer loop keeps the shape scan serial
    for _ in range(1):
        ray = make_ray(_query_origin[None], _query_direction[None])
        rec = find_nearest(ray, exclude_id)
        _query_count[None] = rec.count
        _query_t[None] = rec.t
        _query_point[None] = rec.point
        _query_normal[None] = rec.normal
        _query_shape_id[None] = rec.shape_id


@ti.kernel
def _occluder_kernel(exclude_id: ti.i32):
    for _ in range(1):
        ray = make_ray(_query_origin[None], _query_direction[None])
        _query_shape_id[None] = is_occluded(ray, exclude_id)


def _set_query_ray(
    origin: tuple[float, float, float], direction: tuple[float, float, float]
) -> None:
    _query_origin[None] = [float(origin[0]), float(origin[1]), float(origin[2])]
    _query_direction[None] = [float(direction[0]), float(direction[1]), float(direction[2])]


def _to_tuple(v) -> tuple[float, float, float]:
    return (float(v[0]), float(v[1]), float(v[2]))


def query_nearest(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    exclude_id: int = NO_SHAPE,
) -> NearestHit:
    """Run find_nearest() for one ray against the loaded scene.

    Args:
        origin: Ray origin.
        direction: Ray direction (need not be normalized).
        exclude_id: Id of a shape to ignore.

    Returns:
        A NearestHit describing the closest hit.
    """
    _set_query_ray(origin, direction)
    _nearest_kernel(exclude_id)
    return NearestHit(
        count=int(_query_count[None]),
        t=float(_query_t[None]),
        point=_to_tuple(_query_point[None]),
        normal=_to_tuple(_query_normal[None]),
        shape_id=int(_query_shape_id[None]),
    )


def query_occluder(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    exclude_id: int = NO_SHAPE,
) -> int:
    """Run is_occluded() for one shadow ray against the loaded scene.

    Returns:
        The id of the first occluder, or NO_SHAPE if the light is visible.
    """
    _set_query_ray(origin, direction)
    _occluder_kernel(exclude_id)
    return int(_query_shape_id[None])
