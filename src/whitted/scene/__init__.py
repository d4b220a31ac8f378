"""Scene module for scene description and ray-scene queries.

Components:
    scene: Host-side Scene, shape dataclasses and SceneBuilder
    intersection: Device-side shape table, find_nearest and is_occluded
    presets: The two preset scenes selectable by number

Scene data flows one way: a Scene is built on the host, validated, and
copied into Taichi fields (structure-of-arrays) by load_scene(). The tracer
only ever reads the device table.
"""

from .intersection import (
    Intersection,
    NearestHit,
    add_shape,
    clear_scene,
    find_nearest,
    get_light_position,
    get_shape_count,
    intersect_shape,
    is_occluded,
    load_scene,
    query_nearest,
    query_occluder,
    set_light_position,
)
from .presets import PRESET_NUMBERS, build_preset, create_scene_one, create_scene_two
from .scene import PlaneShape, Scene, SceneBuilder, Shape, ShapeKind, SphereShape, TriangleShape

__all__ = [
    # Host-side description
    "Scene",
    "SceneBuilder",
    "Shape",
    "ShapeKind",
    "SphereShape",
    "PlaneShape",
    "TriangleShape",
    # Device shape table
    "Intersection",
    "NearestHit",
    "add_shape",
    "clear_scene",
    "load_scene",
    "set_light_position",
    "get_light_position",
    "get_shape_count",
    "intersect_shape",
    "find_nearest",
    "is_occluded",
    "query_nearest",
    "query_occluder",
    # Presets
    "PRESET_NUMBERS",
    "build_preset",
    "create_scene_one",
    "create_scene_two",
]
