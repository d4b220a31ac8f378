"""Host-side scene description.

A Scene is plain data: an ordered list of shapes (each with its own Phong
material and a unique integer id) and the position of the single point light.
Scenes are built once and never mutated while being traced; switching to a
different scene means building a new Scene value and handing it to the render
session.

The SceneBuilder assigns ids in insertion order starting at 0. The id -1 is
reserved for "no shape" and is rejected by validate().

Example:
    >>> from whitted.materials.phong import PhongMaterial
    >>> from whitted.scene.scene import SceneBuilder
    >>> builder = SceneBuilder(light_position=(0.0, 4.0, 0.0))
    >>> red = PhongMaterial(ambient=(0.1, 0, 0), diffuse=(0.7, 0, 0))
    >>> sphere_id = builder.add_sphere((0.0, 0.0, -3.0), 1.0, red)
    >>> scene = builder.build()
    >>> len(scene)
    1
"""

import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Union

from whitted.config import NO_SHAPE
from whitted.materials.phong import PhongMaterial

Vec3 = tuple[float, float, float]


class ShapeKind(IntEnum):
    """Tag stored in the device shape table to dispatch intersection."""

    SPHERE = 0
    PLANE = 1
    TRIANGLE = 2


def _as_vec3(value: Any, name: str) -> Vec3:
    """Convert a 3-sequence to a tuple of floats."""
    if len(value) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(value)}")
    return (float(value[0]), float(value[1]), float(value[2]))


def _length(v: Vec3) -> float:
    return math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


@dataclass(frozen=True)
class SphereShape:
    """A sphere in a scene.

    Attributes:
        shape_id: Unique id of the shape within its scene.
        center: Center of the sphere as (x, y, z).
        radius: Radius of the sphere (positive).
        material: Phong material of the sphere.
    """

    shape_id: int
    center: Vec3
    radius: float
    material: PhongMaterial

    kind = ShapeKind.SPHERE

    def __post_init__(self) -> None:
        if self.radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")


@dataclass(frozen=True)
class PlaneShape:
    """An infinite plane in a scene.

    Attributes:
        shape_id: Unique id of the shape within its scene.
        point: Any point on the plane as (x, y, z).
        normal: Unit normal of the plane; normalized on construction.
        material: Phong material of the plane.
    """

    shape_id: int
    point: Vec3
    normal: Vec3
    material: PhongMaterial

    kind = ShapeKind.PLANE

    def __post_init__(self) -> None:
        n = _length(self.normal)
        if n < 1e-12:
            raise ValueError("Plane normal must be non-zero")
        # Frozen dataclass: store the normalized normal through object.__setattr__
        object.__setattr__(
            self,
            "normal",
            (self.normal[0] / n, self.normal[1] / n, self.normal[2] / n),
        )


@dataclass(frozen=True)
class TriangleShape:
    """A triangle in a scene.

    Attributes:
        shape_id: Unique id of the shape within its scene.
        a: First vertex.
        b: Second vertex.
        c: Third vertex. The normal is normalize(cross(b - a, c - a)).
        material: Phong material of the triangle.
    """

    shape_id: int
    a: Vec3
    b: Vec3
    c: Vec3
    material: PhongMaterial

    kind = ShapeKind.TRIANGLE

    def __post_init__(self) -> None:
        e1 = (self.b[0] - self.a[0], self.b[1] - self.a[1], self.b[2] - self.a[2])
        e2 = (self.c[0] - self.a[0], self.c[1] - self.a[1], self.c[2] - self.a[2])
        n = (
            e1[1] * e2[2] - e1[2] * e2[1],
            e1[2] * e2[0] - e1[0] * e2[2],
            e1[0] * e2[1] - e1[1] * e2[0],
        )
        if _length(n) < 1e-12:
            raise ValueError("Triangle vertices must not be collinear")


Shape = Union[SphereShape, PlaneShape, TriangleShape]


@dataclass
class Scene:
    """An ordered collection of shapes lit by a single point light.

    The camera is implicit: a pinhole at the origin looking down -z.

    Attributes:
        shapes: Shapes in query order. Nearest-hit ties and occlusion tests
            resolve in this order.
        light_position: Position of the point light as (x, y, z).
        name: Optional human-readable name.
    """

    shapes: list[Shape] = field(default_factory=list)
    light_position: Vec3 = (0.0, 0.0, 0.0)
    name: str = ""

    def __len__(self) -> int:
        return len(self.shapes)

    def validate(self) -> None:
        """Check the scene invariants.

        Raises:
            ValueError: If a shape uses the reserved id, or two shapes share
                an id.
        """
        seen: set[int] = set()
        for shape in self.shapes:
            if shape.shape_id == NO_SHAPE:
                raise ValueError(f"Shape id {NO_SHAPE} is reserved for 'no shape'")
            if shape.shape_id in seen:
                raise ValueError(f"Duplicate shape id: {shape.shape_id}")
            seen.add(shape.shape_id)

    def get_shape(self, shape_id: int) -> Shape | None:
        """Look up a shape by id.

        Returns:
            The shape, or None if no shape has that id.
        """
        for shape in self.shapes:
            if shape.shape_id == shape_id:
                return shape
        return None

    def count(self, kind: ShapeKind) -> int:
        """Count the shapes of a given kind."""
        return sum(1 for shape in self.shapes if shape.kind == kind)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        shapes: list[dict[str, Any]] = []
        for shape in self.shapes:
            entry: dict[str, Any] = {
                "type": shape.kind.name.lower(),
                "id": shape.shape_id,
                "material": shape.material.to_dict(),
            }
            if isinstance(shape, SphereShape):
                entry["center"] = list(shape.center)
                entry["radius"] = shape.radius
            elif isinstance(shape, PlaneShape):
                entry["point"] = list(shape.point)
                entry["normal"] = list(shape.normal)
            else:
                entry["vertices"] = [list(shape.a), list(shape.b), list(shape.c)]
            shapes.append(entry)

        return {
            "name": self.name,
            "light_position": list(self.light_position),
            "shapes": shapes,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Scene":
        """Load a scene from a dictionary produced by to_dict().

        Raises:
            ValueError: If a shape has an unknown type or invalid parameters.
        """
        shapes: list[Shape] = []
        for entry in data.get("shapes", []):
            shape_type = entry.get("type", "").lower()
            if "id" not in entry:
                raise ValueError(f"Shape entry missing 'id': {entry}")
            shape_id = int(entry["id"])
            material = PhongMaterial.from_dict(entry.get("material", {}))
            if shape_type == "sphere":
                shapes.append(
                    SphereShape(
                        shape_id=shape_id,
                        center=_as_vec3(entry.get("center", [0, 0, 0]), "center"),
                        radius=float(entry.get("radius", 1.0)),
                        material=material,
                    )
                )
            elif shape_type == "plane":
                shapes.append(
                    PlaneShape(
                        shape_id=shape_id,
                        point=_as_vec3(entry.get("point", [0, 0, 0]), "point"),
                        normal=_as_vec3(entry.get("normal", [0, 1, 0]), "normal"),
                        material=material,
                    )
                )
            elif shape_type == "triangle":
                vertices = entry.get("vertices", [])
                if len(vertices) != 3:
                    raise ValueError(f"Triangle needs 3 vertices, got {len(vertices)}")
                shapes.append(
                    TriangleShape(
                        shape_id=shape_id,
                        a=_as_vec3(vertices[0], "vertex a"),
                        b=_as_vec3(vertices[1], "vertex b"),
                        c=_as_vec3(vertices[2], "vertex c"),
                        material=material,
                    )
                )
            else:
                raise ValueError(f"Unknown shape type: {shape_type}")

        scene = cls(
            shapes=shapes,
            light_position=_as_vec3(data.get("light_position", [0, 0, 0]), "light_position"),
            name=data.get("name", ""),
        )
        scene.validate()
        return scene


class SceneBuilder:
    """Incrementally builds a Scene, assigning shape ids in insertion order.

    Example:
        >>> builder = SceneBuilder(light_position=(0, 5, 0), name="demo")
        >>> mirror = PhongMaterial(ambient=(0, 0, 0), diffuse=(0, 0, 0),
        ...                        reflection=(0.9, 0.9, 0.9))
        >>> floor_id = builder.add_plane((0, -1, 0), (0, 1, 0), mirror)
        >>> scene = builder.build()
    """

    def __init__(self, light_position: Vec3 = (0.0, 0.0, 0.0), name: str = "") -> None:
        self._shapes: list[Shape] = []
        self._light_position = _as_vec3(light_position, "light_position")
        self._name = name

    def _next_id(self) -> int:
        return len(self._shapes)

    def set_light(self, position: Vec3) -> None:
        """Set the position of the point light."""
        self._light_position = _as_vec3(position, "light_position")

    def add_sphere(self, center: Vec3, radius: float, material: PhongMaterial) -> int:
        """Add a sphere.

        Returns:
            The id assigned to the sphere.

        Raises:
            ValueError: If the radius is not positive.
        """
        shape_id = self._next_id()
        self._shapes.append(
            SphereShape(
                shape_id=shape_id,
                center=_as_vec3(center, "center"),
                radius=float(radius),
                material=material,
            )
        )
        return shape_id

    def add_plane(self, point: Vec3, normal: Vec3, material: PhongMaterial) -> int:
        """Add an infinite plane.

        Returns:
            The id assigned to the plane.

        Raises:
            ValueError: If the normal is zero.
        """
        shape_id = self._next_id()
        self._shapes.append(
            PlaneShape(
                shape_id=shape_id,
                point=_as_vec3(point, "point"),
                normal=_as_vec3(normal, "normal"),
                material=material,
            )
        )
        return shape_id

    def add_triangle(self, a: Vec3, b: Vec3, c: Vec3, material: PhongMaterial) -> int:
        """Add a triangle with vertices a, b, c.

        Returns:
            The id assigned to the triangle.

        Raises:
            ValueError: If the vertices are collinear.
        """
        shape_id = self._next_id()
        self._shapes.append(
            TriangleShape(
                shape_id=shape_id,
                a=_as_vec3(a, "vertex a"),
                b=_as_vec3(b, "vertex b"),
                c=_as_vec3(c, "vertex c"),
                material=material,
            )
        )
        return shape_id

    def build(self) -> Scene:
        """Create the Scene. The builder can keep being used afterwards."""
        scene = Scene(
            shapes=list(self._shapes),
            light_position=self._light_position,
            name=self._name,
        )
        scene.validate()
        return scene
