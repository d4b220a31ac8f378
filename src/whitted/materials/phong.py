"""Phong material and local illumination.

A Phong material describes how a surface responds to the single point light:

    I = Ia + Id + Is

    Ia = ambient
    Id = diffuse * max(0, dot(n, l))
    Is = specular * max(0, dot(r, v)) ** shininess

where l points from the surface toward the light, r is -l reflected about the
normal n, and v points from the surface back toward the ray origin. No upper
clamp is applied; out-of-range sums are left to the display pipeline.

Each material also carries a per-channel reflective strength used by the
tracer to weight the color seen along the mirror direction.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.materials.phong import PhongMaterial
    >>> red_plastic = PhongMaterial(
    ...     ambient=(0.1, 0.0, 0.0),
    ...     diffuse=(0.7, 0.1, 0.1),
    ...     specular=(0.5, 0.5, 0.5),
    ...     shininess=32.0,
    ... )
    >>> # Use shade_phong(...) within a Taichi kernel
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from whitted.core.ray import Ray, normalize, reflect

# Type alias for 3D vectors
vec3 = tm.vec3

Color = tuple[float, float, float]


@ti.dataclass
class Material:
    """Device-side Phong material.

    Attributes:
        ambient: Ambient reflectance (RGB), added regardless of shadowing.
        diffuse: Diffuse reflectance (RGB).
        specular: Specular reflectance (RGB).
        shininess: Specular exponent.
        reflection: Per-channel reflective strength (RGB). Zero means the
            surface shows no mirror reflection.
    """

    ambient: vec3
    diffuse: vec3
    specular: vec3
    shininess: ti.f32
    reflection: vec3


@dataclass(frozen=True)
class PhongMaterial:
    """Host-side Phong material description used when building scenes.

    Attributes:
        ambient: Ambient reflectance as (R, G, B).
        diffuse: Diffuse reflectance as (R, G, B).
        specular: Specular reflectance as (R, G, B).
        shininess: Specular exponent (non-negative).
        reflection: Reflective strength as (R, G, B). Default is no reflection.

    Raises:
        ValueError: If any color component or the shininess is negative.
    """

    ambient: Color = (0.1, 0.1, 0.1)
    diffuse: Color = (0.5, 0.5, 0.5)
    specular: Color = (0.0, 0.0, 0.0)
    shininess: float = 1.0
    reflection: Color = (0.0, 0.0, 0.0)

    def __post_init__(self) -> None:
        for name in ("ambient", "diffuse", "specular", "reflection"):
            color = getattr(self, name)
            if len(color) != 3:
                raise ValueError(f"{name} must have 3 components, got {len(color)}")
            for i, component in enumerate(color):
                if component < 0.0:
                    raise ValueError(f"{name} component {i} = {component} is negative")
        if self.shininess < 0.0:
            raise ValueError(f"Shininess must be non-negative, got {self.shininess}")

    @property
    def is_reflective(self) -> bool:
        """Whether any channel of the reflective strength is nonzero."""
        return any(c > 0.0 for c in self.reflection)

    def to_dict(self) -> dict[str, list[float] | float]:
        """Export the material as a JSON-friendly dictionary."""
        return {
            "ambient": list(self.ambient),
            "diffuse": list(self.diffuse),
            "specular": list(self.specular),
            "shininess": self.shininess,
            "reflection": list(self.reflection),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PhongMaterial":
        """Create a material from a dictionary produced by to_dict()."""
        defaults = cls()
        return cls(
            ambient=tuple(data.get("ambient", defaults.ambient)),
            diffuse=tuple(data.get("diffuse", defaults.diffuse)),
            specular=tuple(data.get("specular", defaults.specular)),
            shininess=float(data.get("shininess", defaults.shininess)),
            reflection=tuple(data.get("reflection", defaults.reflection)),
        )


@ti.func
def make_black_material() -> Material:
    """Create an all-zero material (used by miss records)."""
    zero = vec3(0.0, 0.0, 0.0)
    return Material(
        ambient=zero,
        diffuse=zero,
        specular=zero,
        shininess=0.0,
        reflection=zero,
    )


@ti.func
def shade_phong(
    ray: Ray,
    light_position: vec3,
    point: vec3,
    normal: vec3,
    material: Material,
):
    """Evaluate the Phong model at a surface point.

    Args:
        ray: The ray that produced the hit (its origin is the viewer).
        light_position: Position of the point light.
        point: The surface point.
        normal: Unit surface normal at the point.
        material: The surface material.

    Returns:
        A tuple of (ambient, diffuse, specular, combined) RGB vectors, where
        combined = ambient + diffuse + specular.
    """
    light_dir = normalize(light_position - point)
    view_dir = normalize(ray.origin - point)

    ambient = material.ambient

    n_dot_l = ti.max(0.0, tm.dot(normal, light_dir))
    diffuse = material.diffuse * n_dot_l

    reflected_light = reflect(-light_dir, normal)
    r_dot_v = ti.max(0.0, tm.dot(reflected_light, view_dir))
    specular = material.specular * (r_dot_v**material.shininess)

    return ambient, diffuse, specular, ambient + diffuse + specular
