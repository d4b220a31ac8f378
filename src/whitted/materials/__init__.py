"""Materials module.

Components:
    phong: Phong material (ambient/diffuse/specular/shininess plus reflective
        strength) and the local illumination function used by the tracer.
"""

from .phong import (
    Material,
    PhongMaterial,
    make_black_material,
    shade_phong,
)

__all__ = [
    "Material",
    "PhongMaterial",
    "make_black_material",
    "shade_phong",
]
