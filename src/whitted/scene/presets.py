"""Preset scenes selectable from the scripts and the interactive preview.

Both presets are framed for the fixed pinhole camera at the origin looking
down -z with the image plane at z = -2 (a 53 degree field of view).

Scene 1: a grey floor and back wall, a red sphere, a mirror sphere and a
    blue pyramid built from triangles.
Scene 2: a mirror floor reflecting three colored spheres and a green
    triangle, lit from above and to the right.

Example:
    >>> from whitted.scene.presets import build_preset
    >>> scene = build_preset(1)
    >>> scene.name
    'scene one'
"""

from whitted.materials.phong import PhongMaterial
from whitted.scene.scene import Scene, SceneBuilder

# Preset numbers accepted by build_preset (also the keys in the preview)
PRESET_NUMBERS = (1, 2)


# =============================================================================
# Shared Materials
# =============================================================================

MATTE_GREY = PhongMaterial(
    ambient=(0.05, 0.05, 0.05),
    diffuse=(0.6, 0.6, 0.6),
    specular=(0.0, 0.0, 0.0),
    shininess=1.0,
)

RED_PLASTIC = PhongMaterial(
    ambient=(0.1, 0.0, 0.0),
    diffuse=(0.7, 0.1, 0.1),
    specular=(0.6, 0.6, 0.6),
    shininess=32.0,
    reflection=(0.1, 0.1, 0.1),
)

BLUE_PLASTIC = PhongMaterial(
    ambient=(0.0, 0.0, 0.1),
    diffuse=(0.1, 0.2, 0.7),
    specular=(0.4, 0.4, 0.4),
    shininess=16.0,
)

GREEN_PLASTIC = PhongMaterial(
    ambient=(0.0, 0.08, 0.0),
    diffuse=(0.1, 0.6, 0.1),
    specular=(0.3, 0.3, 0.3),
    shininess=8.0,
)

YELLOW_PLASTIC = PhongMaterial(
    ambient=(0.08, 0.08, 0.0),
    diffuse=(0.7, 0.6, 0.1),
    specular=(0.5, 0.5, 0.5),
    shininess=64.0,
    reflection=(0.2, 0.2, 0.2),
)

MIRROR = PhongMaterial(
    ambient=(0.02, 0.02, 0.02),
    diffuse=(0.05, 0.05, 0.05),
    specular=(0.8, 0.8, 0.8),
    shininess=128.0,
    reflection=(0.8, 0.8, 0.8),
)

TINTED_MIRROR = PhongMaterial(
    ambient=(0.02, 0.02, 0.03),
    diffuse=(0.1, 0.1, 0.15),
    specular=(0.2, 0.2, 0.2),
    shininess=16.0,
    reflection=(0.6, 0.6, 0.7),
)


def create_scene_one() -> Scene:
    """Create preset scene 1.

    Returns:
        A scene with a floor plane, a back wall, two spheres (one mirror)
        and a four-sided triangle pyramid.
    """
    builder = SceneBuilder(light_position=(-3.0, 4.0, 0.0), name="scene one")

    # Room
    builder.add_plane((0.0, -1.5, 0.0), (0.0, 1.0, 0.0), MATTE_GREY)
    builder.add_plane((0.0, 0.0, -12.0), (0.0, 0.0, 1.0), MATTE_GREY)

    # Spheres
    builder.add_sphere((-1.4, -0.5, -5.5), 1.0, RED_PLASTIC)
    builder.add_sphere((1.3, -0.3, -6.5), 1.2, MIRROR)

    # Pyramid: apex above a square base, faces wound counter-clockwise
    # when seen from outside
    apex = (0.2, 0.6, -4.0)
    front_left = (-0.4, -1.5, -3.4)
    front_right = (0.8, -1.5, -3.4)
    back_right = (0.8, -1.5, -4.6)
    back_left = (-0.4, -1.5, -4.6)
    builder.add_triangle(front_left, front_right, apex, BLUE_PLASTIC)
    builder.add_triangle(front_right, back_right, apex, BLUE_PLASTIC)
    builder.add_triangle(back_right, back_left, apex, BLUE_PLASTIC)
    builder.add_triangle(back_left, front_left, apex, BLUE_PLASTIC)

    return builder.build()


def create_scene_two() -> Scene:
    """Create preset scene 2.

    Returns:
        A scene with a reflective floor, three spheres and a triangle.
    """
    builder = SceneBuilder(light_position=(4.0, 6.0, -1.0), name="scene two")

    builder.add_plane((0.0, -1.0, 0.0), (0.0, 1.0, 0.0), TINTED_MIRROR)

    builder.add_sphere((0.0, 0.0, -6.0), 1.0, YELLOW_PLASTIC)
    builder.add_sphere((-2.2, -0.4, -7.0), 0.6, RED_PLASTIC)
    builder.add_sphere((2.0, 0.5, -8.0), 1.5, MIRROR)

    builder.add_triangle(
        (-3.5, -1.0, -10.0),
        (-0.5, -1.0, -10.0),
        (-2.0, 2.5, -10.0),
        GREEN_PLASTIC,
    )

    return builder.build()


def build_preset(number: int) -> Scene:
    """Build the preset scene with the given number.

    Args:
        number: One of PRESET_NUMBERS.

    Returns:
        A freshly built Scene.

    Raises:
        ValueError: If the number does not name a preset.
    """
    if number == 1:
        return create_scene_one()
    if number == 2:
        return create_scene_two()
    raise ValueError(f"Unknown preset scene {number}; expected one of {PRESET_NUMBERS}")
