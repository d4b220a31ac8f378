"""Whitted-style ray tracer built on Taichi.

Renders scenes of spheres, planes and triangles lit by one point light with
Phong shading, hard shadows and recursive mirror reflection, seen through a
fixed pinhole camera.

Subpackages:
    core: Rays, the recursive tracer, the image buffer and the render session
    geometry: Shape primitives and their intersection routines
    materials: Phong material and local illumination
    scene: Scene description, device shape table, scene queries and presets
    camera: Pinhole camera and primary ray generation
    preview: Display pipeline, PNG export and the interactive window

Modules that declare Taichi fields must be imported after ti.init().
"""

__version__ = "0.1.0"
