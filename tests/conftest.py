"""Pytest configuration for ray tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_shape_table():
    """Empty the device shape table before and after each test."""
    # Import here so Taichi is initialized before fields are declared
    from whitted.scene.intersection import clear_scene

    clear_scene()
    yield
    clear_scene()


@pytest.fixture
def matte_material():
    """A non-reflective material with distinct ambient/diffuse/specular terms."""
    from whitted.materials.phong import PhongMaterial

    return PhongMaterial(
        ambient=(0.1, 0.05, 0.0),
        diffuse=(0.6, 0.3, 0.2),
        specular=(0.4, 0.4, 0.4),
        shininess=8.0,
    )


@pytest.fixture
def mirror_material():
    """A perfect mirror with no local lighting."""
    from whitted.materials.phong import PhongMaterial

    return PhongMaterial(
        ambient=(0.0, 0.0, 0.0),
        diffuse=(0.0, 0.0, 0.0),
        specular=(0.0, 0.0, 0.0),
        shininess=1.0,
        reflection=(1.0, 1.0, 1.0),
    )
