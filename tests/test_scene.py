"""Tests for the host-side scene description.

Tests cover:
- SceneBuilder id assignment and shape parameters
- Shape validation (radius, plane normal, collinear triangle)
- Scene invariants (reserved and duplicate ids)
- Dictionary round trip
"""

import pytest


class TestSceneBuilder:
    """Tests for SceneBuilder."""

    def test_ids_assigned_in_order(self, matte_material):
        """Test ids start at 0 and follow insertion order."""
        from whitted.scene.scene import SceneBuilder

        builder = SceneBuilder(light_position=(0.0, 5.0, 0.0))
        assert builder.add_plane((0, -1, 0), (0, 1, 0), matte_material) == 0
        assert builder.add_sphere((0, 0, -3), 1.0, matte_material) == 1
        assert builder.add_triangle((0, 0, -4), (1, 0, -4), (0, 1, -4), matte_material) == 2

        scene = builder.build()
        assert len(scene) == 3
        assert [s.shape_id for s in scene.shapes] == [0, 1, 2]
        assert scene.light_position == (0.0, 5.0, 0.0)

    def test_set_light(self, matte_material):
        """Test set_light replaces the light position."""
        from whitted.scene.scene import SceneBuilder

        builder = SceneBuilder()
        builder.set_light((1, 2, 3))
        assert builder.build().light_position == (1.0, 2.0, 3.0)

    def test_plane_normal_is_normalized(self, matte_material):
        """Test plane normals are stored with unit length."""
        from whitted.scene.scene import SceneBuilder

        builder = SceneBuilder()
        builder.add_plane((0, 0, 0), (0, 0, 5), matte_material)
        plane = builder.build().shapes[0]
        assert plane.normal == pytest.approx((0.0, 0.0, 1.0))

    def test_build_is_a_snapshot(self, matte_material):
        """Test adding shapes after build() does not change the built scene."""
        from whitted.scene.scene import SceneBuilder

        builder = SceneBuilder()
        builder.add_sphere((0, 0, -3), 1.0, matte_material)
        scene = builder.build()
        builder.add_sphere((0, 0, -6), 1.0, matte_material)
        assert len(scene) == 1

    def test_count_by_kind(self, matte_material):
        """Test Scene.count groups shapes by kind."""
        from whitted.scene.scene import SceneBuilder, ShapeKind

        builder = SceneBuilder()
        builder.add_sphere((0, 0, -3), 1.0, matte_material)
        builder.add_sphere((2, 0, -3), 1.0, matte_material)
        builder.add_plane((0, -1, 0), (0, 1, 0), matte_material)
        scene = builder.build()

        assert scene.count(ShapeKind.SPHERE) == 2
        assert scene.count(ShapeKind.PLANE) == 1
        assert scene.count(ShapeKind.TRIANGLE) == 0

    def test_get_shape(self, matte_material):
        """Test lookup by id."""
        from whitted.scene.scene import SceneBuilder, SphereShape

        builder = SceneBuilder()
        sphere_id = builder.add_sphere((0, 0, -3), 2.0, matte_material)
        scene = builder.build()

        shape = scene.get_shape(sphere_id)
        assert isinstance(shape, SphereShape)
        assert shape.radius == 2.0
        assert scene.get_shape(99) is None


class TestShapeValidation:
    """Tests for invalid shape parameters."""

    @pytest.mark.parametrize("radius", [0.0, -1.0])
    def test_non_positive_radius(self, matte_material, radius):
        """Test spheres need a positive radius."""
        from whitted.scene.scene import SceneBuilder

        with pytest.raises(ValueError, match="radius"):
            SceneBuilder().add_sphere((0, 0, -3), radius, matte_material)

    def test_zero_plane_normal(self, matte_material):
        """Test planes need a non-zero normal."""
        from whitted.scene.scene import SceneBuilder

        with pytest.raises(ValueError, match="normal"):
            SceneBuilder().add_plane((0, 0, 0), (0, 0, 0), matte_material)

    def test_collinear_triangle(self, matte_material):
        """Test triangles need non-collinear vertices."""
        from whitted.scene.scene import SceneBuilder

        with pytest.raises(ValueError, match="collinear"):
            SceneBuilder().add_triangle((0, 0, 0), (1, 1, 1), (2, 2, 2), matte_material)

    def test_wrong_vector_length(self, matte_material):
        """Test positions must have three components."""
        from whitted.scene.scene import SceneBuilder

        with pytest.raises(ValueError, match="3 components"):
            SceneBuilder().add_sphere((0, 0), 1.0, matte_material)


class TestSceneInvariants:
    """Tests for Scene.validate."""

    def test_duplicate_ids_rejected(self, matte_material):
        """Test two shapes may not share an id."""
        from whitted.scene.scene import Scene, SphereShape

        scene = Scene(
            shapes=[
                SphereShape(shape_id=3, center=(0, 0, -3), radius=1.0, material=matte_material),
                SphereShape(shape_id=3, center=(0, 0, -6), radius=1.0, material=matte_material),
            ]
        )
        with pytest.raises(ValueError, match="Duplicate"):
            scene.validate()

    def test_reserved_id_rejected(self, matte_material):
        """Test the 'no shape' id cannot be used by a shape."""
        from whitted.config import NO_SHAPE
        from whitted.scene.scene import Scene, SphereShape

        scene = Scene(
            shapes=[
                SphereShape(
                    shape_id=NO_SHAPE, center=(0, 0, -3), radius=1.0, material=matte_material
                )
            ]
        )
        with pytest.raises(ValueError, match="reserved"):
            scene.validate()

    def test_empty_scene_is_valid(self):
        """Test an empty scene validates."""
        from whitted.scene.scene import Scene

        Scene().validate()


class TestSceneSerialization:
    """Tests for to_dict/from_dict."""

    def test_round_trip(self, matte_material, mirror_material):
        """Test a mixed scene survives the dictionary round trip."""
        from whitted.scene.scene import Scene, SceneBuilder

        builder = SceneBuilder(light_position=(1, 4, 0), name="mixed")
        builder.add_plane((0, -1, 0), (0, 1, 0), mirror_material)
        builder.add_sphere((0, 0, -3), 1.0, matte_material)
        builder.add_triangle((0, 0, -4), (1, 0, -4), (0, 1, -4), matte_material)
        scene = builder.build()

        restored = Scene.from_dict(scene.to_dict())

        assert restored.name == "mixed"
        assert restored.light_position == scene.light_position
        assert restored.shapes == scene.shapes

    def test_dict_layout(self, matte_material):
        """Test the dictionary uses lower-case type names and plain lists."""
        from whitted.scene.scene import SceneBuilder

        builder = SceneBuilder()
        builder.add_sphere((0, 0, -3), 1.0, matte_material)
        data = builder.build().to_dict()

        entry = data["shapes"][0]
        assert entry["type"] == "sphere"
        assert entry["id"] == 0
        assert entry["center"] == [0.0, 0.0, -3.0]
        assert entry["radius"] == 1.0

    def test_unknown_type_rejected(self):
        """Test unknown shape types raise ValueError."""
        from whitted.scene.scene import Scene

        data = {"shapes": [{"type": "cone", "id": 0}]}
        with pytest.raises(ValueError, match="Unknown shape type"):
            Scene.from_dict(data)

    def test_duplicate_ids_rejected_on_load(self):
        """Test from_dict validates the loaded scene."""
        from whitted.scene.scene import Scene

        data = {
            "shapes": [
                {"type": "sphere", "id": 1, "center": [0, 0, -3], "radius": 1.0},
                {"type": "sphere", "id": 1, "center": [0, 0, -6], "radius": 1.0},
            ]
        }
        with pytest.raises(ValueError, match="Duplicate"):
            Scene.from_dict(data)

    def test_missing_id_rejected(self):
        """Test a shape entry without an id raises ValueError."""
        from whitted.scene.scene import Scene

        data = {"shapes": [{"type": "sphere", "center": [0, 0, -3], "radius": 1.0}]}
        with pytest.raises(ValueError, match="missing 'id'"):
            Scene.from_dict(data)
