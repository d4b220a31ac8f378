"""Image driver and render session.

The render kernel casts one primary ray per pixel in a Taichi parallel loop
and writes the traced color into an ImageBuffer. Every render recomputes the
whole image from the active scene; nothing is accumulated between renders,
so rendering the same scene twice gives the same pixels.

RenderSession ties the pieces together. It owns the image buffer and the
active scene and is the only code that uploads scenes to the device shape
table, so switching scenes is an explicit set_scene() call.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.renderer import RenderSession
    >>> from whitted.scene.presets import create_scene_one
    >>>
    >>> session = RenderSession(400, 400)
    >>> session.set_scene(create_scene_one())  # uploads and renders
    >>> image = session.get_image_numpy(gamma=2.2)
    >>> session.save_image("scene_one.png")
"""

import numpy as np
import numpy.typing as npt
import taichi as ti

from whitted.camera.pinhole import get_primary_ray
from whitted.config import (
    DEFAULT_DEPTH_BUDGET,
    DISPLAY_GAMMA,
    NO_SHAPE,
    RenderSettings,
    validate_depth_budget,
)
from whitted.core.image_buffer import ImageBuffer, write_pixel
from whitted.core.tracer import trace_ray
from whitted.scene.intersection import load_scene
from whitted.scene.scene import Scene

# =============================================================================
# Rendering Kernel
# =============================================================================


@ti.kernel
def _render_kernel(image: ti.template(), width: ti.i32, height: ti.i32, depth_budget: ti.i32):
    """Trace one primary ray per pixel and store the colors.

    Args:
        image: Vector field of shape (width, height) to write into.
        width: Image width in pixels.
        height: Image height in pixels.
        depth_budget: Reflection bounces allowed per primary ray.
    """
    for x, y in ti.ndrange(width, height):
        ray = get_primary_ray(x, y, width, height)
        color, _ = trace_ray(ray, depth_budget, NO_SHAPE)
        write_pixel(image, x, y, color)


def render_image(image: ImageBuffer, depth_budget: int = DEFAULT_DEPTH_BUDGET) -> None:
    """Render the loaded scene into an image buffer.

    The buffer is cleared first, then every pixel is traced.

    Args:
        image: The buffer to fill. Its size defines the primary ray grid.
        depth_budget: Reflection bounces allowed per primary ray.

    Raises:
        ValueError: If depth_budget is negative.
    """
    validate_depth_budget(depth_budget)
    image.initialize()
    _render_kernel(image.field, image.width, image.height, depth_budget)


# =============================================================================
# Render Session
# =============================================================================


class RenderSession:
    """Owns the active scene and the output image.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        depth_budget: Reflection bounces allowed per primary ray.
        scene: The active scene, or None before set_scene() is called.
        render_count: Number of completed renders.
    """

    def __init__(self, width: int, height: int, depth_budget: int = DEFAULT_DEPTH_BUDGET) -> None:
        """Create a session with an empty (black) image and no scene.

        Raises:
            ValueError: If the dimensions or depth budget are invalid.
        """
        validate_depth_budget(depth_budget)
        self._image = ImageBuffer(width, height)
        self._depth_budget = depth_budget
        self._scene: Scene | None = None
        self._render_count = 0

    @classmethod
    def from_settings(cls, settings: RenderSettings) -> "RenderSession":
        """Create a session from a RenderSettings value."""
        return cls(settings.width, settings.height, depth_budget=settings.depth_budget)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._image.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._image.height

    @property
    def depth_budget(self) -> int:
        """Get the reflection depth budget."""
        return self._depth_budget

    @depth_budget.setter
    def depth_budget(self, value: int) -> None:
        validate_depth_budget(value)
        self._depth_budget = value

    @property
    def scene(self) -> Scene | None:
        """Get the active scene."""
        return self._scene

    @property
    def image(self) -> ImageBuffer:
        """Get the output image buffer."""
        return self._image

    @property
    def render_count(self) -> int:
        """Get the number of completed renders."""
        return self._render_count

    def set_scene(self, scene: Scene, render: bool = True) -> None:
        """Make a scene the active scene.

        The scene is validated and uploaded to the device shape table,
        replacing the previous scene entirely.

        Args:
            scene: The scene to activate.
            render: Whether to render the image right away.

        Raises:
            ValueError: If the scene is invalid. The previous scene stays
                active in that case.
        """
        load_scene(scene)
        self._scene = scene
        if render:
            self.render()

    def render(self) -> None:
        """Recompute every pixel of the image from the active scene.

        Raises:
            RuntimeError: If no scene has been set.
        """
        if self._scene is None:
            raise RuntimeError("No scene set. Call set_scene() before render().")
        render_image(self._image, self._depth_budget)
        self._render_count += 1

    def resize(self, width: int, height: int) -> None:
        """Resize the image and clear it to black.

        Call render() afterwards to fill it again.

        Raises:
            ValueError: If the dimensions are invalid.
        """
        self._image.initialize(width, height)

    def get_image_numpy(self, gamma: float = 1.0) -> npt.NDArray[np.float32]:
        """Get the rendered image as a NumPy array.

        Values are clamped to [0, 1] and optionally gamma corrected. The
        array shape is (height, width, 3).

        Args:
            gamma: Gamma correction value. Default 1.0 (linear).
                Use 2.2 for sRGB display.

        Returns:
            NumPy array of shape (height, width, 3) with dtype float32.
        """
        image = np.clip(self._image.to_numpy(), 0.0, 1.0)

        if gamma != 1.0:
            image = np.power(image, 1.0 / gamma)

        return image.astype(np.float32)

    def get_image_uint8(self, gamma: float = DISPLAY_GAMMA) -> npt.NDArray[np.uint8]:
        """Get the rendered image as an 8-bit NumPy array.

        Args:
            gamma: Gamma correction value. Default 2.2 for sRGB.

        Returns:
            NumPy array of shape (height, width, 3) with dtype uint8.
        """
        image = self.get_image_numpy(gamma=gamma)
        return np.round(image * 255.0).astype(np.uint8)

    def save_image(self, filepath: str, gamma: float = DISPLAY_GAMMA) -> None:
        """Save the rendered image to a file.

        Args:
            filepath: Path to save the image (e.g., "output.png").
            gamma: Gamma correction value. Default 2.2 for sRGB.
        """
        from PIL import Image as PILImage

        image_uint8 = self.get_image_uint8(gamma=gamma)
        pil_image = PILImage.fromarray(image_uint8, mode="RGB")
        pil_image.save(filepath)

    def __repr__(self) -> str:
        """Return a string representation of the session state."""
        scene_name = self._scene.name if self._scene is not None else None
        return (
            f"RenderSession(width={self.width}, height={self.height}, "
            f"depth_budget={self._depth_budget}, scene={scene_name!r})"
        )
