"""Interactive preview window using Taichi GGUI.

The window shows the current render of a preset scene and reacts to keys:

    1, 2    build the preset scene with that number and re-render it
    s       save the current image to a timestamped PNG
    q, Esc  close the window

Rendering only happens on a preset key press; between key presses the last
image is redisplayed every frame.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from whitted.preview.interactive import InteractivePreview
    >>> preview = InteractivePreview(512, 512)
    >>> preview.run()
"""

from __future__ import annotations

import os
from datetime import datetime

import numpy as np
import numpy.typing as npt
import taichi as ti

from whitted.config import DEFAULT_DEPTH_BUDGET, DISPLAY_GAMMA
from whitted.core.renderer import RenderSession
from whitted.preview.display import process_image_for_display
from whitted.scene.presets import PRESET_NUMBERS, build_preset

# Keys that close the window
QUIT_KEYS = ("q", ti.ui.ESCAPE)

# Key that exports the current image
EXPORT_KEY = "s"


class InteractivePreview:
    """Preview window that renders preset scenes on demand.

    Attributes:
        width: Window width in pixels.
        height: Window height in pixels.
        session: The RenderSession producing the images.
        current_preset: Number of the preset being shown.
        display_image: Taichi field holding the gamma-encoded display image.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        depth_budget: int = DEFAULT_DEPTH_BUDGET,
        initial_preset: int = PRESET_NUMBERS[0],
        title: str = "Whitted Ray Tracer",
        gamma: float = DISPLAY_GAMMA,
    ) -> None:
        """Create the session; the window itself opens on first use.

        Args:
            width: Window width in pixels.
            height: Window height in pixels.
            depth_budget: Reflection bounces allowed per primary ray.
            initial_preset: Preset shown when the window opens.
            title: Window title.
            gamma: Display gamma applied before showing the image.

        Raises:
            ValueError: If the size, depth budget or preset is invalid.
        """
        if initial_preset not in PRESET_NUMBERS:
            raise ValueError(
                f"Unknown preset scene {initial_preset}; expected one of {PRESET_NUMBERS}"
            )

        self.width = width
        self.height = height
        self._title = title
        self._gamma = gamma
        self._initial_preset = initial_preset

        self.session = RenderSession(width, height, depth_budget=depth_budget)
        self.current_preset: int | None = None

        # Defer window creation to support headless checks
        self._window: ti.ui.Window | None = None
        self._canvas: ti.ui.Canvas | None = None

        self.display_image: ti.MatrixField = ti.Vector.field(
            3, dtype=ti.f32, shape=(width, height)
        )

    def _initialize_window(self) -> None:
        if self._window is not None:
            return

        self._window = ti.ui.Window(
            name=self._title,
            res=(self.width, self.height),
            vsync=True,
        )
        self._canvas = self._window.get_canvas()

    @property
    def window(self) -> ti.ui.Window:
        """Get the Taichi GGUI window, creating it if needed."""
        if self._window is None:
            self._initialize_window()
        assert self._window is not None
        return self._window

    @property
    def canvas(self) -> ti.ui.Canvas:
        """Get the canvas the image is drawn on."""
        if self._canvas is None:
            self._initialize_window()
        assert self._canvas is not None
        return self._canvas

    # =========================================================================
    # Scene Selection
    # =========================================================================

    def select_preset(self, number: int) -> None:
        """Build a preset scene, make it active and render it.

        Raises:
            ValueError: If the number does not name a preset.
        """
        scene = build_preset(number)
        self.session.set_scene(scene)
        self.current_preset = number
        self.update_image(self.session.get_image_numpy(gamma=1.0))

    def handle_key(self, key: str) -> bool:
        """React to a key press.

        A preset key always rebuilds and re-renders its scene, including the
        one already shown.

        Args:
            key: The key as reported by ti.ui (e.g. "1", "q", ti.ui.ESCAPE).

        Returns:
            False if the key asks to close the window, True otherwise.
        """
        if key in QUIT_KEYS:
            return False

        if key == EXPORT_KEY:
            self.export_png()
        elif key.isdigit() and int(key) in PRESET_NUMBERS:
            self.select_preset(int(key))

        return True

    # =========================================================================
    # Display
    # =========================================================================

    def update_image(self, image: npt.NDArray[np.float32]) -> None:
        """Update the display image from a linear NumPy image.

        Args:
            image: Array of shape (height, width, 3), top row first. The
                display pipeline (clamp and gamma) is applied here.

        Raises:
            ValueError: If the image shape doesn't match the window.
        """
        expected_shape = (self.height, self.width, 3)
        if image.shape != expected_shape:
            raise ValueError(
                f"Image shape {image.shape} doesn't match expected {expected_shape}"
            )

        display = process_image_for_display(image, self._gamma)

        # NumPy (height, width) top-left origin -> Taichi (x, y) bottom-left origin
        display = np.ascontiguousarray(np.transpose(np.flipud(display), (1, 0, 2)))
        self.display_image.from_numpy(display)

    def show_frame(self) -> None:
        """Draw the display image and present the frame."""
        self.canvas.set_image(self.display_image)
        self.window.show()

    def _poll_keys(self) -> bool:
        keep_running = True
        while self.window.get_event(ti.ui.PRESS):
            if not self.handle_key(self.window.event.key):
                keep_running = False
        return keep_running

    def run(self) -> None:
        """Open the window and process frames until it is closed.

        The initial preset is rendered before the first frame.
        """
        self._initialize_window()

        if self.current_preset is None:
            self.select_preset(self._initial_preset)

        while self.window.running:
            if not self._poll_keys():
                break
            self.show_frame()

        self.close()

    def close(self) -> None:
        """Close the preview window."""
        if self._window is not None:
            self._window.running = False

    def export_png(self, filepath: str | None = None) -> str:
        """Save the current image as a PNG.

        Args:
            filepath: Output path. Defaults to a timestamped name built from
                the preset number.

        Returns:
            The path written.
        """
        from whitted.preview.export import save_png

        if filepath is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filepath = f"scene_{self.current_preset}_{timestamp}.png"

        save_png(self.session, filepath, gamma=self._gamma)
        print(f"Exported: {filepath}")
        return filepath

    @staticmethod
    def is_display_available() -> bool:
        """Check if a display is available for GUI rendering.

        Returns:
            True if a display is available, False for headless environments.
        """
        display = os.environ.get("DISPLAY")
        wayland = os.environ.get("WAYLAND_DISPLAY")

        if os.name == "nt":
            return True

        # macOS has a display unless reached over SSH without X forwarding
        if os.uname().sysname == "Darwin":
            return not (os.environ.get("SSH_CONNECTION") and not display)

        return bool(display or wayland)
