"""PNG export for rendered images.

Images are written as 8-bit RGB PNGs through Pillow after the display
pipeline (clamp and gamma) has been applied. The tracer itself never touches
files.

Example:
    >>> from whitted.preview.export import save_png
    >>> save_png(session, "render.png")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from whitted.config import DISPLAY_GAMMA
from whitted.preview.display import process_image_for_display

if TYPE_CHECKING:
    from whitted.core.renderer import RenderSession


def image_to_uint8(
    image: npt.NDArray[np.float32],
    *,
    gamma: float = DISPLAY_GAMMA,
) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to 8-bit display values.

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Display gamma (default 2.2).

    Returns:
        Array of shape (H, W, 3) with dtype uint8.
    """
    processed = process_image_for_display(image, gamma)
    return np.round(processed * 255.0).astype(np.uint8)


def save_png_from_array(
    image: npt.NDArray[np.float32],
    filepath: str,
    *,
    gamma: float = DISPLAY_GAMMA,
) -> None:
    """Save a linear float image as a PNG file.

    Args:
        image: Linear image array of shape (H, W, 3).
        filepath: Output file path (should end in .png).
        gamma: Display gamma (default 2.2).

    Raises:
        ValueError: If the array is not of shape (H, W, 3).
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")

    pil_image = PILImage.fromarray(image_to_uint8(image, gamma=gamma), mode="RGB")
    pil_image.save(filepath)


def save_png(
    session: RenderSession,
    filepath: str,
    *,
    gamma: float = DISPLAY_GAMMA,
) -> None:
    """Save a session's current image as a PNG file.

    Args:
        session: The RenderSession whose image to save.
        filepath: Output file path (should end in .png).
        gamma: Display gamma (default 2.2).
    """
    save_png_from_array(session.get_image_numpy(gamma=1.0), filepath, gamma=gamma)


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Compute the root mean squared error between two images.

    Raises:
        ValueError: If the image shapes differ.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
