"""Matplotlib-based preview of rendered images.

The tracer's colors are unclamped linear values. For display they are
clamped to [0, 1] and gamma encoded (2.2, matching an sRGB framebuffer);
there is no other tone mapping.

Example:
    >>> from whitted.core.renderer import RenderSession
    >>> from whitted.preview.display import show_preview
    >>> from whitted.scene.presets import create_scene_two
    >>>
    >>> session = RenderSession(400, 400)
    >>> session.set_scene(create_scene_two())
    >>> show_preview(session)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from whitted.config import DISPLAY_GAMMA

if TYPE_CHECKING:
    from whitted.core.renderer import RenderSession


def apply_gamma(
    image: npt.NDArray[np.float32],
    gamma: float = DISPLAY_GAMMA,
) -> npt.NDArray[np.float32]:
    """Gamma encode a linear image: out = in ** (1 / gamma).

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Gamma value (default 2.2).

    Returns:
        Gamma encoded image. Inputs are clamped to [0, 1] first; gamma 1.0
        returns the input unchanged.

    Raises:
        ValueError: If gamma is not positive.
    """
    if gamma <= 0.0:
        raise ValueError(f"Gamma must be positive, got {gamma}")
    if gamma == 1.0:
        return image

    # Negative values would turn into NaN under a fractional power
    image = np.clip(image, 0.0, 1.0)
    return np.power(image, 1.0 / gamma).astype(np.float32)


def process_image_for_display(
    image: npt.NDArray[np.float32],
    gamma: float = DISPLAY_GAMMA,
) -> npt.NDArray[np.float32]:
    """Prepare a linear image for display: clamp to [0, 1], then gamma.

    Args:
        image: Linear image array of shape (H, W, 3), any range.
        gamma: Display gamma (default 2.2).

    Returns:
        Display-ready float image in [0, 1].
    """
    result = np.clip(image, 0.0, 1.0)
    result = apply_gamma(result, gamma)
    return np.clip(result, 0.0, 1.0).astype(np.float32)


def show_preview(
    session: RenderSession,
    *,
    gamma: float = DISPLAY_GAMMA,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Show the session's current image in a Matplotlib figure.

    Args:
        session: The RenderSession to display.
        gamma: Display gamma (default 2.2).
        title: Custom title (default names the scene and depth budget).
        figsize: Figure size in inches (width, height).
        block: Whether to block until the figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = process_image_for_display(session.get_image_numpy(gamma=1.0), gamma)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        scene_name = session.scene.name if session.scene is not None else "no scene"
        title = f"{scene_name} - depth {session.depth_budget}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)


def show_comparison(
    image_a: npt.NDArray[np.float32],
    image_b: npt.NDArray[np.float32],
    *,
    labels: tuple[str, str] = ("A", "B"),
    gamma: float = DISPLAY_GAMMA,
    diff_scale: float = 4.0,
    figsize: tuple[float, float] = (16, 6),
    block: bool = True,
) -> float:
    """Show two renders side by side with their amplified difference.

    Handy for seeing what the reflection chain adds, e.g. depth 0 against
    depth 10 of the same scene.

    Args:
        image_a: First linear image (H, W, 3).
        image_b: Second linear image (H, W, 3).
        labels: Titles for the two images.
        gamma: Display gamma.
        diff_scale: Factor applied to the absolute difference.
        figsize: Figure size in inches.
        block: Whether to block until the figure is closed.

    Returns:
        The RMSE between the two display images.
    """
    import matplotlib.pyplot as plt

    from whitted.preview.export import compute_rmse

    display_a = process_image_for_display(image_a, gamma)
    display_b = process_image_for_display(image_b, gamma)
    rmse = compute_rmse(display_a, display_b)

    diff = np.clip(np.abs(display_a - display_b) * diff_scale, 0.0, 1.0)

    fig, axes = plt.subplots(1, 3, figsize=figsize)
    for ax, img, label in zip(
        axes,
        (display_a, display_b, diff),
        (labels[0], labels[1], f"Difference x{diff_scale} (RMSE {rmse:.5f})"),
    ):
        ax.imshow(img)
        ax.set_title(label)
        ax.axis("off")

    plt.tight_layout()
    plt.show(block=block)

    return rmse
