"""Preview module for output and visualization.

Components:
    display: Clamp + gamma display pipeline and Matplotlib preview
    export: PNG export via Pillow
    interactive: Taichi GGUI window with preset switching (keys 1, 2, s, q)

Example:
    >>> from whitted.preview import save_png, show_preview
    >>> save_png(session, "render.png")
    >>> show_preview(session)

For the interactive window:
    >>> from whitted.preview import InteractivePreview
    >>> InteractivePreview(512, 512).run()
"""

from whitted.preview.display import (
    apply_gamma,
    process_image_for_display,
    show_comparison,
    show_preview,
)
from whitted.preview.export import (
    compute_rmse,
    image_to_uint8,
    save_png,
    save_png_from_array,
)
from whitted.preview.interactive import InteractivePreview

__all__ = [
    # Interactive preview
    "InteractivePreview",
    # Display functions
    "show_preview",
    "show_comparison",
    "apply_gamma",
    "process_image_for_display",
    # Export functions
    "save_png",
    "save_png_from_array",
    "image_to_uint8",
    "compute_rmse",
]
