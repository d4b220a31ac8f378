"""Rendering configuration shared by the tracer, scene queries and drivers.

The epsilon values below are tuned for scenes whose coordinates are in the
range of a few units (the bundled presets span roughly -10..10). Scenes built
at a very different scale should retune SELF_INTERSECTION_EPSILON and
LIGHT_DISTANCE_MARGIN together.

Example:
    >>> from whitted.config import RenderSettings
    >>> settings = RenderSettings(width=400, height=400, depth_budget=4)
    >>> settings.aspect_ratio
    1.0
"""

from dataclasses import dataclass

# =============================================================================
# Tracing Constants
# =============================================================================

# Reflection bounces allowed for a primary ray
DEFAULT_DEPTH_BUDGET = 10

# Shape id meaning "no shape" (no occluder found / nothing to skip)
NO_SHAPE = -1

# Shadow hits closer than this to the shadow ray origin are the surface itself
SELF_INTERSECTION_EPSILON = 1e-5

# Shadow hits within this distance of the light do not count as occluders
LIGHT_DISTANCE_MARGIN = 0.01

# Color returned for rays that leave the scene
BACKGROUND_COLOR = (0.0, 0.0, 0.0)

# =============================================================================
# Camera Constants
# =============================================================================

# Pinhole location; primary rays all start here
PINHOLE_POSITION = (0.0, 0.0, 0.0)

# Distance from the pinhole to the virtual image plane along -z
IMAGE_PLANE_DISTANCE = 2.0

# =============================================================================
# Storage / Display Constants
# =============================================================================

# Capacity of the device-side shape table
MAX_SHAPES = 1024

# Largest image the render session accepts
MAX_IMAGE_WIDTH = 4096
MAX_IMAGE_HEIGHT = 4096

# Display gamma applied by preview and export (sRGB framebuffer equivalent)
DISPLAY_GAMMA = 2.2


@dataclass
class RenderSettings:
    """Settings for one render session.

    Attributes:
        width: Output image width in pixels.
        height: Output image height in pixels.
        depth_budget: Number of reflection bounces allowed per primary ray.
        gamma: Display gamma used when converting the image for output.
    """

    width: int = 800
    height: int = 800
    depth_budget: int = DEFAULT_DEPTH_BUDGET
    gamma: float = DISPLAY_GAMMA

    def __post_init__(self) -> None:
        validate_image_size(self.width, self.height)
        validate_depth_budget(self.depth_budget)
        if self.gamma <= 0.0:
            raise ValueError(f"Gamma must be positive, got {self.gamma}")

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height


def validate_image_size(width: int, height: int) -> None:
    """Raise ValueError unless width x height is a usable image size."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )


def validate_depth_budget(depth_budget: int) -> None:
    """Raise ValueError for a negative reflection depth budget."""
    if depth_budget < 0:
        raise ValueError(f"Depth budget must be non-negative, got {depth_budget}")
