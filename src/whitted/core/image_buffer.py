"""Per-pixel RGB storage written by the render kernel.

An ImageBuffer owns a Taichi vector field indexed [x, y]. The field is a
render target with a fixed capacity: shrinking the image only changes the
active width and height, and the field is reallocated only when a resize
exceeds its capacity. Pixel (0, 0) is the bottom-left corner; to_numpy()
transposes and flips the active region into the usual (height, width, 3)
top-left-origin layout.

The render path only writes to the buffer. Values are stored unclamped;
clamping and gamma belong to the display pipeline.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.image_buffer import ImageBuffer
    >>> image = ImageBuffer(4, 3)
    >>> image.set_pixel(0, 0, (1.0, 0.0, 0.0))
    >>> image.to_numpy().shape
    (3, 4, 3)
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from whitted.config import validate_image_size

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def write_pixel(image: ti.template(), x: ti.i32, y: ti.i32, color: vec3):
    """Store a color in a buffer field from inside a kernel."""
    image[x, y] = color


class ImageBuffer:
    """A W x H grid of RGB float pixels.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        capacity: The (width, height) the field is allocated for.
        field: The underlying Taichi vector field, indexed [x, y]. Only the
            first width x height entries belong to the image.
    """

    def __init__(self, width: int, height: int) -> None:
        """Allocate a cleared buffer.

        Raises:
            ValueError: If the dimensions are not positive or exceed the
                supported maximum.
        """
        self._width = 0
        self._height = 0
        self._capacity = (0, 0)
        self._field = None
        self.initialize(width, height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def capacity(self) -> tuple[int, int]:
        """Get the allocated (width, height) of the field."""
        return self._capacity

    @property
    def field(self) -> "ti.MatrixField":
        """Get the Taichi field holding the pixels."""
        return self._field

    def initialize(self, width: int | None = None, height: int | None = None) -> None:
        """Clear the buffer to black, optionally resizing it first.

        The field is kept when the new size fits its capacity and grown
        otherwise.

        Args:
            width: New width in pixels, or None to keep the current width.
            height: New height in pixels, or None to keep the current height.

        Raises:
            ValueError: If the new dimensions are invalid.
        """
        new_width = self._width if width is None else width
        new_height = self._height if height is None else height
        validate_image_size(new_width, new_height)

        cap_width, cap_height = self._capacity
        if self._field is None or new_width > cap_width or new_height > cap_height:
            cap_width = max(cap_width, new_width)
            cap_height = max(cap_height, new_height)
            self._field = ti.Vector.field(3, dtype=ti.f32, shape=(cap_width, cap_height))
            self._capacity = (cap_width, cap_height)

        self._width = new_width
        self._height = new_height
        self._field.fill(0.0)

    def set_pixel(self, x: int, y: int, color: tuple[float, float, float]) -> None:
        """Store a color at pixel (x, y) from Python.

        Raises:
            IndexError: If (x, y) lies outside the image.
        """
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(
                f"Pixel ({x}, {y}) outside image of size {self._width}x{self._height}"
            )
        self._field[x, y] = [float(color[0]), float(color[1]), float(color[2])]

    def get_pixel(self, x: int, y: int) -> tuple[float, float, float]:
        """Read the color at pixel (x, y).

        Raises:
            IndexError: If (x, y) lies outside the image.
        """
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(
                f"Pixel ({x}, {y}) outside image of size {self._width}x{self._height}"
            )
        c = self._field[x, y]
        return (float(c[0]), float(c[1]), float(c[2]))

    def to_numpy(self) -> npt.NDArray[np.float32]:
        """Get the pixels as a NumPy array.

        Returns:
            Array of shape (height, width, 3) with row 0 at the top of the
            image. Values are not clamped.
        """
        image = self._field.to_numpy()[: self._width, : self._height]

        # (width, height, 3) -> (height, width, 3)
        image = np.transpose(image, (1, 0, 2))

        # Flip vertically (Taichi uses bottom-left origin, images use top-left)
        image = np.flipud(image)

        return np.ascontiguousarray(image, dtype=np.float32)

    def __repr__(self) -> str:
        return f"ImageBuffer(width={self._width}, height={self._height})"
