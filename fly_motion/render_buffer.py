"""RenderBuffer - RGBA pixel buffer for overlay content."""

from pathlib import Path
from typing import Tuple

import numpy as np
from PIL import Image

Color = Tuple[int, int, int] | Tuple[int, int, int, int]


class RenderBuffer:
    """
    Fixed-size RGBA pixel buffer using numpy.

    Shape is (height, width, 4), uint8. A new buffer is fully transparent so
    that an overlay layer only covers what its sprites draw.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.data = np.zeros((height, width, 4), dtype=np.uint8)

    @classmethod
    def from_image(cls, image_path: str | Path) -> 'RenderBuffer':
        """Load an image file (PNG, JPG, GIF, ...) as flying content."""
        img = Image.open(image_path).convert('RGBA')
        return cls.from_array(np.array(img, dtype=np.uint8))

    @classmethod
    def from_array(cls, data: np.ndarray) -> 'RenderBuffer':
        """Wrap an (height, width, 4) uint8 array."""
        height, width = data.shape[:2]
        buffer = cls(width, height)
        buffer.data[:] = data
        return buffer

    @classmethod
    def filled(cls, width: int, height: int, color: Color) -> 'RenderBuffer':
        """Buffer of the given size filled with a single color."""
        buffer = cls(width, height)
        buffer.clear(color)
        return buffer

    def set_pixel(self, x: int, y: int, color: Color):
        """Set pixel at (x, y) to color (r, g, b) or (r, g, b, a)."""
        if 0 <= x < self.width and 0 <= y < self.height:
            if len(color) == 3:
                self.data[y, x] = (*color, 255)
            else:
                self.data[y, x] = color

    def get_pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        """Get pixel color at (x, y) as (r, g, b, a). Out of bounds is transparent."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return tuple(int(v) for v in self.data[y, x])
        return (0, 0, 0, 0)

    def clear(self, color: Color = (0, 0, 0, 0)):
        """Clear buffer to color. RGB colors are opaque."""
        if len(color) == 3:
            color = (*color, 255)
        self.data[:, :] = color

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.data, 'RGBA')

    def scaled(self, factor: float) -> 'RenderBuffer':
        """
        Return a copy resized by factor.

        A factor that rounds either side down to zero pixels yields an empty
        (0x0) buffer.
        """
        width = max(0, round(self.width * factor))
        height = max(0, round(self.height * factor))
        if width == 0 or height == 0:
            return RenderBuffer(0, 0)
        if (width, height) == (self.width, self.height):
            return self.copy()

        resized = self.to_image().resize((width, height), Image.Resampling.NEAREST)
        return RenderBuffer.from_array(np.array(resized, dtype=np.uint8))

    def blit(self, source: 'RenderBuffer', position: Tuple[float, float], opacity: float = 1.0):
        """
        Composite source over this buffer with its top-left corner at position.

        Clips at the edges and blends with the source alpha channel
        (out = src * alpha + dst * (1 - alpha)).
        """
        x_offset, y_offset = int(round(position[0])), int(round(position[1]))

        src_x0 = max(0, -x_offset)
        src_y0 = max(0, -y_offset)
        src_x1 = min(source.width, self.width - x_offset)
        src_y1 = min(source.height, self.height - y_offset)
        if src_x0 >= src_x1 or src_y0 >= src_y1:
            return

        dst_x0 = max(0, x_offset)
        dst_y0 = max(0, y_offset)
        dst = (slice(dst_y0, dst_y0 + src_y1 - src_y0), slice(dst_x0, dst_x0 + src_x1 - src_x0))

        src_region = source.data[src_y0:src_y1, src_x0:src_x1].astype(float)
        dst_region = self.data[dst].astype(float)

        src_alpha = src_region[:, :, 3:4] / 255.0 * opacity
        dst_alpha = dst_region[:, :, 3:4] / 255.0

        rgb = dst_region[:, :, :3] * (1 - src_alpha) + src_region[:, :, :3] * src_alpha
        alpha = src_alpha + dst_alpha * (1 - src_alpha)

        self.data[dst][:, :, :3] = rgb.astype(np.uint8)
        self.data[dst][:, :, 3:4] = (alpha * 255).astype(np.uint8)

    def copy(self) -> 'RenderBuffer':
        """Create a copy of this buffer."""
        new_buffer = RenderBuffer(self.width, self.height)
        new_buffer.data = self.data.copy()
        return new_buffer
