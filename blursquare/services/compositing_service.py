from typing import Tuple
import numpy as np

from ..models.image import Image
from ..errors import GeometryError


class CompositingService:
    """
    Places the untouched original on top of the blurred square.

    • Output is always RGB: foreground alpha is dropped, not blended.
    • Returns a **new** Image; neither input is modified.
    """

    @staticmethod
    def centered_bounds(bg_size: int, fg_size: int) -> Tuple[int, int]:
        """Half-open [start, end) of a fg_size span centered in bg_size."""
        return (bg_size - fg_size) // 2, (bg_size + fg_size) // 2

    def overlay(self, bg: Image, fg: Image) -> Image:
        if fg.width > bg.width or fg.height > bg.height:
            raise GeometryError(
                f"Foreground {fg.width}x{fg.height} does not fit in background {bg.width}x{bg.height}"
            )

        x0, x1 = self.centered_bounds(bg.width, fg.width)
        y0, y1 = self.centered_bounds(bg.height, fg.height)

        # Fail fast instead of copying a truncated foreground
        if (x1 - x0) * (y1 - y0) != fg.width * fg.height:
            raise GeometryError(
                f"Centered rectangle [{x0},{x1})x[{y0},{y1}) does not match "
                f"foreground {fg.width}x{fg.height}"
            )

        out = np.ascontiguousarray(bg.pixels[:, :, :3]).copy()
        out[y0:y1, x0:x1] = fg.pixels[:, :, :3]
        return Image(pixels=out)
