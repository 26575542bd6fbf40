import numpy as np
from PIL import Image as PILImage

from ..models.image import Image, Dimensions


class ResampleService:
    """Upscaling for the background. Triangle (bilinear) filter only."""

    _FILTER = PILImage.Resampling.BILINEAR

    def resize(self, img: Image, size: Dimensions) -> Image:
        """Return a *new* Image of *size*; the input is left untouched."""
        if (img.width, img.height) == (size.width, size.height):
            return Image(pixels=img.pixels.copy())

        pil_obj = PILImage.fromarray(np.ascontiguousarray(img.pixels))
        resized = pil_obj.resize((size.width, size.height), resample=self._FILTER)
        return Image(pixels=np.asarray(resized, dtype=np.uint8).copy())
