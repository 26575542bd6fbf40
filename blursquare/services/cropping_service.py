import logging

from ..models.image import Image
from ..models.square_plan import CropOffsets
from ..errors import GeometryError

logger = logging.getLogger(__name__)


class CroppingService:

    @staticmethod
    def crop_square(img: Image, offsets: CropOffsets, side: int) -> Image:
        """
        Copy the side x side region starting at *offsets*.
        A region that leaves the image is a planner bug, not a user error.
        """
        bound_l, bound_t = offsets.x, offsets.y
        bound_r, bound_b = bound_l + side, bound_t + side
        logger.debug(f"crop bounds=({bound_l},{bound_t},{bound_r},{bound_b}) on {img.width}x{img.height}")

        if side <= 0 or bound_l < 0 or bound_t < 0 or bound_r > img.width or bound_b > img.height:
            raise GeometryError(
                f"Crop {side}x{side} at ({bound_l},{bound_t}) does not fit in {img.width}x{img.height}"
            )

        return Image(pixels=img.pixels[bound_t:bound_b, bound_l:bound_r].copy())
