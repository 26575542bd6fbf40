from ..models.image import Dimensions
from ..models.square_plan import CropOffsets, SquarePlan


class GeometryService:
    """
    All of the square-framing arithmetic lives here, so the resize, the crop
    and the overlay agree on the same numbers.
    """

    @staticmethod
    def plan(width: int, height: int) -> SquarePlan:
        """
        Args:
            width (int): Source width, > 0.
            height (int): Source height, > 0.

        Returns:
            (SquarePlan): side = max(w, h); the smaller edge is scaled up to side
            (integer-truncated ratio) and the crop is centered with floor division.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

        side = max(width, height)
        factor = min(width, height)
        resized_width = width * side // factor
        resized_height = height * side // factor

        return SquarePlan(
            side=side,
            factor=factor,
            resized=Dimensions(resized_width, resized_height),
            offsets=CropOffsets((resized_width - side) // 2, (resized_height - side) // 2),
        )
