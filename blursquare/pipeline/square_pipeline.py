# pipeline/square_pipeline.py
"""
Square Framing Pipeline
Turns any image into a 1:1 image: blurred, cropped copy of itself as the
background, the original centered on top. Pure pixels in, pixels out.
"""
import logging

from ..models.image import Image
from ..services.geometry_service import GeometryService
from ..services.resample_service import ResampleService
from ..services.cropping_service import CroppingService
from ..services.blur_service import BlurService
from ..services.compositing_service import CompositingService

logger = logging.getLogger(__name__)

DEFAULT_INTENSITY = 16.0


def make_square(
    image: Image,
    intensity: float = DEFAULT_INTENSITY,
    *,
    geometry_service: GeometryService = None,
    resample_service: ResampleService = None,
    cropping_service: CroppingService = None,
    blur_service: BlurService = None,
    compositing_service: CompositingService = None,
) -> Image:
    """
    Build the square image for *image*.

    Steps, each finishing before the next starts:
    1. Plan the square side, upscale size and crop offsets
    2. Upscale the source (triangle filter)
    3. Crop the centered square
    4. Blur it
    5. Overlay the original, centered

    Args:
        image: Decoded source (RGB or RGBA)
        intensity: Blur radius for the background
        *_service: Overrides for the stage implementations

    Returns:
        Image: New side x side RGB image
    """
    geometry_service = geometry_service or GeometryService()
    resample_service = resample_service or ResampleService()
    cropping_service = cropping_service or CroppingService()
    blur_service = blur_service or BlurService()
    compositing_service = compositing_service or CompositingService()

    logger.info("Creating blurred background...")
    source = image.to_rgb()
    plan = geometry_service.plan(source.width, source.height)
    logger.debug(f"Plan for {source.width}x{source.height}: {plan}")

    bg = resample_service.resize(source, plan.resized)
    logger.info("Upscale: done")

    bg = cropping_service.crop_square(bg, plan.offsets, plan.side)
    logger.info("Square crop: done")

    bg = blur_service.blur(bg, intensity)
    logger.info("Gaussian blur: done")
    logger.info("Background created")

    logger.info("Constructing final image...")
    final_image = compositing_service.overlay(bg, source)
    logger.info("Done!")
    return final_image
