from pathlib import Path
from typing import Union
import logging
import shutil

import numpy as np
import cv2
from PIL import Image as PILImage

from ..models.image import Image
from ..errors import ImageAccessError, ImageDecodeError, ImageEncodeError

logger = logging.getLogger(__name__)


class ImageRepository:
    """
    Handles file I/O for Image entities.
    Format is picked by the decoder (content) and the encoder (extension).
    """

    @staticmethod
    def _to_rgb_order(arr: np.ndarray, path: Path) -> np.ndarray:
        """OpenCV hands back grey/BGR/BGRA at 8 or 16 bit; normalise to uint8 RGB(A)."""
        if arr.dtype == np.uint16:
            arr = (arr >> 8).astype(np.uint8)
        elif arr.dtype != np.uint8:
            raise ImageDecodeError(f"Unsupported sample type {arr.dtype} in {path}")

        if arr.ndim == 2:
            return cv2.cvtColor(arr, cv2.COLOR_GRAY2RGB)
        if arr.shape[2] == 3:
            return cv2.cvtColor(arr, cv2.COLOR_BGR2RGB)
        if arr.shape[2] == 4:
            return cv2.cvtColor(arr, cv2.COLOR_BGRA2RGBA)
        raise ImageDecodeError(f"Unsupported channel count {arr.shape[2]} in {path}")

    def load(self, path: Union[str, Path]) -> Image:
        path = Path(path)
        try:
            raw = np.fromfile(str(path), dtype=np.uint8)
        except OSError as err:
            raise ImageAccessError(f"Could not open image {str(path)!r}: {err}") from err
        logger.info(f"Opened image from {str(path)!r}")

        # imdecode instead of imread so unreadable and undecodable stay distinct
        arr = cv2.imdecode(raw, cv2.IMREAD_UNCHANGED) if raw.size else None
        if arr is None:
            raise ImageDecodeError(f"Could not decode image {str(path)!r}")

        pixels = self._to_rgb_order(arr, path)
        logger.info("Decoded image")
        return Image(pixels=pixels, path=path)

    @staticmethod
    def check_encodable(path: Union[str, Path]) -> None:
        """Raise ImageEncodeError unless Pillow has an encoder for the extension of *path*."""
        ext = Path(path).suffix.lower()
        fmt = PILImage.registered_extensions().get(ext)
        if fmt is None or fmt not in PILImage.SAVE:
            raise ImageEncodeError(f"Could not save image to {str(path)!r}: unknown file extension: {ext!r}")

    @staticmethod
    def save(image: Image) -> None:
        if image.path is None:
            raise ImageEncodeError("Image has no target path")
        try:
            PILImage.fromarray(image.pixels).save(image.path)
        except (OSError, ValueError, KeyError) as err:
            raise ImageEncodeError(f"Could not save image to {str(image.path)!r}: {err}") from err

    @staticmethod
    def move(src: Union[str, Path], dst: Union[str, Path]) -> Path:
        """Move *src* to *dst* (works across filesystems) and return *dst*."""
        dst = Path(dst)
        try:
            shutil.move(str(src), str(dst))
        except OSError as err:
            raise ImageAccessError(f"Could not move {str(src)!r} to {str(dst)!r}: {err}") from err
        return dst
