from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import numpy as np


@dataclass(frozen=True)
class Dimensions:
    """(width, height) pair, both positive."""
    width: int
    height: int


@dataclass
class Image:
    """
    Simple data object: RGB or RGBA pixels (+ optional source path for bookkeeping).
    RGBA only shows up at the clipboard boundary; everything else works on RGB.
    """
    pixels: np.ndarray # Shape (H, W, 3|4), dtype uint8, RGB(A) order.
    path: Path | None = None # Source of the image.

    def __post_init__(self):
        px = self.pixels
        if px.ndim != 3 or px.shape[2] not in (3, 4):
            raise ValueError(f"Expected (H, W, 3|4) pixels, got shape {px.shape}")
        if px.dtype != np.uint8:
            raise ValueError(f"Expected uint8 pixels, got {px.dtype}")
        if px.shape[0] == 0 or px.shape[1] == 0:
            raise ValueError(f"Zero-area image: {px.shape[1]}x{px.shape[0]}")

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def channels(self) -> int:
        return self.pixels.shape[2]

    @property
    def dimensions(self) -> Dimensions:
        return Dimensions(self.width, self.height)

    def to_rgb(self) -> Image:
        """Return a new RGB Image; alpha, if any, is dropped."""
        return Image(pixels=np.ascontiguousarray(self.pixels[:, :, :3]).copy(), path=self.path)
