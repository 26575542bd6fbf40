from __future__ import annotations

from typing import List
import logging
import math
import os

import numpy as np
from tqdm import tqdm
from dotenv import load_dotenv

from ..models.image import Image
from ..errors import InvalidBlurIntensity

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

_POLICIES = ("identity", "reject")

# Running sums stay unnormalised until the end; past this scale they are
# brought back to 16-bit fixed point so the cumsums cannot overflow int64.
_MAX_SCALE = 1 << 31
_FIXED_SCALE = 1 << 16


def _ceil_div(num: np.ndarray, den: int) -> np.ndarray:
    return -((-num) // den)


class BlurService:
    """
    Approximate Gaussian blur built from repeated box blurs.

    *   Each pass is a horizontal then a vertical running sum.
    *   Window sums come from cumulative sums, so the cost is linear in the
        pixel count whatever the intensity.
    *   Sums are kept as integers across all passes and divided once at the
        end, rounding up, so any pixel the kernel reaches stays non-black and
        the output is bit-identical on every run.
    *   Borders repeat the edge pixel (no wrap-around, no transparent fringe).
    """

    def __init__(self,
                 passes: int = None,
                 nonpositive_policy: str = None,
                 show_progress: bool = None):
        """
        Args:
            passes: Number of box passes (defaults to env var, 3)
            nonpositive_policy: "identity" or "reject" for intensity <= 0 (defaults to env var)
            show_progress: Draw a tqdm bar over the passes (defaults to env var)
        """
        self.passes = passes if passes is not None else int(os.getenv("BLUR_PASSES", "3"))
        self.nonpositive_policy = (
            nonpositive_policy or os.getenv("BLUR_NONPOSITIVE_POLICY", "identity")
        ).lower()
        if show_progress is None:
            show_progress = os.getenv("BLUR_SHOW_PROGRESS", "false").lower() in ("1", "true", "yes")
        self.show_progress = show_progress

        if self.passes < 1:
            raise ValueError(f"BLUR_PASSES must be >= 1, got {self.passes}")
        if self.nonpositive_policy not in _POLICIES:
            raise ValueError(f"BLUR_NONPOSITIVE_POLICY must be one of {_POLICIES}, "
                             f"got {self.nonpositive_policy!r}")

    # ─── Public API ────────────────────────────────────────────────
    def blur(self, img: Image, intensity: float) -> Image:
        """
        Blur the RGB channels of *img* and return a new RGB Image.

        Args:
            img (Image): Source; alpha, if present, is dropped.
            intensity (float): Sigma-like radius. Larger → smoother.
        """
        rgb = img.pixels[:, :, :3]

        if intensity <= 0:
            if self.nonpositive_policy == "reject":
                raise InvalidBlurIntensity(f"Blur intensity must be positive, got {intensity}")
            logger.debug(f"Blur intensity {intensity} <= 0, returning a copy")
            return Image(pixels=np.ascontiguousarray(rgb).copy())

        work = rgb.astype(np.int64)
        scale = 1  # work holds pixel values multiplied by scale
        sizes = self.box_sizes(intensity, self.passes)
        logger.debug(f"Box sizes for intensity {intensity}: {sizes}")

        for size in tqdm(sizes, desc="blur", ncols=70, disable=not self.show_progress):
            radius = (size - 1) // 2
            if radius <= 0:
                continue
            for window_sum in (self._box_sum_horz, self._box_sum_vert):
                if scale * size > _MAX_SCALE:
                    work = _ceil_div(work * _FIXED_SCALE, scale)
                    scale = _FIXED_SCALE
                work = window_sum(work, radius)
                scale *= size

        out = _ceil_div(work, scale)
        return Image(pixels=np.ascontiguousarray(out.astype(np.uint8)))

    # ─── Internal helpers ──────────────────────────────────────────
    @staticmethod
    def box_sizes(sigma: float, n: int) -> List[int]:
        """
        Box widths whose n-fold convolution has (close to) the variance of a
        Gaussian with standard deviation *sigma*. All widths are odd.
        """
        w_ideal = math.sqrt(12.0 * sigma * sigma / n + 1.0)
        wl = int(math.floor(w_ideal))
        if wl % 2 == 0:
            wl -= 1
        wu = wl + 2

        m_ideal = (12.0 * sigma * sigma - n * wl * wl - 4 * n * wl - 3 * n) / (-4.0 * wl - 4.0)
        m = int(math.floor(m_ideal + 0.5))

        return [wl if i < m else wu for i in range(n)]

    @staticmethod
    def _box_sum_horz(arr: np.ndarray, radius: int) -> np.ndarray:
        """Sum over a window of width 2r+1 along axis 1 of an (H, W, C) int array."""
        width = arr.shape[1]
        diameter = 2 * radius + 1

        # One extra leading column so every window is a difference of two cumsums
        padded = np.pad(arr, ((0, 0), (radius + 1, radius), (0, 0)), mode="edge")
        csum = np.cumsum(padded, axis=1)
        return csum[:, diameter:diameter + width] - csum[:, :width]

    @classmethod
    def _box_sum_vert(cls, arr: np.ndarray, radius: int) -> np.ndarray:
        return cls._box_sum_horz(arr.swapaxes(0, 1), radius).swapaxes(0, 1)
