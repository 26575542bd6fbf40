from __future__ import annotations
from dataclasses import dataclass
from .image import Dimensions


@dataclass(frozen=True)
class CropOffsets:
    """Top-left corner of the square crop inside the resized image."""
    x: int
    y: int


@dataclass(frozen=True)
class SquarePlan:
    """
    Data object holding every number the background needs.
    Produced once by GeometryService.plan and consumed by the later stages.
    """
    side: int                # Edge length of the output square
    factor: int              # Smaller source edge
    resized: Dimensions      # Upscaled background size
    offsets: CropOffsets     # Where the square crop starts
