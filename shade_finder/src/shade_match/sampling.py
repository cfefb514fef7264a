from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import numpy as np
from PIL import Image

from .errors import NoSampleError
from .models import RGBColor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Region:
    """Pixel rectangle, ``x``/``y`` being the top-left corner."""

    x: int
    y: int
    width: int
    height: int

    def clip(self, image_height: int, image_width: int) -> Region:
        left = min(max(0, self.x), max(0, image_width - 1))
        top = min(max(0, self.y), max(0, image_height - 1))
        right = min(image_width, max(left + 1, self.x + self.width))
        bottom = min(image_height, max(top + 1, self.y + self.height))
        return Region(x=left, y=top, width=right - left, height=bottom - top)


class SampleRegionLocator(Protocol):
    def locate(self, image: np.ndarray) -> Region:
        """Return the area of ``image`` whose pixels represent the skin tone."""


@dataclass
class FixedRegionLocator:
    """Fractional box, used when nothing better than a guess is available.

    The defaults cover a horizontal band across the middle of a portrait,
    roughly where cheeks sit in a front-facing photo.
    """

    x: float = 0.20
    y: float = 0.35
    width: float = 0.60
    height: float = 0.25

    def __post_init__(self) -> None:
        for name in ("x", "y", "width", "height"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be a fraction within [0, 1]")
        if self.width == 0.0 or self.height == 0.0:
            raise ValueError("region width and height must be positive")

    def locate(self, image: np.ndarray) -> Region:
        height, width = image.shape[:2]
        region = Region(
            x=int(np.floor(width * self.x)),
            y=int(np.floor(height * self.y)),
            width=max(1, int(np.floor(width * self.width))),
            height=max(1, int(np.floor(height * self.height))),
        )
        return region.clip(height, width)


def resize_to_width(image: np.ndarray, target_width: int) -> np.ndarray:
    """Rescale ``image`` to ``target_width`` pixels wide, keeping aspect ratio."""
    height, width = image.shape[:2]
    if width == target_width:
        return image

    target_height = max(1, int(round(target_width * height / float(width))))
    resized = Image.fromarray(np.ascontiguousarray(image, dtype=np.uint8)).resize(
        (target_width, target_height), Image.Resampling.BILINEAR
    )
    return np.asarray(resized, dtype=np.uint8)


def average_color(
    image: np.ndarray,
    region: Region | None = None,
    min_alpha: int = 125,
    min_brightness: float = 20.0,
    max_brightness: float = 240.0,
) -> RGBColor:
    """Average the pixels of ``region`` that look like usable skin.

    Pixels that are mostly transparent, or whose mean channel value is outside
    ``[min_brightness, max_brightness]`` (deep shadow, specular highlight), are
    skipped. Raises ``NoSampleError`` when nothing is left.
    """
    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ValueError("image must have shape (H, W, 3) or (H, W, 4)")

    if region is not None:
        region = region.clip(image.shape[0], image.shape[1])
        image = image[
            region.y : region.y + region.height, region.x : region.x + region.width
        ]

    pixels = image.reshape(-1, image.shape[2])
    rgb = pixels[:, :3].astype(np.float64)
    keep = np.ones(pixels.shape[0], dtype=bool)
    if pixels.shape[1] == 4:
        keep &= pixels[:, 3] >= min_alpha

    brightness = rgb.mean(axis=1)
    keep &= (brightness >= min_brightness) & (brightness <= max_brightness)

    kept = int(np.count_nonzero(keep))
    logger.debug("kept %d of %d sampled pixels", kept, pixels.shape[0])
    if kept == 0:
        raise NoSampleError(
            "could not sample skin tones: every pixel in the region was "
            "transparent or too dark/bright"
        )

    mean = np.floor(rgb[keep].mean(axis=0) + 0.5).astype(int)
    return RGBColor(int(mean[0]), int(mean[1]), int(mean[2]))


def sample_skin_color(
    image: np.ndarray,
    locator: SampleRegionLocator | None = None,
    work_width: int | None = 400,
    min_alpha: int = 125,
    min_brightness: float = 20.0,
    max_brightness: float = 240.0,
) -> RGBColor:
    if work_width:
        image = resize_to_width(image, work_width)
    locator = locator or FixedRegionLocator()
    region = locator.locate(image)
    logger.debug("sampling region %s", region)
    return average_color(
        image,
        region,
        min_alpha=min_alpha,
        min_brightness=min_brightness,
        max_brightness=max_brightness,
    )
