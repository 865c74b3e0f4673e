"""
Torso region sampling with noise filtering.

Regions are rectangles expressed as fractions of the image, applied to a
normalized square working copy so pixel thresholds do not depend on the
source resolution. Transparent, very dark, blown-out and skin-tone pixels are
dropped before any color counting.
"""
from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

import numpy as np
from loguru import logger
from PIL import Image

from shirtsort.config import config
from shirtsort.services.imaging import normalize_image


@dataclass(frozen=True)
class Region:
    """Rectangle in fractions of image width/height."""

    name: str
    x: float
    y: float
    w: float
    h: float

    def bounds(self, width: int, height: int) -> Tuple[int, int, int, int]:
        """Pixel bounds (x0, y0, x1, y1), never empty, clipped to the image."""
        x0 = min(int(self.x * width), width - 1)
        y0 = min(int(self.y * height), height - 1)
        x1 = min(width, x0 + max(1, int(self.w * width)))
        y1 = min(height, y0 + max(1, int(self.h * height)))
        return x0, y0, x1, y1


# Overlapping upper-torso candidates
TORSO_REGIONS: Tuple[Region, ...] = (
    Region("center_high", 0.30, 0.20, 0.40, 0.30),
    Region("center_wide", 0.20, 0.25, 0.60, 0.40),
    Region("chest_narrow", 0.35, 0.30, 0.30, 0.25),
)

# Last resort when the candidates cannot be told apart
FALLBACK_REGION = Region("center_box", 0.25, 0.25, 0.50, 0.50)


def is_skin_tone(r: int, g: int, b: int) -> bool:
    """Rule-based skin classifier for a single RGB pixel."""
    r, g, b = int(r), int(g), int(b)
    if r > 95 and g > 40 and b > 20 and r > g and r > b and (r - g) > 15 and (r - b) > 15:
        return True
    return r > 200 and g > 150 and b > 100 and abs(r - g) < 50 and abs(r - b) < 80


def skin_tone_mask(pixels_rgb: np.ndarray) -> np.ndarray:
    """Vectorized ``is_skin_tone`` over (N, 3) pixels."""
    px = pixels_rgb.astype(np.int32)
    r, g, b = px[:, 0], px[:, 1], px[:, 2]

    warm = (
        (r > 95) & (g > 40) & (b > 20)
        & (r > g) & (r > b)
        & ((r - g) > 15) & ((r - b) > 15)
    )
    light = (
        (r > 200) & (g > 150) & (b > 100)
        & (np.abs(r - g) < 50) & (np.abs(r - b) < 80)
    )
    return warm | light


def filter_pixels(pixels_rgba: np.ndarray,
                  alpha_min: int = None,
                  brightness_min: float = None,
                  brightness_max: float = None) -> np.ndarray:
    """
    Drop noise pixels.

    Args:
        pixels_rgba: (N, 4) uint8 pixels
        alpha_min: Pixels with alpha below this are transparent
        brightness_min: Mean channel value below this is shadow
        brightness_max: Mean channel value above this is overexposed

    Returns:
        (M, 3) uint8 RGB pixels that survived every filter
    """
    if alpha_min is None:
        alpha_min = config.ALPHA_MIN
    if brightness_min is None:
        brightness_min = config.BRIGHTNESS_MIN
    if brightness_max is None:
        brightness_max = config.BRIGHTNESS_MAX

    if pixels_rgba.size == 0:
        return np.empty((0, 3), dtype=np.uint8)

    rgb = pixels_rgba[:, :3]
    keep = pixels_rgba[:, 3] >= alpha_min

    brightness = rgb.astype(np.float32).sum(axis=1) / 3.0
    keep &= (brightness >= brightness_min) & (brightness <= brightness_max)

    keep &= ~skin_tone_mask(rgb)

    logger.debug(f"Noise filter: kept {int(np.sum(keep))}/{len(keep)} pixels")
    return rgb[keep]


class RegionSampler:
    """Extracts filtered pixel sets for a fixed list of torso regions."""

    def __init__(self,
                 regions: Sequence[Region] = TORSO_REGIONS,
                 fallback_region: Region = FALLBACK_REGION,
                 work_size: int = None):
        if not regions:
            raise ValueError("At least one sampling region is required")
        self.regions = tuple(regions)
        self.fallback_region = fallback_region
        self.work_size = work_size or config.WORK_SIZE
        if not config.validate_work_size(self.work_size):
            raise ValueError(f"Invalid working size: {self.work_size}")

    def prepare(self, image: Image.Image) -> np.ndarray:
        """Normalized (work_size, work_size, 4) RGBA working copy."""
        return normalize_image(image, self.work_size)

    def sample(self, work_rgba: np.ndarray, region: Region) -> np.ndarray:
        """Filtered (N, 3) RGB pixels inside one region of the working copy."""
        height, width = work_rgba.shape[:2]
        x0, y0, x1, y1 = region.bounds(width, height)
        patch = work_rgba[y0:y1, x0:x1].reshape(-1, 4)
        pixels = filter_pixels(patch)
        logger.debug(f"Region {region.name}: {len(pixels)}/{len(patch)} pixels usable")
        return pixels

    def sample_regions(self, image: Image.Image) -> Dict[str, np.ndarray]:
        """Filtered pixels for every candidate region, in region order."""
        work = self.prepare(image)
        return {region.name: self.sample(work, region) for region in self.regions}
