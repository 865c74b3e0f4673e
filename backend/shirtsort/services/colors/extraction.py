"""
Dominant color extraction for garment photos.

Filtered region pixels are quantized into color buckets; the best supported
bucket per region is scored, and the most confident region decides the
photo's color.
"""
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger
from PIL import Image

from shirtsort.config import config
from shirtsort.errors import NoEligibleColorBucket
from shirtsort.models import ColorAnalysis, RGB
from shirtsort.services.colors.sampling import RegionSampler
from shirtsort.services.colors.utils import closest_color_name, quantize, rgb_to_hex


@dataclass(frozen=True)
class RegionResult:
    """Winning bucket of one sampled region."""

    region: str
    color: RGB
    confidence: float
    bucket_count: int
    pixel_count: int
    eligible: bool


def dominant_bucket(pixels_rgb_u8: np.ndarray,
                    step: int = None,
                    min_count: int = None,
                    min_share: float = None) -> Tuple[RGB, int, int]:
    """
    Find the most populated quantized color bucket.

    Equal counts resolve to the bucket seen first in pixel order.

    Args:
        pixels_rgb_u8: Filtered (N, 3) uint8 pixels
        step: Quantization step
        min_count: Bucket must hold strictly more pixels than this
        min_share: Bucket must hold strictly more than this share of pixels

    Returns:
        Tuple of (quantized color, bucket count, total pixels)

    Raises:
        NoEligibleColorBucket: If no bucket passes both thresholds
    """
    if step is None:
        step = config.QUANT_STEP
    if min_count is None:
        min_count = config.MIN_BUCKET_COUNT
    if min_share is None:
        min_share = config.MIN_BUCKET_SHARE

    total = int(len(pixels_rgb_u8))
    if total == 0:
        raise NoEligibleColorBucket("No pixels survived filtering")

    q = quantize(pixels_rgb_u8, step)
    keys = (q[:, 0] << 16) | (q[:, 1] << 8) | q[:, 2]
    buckets, first_seen, counts = np.unique(keys, return_index=True, return_counts=True)

    # Most populated first, earliest seen among equals
    order = np.lexsort((first_seen, -counts))
    best = order[0]
    count = int(counts[best])

    # Lower-count buckets can only fail the same thresholds
    if count <= min_count or count / total <= min_share:
        raise NoEligibleColorBucket(
            f"Top bucket has {count}/{total} pixels, below thresholds"
        )

    key = int(buckets[best])
    color = ((key >> 16) & 0xFF, (key >> 8) & 0xFF, key & 0xFF)
    return color, count, total


def score_confidence(bucket_count: int, total: int,
                     scale: float = None, cap: float = None) -> float:
    """confidence = min(cap, bucket_count / total * scale)"""
    if scale is None:
        scale = config.CONFIDENCE_SCALE
    if cap is None:
        cap = config.MAX_CONFIDENCE
    if total <= 0:
        return 0.0
    return float(min(cap, (bucket_count / total) * scale))


def select_best_region(results: Sequence[RegionResult]) -> Optional[RegionResult]:
    """
    Region with the strictly highest confidence.

    Returns None when nothing is eligible or when several regions all report
    the same confidence, so the caller can fall back to the catch-all region.
    """
    eligible = [r for r in results if r.eligible]
    if not eligible:
        return None
    if len(results) > 1 and len({r.confidence for r in results}) == 1:
        return None

    best = eligible[0]
    for result in eligible[1:]:
        if result.confidence > best.confidence:
            best = result
    return best


class DominantColorExtractor:
    """Pixel-heuristic color detection over torso regions."""

    def __init__(self,
                 sampler: Optional[RegionSampler] = None,
                 quant_step: int = None,
                 min_bucket_count: int = None,
                 min_bucket_share: float = None,
                 confidence_scale: float = None,
                 max_confidence: float = None):
        self.sampler = sampler or RegionSampler()
        self.quant_step = quant_step or config.QUANT_STEP
        if not config.validate_quant_step(self.quant_step):
            raise ValueError(f"Invalid quantization step: {self.quant_step}")
        self.min_bucket_count = config.MIN_BUCKET_COUNT if min_bucket_count is None else min_bucket_count
        self.min_bucket_share = config.MIN_BUCKET_SHARE if min_bucket_share is None else min_bucket_share
        self.confidence_scale = confidence_scale or config.CONFIDENCE_SCALE
        self.max_confidence = max_confidence or config.MAX_CONFIDENCE

    def extract_region(self, pixels_rgb_u8: np.ndarray, region: str) -> RegionResult:
        """Score one region; ineligible regions come back gray with zero confidence."""
        try:
            color, count, total = dominant_bucket(
                pixels_rgb_u8,
                step=self.quant_step,
                min_count=self.min_bucket_count,
                min_share=self.min_bucket_share
            )
        except NoEligibleColorBucket as e:
            logger.debug(f"Region {region} ineligible: {e}")
            return RegionResult(
                region=region,
                color=tuple(config.DEFAULT_COLOR),
                confidence=0.0,
                bucket_count=0,
                pixel_count=int(len(pixels_rgb_u8)),
                eligible=False
            )

        confidence = score_confidence(count, total, self.confidence_scale, self.max_confidence)
        logger.debug(f"Region {region}: {rgb_to_hex(color)} {count}/{total} conf={confidence:.3f}")
        return RegionResult(
            region=region,
            color=color,
            confidence=confidence,
            bucket_count=count,
            pixel_count=total,
            eligible=True
        )

    def _score_regions(self, work: np.ndarray) -> List[RegionResult]:
        return [
            self.extract_region(self.sampler.sample(work, region), region.name)
            for region in self.sampler.regions
        ]

    def extract_regions(self, image: Image.Image) -> List[RegionResult]:
        """Results for every candidate region, in sampler order."""
        return self._score_regions(self.sampler.prepare(image))

    def extract(self, image: Image.Image) -> ColorAnalysis:
        """
        Dominant garment color of a decoded image.

        Args:
            image: RGBA PIL image

        Returns:
            ColorAnalysis with is_override=False
        """
        work = self.sampler.prepare(image)
        results = self._score_regions(work)

        best = select_best_region(results)
        if best is None:
            fallback = self.sampler.fallback_region
            logger.debug(f"No decisive region, using {fallback.name}")
            best = self.extract_region(self.sampler.sample(work, fallback), fallback.name)

        color = best.color if best.eligible else tuple(config.DEFAULT_COLOR)
        confidence = best.confidence if best.eligible else 0.0

        return ColorAnalysis(
            dominant_color=color,
            color_name=closest_color_name(color),
            confidence=confidence,
            is_override=False
        )
