"""
Color space helpers shared by extraction, naming and grouping.

The weighted distance here is the single metric used everywhere colors are
compared, so name lookup and grouping thresholds stay comparable.
"""
import math
from typing import Iterable, Sequence, Tuple

import numpy as np

from shirtsort.models import NAMED_COLORS, NamedColor, RGB

# Channel weights for (r, g, b)
DISTANCE_WEIGHTS: Tuple[int, int, int] = (2, 4, 3)


def rgb_to_hex(rgb: Iterable[int]) -> str:
    """Convert an RGB triple (tuple or uint8 array) to a hex color string."""
    r, g, b = [int(x) for x in rgb]
    return f"#{r:02X}{g:02X}{b:02X}"


def hex_to_rgb(hex_color: str) -> RGB:
    """Convert hex color string to RGB tuple."""
    value = hex_color.strip().lstrip('#')
    if len(value) != 6:
        raise ValueError(f"Invalid hex color: {hex_color!r}")
    try:
        return tuple(int(value[i:i+2], 16) for i in (0, 2, 4))
    except ValueError:
        raise ValueError(f"Invalid hex color: {hex_color!r}")


def color_distance(c1: Sequence[int], c2: Sequence[int]) -> float:
    """
    Green-weighted Euclidean distance between two RGB colors.

    distance = sqrt(2*dr^2 + 4*dg^2 + 3*db^2)
    """
    wr, wg, wb = DISTANCE_WEIGHTS
    dr = int(c1[0]) - int(c2[0])
    dg = int(c1[1]) - int(c2[1])
    db = int(c1[2]) - int(c2[2])
    return math.sqrt(wr * dr * dr + wg * dg * dg + wb * db * db)


def closest_named_color(rgb: Sequence[int],
                        table: Sequence[NamedColor] = NAMED_COLORS) -> NamedColor:
    """Nearest table entry by ``color_distance``; ties keep the earlier entry."""
    best = table[0]
    best_distance = color_distance(rgb, best.rgb)
    for entry in table[1:]:
        distance = color_distance(rgb, entry.rgb)
        if distance < best_distance:
            best, best_distance = entry, distance
    return best


def closest_color_name(rgb: Sequence[int]) -> str:
    """Human readable name for an RGB color."""
    return closest_named_color(rgb).name


def quantize(pixels_rgb_u8: np.ndarray, step: int = 16) -> np.ndarray:
    """
    Round every channel to the nearest multiple of ``step``.

    Halves round up and results are clamped to 255, so 255 stays 255 instead
    of overflowing to 256.

    Args:
        pixels_rgb_u8: (N, 3) uint8 pixels

    Returns:
        (N, 3) int32 quantized pixels
    """
    values = pixels_rgb_u8.astype(np.int32)
    quantized = ((values + step // 2) // step) * step
    return np.minimum(quantized, 255)
