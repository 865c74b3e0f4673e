"""Core domain models for photos, color analyses and color groups."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from shirtsort.config import config

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class NamedColor:
    """A reference color with a human readable name."""

    name: str
    rgb: RGB


# Ordered: name lookup ties and classifier label matching both resolve to the
# first entry.
NAMED_COLORS: Tuple[NamedColor, ...] = (
    NamedColor("Red", (255, 0, 0)),
    NamedColor("Lime", (0, 255, 0)),
    NamedColor("Blue", (0, 0, 255)),
    NamedColor("Yellow", (255, 255, 0)),
    NamedColor("Magenta", (255, 0, 255)),
    NamedColor("Cyan", (0, 255, 255)),
    NamedColor("Black", (0, 0, 0)),
    NamedColor("White", (255, 255, 255)),
    NamedColor("Gray", (128, 128, 128)),
    NamedColor("Maroon", (128, 0, 0)),
    NamedColor("Green", (0, 128, 0)),
    NamedColor("Navy", (0, 0, 128)),
    NamedColor("Purple", (128, 0, 128)),
    NamedColor("Teal", (0, 128, 128)),
    NamedColor("Orange", (255, 165, 0)),
    NamedColor("Pink", (255, 192, 203)),
    NamedColor("Brown", (165, 42, 42)),
    NamedColor("Light Yellow", (255, 255, 224)),
    NamedColor("Lavender", (230, 230, 250)),
    NamedColor("Pale Green", (152, 251, 152)),
    NamedColor("Silver", (192, 192, 192)),
    NamedColor("Gold", (255, 215, 0)),
)


@dataclass(frozen=True)
class ColorAnalysis:
    """Representative garment color of one photo.

    Attributes:
        dominant_color: Always a valid RGB triple.
        color_name: Closest entry of ``NAMED_COLORS``.
        confidence: Score in [0, 1].
        is_override: True when the classifier label produced the color.
    """

    dominant_color: RGB
    color_name: str
    confidence: float
    is_override: bool = False

    def __post_init__(self) -> None:
        if len(self.dominant_color) != 3 or any(
            not 0 <= int(c) <= 255 for c in self.dominant_color
        ):
            raise ValueError(f"Invalid RGB color: {self.dominant_color!r}")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence out of range: {self.confidence}")
        object.__setattr__(
            self, "dominant_color", tuple(int(c) for c in self.dominant_color)
        )

    @classmethod
    def default(cls) -> "ColorAnalysis":
        """Neutral gray result used when every detection path fails."""
        return cls(
            dominant_color=tuple(config.DEFAULT_COLOR),
            color_name="Gray",
            confidence=config.DEFAULT_CONFIDENCE,
            is_override=False,
        )

    @property
    def hex(self) -> str:
        r, g, b = self.dominant_color
        return f"#{r:02X}{g:02X}{b:02X}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dominant_color": self.hex,
            "rgb": list(self.dominant_color),
            "color_name": self.color_name,
            "confidence": float(self.confidence),
            "is_override": self.is_override,
        }


@dataclass
class Photo:
    """An uploaded photo and its analysis state."""

    id: str
    data: bytes = field(repr=False)
    filename: Optional[str] = None
    analysis: Optional[ColorAnalysis] = None
    group_id: Optional[str] = None


@dataclass
class PhotoGroup:
    """Photos sharing a similar shirt color.

    ``representative_color`` is the founding photo's color and is never
    recomputed.
    """

    id: str
    name: str
    representative_color: RGB
    photos: List[Photo] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.photos)
