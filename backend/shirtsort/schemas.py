"""
ShirtSort API Schemas
Pydantic models for analysis and grouping responses.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from shirtsort.models import ColorAnalysis, Photo, PhotoGroup
from shirtsort.utils.ids import content_fingerprint


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("shirtsort", description="Service name")
    classifier_available: bool = Field(False, description="Whether the classifier override is configured")


class ColorAnalysisOut(BaseModel):
    """Representative shirt color of one photo."""
    dominant_color: str = Field(
        ...,
        pattern=r"^#[0-9A-Fa-f]{6}$",
        description="Hex color code in format #RRGGBB"
    )
    rgb: List[int] = Field(..., min_length=3, max_length=3, description="RGB channels 0-255")
    color_name: str = Field(..., description="Closest reference color name")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Detection confidence (0.0-1.0)")
    is_override: bool = Field(..., description="Whether an image classifier label decided the color")

    @classmethod
    def from_analysis(cls, analysis: ColorAnalysis) -> "ColorAnalysisOut":
        return cls(**analysis.to_dict())


class PhotoOut(BaseModel):
    """Analyzed photo."""
    id: str = Field(..., description="Photo identifier, sequential within the batch")
    filename: Optional[str] = Field(None, description="Uploaded file name")
    fingerprint: str = Field(..., description="Truncated SHA-256 of the uploaded bytes")
    group_id: Optional[str] = Field(None, description="Group the photo was assigned to")
    analysis: ColorAnalysisOut

    @classmethod
    def from_photo(cls, photo: Photo) -> "PhotoOut":
        return cls(
            id=photo.id,
            filename=photo.filename,
            fingerprint=content_fingerprint(photo.data),
            group_id=photo.group_id,
            analysis=ColorAnalysisOut.from_analysis(photo.analysis or ColorAnalysis.default())
        )


class PhotoGroupOut(BaseModel):
    """Photos sharing a similar shirt color."""
    id: str
    name: str = Field(..., description="Day label in creation order")
    representative_color: str = Field(..., pattern=r"^#[0-9A-Fa-f]{6}$")
    color_name: str
    size: int = Field(..., ge=1)
    photo_ids: List[str]

    @classmethod
    def from_group(cls, group: PhotoGroup, color_name: str) -> "PhotoGroupOut":
        r, g, b = group.representative_color
        return cls(
            id=group.id,
            name=group.name,
            representative_color=f"#{r:02X}{g:02X}{b:02X}",
            color_name=color_name,
            size=group.size,
            photo_ids=[p.id for p in group.photos]
        )


class AnalyzeResponse(BaseModel):
    """Per-photo analyses in upload order."""
    request_id: str
    photos: List[PhotoOut]


class GroupResponse(BaseModel):
    """Grouping result, largest group first."""
    request_id: str
    threshold: float
    photos: List[PhotoOut]
    groups: List[PhotoGroupOut]


class MetricsResponse(BaseModel):
    """In-process metrics summary."""
    uptime_seconds: float
    counters: Dict[str, int]
    timing_stats: Dict[str, Dict[str, float]]
    confidence_stats: Dict[str, Any]
