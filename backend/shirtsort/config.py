"""
ShirtSort Configuration
Manages environment variables and defaults for the analysis pipeline and API.
"""
import os
from typing import Optional


class Config:
    """Configuration class for ShirtSort services."""

    # Upload limits
    MAX_FILE_MB: int = int(os.environ.get("SHIRTSORT_MAX_FILE_MB", "15"))
    MAX_PHOTOS: int = int(os.environ.get("SHIRTSORT_MAX_PHOTOS", "500"))

    # Logging
    LOG_LEVEL: str = os.environ.get("SHIRTSORT_LOG_LEVEL", "INFO")
    LOG_JSON: bool = bool(int(os.environ.get("SHIRTSORT_LOG_JSON", "0")))

    # Region sampling
    WORK_SIZE: int = int(os.environ.get("SHIRTSORT_WORK_SIZE", "200"))
    ALPHA_MIN: int = 128
    BRIGHTNESS_MIN: float = 30.0
    BRIGHTNESS_MAX: float = 240.0

    # Dominant color extraction
    QUANT_STEP: int = int(os.environ.get("SHIRTSORT_QUANT_STEP", "16"))
    MIN_BUCKET_COUNT: int = int(os.environ.get("SHIRTSORT_MIN_BUCKET_COUNT", "10"))
    MIN_BUCKET_SHARE: float = float(os.environ.get("SHIRTSORT_MIN_BUCKET_SHARE", "0.05"))
    CONFIDENCE_SCALE: float = 1.5
    MAX_CONFIDENCE: float = 0.95

    # Grouping
    GROUP_THRESHOLD: float = float(os.environ.get("SHIRTSORT_GROUP_THRESHOLD", "40"))

    # Fallback analysis
    DEFAULT_COLOR = (128, 128, 128)
    DEFAULT_CONFIDENCE: float = 0.5

    # Optional image classifier override
    CLASSIFIER_ENABLED: bool = bool(int(os.environ.get("SHIRTSORT_CLASSIFIER_ENABLED", "0")))
    CLASSIFIER_MODEL: str = os.environ.get("SHIRTSORT_CLASSIFIER_MODEL", "microsoft/resnet-50")
    CLASSIFIER_DEVICE: Optional[str] = os.environ.get("SHIRTSORT_CLASSIFIER_DEVICE")

    # CORS settings
    ALLOWED_ORIGINS: str = os.environ.get(
        "SHIRTSORT_ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:5173"
    )

    @classmethod
    def validate_threshold(cls, threshold: float) -> bool:
        """Validate grouping threshold."""
        return 0.0 < threshold <= 500.0

    @classmethod
    def validate_quant_step(cls, step: int) -> bool:
        """Validate quantization step."""
        return 1 <= step <= 128

    @classmethod
    def validate_work_size(cls, size: int) -> bool:
        """Validate working image size."""
        return 16 <= size <= 1024

    @classmethod
    def allowed_origins(cls) -> list:
        """Parse comma separated CORS origins."""
        return [o.strip() for o in cls.ALLOWED_ORIGINS.split(",") if o.strip()]


# Global config instance
config = Config()
