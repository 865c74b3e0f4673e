"""
ShirtSort Identifier Utilities
Deterministic photo/group identifiers plus request IDs for tracing.
"""
import hashlib
import uuid
from datetime import datetime


def photo_id(index: int) -> str:
    """Sequential photo identifier for the 0-based position in a batch."""
    return f"photo-{index + 1:04d}"


def group_id(index: int) -> str:
    """Sequential group identifier for the 0-based creation index."""
    return f"group-{index + 1:03d}"


def group_name(index: int) -> str:
    """Human readable group name, "Day 1", "Day 2", ..."""
    return f"Day {index + 1}"


def content_fingerprint(data: bytes, length: int = 16) -> str:
    """
    SHA-256 fingerprint of raw image bytes.

    Args:
        data: Raw image bytes
        length: Number of hex characters to keep

    Returns:
        Truncated hex digest
    """
    return hashlib.sha256(data).hexdigest()[:length]


def generate_request_id(prefix: str = "sort") -> str:
    """
    Generate a unique request ID for log correlation.

    Returns:
        Unique request ID string
    """
    timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
    short_uuid = str(uuid.uuid4())[:8]
    return f"{prefix}-{timestamp}-{short_uuid}"
