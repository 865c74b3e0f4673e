"""
ShirtSort Imaging Utilities
Handles image decoding, normalization and upload checks.
"""
import io
from contextlib import contextmanager
from typing import Iterator, Tuple

import cv2
import numpy as np
from fastapi import HTTPException, UploadFile
from PIL import Image, ImageOps

from shirtsort.config import config
from shirtsort.errors import DecodeFailure


@contextmanager
def open_image(data: bytes) -> Iterator[Image.Image]:
    """
    Decode raw image bytes into an upright RGBA PIL image.

    The decoded bitmap is closed when the block exits, on success or failure.

    Args:
        data: Raw bytes of any raster format Pillow can read

    Yields:
        RGBA PIL image

    Raises:
        DecodeFailure: If the bytes cannot be decoded
    """
    if not data:
        raise DecodeFailure("Empty image data")

    try:
        source = Image.open(io.BytesIO(data))
        source.load()
    except Exception as e:
        raise DecodeFailure(f"Failed to decode image: {str(e)}") from e

    try:
        # Phone cameras store rotation in EXIF; torso regions assume upright
        image = ImageOps.exif_transpose(source).convert("RGBA")
    except Exception as e:
        raise DecodeFailure(f"Failed to normalize image: {str(e)}") from e
    finally:
        source.close()

    try:
        yield image
    finally:
        image.close()


def normalize_image(image: Image.Image, size: int = None) -> np.ndarray:
    """
    Build the fixed-size working copy used for region sampling.

    Args:
        image: RGBA PIL image (left untouched)
        size: Square edge length (default from config)

    Returns:
        (size, size, 4) uint8 RGBA array
    """
    if size is None:
        size = config.WORK_SIZE

    rgba = np.array(image.convert("RGBA"), dtype=np.uint8)
    return cv2.resize(rgba, (size, size), interpolation=cv2.INTER_AREA)


async def read_upload(file: UploadFile) -> Tuple[str, bytes]:
    """
    Read an uploaded photo, enforcing the size limit.

    Decoding is not attempted here: undecodable photos still get a (default)
    analysis further down the pipeline.

    Returns:
        Tuple of (filename, raw bytes)

    Raises:
        HTTPException: 400 for unreadable or oversized uploads
    """
    try:
        data = await file.read()
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Failed to read file: {str(e)}")

    if len(data) > config.MAX_FILE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    return file.filename or "", data
