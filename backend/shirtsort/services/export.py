"""
ZIP export of grouped photos.

Entries are named ``{group name}_{n}_{filename}`` with ``n`` counting from 1
inside each group.
"""
import io
import zipfile
from typing import Sequence

from shirtsort.models import Photo, PhotoGroup


def export_filename(group: PhotoGroup, position: int, photo: Photo) -> str:
    """Archive entry name for the photo at 0-based ``position`` in ``group``."""
    # Keep only the base name of client supplied paths
    filename = (photo.filename or "").replace("\\", "/").rsplit("/", 1)[-1]
    if not filename:
        filename = f"{photo.id}.jpg"
    return f"{group.name}_{position + 1}_{filename}"


def export_groups_zip(groups: Sequence[PhotoGroup]) -> bytes:
    """Build a ZIP archive holding every photo of every group."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_STORED) as archive:
        for group in groups:
            for position, photo in enumerate(group.photos):
                archive.writestr(export_filename(group, position, photo), photo.data)
    return buffer.getvalue()


def export_group_zip(group: PhotoGroup) -> bytes:
    """ZIP archive of a single group."""
    return export_groups_zip([group])
