"""
Batch entry points: analyze a batch of photos, then group them by color.

Each call is independent; nothing is cached between batches.
"""
from typing import List, Optional, Sequence, Tuple, Union

from shirtsort.models import ColorAnalysis, Photo, PhotoGroup
from shirtsort.services.analyzer import PhotoColorAnalyzer, ProgressCallback
from shirtsort.services.grouping import GroupingEngine
from shirtsort.utils.ids import photo_id

Upload = Union[bytes, Tuple[str, bytes]]
AnalyzedInput = Union[Photo, Tuple[bytes, Optional[ColorAnalysis]]]


def analyze_all(images: Sequence[bytes],
                analyzer: Optional[PhotoColorAnalyzer] = None,
                on_progress: Optional[ProgressCallback] = None) -> List[ColorAnalysis]:
    """One ColorAnalysis per image, in input order. Never raises."""
    analyzer = analyzer or PhotoColorAnalyzer()
    return analyzer.analyze_all(images, on_progress=on_progress)


def build_photos(uploads: Sequence[Upload]) -> List[Photo]:
    """Wrap raw uploads as Photos with sequential ids."""
    photos = []
    for index, upload in enumerate(uploads):
        if isinstance(upload, tuple):
            filename, data = upload
        else:
            filename, data = None, upload
        photos.append(Photo(id=photo_id(index), data=data, filename=filename or None))
    return photos


def group_by_color(items: Sequence[AnalyzedInput],
                   threshold: float = None) -> List[PhotoGroup]:
    """
    Group analyzed photos by color.

    Args:
        items: Photos, or (raw bytes, analysis) pairs
        threshold: Color distance below which a photo joins a group

    Returns:
        Groups sorted by descending size
    """
    photos = []
    for index, item in enumerate(items):
        if isinstance(item, Photo):
            photos.append(item)
        else:
            data, analysis = item
            photos.append(Photo(id=photo_id(index), data=data, analysis=analysis))
    return GroupingEngine(threshold).group(photos)


def sort_photos(uploads: Sequence[Upload],
                analyzer: Optional[PhotoColorAnalyzer] = None,
                threshold: float = None,
                on_progress: Optional[ProgressCallback] = None) -> Tuple[List[Photo], List[PhotoGroup]]:
    """
    Full run: analyze every upload, then group.

    Returns:
        Tuple of (photos in input order with analyses attached, groups)
    """
    photos = build_photos(uploads)
    analyses = analyze_all([p.data for p in photos], analyzer, on_progress)
    for photo, analysis in zip(photos, analyses):
        photo.analysis = analysis
    groups = GroupingEngine(threshold).group(photos)
    return photos, groups
