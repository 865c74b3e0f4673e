"""
ShirtSort v1 API Routes
Upload a batch of photos, get color analyses, day groups or a ZIP export.
"""
import time
from typing import List, Tuple

from fastapi import APIRouter, File, HTTPException, Query, UploadFile
from fastapi.responses import Response

from shirtsort.config import config
from shirtsort.schemas import (
    AnalyzeResponse, GroupResponse, MetricsResponse, PhotoGroupOut, PhotoOut
)
from shirtsort.services.analyzer import PhotoColorAnalyzer
from shirtsort.services.colors.classifier import build_classifier
from shirtsort.services.colors.utils import closest_color_name
from shirtsort.services.export import export_groups_zip
from shirtsort.services.imaging import read_upload
from shirtsort.services.pipeline import build_photos, sort_photos
from shirtsort.utils.ids import generate_request_id
from shirtsort.utils.logging import get_logger
from shirtsort.utils.metrics import get_metrics

router = APIRouter(prefix="/v1", tags=["Photos"])

# Built once per process; the classifier model itself loads on first use
analyzer = PhotoColorAnalyzer(classifier=build_classifier(config))


async def _read_batch(files: List[UploadFile]) -> List[Tuple[str, bytes]]:
    if not files:
        raise HTTPException(status_code=400, detail="No photos uploaded")
    if len(files) > config.MAX_PHOTOS:
        raise HTTPException(
            status_code=400,
            detail=f"Too many photos. Maximum per batch: {config.MAX_PHOTOS}"
        )
    return [await read_upload(f) for f in files]


def _validate_threshold(threshold: float) -> None:
    if not config.validate_threshold(threshold):
        raise HTTPException(status_code=400, detail="Invalid threshold value")


@router.post("/photos/analyze", response_model=AnalyzeResponse,
             summary="Analyze shirt colors",
             description="Detect the dominant shirt color of every uploaded photo")
async def analyze_photos(
    files: List[UploadFile] = File(..., description="Photos to analyze")
) -> AnalyzeResponse:
    request_id = generate_request_id("analyze")
    logger = get_logger()
    start_time = time.time()

    uploads = await _read_batch(files)
    photos = build_photos(uploads)
    analyses = analyzer.analyze_all([p.data for p in photos])
    for photo, analysis in zip(photos, analyses):
        photo.analysis = analysis

    get_metrics().record_timing("analyze_request", (time.time() - start_time) * 1000)
    logger.info(f"Analyzed {len(photos)} photos",
                extra={"request_id": request_id, "ms_total": (time.time() - start_time) * 1000})

    return AnalyzeResponse(
        request_id=request_id,
        photos=[PhotoOut.from_photo(p) for p in photos]
    )


@router.post("/photos/group", response_model=GroupResponse,
             summary="Group photos by shirt color",
             description="Analyze every photo and cluster them into day groups")
async def group_photos(
    files: List[UploadFile] = File(..., description="Photos to group, in capture order"),
    threshold: float = Query(config.GROUP_THRESHOLD, description="Color distance threshold")
) -> GroupResponse:
    request_id = generate_request_id("group")
    logger = get_logger()
    start_time = time.time()

    _validate_threshold(threshold)
    uploads = await _read_batch(files)
    photos, groups = sort_photos(uploads, analyzer=analyzer, threshold=threshold)

    get_metrics().record_timing("group_request", (time.time() - start_time) * 1000)
    logger.info(f"Grouped {len(photos)} photos into {len(groups)} groups",
                extra={"request_id": request_id, "ms_total": (time.time() - start_time) * 1000})

    return GroupResponse(
        request_id=request_id,
        threshold=threshold,
        photos=[PhotoOut.from_photo(p) for p in photos],
        groups=[
            PhotoGroupOut.from_group(g, closest_color_name(g.representative_color))
            for g in groups
        ]
    )


@router.post("/photos/export",
             summary="Export grouped photos",
             description="Group photos and download them as a ZIP archive",
             response_class=Response)
async def export_photos(
    files: List[UploadFile] = File(..., description="Photos to group and export"),
    threshold: float = Query(config.GROUP_THRESHOLD, description="Color distance threshold")
) -> Response:
    request_id = generate_request_id("export")
    logger = get_logger()

    _validate_threshold(threshold)
    uploads = await _read_batch(files)
    _photos, groups = sort_photos(uploads, analyzer=analyzer, threshold=threshold)
    archive = export_groups_zip(groups)

    logger.info(f"Exported {len(groups)} groups ({len(archive)} bytes)",
                extra={"request_id": request_id})

    return Response(
        content=archive,
        media_type="application/zip",
        headers={
            "Content-Disposition": 'attachment; filename="shirt-groups.zip"',
            "X-Request-ID": request_id
        }
    )


@router.get("/metrics", response_model=MetricsResponse, summary="Pipeline metrics")
async def metrics_summary() -> MetricsResponse:
    return MetricsResponse(**get_metrics().get_summary())
