"""POST /api/analyze-images — describe uploaded images for placement."""

from __future__ import annotations

import time

from fastapi import APIRouter, Depends

from sseol.analysis.describer import ImageDescriber, describe_images
from sseol.dependencies import get_image_describer
from sseol.models.requests import AnalyzeImagesRequest
from sseol.models.responses import AnalyzeImagesResponse

router = APIRouter()


@router.post(
    "/analyze-images",
    response_model=AnalyzeImagesResponse,
    response_model_exclude_none=True,
)
async def analyze_images(
    req: AnalyzeImagesRequest,
    describer: ImageDescriber = Depends(get_image_describer),
) -> AnalyzeImagesResponse:
    start = time.perf_counter()
    descriptors = await describe_images(req.images, describer)
    elapsed = (time.perf_counter() - start) * 1000
    return AnalyzeImagesResponse(
        image_descriptions=descriptors,
        processing_time_ms=round(elapsed, 1),
    )
