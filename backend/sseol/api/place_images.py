"""POST /api/place-images — decide where each analyzed image goes in the story."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from sseol.dependencies import get_placement_oracle
from sseol.llm.oracle import PlacementOracle
from sseol.models.placement import PlaceImagesResult
from sseol.models.requests import PlaceImagesRequest
from sseol.placement.engine import place_images as run_placement

router = APIRouter()


def _check_request(req: PlaceImagesRequest) -> None:
    if not req.scenes:
        raise HTTPException(status_code=400, detail="At least one scene is required")
    for i, desc in enumerate(req.image_descriptors):
        if desc.index != i:
            raise HTTPException(
                status_code=400,
                detail=f"imageDescriptors[{i}].index must be {i}",
            )


@router.post(
    "/place-images",
    response_model=PlaceImagesResult,
    response_model_exclude_none=True,
)
async def place_images(
    req: PlaceImagesRequest,
    oracle: PlacementOracle = Depends(get_placement_oracle),
) -> PlaceImagesResult:
    _check_request(req)

    # Missing keys and provider errors surface as fallback placements, not 5xx
    return await run_placement(
        req.scenes,
        req.image_descriptors,
        oracle,
        context=req.context,
    )
