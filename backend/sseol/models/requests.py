"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sseol.models.story import ImageDescriptor, PlacementContext, Scene


class PlaceImagesRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    scenes: list[Scene] = Field(..., description="Scene structure from the scene splitter")
    image_descriptors: list[ImageDescriptor] = Field(
        ..., description="Per-image descriptions, index = upload position",
    )
    context: PlacementContext | None = Field(
        default=None, description="Optional character/location context",
    )


class ImagePayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    data: str = Field(..., description="Base64 image bytes without data URL prefix")
    mime_type: str = Field(default="image/jpeg")


class AnalyzeImagesRequest(BaseModel):
    images: list[ImagePayload] = Field(..., description="Images in upload order")
