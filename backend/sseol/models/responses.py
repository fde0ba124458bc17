"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sseol.models.story import ImageDescriptor


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    models: dict[str, str] = Field(default_factory=dict)


class AnalyzeImagesResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    image_descriptions: list[ImageDescriptor] = Field(default_factory=list)
    processing_time_ms: float = 0.0
