"""Placement output models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SCENE_SCOPE = "scene-scope"
STATEMENT_SCOPE = "statement-scope"

PlacementType = Literal["scene-scope", "statement-scope"]

# Which terminal state of the placement run produced the result.
Outcome = Literal["empty", "valid", "completed", "fallback"]


class Placement(BaseModel):
    """One image assigned to one scene, optionally narrowed to statements."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    image_index: int
    type: PlacementType = SCENE_SCOPE
    scene_index: int
    statement_indices: list[int] | None = None  # only for statement-scope
    confidence: float = Field(..., ge=0.0, le=1.0)
    reason: str = Field(..., min_length=1)


class LLMTokens(BaseModel):
    input: int = 0
    output: int = 0
    total: int = 0


class LLMCost(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    input: float = 0.0
    output: float = 0.0
    total: float = 0.0
    cache_discount: float | None = None
    currency: Literal["USD"] = "USD"


class PlacementUsage(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    model: str
    tokens: LLMTokens = Field(default_factory=LLMTokens)
    cost: LLMCost = Field(default_factory=LLMCost)
    latency_ms: float = 0.0
    finish_reason: str | None = None


class PlaceImagesResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    placements: list[Placement] = Field(default_factory=list)
    usage: PlacementUsage
    outcome: Outcome = "valid"
