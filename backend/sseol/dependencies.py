"""FastAPI dependency injection."""

from __future__ import annotations

from sseol.analysis.describer import ImageDescriber, LangChainImageDescriber
from sseol.config import Settings, settings
from sseol.llm.oracle import LangChainPlacementOracle, PlacementOracle


def get_settings() -> Settings:
    return settings


def get_placement_oracle() -> PlacementOracle:
    return LangChainPlacementOracle()


def get_image_describer() -> ImageDescriber:
    return LangChainImageDescriber()
