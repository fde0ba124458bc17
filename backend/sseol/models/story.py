"""Story structure and image descriptor models consumed by the placement engine.

Scenes and statements come from the upstream scene splitter, image descriptors
from the image analysis step. The placement engine treats all of them as
read-only, so every model here is frozen.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Statement(BaseModel):
    """One line of dialogue or narration inside a scene."""

    model_config = _CAMEL

    display_text: str = Field(..., description="Text shown on screen")
    text: str | None = Field(default=None, description="Raw text before display cleanup")
    id: str | None = None


class Scene(BaseModel):
    """An ordered group of statements forming one narrative beat."""

    model_config = _CAMEL

    statements: list[Statement] = Field(default_factory=list)
    id: str | None = None


class ImageDescriptor(BaseModel):
    """Short description of one uploaded image.

    ``index`` is the image's position in the upload list and the only identity
    key the pipeline uses for it.
    """

    model_config = _CAMEL

    index: int = Field(..., ge=0)
    description: str
    mood: str | None = None
    subjects: list[str] | None = None
    dominant_colors: list[str] | None = None


class CharacterInfo(BaseModel):
    model_config = _CAMEL

    name: str
    traits: str = ""
    mood1: str | None = None
    mood2: str | None = None
    age: str | None = None
    sex: str | None = None


class LocationInfo(BaseModel):
    model_config = _CAMEL

    location: str
    scene_index: int | None = Field(default=None, ge=0)


class PlacementContext(BaseModel):
    """Optional character/location context appended to the placement prompt."""

    model_config = _CAMEL

    characters: list[CharacterInfo] = Field(default_factory=list)
    locations: list[LocationInfo] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.characters and not self.locations
