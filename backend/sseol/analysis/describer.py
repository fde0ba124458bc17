"""Image analysis. One vision call per image, run through a bounded worker pool.

Every input index yields exactly one descriptor in input order. A failed call
is replaced by a placeholder descriptor for that index only; sibling workers
keep going.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol, TypeVar

from sseol.config import settings
from sseol.llm.model_router import build_chat_model, get_model_for_task, provider_for_model
from sseol.llm.oracle import message_text
from sseol.llm.prompts import IMAGE_ANALYSIS_PROMPT
from sseol.models.requests import ImagePayload
from sseol.models.story import ImageDescriptor

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class ImageDescriber(Protocol):
    async def adescribe(self, data_b64: str, mime_type: str) -> str:
        ...


class LangChainImageDescriber:
    """Vision model call returning the raw JSON-ish text for one image."""

    def __init__(self, model_id: str | None = None) -> None:
        self.model = model_id or get_model_for_task("analysis")

    def _image_block(self, data_b64: str, mime_type: str) -> dict:
        if provider_for_model(self.model) == "anthropic":
            return {
                "type": "image",
                "source": {"type": "base64", "media_type": mime_type, "data": data_b64},
            }
        return {"type": "image_url", "image_url": f"data:{mime_type};base64,{data_b64}"}

    async def adescribe(self, data_b64: str, mime_type: str) -> str:
        from langchain_core.messages import HumanMessage

        llm = build_chat_model(
            self.model,
            temperature=settings.analysis_temperature,
            max_output_tokens=settings.analysis_max_output_tokens,
        )
        message = HumanMessage(content=[
            self._image_block(data_b64, mime_type),
            {"type": "text", "text": IMAGE_ANALYSIS_PROMPT},
        ])
        response = await llm.ainvoke([message])
        return message_text(response.content)


def fallback_descriptor(index: int) -> ImageDescriptor:
    return ImageDescriptor(
        index=index,
        description=f"Image {index + 1}",
        subjects=[],
        dominant_colors=[],
    )


def _str_list(value) -> list[str] | None:
    if not isinstance(value, list):
        return None
    return [v for v in value if isinstance(v, str)]


def parse_descriptor(text: str, index: int) -> ImageDescriptor:
    """Parse one analysis response; raises ValueError when no JSON object is present."""
    match = _JSON_OBJECT.search(text or "")
    if match is None:
        raise ValueError(f"no JSON object in analysis response for image {index}")
    data = json.loads(match.group(0))
    if not isinstance(data, dict):
        raise ValueError(f"analysis response for image {index} is not an object")

    description = data.get("description")
    mood = data.get("mood")
    return ImageDescriptor(
        index=index,
        description=description if isinstance(description, str) and description else "No description available",
        mood=mood if isinstance(mood, str) and mood else None,
        subjects=_str_list(data.get("subjects")),
        dominant_colors=_str_list(data.get("dominantColors")),
    )


async def run_with_concurrency(
    items: Sequence[T],
    fn: Callable[[T], Awaitable[R]],
    limit: int,
) -> list[R]:
    """Run ``fn`` over ``items`` with at most ``limit`` calls in flight.

    Workers claim the next index from a shared cursor and write into the
    matching result slot, so output order is input order.
    """
    results: list[R | None] = [None] * len(items)
    cursor = iter(range(len(items)))

    async def worker() -> None:
        for i in cursor:
            results[i] = await fn(items[i])

    workers = [worker() for _ in range(min(max(limit, 1), len(items)))]
    await asyncio.gather(*workers)
    return results  # type: ignore[return-value]


async def describe_images(
    images: Sequence[ImagePayload],
    describer: ImageDescriber,
    concurrency: int | None = None,
) -> list[ImageDescriptor]:
    limit = concurrency or settings.analysis_concurrency

    async def describe_one(task: tuple[int, ImagePayload]) -> ImageDescriptor:
        index, image = task
        try:
            text = await describer.adescribe(image.data, image.mime_type)
            return parse_descriptor(text, index)
        except Exception as e:
            logger.warning("Failed to analyze image %d: %s", index, e)
            return fallback_descriptor(index)

    descriptors = await run_with_concurrency(list(enumerate(images)), describe_one, limit)
    logger.info("Analyzed %d images (concurrency=%d)", len(descriptors), limit)
    return descriptors
