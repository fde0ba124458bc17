"""Image placement pipeline: prompt, oracle call, validation and gap fill, with fallback.

State machine per call:
  no images           → empty
  no scenes           → fallback (single bucket)
  oracle failure      → fallback
  unusable JSON       → fallback
  zero valid entries  → fallback
  all images covered  → valid
  otherwise           → completed (gap fill)

Every path returns a total placement list; oracle and parse failures are
absorbed here and only show up in the usage metadata and the log.
"""

from __future__ import annotations

import logging
import time

from sseol.llm.oracle import PlacementOracle, output_token_budget
from sseol.llm.pricing import calculate_cost
from sseol.models.placement import LLMTokens, PlaceImagesResult, PlacementUsage
from sseol.models.story import ImageDescriptor, PlacementContext, Scene
from sseol.placement.completer import create_fallback_placements, fill_missing_placements
from sseol.placement.prompt_builder import build_placement_prompt
from sseol.placement.validator import parse_placement_document, validate_placements

logger = logging.getLogger(__name__)

# Raw response preview length in debug logs
_PREVIEW_CHARS = 500


def _fallback(
    descriptors: list[ImageDescriptor],
    scenes: list[Scene],
    usage: PlacementUsage,
    log: logging.Logger | logging.LoggerAdapter,
) -> PlaceImagesResult:
    log.info("Creating fallback placements for %d images", len(descriptors))
    return PlaceImagesResult(
        placements=create_fallback_placements(descriptors, scenes),
        usage=usage,
        outcome="fallback",
    )


async def place_images(
    scenes: list[Scene],
    descriptors: list[ImageDescriptor],
    oracle: PlacementOracle,
    *,
    context: PlacementContext | None = None,
    log: logging.Logger | logging.LoggerAdapter | None = None,
) -> PlaceImagesResult:
    """Assign every image to a scene (optionally to statements). Never raises."""
    log = log or logger
    empty_usage = PlacementUsage(model=oracle.model)

    if not descriptors:
        return PlaceImagesResult(placements=[], usage=empty_usage, outcome="empty")

    if not scenes:
        log.warning("place_images: no scenes provided, using fallback")
        return _fallback(descriptors, scenes, empty_usage, log)

    prompt = build_placement_prompt(scenes, descriptors, context)

    start = time.perf_counter()
    try:
        raw = await oracle.ainvoke(prompt, max_output_tokens=output_token_budget(len(descriptors)))
    except Exception as e:  # OracleUnavailable or an unwrapped provider error
        latency_ms = (time.perf_counter() - start) * 1000
        log.error("Image placement oracle failed: %s", e)
        return _fallback(
            descriptors,
            scenes,
            PlacementUsage(model=oracle.model, latency_ms=round(latency_ms, 1)),
            log,
        )

    usage = PlacementUsage(
        model=oracle.model,
        tokens=LLMTokens(
            input=raw.input_tokens,
            output=raw.output_tokens,
            total=raw.input_tokens + raw.output_tokens,
        ),
        cost=calculate_cost(oracle.model, raw.input_tokens, raw.output_tokens),
        latency_ms=round(raw.latency_ms, 1),
        finish_reason=raw.finish_reason,
    )

    raw_text = raw.raw_text or ""
    log.debug("Placement response (first %d chars): %s", _PREVIEW_CHARS, raw_text[:_PREVIEW_CHARS])

    entries = parse_placement_document(raw_text, log)
    if entries is None:
        return _fallback(descriptors, scenes, usage, log)

    placements = validate_placements(entries, scenes, len(descriptors), log)
    if not placements:
        log.warning("No valid placements found, using fallback")
        return _fallback(descriptors, scenes, usage, log)

    if len(placements) < len(descriptors):
        log.warning("Only %d/%d images placed, filling gaps", len(placements), len(descriptors))
        return PlaceImagesResult(
            placements=fill_missing_placements(placements, descriptors, scenes),
            usage=usage,
            outcome="completed",
        )

    log.info("Successfully placed %d images", len(placements))
    return PlaceImagesResult(placements=placements, usage=usage, outcome="valid")
