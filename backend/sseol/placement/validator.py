"""Lenient parsing and validation of the oracle's placement JSON.

Nothing here raises. A malformed document yields ``None`` and each malformed
entry is dropped on its own, so a partially correct response still contributes
whatever it got right; the completer fills the rest.
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any

from sseol.models.placement import SCENE_SCOPE, STATEMENT_SCOPE, Placement
from sseol.models.story import Scene

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.7
DEFAULT_REASON = "AI 분석 결과에 따른 배치"

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None


def parse_placement_document(raw_text: str, log: logging.Logger | logging.LoggerAdapter | None = None) -> list | None:
    """Return the raw ``placements`` array, or None if the document is unusable."""
    log = log or logger

    parsed = _loads(raw_text)
    if parsed is None:
        # Model wrapped the JSON in prose or a code fence
        match = _JSON_OBJECT.search(raw_text or "")
        if match is None:
            log.error("Placement response is not JSON: %r", (raw_text or "")[:200])
            return None
        parsed = _loads(match.group(0))
        if parsed is None:
            log.error("Failed to extract JSON from placement response")
            return None
        log.info("Extracted JSON object from placement response")

    if not isinstance(parsed, dict):
        log.error("Placement response is not a JSON object: %s", type(parsed).__name__)
        return None

    entries = parsed.get("placements")
    if not isinstance(entries, list):
        log.error("Placement response has no placements array")
        return None
    return entries


def _number(value: Any) -> float | None:
    """Finite JSON number as float; bools and everything else → None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def _index(value: Any) -> int | None:
    num = _number(value)
    if num is None or not num.is_integer():
        return None
    return int(num)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def _statement_indices(raw: Any, statement_count: int) -> list[int]:
    max_index = max(0, statement_count - 1)
    indices: list[int] = []
    if isinstance(raw, list):
        for item in raw:
            index = _index(item)
            if index is None or index < 0:
                continue
            indices.append(min(index, max_index))
    if not indices:
        return [0]
    return list(dict.fromkeys(indices))


def validate_placements(
    raw_entries: list,
    scenes: list[Scene],
    image_count: int,
    log: logging.Logger | logging.LoggerAdapter | None = None,
) -> list[Placement]:
    """Normalize raw entries into valid placements, first-seen wins per image."""
    log = log or logger
    scene_count = len(scenes)
    placements: list[Placement] = []
    used_images: set[int] = set()

    for raw in raw_entries:
        if not isinstance(raw, dict):
            log.warning("Invalid placement object: %r", raw)
            continue

        image_index = _index(raw.get("imageIndex"))
        if image_index is None or not 0 <= image_index < image_count:
            log.warning("Invalid imageIndex: %r", raw.get("imageIndex"))
            continue
        if image_index in used_images:
            log.warning("Duplicate imageIndex: %d", image_index)
            continue

        scene_index = 0
        raw_scene = _index(raw.get("sceneIndex"))
        if raw_scene is not None and scene_count > 0:
            scene_index = int(_clamp(raw_scene, 0, scene_count - 1))

        placement_type = STATEMENT_SCOPE if raw.get("type") == STATEMENT_SCOPE else SCENE_SCOPE

        confidence = DEFAULT_CONFIDENCE
        conf_num = _number(raw.get("confidence"))
        if conf_num is not None:
            confidence = _clamp(conf_num, 0.0, 1.0)

        reason = raw.get("reason")
        if not isinstance(reason, str) or not reason.strip():
            reason = DEFAULT_REASON

        statement_indices = None
        if placement_type == STATEMENT_SCOPE:
            statement_count = len(scenes[scene_index].statements) if scene_count else 0
            if statement_count == 0:
                # Nothing to narrow to; keep the range invariant
                placement_type = SCENE_SCOPE
            else:
                statement_indices = _statement_indices(raw.get("statementIndices"), statement_count)

        placements.append(Placement(
            image_index=image_index,
            type=placement_type,
            scene_index=scene_index,
            statement_indices=statement_indices,
            confidence=confidence,
            reason=reason,
        ))
        used_images.add(image_index)

    return placements
