"""Deterministic completion of partial placements and full fallback distribution."""

from __future__ import annotations

import math

from sseol.models.placement import SCENE_SCOPE, Placement
from sseol.models.story import ImageDescriptor, Scene

GAP_FILL_CONFIDENCE = 0.5
GAP_FILL_REASON = "자동 배치 (AI 분석 보완)"
FALLBACK_CONFIDENCE = 0.3
FALLBACK_REASON = "Fallback: 자동 분배"
FALLBACK_NO_SCENES_REASON = "Fallback: 씬 정보 없음"


def proportional_scene_index(image_index: int, image_count: int, scene_count: int) -> int:
    """floor(i / N * S), clamped to the last scene. Shared by gap fill and fallback."""
    if scene_count <= 0 or image_count <= 0:
        return 0
    target = math.floor(image_index / image_count * scene_count)
    return max(0, min(target, scene_count - 1))


def fill_missing_placements(
    placements: list[Placement],
    descriptors: list[ImageDescriptor],
    scenes: list[Scene],
) -> list[Placement]:
    """Add a scene-scope placement for every image the oracle left out.

    Unused scenes are taken lowest-first; once every scene holds an image the
    rest are spread proportionally by image position.
    """
    placed = {p.image_index for p in placements}
    used_scenes = {p.scene_index for p in placements}
    scene_count = len(scenes)
    result = list(placements)

    for i in range(len(descriptors)):
        if i in placed:
            continue

        unused = next((s for s in range(scene_count) if s not in used_scenes), None)
        if unused is not None:
            target = unused
        else:
            target = proportional_scene_index(i, len(descriptors), scene_count)

        result.append(Placement(
            image_index=i,
            type=SCENE_SCOPE,
            scene_index=target,
            confidence=GAP_FILL_CONFIDENCE,
            reason=GAP_FILL_REASON,
        ))
        used_scenes.add(target)

    return result


def create_fallback_placements(
    descriptors: list[ImageDescriptor],
    scenes: list[Scene],
) -> list[Placement]:
    """Spread every image evenly over the scenes without asking the oracle."""
    image_count = len(descriptors)
    if not scenes:
        return [
            Placement(
                image_index=i,
                type=SCENE_SCOPE,
                scene_index=0,
                confidence=FALLBACK_CONFIDENCE,
                reason=FALLBACK_NO_SCENES_REASON,
            )
            for i in range(image_count)
        ]

    return [
        Placement(
            image_index=i,
            type=SCENE_SCOPE,
            scene_index=proportional_scene_index(i, image_count, len(scenes)),
            confidence=FALLBACK_CONFIDENCE,
            reason=FALLBACK_REASON,
        )
        for i in range(image_count)
    ]
