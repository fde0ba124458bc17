"""Scenes + image descriptors (+ optional context) → placement instruction text.

Section order matters for model reliability:
  Constraints (primacy) → Story / Images / Context → Guides → JSON schema (recency)
"""

from __future__ import annotations

import json

from sseol.models.placement import SCENE_SCOPE, STATEMENT_SCOPE
from sseol.models.story import ImageDescriptor, PlacementContext, Scene


def _format_story(scenes: list[Scene]) -> str:
    blocks = []
    for si, scene in enumerate(scenes):
        lines = [f"Scene {si}:"]
        lines.extend(f"  [{ti}] {st.display_text}" for ti, st in enumerate(scene.statements))
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def _format_images(descriptors: list[ImageDescriptor]) -> str:
    blocks = []
    for img in descriptors:
        parts = [f"Image {img.index}:", f"  Description: {img.description}"]
        if img.mood:
            parts.append(f"  Mood: {img.mood}")
        if img.subjects:
            parts.append(f"  Subjects: {', '.join(img.subjects)}")
        blocks.append("\n".join(parts))
    return "\n\n".join(blocks)


def _worked_examples(scenes: list[Scene], descriptors: list[ImageDescriptor]) -> list[dict]:
    """Literal JSON examples built from the real first one or two images.

    Concrete values constrain the schema far better than type annotations,
    which the model tends to copy verbatim (e.g. "scene-scope" | "statement-scope").
    """
    examples: list[dict] = []
    if descriptors:
        examples.append({
            "imageIndex": descriptors[0].index,
            "type": SCENE_SCOPE,
            "sceneIndex": 0,
            "confidence": 0.85,
            "reason": "배경/분위기 이미지 - 씬 전체의 무드와 어울림 (scope: scene)",
        })
    if len(descriptors) <= 1 or not scenes:
        return examples

    # Prefer scene 1; otherwise the first scene that has statements to point at
    preferred = min(1, len(scenes) - 1)
    candidates = [preferred] + [i for i in range(len(scenes)) if i != preferred]
    target = next((i for i in candidates if scenes[i].statements), None)
    if target is not None:
        max_stmt = len(scenes[target].statements) - 1
        examples.append({
            "imageIndex": descriptors[1].index,
            "type": STATEMENT_SCOPE,
            "sceneIndex": target,
            "statementIndices": [min(1, max_stmt)],
            "confidence": 0.9,
            "reason": "특정 물체 이미지 - 해당 문장에서 언급된 내용과 직접 연결 (scope: statement)",
        })
    return examples


def _format_context(context: PlacementContext) -> str:
    sections = []
    if context.characters:
        lines = ["## Characters"]
        for ch in context.characters:
            details = [t for t in (ch.mood1, ch.mood2, ch.age, ch.sex) if t]
            traits = ", ".join(details) if details else ch.traits
            lines.append(f"- ({ch.name}) : ({traits})" if traits else f"- ({ch.name})")
        sections.append("\n".join(lines))
    if context.locations:
        lines = ["## Locations"]
        for loc in context.locations:
            if loc.scene_index is None:
                lines.append(f"- {loc.location}")
            else:
                lines.append(f"- Scene {loc.scene_index}: {loc.location}")
        sections.append("\n".join(lines))

    hints = ["## Context Matching"]
    if context.characters:
        hints.append(
            "- 이미지의 Subjects가 등장인물의 특성(나이, 성별, 분위기)과 맞으면 "
            "그 인물이 등장하는 문장에 배치 (statement)"
        )
        hints.append("- 이미지 Mood가 인물의 감정(mood1, mood2)과 어울리는 장면을 우선")
    if context.locations:
        hints.append("- 장소 이미지는 해당 장소의 씬 전체에 배치 (scene)")
        hints.append("- 이미지 Mood가 장소의 분위기와 맞는 씬을 우선")
    sections.append("\n".join(hints))
    return "\n\n".join(sections)


def build_placement_prompt(
    scenes: list[Scene],
    descriptors: list[ImageDescriptor],
    context: PlacementContext | None = None,
) -> str:
    """Render the user prompt asking the oracle for a JSON placement plan."""
    json_example = json.dumps(
        {"placements": _worked_examples(scenes, descriptors)},
        ensure_ascii=False,
        indent=2,
    )

    sections = [
        "## Task\nAnalyze the images below and determine where each should be placed in the story.",
        "## CRITICAL CONSTRAINTS (must follow)\n"
        f'1. One Scene can have at most 1 "{SCENE_SCOPE}" image\n'
        "2. One Statement can have at most 1 image\n"
        "3. On conflict, the image with higher confidence takes the position\n"
        "4. Every image must be placed exactly once",
        f"## Story Structure ({len(scenes)} scenes)\n\n{_format_story(scenes)}",
        f"## Images to Place ({len(descriptors)} images)\n\n{_format_images(descriptors)}",
    ]

    if context is not None and not context.is_empty:
        sections.append(_format_context(context))

    sections.append(
        "## Scope Selection Guide\n\n"
        f'### "{SCENE_SCOPE}":\n'
        "- 배경/분위기/장소 이미지\n"
        "- 씬 전체의 무드를 설정\n"
        "- 이미지 수가 씬 수보다 적을 때\n\n"
        f'### "{STATEMENT_SCOPE}":\n'
        "- 특정 물체/행동 이미지\n"
        "- 문장에서 직접 언급된 내용\n"
        "- statementIndices로 범위 지정 (단일: [2], 연속: [2, 3, 4])\n"
        "- 숏폼 특성상 적절한 노출 시간 고려"
    )
    sections.append(
        "## Placement Strategy\n\n"
        "1. 이미지 내용과 스토리 매칭:\n"
        f"   - 음식 이미지 → 음식 언급 문장 ({STATEMENT_SCOPE})\n"
        f"   - 장소 이미지 → 해당 씬 전체 ({SCENE_SCOPE})\n\n"
        "2. 서사 흐름 고려:\n"
        "   - 중요 이미지는 핵심 순간에\n"
        "   - 보조 이미지는 자연스럽게 분배"
    )
    sections.append(
        "## Output Requirements\n\n"
        f"Return a JSON object with this EXACT structure:\n{json_example}\n\n"
        "Field definitions:\n"
        f"- imageIndex: 이미지 번호 (0 to {len(descriptors) - 1})\n"
        f'- type: "{SCENE_SCOPE}" (씬 전체 배경) 또는 "{STATEMENT_SCOPE}" (특정 문장)\n'
        f"- sceneIndex: 씬 번호 (0 to {len(scenes) - 1})\n"
        f'- statementIndices: [type="{STATEMENT_SCOPE}"일 때 필수] 해당 문장 인덱스 배열\n'
        "- confidence: 적합도 (0.0 to 1.0)\n"
        "- reason: 한국어로 배치 이유 설명"
    )
    sections.append("Respond with ONLY the JSON object, no other text.")

    return "\n\n".join(sections)
