"""Fixed prompt templates: placement system instruction and per-image analysis."""

from __future__ import annotations

IMAGE_PLACEMENT_SYSTEM_INSTRUCTION = """You are an expert content editor for Korean short-form video content.
Your task: Analyze images and story structure, then determine optimal placement for each image.

CRITICAL: You must respond with ONLY a valid JSON object. No explanations, no markdown, no code blocks."""

IMAGE_ANALYSIS_PROMPT = """Analyze this image for content placement purposes.

Return ONLY a JSON object with this structure:
{
  "description": "What's shown in the image (in Korean, 1-2 sentences)",
  "mood": "emotional tone (e.g., happy, sad, tense, calm, warm, cold)",
  "subjects": ["main", "subjects", "in", "image"],
  "dominantColors": ["#hex1", "#hex2", "#hex3"]
}

Rules:
- description: Korean description of the image content
- mood: Single English word for the emotional tone
- subjects: 2-5 main subjects as English words
- dominantColors: 2-3 hex color codes (e.g., "#FF5733", "#1A2B3C")

Respond with ONLY the JSON object, no other text."""

_TEMPLATES = {
    "placement_system": IMAGE_PLACEMENT_SYSTEM_INSTRUCTION,
    "analysis": IMAGE_ANALYSIS_PROMPT,
}


def get_all_templates() -> dict[str, str]:
    return dict(_TEMPLATES)
