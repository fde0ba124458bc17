"""Placement oracle: one JSON-mode chat call returning raw text plus usage.

The engine depends only on the ``PlacementOracle`` protocol so tests can swap
in doubles that return malformed, partial or failing responses.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Protocol

from sseol.config import settings
from sseol.llm.model_router import build_chat_model, get_model_for_task
from sseol.llm.prompts import IMAGE_PLACEMENT_SYSTEM_INSTRUCTION

logger = logging.getLogger(__name__)

# Fixed allowance for the JSON wrapper and the model's own preamble tokens.
_BUDGET_OVERHEAD = 512


class OracleUnavailable(Exception):
    """The oracle could not produce a response (network, auth, provider error)."""


@dataclass
class OracleResult:
    raw_text: str
    input_tokens: int = 0
    output_tokens: int = 0
    latency_ms: float = 0.0
    finish_reason: str | None = None


class PlacementOracle(Protocol):
    model: str

    async def ainvoke(self, prompt: str, *, max_output_tokens: int) -> OracleResult:
        ...


def output_token_budget(image_count: int) -> int:
    """Output cap proportional to the number of placements requested."""
    wanted = image_count * settings.placement_tokens_per_image + _BUDGET_OVERHEAD
    return min(
        settings.placement_max_output_tokens,
        max(settings.placement_min_output_tokens, wanted),
    )


def message_text(content: Any) -> str:
    """Flatten LangChain message content (str or list of blocks) into text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return str(content)


def result_from_message(message: Any, latency_ms: float) -> OracleResult:
    usage = getattr(message, "usage_metadata", None) or {}
    metadata = getattr(message, "response_metadata", None) or {}
    finish_reason = metadata.get("finish_reason") or metadata.get("stop_reason")
    return OracleResult(
        raw_text=message_text(message.content),
        input_tokens=int(usage.get("input_tokens", 0) or 0),
        output_tokens=int(usage.get("output_tokens", 0) or 0),
        latency_ms=latency_ms,
        finish_reason=str(finish_reason) if finish_reason else None,
    )


class LangChainPlacementOracle:
    """Placement oracle backed by a LangChain chat model in JSON-only mode."""

    def __init__(self, model_id: str | None = None) -> None:
        self.model = model_id or get_model_for_task("placement")

    async def ainvoke(self, prompt: str, *, max_output_tokens: int) -> OracleResult:
        from langchain_core.messages import HumanMessage, SystemMessage

        start = time.perf_counter()
        try:
            llm = build_chat_model(
                self.model,
                temperature=settings.placement_temperature,
                max_output_tokens=max_output_tokens,
                json_mode=True,
            )
            response = await llm.ainvoke([
                SystemMessage(content=IMAGE_PLACEMENT_SYSTEM_INSTRUCTION),
                HumanMessage(content=prompt),
            ])
        except Exception as e:
            raise OracleUnavailable(f"{self.model}: {e}") from e

        latency_ms = (time.perf_counter() - start) * 1000
        result = result_from_message(response, latency_ms)
        logger.debug(
            "Placement oracle %s: %d in / %d out tokens in %.0fms (finish=%s)",
            self.model,
            result.input_tokens,
            result.output_tokens,
            latency_ms,
            result.finish_reason,
        )
        return result
