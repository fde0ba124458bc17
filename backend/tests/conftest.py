"""Shared test fixtures."""

from __future__ import annotations

import json

import pytest

from sseol.llm.oracle import OracleResult, OracleUnavailable
from sseol.models.story import ImageDescriptor, Scene, Statement


def make_scenes(*statement_counts: int) -> list[Scene]:
    return [
        Scene(statements=[
            Statement(display_text=f"씬 {si} 문장 {ti}") for ti in range(count)
        ])
        for si, count in enumerate(statement_counts)
    ]


def make_descriptors(count: int) -> list[ImageDescriptor]:
    return [
        ImageDescriptor(
            index=i,
            description=f"이미지 {i} 설명",
            mood="calm" if i % 2 == 0 else None,
            subjects=["cafe", "coffee"] if i == 0 else None,
        )
        for i in range(count)
    ]


class FakeOracle:
    """Placement oracle double: returns canned text or raises, and records prompts."""

    def __init__(
        self,
        raw_text: str | None = "",
        *,
        fail: bool = False,
        input_tokens: int = 1200,
        output_tokens: int = 300,
        finish_reason: str | None = "STOP",
        model: str = "gemini-2.5-flash",
    ) -> None:
        self.model = model
        self.raw_text = raw_text
        self.fail = fail
        self.input_tokens = input_tokens
        self.output_tokens = output_tokens
        self.finish_reason = finish_reason
        self.prompts: list[str] = []
        self.budgets: list[int] = []

    @classmethod
    def returning(cls, placements: list, **kwargs) -> "FakeOracle":
        return cls(json.dumps({"placements": placements}, ensure_ascii=False), **kwargs)

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def ainvoke(self, prompt: str, *, max_output_tokens: int) -> OracleResult:
        self.prompts.append(prompt)
        self.budgets.append(max_output_tokens)
        if self.fail:
            raise OracleUnavailable("503 Service Unavailable")
        return OracleResult(
            raw_text=self.raw_text,
            input_tokens=self.input_tokens,
            output_tokens=self.output_tokens,
            latency_ms=42.0,
            finish_reason=self.finish_reason,
        )


@pytest.fixture
def two_scenes() -> list[Scene]:
    # Scene 1 has 3 statements
    return make_scenes(2, 3)


@pytest.fixture
def four_scenes() -> list[Scene]:
    return make_scenes(3, 2, 4, 1)


@pytest.fixture
def three_images() -> list[ImageDescriptor]:
    return make_descriptors(3)
