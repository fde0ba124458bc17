"""Task → model selection and LangChain chat model construction."""

from __future__ import annotations

from sseol.config import settings

_TASK_MODEL_MAP = {
    "placement": "placement",
    "analysis": "vision",
}


def get_model_for_task(task: str) -> str:
    tier = _TASK_MODEL_MAP.get(task, "placement")
    if tier == "vision":
        return settings.model_vision
    return settings.model_placement


def provider_for_model(model_id: str) -> str:
    if model_id.startswith("gemini"):
        return "gemini"
    if model_id.startswith("claude") or model_id.startswith("anthropic/"):
        return "anthropic"
    return "openrouter"


def missing_key_message(model_id: str) -> str | None:
    """Return a configuration error for ``model_id``, or None when it can be called."""
    provider = provider_for_model(model_id)
    if provider == "gemini" and not settings.google_api_key:
        return "GOOGLE_API_KEY not configured"
    if provider == "anthropic" and not settings.anthropic_api_key:
        return "ANTHROPIC_API_KEY not configured"
    if provider == "openrouter":
        return f"No chat provider available for model {model_id!r}"
    return None


def build_chat_model(
    model_id: str,
    *,
    temperature: float,
    max_output_tokens: int,
    json_mode: bool = False,
):
    """Build a LangChain chat model for ``model_id``.

    Gemini gets native JSON-only output when ``json_mode`` is set. Claude has
    no equivalent switch, so JSON-only output relies on the system instruction.
    """
    missing = missing_key_message(model_id)
    if missing:
        raise ValueError(missing)

    provider = provider_for_model(model_id)
    if provider == "gemini":
        from langchain_google_genai import ChatGoogleGenerativeAI

        kwargs = {}
        if json_mode:
            kwargs["response_mime_type"] = "application/json"
        return ChatGoogleGenerativeAI(
            model=model_id,
            google_api_key=settings.google_api_key,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
            **kwargs,
        )

    from langchain_anthropic import ChatAnthropic

    return ChatAnthropic(
        model=model_id.removeprefix("anthropic/"),
        api_key=settings.anthropic_api_key,
        temperature=temperature,
        max_tokens=max_output_tokens,
    )
