"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    google_api_key: str = ""
    anthropic_api_key: str = ""
    sseol_env: str = "development"
    sseol_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Model routing
    model_placement: str = "gemini-2.5-flash"
    model_vision: str = "gemini-2.5-flash"

    # Placement oracle. Output cap scales with image count; a small fixed
    # cap truncates the JSON for large stories.
    placement_temperature: float = 0.3
    placement_min_output_tokens: int = 8192
    placement_tokens_per_image: int = 160
    placement_max_output_tokens: int = 65536

    # Image analysis
    analysis_concurrency: int = 8
    analysis_temperature: float = 0.3
    analysis_max_output_tokens: int = 1024

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
