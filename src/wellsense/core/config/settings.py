"""Application settings loaded from environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """WellSense server configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Server
    # Loopback by default; there is no auth layer in front of the tools.
    wellsense_host: str = "127.0.0.1"
    wellsense_port: int = 8001
    wellsense_log_level: str = "info"
    wellsense_allow_insecure_bind: bool = False

    # Analyst LLM
    llm_provider: Literal["openai", "anthropic", "mock"] = "openai"
    openai_api_key: str = ""
    openai_model: str = ""
    # Any OpenAI-compatible chat completions endpoint (e.g. https://api.mistral.ai/v1)
    openai_base_url: str = ""
    anthropic_api_key: str = ""
    anthropic_model: str = ""
    analyst_max_tokens: int = 2000
    analyst_timeout_seconds: float = 60.0

    # Storage (wellness data bank)
    db_path: str = "~/.wellsense/wellness.db"
    encryption_key: str = ""

    # Practice catalog
    seed_practice_catalog: bool = True
    practice_catalog_path: str = ""


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
