"""Pydantic Settings — loads configuration from environment variables."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "extra": "ignore"}

    api_key: str

    llm_provider: str = "openai"
    llm_model: str = "gpt-4o"
    llm_temperature: float = 1.0
    llm_top_p: float = 1.0

    storage_dir: Path = Path("scans")
    max_chunk_size: int = Field(default=60000, gt=0)
    result_layout: Literal["chunks", "merged"] = "chunks"

    image_fetch_timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT

    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
