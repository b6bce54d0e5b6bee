"""Settings for the research agent: environment, .env and an optional YAML overlay."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class ResearchConfig(BaseModel):
    """Research loop limits and reasoning-service parameters."""

    max_tool_calls: int = 15
    enable_thinking: bool = True
    thinking_budget: int = 10000
    model: Literal["opus", "sonnet"] = "opus"
    max_tokens: int = 4096
    max_tokens_with_thinking: int = 16000  # Must exceed thinking_budget
    finalize_warning_threshold: int = 3
    preview_chars: int = 5000  # Tool results above this are truncated
    transcript_preview_chars: int = 2000
    persist_scratchpads: bool = True
    save_transcripts: bool = True

    @model_validator(mode="after")
    def check_thinking_fits(self) -> "ResearchConfig":
        """Anthropic rejects requests whose thinking budget is not below max_tokens."""
        if self.enable_thinking and self.thinking_budget >= self.max_tokens_with_thinking:
            raise ValueError(
                f"thinking_budget ({self.thinking_budget}) must be less than "
                f"max_tokens_with_thinking ({self.max_tokens_with_thinking})"
            )
        return self


class SearchConfig(BaseModel):
    """Grok search parameters."""

    max_results: int = 20
    fallback_days_back: int = 7
    max_citations_shown: int = 10


class Settings(BaseSettings):
    """Process-wide settings: credentials, data location and tunables."""

    data_dir: Path = Path("data")

    # Collaborator credentials; an empty key disables that collaborator
    anthropic_api_key: str = ""
    xai_api_key: str = ""
    gemini_api_key: str = ""
    logfire_token: str = ""

    research: ResearchConfig = Field(default_factory=ResearchConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("data_dir", mode="after")
    @classmethod
    def absolute_data_dir(cls, v: Path) -> Path:
        return v.expanduser().resolve()

    @property
    def scratchpad_dir(self) -> Path:
        return self.data_dir / "scratchpads"

    @property
    def transcript_dir(self) -> Path:
        return self.data_dir / "transcripts"

    @property
    def config_path(self) -> Path:
        return self.data_dir / "config.yaml"

    def load_yaml_config(self) -> None:
        """Overlay ``<data_dir>/config.yaml`` onto the research and search sections.

        Keys present in the file replace the current values; everything else
        keeps its default or environment value. Unknown top-level sections are
        logged and skipped.
        """
        path = self.config_path
        if not path.exists():
            logger.debug(f"No config file at {path}, keeping defaults")
            return

        try:
            overlay = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            logger.error(f"Invalid YAML in {path}: {e}")
            raise

        if not isinstance(overlay, dict):
            raise ValueError(f"{path} must contain a mapping, got {type(overlay).__name__}")

        for name, values in overlay.items():
            if name not in _YAML_SECTIONS:
                logger.warning(f"Ignoring unknown config section '{name}' in {path}")
                continue
            current = getattr(self, name)
            merged = {**current.model_dump(), **(values or {})}
            setattr(self, name, type(current).model_validate(merged))

        logger.info(f"Applied config overrides from {path}")


_YAML_SECTIONS = ("research", "search")


@lru_cache()
def get_settings() -> Settings:
    """Settings from env/.env with the YAML overlay applied, built once per process."""
    settings = Settings()
    settings.load_yaml_config()
    return settings
