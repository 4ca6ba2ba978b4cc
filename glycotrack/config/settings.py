"""
Runtime Settings

All deployment-dependent configuration is gathered into a single ``Settings``
object built once at startup and handed to the collaborators that need it.
Nothing else in the package reads the process environment or the .env file.
"""
import os
from pathlib import Path
from typing import Dict, List, Optional, Union

from dotenv import dotenv_values, find_dotenv
from pydantic import BaseModel, Field, field_validator

from glycotrack.config.constants import (
    ANTHROPIC_API_VERSION,
    ANTHROPIC_BASE_URL,
    DEFAULT_ANTHROPIC_MODEL,
    DEFAULT_HBA1C_HISTORY_LIMIT,
    DEFAULT_LLM_TIMEOUT_SECONDS,
    DEFAULT_PORT,
    DEFAULT_SUMMARY_HISTORY_LIMIT,
)
from glycotrack.utils.logger import DEFAULT_LOG_LEVEL, LOG_LEVELS, logger


class AnthropicSettings(BaseModel):
    """Connection details for the Anthropic Messages API."""

    api_key: Optional[str] = Field(None, description="Anthropic API key")
    model: str = Field(DEFAULT_ANTHROPIC_MODEL, description="Model used for summaries")
    base_url: str = Field(ANTHROPIC_BASE_URL, description="API base URL")
    api_version: str = Field(ANTHROPIC_API_VERSION, description="Value of the anthropic-version header")
    timeout: float = Field(DEFAULT_LLM_TIMEOUT_SECONDS, description="Request timeout in seconds")


class SupabaseSettings(BaseModel):
    """Connection details for the Supabase project holding reports and readings."""

    url: Optional[str] = Field(None, description="Supabase project URL")
    service_key: Optional[str] = Field(None, description="Supabase service role key")

    @property
    def configured(self) -> bool:
        return bool(self.url and self.service_key)


class Settings(BaseModel):
    """Top level application settings."""

    anthropic: AnthropicSettings = Field(default_factory=AnthropicSettings)
    supabase: SupabaseSettings = Field(default_factory=SupabaseSettings)
    frontend_origins: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")
    port: int = Field(DEFAULT_PORT, description="Port used when running with uvicorn directly")
    history_limit: int = Field(DEFAULT_HBA1C_HISTORY_LIMIT, gt=0, description="Max readings used for trends")
    summaries_limit: int = Field(DEFAULT_SUMMARY_HISTORY_LIMIT, gt=0, description="Max prior summaries returned")
    log_level: str = Field(DEFAULT_LOG_LEVEL, description="Level of the application logger")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @classmethod
    def from_env(cls, env_file: Optional[Union[str, Path]] = None) -> "Settings":
        """
        Build settings from a .env file and the process environment.

        Variables set in the process environment win over the file.

        Args:
            env_file: Path to the .env file. If None, the nearest .env above
                the working directory is used, when there is one.
        """
        if env_file is None:
            found = find_dotenv(usecwd=True)
            env_file = Path(found) if found else None

        values: Dict[str, Optional[str]] = {}
        if env_file is not None and Path(env_file).is_file():
            values.update(dotenv_values(env_file))
            logger.info(f"Environment loaded from: {env_file}")
        else:
            logger.warning("No .env file found. Using existing environment variables.")
        values.update(os.environ)

        def get(name: str) -> Optional[str]:
            value = values.get(name)
            return value.strip() if value and value.strip() else None

        origins = get("FRONTEND_ORIGIN")
        return cls(
            anthropic=AnthropicSettings(
                api_key=get("ANTHROPIC_API_KEY"),
                model=get("ANTHROPIC_MODEL") or DEFAULT_ANTHROPIC_MODEL,
                base_url=get("ANTHROPIC_BASE_URL") or ANTHROPIC_BASE_URL,
                timeout=float(get("ANTHROPIC_TIMEOUT") or DEFAULT_LLM_TIMEOUT_SECONDS),
            ),
            supabase=SupabaseSettings(
                url=get("SUPABASE_URL"),
                service_key=get("SUPABASE_SERVICE_KEY"),
            ),
            frontend_origins=[o.strip() for o in origins.split(",") if o.strip()] if origins else ["*"],
            port=int(get("PORT") or DEFAULT_PORT),
            history_limit=int(get("HBA1C_HISTORY_LIMIT") or DEFAULT_HBA1C_HISTORY_LIMIT),
            summaries_limit=int(get("SUMMARY_HISTORY_LIMIT") or DEFAULT_SUMMARY_HISTORY_LIMIT),
            log_level=get("LOG_LEVEL") or DEFAULT_LOG_LEVEL,
        )
