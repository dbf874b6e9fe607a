"""
Configuration Management

Environment and .env settings for the client and the ``ud`` CLI, plus the
small JSON file the CLI keeps in the user's home directory.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from .telemetry import DEFAULT_ENDPOINT

logger = logging.getLogger(__name__)

PROVIDER_ALIASES = {"claude": "anthropic"}


def normalize_provider(value: str) -> str:
    value = value.strip().lower()
    return PROVIDER_ALIASES.get(value, value)


class Settings(BaseSettings):
    """Client settings from UD_* variables and per-provider API keys"""

    model_config = SettingsConfigDict(
        env_prefix="UD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    provider: str = "anthropic"
    model: Optional[str] = None
    base_url: Optional[str] = None
    temperature: Optional[float] = Field(default=None, ge=0, le=2)
    max_tokens: Optional[int] = Field(default=None, ge=1)
    timeout: float = Field(default=60.0, gt=0)

    # Overrides the per-provider key for the selected provider
    api_key: SecretStr = Field(default=SecretStr(""))

    anthropic_api_key: SecretStr = Field(default=SecretStr(""), alias="ANTHROPIC_API_KEY")
    openai_api_key: SecretStr = Field(default=SecretStr(""), alias="OPENAI_API_KEY")
    qwen_api_key: SecretStr = Field(default=SecretStr(""), alias="QWEN_API_KEY")

    # Telemetry (opt-out)
    telemetry_enabled: bool = True
    telemetry_endpoint: str = DEFAULT_ENDPOINT

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"

    # CLI state
    config_dir: Path = Field(default_factory=lambda: Path.home() / ".universal-developer")

    @field_validator("provider", mode="before")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        return normalize_provider(v)

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    def api_key_for(self, provider: str) -> str:
        """API key for a provider, empty string when none is configured"""
        provider = normalize_provider(provider)
        if provider == self.provider and self.api_key.get_secret_value():
            return self.api_key.get_secret_value()

        keys = {
            "anthropic": self.anthropic_api_key,
            "openai": self.openai_api_key,
            "qwen": self.qwen_api_key,
        }
        secret = keys.get(provider)
        return secret.get_secret_value() if secret else ""

    @property
    def config_file(self) -> Path:
        return self.config_dir / "config.json"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


def load_env_files(*paths: Union[str, Path]) -> Settings:
    """Load extra .env files into the environment and rebuild settings"""
    from dotenv import load_dotenv

    for path in paths:
        if Path(path).exists():
            load_dotenv(path, override=True)
        else:
            logger.debug(f"Env file not found: {path}")

    get_settings.cache_clear()
    return get_settings()


# =============================================================================
# CLI user config (~/.universal-developer/config.json)
# =============================================================================


class UserConfig(BaseModel):
    """Persisted CLI choices; camelCase keys on disk"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    default_provider: str = "anthropic"
    enable_telemetry: bool = True
    api_keys: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def load(cls, path: Path) -> "UserConfig":
        """Read the config file, falling back to defaults when absent or unreadable"""
        if not path.exists():
            return cls()
        try:
            return cls.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning(f"Error loading config file {path}: {e}")
            return cls()

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
