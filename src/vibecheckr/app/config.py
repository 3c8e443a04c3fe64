from __future__ import annotations

from pathlib import Path
from typing import Literal

from platformdirs import PlatformDirs
from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


APP_NAME = "vibecheckr"


def _default_home() -> Path:
    """Get default home directory using platformdirs."""
    return Path(PlatformDirs(appname=APP_NAME, appauthor=False).user_cache_dir)


class DirectoryConfig(BaseModel):
    """Directory configuration with computed paths."""

    home: Path = Field(
        default_factory=_default_home,
        description="Base directory for all vibecheckr data",
    )

    @computed_field
    @property
    def workspaces_dir(self) -> Path:
        """Parent of the per-request working directories."""
        path = self.home / "workspaces"
        path.mkdir(parents=True, exist_ok=True)
        return path

    @computed_field
    @property
    def logs_dir(self) -> Path:
        """Logs directory for analysis logs."""
        path = self.home / "logs"
        path.mkdir(parents=True, exist_ok=True)
        return path


class LLMConfig(BaseModel):
    """LLM configuration."""

    model_config = ConfigDict(protected_namespaces=())

    api_key: str | None = Field(
        default=None,
        description="LLM API key (Anthropic or OpenAI)",
    )

    provider_name: Literal["anthropic", "openai"] = Field(
        default="anthropic",
        description="LLM provider (anthropic, openai)",
    )

    model_name: str = Field(
        default="claude-3-5-sonnet-20241022",
        description="LLM model name",
    )

    temperature: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Sampling temperature for analysis calls (corrective retries always use 0.0)",
    )

    max_output_tokens: int = Field(
        default=4000,
        gt=0,
        description="Maximum tokens per reply",
    )


class AnalysisConfig(BaseModel):
    """Analysis-specific settings."""

    strategy: Literal["single-pass", "multi-agent"] = Field(
        default="multi-agent",
        description="LLM strategy used when the scanners report nothing",
    )

    max_files: int = Field(
        default=3,
        gt=0,
        le=5,
        description="Number of discovered files sent to the LLM",
    )

    max_file_chars: int = Field(
        default=2000,
        gt=0,
        description="Per-file character cap (longer files are truncated with a marker)",
    )


class ScannerConfig(BaseModel):
    """Static analyzer settings."""

    enabled: list[str] = Field(
        default_factory=lambda: ["semgrep", "gitleaks", "eslint"],
        description="Scanners to run, in order",
    )

    timeout_seconds: int = Field(
        default=30,
        gt=0,
        description="Per-scanner subprocess timeout",
    )


class AcquisitionConfig(BaseModel):
    """Repository acquisition settings."""

    clone_timeout_seconds: int = Field(
        default=120,
        gt=0,
        description="Wall-clock limit for git clone",
    )


class ServerConfig(BaseModel):
    """HTTP server settings."""

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=4000, description="Bind port")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed by CORS",
    )


class LoggingConfig(BaseModel):
    """Logging settings."""

    logger_name: str = Field(default=APP_NAME)
    level: str = Field(default="INFO", description="DEBUG, INFO, WARNING or ERROR")
    console_output: bool = Field(default=False, description="Also log human-readable lines to stderr")
    log_file: str = Field(default="vibecheckr.jsonl", description="JSONL file name inside logs_dir")


class AppConfig(BaseSettings):
    """Root application configuration.

    Sections are plain models so that only prefixed variables are read.

    All configuration is loaded from environment variables with VIBECHECKR_ prefix.
    Use double underscore for nested config: VIBECHECKR_LLM__API_KEY

    Example env vars:
        # Required for LLM analysis (without it reports are degraded)
        export VIBECHECKR_LLM__API_KEY=sk-ant-xxxxxxxxxxxxx

        # Optional (with defaults)
        export VIBECHECKR_LLM__PROVIDER_NAME=anthropic
        export VIBECHECKR_LLM__MODEL_NAME=claude-3-5-sonnet-20241022
        export VIBECHECKR_ANALYSIS__STRATEGY=multi-agent
        export VIBECHECKR_SCANNERS__ENABLED='["semgrep","gitleaks"]'
        export VIBECHECKR_SERVER__PORT=4000
        export VIBECHECKR_DIRECTORIES__HOME=/custom/path
    """

    model_config = SettingsConfigDict(
        env_prefix="VIBECHECKR_",
        env_nested_delimiter="__",
        frozen=True,
        extra="forbid",
    )

    directories: DirectoryConfig = Field(default_factory=DirectoryConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    scanners: ScannerConfig = Field(default_factory=ScannerConfig)
    acquisition: AcquisitionConfig = Field(default_factory=AcquisitionConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
