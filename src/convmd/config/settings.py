"""Configuration settings using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, YamlConfigSettingsSource

from convmd.config.constants import (
    DEFAULT_ASSET_DIR,
    DEFAULT_CONFIG_FILE,
    DEFAULT_JEKYLL_LAYOUT,
    DEFAULT_JEKYLL_MATHJAX,
    DEFAULT_LOG_DIR,
    MARKDOWN_EXTENSIONS,
)
from convmd.mapper.dialects import Dialect


class JekyllConfig(BaseModel):
    """Jekyll output dialect configuration."""

    asset_dir: str = DEFAULT_ASSET_DIR
    layout: str = DEFAULT_JEKYLL_LAYOUT
    mathjax: bool = DEFAULT_JEKYLL_MATHJAX


class WalkConfig(BaseModel):
    """Input directory discovery configuration."""

    recursive: bool = False
    extensions: list[str] = Field(default_factory=lambda: list(MARKDOWN_EXTENSIONS))

    @field_validator("extensions")
    @classmethod
    def _normalize_extensions(cls, value: list[str]) -> list[str]:
        return [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in value]


class ConvmdSettings(BaseSettings):
    """Main configuration class for convmd."""

    model_config = SettingsConfigDict(
        env_prefix="CONVMD_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        """Customize settings sources to include YAML file."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=DEFAULT_CONFIG_FILE),
            file_secret_settings,
        )

    # Sub-configurations
    jekyll: JekyllConfig = Field(default_factory=JekyllConfig)
    walk: WalkConfig = Field(default_factory=WalkConfig)

    # Global settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"
    log_format: Literal["console", "json"] = "console"
    log_dir: str = DEFAULT_LOG_DIR


@lru_cache
def get_settings() -> ConvmdSettings:
    """Get cached settings instance."""
    return ConvmdSettings()


def reload_settings() -> ConvmdSettings:
    """Force reload settings (clear cache)."""
    get_settings.cache_clear()
    return get_settings()


class RunConfig(BaseModel):
    """Fully validated parameters of one conversion run.

    Built from CLI arguments merged over ``ConvmdSettings`` before any
    document is touched, so a bad dialect name or input directory fails
    the run up front.
    """

    input_dir: Path
    output_dir: Path
    source: Dialect
    target: Dialect
    asset_dir: str = DEFAULT_ASSET_DIR
    layout: str = DEFAULT_JEKYLL_LAYOUT
    mathjax: bool = DEFAULT_JEKYLL_MATHJAX
    recursive: bool = False
    extensions: list[str] = Field(default_factory=lambda: list(MARKDOWN_EXTENSIONS))
    dry_run: bool = False

    @field_validator("source", "target", mode="before")
    @classmethod
    def _parse_dialect(cls, value: object) -> object:
        if isinstance(value, str):
            return Dialect.parse(value)
        return value

    @model_validator(mode="after")
    def _check_directories(self) -> "RunConfig":
        if not self.input_dir.is_dir():
            raise ValueError(f"Input directory does not exist: {self.input_dir}")
        if self.output_dir.exists() and not self.output_dir.is_dir():
            raise ValueError(f"Output path exists but is not a directory: {self.output_dir}")
        return self

    @classmethod
    def from_settings(
        cls,
        settings: ConvmdSettings,
        input_dir: Path,
        output_dir: Path,
        source: str,
        target: str,
        asset_dir: str | None = None,
        recursive: bool | None = None,
        dry_run: bool = False,
    ) -> "RunConfig":
        """Merge CLI arguments over configured settings.

        Priority: CLI arguments > environment > config file.
        """
        return cls(
            input_dir=input_dir,
            output_dir=output_dir,
            source=source,
            target=target,
            asset_dir=asset_dir or settings.jekyll.asset_dir,
            layout=settings.jekyll.layout,
            mathjax=settings.jekyll.mathjax,
            recursive=settings.walk.recursive if recursive is None else recursive,
            extensions=settings.walk.extensions,
            dry_run=dry_run,
        )
