"""Typed configuration models for mod host runtime settings."""

from __future__ import annotations

from pathlib import Path
from typing import ClassVar, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from .defaults import DEFAULT_DATA_ROOT

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "modhelper" / "modhelper.yaml"

BuildVariant = Literal["steam", "epic"]


class LoggingSettings(BaseModel):
    """Structured logging configuration for the host process."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = False
    service: str = "modhelper"
    environment: str = "dev"


class HostSettings(BaseModel):
    """Host build and filesystem settings consumed by every loaded mod."""

    build_variant: BuildVariant = "steam"
    mod_settings_directory: Path = DEFAULT_DATA_ROOT / "settings"
    mod_sources_directory: Path = DEFAULT_DATA_ROOT / "sources"
    # Patch failure messages containing one of these markers are ignored on
    # the epic build, where the referenced platform library does not exist.
    suppressed_patch_markers: tuple[str, ...] = ("Il2CppFacepunch.Steamworks",)

    @field_validator("build_variant", mode="before")
    @classmethod
    def _normalize_build_variant(cls, value: object) -> object:
        """Accept build variant names regardless of case."""
        if isinstance(value, str):
            return value.strip().lower()
        return value


class SchedulerSettings(BaseModel):
    """Cooperative load-task scheduler settings."""

    max_steps_per_tick: int = Field(default=1, gt=0)


class ModHelperSettings(BaseSettings):
    """Root runtime settings resolved from init/env/yaml/defaults sources."""

    model_config = SettingsConfigDict(
        env_prefix="MODHELPER_",
        env_nested_delimiter="__",
        extra="ignore",
        nested_model_default_partial_update=True,
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    host: HostSettings = Field(default_factory=HostSettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)

    _config_path: ClassVar[Path] = DEFAULT_CONFIG_PATH

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Apply host precedence: init > env > yaml > model defaults."""
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(
                settings_cls,
                yaml_file=cls._config_path,
                yaml_file_encoding="utf-8",
            ),
        )
