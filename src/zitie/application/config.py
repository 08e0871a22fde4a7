from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

# Tunables that map 1:1 onto AlgorithmConfig fields.
TUNABLE_FIELDS = (
    "max_new_cards_per_day",
    "max_failed_cards_before_new",
    "min_correct_streak_for_new",
    "failed_card_timeout",
    "max_interval",
    "bucket_size",
    "mastery_threshold",
    "mastered_review_chance",
    "set_size",
    "initial_score",
)


def default_progress_path() -> Path:
    return Path.home() / ".config/zitie/progress.json"


class AppConfig(BaseSettings):
    """
    Configuration model for zitie.
    Supports loading from:
    1. Environment variables (ZITIE_*)
    2. Config file (~/.config/zitie/config.toml or ~/.zitie.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="ZITIE_",
        extra="ignore",
    )

    # Scheduling
    algorithm: str = "bucket"

    # Paths
    catalog_path: Path | None = None
    progress_path: Path = Field(default_factory=default_progress_path)

    # Algorithm tunables (None keeps the variant's default)
    max_new_cards_per_day: int | None = Field(default=None, ge=0)
    max_failed_cards_before_new: int | None = Field(default=None, ge=0)
    min_correct_streak_for_new: int | None = Field(default=None, ge=0)
    failed_card_timeout: int | None = Field(default=None, ge=0)  # ms
    max_interval: int | None = Field(default=None, gt=0)  # ms
    bucket_size: int | None = Field(default=None, ge=1)
    mastery_threshold: int | None = Field(default=None, ge=1)
    mastered_review_chance: float | None = Field(default=None, ge=0.0, le=1.0)
    set_size: int | None = Field(default=None, ge=1)
    initial_score: int | None = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        toml_files = [
            Path.home() / ".config/zitie/config.toml",
            Path.home() / ".zitie.toml",
        ]

        # First existing file wins
        toml_file = next((f for f in toml_files if f.exists()), None)

        # Later sources have lower priority: CLI, then env, then file.
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (
            init_settings,
            env_settings,
        )

    @field_validator("catalog_path", mode="before")
    @classmethod
    def expand_catalog_path(cls, v: Any) -> Path | None:
        if v is None or v == "":
            return None
        return Path(v).expanduser()

    @field_validator("progress_path", mode="before")
    @classmethod
    def expand_progress_path(cls, v: Any) -> Path:
        # An empty value (e.g. ZITIE_PROGRESS_PATH="") keeps the default location.
        if v is None or v == "":
            return default_progress_path()
        return Path(v).expanduser()

    def algorithm_overrides(self) -> dict[str, Any]:
        """Only the tunables the user actually set."""
        return {
            name: getattr(self, name)
            for name in TUNABLE_FIELDS
            if getattr(self, name) is not None
        }


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/zitie/config.toml (if exists)
    3. Environment variables (ZITIE_*)
    4. cli_overrides (passed from Typer)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
