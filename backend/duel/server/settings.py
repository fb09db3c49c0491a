"""Duel server configuration via environment variables."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from shared.validators import StringListEnvSettingsSource, parse_string_list

if TYPE_CHECKING:
    from pydantic_settings.sources.base import PydanticBaseSettingsSource


class DuelServerSettings(BaseSettings):
    model_config = {"env_prefix": "DUEL_"}

    log_dir: str = Field(default="backend/logs/duel", min_length=1)
    cors_origins: list[str] = ["http://localhost:5173"]
    max_request_body_size: int = Field(default=4096, ge=64)

    # Battlefield geometry sent to both clients in game_start.
    canvas_width: int = Field(default=800, gt=0)
    canvas_height: int = Field(default=600, gt=0)
    gravity: float = Field(default=600.0, gt=0)  # pixels per second squared
    castle_width: int = Field(default=40, gt=0)
    castle_height: int = Field(default=40, gt=0)
    castle_margin: int = Field(default=50, ge=0)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def validate_cors_origins(cls, v: str | list[str]) -> list[str]:
        return parse_string_list(v, allow_empty=True)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, StringListEnvSettingsSource(settings_cls), dotenv_settings, file_secret_settings
