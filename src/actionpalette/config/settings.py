from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    json_logs: bool = False
    log_dir: str | None = None  # None => console only
    # e.g. {"actionpalette.conditions": "DEBUG"} to see swallowed predicate errors
    namespace_levels: dict[str, str] = Field(default_factory=dict)


class ServerSettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8765
    cors_origins: list[str] = Field(default_factory=list)


class PaletteSettings(BaseSettings):
    """
    Process settings. Every field can be set from the environment, e.g.

        ACTIONPALETTE_SEND_CODE=false
        ACTIONPALETTE_USER_ACTIONS=my_actions:ACTIONS
        ACTIONPALETTE_LOGGING__LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="ACTIONPALETTE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Whether prompts marked contains_code may be rendered at all.
    send_code: bool = True

    show_default_actions: bool = True

    # "package.module:ATTR" or "path/to/file.py:ATTR" (ATTR defaults to ACTIONS)
    user_actions: str | None = None

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
