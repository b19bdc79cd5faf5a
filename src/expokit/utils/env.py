"""Environment settings read by the CLI layer.

``CI`` suppresses interactive prompts; ``EXPO_DEBUG`` turns on debug
logging.  Values are read fresh on every call so tests can
``monkeypatch.setenv`` freely.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_TRUTHY: frozenset[str] = frozenset({"1", "true", "yes", "on"})


class EnvSettings(BaseSettings):
    """Process-level switches taken from the environment."""

    ci: bool = Field(default=False, alias="CI")
    expo_debug: bool = Field(default=False, alias="EXPO_DEBUG")

    @field_validator("ci", "expo_debug", mode="before")
    @classmethod
    def parse_flag(cls, v):
        if isinstance(v, str):
            return v.strip().lower() in _TRUTHY
        return bool(v)

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")


def load_env_settings() -> EnvSettings:
    return EnvSettings()


def is_ci() -> bool:
    """Whether the process runs unattended (``CI`` is truthy)."""
    return load_env_settings().ci


def is_debug() -> bool:
    """Whether ``EXPO_DEBUG`` asks for debug logging."""
    return load_env_settings().expo_debug
