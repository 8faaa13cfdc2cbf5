"""Service configuration loaded from NGSCHEMATICS_* environment variables."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Preferences(BaseModel):
    """User preferences handed to each workspace folder.

    ``component_types`` is kept raw: entries are validated one by one when the
    component shortcuts are built, so a single invalid entry never discards
    the others.
    """

    schematics: list[str] = Field(default_factory=list, description="Extra collection names to load")
    component_types: list[Any] = Field(default_factory=list, description="User-declared component types")


class NgSchematicsSettings(BaseSettings):
    """ngschematics settings.

    All fields are read from environment variables with the ``NGSCHEMATICS_``
    prefix.  For example, ``NGSCHEMATICS_LOG_LEVEL=DEBUG`` maps to
    ``log_level``.  List fields take JSON, e.g.
    ``NGSCHEMATICS_SCHEMATICS='["@my/collection"]'``.
    """

    model_config = SettingsConfigDict(
        env_prefix="NGSCHEMATICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "WARNING"

    log_file: Path | None = None
    """Rotating debug log, kept out of the terminal prompts."""

    # -- Preferences -----------------------------------------------------------
    schematics: list[str] = Field(default_factory=list)
    """Additional schematics collections (package names or ``./local/collection.json``)."""

    component_types: list[Any] = Field(default_factory=list)
    """Custom component types: ``{"label": ..., "options": [[name, value], ...], "detail": ...}``."""

    # -- Loading ---------------------------------------------------------------
    stable_timeout: float = 10.0
    """Seconds to wait for the first configuration load before giving up."""

    reload_debounce: float = 0.3
    """Seconds to wait after a config change before reloading a workspace folder."""

    # -- Helpers ---------------------------------------------------------------

    def preferences(self) -> Preferences:
        return Preferences(schematics=self.schematics, component_types=self.component_types)


def get_settings() -> NgSchematicsSettings:
    """Return a cached settings instance.

    Reads from environment variables and ``.env`` on first call, then returns
    the same object.  Call ``_get_settings_cached.cache_clear()`` in tests to
    force a re-read after overriding env vars.
    """
    return _get_settings_cached()


def _get_settings_cached() -> NgSchematicsSettings:
    """Inner function wrapped by lru_cache (allows type-safe cache_clear)."""
    return NgSchematicsSettings()


from functools import lru_cache  # noqa: E402

_get_settings_cached = lru_cache(maxsize=1)(_get_settings_cached)
