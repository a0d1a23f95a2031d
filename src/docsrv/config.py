"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Constructor arguments
  2. Environment variables  (DOCSRV__CACHE_TTL=30s, DOCSRV__SERVER__PORT=9090)
  3. docsrv.yaml            (searched in cwd, then the platform config dir)
  4. Hardcoded defaults

The config file is optional. Durations accept Go-style strings ("5m",
"1h30m", "250ms"), plain seconds, or ISO 8601 ("PT5M").
"""

from __future__ import annotations

import re
from datetime import timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any, Literal

import platformdirs
from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from docsrv.models.sections import DOCS_BASE, GENERAL_SECTION

if TYPE_CHECKING:
    from docsrv.repository import DocRepository

_DEFAULT_CONFIG_DIR = platformdirs.user_config_dir("docsrv")
_CONFIG_FILE_NAME = "docsrv.yaml"

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
# "ms" must be tried before "m".
_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ns|us|µs|ms|s|m|h)")
_DURATION = re.compile(r"(?:\d+(?:\.\d+)?(?:ns|us|µs|ms|s|m|h))+")


def parse_duration(value: Any) -> Any:
    """Convert a Go-style duration string to ``timedelta``.

    Anything else is returned unchanged for pydantic to validate.
    """
    if not isinstance(value, str):
        return value
    text = value.strip()
    if not _DURATION.fullmatch(text):
        return value
    seconds = sum(
        float(amount) * _DURATION_UNITS[unit] for amount, unit in _DURATION_PART.findall(text)
    )
    return timedelta(seconds=seconds)


Duration = Annotated[timedelta, BeforeValidator(parse_duration)]


def _find_config_file() -> str | None:
    """Return the path of the first docsrv.yaml found, or None."""
    candidates = [
        Path(_CONFIG_FILE_NAME),
        Path(_DEFAULT_CONFIG_DIR) / _CONFIG_FILE_NAME,
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ServerSettings(BaseModel):
    """Listener settings, consumed by the HTTP layer."""

    model_config = ConfigDict(extra="forbid")

    host: str = "0.0.0.0"
    port: int = 8080
    read_timeout: Duration = timedelta(seconds=15)
    write_timeout: Duration = timedelta(seconds=15)
    idle_timeout: Duration = timedelta(seconds=60)
    read_header_timeout: Duration = timedelta(seconds=5)


class IndexSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    docs_base: str = DOCS_BASE
    general_label: str = GENERAL_SECTION


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "text"
    access_log: str = "access.log"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: DOCSRV__SERVER__PORT=9090
        env_prefix="DOCSRV__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    docs_dir: str = "./docs"
    cache_ttl: Duration = timedelta(minutes=5)
    server: ServerSettings = ServerSettings()
    index: IndexSettings = IndexSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )

    def build_repository(self) -> DocRepository:
        """Create the cached section repository described by these settings."""
        from docsrv.repository import DocRepository

        return DocRepository(
            self.docs_dir,
            self.cache_ttl,
            docs_base=self.index.docs_base,
            general_label=self.index.general_label,
        )
