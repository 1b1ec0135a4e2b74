"""Application Configuration - YAML file plus environment overrides via pydantic-settings.

Invariants:
    - Config path comes from CONFIG_PATH, then the -config flag; nothing else
    - Environment variables win over file values (nested keys via `__`)
    - Settings is frozen: constructed once at startup, passed explicitly, never global
    - load_config() raises ConfigError subclasses; it never exits the process

Design Decisions:
    - pydantic-settings over hand-rolled os.environ lookups: validation, type
      coercion, nested env overrides (ADR: developer UX)
    - File values enter as init kwargs and sources are reordered so env wins
      (ADR: file is the baseline, env is the operator override)
"""

import argparse
import logging
import os
from pathlib import Path
from typing import Any, Literal, Sequence

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict, SettingsError,
)

from student_api.core.domain_types import Environment
from student_api.core.errors import (
    ConfigFileNotFoundError, ConfigInvalidError, ConfigPathMissingError,
)

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "CONFIG_PATH"


def split_address(address: str) -> tuple[str, int]:
    """Split `host:port` into its parts.

    An empty host binds every interface; IPv6 hosts are written `[::1]:8080`.
    """
    host, sep, port_text = address.rpartition(":")
    if not sep:
        raise ValueError("address must be host:port")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        port = int(port_text)
    except ValueError:
        raise ValueError(f"invalid port {port_text!r}") from None
    if not 0 <= port <= 65535:
        raise ValueError(f"port {port} out of range 0-65535")
    return host or "0.0.0.0", port


class HTTPServerSettings(BaseModel):
    """Listener settings - `http_server` block of the config file."""
    model_config = ConfigDict(frozen=True)

    address: str = Field(min_length=1)
    shutdown_timeout: float = Field(5.0, gt=0)

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        v = v.strip()
        split_address(v)
        return v

    @property
    def host(self) -> str:
        return split_address(self.address)[0]

    @property
    def port(self) -> int:
        return split_address(self.address)[1]


class Settings(BaseSettings):
    """Application settings: config file values overridden by environment variables."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
        frozen=True,
    )

    env: Environment = Environment.DEV
    storage_path: str = Field("/storage/storage.db", min_length=1)
    http_server: HTTPServerSettings

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @field_validator("storage_path")
    @classmethod
    def strip_storage_path(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("storage_path cannot be empty or whitespace")
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return env_settings, init_settings


def resolve_config_path(argv: Sequence[str] | None = None) -> Path:
    """Find the config file: CONFIG_PATH first, then the -config flag."""
    config_path = os.environ.get(CONFIG_PATH_ENV, "").strip()
    if not config_path:
        parser = argparse.ArgumentParser(add_help=False, allow_abbrev=False)
        parser.add_argument(
            "-config", "--config", dest="config", default="",
            help="path to config file",
        )
        args, _ = parser.parse_known_args(argv)
        config_path = args.config.strip()
    if not config_path:
        raise ConfigPathMissingError()

    path = Path(config_path)
    if not path.is_file():
        raise ConfigFileNotFoundError(config_path)
    return path


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse a YAML config file into a mapping (empty file -> {})."""
    try:
        with path.open(encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ConfigInvalidError(f"{path}: invalid YAML: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigInvalidError(f"{path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigInvalidError(f"{path}: top level must be a mapping")
    return {str(key): value for key, value in data.items()}


def load_config(argv: Sequence[str] | None = None) -> Settings:
    """Resolve, parse and validate the configuration.

    Raises:
        ConfigPathMissingError: no config path was given.
        ConfigFileNotFoundError: the path is not an existing file.
        ConfigInvalidError: the file is unreadable or a required value is
            missing or invalid after environment overrides, or an
            environment value cannot be parsed.
    """
    path = resolve_config_path(argv)
    values = read_config_file(path)
    try:
        settings = Settings(**values)
    except ValidationError as exc:
        raise ConfigInvalidError(_format_validation_errors(exc)) from exc
    except SettingsError as exc:
        # an environment value that is not valid for its field type
        raise ConfigInvalidError(str(exc)) from exc

    logger.info(
        "Configuration loaded successfully",
        extra={"config_path": str(path)},
    )
    return settings


def _format_validation_errors(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(loc) for loc in e['loc']) or '<root>'}: {e['msg']}"
        for e in exc.errors(include_url=False)
    )
