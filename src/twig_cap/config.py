"""Runtime settings and the plugin's on-disk configuration."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

PLUGIN_NAME = "TwigCap"
PLUGIN_VERSION = "1.1.0"
DEFAULT_MAXIMUM_TWIGS = 16

# Configs stamped before this version predate the current layout and are replaced wholesale.
_RESET_BELOW_VERSION = "1.0.0"

_logger = logging.getLogger("twig_cap.config")


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="TWIG_CAP_", env_file=".env", extra="ignore")

    app_name: str = "twig-cap"
    log_level: str = "INFO"
    config_dir: str = Field(default="config", description="Directory holding the plugin configuration file.")
    data_dir: str = Field(default="data", description="Directory holding persisted registry records.")
    default_language: str = "en"


settings = Settings()


class ConfigurationError(RuntimeError):
    """Raised when the configuration file cannot be parsed or validated."""


class PluginConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    version: str | None = Field(default=None, alias="Version")
    maximum_twigs_per_building: int = Field(
        default=DEFAULT_MAXIMUM_TWIGS,
        ge=0,
        alias="Maximum Number Of Twig Blocks Allowed Per Building",
    )


def version_tuple(version: str | None) -> tuple[int, ...]:
    """Parse a dotted version; missing or non-numeric parts count as zero."""
    if not version:
        return ()
    parts: list[int] = []
    for piece in version.strip().split("."):
        digits = "".join(ch for ch in piece if ch.isdigit())
        parts.append(int(digits) if digits else 0)
    while parts and parts[-1] == 0:
        parts.pop()
    return tuple(parts)


def is_older(version: str | None, than: str) -> bool:
    return version_tuple(version) < version_tuple(than)


def update_config(config: PluginConfig, current_version: str = PLUGIN_VERSION) -> PluginConfig:
    """Carry a config written by an older release forward to ``current_version``."""
    _logger.warning("config_update_detected", extra={"from_version": config.version, "to_version": current_version})

    previous_version = config.version
    if is_older(config.version, _RESET_BELOW_VERSION):
        config = PluginConfig()

    config.version = current_version
    _logger.warning("config_update_complete", extra={"from_version": previous_version, "to_version": current_version})
    return config


def read_config(path: str | Path, current_version: str = PLUGIN_VERSION) -> PluginConfig:
    """Read and migrate the configuration in memory without touching the file."""
    config_path = Path(path)
    if not config_path.exists():
        return PluginConfig(version=current_version)

    try:
        payload = json.loads(config_path.read_text(encoding="utf-8") or "{}")
        config = PluginConfig.model_validate(payload)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ConfigurationError(f"Invalid configuration file {config_path}: {exc}") from exc
    if is_older(config.version, current_version):
        config = update_config(config, current_version)
    return config


def load_config(path: str | Path, current_version: str = PLUGIN_VERSION) -> PluginConfig:
    """Read, migrate and write back the configuration file."""
    config_path = Path(path)
    if not config_path.exists():
        _logger.info("config_default_created", extra={"path": str(config_path)})
    config = read_config(config_path, current_version)
    save_config(config, config_path)
    return config


def save_config(config: PluginConfig, path: str | Path) -> None:
    config_path = Path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(config.model_dump_json(by_alias=True, indent=2), encoding="utf-8")


def config_path_for(config_dir: str | Path, plugin_name: str = PLUGIN_NAME) -> Path:
    return Path(config_dir) / f"{plugin_name}.json"
