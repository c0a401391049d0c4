from __future__ import annotations

import json
import os
import tomllib
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

CONFIG_ENV_VAR = "ESPLIGHT_CONFIG"
CONFIG_DIRNAME = "esplight"

ESPHOME_SERVICE_TYPE = "_esphomelib._tcp.local."


class DiscoveryConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    service_type: str = ESPHOME_SERVICE_TYPE
    discovery_time: float = Field(default=5.0, gt=0)
    resolve_timeout: float = Field(default=10.0, gt=0)
    poll_interval: float = Field(default=0.1, gt=0)
    info_timeout: float = Field(default=3.0, gt=0)


class ApiConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    password: str = ""
    noise_psk: str | None = None


class Settings(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)


def default_config_path() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / CONFIG_DIRNAME / "config.toml"


def resolve_config_path(allow_missing: bool = False) -> tuple[Path, bool]:
    """Return the config path and whether it exists.

    An explicit $ESPLIGHT_CONFIG must exist unless ``allow_missing`` is set.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path).expanduser()
        if not allow_missing and not path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to missing file: {path}")
        return path, path.exists()

    path = default_config_path()
    return path, path.exists()


def load_settings(path: Path) -> Settings:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in config file: {path}\n{exc}") from exc

    try:
        return Settings.model_validate(data or {})
    except ValidationError as exc:
        raise ValueError(f"Invalid config file: {path}\n{exc}") from exc


@lru_cache
def get_settings() -> Settings:
    path, exists = resolve_config_path(allow_missing=False)
    if exists:
        return load_settings(path)
    return Settings()


def _toml_string(value: str) -> str:
    return json.dumps(value)


def render_settings_toml(settings: Settings) -> str:
    discovery = settings.discovery
    api = settings.api
    lines = [
        "# esplight configuration",
        "",
        "[discovery]",
        f"service_type = {_toml_string(discovery.service_type)}",
        f"discovery_time = {discovery.discovery_time}",
        f"resolve_timeout = {discovery.resolve_timeout}",
        f"poll_interval = {discovery.poll_interval}",
        f"info_timeout = {discovery.info_timeout}",
        "",
        "[api]",
        f"password = {_toml_string(api.password)}",
    ]
    if api.noise_psk is not None:
        lines.append(f"noise_psk = {_toml_string(api.noise_psk)}")
    lines.append("")
    return "\n".join(lines)


def write_settings(settings: Settings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_settings_toml(settings))
