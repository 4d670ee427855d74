"""Application configuration handling."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "CHKW_"
DEFAULT_CONFIG_PATH = Path("~/.config/chunkwise/config.yaml")

# YAML section -> {key in section: Settings field}
_YAML_SECTIONS: Mapping[str, Mapping[str, str]] = {
    "storage": {"db_path": "db_path"},
    "embeddings": {"model": "embedding_model", "dim": "embedding_dim"},
    "retrieval": {"top_k": "top_k"},
    "upload": {"max_file_size_mb": "max_file_size_mb"},
    "server": {"allowed_origins": "allowed_origins"},
}


class ConfigError(ValueError):
    """Raised when the YAML config file cannot be interpreted."""


class Settings(BaseModel):
    """Runtime configuration.

    Precedence, lowest first: field defaults, the YAML file, ``CHKW_*``
    environment variables.
    """

    db_path: Path = Field(default=Path.home() / ".chunkwise" / "chunkwise.db")
    embedding_model: str = "hashed-384"
    embedding_dim: int = Field(default=384, ge=8)
    top_k: int = Field(default=5, ge=1, le=50)
    max_file_size_mb: int = Field(default=50, ge=1)
    allowed_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )

    model_config = {
        "validate_assignment": True,
        "extra": "ignore",
    }

    @field_validator("db_path", mode="before")
    @classmethod
    def _expand_db_path(cls, value: Any) -> Path:
        if isinstance(value, (str, Path)):
            return Path(value).expanduser()
        raise TypeError("db_path must be a path or string")

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024

    @classmethod
    def from_yaml(cls, path: Path | None = None) -> "Settings":
        """Build settings from the config file, if any, then the environment."""
        values: dict[str, Any] = {}
        config_path = resolve_config_path(path)
        if config_path is not None and config_path.exists():
            values.update(_read_yaml(config_path))
        values.update(_env_overrides(os.environ))
        return cls(**values)


def resolve_config_path(path: Path | None = None) -> Path | None:
    """Explicit path, then ``CHKW_CONFIG``, then the default location if present."""
    if path is not None:
        return path.expanduser()
    from_env = os.environ.get(f"{ENV_PREFIX}CONFIG")
    if from_env:
        return Path(from_env).expanduser()
    default = DEFAULT_CONFIG_PATH.expanduser()
    return default if default.exists() else None


def _read_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, Mapping):
        raise ConfigError(f"{path} must contain a mapping at the top level")

    values: dict[str, Any] = {}
    for section, entries in raw.items():
        fields = _YAML_SECTIONS.get(section)
        if fields is None:
            # Top-level keys may name Settings fields directly.
            if section in Settings.model_fields:
                values[section] = entries
            continue
        if not isinstance(entries, Mapping):
            raise ConfigError(f"Section '{section}' in {path} must be a mapping")
        for key, value in entries.items():
            if key in fields:
                values[fields[key]] = value
    return values


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        if field_name in Settings.model_fields:
            overrides[field_name] = value
    return overrides


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings accessor for dependency injection."""
    return Settings.from_yaml()


__all__ = ["ConfigError", "Settings", "get_settings", "resolve_config_path"]
