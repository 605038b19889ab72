"""Application configuration handling."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "PGI_"
DEFAULT_CONFIG_PATH = Path("~/.config/page-ingest/config.yaml")

_YAML_KEY_MAP: Mapping[tuple[str, ...], str] = {
    ("target", "url"): "target_url",
    ("target", "user_agent"): "user_agent",
    ("store", "url"): "store_url",
    ("store", "key"): "store_key",
    ("store", "table"): "table_name",
    ("http", "timeout"): "request_timeout",
    ("content", "max_chars"): "max_content_chars",
    ("embeddings", "dim"): "embedding_dim",
    ("embeddings", "placeholder_value"): "placeholder_value",
}

# Plain environment names read when the prefixed variant is absent.
_LEGACY_ENV: Mapping[str, str] = {
    "SUPABASE_URL": "store_url",
    "SUPABASE_KEY": "store_key",
}


class Settings(BaseModel):
    """Runtime configuration loaded from YAML file and environment variables."""

    target_url: str = "https://example.com"
    user_agent: str = "page-ingest/0.1"
    store_url: str = ""
    store_key: str = ""
    table_name: str = "documents"
    request_timeout: float = Field(default=30.0, gt=0)
    max_content_chars: int = Field(default=2000, ge=1)
    embedding_dim: int = Field(default=384, ge=1)
    placeholder_value: float = Field(default=0.1, ge=0)
    schedule: str = "@daily"

    model_config = {
        "validate_assignment": True,
        "extra": "ignore",
    }

    @field_validator("store_url", mode="before")
    @classmethod
    def _strip_store_url(cls, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip().rstrip("/")
        raise TypeError("store_url must be a string")

    @classmethod
    def from_yaml(cls, path: Path | None = None) -> "Settings":
        """Load YAML config and overlay env vars; fall back to defaults."""
        config_path = cls._resolve_config_path(path)
        data: dict[str, Any] = {}
        if config_path and config_path.exists():
            with config_path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
            data.update(_flatten_yaml(raw))
        data.update(_load_env_overrides())
        return cls(**data)

    @staticmethod
    def _resolve_config_path(path: Path | None) -> Path | None:
        if path is not None:
            return path.expanduser()
        env_path = os.environ.get(f"{ENV_PREFIX}CONFIG")
        if env_path:
            return Path(env_path).expanduser()
        resolved_default = DEFAULT_CONFIG_PATH.expanduser()
        return resolved_default if resolved_default.exists() else None


def _flatten_yaml(raw: Mapping[str, Any], prefix: tuple[str, ...] = ()) -> dict[str, Any]:
    """Flatten nested YAML configuration to Settings field names."""
    flat: dict[str, Any] = {}
    for key, value in raw.items():
        next_prefix = prefix + (key,)
        if isinstance(value, Mapping):
            flat.update(_flatten_yaml(value, prefix=next_prefix))
        else:
            mapped_key = _YAML_KEY_MAP.get(next_prefix)
            if mapped_key:
                flat[mapped_key] = value
            elif key in Settings.model_fields:
                flat[key] = value
    return flat


def _load_env_overrides() -> dict[str, Any]:
    """Map environment variables with PGI_ prefix into Settings fields."""
    overrides: dict[str, Any] = {}
    for env_name, field_name in _LEGACY_ENV.items():
        value = os.environ.get(env_name)
        if value:
            overrides[field_name] = value
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        if field_name in Settings.model_fields:
            overrides[field_name] = value
    return overrides


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings accessor for dependency injection."""
    load_dotenv()
    return Settings.from_yaml()


__all__ = ["Settings", "get_settings"]
