"""Application configuration loaded from config.yaml + environment variables."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings

_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"


def _load_yaml() -> dict:
    if _CONFIG_PATH.exists():
        with open(_CONFIG_PATH) as f:
            return yaml.safe_load(f) or {}
    return {}


class StorageConfig(BaseSettings):
    kind: Literal["local", "s3"] = "local"
    # local
    base_dir: str = "data/images"
    public_prefix: str = "/images"
    # s3 / r2
    bucket: str = ""
    endpoint_url: str | None = None
    region: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    public_base_url: str | None = None

    model_config = {"env_prefix": "STORAGE_"}


class EdgeSqlConfig(BaseSettings):
    api_base: str = "https://api.cloudflare.com/client/v4"
    account_id: str = ""
    database_id: str = ""
    api_token: str = ""
    timeout_seconds: float = 10.0

    model_config = {"env_prefix": "EDGE_SQL_"}


class UploadConfig(BaseSettings):
    max_bytes: int = 10 * 1024 * 1024
    allowed_content_types: list[str] = Field(default_factory=lambda: [
        "image/jpeg", "image/png", "image/webp", "image/gif",
    ])
    verify_image_content: bool = True


class LifecycleConfig(BaseSettings):
    strict_transitions: bool = False


class Settings(BaseSettings):
    backend: Literal["server", "edge"] = "server"
    database_url: str = "sqlite+aiosqlite:///data/complaints.db"
    log_level: str = "INFO"
    auto_create_schema: bool = True
    storage: StorageConfig = Field(default_factory=StorageConfig)
    edge_sql: EdgeSqlConfig = Field(default_factory=EdgeSqlConfig)
    uploads: UploadConfig = Field(default_factory=UploadConfig)
    lifecycle: LifecycleConfig = Field(default_factory=LifecycleConfig)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    """Build Settings by merging YAML defaults with env overrides."""
    y = _load_yaml()
    overrides = {}
    for key in ("backend", "database_url", "log_level", "auto_create_schema"):
        if key in y:
            overrides[key] = y[key]
    if "url" in y.get("database", {}):
        overrides["database_url"] = y["database"]["url"]
    return Settings(
        storage=StorageConfig(**y.get("storage", {})),
        edge_sql=EdgeSqlConfig(**y.get("edge_sql", {})),
        uploads=UploadConfig(**y.get("uploads", {})),
        lifecycle=LifecycleConfig(**y.get("lifecycle", {})),
        **overrides,
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
