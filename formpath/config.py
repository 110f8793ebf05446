"""Configuration utilities for the FormPath service.

This module loads application configuration with the following rules:
- Primary source: `formpath_config.json` at the project root.
- Overrides: environment variables, then optional text files under `config/`.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_FORMPATH_CONFIG = Path("formpath_config.json")
logger = logging.getLogger(__name__)


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        # Recoverable: an unreadable override falls through to the next layer
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


class StoreConfig(BaseModel):
    dsn: str

    @field_validator("dsn")
    @classmethod
    def dsn_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("store.dsn must be a non-empty string")
        return v


class ReferenceConfig(BaseModel):
    """Where reference PDFs live: an http(s) URL prefix or a local directory.

    The reference for document `I-90` is `<base_url>/I-90.pdf`.
    """

    base_url: str
    timeout_seconds: float = Field(default=15.0, gt=0)

    @field_validator("base_url")
    @classmethod
    def base_url_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("reference.base_url must be a non-empty string")
        return v.strip()

    @property
    def is_remote(self) -> bool:
        return self.base_url.startswith(("http://", "https://"))


class RenderConfig(BaseModel):
    scale: float = Field(default=1.5, gt=0)
    jpeg_quality: int = Field(default=85, ge=1, le=100)
    font_size_ratio: float = Field(default=0.7, gt=0, le=1)
    font_size_cap: float = Field(default=10.0, gt=0)
    text_inset: float = Field(default=2.0, ge=0)


class AppConfig(BaseModel):
    store: StoreConfig
    reference: ReferenceConfig
    render: RenderConfig


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) formpath_config.json at project root (primary base)
    4) Safe defaults for development
    """

    base = _read_json_file(ROOT_FORMPATH_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        return str(cur) if cur is not None else default

    # Answer store
    dsn = (
        _env("FORMPATH_DATABASE_URL")
        or _env("DATABASE_URL")
        or _read_config_file("store.dsn")
        or _base("store.dsn")
        or "sqlite+pysqlite:///:memory:"
    )

    # Reference documents
    base_url = _env("FORMPATH_REFERENCE_BASE_URL") or _read_config_file("reference.base_url") or _base("reference.base_url", "references")
    timeout_text = _env("FORMPATH_REFERENCE_TIMEOUT") or _read_config_file("reference.timeout_seconds") or _base("reference.timeout_seconds", "15")

    # Overlay rendering
    scale_text = _env("FORMPATH_RENDER_SCALE") or _read_config_file("render.scale") or _base("render.scale", "1.5")
    quality_text = _env("FORMPATH_RENDER_JPEG_QUALITY") or _read_config_file("render.jpeg_quality") or _base("render.jpeg_quality", "85")
    ratio_text = _env("FORMPATH_RENDER_FONT_RATIO") or _read_config_file("render.font_size_ratio") or _base("render.font_size_ratio", "0.7")
    cap_text = _env("FORMPATH_RENDER_FONT_CAP") or _read_config_file("render.font_size_cap") or _base("render.font_size_cap", "10")
    inset_text = _env("FORMPATH_RENDER_TEXT_INSET") or _read_config_file("render.text_inset") or _base("render.text_inset", "2")

    try:
        cfg = AppConfig(
            store=StoreConfig(dsn=dsn),
            reference=ReferenceConfig(base_url=str(base_url), timeout_seconds=float(str(timeout_text).strip())),
            render=RenderConfig(
                scale=float(str(scale_text).strip()),
                jpeg_quality=int(str(quality_text).strip()),
                font_size_ratio=float(str(ratio_text).strip()),
                font_size_cap=float(str(cap_text).strip()),
                text_inset=float(str(inset_text).strip()),
            ),
        )
        return cfg
    except (PydanticValidationError, ValueError) as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "StoreConfig",
    "ReferenceConfig",
    "RenderConfig",
    "load_config",
]
