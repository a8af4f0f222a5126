"""Configuration loading for the order keys service.

This module loads application configuration with the following rules:
- Primary source: `order_keys_config.json` at the project root.
- Overrides: environment variables, then optional text files under `config/`.
- Validation: Pydantic models enforce allowed values.

The rank constants themselves are not configurable: persisted ranks depend
on them.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_CONFIG = Path("order_keys_config.json")
logger = logging.getLogger(__name__)

FALLBACK_POLICIES = ("nudge", "normalize")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


class RankingConfig(BaseModel):
    # nudge: keep the allocator's fixed-step fallback on exhausted gaps
    # normalize: renormalise the collection instead
    fallback_policy: str = Field(default="nudge")

    @field_validator("fallback_policy")
    @classmethod
    def policy_must_be_allowed(cls, v: str) -> str:
        if v not in FALLBACK_POLICIES:
            raise ValueError(f"ranking.fallback_policy must be one of {list(FALLBACK_POLICIES)}")
        return v


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")

    @field_validator("level")
    @classmethod
    def level_must_be_known(cls, v: str) -> str:
        v = str(v).strip().upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"logging.level must be one of {list(LOG_LEVELS)}")
        return v


class CorsConfig(BaseModel):
    allow_origins: List[str] = Field(default_factory=lambda: ["*"])


class AppConfig(BaseModel):
    ranking: RankingConfig = Field(default_factory=RankingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    cors: CorsConfig = Field(default_factory=CorsConfig)


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def _split_origins(text: str) -> List[str]:
    return [part.strip() for part in text.split(",") if part.strip()]


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) order_keys_config.json at project root
    4) Defaults
    """

    base = _read_json_file(ROOT_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        if isinstance(cur, list):
            return ",".join(str(item) for item in cur)
        return str(cur) if cur is not None else default

    policy = (
        _env("ORDER_KEYS_FALLBACK_POLICY")
        or _read_config_file("ranking.fallback_policy")
        or _base("ranking.fallback_policy", "nudge")
    ).strip().lower()
    level = _env("LOG_LEVEL") or _read_config_file("logging.level") or _base("logging.level", "INFO")
    origins_text = _env("CORS_ALLOW_ORIGINS") or _read_config_file("cors.allow_origins") or _base("cors.allow_origins", "*")

    try:
        cfg = AppConfig(
            ranking=RankingConfig(fallback_policy=policy),
            logging=LoggingConfig(level=level),
            cors=CorsConfig(allow_origins=_split_origins(str(origins_text)) or ["*"]),
        )
        return cfg
    except PydanticValidationError as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "RankingConfig",
    "LoggingConfig",
    "CorsConfig",
    "FALLBACK_POLICIES",
    "load_config",
]
