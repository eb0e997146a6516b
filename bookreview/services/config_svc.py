from __future__ import annotations

# bookreview/services/config_svc.py
import os
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

# 配置解析顺序（高 -> 低）：
# 1) 命令行 --db
# 2) 环境变量 BOOKREVIEW_DB / BOOKREVIEW_USER / BOOKREVIEW_PASSWORD / BOOKREVIEW_TIMEOUT
# 3) config.yaml
# 4) DEFAULTS
DEFAULTS = {
    "connection_string": "bookreviews.db",
    "username": "owner",
    "password": "",
    "driver_timeout": 5.0,
    "atomic_insert": False,
    "export_dir": None,
    "log_level": "WARNING",
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_KEYS = {
    "BOOKREVIEW_DB": "connection_string",
    "BOOKREVIEW_USER": "username",
    "BOOKREVIEW_PASSWORD": "password",
    "BOOKREVIEW_TIMEOUT": "driver_timeout",
}


class AppConfig(BaseModel):
    connection_string: str = DEFAULTS["connection_string"]
    username: str = DEFAULTS["username"]
    password: str = Field(default=DEFAULTS["password"], repr=False)
    driver_timeout: float = Field(default=DEFAULTS["driver_timeout"], gt=0)
    atomic_insert: bool = DEFAULTS["atomic_insert"]
    export_dir: Optional[str] = DEFAULTS["export_dir"]
    log_level: str = DEFAULTS["log_level"]

    @field_validator("connection_string")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("connection_string must not be empty")
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def is_uri(self) -> bool:
        return self.connection_string.startswith("file:")


def read_config_yaml(path: str | None) -> dict:
    if not path or not os.path.exists(path):
        return {}
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"config file {path} must contain a mapping")
    return {k: v for k, v in cfg.items() if k in DEFAULTS}


def read_env() -> dict:
    out = {}
    for env_key, cfg_key in ENV_KEYS.items():
        v = os.environ.get(env_key)
        if v is not None and v != "":
            out[cfg_key] = v
    return out


def load_config(path: str | None = "config.yaml", connection_string: str | None = None) -> AppConfig:
    """
    Build the application config from defaults, config.yaml, environment and
    the explicit connection string (highest priority).
    Raises pydantic.ValidationError on bad values.
    """
    merged: dict = {}
    merged.update(read_config_yaml(path))
    merged.update(read_env())
    if connection_string:
        merged["connection_string"] = connection_string
    return AppConfig(**merged)
