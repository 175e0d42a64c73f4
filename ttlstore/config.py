"""Helpers to load store settings from YAML."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

import yaml

from .models import StoreSettings


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "default.yaml"
ENV_CONFIG_PATH = "TTLSTORE_CONFIG_PATH"


def load_settings(path: Path | None = None) -> StoreSettings:
    """Load settings from ``path``, the env override or the bundled default.

    Only a missing bundled default falls back to built-in values; a path
    that was asked for explicitly has to exist.
    """
    env_path = os.getenv(ENV_CONFIG_PATH)
    config_path = path or (Path(env_path) if env_path else DEFAULT_CONFIG_PATH)
    if config_path == DEFAULT_CONFIG_PATH and not config_path.exists():
        return StoreSettings()
    with open(config_path, "r", encoding="utf-8") as fh:
        raw_data: Dict[str, Any] | None = yaml.safe_load(fh)
    return StoreSettings.model_validate(raw_data or {})


__all__ = ["DEFAULT_CONFIG_PATH", "ENV_CONFIG_PATH", "load_settings"]
