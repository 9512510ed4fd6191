"""Loading of application settings and the data directory."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from risa_chain.models.app_settings import AppSettings

DATA_DIR_ENV = "RISA_DATA_DIR"
SETTINGS_FILE = "settings.yaml"


def default_data_dir() -> Path:
    configured = os.environ.get(DATA_DIR_ENV)
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".risa"


def load_settings(data_dir: Path) -> AppSettings:
    path = data_dir / SETTINGS_FILE
    if not path.exists():
        return AppSettings()
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a YAML mapping.")
    return AppSettings.model_validate(raw)
