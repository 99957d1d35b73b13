# taskapp/utils/config.py
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict
from .paths import config_dir, DB_PATH

SETTINGS_FILE_NAME = "settings.json"

_DEFAULTS: Dict[str, Any] = {
    "database": {
        "path": str(DB_PATH),
    },
    "reports": {
        "last_directory": str(Path.home()),
    },
    "ui": {
        "window": {"width": 1200, "height": 760, "is_maximized": False},
        "diagnostics_dock_visible": False,
    },
}

log = logging.getLogger("taskapp.config")


def settings_file() -> Path:
    return config_dir() / SETTINGS_FILE_NAME


def _merge(base: Dict[str, Any], over: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for k, v in over.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


def load_settings(path: Path | None = None) -> Dict[str, Any]:
    path = path or settings_file()
    data = json.loads(json.dumps(_DEFAULTS))
    if path.exists():
        try:
            data = _merge(data, json.loads(path.read_text(encoding="utf-8")))
        except (OSError, ValueError):
            log.warning("Ignoring unreadable settings file %s", path, exc_info=True)
    env_db = os.environ.get("TASKAPP_DB")
    if env_db:
        data["database"]["path"] = env_db
    return data


def save_settings(data: Dict[str, Any], path: Path | None = None) -> None:
    path = path or settings_file()
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
