# tests/test_config_and_context.py
from __future__ import annotations

import json

from taskapp.app_context import AppContext
from taskapp.utils.config import load_settings, save_settings


def test_defaults_when_file_missing(tmp_path, monkeypatch):
    monkeypatch.delenv("TASKAPP_DB", raising=False)
    cfg = load_settings(tmp_path / "settings.json")
    assert cfg["ui"]["window"]["width"] == 1200
    assert cfg["ui"]["diagnostics_dock_visible"] is False


def test_saved_values_merge_over_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("TASKAPP_DB", raising=False)
    path = tmp_path / "settings.json"
    cfg = load_settings(path)
    cfg["reports"]["last_directory"] = str(tmp_path)
    cfg["ui"]["window"]["is_maximized"] = True
    save_settings(cfg, path)

    reloaded = load_settings(path)
    assert reloaded["reports"]["last_directory"] == str(tmp_path)
    assert reloaded["ui"]["window"] == {"width": 1200, "height": 760, "is_maximized": True}


def test_env_overrides_db_path_and_bad_json_is_ignored(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    monkeypatch.setenv("TASKAPP_DB", str(tmp_path / "env.db"))
    cfg = load_settings(path)
    assert cfg["database"]["path"] == str(tmp_path / "env.db")
    assert json.loads(json.dumps(cfg))["ui"]["window"]["height"] == 760


def test_app_context_wires_services(tmp_path):
    ctx = AppContext.create(tmp_path / "ctx.db", {"ui": {}})
    try:
        assert ctx.db.pending() == []
        assert ctx.users.roles_map()[1] == "Administrator"
        assert ctx.register.register("Ola", "Nowak", "ola@example.com", "Ab!12", "Ab!12").success
        assert ctx.auth.authenticate("ola@example.com", "Ab!12") is not None
        assert ctx.config == {"ui": {}}
    finally:
        ctx.close()
