"""
Tests for settings defaults.

Settings read the environment when the module is executed, so each test loads
a private copy of glimpse/config.py instead of touching the shared instance.
"""

import importlib.util
import os

import glimpse.config
from glimpse.config import settings


def _load_settings():
    spec = importlib.util.spec_from_file_location("glimpse_config_copy", glimpse.config.__file__)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module.settings


def test_header_auth_is_off_by_default(monkeypatch):
    monkeypatch.delenv("ALLOW_HEADER_AUTH", raising=False)

    assert _load_settings().ALLOW_HEADER_AUTH is False


def test_header_auth_opt_in(monkeypatch):
    monkeypatch.setenv("ALLOW_HEADER_AUTH", "true")

    assert _load_settings().ALLOW_HEADER_AUTH is True


def test_firebase_project_id_from_environment(monkeypatch):
    monkeypatch.setenv("FIREBASE_PROJECT_ID", "glimpse-prod")

    assert _load_settings().FIREBASE_PROJECT_ID == "glimpse-prod"


def test_firebase_project_id_defaults_to_empty(monkeypatch):
    monkeypatch.delenv("FIREBASE_PROJECT_ID", raising=False)

    assert _load_settings().FIREBASE_PROJECT_ID == ""


def test_database_and_media_live_under_test_root(test_root):
    assert settings.DATABASE_URL.endswith(os.path.join(test_root, "test.db"))
    assert settings.MEDIA_ROOT.startswith(test_root)
