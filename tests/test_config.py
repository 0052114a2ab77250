"""Configuration validation tests."""

from __future__ import annotations

import pytest

from scriptstudio.config import Config


def test_imagen_requires_project():
    with pytest.raises(ValueError, match="GOOGLE_CLOUD_PROJECT"):
        Config(google_cloud_project="").validate_imagen_required()


def test_imagen_checks_credentials_file(tmp_path):
    missing = Config(google_cloud_project="demo", google_application_credentials=str(tmp_path / "nope.json"))
    with pytest.raises(ValueError, match="missing file"):
        missing.validate_imagen_required()

    key = tmp_path / "key.json"
    key.write_text("{}", encoding="utf-8")
    Config(google_cloud_project="demo", google_application_credentials=str(key)).validate_imagen_required()
    Config(google_cloud_project="demo", google_application_credentials="").validate_imagen_required()


def test_speech_requires_key():
    with pytest.raises(ValueError, match="GEMINI_API_KEY"):
        Config(gemini_api_key="").validate_speech_required()
