"""Tests for settings loading."""

from pathlib import Path

import pytest

from chunkwise.core.config import ConfigError, Settings


def test_yaml_sections_map_to_fields(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("CHKW_DB_PATH", raising=False)
    config = tmp_path / "config.yaml"
    config.write_text(
        "\n".join(
            [
                "storage:",
                f"  db_path: {tmp_path / 'from-yaml.db'}",
                "retrieval:",
                "  top_k: 7",
                "upload:",
                "  max_file_size_mb: 10",
            ]
        )
    )
    settings = Settings.from_yaml(config)
    assert settings.db_path == tmp_path / "from-yaml.db"
    assert settings.top_k == 7
    assert settings.max_file_size_bytes == 10 * 1024 * 1024


def test_environment_overrides_yaml(tmp_path: Path, monkeypatch) -> None:
    config = tmp_path / "config.yaml"
    config.write_text("retrieval:\n  top_k: 7\n")
    monkeypatch.setenv("CHKW_TOP_K", "3")
    monkeypatch.setenv("CHKW_ALLOWED_ORIGINS", "http://a.test, http://b.test")
    settings = Settings.from_yaml(config)
    assert settings.top_k == 3
    assert settings.allowed_origins == ["http://a.test", "http://b.test"]


def test_defaults_without_config(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("CHKW_CONFIG", str(tmp_path / "missing.yaml"))
    settings = Settings.from_yaml()
    assert settings.max_file_size_mb == 50
    assert settings.db_path == tmp_path / "chunkwise.db"


def test_malformed_sections_are_rejected(tmp_path: Path) -> None:
    config = tmp_path / "config.yaml"
    config.write_text("retrieval: 7\n")
    with pytest.raises(ConfigError):
        Settings.from_yaml(config)
