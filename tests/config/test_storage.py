from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest  # noqa: TC002

from paneltrack.config import storage


def test_data_dir_prefers_explicit_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("PANELTRACK_DATA_DIR", str(custom))

    assert storage.get_data_dir() == custom.resolve()


def test_database_uri_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")

    assert storage.get_database_uri() == "sqlite:///override.db"


def test_database_uri_creates_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("PANELTRACK_DATA_DIR", str(tmp_path / "data-dir"))

    uri = storage.get_database_uri()

    expected_path = (tmp_path / "data-dir" / storage.DATABASE_FILENAME).resolve()
    assert uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.exists()


def test_default_data_dir_follows_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("PANELTRACK_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

    assert storage.get_data_dir() == (tmp_path / "paneltrack").resolve()
