"""Where the panel database lives."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Final

DATA_DIR_ENV: Final[str] = "PANELTRACK_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DATABASE_URI"
DATABASE_FILENAME: Final[str] = "paneltrack.db"


def get_data_dir() -> Path:
    """``PANELTRACK_DATA_DIR``, else ``paneltrack`` under the XDG data home."""

    if env_dir := os.getenv(DATA_DIR_ENV):
        return Path(env_dir).expanduser().resolve()
    xdg_home = os.getenv("XDG_DATA_HOME")
    base = Path(xdg_home) if xdg_home else Path.home() / ".local" / "share"
    return (base / "paneltrack").expanduser().resolve()


def get_database_uri() -> str:
    """``DATABASE_URI`` verbatim, else a SQLite file in the data dir (created on demand)."""

    if env_uri := os.getenv(DATABASE_URI_ENV):
        return env_uri
    data_dir = get_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)
    return f"sqlite+pysqlite:///{data_dir / DATABASE_FILENAME}"
