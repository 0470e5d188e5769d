"""Who is acting: the label written into status history entries."""

from __future__ import annotations

from typing import Final

from .env import require_env_vars

ACTING_USER_ENV: Final[str] = "PANELTRACK_USER"


def get_acting_user(explicit: str | None = None) -> str:
    """Prefer an explicit label, else ``PANELTRACK_USER``. Used for attribution only."""

    if explicit is not None and explicit.strip():
        return explicit.strip()
    return require_env_vars([ACTING_USER_ENV])[ACTING_USER_ENV]
