"""Settings for spreadsheet reconciliation runs."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final

from paneltrack.domain.reconciliation import MatchScope

from .env import optional_int_env
from .errors import ConfigurationError

IMPORT_WORKERS_ENV: Final[str] = "PANELTRACK_IMPORT_WORKERS"
MATCH_SCOPE_ENV: Final[str] = "PANELTRACK_MATCH_SCOPE"


@dataclass(frozen=True, slots=True)
class ImportConfig:
    workers: int = 1
    match_scope: MatchScope = MatchScope.GLOBAL


def get_import_config() -> ImportConfig:
    workers = optional_int_env(IMPORT_WORKERS_ENV, default=1, minimum=1)
    raw_scope = os.getenv(MATCH_SCOPE_ENV)
    if raw_scope is None or not raw_scope.strip():
        return ImportConfig(workers=workers)
    try:
        scope = MatchScope(raw_scope.strip().lower())
    except ValueError as exc:
        allowed = ", ".join(member.value for member in MatchScope)
        raise ConfigurationError(
            f"{MATCH_SCOPE_ENV} must be one of: {allowed}; got {raw_scope!r}"
        ) from exc
    return ImportConfig(workers=workers, match_scope=scope)
