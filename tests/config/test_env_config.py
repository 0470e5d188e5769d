from __future__ import annotations

import logging

import pytest

from paneltrack.config import (
    ConfigurationError,
    ImportConfig,
    MissingConfigurationError,
    configure_logging,
    get_acting_user,
    get_import_config,
    optional_int_env,
    require_env_vars,
)
from paneltrack.config.logging import LOG_FORMAT
from paneltrack.domain.reconciliation import MatchScope


def test_require_env_vars_returns_stripped_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", " value ")

    assert require_env_vars(["EXAMPLE_VAR"]) == {"EXAMPLE_VAR": "value"}


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_A", raising=False)
    monkeypatch.setenv("MISSING_B", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert "MISSING_A, MISSING_B" in str(exc.value)


def test_optional_int_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SOME_INT", raising=False)
    assert optional_int_env("SOME_INT", default=7) == 7

    monkeypatch.setenv("SOME_INT", "12")
    assert optional_int_env("SOME_INT", default=7) == 12

    monkeypatch.setenv("SOME_INT", "twelve")
    with pytest.raises(ConfigurationError, match="integer"):
        optional_int_env("SOME_INT", default=7)

    monkeypatch.setenv("SOME_INT", "0")
    with pytest.raises(ConfigurationError, match=">= 1"):
        optional_int_env("SOME_INT", default=7, minimum=1)


def test_import_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PANELTRACK_IMPORT_WORKERS", raising=False)
    monkeypatch.delenv("PANELTRACK_MATCH_SCOPE", raising=False)

    assert get_import_config() == ImportConfig(workers=1, match_scope=MatchScope.GLOBAL)


def test_import_config_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PANELTRACK_IMPORT_WORKERS", "8")
    monkeypatch.setenv("PANELTRACK_MATCH_SCOPE", " Project ")

    assert get_import_config() == ImportConfig(workers=8, match_scope=MatchScope.PROJECT)


def test_import_config_rejects_unknown_scope(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PANELTRACK_IMPORT_WORKERS", raising=False)
    monkeypatch.setenv("PANELTRACK_MATCH_SCOPE", "building")

    with pytest.raises(ConfigurationError, match="PANELTRACK_MATCH_SCOPE"):
        get_import_config()


def test_acting_user_prefers_explicit_label(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PANELTRACK_USER", "from-env")

    assert get_acting_user(" qc-lead ") == "qc-lead"
    assert get_acting_user("  ") == "from-env"
    assert get_acting_user() == "from-env"


def test_acting_user_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PANELTRACK_USER", raising=False)

    with pytest.raises(MissingConfigurationError, match="PANELTRACK_USER"):
        get_acting_user()


def test_configure_logging_forwards_level_and_format(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: captured.update(kwargs))

    configure_logging(level=logging.DEBUG, force=True)

    assert captured == {
        "level": logging.DEBUG,
        "format": LOG_FORMAT,
        "datefmt": "%H:%M:%S",
        "force": True,
    }
