"""Smoke tests — verify scaffold wiring.

These tests prove that:
* Both entry points are importable and callable.
* The exception hierarchy is correctly structured.
* Version is accessible.
* Exit codes are defined.
* ``--help``/``--version``/``doctor`` survive missing rich or questionary,
  and commands that need them fail cleanly.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from unittest.mock import MagicMock

import pytest

from prometheus_cli import __version__
from prometheus_cli.cli import auth_app, exit_codes
from prometheus_cli.cli.app import main
from prometheus_cli.cli.context import CommandContext
from prometheus_cli.exceptions import (
    BuildError,
    ConfigurationError,
    EncryptedIdentityError,
    EnvironmentCheckError,
    EnvironmentError,
    GitError,
    IdentityError,
    InvalidKeyFormatError,
    ManifestError,
    PrometheusCliError,
    RemoteCallError,
    UpgradeTimeoutError,
    ValidationError,
)


def _hide_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("rich", "rich.console", "rich.logging", "rich.table", "rich.progress"):
        monkeypatch.setitem(sys.modules, name, None)


def _hide_questionary(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "questionary", None)


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------

class TestVersion:
    def test_version_is_semver_like(self) -> None:
        parts = __version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------

class TestExceptions:
    @pytest.mark.parametrize(
        "exc_class",
        [
            ConfigurationError,
            IdentityError,
            ManifestError,
            ValidationError,
            RemoteCallError,
            BuildError,
            GitError,
            EnvironmentError,
        ],
    )
    def test_all_exceptions_inherit_from_base(self, exc_class: type[PrometheusCliError]) -> None:
        assert issubclass(exc_class, PrometheusCliError)

    def test_specialisations(self) -> None:
        assert issubclass(EncryptedIdentityError, IdentityError)
        assert issubclass(InvalidKeyFormatError, IdentityError)
        assert issubclass(UpgradeTimeoutError, RemoteCallError)
        assert issubclass(EnvironmentCheckError, EnvironmentError)

    def test_hint_is_stored(self) -> None:
        err = PrometheusCliError("boom", hint="try this")
        assert str(err) == "boom"
        assert err.hint == "try this"

    def test_hint_defaults_to_none(self) -> None:
        assert PrometheusCliError("boom").hint is None


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

class TestExitCodes:
    def test_values(self) -> None:
        assert exit_codes.SUCCESS == 0
        assert exit_codes.GENERAL_ERROR == 1
        assert exit_codes.UNEXPECTED_ERROR == 2
        assert exit_codes.KEYBOARD_INTERRUPT == 130


# ---------------------------------------------------------------------------
# Optional UI dependencies
# ---------------------------------------------------------------------------

class TestOptionalUiDependencies:
    @pytest.mark.parametrize("entry", [main, auth_app.main])
    def test_help_works_without_rich_or_questionary(
        self, entry: Callable[[list[str]], int], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _hide_rich(monkeypatch)
        _hide_questionary(monkeypatch)

        with pytest.raises(SystemExit) as exc_info:
            entry(["--help"])
        assert exc_info.value.code == 0

    def test_version_works_without_rich_or_questionary(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _hide_rich(monkeypatch)
        _hide_questionary(monkeypatch)

        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0

    def test_doctor_works_without_rich(self, ctx: CommandContext, monkeypatch: pytest.MonkeyPatch) -> None:
        _hide_rich(monkeypatch)

        code = main(["doctor"], context=ctx)
        assert code in (exit_codes.SUCCESS, exit_codes.GENERAL_ERROR)

    def test_table_errors_cleanly_when_rich_missing(
        self, ctx: CommandContext, gateway: MagicMock, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _hide_rich(monkeypatch)
        gateway.responses["get_user_leaderboard"] = [{"rank": 1, "user": "2vxsx-fae", "total_invocations": 1}]

        with pytest.raises(EnvironmentError, match="rich is not installed"):
            main(["leaderboard", "list", "users"], context=ctx)

    def test_init_errors_cleanly_when_questionary_missing(
        self, ctx: CommandContext, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _hide_questionary(monkeypatch)

        with pytest.raises(EnvironmentError, match="questionary is not installed"):
            main(["init"], context=ctx)
