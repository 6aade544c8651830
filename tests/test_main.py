"""Tests for the command line entry point."""

import os
from unittest.mock import patch

import pytest

from credstore import __main__ as cli


@pytest.fixture(autouse=True)
def clean_env_file(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make sure ENV_FILE written by main() is undone after each test."""
    monkeypatch.setenv("ENV_FILE", "")
    monkeypatch.delenv("ENV_FILE")


def test_main_runs_app_instance(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "sys.argv",
        ["credstore", "--env-file", "custom.env", "--host", "0.0.0.0", "--port", "8080"],  # noqa: S104
    )
    app = object()

    with (
        patch.object(cli, "create_app", return_value=app) as create_app,
        patch.object(cli.uvicorn, "run") as run,
    ):
        cli.main()

    create_app.assert_called_once_with("custom.env")
    run.assert_called_once_with(app, host="0.0.0.0", port=8080)  # noqa: S104
    assert "ENV_FILE" not in os.environ


@pytest.mark.parametrize(
    ("flags", "reload", "workers"),
    [(["--reload"], True, 1), (["--workers", "3"], False, 3)],
)
def test_main_uses_factory_for_reload_and_workers(
    monkeypatch: pytest.MonkeyPatch,
    flags: list[str],
    reload: bool,
    workers: int,
) -> None:
    monkeypatch.setattr("sys.argv", ["credstore", "--env-file", "prod.env", *flags])

    with (
        patch.object(cli, "create_app") as create_app,
        patch.object(cli.uvicorn, "run") as run,
    ):
        cli.main()

    create_app.assert_not_called()
    run.assert_called_once_with(
        "credstore.app:create_app",
        factory=True,
        host="127.0.0.1",
        port=3000,
        reload=reload,
        workers=workers,
    )
    assert os.environ["ENV_FILE"] == "prod.env"
