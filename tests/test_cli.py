"""Tests for the tunely command line."""

import sys
from unittest.mock import patch

import pytest
from loguru import logger

from tunely import cli
from tunely.core.config import CatalogConfig, Config, LoggingConfig


@pytest.fixture
def tmp_config(tmp_path, monkeypatch):
    monkeypatch.setenv("TUNELY_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    yield Config(
        catalog=CatalogConfig(database_path=str(tmp_path / "data" / "tunely.db")),
        logging=LoggingConfig(log_file=str(tmp_path / "data" / "tunely.log")),
    )
    logger.remove()


def test_init_creates_database(tmp_config, tmp_path, capsys):
    with patch.object(cli, "load_config", return_value=tmp_config):
        assert cli.run_init() == 0

    assert (tmp_path / "data" / "tunely.db").exists()
    assert (tmp_path / "data" / "tunely.log").exists()
    assert "Database ready" in capsys.readouterr().out


def test_serve_uses_config_defaults(tmp_config):
    tmp_config.server.port = 9123
    with patch.object(cli, "load_config", return_value=tmp_config), patch(
        "uvicorn.run"
    ) as mock_run:
        assert cli.run_server(None, None, reload=False) == 0

    kwargs = mock_run.call_args.kwargs
    assert mock_run.call_args.args == ("web.backend.main:create_app",)
    assert kwargs["factory"] is True
    assert kwargs["port"] == 9123
    assert kwargs["host"] == "127.0.0.1"


def test_main_without_subcommand_exits(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["tunely"])
    with pytest.raises(SystemExit) as exc_info:
        cli.main()
    assert exc_info.value.code == 1
