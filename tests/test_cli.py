import sys

import pytest
from typer.testing import CliRunner

from cmpdl import __main__ as entry_point
from cmpdl import __version__
from cmpdl.cli import app as app_module
from cmpdl.cli.app import USAGE, app
from cmpdl.exceptions import ProjectNotFoundError

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path):
    return tmp_path / "config.ini"


def test_no_arguments_prints_usage(config_file):
    result = runner.invoke(app, ["--config", str(config_file)])

    assert result.exit_code == 1
    assert USAGE in result.output


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_show_config(config_file):
    config_file.write_text("[DEFAULT]\ncatalog = web\n", encoding="utf-8")

    result = runner.invoke(app, ["--show-config", "--config", str(config_file)])

    assert result.exit_code == 0
    assert "catalog = web" in result.output


def test_invalid_config_exits_with_error(config_file):
    config_file.write_text("[DEFAULT]\npage_size = 0\n", encoding="utf-8")

    result = runner.invoke(app, ["all-the-mods", "--config", str(config_file)])

    assert result.exit_code == 1
    assert "ConfigurationError" in result.output


def test_failed_install_exits_with_error(config_file, monkeypatch):
    async def fake_install(config, project):
        raise ProjectNotFoundError(project)

    monkeypatch.setattr(app_module, "_install_async", fake_install)

    result = runner.invoke(app, ["no-such-pack", "--config", str(config_file)])

    assert result.exit_code == 1
    assert "Can't find project 'no-such-pack'." in result.output


def test_options_reach_install(config_file, monkeypatch, tmp_path):
    seen = {}

    async def fake_install(config, project):
        seen.update(project=project, catalog=config.catalog, output=config.output_dir)
        raise ProjectNotFoundError(project)

    monkeypatch.setattr(app_module, "_install_async", fake_install)

    runner.invoke(
        app,
        ["rlcraft", "-c", "web", "-o", str(tmp_path), "--config", str(config_file)],
    )

    assert seen == {"project": "rlcraft", "catalog": "web", "output": tmp_path}


@pytest.mark.parametrize(
    "error, exit_code",
    [(KeyboardInterrupt(), 130), (RuntimeError("disk on fire"), 1)],
)
def test_entry_point_exit_codes(config_file, monkeypatch, error, exit_code):
    async def fake_install(config, project):
        raise error

    monkeypatch.setattr(app_module, "_install_async", fake_install)
    monkeypatch.setattr(
        sys, "argv", ["cmpdl", "all-the-mods", "--config", str(config_file)]
    )

    with pytest.raises(SystemExit) as exc_info:
        entry_point.main()

    assert exc_info.value.code == exit_code
