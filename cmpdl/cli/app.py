"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from cmpdl import __version__
from cmpdl.core.catalog import create_catalog
from cmpdl.core.installer import InstallResult, ModpackInstaller
from cmpdl.exceptions import CmpdlError
from cmpdl.media.downloader import close_connection_pool
from cmpdl.models.config import InstallConfig
from cmpdl.storage.config_manager import ConfigManager

from .formatters import (
    format_error_with_suggestions,
    print_completion_summary,
    print_config,
)
from .progress_manager import ProgressManager

console = Console()
err_console = Console(stderr=True)

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("cmpdl")

USAGE = "Usage: cmpdl <project name>"

app = typer.Typer(
    name="cmpdl",
    help=(
        "Download a modpack and every mod it lists, then assemble a .minecraft"
        " folder ready to copy."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "cmpdl"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


@app.command()
def main(
    project: str | None = typer.Argument(
        None, help="Project slug, or numeric project ID for the API catalog."
    ),
    catalog: str | None = typer.Option(
        None,
        "--catalog",
        "-c",
        help=(
            "Catalog to resolve the project with: 'api' (JSON API) or 'web'"
            " (HTML pages)."
        ),
    ),
    output_dir: Path | None = typer.Option(  # noqa: B008
        None,
        "--output-dir",
        "-o",
        help="Folder in which modpacks/ (or download/) is created.",
    ),
    config_file: Path = typer.Option(  # noqa: B008
        CONFIG_FILE, "--config", help="Path of the INI configuration file."
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the effective configuration and exit."
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
):
    """Download a modpack by project name."""
    if version:
        console.print(f"[bold]cmpdl[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("cmpdl").setLevel(log_level)

    if not project and not show_config:
        err_console.print(USAGE)
        raise typer.Exit(code=1)

    cli_options = {
        key: value
        for key, value in {"catalog": catalog, "output_dir": output_dir}.items()
        if value is not None
    }

    try:
        config = ConfigManager(config_file).load_config(cli_options)
    except CmpdlError as e:
        err_console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e

    if show_config:
        print_config(
            config_file, config.model_dump(exclude={"config_path"}), console
        )
        raise typer.Exit()

    try:
        result = asyncio.run(_install_async(config, project))
    except CmpdlError as e:
        err_console.print(format_error_with_suggestions(e))
        log.debug("Full traceback:", exc_info=True)
        raise typer.Exit(code=1) from e
    except KeyboardInterrupt as e:
        err_console.print("\n[yellow]⚠️  Operation cancelled by user.[/yellow]")
        raise typer.Exit(code=130) from e

    print_completion_summary(result, console)


async def _install_async(config: InstallConfig, project: str) -> InstallResult:
    catalog_backend = create_catalog(config)
    try:
        async with ProgressManager(console=console) as progress_manager:
            installer = ModpackInstaller(config, catalog_backend, progress_manager)
            return await installer.install(project)
    finally:
        await close_connection_pool()
        await catalog_backend.close()
