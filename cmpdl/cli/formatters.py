"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from cmpdl.core.installer import InstallResult
from cmpdl.utils.formatting import format_duration, format_size


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "ProjectNotFoundError": [
            "• Check the project slug in the project's URL.",
            "• Try the other catalog with `--catalog web` or `--catalog api`.",
        ],
        "FileNotFoundInProjectError": [
            "• The modpack references a file the catalog no longer serves.",
            "• Try a newer version of the modpack.",
        ],
        "DirectoryExistsError": [
            "• This version was already downloaded.",
            "• Delete the folder shown above to download it again.",
        ],
        "ClientError": [
            "• The catalog rejected the request.",
            "• The catalog endpoints may have changed; check your configuration.",
        ],
        "ServerError": [
            "• The catalog is having problems.",
            "• Please try again in a few minutes.",
        ],
        "NetworkError": [
            "• A network connection issue occurred.",
            "• Check your internet connection.",
        ],
        "DownloadError": [
            "• A file could not be downloaded.",
            "• Delete the partially created folder and try again.",
        ],
        "ArchiveError": [
            "• The modpack archive is corrupt or uses unsupported compression.",
            "• Delete the partially created folder and try again.",
        ],
        "ManifestError": [
            "• The modpack does not contain a usable manifest.json.",
        ],
        "ConfigurationError": [
            "• Review your configuration file with `cmpdl --show-config`.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config_data: dict[str, Any], console: Console):
    """Displays the effective configuration."""
    content = "\n".join(f"{key} = {value}" for key, value in config_data.items())
    console.print(
        Panel(
            escape(content),
            title=f"Configuration ([dim]{escape(str(config_path))}[/dim])",
            border_style="cyan",
        )
    )


def print_completion_summary(result: InstallResult, console: Console):
    """Displays what to install next and where the assembled files are."""
    manifest = result.manifest
    stats = result.stats

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=20)
    stats_table.add_column(style="white", justify="left")

    if manifest.name:
        pack = manifest.name
        if manifest.version:
            pack += f" {manifest.version}"
        if manifest.author:
            pack += f" by {manifest.author}"
        stats_table.add_row("Modpack:", escape(pack))

    stats_table.add_row(
        "Minecraft:", f"[bold green]{escape(manifest.minecraft.version)}[/bold green]"
    )

    stats_table.add_row("", "")  # Spacer
    stats_table.add_row(
        "✓ Downloaded:", f"[green]{stats.files_downloaded} files[/green]"
    )
    if stats.overrides_copied:
        stats_table.add_row("Overrides:", f"{stats.overrides_copied} files")
    stats_table.add_row(
        "Total Size:", f"[cyan]{format_size(stats.total_size_downloaded)}[/cyan]"
    )
    stats_table.add_row(
        "Time Elapsed:", f"[blue]{format_duration(stats.elapsed)}[/blue]"
    )

    console.print()
    console.print(
        Panel(
            stats_table,
            title="📦 [bold]Finished![/bold]",
            border_style="green",
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )

    console.print(
        f"Now you have to install minecraft [bold]{escape(manifest.minecraft.version)}[/bold]"
    )
    if manifest.minecraft.mod_loaders:
        console.print("Then you need to install mod loaders:")
        for loader in manifest.minecraft.mod_loaders:
            console.print(f"  [yellow]{escape(loader.id)}[/yellow]")
    console.print(
        f"After that copy everything from [cyan]{escape(str(result.dot_minecraft))}"
        "[/cyan]\nto your downloaded .minecraft and you're ready to go!"
    )
    console.print()
