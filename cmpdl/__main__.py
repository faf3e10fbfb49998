"""
Entry point of the `cmpdl` command, which downloads a modpack and assembles a
`.minecraft` folder. Errors that escape the CLI become exit statuses here:
130 after Ctrl-C and 1 for anything else.
"""

import asyncio
import logging
import os
import sys

import typer
from rich.console import Console

from cmpdl.cli.app import app
from cmpdl.cli.formatters import format_error_with_suggestions
from cmpdl.exceptions import CmpdlError


def main() -> None:
    """Main entry point function."""
    if os.name == "nt":
        try:
            sys.stdout.reconfigure(encoding="utf-8")
            sys.stderr.reconfigure(encoding="utf-8")
        except (TypeError, AttributeError):
            pass

    log = logging.getLogger("cmpdl")
    console = Console(stderr=True)

    try:
        app()
    except (typer.Exit, typer.Abort):
        pass
    except (KeyboardInterrupt, asyncio.CancelledError):
        console.print("\n[yellow]⚠️  Operation cancelled by user.[/yellow]")
        sys.exit(130)
    except CmpdlError as e:
        console.print()
        console.print(format_error_with_suggestions(e))
        sys.exit(1)
    except Exception as e:
        console.print(format_error_with_suggestions(e, {"type": "Unexpected"}))
        log.debug("Full traceback:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
