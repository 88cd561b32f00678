"""Decorators for mapfs CLI commands."""

import functools
import logging
from typing import Any, Callable

import typer
from rich.console import Console
from rich.markup import escape

from mapfs.storage.codecs import CodecError

logger = logging.getLogger(__name__)
console = Console()


def handle_storage_errors(func: Callable) -> Callable:
    """
    Decorator to handle common filesystem-file errors.

    Centralizes error handling for:
    - FileNotFoundError: Filesystem file doesn't exist
    - PermissionError: No access to files
    - CodecError: File content is malformed or cannot be encoded
    - ValueError: Invalid data or arguments
    - General exceptions: Unexpected errors
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Any:
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except FileNotFoundError as e:
            console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
            raise typer.Exit(code=1)
        except PermissionError as e:
            console.print(f"[bold red]Error:[/bold red] Permission denied: {escape(str(e))}")
            console.print("[yellow]Tip: Check file permissions[/yellow]")
            raise typer.Exit(code=1)
        except CodecError as e:
            console.print(f"[bold red]Error:[/bold red] Invalid filesystem file: {escape(str(e))}")
            raise typer.Exit(code=1)
        except ValueError as e:
            console.print(f"[bold red]Error:[/bold red] Invalid input: {escape(str(e))}")
            raise typer.Exit(code=1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            raise typer.Exit(code=130)
        except Exception as e:
            logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
            console.print(f"[bold red]Unexpected error:[/bold red] {escape(str(e))}")
            raise typer.Exit(code=1)

    return wrapper
