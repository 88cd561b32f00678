import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.traceback import install

from . import __version__
from .config import load_config
from .decorators import handle_storage_errors
from .repl.render import display_value, render_listing_table, render_tree
from .storage.codecs import format_value
from .storage.persistence import PersistenceManager
from .vfs import DirectoryNode, Session, format_path

# Initialize Rich Traceback for better error messages
install(show_locals=True)

# Initialize Rich Console
console = Console()

# Configure logging to use Rich's RichHandler
logging.basicConfig(
    level=logging.WARNING,
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True)]
)
logger = logging.getLogger(__name__)

app = typer.Typer(help="Browse and edit nested data as a virtual filesystem.")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose mode"),
):
    """
    mapfs - explore EDN, JSON and YAML data as if it were a directory tree.

    Open a file in the interactive shell, or inspect it directly with
    ls, cat, tree and query.
    """
    if verbose:
        logging.getLogger("mapfs").setLevel(logging.DEBUG)
        console.print("[bold green]Verbose mode enabled.[/bold green]")


def _open(filename: Path) -> Session:
    """Load a filesystem file into a new session."""
    config = load_config()
    session = Session(persistence=PersistenceManager(config.storage))
    session.load(filename)
    return session


@app.command()
def about():
    """Display information about mapfs."""
    console.print(f"[bold cyan]mapfs {__version__}[/bold cyan] - map filesystem")
    console.print("")
    console.print("Explore nested data with filesystem verbs:")
    console.print("  • ls, cd, pwd, tree   navigate directories (maps)")
    console.print("  • cat, query          read values")
    console.print("  • put, mkdir, cp, mv  edit the tree")
    console.print("  • rm, rmdir           remove entries")
    console.print("  • load, save, write   persist as EDN, JSON or YAML")
    console.print("")
    console.print("[bold]Getting Started:[/bold]")
    console.print("  mapfs shell data.edn")


@app.command()
@handle_storage_errors
def shell(
    filename: Optional[Path] = typer.Argument(None, help="Filesystem file to load"),
):
    """
    Launch interactive shell for navigating a filesystem file.

    Commands:
        cd, pwd, ls, tree    - Navigate the VFS
        cat, query           - Read values
        put, mkdir, cp, mv   - Edit the tree
        rm, rmdir            - Remove entries
        load, save, write    - Persist the tree
        help                 - Show help

    Example:
        mapfs shell data.edn
    """
    from .repl import MapShell

    config = load_config()
    session = Session(persistence=PersistenceManager(config.storage))
    if filename is not None:
        session.load(filename)
        logger.info(f"Loaded filesystem: {filename}")

    MapShell(session=session, config=config).run()


@app.command()
@handle_storage_errors
def ls(
    filename: Path = typer.Argument(..., help="Filesystem file"),
    path: Optional[str] = typer.Argument(None, help="Directory to list (default: /)"),
    long: bool = typer.Option(False, "--long", "-l", help="Show a detailed table"),
):
    """List a directory of a filesystem file."""
    session = _open(filename)
    node = session.get_node(path)

    if not isinstance(node, DirectoryNode):
        console.print(f"[red]ls: {escape(path or '/')}: No such directory[/red]")
        raise typer.Exit(code=1)

    if long:
        console.print(render_listing_table(node))
    else:
        listing = session.ls(path)
        if listing:
            console.print(escape(listing), highlight=False)


@app.command()
@handle_storage_errors
def cat(
    filename: Path = typer.Argument(..., help="Filesystem file"),
    path: str = typer.Argument(..., help="Path of the value, e.g. config/port"),
):
    """Print a value of a filesystem file."""
    session = _open(filename)
    resolved = session.resolve(path)
    if not resolved:
        console.print("[red]cat: a key is required[/red]")
        raise typer.Exit(code=1)

    session.cd(list(resolved[:-1]))
    if session.get_node([resolved[-1]]) is None:
        console.print(f"[red]cat: {escape(path)}: No such file or directory[/red]")
        raise typer.Exit(code=1)

    console.print(escape(display_value(session.cat(resolved[-1]))), highlight=False)


@app.command()
@handle_storage_errors
def tree(
    filename: Path = typer.Argument(..., help="Filesystem file"),
    path: Optional[str] = typer.Argument(None, help="Subtree to show (default: /)"),
    depth: Optional[int] = typer.Option(None, "--depth", "-d", help="Maximum depth to show"),
):
    """Show a filesystem file as a tree."""
    session = _open(filename)
    node = session.get_node(path)
    if node is None:
        console.print(f"[red]tree: {escape(path or '/')}: No such file or directory[/red]")
        raise typer.Exit(code=1)

    console.print(render_tree(node, format_path(session.resolve(path)), max_depth=depth))


@app.command()
@handle_storage_errors
def query(
    filename: Path = typer.Argument(..., help="Filesystem file"),
    expression: str = typer.Argument(..., help="JMESPath expression"),
    path: Optional[str] = typer.Option(None, "--path", "-p", help="Subtree to query (default: /)"),
):
    """
    Evaluate a JMESPath expression against a filesystem file.

    Example:
        mapfs query data.json "users[?age > `30`].name"
    """
    from jmespath.exceptions import JMESPathError

    session = _open(filename)
    try:
        result = session.query(expression, path)
    except JMESPathError as e:
        console.print(f"[red]query: invalid expression: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    console.print(escape(format_value(result)), highlight=False)


@app.command()
@handle_storage_errors
def convert(
    source: Path = typer.Argument(..., help="File to read"),
    dest: Path = typer.Argument(..., help="File to write (format from its suffix)"),
):
    """
    Re-encode a filesystem file in another format.

    Example:
        mapfs convert data.edn data.yaml
    """
    session = _open(source)
    result = session.write(dest)
    console.print(f"[green]✓ {escape(result.message)}[/green]")


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    init: bool = typer.Option(False, "--init", help="Initialize config file with defaults"),
    # Shell settings
    set_prompt: Optional[str] = typer.Option(None, "--prompt", help="Set shell prompt prefix"),
    set_history_file: Optional[str] = typer.Option(None, "--history-file", help="Set shell history file"),
    set_color: Optional[bool] = typer.Option(None, "--color/--no-color", help="Enable colored output"),
    set_banner: Optional[bool] = typer.Option(None, "--banner/--no-banner", help="Show banner on shell start"),
    # Storage settings
    set_format: Optional[str] = typer.Option(None, "--default-format", help="Format for unknown suffixes (edn, json, yaml)"),
    set_json_indent: Optional[int] = typer.Option(None, "--json-indent", help="Indent used when writing JSON"),
):
    """
    View or edit mapfs configuration.

    Configuration is stored at ~/.config/mapfs/config.json (or ~/.mapfs/config.json).

    Examples:
        # Show current configuration
        mapfs config --show

        # Write YAML for files without a known suffix
        mapfs config --default-format yaml
    """
    from .config import ensure_config_exists, get_config_path, update_config
    from .storage.codecs import CODECS

    if init:
        config_path = ensure_config_exists()
        console.print(f"[green]Configuration initialized at {config_path}[/green]")
        return

    if set_format is not None and set_format.lower() not in CODECS:
        console.print(f"[red]Unknown format: {escape(set_format)} (choose from {', '.join(CODECS)})[/red]")
        raise typer.Exit(code=1)

    has_settings = any([
        set_prompt, set_history_file, set_color is not None, set_banner is not None,
        set_format, set_json_indent is not None,
    ])

    if show or not has_settings:
        current = load_config()
        console.print("\n[bold]mapfs Configuration[/bold]")
        console.print(f"[dim]Location: {get_config_path()}[/dim]\n")

        console.print("[bold cyan]Shell Settings:[/bold cyan]")
        console.print(f"  Prompt:       {escape(current.shell.prompt)}")
        if current.shell.history_file:
            console.print(f"  History File: {escape(current.shell.history_file)}")
        else:
            console.print("  History File: [dim]default[/dim]")
        console.print(f"  Color:        {current.shell.color}")
        console.print(f"  Banner:       {current.shell.show_banner}")

        console.print("\n[bold cyan]Storage Settings:[/bold cyan]")
        console.print(f"  Default Format: {current.storage.default_format}")
        console.print(f"  JSON Indent:    {current.storage.json_indent}")
        return

    update_config(
        shell_prompt=set_prompt,
        shell_history_file=set_history_file,
        shell_color=set_color,
        shell_show_banner=set_banner,
        storage_default_format=set_format.lower() if set_format else None,
        storage_json_indent=set_json_indent,
    )
    console.print(f"[green]✓ Configuration updated at {get_config_path()}[/green]")


if __name__ == "__main__":
    app()
