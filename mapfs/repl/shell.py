"""Interactive REPL shell for filesystem navigation."""

import logging
import shlex
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from jmespath.exceptions import JMESPathError
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import FileHistory
from prompt_toolkit.styles import Style
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from mapfs.config import MapFSConfig, get_history_path
from mapfs.repl.render import display_value, render_listing_table, render_tree
from mapfs.storage.codecs import CodecError, format_value, read_literal
from mapfs.storage.persistence import PersistenceManager
from mapfs.vfs import DirectoryNode, OpResult, ResultKind, Session, format_path

logger = logging.getLogger(__name__)


class ShellStatus(Enum):
    """Outcomes that only exist at the shell boundary."""
    PARSE_FAILURE = "parse_failure"
    UNKNOWN_COMMAND = "unknown_command"
    ERROR = "error"


class ParseFailure(ValueError):
    """Malformed operator input."""
    pass


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one command line.

    Attributes:
        kind: Operation outcome or shell-level status
        message: Text for the operator
        output: Optional rich renderable shown instead of the message
    """
    kind: Union[ResultKind, ShellStatus]
    message: str = ""
    output: Any = None

    @property
    def ok(self) -> bool:
        return self.kind is ResultKind.OK

    @classmethod
    def from_op(cls, result: OpResult) -> "CommandResult":
        return cls(result.kind, result.message)


@dataclass(frozen=True)
class Command:
    """An entry of the command table.

    Attributes:
        name: Name typed by the operator
        handler: Called with the parsed argument list
        min_args: Fewest arguments accepted
        max_args: Most arguments accepted (None for no limit)
        usage: Usage line shown on arity errors and in help
        help: One-line description
        raw_tail: Take the last argument as the unparsed rest of the line
    """
    name: str
    handler: Callable[[List[str]], CommandResult]
    min_args: int
    max_args: Optional[int]
    usage: str
    help: str
    raw_tail: bool = False


class PathCompleter(Completer):
    """Tab completion for command names and VFS paths."""

    def __init__(self, shell: "MapShell"):
        self.shell = shell

    def get_completions(self, document, complete_event):
        """Get completion candidates."""
        text = document.text_before_cursor
        words = text.split()

        # Completing the command name itself
        if len(words) <= 1 and not text.endswith(" "):
            partial = words[0] if words else ""
            for name in sorted(self.shell.commands):
                if name.startswith(partial):
                    yield Completion(name, start_position=-len(partial))
            return

        partial = "" if text.endswith(" ") else words[-1]
        for candidate in self.shell.session.complete(partial):
            yield Completion(candidate, start_position=-len(partial))


class MapShell:
    """Interactive shell for navigating and editing the VFS.

    Provides a Linux-like shell interface with commands:
    - cd, pwd, ls, tree: Navigate the virtual filesystem
    - cat, query: Read values
    - put, mkdir, cp, mv, rm, rmdir: Edit the tree
    - load, save, write: Persist the tree
    - help, ?: Command help
    - exit, quit: Exit the shell
    """

    def __init__(
        self,
        session: Optional[Session] = None,
        config: Optional[MapFSConfig] = None,
        console: Optional[Console] = None,
    ):
        """Initialize the REPL shell.

        Args:
            session: Session to operate on (a new empty one if None)
            config: Shell and storage settings
            console: Console for output
        """
        self.config = config or MapFSConfig()
        self.session = session or Session(persistence=PersistenceManager(self.config.storage))
        self.console = console or Console(no_color=not self.config.shell.color)
        self.running = True
        self.commands: Dict[str, Command] = {}
        self._register_commands()

    def _register(self, names: List[str], handler, min_args: int, max_args: Optional[int],
                  usage: str, help: str, raw_tail: bool = False) -> None:
        for name in names:
            self.commands[name] = Command(name, handler, min_args, max_args, usage, help, raw_tail)

    def _register_commands(self) -> None:
        """Build the command table."""
        self._register(["ls"], self.cmd_ls, 0, 2, "ls [-l] [path]", "List directory contents")
        self._register(["pwd"], self.cmd_pwd, 0, 0, "pwd", "Print working directory")
        self._register(["cd"], self.cmd_cd, 0, 1, "cd [path]", "Change directory (no path: root)")
        self._register(["tree"], self.cmd_tree, 0, 1, "tree [path]", "Show a subtree")
        self._register(["cat"], self.cmd_cat, 1, 1, "cat <key>", "Print a value in the current directory")
        self._register(["query"], self.cmd_query, 1, 1, "query <expression>",
                       "Evaluate a JMESPath expression on the current directory", raw_tail=True)
        self._register(["put"], self.cmd_put, 2, 2, "put <key> <value>",
                       "Store an EDN value in the current directory", raw_tail=True)
        self._register(["mkdir"], self.cmd_mkdir, 1, 1, "mkdir <key>", "Create an empty directory")
        self._register(["cp"], self.cmd_cp, 2, 2, "cp <src> <dest>", "Copy a value or directory")
        self._register(["mv", "rename"], self.cmd_mv, 2, 2, "mv <src> <dest>", "Move or rename")
        self._register(["rm"], self.cmd_rm, 1, 1, "rm <path>", "Remove a value")
        self._register(["rmdir"], self.cmd_rmdir, 1, 1, "rmdir <path>", "Remove a directory")
        self._register(["load"], self.cmd_load, 1, 1, "load <file>", "Load a filesystem file")
        self._register(["save"], self.cmd_save, 0, 0, "save", "Save to the loaded file")
        self._register(["write"], self.cmd_write, 1, 1, "write <file>", "Write the filesystem to a file")
        self._register(["help", "?"], self.cmd_help, 0, 1, "help [command]", "Show help")
        self._register(["exit", "quit"], self.cmd_exit, 0, 0, "exit", "Exit the shell")

    def get_prompt(self) -> str:
        """Generate prompt showing current path.

        Returns:
            Prompt string like "mapfs:/config/db> "
        """
        return f"{self.config.shell.prompt}:{format_path(self.session.pwd())}> "

    def _create_prompt_session(self) -> PromptSession:
        history_path = get_history_path(self.config)
        history_path.parent.mkdir(parents=True, exist_ok=True)
        return PromptSession(
            history=FileHistory(str(history_path)),
            completer=PathCompleter(self),
            style=Style.from_dict(
                {
                    "prompt": "ansicyan bold",
                }
            ),
        )

    def run(self):
        """Run the shell main loop."""
        if self.config.shell.show_banner:
            self.console.print(
                "[bold cyan]mapfs shell[/bold cyan] - Interactive map filesystem", style="bold"
            )
            if self.session.filename:
                self.console.print(f"Filesystem: {escape(self.session.filename)}")
            self.console.print("Type 'help' for available commands, 'exit' to quit.\n")

        prompt_session = self._create_prompt_session()

        while self.running:
            try:
                line = prompt_session.prompt(self.get_prompt())
            except KeyboardInterrupt:
                self.console.print("\nUse 'exit' or 'quit' to exit the shell.")
                continue
            except EOFError:
                break

            try:
                self.print_result(self.execute(line))
            except Exception as e:
                logger.debug("Command failed", exc_info=True)
                self.console.print(f"[red]Error:[/red] {escape(str(e))}", style="bold")

    def execute(self, line: str) -> CommandResult:
        """Parse and execute a command line.

        Args:
            line: Command line to execute

        Returns:
            Result of the command
        """
        line = line.strip()
        if not line:
            return CommandResult(ResultKind.OK)

        parts = line.split(None, 1)
        name = parts[0]
        rest = parts[1] if len(parts) > 1 else ""

        command = self.commands.get(name)
        if command is None:
            return CommandResult(
                ShellStatus.UNKNOWN_COMMAND,
                f"Unknown command: {name}. Type 'help' for available commands.",
            )

        logger.debug(f"Executing {name} {rest}")
        try:
            args = self.parse_args(command, rest)
            return command.handler(args)
        except ParseFailure as e:
            return CommandResult(ShellStatus.PARSE_FAILURE, f"{name}: {e}")
        except FileNotFoundError as e:
            return CommandResult(ShellStatus.ERROR, f"{name}: {e}")
        except CodecError as e:
            return CommandResult(ShellStatus.ERROR, f"{name}: invalid file content: {e}")
        except OSError as e:
            return CommandResult(ShellStatus.ERROR, f"{name}: {e}")

    def parse_args(self, command: Command, rest: str) -> List[str]:
        """Split the argument text of a command and check its arity.

        Raises:
            ParseFailure: On unbalanced quotes or a wrong argument count
        """
        if command.raw_tail:
            args = rest.strip().split(None, command.max_args - 1) if rest.strip() else []
        else:
            try:
                args = shlex.split(rest)
            except ValueError as e:
                raise ParseFailure(str(e))

        if len(args) < command.min_args or (
            command.max_args is not None and len(args) > command.max_args
        ):
            raise ParseFailure(f"usage: {command.usage}")

        return args

    def print_result(self, result: CommandResult) -> None:
        """Show a command result on the console."""
        if result.output is not None:
            self.console.print(result.output)
        elif result.message:
            if result.ok:
                self.console.print(escape(result.message))
            else:
                self.console.print(f"[red]{escape(result.message)}[/red]")

    # Command implementations

    def cmd_ls(self, args: List[str]) -> CommandResult:
        """List directory contents.

        Usage: ls [-l] [path]
        """
        long_format = "-l" in args
        paths = [arg for arg in args if arg != "-l"]
        if len(paths) > 1:
            raise ParseFailure("usage: ls [-l] [path]")
        path = paths[0] if paths else None

        node = self.session.get_node(path)
        shown = path or format_path(self.session.pwd())
        if node is None:
            return CommandResult(ResultKind.NOT_FOUND, f"ls: {shown}: No such file or directory")
        if not isinstance(node, DirectoryNode):
            return CommandResult(ResultKind.TYPE_MISMATCH, f"ls: {shown}: Not a directory")

        listing = self.session.ls(path)
        if long_format:
            return CommandResult(ResultKind.OK, listing, output=render_listing_table(node))
        return CommandResult(ResultKind.OK, listing)

    def cmd_pwd(self, args: List[str]) -> CommandResult:
        """Print working directory.

        Usage: pwd
        """
        return CommandResult(ResultKind.OK, format_path(self.session.pwd()))

    def cmd_cd(self, args: List[str]) -> CommandResult:
        """Change directory.

        Usage: cd [path]
        """
        # cd with no args goes to root
        path = args[0] if args else "/"
        return CommandResult.from_op(self.session.cd(path))

    def cmd_tree(self, args: List[str]) -> CommandResult:
        """Show a subtree.

        Usage: tree [path]
        """
        path = args[0] if args else None
        node = self.session.get_node(path)
        if node is None:
            shown = path or format_path(self.session.pwd())
            return CommandResult(ResultKind.NOT_FOUND, f"tree: {shown}: No such file or directory")

        label = format_path(self.session.resolve(path))
        return CommandResult(ResultKind.OK, label, output=render_tree(node, label))

    def cmd_cat(self, args: List[str]) -> CommandResult:
        """Print a value of the current directory.

        Usage: cat <key>
        """
        key = args[0]
        current = self.session.get_node()
        if not isinstance(current, DirectoryNode) or key not in current:
            return CommandResult(ResultKind.NOT_FOUND, f"cat: {key}: No such file or directory")
        return CommandResult(ResultKind.OK, display_value(self.session.cat(key)))

    def cmd_query(self, args: List[str]) -> CommandResult:
        """Evaluate a JMESPath expression against the current directory.

        Usage: query <expression>
        """
        try:
            value = self.session.query(args[0])
        except JMESPathError as e:
            raise ParseFailure(str(e))
        return CommandResult(ResultKind.OK, format_value(value))

    def cmd_put(self, args: List[str]) -> CommandResult:
        """Store a value.

        Usage: put <key> <value>

        The value is an EDN literal: 1, "text", [1 2], {:a 1}. A bare word
        is stored as a string.
        """
        key, text = args
        try:
            node = read_literal(text)
        except CodecError as e:
            raise ParseFailure(f"invalid value: {e}")
        return CommandResult.from_op(self.session.put(key, node))

    def cmd_mkdir(self, args: List[str]) -> CommandResult:
        """Create an empty directory.

        Usage: mkdir <key>
        """
        return CommandResult.from_op(self.session.mkdir(args[0]))

    def cmd_cp(self, args: List[str]) -> CommandResult:
        """Copy a value or directory.

        Usage: cp <src> <dest>
        """
        return CommandResult.from_op(self.session.cp(args[0], args[1]))

    def cmd_mv(self, args: List[str]) -> CommandResult:
        """Move or rename a value or directory.

        Usage: mv <src> <dest>
        """
        return CommandResult.from_op(self.session.rename(args[0], args[1]))

    def cmd_rm(self, args: List[str]) -> CommandResult:
        """Remove a value.

        Usage: rm <path>
        """
        return CommandResult.from_op(self.session.rm(args[0]))

    def cmd_rmdir(self, args: List[str]) -> CommandResult:
        """Remove a directory.

        Usage: rmdir <path>
        """
        return CommandResult.from_op(self.session.rmdir(args[0]))

    def cmd_load(self, args: List[str]) -> CommandResult:
        """Load a filesystem file.

        Usage: load <file>
        """
        return CommandResult.from_op(self.session.load(args[0]))

    def cmd_save(self, args: List[str]) -> CommandResult:
        """Save to the file the filesystem was loaded from.

        Usage: save
        """
        return CommandResult.from_op(self.session.save())

    def cmd_write(self, args: List[str]) -> CommandResult:
        """Write the filesystem to a file.

        Usage: write <file>
        """
        return CommandResult.from_op(self.session.write(args[0]))

    def cmd_help(self, args: List[str]) -> CommandResult:
        """Show help information.

        Usage: help [command]
        """
        if args:
            command = self.commands.get(args[0])
            if command is None:
                return CommandResult(ShellStatus.UNKNOWN_COMMAND, f"Unknown command: {args[0]}")
            return CommandResult(ResultKind.OK, f"{command.usage}\n  {command.help}")

        table = Table(show_header=True, header_style="bold magenta",
                      title="Available Commands", title_style="bold cyan")
        table.add_column("Command", style="cyan")
        table.add_column("Description", style="white")

        seen = set()
        lines = []
        for command in self.commands.values():
            if command.handler in seen:
                continue
            seen.add(command.handler)
            table.add_row(escape(command.usage), command.help)
            lines.append(f"  {command.usage} - {command.help}")

        return CommandResult(ResultKind.OK, "\n".join(lines), output=table)

    def cmd_exit(self, args: List[str]) -> CommandResult:
        """Exit the shell.

        Usage: exit
        """
        self.running = False
        return CommandResult(ResultKind.OK, "Goodbye!")
