"""REPL shell for interactive filesystem navigation.

This module provides an interactive shell for navigating and editing
a mapfs tree through a virtual filesystem interface.
"""

from mapfs.repl.shell import CommandResult, MapShell, ParseFailure, ShellStatus

__all__ = ["MapShell", "CommandResult", "ParseFailure", "ShellStatus"]
