"""Rich rendering helpers for the shell and CLI."""

from typing import Any, Optional

from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from mapfs.storage.codecs import format_value
from mapfs.vfs.base import DirectoryNode, Node


def display_value(value: Any) -> str:
    """Text shown by `cat`: strings as-is, everything else as an EDN literal."""
    if isinstance(value, str):
        return value
    return format_value(value)


def render_tree(node: Node, label: str = "/", max_depth: Optional[int] = None) -> Tree:
    """Build a rich Tree for a subtree.

    Args:
        node: Subtree root
        label: Label of the top node
        max_depth: Stop descending below this depth (None for unlimited)

    Returns:
        Renderable tree
    """
    tree = Tree(f"[bold cyan]{escape(label)}[/bold cyan]")
    if isinstance(node, DirectoryNode):
        _add_children(tree, node, 1, max_depth)
    else:
        tree.add(escape(format_value(node)))
    return tree


def _add_children(branch: Tree, directory: DirectoryNode, depth: int, max_depth: Optional[int]) -> None:
    for name, child in directory.items():
        if isinstance(child, DirectoryNode):
            sub = branch.add(f"[bold cyan]{escape(name)}/[/bold cyan]")
            if max_depth is None or depth < max_depth:
                _add_children(sub, child, depth + 1, max_depth)
        else:
            branch.add(f"{escape(name)} [dim]= {escape(format_value(child))}[/dim]")


def render_listing_table(directory: DirectoryNode) -> Table:
    """Long listing (ls -l) as a table of type, name and info."""
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Type", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("Info", style="dim")

    for name, child in directory.items():
        info = child.get_info()
        if isinstance(child, DirectoryNode):
            table.add_row("D", escape(name), f"{info['children_count']} entries")
        else:
            table.add_row("-", escape(name), escape(f"{info['value_type']}: {info['preview']}"))

    return table
