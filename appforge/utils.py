"""Shared utility functions for appforge.

Provides JSON I/O, writing a generated file mapping to disk, and Rich-based
console output. None of these are used by the generator itself, which stays
free of I/O; they serve the CLI.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

console = Console()


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


async def save_json(data: dict[str, Any] | list[Any], path: str | Path) -> None:
    """Save data as pretty-printed JSON.

    Parent directories are created automatically and the write runs in a
    worker thread.
    """
    file_path = Path(path)
    content = json.dumps(data, indent=2, ensure_ascii=False, default=str) + "\n"
    await asyncio.to_thread(_write_file, file_path, content)


# ---------------------------------------------------------------------------
# Generated file output
# ---------------------------------------------------------------------------


def resolve_output_path(output_dir: str | Path, relative: str) -> Path:
    """Resolve *relative* inside *output_dir*.

    Raises:
        ValueError: If the path is absolute or escapes the output directory.
    """
    root = Path(output_dir).resolve()
    candidate = Path(relative)
    if candidate.is_absolute():
        raise ValueError(f"Refusing to write absolute path: {relative}")
    target = (root / candidate).resolve()
    if target != root and root not in target.parents:
        raise ValueError(f"Refusing to write outside {root}: {relative}")
    return target


async def write_files(files: dict[str, str], output_dir: str | Path) -> list[Path]:
    """Write a ``{relative_path: content}`` mapping under *output_dir*.

    Every path is validated before anything is written.

    Returns:
        The written file paths, in mapping order.
    """
    targets = [(resolve_output_path(output_dir, rel), content) for rel, content in files.items()]
    await asyncio.gather(*(asyncio.to_thread(_write_file, t, c) for t, c in targets))
    return [t for t, _ in targets]


def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_file_tree(files: dict[str, str], root_label: str) -> None:
    """Print generated file paths as a directory tree with line counts."""
    tree = Tree(f"[bold]{escape(root_label)}[/bold]")
    branches: dict[str, Tree] = {}
    for path in sorted(files):
        *dirs, name = path.split("/")
        node = tree
        prefix = ""
        for d in dirs:
            prefix = f"{prefix}/{d}" if prefix else d
            if prefix not in branches:
                branches[prefix] = node.add(f"[cyan]{escape(d)}/[/cyan]")
            node = branches[prefix]
        lines = files[path].count("\n") + 1
        node.add(f"{escape(name)} [dim]({lines} lines)[/dim]")
    console.print(tree)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")
