"""Pretty-print support for GitGud objects.

Uses rich library for formatted terminal output.
All functions accept their target object and print to a rich Console.

To avoid circular imports, this module does NOT import domain models
at module level. Functions access object attributes dynamically.
"""
from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text


def _make_console(file: Any = None) -> Console:
    """Create a Console, optionally writing to a file-like object."""
    if file is not None:
        return Console(file=file, force_terminal=False, width=100)
    return Console()


def _format_ids(ids: list[int]) -> str:
    return ", ".join(str(i) for i in ids) if ids else "-"


def _markers(info: Any) -> Text:
    """HEAD / branch-tip / merge / new-branch badges for one commit."""
    text = Text()
    if info.is_head:
        text.append("HEAD ", style="bold green")
    for branch_id in info.tip_of:
        text.append(f"tip:{branch_id} ", style="yellow")
    if info.is_merge:
        text.append("merge ", style="magenta")
    if info.is_new_branch:
        text.append("new-branch", style="cyan")
    return text


def pprint_commit_info(info: Any, *, file: Any = None) -> None:
    """Pretty-print a CommitInfo.

    Args:
        info: A CommitInfo instance.
        file: Optional file-like object for output (used in tests).
    """
    console = _make_console(file)

    body_parts: list[str] = [
        f"[bold]Branch:[/bold]    {info.branch_id}",
        f"[bold]Parents:[/bold]   {_format_ids(info.parents)}",
        f"[bold]Children:[/bold]  {_format_ids(info.children)}",
    ]
    markers = _markers(info)
    if markers.plain:
        body_parts.append(f"[bold]Markers:[/bold]   {markers.markup}")

    panel = Panel(
        "\n".join(body_parts),
        title=f"[bold]Commit {info.commit_id}[/bold]",
        border_style="magenta" if info.is_merge else "blue",
    )
    console.print(panel)


def pprint_tree(tree: Any, *, file: Any = None) -> None:
    """Pretty-print a GitTree as a table of commits in creation order.

    Args:
        tree: A GitTree instance.
        file: Optional file-like object for output (used in tests).
    """
    console = _make_console(file)

    table = Table(
        title=(
            f"GitTree -- {tree.num_commits} commit(s), {tree.num_branches} branch(es), "
            f"HEAD {tree.head} on branch {tree.current_branch}"
        ),
        show_lines=False,
    )
    table.add_column("Commit", style="bold", justify="right")
    table.add_column("Branch", justify="right")
    table.add_column("Parents")
    table.add_column("Children")
    table.add_column("")

    for commit in tree.get_all_commits():
        info = tree.to_info(commit.commit_id)
        table.add_row(
            str(info.commit_id),
            str(info.branch_id),
            _format_ids(info.parents),
            _format_ids(info.children),
            _markers(info),
        )

    console.print(table)
