"""
Rendering functions for vcsupdate output.

Core functions return data, this module makes it human-readable.
"""

from typing import List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from .domain.reference import Reference

console = Console()


def _new_table(title: Optional[str]) -> Table:
    return Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )


def render_reference(reference: Reference, title: Optional[str] = None,
                     update_available: Optional[bool] = None) -> None:
    """
    Render a resolved reference as a two-column table.

    Args:
        reference: Reference to display
        title: Optional table title (usually the repository namespace)
        update_available: Adds an "Update" row when not None
    """
    table = _new_table(title)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Ref", reference.name)
    table.add_row("Version", reference.version or "[dim]branch[/dim]")
    table.add_row("Updated", reference.updated or "[dim]unknown[/dim]")
    table.add_row("Download", reference.download_url)
    if update_available is not None:
        table.add_row(
            "Update",
            "[green]available[/green]" if update_available else "[dim]up to date[/dim]"
        )

    console.print(table)


def render_tags(tags: List[str], title: Optional[str] = None) -> None:
    """Render version tags, highest first."""
    if not tags:
        console.print("[yellow]No version tags found.[/yellow]")
        return

    table = _new_table(title)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Tag", style="cyan")
    for index, tag in enumerate(tags, start=1):
        table.add_row(str(index), tag)

    console.print(table)
