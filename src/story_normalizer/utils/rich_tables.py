# ABOUTME: Rich table utilities for validation summaries, issue lists and alias tables
# ABOUTME: Provides pre-configured table generators for the CLI display patterns

from collections.abc import Mapping
from typing import Any

from rich.box import ROUNDED, SIMPLE
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from story_normalizer.schema.models import Issue


def create_key_value_table(
    title: str,
    data: dict[str, str],
    title_style: str = "bold cyan",
    key_style: str = "bold blue",
    value_style: str = "green",
    box_style=ROUNDED,
) -> Table:
    """Create a key-value table.

    Args:
        title: Table title with emoji/styling
        data: Dictionary of key-value pairs to display
        title_style: Style for the table title
        key_style: Style for the key column
        value_style: Style for the value column
        box_style: Border style for the table

    Returns:
        Formatted Rich table ready for printing
    """
    table = Table(
        title=f"[{title_style}]{title}[/{title_style}]",
        box=box_style,
        show_header=True,
        header_style="bold magenta",
        border_style="cyan",
        title_justify="left",
        expand=False,
    )

    table.add_column("Field", style=key_style, width=None, no_wrap=False)
    table.add_column("Value", style=value_style, width=None, no_wrap=False)

    for key, value in data.items():
        table.add_row(key, str(value))

    return table


def create_multi_column_table(
    title: str,
    columns: list[tuple[str, str]],
    rows: list[list[str]],
    title_style: str = "bold cyan",
    header_style: str = "bold magenta",
    alternate_row_styles: list[str] | None = None,
    box_style=ROUNDED,
) -> Table:
    """Create a multi-column table.

    Args:
        title: Table title with emoji/styling
        columns: List of (column_name, column_style) tuples
        rows: List of row data
        title_style: Style for the table title
        header_style: Style for column headers
        alternate_row_styles: Alternating row styles for zebra striping
        box_style: Border style for the table

    Returns:
        Formatted Rich table ready for printing
    """
    table = Table(
        title=f"[{title_style}]{title}[/{title_style}]",
        box=box_style,
        show_header=True,
        header_style=header_style,
        border_style="cyan",
        title_justify="left",
        row_styles=alternate_row_styles or ["", "dim"],
        expand=True,
    )

    for name, style in columns:
        table.add_column(name, style=style)

    for row in rows:
        table.add_row(*row)

    return table


def create_validation_summary_table(decision: Any) -> Table:
    """Create a summary table for one validated document.

    Args:
        decision: IngestionDecision with its validation result

    Returns:
        Summary table with entity counts and verdict
    """
    result = decision.result
    data = result.data

    summary_data = {
        "📖 Story": escape(f"{data.story.system_name} - {data.story.display_name}") if data else "Not available",
        "🎭 Characters": str(len(data.characters)) if data else "0",
        "💬 Chats": str(len(data.chats)) if data else "0",
        "🎬 Beats": str(len(data.beats)) if data else "0",
        "✉️ Messages": str(sum(len(beat.opening_messages) for beat in data.beats)) if data else "0",
        "⚠️ Warnings": str(len(result.warnings)),
        "🚨 Errors": str(len(result.errors)),
        "🔒 Strict Mode": "On" if decision.strict_mode else "Off",
        "✅ Verdict": f"[green]{decision.reason}[/green]" if decision.accepted else f"[red]{decision.reason}[/red]",
    }

    return create_key_value_table(
        title="🔎 Validation Summary",
        data=summary_data,
        title_style="bold magenta",
        key_style="cyan",
        value_style="white",
    )


def _format_value(value: Any, length: int = 60) -> str:
    if value is None:
        return ""
    text = repr(value)
    return text[:length] + "..." if len(text) > length else text


def create_issues_table(title: str, issues: list[Issue], limit: int | None = None, style: str = "yellow") -> Table:
    """Create a table listing validation issues.

    Args:
        title: Table title
        issues: Warnings or errors to list
        limit: Maximum number of rows, None for all
        style: Color used for the message column

    Returns:
        Issue table, with a trailing row noting hidden issues
    """
    shown = issues if limit is None else issues[:limit]
    rows = [
        [escape(issue.path or "<root>"), issue.code.value, escape(issue.message), escape(_format_value(issue.value))]
        for issue in shown
    ]
    if len(shown) < len(issues):
        rows.append(["...", "", f"{len(issues) - len(shown)} more not shown", ""])

    return create_multi_column_table(
        title=title,
        columns=[("Path", "bold blue"), ("Code", "cyan"), ("Message", style), ("Value", "dim")],
        rows=rows,
    )


def create_alias_table(kind: str, mapping: Mapping[str, str]) -> Table:
    """Create a table showing an entity kind's alias → canonical field mappings."""
    return create_multi_column_table(
        title=f"🔤 {kind.title()} Field Aliases",
        columns=[("Alias", "bold blue"), ("Canonical Field", "green")],
        rows=[[alias, canonical] for alias, canonical in mapping.items()],
        box_style=SIMPLE,
    )


def create_logging_status_table(status: dict[str, Any]) -> Table:
    """Create a logging configuration status table.

    Args:
        status: Logging status dictionary

    Returns:
        Styled logging configuration table
    """
    logging_data = {
        "🔧 Mode": status["mode"].title(),
        "📁 Log Directory": status["log_directory"] or "N/A (production mode)",
        "🔇 Suppressed Libraries": ", ".join(status["third_party_suppressed"]),
    }

    if status["log_files"]["main"]:
        logging_data["📝 Main Log"] = status["log_files"]["main"]
    if status["log_files"]["json"]:
        logging_data["📊 JSON Log"] = status["log_files"]["json"]
    if status["log_files"]["errors"]:
        logging_data["🚨 Error Log"] = status["log_files"]["errors"]

    return create_key_value_table(
        title="🔍 Logging Configuration",
        data=logging_data,
        title_style="bold green",
        key_style="blue",
        value_style="white",
    )


def print_rich_table(console: Console, table: Table) -> None:
    """Print a rich table with consistent spacing and style.

    Args:
        console: Rich console instance
        table: Configured table to print
    """
    console.print()  # Add spacing before
    console.print(table)
    console.print()  # Add spacing after
