"""Console output for CLI commands."""

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from . import utils
from .executor import QueryResult

console = Console()


def emit_result(result: QueryResult, fmt: str) -> None:
    """
    Output a query result.

    Args:
        result: Executed query result
        fmt: Output format ("json" or "console")
    """
    body = utils.to_json(result.formatted)
    if fmt == "json":
        print(body)
        return

    if result.errors:
        console.print(f"\n[bold yellow]Query returned {len(result.errors)} error(s)[/bold yellow]\n")
        for e in result.errors:
            locations = ", ".join(f"line {loc['line']}:{loc['column']}" for loc in e.get("locations") or [])
            msg = f"  [red]✖[/red] {e.get('message')}"
            if locations:
                msg += f" [dim]({locations})[/dim]"
            console.print(msg)
    else:
        console.print("\n[green]✓ Query succeeded[/green]")

    if result.data is not None:
        console.print()
        console.print(Syntax(utils.to_json(result.data), "json", theme="ansi_dark"))
    console.print()


def print_kv(title: str, data: dict) -> None:
    """
    Print key-value pairs (for resolve, schema pull).

    Args:
        title: Section title
        data: Key-value data
    """
    console.print(f"\n[bold cyan]{title}[/bold cyan]\n")

    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="yellow")

    for k, v in data.items():
        table.add_row(k, "-" if v is None else str(v))

    console.print(table)
    console.print()
