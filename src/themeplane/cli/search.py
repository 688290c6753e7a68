"""tpl search command - fuzzy file search."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from themeplane.cli.utils import build_engine, open_theme


@click.command()
@click.argument("theme", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("query")
@click.option("--top", "top_n", type=int, default=None, help="Maximum number of matches")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def search_command(theme: Path, query: str, top_n: int | None, as_json: bool) -> None:
    """Find theme files matching a loose description.

    THEME is the theme directory. QUERY is free text such as "cart js".
    """
    config, files = open_theme(theme)
    engine = build_engine(config, files)
    matches = engine.fuzzy_match(query, top_n or config.context.fuzzy_top_n)

    if as_json:
        click.echo(
            json.dumps(
                [{"path": m.path, "kind": m.kind.value, "tokens": m.token_estimate} for m in matches],
                indent=2,
            )
        )
        return

    console = Console()
    if not matches:
        console.print(f"[yellow]No files match[/yellow] {query!r}")
        return

    table = Table(show_header=True, box=None, padding=(0, 1), pad_edge=False)
    table.add_column("#", style="dim", justify="right")
    table.add_column("path", style="cyan")
    table.add_column("kind")
    table.add_column("tokens", justify="right")
    for position, meta in enumerate(matches, start=1):
        table.add_row(str(position), meta.path, meta.kind.value, str(meta.token_estimate))
    console.print(table)
