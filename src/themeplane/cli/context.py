"""tpl context command - assemble the context bundle for a message."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from themeplane.cli.utils import build_engine, open_theme


@click.command()
@click.argument("theme", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("message")
@click.option("--active", "active_path", default=None, help="Path of the file open in the editor")
@click.option(
    "--recent",
    "recent_messages",
    multiple=True,
    help="Earlier message in the conversation (repeatable)",
)
@click.option("--budget", type=click.IntRange(min=1), default=None, help="Token budget")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def context_command(
    theme: Path,
    message: str,
    active_path: str | None,
    recent_messages: tuple[str, ...],
    budget: int | None,
    as_json: bool,
) -> None:
    """Show which files would be sent to an agent for MESSAGE.

    THEME is the theme directory.
    """
    config, files = open_theme(theme)
    engine = build_engine(config, files)
    result = engine.select_relevant_files(
        message,
        recent_messages=list(recent_messages),
        active_file_path=active_path,
        budget=budget,
    )

    if as_json:
        click.echo(
            json.dumps(
                {
                    "files": result.paths,
                    "excluded": result.excluded,
                    "budget": {
                        "max_tokens": result.budget.max_tokens,
                        "used_tokens": result.budget.used_tokens,
                    },
                },
                indent=2,
            )
        )
        return

    console = Console()
    table = Table(show_header=True, box=None, padding=(0, 1), pad_edge=False)
    table.add_column("path", style="cyan")
    table.add_column("tokens", justify="right")
    for path, meta in ((p, engine.find_by_path(p)) for p in result.paths):
        table.add_row(path, str(meta.token_estimate if meta else "?"))
    console.print(table)
    console.print(
        f"[bold]{len(result.files)}[/bold] files, "
        f"{result.budget.used_tokens}/{result.budget.max_tokens} tokens"
    )
    if result.excluded:
        console.print(f"[yellow]Excluded:[/yellow] {', '.join(result.excluded)}")
