"""tpl validate command - validate a change set against a theme."""

import json
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from themeplane.cli.utils import open_theme
from themeplane.config import ThemePlaneConfig
from themeplane.core.errors import ThemePlaneError
from themeplane.files import load_changes
from themeplane.index import FileRecord
from themeplane.validation import (
    ChangeSetValidator,
    CrossFileConsistencyChecker,
    DesignTokenChecker,
    StaticTokenSource,
    UnifiedValidationResult,
    validate_code_changes_sync,
)
from themeplane.validation.unified import AsyncChecker, SyncChecker

_SEVERITY_STYLE = {"error": "bold red", "warning": "yellow", "info": "dim"}


def _sync_checkers(config: ThemePlaneConfig) -> list[SyncChecker]:
    checkers: list[SyncChecker] = [ChangeSetValidator()]
    if config.validation.cross_file:
        checkers.append(CrossFileConsistencyChecker())
    return checkers


def _async_checkers(
    config: ThemePlaneConfig, theme: Path, files: list[FileRecord]
) -> list[AsyncChecker]:
    if not config.validation.design_tokens:
        return []
    project_id = str(theme.resolve())
    source = StaticTokenSource.from_stylesheets(project_id, files)
    return [DesignTokenChecker(source, project_id)]


def _render(result: UnifiedValidationResult, console: Console) -> None:
    if result.issues:
        table = Table(show_header=True, padding=(0, 1))
        table.add_column("severity")
        table.add_column("category", style="cyan")
        table.add_column("file")
        table.add_column("description")
        for issue in result.issues:
            severity = issue.severity.value
            table.add_row(
                f"[{_SEVERITY_STYLE[severity]}]{severity}[/]",
                issue.category.value,
                issue.file,
                issue.description if not issue.suggestion else f"{issue.description}\n{issue.suggestion}",
            )
        console.print(table)

    status = "[green]valid[/green]" if result.valid else "[red]invalid[/red]"
    console.print(f"{status}: {len(result.issues)} issue(s) in {result.elapsed_ms:.0f} ms")
    if result.skipped:
        console.print(f"[yellow]Skipped (time budget):[/yellow] {', '.join(result.skipped)}")


@click.command()
@click.argument("theme", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("changes_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--timeout-ms", type=click.IntRange(min=1), default=None, help="Time budget")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def validate_command(theme: Path, changes_file: Path, timeout_ms: int | None, as_json: bool) -> None:
    """Report the problems a change set would introduce.

    THEME is the theme directory. CHANGES_FILE is a JSON list of
    {path, proposed_content, original_content?} objects. Exits with
    status 1 when the change set is invalid.
    """
    config, files = open_theme(theme)
    try:
        changes = load_changes(changes_file, files)
    except ThemePlaneError as e:
        raise click.ClickException(str(e)) from e

    result = validate_code_changes_sync(
        changes,
        files,
        sync_checkers=_sync_checkers(config),
        async_checkers=_async_checkers(config, theme, files),
        timeout_ms=timeout_ms or config.validation.timeout_ms,
        min_async_timeout_ms=config.validation.min_async_timeout_ms,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _render(result, Console())

    if not result.valid:
        sys.exit(1)
