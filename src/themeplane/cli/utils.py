"""CLI utilities."""

from pathlib import Path

import click

from themeplane.config import LoggingConfig, ThemePlaneConfig, load_config
from themeplane.core.errors import ThemePlaneError
from themeplane.core.logging import configure_logging
from themeplane.files import load_theme
from themeplane.index import ContextEngine, FileRecord

_CONSOLE = ("stderr", "stdout")


def _verbose() -> bool:
    ctx = click.get_current_context(silent=True)
    obj = ctx.find_object(dict) if ctx is not None else None
    return bool(obj and obj.get("verbose"))


def cli_logging_config(config: LoggingConfig, verbose: bool) -> LoggingConfig:
    """The theme's logging config, with console outputs forced to DEBUG under ``-v``."""
    if not verbose:
        return config
    outputs = [
        out.model_copy(update={"level": "DEBUG"}) if out.destination in _CONSOLE else out
        for out in config.outputs
    ]
    return config.model_copy(update={"level": "DEBUG", "outputs": outputs})


def open_theme(theme: Path) -> tuple[ThemePlaneConfig, list[FileRecord]]:
    """Load config, apply its logging section, then load the theme files.

    Raises:
        click.ClickException: If the config or the theme cannot be read.
    """
    theme_root = theme.resolve()
    try:
        config = load_config(theme_root)
        configure_logging(config=cli_logging_config(config.logging, _verbose()))
        files = load_theme(theme_root, config)
    except ThemePlaneError as e:
        raise click.ClickException(str(e)) from e
    return config, files


def build_engine(config: ThemePlaneConfig, files: list[FileRecord]) -> ContextEngine:
    engine = ContextEngine(
        max_tokens=config.context.max_tokens,
        use_topics=config.context.use_topics,
    )
    engine.index_files(files)
    return engine
