"""Command-line interface for term-todo.

With no sub-command the interactive editor starts on the JSON store. The
add/delete/print sub-commands are the non-interactive variant: they work on
a plain text file holding one task description per line, no completion flag.
"""
from pathlib import Path
from typing import Optional, Tuple

import click

from app import App
from config import Config, load_config
from logging_setup import configure_logging, get_logger
from storage import LineStorage, StoreError
from terminal import TerminalError

logger = get_logger(__name__)


def _line_storage(ctx: click.Context) -> LineStorage:
    config: Config = ctx.obj
    return LineStorage(config.plain_file)


@click.group(invoke_without_command=True)
@click.option('--file', 'tasks_file', type=click.Path(dir_okay=False, path_type=Path),
              help='JSON task store used by the interactive editor.')
@click.option('--plain-file', type=click.Path(dir_okay=False, path_type=Path),
              help='Plain text file used by add/delete/print.')
@click.option('--wrap/--no-wrap', default=None,
              help='Wrap the selection around the list ends instead of stopping.')
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Logging level (logs are only written with --log-file).')
@click.option('--log-file', type=click.Path(dir_okay=False), help='Append log records to this file.')
@click.pass_context
def cli(ctx: click.Context, tasks_file: Optional[Path], plain_file: Optional[Path],
        wrap: Optional[bool], log_level: Optional[str], log_file: Optional[str]) -> None:
    """Keyboard driven todo list for the terminal.

    \b
    Normal mode:  j/k or arrows move, enter toggles, d deletes,
                  e starts typing a new task, q quits.
    Insert mode:  enter adds the task, esc goes back.
    """
    config = load_config()
    if tasks_file is not None:
        config.tasks_file = tasks_file
    if plain_file is not None:
        config.plain_file = plain_file
    if wrap is not None:
        config.wrap_navigation = wrap
    if log_level:
        config.log_level = log_level
    if log_file:
        config.log_file = log_file
    configure_logging(config.log_level, config.log_file)
    ctx.obj = config

    if ctx.invoked_subcommand is None:
        _run_interactive(config)


def _run_interactive(config: Config) -> None:
    try:
        App(config).run()
    except (StoreError, TerminalError) as exc:
        logger.error('interactive session failed: %s', exc)
        raise click.ClickException(str(exc)) from exc
    except KeyboardInterrupt:
        logger.info('interrupted')


# -------------------- non-interactive variant --------------------
@cli.command('add')
@click.argument('text', nargs=-1, required=True)
@click.pass_context
def add_cmd(ctx: click.Context, text: Tuple[str, ...]) -> None:
    """Append a task to the plain list."""
    description = ' '.join(text)
    if not description.strip():
        raise click.BadParameter('task text must not be empty', param_hint='TEXT')
    if description.splitlines() != [description]:
        raise click.BadParameter('task text must be a single line', param_hint='TEXT')
    store = _line_storage(ctx)
    try:
        lines = store.load()
        lines.append(description)
        store.save(lines)
    except StoreError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f'Added task {len(lines)}.')


@cli.command('delete')
@click.argument('index', type=int)
@click.pass_context
def delete_cmd(ctx: click.Context, index: int) -> None:
    """Remove task INDEX (1-based, as shown by print)."""
    store = _line_storage(ctx)
    try:
        lines = store.load()
        if not 1 <= index <= len(lines):
            raise click.BadParameter(f'no task #{index} (list has {len(lines)})', param_hint='INDEX')
        removed = lines.pop(index - 1)
        store.save(lines)
    except StoreError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f'Task {index} removed: {removed}')


@cli.command('print')
@click.pass_context
def print_cmd(ctx: click.Context) -> None:
    """Show the plain list with 1-based numbers."""
    try:
        lines = _line_storage(ctx).load()
    except StoreError as exc:
        raise click.ClickException(str(exc)) from exc
    if not lines:
        click.echo('(empty)')
        return
    for number, description in enumerate(lines, start=1):
        click.echo(f'{number}. {description}')


if __name__ == '__main__':  # pragma: no cover
    cli(prog_name='term-todo')
