"""CLI for VCS-History."""

import sys

import click
import structlog

from vcs_history.config.logging import configure_logging
from vcs_history.core.exceptions import HistoryError

logger = structlog.get_logger(__name__)


def _create_service():
    """Create the history service from the current settings."""
    from vcs_history.backends.factory import RepositoryFactory
    from vcs_history.config.settings import get_settings
    from vcs_history.services.history import HistoryService

    return HistoryService(RepositoryFactory(get_settings()))


def _fail(error: HistoryError) -> None:
    click.echo(f"Error: {error.message}", err=True)
    sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool) -> None:
    """VCS-History: history, annotation and content from version control."""
    from vcs_history.config.settings import get_settings

    settings = get_settings()
    log_level = "DEBUG" if verbose else settings.log_level
    configure_logging(log_level=log_level, json_logs=settings.json_logs)


@cli.command()
@click.argument("path", type=click.Path(exists=True))
@click.option("--since", "-s", help="Only list revisions newer than this one")
def history(path: str, since: str | None) -> None:
    """Show the history of PATH, most recent first."""
    try:
        result = _create_service().history(path, since)
    except HistoryError as e:
        _fail(e)
        return

    for entry in result.entries:
        summary = entry.message.splitlines()[0] if entry.message else ""
        click.echo(f"{entry.revision}  {entry.date:%Y-%m-%d %H:%M}  {entry.author}  {summary}")


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--revision", "-r", help="Revision to annotate (default: working copy)")
def annotate(path: str, revision: str | None) -> None:
    """Show who last changed each line of PATH."""
    try:
        annotation = _create_service().annotate(path, revision)
    except HistoryError as e:
        _fail(e)
        return

    for line in annotation.lines:
        marker = "" if line.resolved else " ?"
        click.echo(f"{line.line_number:>6}  {line.revision}  {line.author}{marker}")


@cli.command()
@click.argument("path", type=click.Path())
@click.argument("revision")
def cat(path: str, revision: str) -> None:
    """Write the content of PATH as of REVISION to stdout."""
    try:
        content = _create_service().content(path, revision)
    except HistoryError as e:
        _fail(e)
        return

    if content is None:
        click.echo(f"Error: {path} is not available at revision {revision}", err=True)
        sys.exit(1)
    with content:
        stdout = click.get_binary_stream("stdout")
        for chunk in iter(lambda: content.read(65536), b""):
            stdout.write(chunk)
        stdout.flush()


@cli.command()
@click.argument("root", type=click.Path(exists=True, file_okay=False), default=".")
def update(root: str) -> None:
    """Refresh the working copy at ROOT if it is a snapshot view."""
    try:
        ok = _create_service().update(root)
    except HistoryError as e:
        _fail(e)
        return

    if not ok:
        click.echo(f"Update failed: {root}", err=True)
        sys.exit(1)
    click.echo(f"Updated: {root}")


if __name__ == "__main__":
    cli()
