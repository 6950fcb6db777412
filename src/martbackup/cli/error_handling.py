"""CLI error handling helpers."""

import click

from martbackup.domain.entities import BackupStatus
from martbackup.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError | str) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def echo_status(status: BackupStatus) -> None:
    """Render a backup status; failures go to stderr."""
    click.echo(status.message, err=not status.success)
