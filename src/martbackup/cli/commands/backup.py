"""Backup export and restore commands."""

from pathlib import Path

import click
from martbackup.cli.error_handling import echo_status, handle_domain_error
from martbackup.domain.entities import ImportState
from martbackup.domain.errors import StoreError
from martbackup.domain.exporter import FileSaver, SnapshotExporter
from martbackup.domain.importer import SnapshotImporter
from martbackup.domain.state import AppState


@click.command("export")
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False),
    default=".",
    show_default=True,
    envvar="MARTBACKUP_BACKUP_DIR",
    help="Directory the backup file is written to",
)
@click.pass_context
def export_backup(ctx, output_dir: str):
    """Back up every collection to a timestamped JSON file.

    Examples:
        martbackup export
        martbackup export --output-dir ~/backups
    """
    store = ctx.obj["store"]
    state = AppState()

    try:
        state.load_from_store(store)
    except StoreError as e:
        handle_domain_error(ctx, f"Could not load data: {e.describe()}")
        return

    status = SnapshotExporter(FileSaver(output_dir)).export_snapshot(state.collections())
    echo_status(status)
    if not status.success:
        ctx.exit(1)

    click.echo(f"  Location: {Path(output_dir) / status.filename}")
    total = sum(status.counts.values())
    click.echo(f"  Records: {total} across {len(status.counts)} collections")


@click.command("restore")
@click.argument("backup_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def restore_backup(ctx, backup_file: str, yes: bool):
    """Restore collections from a backup file.

    Every collection present in the file replaces the stored one; collections
    missing from the file are left alone. If a collection fails, the ones
    before it stay replaced and the rest are not touched.

    Examples:
        martbackup restore supermarket-backup-2024-03-05T14-22-01.json
        martbackup restore backup.json --yes
    """
    store = ctx.obj["store"]

    def confirm(message: str) -> bool:
        if yes:
            return True
        return click.confirm(message, default=False)

    importer = SnapshotImporter(store, AppState(), confirm)
    status = importer.restore_from_file(backup_file)

    if status.state == ImportState.CANCELLED:
        click.echo(status.message)
        return

    echo_status(status)
    if not status.success:
        ctx.exit(1)


def register_commands(cli):
    """Register backup commands with main CLI."""
    cli.add_command(export_backup)
    cli.add_command(restore_backup)
