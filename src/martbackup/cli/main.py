"""Main CLI entry point."""

import click
from martbackup.database.factories import create_sqlite_store
from martbackup.utils.log import setup_logging

# Import and register all commands at module level
from martbackup.cli.commands import backup, collections


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides MARTBACKUP_DB_PATH environment variable)",
    envvar="MARTBACKUP_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="MARTBACKUP_LOG_LEVEL",
    help="Logging level",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    envvar="MARTBACKUP_LOG_FILE",
    help="Also write logs to this rotating file",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str, log_file: str | None):
    """Martbackup - Supermarket data backup and restore.

    Export every bookkeeping collection (customers, sales, workers, ...) to a
    single JSON file and restore the store from such a file.
    """
    ctx.ensure_object(dict)

    # Initialize store connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        setup_logging(log_level, log_file)
        store = create_sqlite_store(database_path=db_path)
        store.connect()
        store.initialize_schema()
        ctx.obj["store"] = store
        ctx.call_on_close(store.disconnect)


# Register all commands
backup.register_commands(cli)
collections.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
