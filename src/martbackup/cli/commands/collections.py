"""Collection overview command."""

import click
from martbackup.cli.error_handling import handle_domain_error
from martbackup.domain.entities import COLLECTION_NAMES
from martbackup.domain.errors import StoreError


@click.command("collections")
@click.pass_context
def list_collections(ctx):
    """Show how many documents each collection holds."""
    store = ctx.obj["store"]

    try:
        counts = {name: store.count(name) for name in COLLECTION_NAMES}
    except StoreError as e:
        handle_domain_error(ctx, f"Could not read collections: {e.describe()}")
        return

    width = max(len(name) for name in COLLECTION_NAMES)
    click.echo("\nCollections:")
    for name, count in counts.items():
        click.echo(f"  {name:<{width}}  {count:>6}")
    click.echo(f"  {'total':<{width}}  {sum(counts.values()):>6}")


def register_commands(cli):
    """Register collections command with main CLI."""
    cli.add_command(list_collections)
