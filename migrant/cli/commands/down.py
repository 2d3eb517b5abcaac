import click
import sys

from ..groups import root as cli
from ..utils import connect, load_catalog, load_config
from ...errors import TxError
from ...parser import Direction


@cli.command()
@click.option("--yes", is_flag=True, default=False)
@click.option("--dry-run", is_flag=True, default=False, help="Only show what would be reverted.")
@click.pass_context
def down(ctx: click.Context, yes: bool, dry_run: bool):
    config = load_config(ctx)
    catalog = load_catalog(config)
    t = connect(config)

    # Confirm migrations that will be reverted.
    planned = t.plan(catalog, Direction.DOWN)
    if not planned:
        click.echo("Nothing to revert.")
        return
    if not yes and not dry_run:
        click.echo("The following migrations will be reverted:")
        for step in planned:
            click.echo(f"- {step.name}")
        if not click.confirm("Do you want to revert them?"):
            sys.exit(0)

    try:
        reverted = t.exec(catalog, Direction.DOWN, dry_run=dry_run)
    except TxError as e:
        raise click.ClickException(str(e)) from e

    if dry_run:
        click.echo(f"Would revert {reverted} migration(s).")
    else:
        click.echo(f"Reverted {reverted} migration(s).")
