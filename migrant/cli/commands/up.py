import click

from ..groups import root as cli
from ..utils import connect, load_catalog, load_config
from ...errors import TxError
from ...parser import Direction


@cli.command("up")
@click.option("--dry-run", is_flag=True, default=False, help="Only show what would be applied.")
@click.pass_context
def up_migrations(ctx: click.Context, dry_run: bool):
    config = load_config(ctx)
    catalog = load_catalog(config)
    t = connect(config)

    try:
        applied = t.exec(catalog, Direction.UP, dry_run=dry_run)
    except TxError as e:
        raise click.ClickException(str(e)) from e

    if dry_run:
        click.echo(f"Would apply {applied} migration(s).")
    elif applied == 0:
        click.echo("Nothing to apply, database is up to date.")
    else:
        click.echo(f"Applied {applied} migration(s).")
