import click

from ..groups import ls
from ..utils import connect, load_catalog, load_config


@ls.command()
@click.pass_context
def available(ctx: click.Context):
    config = load_config(ctx)
    catalog = load_catalog(config)
    t = connect(config)

    for m, r in t.with_records(catalog):
        if not r:
            click.echo(f"{m.name}")
        else:
            click.echo(f"{m.name} (applied)")
