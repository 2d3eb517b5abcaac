import click

from ..groups import ls
from ..utils import connect, load_config


@ls.command("applied")
@click.pass_context
def list_applied_migrations(ctx: click.Context):
    t = connect(load_config(ctx))
    for record in t.records():
        click.echo(f"{record.id} {record.file_name} ({record.applied_at:%Y-%m-%d %H:%M:%S})")
