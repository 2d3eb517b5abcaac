import click

from ..groups import root as cli
from ..utils import connect, load_catalog, load_config
from ...parser import Direction
from ...utils import one_line, reformat_sql


@cli.command("plan")
@click.argument(
    "direction",
    type=click.Choice([d.value for d in Direction]),
    default=Direction.UP.value,
)
@click.option("--pretty", is_flag=True, default=False, help="Reformat the statements.")
@click.pass_context
def show_plan(ctx: click.Context, direction: str, pretty: bool):
    config = load_config(ctx)
    catalog = load_catalog(config)
    t = connect(config)

    planned = t.plan(catalog, Direction(direction))
    n = str(len(planned))
    nn = len(n)
    for i, step in enumerate(planned):
        click.echo(f"[ {i+1: >{nn}} / {n} ] {step.name}")
        for query in step.queries:
            if pretty:
                click.echo(reformat_sql(query))
                click.echo()
            else:
                click.echo(f"- {one_line(query)}")
