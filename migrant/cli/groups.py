from pathlib import Path
from typing import Optional
import logging

import click


@click.group()
@click.option(
    "--config",
    "config_file",
    type=click.Path(
        exists=True, file_okay=True, dir_okay=False, resolve_path=True, path_type=Path
    ),
    default=None,
    help="Path to migrant.toml. Defaults to the closest one in the current directory or its parents.",
)
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.pass_context
def root(ctx: click.Context, config_file: Optional[Path], verbose: bool):
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )
    ctx.ensure_object(dict)
    ctx.obj["config_file"] = config_file


@root.group()
def ls():
    pass


@root.group()
def add():
    pass
