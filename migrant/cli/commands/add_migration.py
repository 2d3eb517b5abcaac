import click
from datetime import datetime, UTC
from typing import Optional
import re

from ..groups import add
from ..utils import load_catalog, load_config


valid_name = re.compile(r"^[A-Za-z0-9_\-]+$")


@add.command("migration")
@click.argument("name", type=str)
@click.option(
    "--version",
    type=click.IntRange(min=1),
    default=None,
    help="Version number. Defaults to the latest known version plus one.",
)
@click.pass_context
def add_migration(ctx: click.Context, name: str, version: Optional[int]):
    if not valid_name.match(name):
        raise click.UsageError(
            f"Invalid migration name {name!r}, use letters, digits, '_' and '-' only."
        )
    config = load_config(ctx)
    config.directory.mkdir(parents=True, exist_ok=True)
    catalog = load_catalog(config)

    # Create version
    if version is None:
        version = catalog.latest_version + 1
    else:
        try:
            existing = catalog.by_version(version)
        except KeyError:
            pass
        else:
            raise click.UsageError(
                f"Cannot create migration, because version {version} is taken by {existing.name}."
            )

    path = config.directory / f"{version:04d}_{name}.sql"
    if path.exists():
        raise click.UsageError(f"Cannot create migration, because {path} already exists.")

    with path.open("w", encoding="utf-8") as fp:
        fp.write(f"-- {name}, created at {datetime.now(UTC).isoformat()}\n")
        fp.write("-- +migrate Up\n\n")
        fp.write("-- +migrate Down\n")
    click.echo(f"Created {path}")
