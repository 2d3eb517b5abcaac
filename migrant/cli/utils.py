import click
import psycopg

from ..catalog import Catalog
from ..config import Config
from ..errors import MigrationError
from ..target import PostgreSqlTarget


def load_config(ctx: click.Context) -> Config:
    config_file = (ctx.find_object(dict) or {}).get("config_file")
    try:
        if config_file:
            return Config.from_file(config_file)
        return Config.from_closest_parent()
    except (FileNotFoundError, NotADirectoryError, ValueError) as e:
        raise click.UsageError(str(e)) from e


def load_catalog(config: Config) -> Catalog:
    try:
        return Catalog.from_directory(config.directory, config.parse_options)
    except NotADirectoryError as e:
        raise click.UsageError(str(e)) from e
    except MigrationError as e:
        raise click.ClickException(str(e)) from e


def connect(config: Config) -> PostgreSqlTarget:
    return PostgreSqlTarget(psycopg.connect(config.dsn), table=config.table)
