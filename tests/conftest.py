"""Shared pytest fixtures for migrant tests.

This module provides sample migration scripts, catalogs and a mocked
psycopg connection, so that no test needs a running database.
"""

from contextlib import contextmanager
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from migrant.catalog import Catalog
from migrant.migration import Migration

# =============================================================================
# Script Fixtures
# =============================================================================


@pytest.fixture
def simple_script() -> str:
    """A script with two up and two down statements."""
    return (
        "-- +migrate Up\n"
        "CREATE TABLE people (id int);\n"
        "CREATE TABLE pets (id int);\n"
        "\n"
        "-- +migrate Down\n"
        "DROP TABLE pets;\n"
        "DROP TABLE people;\n"
    )


@pytest.fixture
def function_script() -> str:
    """A script with a pl/pgsql body wrapped in a statement block."""
    return (
        "-- +migrate Up\n"
        "-- +migrate StatementBegin\n"
        "CREATE OR REPLACE FUNCTION touch() RETURNS trigger AS $$\n"
        "BEGIN\n"
        "  NEW.updated_at := now();\n"
        "  RETURN NEW;\n"
        "END;\n"
        "$$ LANGUAGE plpgsql;\n"
        "-- +migrate StatementEnd\n"
        "\n"
        "-- +migrate Down\n"
        "DROP FUNCTION touch();\n"
    )


# =============================================================================
# Catalog Fixtures
# =============================================================================


def make_migration(version: int) -> Migration:
    return Migration(
        version=version,
        name=f"{version}_step.sql",
        up=(f"up {version};\n",),
        down=(f"down {version};\n",),
    )


@pytest.fixture
def catalog() -> Catalog:
    """Catalog with versions 1, 2, 3 and 5."""
    return Catalog(make_migration(v) for v in (1, 2, 3, 5))


@pytest.fixture
def migrations_dir(tmp_path: Path) -> Path:
    """A project directory with migrant.toml and two migrations."""
    (tmp_path / "migrant.toml").write_text(
        '[migrant]\ndirectory = "migrations"\ntable = "schema_migrations"\n',
        encoding="utf-8",
    )
    migrations = tmp_path / "migrations"
    migrations.mkdir()
    (migrations / "0001_people.sql").write_text(
        "-- +migrate Up\nCREATE TABLE people (id int);\n"
        "-- +migrate Down\nDROP TABLE people;\n",
        encoding="utf-8",
    )
    (migrations / "0002_pets.sql").write_text(
        "-- +migrate Up\nCREATE TABLE pets (id int);\n"
        "CREATE INDEX pets_id ON pets (id);\n"
        "-- +migrate Down\nDROP TABLE pets;\n",
        encoding="utf-8",
    )
    return migrations


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def connection() -> MagicMock:
    """A mocked psycopg connection with an empty bookkeeping table."""
    conn = MagicMock()
    conn.execute.return_value.fetchone.return_value = (None,)
    conn.cursor.return_value.__enter__.return_value.fetchall.return_value = []
    return conn


@pytest.fixture
def cursor(connection: MagicMock) -> MagicMock:
    """The cursor handed out by `with connection.cursor() as cur`."""
    return connection.cursor.return_value.__enter__.return_value


class RecordingConnection:
    """A stand-in for a psycopg connection that records transaction nesting.

    Every event is stored as `(kind, depth)`, where depth 0 means outside of any
    `transaction()` block and depth 1 is the top-level transaction. Deeper blocks
    are savepoints.
    """

    def __init__(self, watermark=None):
        self.autocommit = True
        self.watermark = watermark
        self.depth = 0
        self.events: list[tuple[str, int]] = []

    @contextmanager
    def transaction(self, force_rollback: bool = False):
        self.depth += 1
        self.events.append(("begin", self.depth))
        try:
            yield
        finally:
            self.events.append(("rollback" if force_rollback else "commit", self.depth))
            self.depth -= 1

    def execute(self, query, params=None):
        self.events.append(("execute", self.depth))
        result = MagicMock()
        result.fetchone.return_value = (self.watermark,)
        return result

    @contextmanager
    def cursor(self, row_factory=None):
        cur = MagicMock()
        cur.execute.side_effect = lambda *args: self.events.append(("statement", self.depth))
        cur.fetchall.return_value = []
        yield cur

    def depths(self, kind: str) -> list[int]:
        return [depth for k, depth in self.events if k == kind]


@pytest.fixture
def recording_connection() -> RecordingConnection:
    """A recording connection where versions up to 2 are applied."""
    return RecordingConnection(watermark=2)
