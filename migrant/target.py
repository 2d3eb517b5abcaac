from datetime import datetime, UTC
from typing import Iterable, List, Optional
import logging

from psycopg import Connection, Error as DatabaseError, sql
from psycopg.rows import class_row
import click

from .catalog import Catalog
from .errors import TxError
from .migration import Migration, MigrationRecord, PlannedMigration
from .parser import Direction
from .planner import plan
from .utils import one_line


logger = logging.getLogger(__name__)


class PostgreSqlTarget:
    connection: Connection
    table: str

    def __init__(self, connection: Connection, table: str = "migrations"):
        self.connection = connection
        self.connection.autocommit = False
        self.table = table
        self.install_bookkeeping_table()

    @property
    def _table(self) -> sql.Identifier:
        return sql.Identifier(self.table)

    def transaction(self, force_rollback: bool = False):
        return self.connection.transaction(force_rollback=force_rollback)

    def install_bookkeeping_table(self) -> None:
        """
        Create the table that stores which migrations have been applied, if it doesn't exist.
        """
        with self.transaction():
            self.connection.execute(
                sql.SQL(
                    """
                    create table if not exists {} (
                        id bigint primary key,
                        file_name text not null,
                        applied_at timestamptz not null default statement_timestamp()
                    )
                    """
                ).format(self._table)
            )

    def lock(self) -> None:
        """
        Serialize concurrent runs against the same database until the current transaction ends.
        """
        self.connection.execute(
            sql.SQL("lock table {} in access exclusive mode").format(self._table)
        )

    def records(self) -> List[MigrationRecord]:
        with self.transaction(), self.connection.cursor(
            row_factory=class_row(MigrationRecord)
        ) as cur:
            cur.execute(
                sql.SQL("select id, file_name, applied_at from {} order by id").format(
                    self._table
                )
            )
            return cur.fetchall()

    def _select_last_applied(self) -> Optional[int]:
        row = self.connection.execute(
            sql.SQL("select max(id) from {}").format(self._table)
        ).fetchone()
        return row[0] if row else None

    def last_applied(self) -> Optional[int]:
        with self.transaction():
            return self._select_last_applied()

    def plan(self, catalog: Catalog, direction: Direction) -> List[PlannedMigration]:
        with self.transaction():
            return plan(catalog.migrations, self._select_last_applied(), direction)

    def exec(self, catalog: Catalog, direction: Direction, dry_run: bool = False) -> int:
        """
        Apply (or revert) all pending migrations in a single transaction.
        Returns the number of migrations that were run.
        """
        applied = 0
        try:
            with self.transaction(force_rollback=dry_run):
                self.lock()
                planned = plan(catalog.migrations, self._select_last_applied(), direction)
                for step in planned:
                    if dry_run:
                        self._echo_step(step, direction)
                    else:
                        self._run(step, direction)
                    applied += 1
        except TxError as e:
            logger.error("Migration %s failed, rolled back: %s", e.migration.name, e.error)
            raise
        return applied

    def _echo_step(self, step: PlannedMigration, direction: Direction) -> None:
        verb = "Applying" if direction is Direction.UP else "Reverting"
        click.echo(f"{verb} {step.name}")
        for query in step.queries:
            click.echo(f"- {one_line(query)}")

    def _run(self, step: PlannedMigration, direction: Direction) -> None:
        verb = "Applying" if direction is Direction.UP else "Reverting"
        click.echo(f"{verb} {step.name}")
        with self.connection.cursor() as cur:
            try:
                # Run the script, statement by statement.
                for query in step.queries:
                    click.echo(f"- {one_line(query)} ", nl=False)
                    cur.execute(query.encode("utf-8"))
                    click.echo("[ ok ]")

                # Book-keeping.
                if direction is Direction.UP:
                    cur.execute(
                        sql.SQL(
                            "insert into {} (id, file_name, applied_at) values (%s, %s, %s)"
                        ).format(self._table),
                        (step.version, step.name, datetime.now(UTC)),
                    )
                else:
                    cur.execute(
                        sql.SQL("delete from {} where id = %s").format(self._table),
                        (step.version,),
                    )
            except DatabaseError as e:
                raise TxError(step.migration, e) from e

    def with_records(
        self, migrations: Iterable[Migration]
    ) -> Iterable[tuple[Migration, Optional[MigrationRecord]]]:
        records = {r.id: r for r in self.records()}
        for m in migrations:
            yield m, records.get(m.version)
