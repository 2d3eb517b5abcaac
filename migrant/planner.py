from typing import List, Optional, Sequence

from .migration import Migration, PlannedMigration
from .parser import Direction


def _position(catalog: Sequence[Migration], last_applied: Optional[int]) -> int:
    """
    Index of the last applied migration in the catalog, or -1 if it isn't there.
    The first match wins.
    """
    if last_applied is None:
        return -1
    for index, migration in enumerate(catalog):
        if migration.version == last_applied:
            return index
    return -1


def filter_migrations(
    catalog: Optional[Sequence[Migration]],
    last_applied: Optional[int],
    direction: Direction,
) -> List[Migration]:
    """
    Pick the migrations to run next.

    Going up, these are all migrations after the last applied one, oldest first.
    Going down, these are the last applied one and everything before it, newest first.

    Note that a `last_applied` version which is missing from the catalog (e.g. because a
    migration file was deleted) behaves like an empty database: going up re-applies the
    whole catalog, going down does nothing.
    """
    catalog = list(catalog or ())
    index = _position(catalog, last_applied)

    if direction is Direction.UP:
        return catalog[index + 1:]

    if index == -1:
        return []
    return list(reversed(catalog[: index + 1]))


def plan(
    catalog: Optional[Sequence[Migration]],
    last_applied: Optional[int],
    direction: Direction,
) -> List[PlannedMigration]:
    return [
        PlannedMigration(
            migration=m,
            queries=m.up if direction is Direction.UP else m.down,
        )
        for m in filter_migrations(catalog, last_applied, direction)
    ]
