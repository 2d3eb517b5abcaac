from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Self, Tuple
import re

from .errors import InvalidVersionName
from .parser import ParsedMigration


version_prefix = re.compile(r"^(\d+)")


def parse_version(name: str) -> int:
    if not (match := version_prefix.match(name)):
        raise InvalidVersionName(f"No version number in {name}")
    return int(match.group(1))


@dataclass(frozen=True)
class Migration:
    version: int
    name: str
    up: Tuple[str, ...] = ()
    down: Tuple[str, ...] = ()

    @property
    def sort_key(self) -> tuple[int, str]:
        return (self.version, self.name)

    @classmethod
    def from_parsed(cls, name: str, parsed: ParsedMigration) -> Self:
        return cls(
            version=parse_version(name),
            name=name,
            up=tuple(parsed.up_statements),
            down=tuple(parsed.down_statements),
        )


@dataclass(frozen=True)
class PlannedMigration:
    """
    A migration together with the statements to run for the chosen direction.
    """

    migration: Migration
    queries: Tuple[str, ...] = field(default=())

    @property
    def version(self) -> int:
        return self.migration.version

    @property
    def name(self) -> str:
        return self.migration.name


@dataclass
class MigrationRecord:
    id: int
    file_name: str
    applied_at: Optional[datetime] = None
