from functools import cached_property
from io import StringIO
from pathlib import Path
from typing import Dict, Generator, Iterable, Iterator, Mapping, Self, TextIO, Tuple
import logging

from .errors import DuplicateVersion, MigrationError
from .migration import Migration, parse_version
from .parser import ParseOptions, parse_migration


logger = logging.getLogger(__name__)


class Catalog:
    """
    All known migrations, sorted by version.
    """

    migrations: Tuple[Migration, ...]

    def __init__(self, migrations: Iterable[Migration] = ()) -> None:
        by_version: Dict[int, Migration] = {}
        for migration in migrations:
            if (other := by_version.get(migration.version)) is not None:
                raise DuplicateVersion(
                    f"Duplicate migration version {migration.version} in {other.name} and {migration.name}"
                )
            by_version[migration.version] = migration
        self.migrations = tuple(sorted(by_version.values(), key=lambda m: m.sort_key))

    def __repr__(self) -> str:
        return f"Catalog(versions={[m.version for m in self.migrations]})"

    def __iter__(self) -> Iterator[Migration]:
        return iter(self.migrations)

    def __len__(self) -> int:
        return len(self.migrations)

    def __getitem__(self, index: int) -> Migration:
        return self.migrations[index]

    @cached_property
    def _by_version(self) -> Dict[int, Migration]:
        return {m.version: m for m in self.migrations}

    def by_version(self, version: int) -> Migration:
        try:
            return self._by_version[version]
        except KeyError as e:
            raise KeyError(f"Unknown migration version {version}") from e

    @property
    def latest_version(self) -> int:
        return self.migrations[-1].version if self.migrations else 0

    @classmethod
    def from_streams(
        cls, streams: Mapping[str, TextIO], options: ParseOptions = ParseOptions()
    ) -> Self:
        return cls(_load(streams.items(), options))

    @classmethod
    def from_mapping(
        cls, scripts: Mapping[str, str], options: ParseOptions = ParseOptions()
    ) -> Self:
        return cls(
            _load(((name, StringIO(script)) for name, script in scripts.items()), options)
        )

    @classmethod
    def from_directory(cls, directory: Path, options: ParseOptions = ParseOptions()) -> Self:
        if not directory.is_dir():
            raise NotADirectoryError(f"{directory} is not a directory")

        migrations = []
        for path in discover_migrations(directory):
            with path.open("r", encoding="utf-8", newline="\n") as fp:
                migrations.extend(_load([(path.name, fp)], options))
        return cls(migrations)


def discover_migrations(directory: Path) -> Generator[Path, None, None]:
    for child in sorted(directory.iterdir()):
        # Skip directories and anything that isn't a sql script.
        if not child.is_file() or child.suffix != ".sql":
            continue
        yield child


def _load(
    documents: Iterable[tuple[str, TextIO]], options: ParseOptions
) -> Generator[Migration, None, None]:
    for name, stream in documents:
        version = parse_version(name)
        try:
            parsed = parse_migration(stream, options)
        except MigrationError as e:
            raise type(e)(f"Error parsing migration ({version}): {e}") from e
        logger.debug(
            "Parsed migration %s: %d up, %d down statements",
            name,
            len(parsed.up_statements),
            len(parsed.down_statements),
        )
        yield Migration.from_parsed(name, parsed)
