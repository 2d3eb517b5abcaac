from .catalog import Catalog
from .errors import (
    DanglingStatementBlock,
    DuplicateVersion,
    InvalidVersionName,
    MalformedDirective,
    MigrationError,
    NoDirectionFound,
    TxError,
    UnterminatedStatement,
)
from .migration import Migration, MigrationRecord, PlannedMigration, parse_version
from .parser import Direction, ParsedMigration, ParseOptions, parse_migration
from .planner import plan
