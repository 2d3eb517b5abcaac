from dataclasses import dataclass, field
from enum import Enum
from io import StringIO
from typing import Dict, List, Optional, TextIO

from .errors import (
    DanglingStatementBlock,
    MalformedDirective,
    NoDirectionFound,
    UnterminatedStatement,
)


COMMAND_PREFIX = "-- +migrate "


class Direction(Enum):
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class ParseOptions:
    # A line with exactly this content ends a statement and is dropped from the output,
    # e.g. "GO" for MSSQL-style scripts. Empty means disabled.
    line_separator: str = ""


@dataclass
class ParsedMigration:
    up_statements: List[str] = field(default_factory=list)
    down_statements: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Directive:
    command: str
    options: tuple[str, ...] = ()

    COMMANDS = frozenset({"Up", "Down", "StatementBegin", "StatementEnd"})

    @classmethod
    def from_line(cls, line: str) -> "Directive":
        if not line.startswith(COMMAND_PREFIX):
            raise MalformedDirective(f"Not a migrate command: {line!r}")
        fields = line[len(COMMAND_PREFIX):].split()
        if not fields:
            raise MalformedDirective(f"Incomplete migrate command: {line!r}")
        if fields[0] not in cls.COMMANDS:
            raise MalformedDirective(f"Unknown migrate command {fields[0]!r} in {line!r}")
        return cls(fields[0], tuple(fields[1:]))


def ends_with_semicolon(line: str) -> bool:
    """
    Check whether the last word of the line ends a statement.
    Words after an inline double-dash comment don't count.
    """
    prev = ""
    for word in line.split():
        if word.startswith("--"):
            break
        prev = word
    return prev.endswith(";")


@dataclass
class _State:
    direction: Optional[Direction] = None
    ignore_semicolons: bool = False
    statement_ended: bool = False


def _update_state(line: str, buffer: str, state: _State, options: ParseOptions) -> None:
    if not line.startswith(COMMAND_PREFIX):
        return

    directive = Directive.from_line(line)
    match directive.command:
        case "Up" | "Down":
            # A direction switch must not cut a statement in half.
            if buffer.strip():
                raise UnterminatedStatement(line_separator=options.line_separator)
            state.direction = Direction.UP if directive.command == "Up" else Direction.DOWN
        case "StatementBegin":
            if state.direction is not None:
                state.ignore_semicolons = True
        case "StatementEnd":
            if state.direction is not None:
                state.statement_ended = state.ignore_semicolons
                state.ignore_semicolons = False


def parse_migration(stream: TextIO, options: ParseOptions = ParseOptions()) -> ParsedMigration:
    """
    Split a migration script into its up and down statements.

    Statements are split on lines ending with a semicolon, or on lines equal to
    `options.line_separator`. Bodies with semicolons of their own (e.g. pl/pgsql functions)
    go between '-- +migrate StatementBegin' and '-- +migrate StatementEnd' and are kept as
    one statement.
    """
    stream.seek(0)

    statements: Dict[Direction, List[str]] = {Direction.UP: [], Direction.DOWN: []}
    state = _State()
    buffer = ""

    for raw_line in stream:
        line = raw_line.removesuffix("\n").removesuffix("\r")

        # Skip plain comments, but keep '-- +...' annotations.
        if line.startswith("-- ") and not line.startswith("-- +"):
            continue

        _update_state(line, buffer, state, options)

        if state.direction is None:
            continue

        is_line_separator = (
            not state.ignore_semicolons
            and bool(options.line_separator)
            and line == options.line_separator
        )

        if not is_line_separator and not line.startswith("-- +"):
            buffer += line + "\n"

        if (
            not state.ignore_semicolons
            and (ends_with_semicolon(line) or is_line_separator)
        ) or state.statement_ended:
            state.statement_ended = False
            statements[state.direction].append(buffer)
            buffer = ""

    if state.ignore_semicolons:
        raise DanglingStatementBlock()

    if state.direction is None:
        raise NoDirectionFound()

    # A trailing comment without any statement is fine, e.g.
    #   -- +migrate Down
    #   -- nothing to downgrade!
    if buffer.strip() and not buffer.startswith("-- +"):
        raise UnterminatedStatement(line_separator=options.line_separator)

    return ParsedMigration(
        up_statements=statements[Direction.UP],
        down_statements=statements[Direction.DOWN],
    )


def parse_migration_string(script: str, options: ParseOptions = ParseOptions()) -> ParsedMigration:
    return parse_migration(StringIO(script), options)
